"""Отправка ответов пользователю"""

import logging
from typing import Optional

from bot.telegram_api import TelegramAPI, TelegramAPIError
from utils.telegram import MAX_MESSAGE_LENGTH, split_message

logger = logging.getLogger(__name__)


class ResponseSender:
    """Ответы в чат: reply с цепочкой, уведомления и статус 'печатает...'"""

    def __init__(self, api: TelegramAPI, max_length: int = MAX_MESSAGE_LENGTH):
        self.api = api
        self.max_length = max_length

    async def reply(self, chat_id: int, parent_message_id: int, text: str) -> int:
        """
        Ответить на сообщение. Длинный текст уходит несколькими частями,
        каждая следующая - ответом на предыдущую.

        Returns:
            message_id первой части (родитель для следующего ответа)

        Raises:
            TelegramAPIError: если любая часть не отправлена
        """
        first_id = None
        parent = parent_message_id
        for chunk in split_message(text, self.max_length):
            parent = await self.api.send_message(chat_id, chunk, reply_to_message_id=parent)
            if first_id is None:
                first_id = parent
        return first_id

    async def notify(self, chat_id: int, text: str, reply_to: Optional[int] = None) -> Optional[int]:
        """Служебное сообщение; ошибка отправки только логируется"""
        try:
            return await self.api.send_message(chat_id, text, reply_to_message_id=reply_to)
        except TelegramAPIError as e:
            logger.warning(f"Не удалось отправить уведомление в чат {chat_id}: {e}")
            return None

    async def indicate(self, chat_id: int) -> bool:
        """Статус 'печатает...' (fire-and-forget)"""
        try:
            return await self.api.send_chat_action(chat_id, "typing")
        except TelegramAPIError as e:
            logger.warning(f"Ошибка отправки chat action в чат {chat_id}: {e}")
            return False
