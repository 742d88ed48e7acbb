"""Разбор обновлений от Telegram"""

import logging
from typing import Optional

from bot.models import IncomingMessage
from utils.tg_audio import extract_voice_ref

logger = logging.getLogger(__name__)


class UpdateRouter:
    """Превращает сырой update Bot API во входящее сообщение"""

    def route(self, update: dict) -> Optional[IncomingMessage]:
        """
        Returns:
            IncomingMessage или None, если в update нет пригодного сообщения
        """
        message = update.get("message")
        if not message:
            logger.debug(f"Пропускаю обновление без сообщения: {list(update.keys())}")
            return None

        sender = message.get("from", {}).get("id")
        chat_id = message.get("chat", {}).get("id")
        if sender is None or chat_id is None:
            logger.warning(f"Сообщение без отправителя или чата: {list(message.keys())}")
            return None

        return IncomingMessage(
            chat_id=chat_id,
            message_id=message["message_id"],
            sender=sender,
            voice=extract_voice_ref(message),
            text=message.get("text"),
            username=message.get("from", {}).get("username"),
        )
