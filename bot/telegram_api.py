"""Тонкая обёртка над Telegram Bot API на aiohttp"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp

logger = logging.getLogger(__name__)

API_ROOT = "https://api.telegram.org"


class TelegramAPIError(Exception):
    """Ошибка вызова Bot API (сеть, HTTP-статус или ok=false)"""

    def __init__(self, method: str, description: str, status: Optional[int] = None):
        self.method = method
        self.description = description
        self.status = status
        super().__init__(f"{method} failed ({status}): {description}")


class TelegramAPI:
    """Методы Bot API, которые нужны боту"""

    def __init__(self, session: aiohttp.ClientSession, token: str, api_root: str = API_ROOT):
        """
        Args:
            session: Общая aiohttp сессия (закрывает владелец)
            token: Telegram Bot API token
            api_root: Базовый адрес API (для локального Bot API сервера)
        """
        self.session = session
        self.token = token
        self.api_root = api_root.rstrip("/")
        self.base_url = f"{self.api_root}/bot{token}"
        self.file_url = f"{self.api_root}/file/bot{token}"

    async def _call(
        self,
        method: str,
        payload: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Вызов метода API, возвращает поле result"""
        url = f"{self.base_url}/{method}"
        kwargs: Dict[str, Any] = {"json": payload or {}}
        if timeout is not None:
            kwargs["timeout"] = aiohttp.ClientTimeout(total=timeout)

        try:
            async with self.session.post(url, **kwargs) as response:
                try:
                    data = await response.json(content_type=None)
                except ValueError:
                    data = None
                if not isinstance(data, dict):
                    data = {}
                if response.status != 200 or not data.get("ok"):
                    description = data.get("description") or await response.text()
                    raise TelegramAPIError(method, description, response.status)
                return data.get("result")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TelegramAPIError(method, str(e)) from e

    async def get_me(self) -> Dict[str, Any]:
        """Информация о боте"""
        return await self._call("getMe")

    async def get_updates(self, offset: int, timeout: int) -> List[Dict[str, Any]]:
        """Long polling: ждём обновления до timeout секунд"""
        result = await self._call(
            "getUpdates",
            {"offset": offset, "timeout": timeout, "allowed_updates": ["message"]},
            timeout=timeout + 5,
        )
        return result or []

    async def get_file_url(self, file_id: str) -> str:
        """Прямая ссылка на скачивание файла по file_id"""
        result = await self._call("getFile", {"file_id": file_id})
        file_path = (result or {}).get("file_path")
        if not file_path:
            raise TelegramAPIError("getFile", "file_path отсутствует в ответе")
        return f"{self.file_url}/{file_path}"

    async def send_message(
        self,
        chat_id: int,
        text: str,
        reply_to_message_id: Optional[int] = None,
    ) -> int:
        """Отправить сообщение, вернуть message_id отправленного"""
        payload: Dict[str, Any] = {"chat_id": chat_id, "text": text}
        if reply_to_message_id is not None:
            payload["reply_to_message_id"] = reply_to_message_id
            payload["allow_sending_without_reply"] = True

        result = await self._call("sendMessage", payload)
        return result["message_id"]

    async def send_chat_action(self, chat_id: int, action: str = "typing") -> bool:
        """Отправить статус 'печатает...'"""
        return bool(await self._call("sendChatAction", {"chat_id": chat_id, "action": action}))
