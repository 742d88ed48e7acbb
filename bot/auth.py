"""
Аутентификация отправителей по общему PIN.

Внимание: схема демонстрационная. PIN хранится в памяти процесса открытым
текстом, список авторизованных пользователей не имеет срока жизни и не
очищается до перезапуска (растёт без ограничений).
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class Authenticator(ABC):
    """Интерфейс проверки доступа отправителя"""

    @abstractmethod
    def check_auth(self, sender: int) -> bool:
        """True, если отправитель уже авторизован. Без побочных эффектов."""

    @abstractmethod
    def authenticate(self, sender: int, presented_secret: Optional[str]) -> bool:
        """Попытка авторизации. Неверный секрет - не ошибка, просто False."""


class PinAuthenticator(Authenticator):
    """Авторизация по PIN: Unauthenticated -> Authenticated, обратного перехода нет"""

    def __init__(self, pin: str):
        if not pin:
            raise ValueError("PIN не может быть пустым")
        self._pin = pin
        self._users: Dict[int, bool] = {}
        self._lock = threading.Lock()

    def check_auth(self, sender: int) -> bool:
        with self._lock:
            return self._users.get(sender, False)

    def authenticate(self, sender: int, presented_secret: Optional[str]) -> bool:
        if presented_secret is None or presented_secret != self._pin:
            return False

        with self._lock:
            if not self._users.get(sender):
                self._users[sender] = True
                logger.info(f"Пользователь {sender} авторизован (всего: {len(self._users)})")
        return True

    def authenticated_count(self) -> int:
        with self._lock:
            return len(self._users)
