"""Модели входящих сообщений"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class VoiceRef:
    """Ссылка на голосовое сообщение; file_id живёт только пока актуален update"""

    file_id: str
    file_unique_id: str = ""
    duration: int = 0
    mime_type: str = "audio/ogg"
    file_size: int = 0


@dataclass(frozen=True)
class IncomingMessage:
    """Входящее сообщение, обрабатывается пайплайном один раз"""

    chat_id: int
    message_id: int
    sender: int
    voice: Optional[VoiceRef] = None
    text: Optional[str] = None
    username: Optional[str] = None

    @property
    def has_voice(self) -> bool:
        return self.voice is not None
