"""
Извлечение информации о голосовом сообщении из сообщения Telegram
"""

import logging
from typing import Dict, Optional

from bot.models import VoiceRef

logger = logging.getLogger(__name__)


def extract_voice_ref(message: Dict) -> Optional[VoiceRef]:
    """
    Извлекает ссылку на голосовое сообщение из сообщения Telegram

    Args:
        message: Объект сообщения Telegram (dict из Bot API)

    Returns:
        VoiceRef или None, если в сообщении нет голосового
    """
    voice = message.get("voice")
    if not voice or not voice.get("file_id"):
        return None

    return VoiceRef(
        file_id=voice["file_id"],
        file_unique_id=voice.get("file_unique_id", ""),
        duration=voice.get("duration", 0),
        mime_type=voice.get("mime_type", "audio/ogg"),
        file_size=voice.get("file_size", 0),
    )


def format_duration(duration: float) -> str:
    """Форматирует длительность в человекочитаемый вид"""
    if duration <= 0:
        return "unknown"

    duration = int(duration)

    if duration < 60:
        return f"{duration}s"
    elif duration < 3600:
        return f"{duration // 60}m {duration % 60}s"
    else:
        return f"{duration // 3600}h {(duration % 3600) // 60}m"


def format_file_size(size: int) -> str:
    """Форматирует размер файла в человекочитаемый вид"""
    if size <= 0:
        return "unknown"

    if size < 1024:
        return f"{size} B"
    elif size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    else:
        return f"{size / (1024 * 1024):.1f} MB"


def describe_voice(voice: VoiceRef) -> str:
    """Короткое описание голосового для логов"""
    return (
        f"voice {voice.file_unique_id or voice.file_id[:8]} "
        f"({format_duration(voice.duration)}, {format_file_size(voice.file_size)}, {voice.mime_type})"
    )
