"""
Конфигурация и настройки для Telegram бота транскрибации голосовых сообщений
"""

import os
import tempfile
from typing import Callable, Mapping, Optional, Union

from dotenv import load_dotenv


class ConfigError(ValueError):
    """Обязательный параметр не задан или задан некорректно"""


def _number(env: Mapping[str, str], key: str, default: Union[int, float],
            cast: Callable = int) -> Union[int, float]:
    """Числовой параметр; нечисловое значение - ошибка конфигурации"""
    raw = env.get(key)
    if raw is None or raw == '':
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"{key} должен быть числом, получено: {raw!r}") from None


class Config:
    """Класс конфигурации с настройками бота"""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        env = os.environ if environ is None else environ

        # Telegram Bot Token (обязательный)
        self.TELEGRAM_BOT_TOKEN = env.get('TELEGRAM_BOT_TOKEN') or env.get('BOT_TOKEN', '')

        # Ключ сервиса распознавания речи и суммаризации (обязательный)
        self.OPENAI_API_KEY = env.get('OPENAI_API_KEY', '')
        self.OPENAI_BASE_URL = env.get('OPENAI_BASE_URL') or None

        # PIN для доступа к боту (обязательный)
        self.AUTH_PIN = env.get('AUTH_PIN') or env.get('PIN', '')

        # Настройки логирования
        self.LOG_LEVEL = env.get('LOG_LEVEL', 'INFO')
        self.STRUCTURED_LOGGING = env.get('STRUCTURED_LOGGING', 'false').lower() == 'true'
        self.DEBUG_MODE = env.get('DEBUG_MODE', 'false').lower() == 'true'

        # Провайдер: openai или groq (OpenAI-совместимый API)
        self.SPEECH_PROVIDER = env.get('SPEECH_PROVIDER', 'openai').lower()
        self.TRANSCRIPTION_MODEL = env.get('TRANSCRIPTION_MODEL') or None
        self.SUMMARY_MODEL = env.get('SUMMARY_MODEL') or None

        # Конвертация аудио
        self.TRANSCODE_BITRATE = env.get('TRANSCODE_BITRATE', '320k')
        self.FFMPEG_BINARY = env.get('FFMPEG_BINARY') or None

        # Временные файлы и лимиты
        self.TEMP_DIR = env.get('TEMP_DIR') or os.path.join(tempfile.gettempdir(), 'voice_bot_temp')
        self.MAX_FILE_SIZE_MB = _number(env, 'MAX_FILE_SIZE_MB', 20)
        self.TEMP_FILE_RETENTION_HOURS = _number(env, 'TEMP_FILE_RETENTION_HOURS', 1.0, float)

        # Long polling
        self.POLL_TIMEOUT = _number(env, 'POLL_TIMEOUT', 60)
        self.HTTP_TIMEOUT = _number(env, 'HTTP_TIMEOUT', 120)

        # Валидация критически важных параметров
        self._validate_config()

    def _validate_config(self):
        """Валидация конфигурации"""
        if not self.TELEGRAM_BOT_TOKEN:
            raise ConfigError("TELEGRAM_BOT_TOKEN не найден в переменных окружения")

        if not self.OPENAI_API_KEY:
            raise ConfigError("OPENAI_API_KEY не найден в переменных окружения")

        if not self.AUTH_PIN:
            raise ConfigError("AUTH_PIN не найден в переменных окружения")

        if self.SPEECH_PROVIDER not in ('openai', 'groq'):
            raise ConfigError(f"Неизвестный SPEECH_PROVIDER: {self.SPEECH_PROVIDER}")

        if self.MAX_FILE_SIZE_MB <= 0:
            raise ConfigError("MAX_FILE_SIZE_MB должен быть больше 0")

        if self.TEMP_FILE_RETENTION_HOURS < 0:
            raise ConfigError("TEMP_FILE_RETENTION_HOURS не может быть отрицательным")

    def __str__(self) -> str:
        """Строковое представление конфигурации (без чувствительных данных)"""
        return f"""Configuration:
- Log Level: {self.LOG_LEVEL}
- Speech Provider: {self.SPEECH_PROVIDER}
- Transcription Model: {self.TRANSCRIPTION_MODEL or 'default'}
- Summary Model: {self.SUMMARY_MODEL or 'default'}
- Transcode Bitrate: {self.TRANSCODE_BITRATE}
- Temp Dir: {self.TEMP_DIR}
- Max File Size: {self.MAX_FILE_SIZE_MB} MB"""


def load_config() -> Config:
    """Загрузить .env и собрать конфигурацию"""
    # Загружаем переменные окружения из .env файла
    load_dotenv()
    return Config()
