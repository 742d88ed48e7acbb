"""
Bot package.

Telegram-часть бота: модели сообщений, авторизация по PIN,
клиент Bot API и отправка ответов.
"""

from .auth import Authenticator, PinAuthenticator
from .models import IncomingMessage, VoiceRef

__all__ = [
    'Authenticator',
    'PinAuthenticator',
    'IncomingMessage',
    'VoiceRef',
]

__version__ = '0.1.0'
