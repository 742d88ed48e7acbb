"""
Shared fakes for Telegram and speech service clients
"""

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Добавляем корневую директорию в путь
sys.path.insert(0, str(Path(__file__).parent.parent))

from bot.models import IncomingMessage, VoiceRef
from bot.telegram_api import TelegramAPIError
from utils.temp_files import TempFileManager


class FakeTelegramAPI:
    """Records Bot API calls instead of sending them"""

    def __init__(self, fail_send=False, fail_action=False, fail_file=False):
        self.sent = []
        self.actions = []
        self.fail_send = fail_send
        self.fail_action = fail_action
        self.fail_file = fail_file
        self._next_id = 1000

    async def get_file_url(self, file_id):
        if self.fail_file:
            raise TelegramAPIError("getFile", "Bad Request: wrong file_id", 400)
        return f"https://api.telegram.org/file/botTOKEN/voice/{file_id}.oga"

    async def send_message(self, chat_id, text, reply_to_message_id=None):
        if self.fail_send:
            raise TelegramAPIError("sendMessage", "Forbidden: bot was blocked by the user", 403)
        self._next_id += 1
        self.sent.append({
            "chat_id": chat_id,
            "text": text,
            "reply_to": reply_to_message_id,
            "message_id": self._next_id,
        })
        return self._next_id

    async def send_chat_action(self, chat_id, action="typing"):
        if self.fail_action:
            raise TelegramAPIError("sendChatAction", "Too Many Requests", 429)
        self.actions.append((chat_id, action))
        return True


class FakeCompletions:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return self.response


def make_speech_client(transcript="hello world", summary="Greeting message.", choices=None,
                       transcription_error=None, chat_error=None):
    """Fake OpenAI-compatible async client"""
    if choices is None:
        choices = [SimpleNamespace(message=SimpleNamespace(content=summary))]
    transcriptions = FakeCompletions(SimpleNamespace(text=transcript), transcription_error)
    completions = FakeCompletions(SimpleNamespace(choices=choices), chat_error)
    return SimpleNamespace(
        audio=SimpleNamespace(transcriptions=transcriptions),
        chat=SimpleNamespace(completions=completions),
    )


@pytest.fixture
def temp_manager(tmp_path):
    return TempFileManager(tmp_path / "transient")


@pytest.fixture
def fake_api():
    return FakeTelegramAPI()


@pytest.fixture
def voice_message():
    return IncomingMessage(
        chat_id=777,
        message_id=10,
        sender=42,
        voice=VoiceRef(file_id="AwACAgIAAxkBAAIB", file_unique_id="AgADxx", duration=3, file_size=5120),
        username="alice",
    )


@pytest.fixture
def base_env(tmp_path):
    return {
        "TELEGRAM_BOT_TOKEN": "123:ABC",
        "OPENAI_API_KEY": "sk-test",
        "AUTH_PIN": "1234",
        "TEMP_DIR": str(tmp_path / "bot_temp"),
    }
