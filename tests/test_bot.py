"""
Tests for update dispatch, provider wiring and logging helpers
"""

import asyncio
import json
import logging
import os
import time

import pytest

import main as main_module

from audio_pipeline.errors import PipelineError, TranscodeError
from audio_pipeline.handler import PipelineOutcome
from bot.core import bot as bot_module
from bot.core.bot import VoiceBot
from bot.telegram_api import TelegramAPIError
from config import Config, ConfigError
from llm.provider_router import DEFAULT_MODELS, build_provider
from utils.logging_config import (
    StructuredFormatter,
    TimedLogger,
    clear_update_context,
    set_update_context,
)
from utils.temp_files import TempFileManager
from utils.tg_audio import format_duration, format_file_size

TEXT_UPDATE = {
    "update_id": 900,
    "message": {"message_id": 1, "from": {"id": 42}, "chat": {"id": 777}, "text": "hi"},
}


class RecordingPipeline:
    def __init__(self, error=None):
        self.error = error
        self.handled = []

    async def handle(self, message):
        self.handled.append(message)
        if self.error:
            raise self.error
        return PipelineOutcome.NO_VOICE


class ScriptedAPI:
    """getUpdates returns the scripted batches, then stops the loop"""

    def __init__(self, batches):
        self.batches = list(batches)
        self.offsets = []

    async def get_updates(self, offset, timeout):
        self.offsets.append(offset)
        if not self.batches:
            raise asyncio.CancelledError()
        return self.batches.pop(0)


@pytest.fixture
def voice_bot(base_env):
    return VoiceBot(Config(base_env))


class TestDispatch:

    @pytest.mark.asyncio
    async def test_update_is_routed_to_pipeline(self, voice_bot):
        voice_bot.pipeline = RecordingPipeline()

        await voice_bot.process_update(TEXT_UPDATE)

        assert len(voice_bot.pipeline.handled) == 1
        assert voice_bot.pipeline.handled[0].sender == 42

    @pytest.mark.asyncio
    async def test_pipeline_error_is_logged_with_stage(self, voice_bot, caplog):
        cause = TranscodeError("ffmpeg exited with code 1")
        voice_bot.pipeline = RecordingPipeline(error=PipelineError("transcode", cause))

        await voice_bot.process_update(TEXT_UPDATE)

        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert errors[0].stage == "transcode"
        assert errors[0].exc_info[1] is cause

    @pytest.mark.asyncio
    async def test_unexpected_error_does_not_escape(self, voice_bot, caplog):
        voice_bot.pipeline = RecordingPipeline(error=RuntimeError("boom"))

        await voice_bot.process_update(TEXT_UPDATE)

        assert any(r.levelno == logging.ERROR for r in caplog.records)

    @pytest.mark.asyncio
    async def test_update_without_message_is_ignored(self, voice_bot):
        voice_bot.pipeline = RecordingPipeline()

        await voice_bot.process_update({"update_id": 901, "my_chat_member": {}})

        assert voice_bot.pipeline.handled == []

    @pytest.mark.asyncio
    async def test_polling_advances_offset_and_spawns_tasks(self, voice_bot):
        second = dict(TEXT_UPDATE, update_id=901)
        voice_bot.api = ScriptedAPI([[TEXT_UPDATE, second], []])
        voice_bot.pipeline = RecordingPipeline()

        with pytest.raises(asyncio.CancelledError):
            await voice_bot.run_polling()
        await voice_bot.stop()

        assert voice_bot.api.offsets == [0, 902, 902]
        assert len(voice_bot.pipeline.handled) == 2


class TestProviderRouter:

    def test_openai_defaults(self):
        settings = build_provider("openai", "sk-test")
        assert settings.provider == "openai"
        assert (settings.transcription_model, settings.summary_model) == DEFAULT_MODELS["openai"]

    def test_groq_with_model_override(self):
        settings = build_provider("groq", "gsk-test", summary_model="llama-3.1-8b-instant")
        assert settings.transcription_model == "whisper-large-v3"
        assert settings.summary_model == "llama-3.1-8b-instant"

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            build_provider("vosk", "key")


class TestLoggingHelpers:

    def test_structured_formatter_includes_context_and_stage(self):
        record = logging.LogRecord("bot", logging.ERROR, __file__, 1, "failed", None, None)
        record.stage = "fetch"

        set_update_context(update_id=900, user_id=42)
        try:
            entry = json.loads(StructuredFormatter().format(record))
        finally:
            clear_update_context()

        assert entry["level"] == "ERROR"
        assert entry["stage"] == "fetch"
        assert entry["update_id"] == 900
        assert entry["user_id"] == 42

    def test_timed_logger_propagates_and_warns(self, caplog):
        logger = logging.getLogger("test.timed")

        with pytest.raises(ValueError):
            with TimedLogger(logger, "transcode", external_service="ffmpeg"):
                raise ValueError("bad input")

        warning = [r for r in caplog.records if r.levelno == logging.WARNING][0]
        assert warning.external_service == "ffmpeg"
        assert warning.duration >= 0


class TestTempFiles:

    def test_release_is_idempotent(self, tmp_path):
        item = TempFileManager(tmp_path).create_temp_file(suffix=".ogg")

        assert item.format == "ogg"
        assert item.release() is True
        assert item.release() is True
        assert not item.path.exists()

    def test_cleanup_removes_only_stale_bot_files(self, tmp_path):
        manager = TempFileManager(tmp_path)
        stale = manager.create_temp_file(suffix=".ogg")
        fresh = manager.create_temp_file(suffix=".mp3")
        foreign = tmp_path / "someone_elses_report.pdf"
        foreign.write_bytes(b"%PDF")

        two_hours_ago = time.time() - 2 * 3600
        os.utime(stale.path, (two_hours_ago, two_hours_ago))
        os.utime(foreign, (two_hours_ago, two_hours_ago))

        assert manager.cleanup_old_files(max_age_hours=1) == 1
        assert not stale.path.exists()
        assert fresh.path.exists()
        assert foreign.exists()

    def test_cleanup_with_zero_age_keeps_foreign_files(self, tmp_path):
        manager = TempFileManager(tmp_path)
        manager.create_temp_file(suffix=".ogg")
        foreign = tmp_path / "notes.txt"
        foreign.write_text("keep me")

        assert manager.cleanup_old_files(max_age_hours=0) == 1
        assert list(tmp_path.iterdir()) == [foreign]


class FailingGetMeAPI:
    def __init__(self, session, token, api_root=None):
        self.token = token

    async def get_me(self):
        raise TelegramAPIError("getMe", "Unauthorized", 401)


class TestStartup:

    @pytest.mark.asyncio
    async def test_start_reports_rejected_token(self, voice_bot, monkeypatch):
        monkeypatch.setattr(bot_module, "TelegramAPI", FailingGetMeAPI)

        try:
            assert await voice_bot.start() is False
        finally:
            await voice_bot.stop()

    def test_main_exits_nonzero_when_bot_cannot_start(self, base_env, monkeypatch):
        class NotStartingBot:
            def __init__(self, config):
                self.config = config

            async def start(self):
                return False

            async def stop(self):
                pass

        monkeypatch.setattr(main_module, "load_config", lambda: Config(base_env))
        monkeypatch.setattr(main_module, "VoiceBot", NotStartingBot)

        assert main_module.main() == 1

    def test_main_exits_nonzero_on_bad_config(self, monkeypatch):
        def broken_config():
            raise ConfigError("POLL_TIMEOUT должен быть числом, получено: 'soon'")

        monkeypatch.setattr(main_module, "load_config", broken_config)

        assert main_module.main() == 1


def test_voice_formatting():
    assert format_duration(0) == "unknown"
    assert format_duration(75) == "1m 15s"
    assert format_file_size(2048) == "2.0 KB"
