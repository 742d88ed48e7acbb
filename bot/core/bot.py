"""Главный класс бота: long polling и диспетчеризация обновлений"""

import asyncio
import logging
from typing import Optional, Set

import aiohttp

from audio_pipeline.downloader import TelegramAudioDownloader, VoiceResolver
from audio_pipeline.errors import PipelineError
from audio_pipeline.handler import MessagePipeline
from audio_pipeline.summarizer import TranscriptSummarizer
from audio_pipeline.transcoder import AudioTranscoder
from audio_pipeline.transcriber import VoiceTranscriber
from bot.auth import Authenticator, PinAuthenticator
from bot.core.router import UpdateRouter
from bot.responder import ResponseSender
from bot.telegram_api import TelegramAPI, TelegramAPIError
from config import Config
from llm.provider_router import build_provider
from utils.logging_config import clear_update_context, set_update_context
from utils.temp_files import TempFileManager

logger = logging.getLogger(__name__)


class VoiceBot:
    """Telegram бот: голосовое -> транскрипт -> саммари"""

    def __init__(self, config: Config, authenticator: Optional[Authenticator] = None):
        """
        Args:
            config: Конфигурация
            authenticator: Реализация авторизации (по умолчанию PIN из конфигурации)
        """
        self.config = config
        self.authenticator = authenticator or PinAuthenticator(config.AUTH_PIN)
        self.router = UpdateRouter()
        self.temp_manager = TempFileManager(config.TEMP_DIR)

        # Инициализируются в start(), после создания session
        self.session: Optional[aiohttp.ClientSession] = None
        self.api: Optional[TelegramAPI] = None
        self.pipeline: Optional[MessagePipeline] = None

        # Offset для long polling
        self.update_offset = 0

        # Задачи обработки обновлений (ссылки держим, чтобы их не собрал GC)
        self._tasks: Set[asyncio.Task] = set()

        logger.info("VoiceBot инициализирован")

    def _build_pipeline(self) -> MessagePipeline:
        """Сборка пайплайна из адаптеров"""
        provider = build_provider(
            self.config.SPEECH_PROVIDER,
            self.config.OPENAI_API_KEY,
            base_url=self.config.OPENAI_BASE_URL,
            transcription_model=self.config.TRANSCRIPTION_MODEL,
            summary_model=self.config.SUMMARY_MODEL,
            timeout=self.config.HTTP_TIMEOUT,
        )

        return MessagePipeline(
            authenticator=self.authenticator,
            responder=ResponseSender(self.api),
            resolver=VoiceResolver(self.api),
            downloader=TelegramAudioDownloader(
                self.session,
                self.temp_manager,
                max_file_size_mb=self.config.MAX_FILE_SIZE_MB,
                timeout=self.config.HTTP_TIMEOUT,
            ),
            transcoder=AudioTranscoder(
                self.temp_manager,
                bitrate=self.config.TRANSCODE_BITRATE,
                ffmpeg_binary=self.config.FFMPEG_BINARY,
            ),
            transcriber=VoiceTranscriber(provider.client, provider.transcription_model),
            summarizer=TranscriptSummarizer(provider.client, provider.summary_model),
        )

    async def start(self) -> bool:
        """
        Запуск бота и инициализация компонентов

        Returns:
            False, если бот не смог авторизоваться в Bot API
        """
        logger.info("Запуск VoiceBot...")

        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.config.HTTP_TIMEOUT)
        )
        self.api = TelegramAPI(self.session, self.config.TELEGRAM_BOT_TOKEN)
        self.pipeline = self._build_pipeline()

        # Остатки от предыдущего запуска
        self.temp_manager.cleanup_old_files(self.config.TEMP_FILE_RETENTION_HOURS)

        try:
            bot_info = await self.api.get_me()
        except TelegramAPIError as e:
            logger.error(f"❌ Не удалось получить информацию о боте: {e}")
            return False

        logger.info(f"✅ Authorized on account @{bot_info.get('username', 'unknown')}")

        await self.run_polling()
        return True

    async def run_polling(self):
        """Основной цикл long polling"""
        logger.info("Запуск long polling...")

        while True:
            try:
                updates = await self.api.get_updates(self.update_offset, self.config.POLL_TIMEOUT)
            except asyncio.CancelledError:
                logger.info("Long polling остановлен")
                raise
            except TelegramAPIError as e:
                logger.error(f"Ошибка запроса getUpdates: {e}")
                await asyncio.sleep(3)
                continue

            for update in updates:
                # Каждое обновление - отдельная задача
                task = asyncio.create_task(self.process_update(update))
                self._tasks.add(task)
                task.add_done_callback(self._tasks.discard)

                self.update_offset = update["update_id"] + 1

    async def process_update(self, update: dict):
        """
        Обработка одного обновления от Telegram

        Args:
            update: Telegram update object
        """
        set_update_context(update_id=update.get("update_id"))
        if self.config.DEBUG_MODE:
            logger.debug(f"Update: {update}")

        try:
            message = self.router.route(update)
            if message is None:
                return

            set_update_context(user_id=message.sender)
            outcome = await self.pipeline.handle(message)
            logger.info(f"Обновление {update.get('update_id')} обработано: {outcome.value}")

        except PipelineError as e:
            logger.error(
                f"Failed to handle message: {e}",
                extra={"stage": e.stage},
                exc_info=e.cause,
            )
        except Exception as e:
            logger.error(f"Ошибка обработки обновления: {e}", exc_info=True)
        finally:
            clear_update_context()

    async def stop(self):
        """Остановка бота и очистка ресурсов"""
        logger.info("Остановка VoiceBot...")

        # Дожидаемся обработки уже полученных обновлений
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

        if self.session:
            await self.session.close()

        logger.info("✅ VoiceBot остановлен")
