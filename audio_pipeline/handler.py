"""
Main voice message handler
Runs the authentication gate and the fixed stage sequence from download to summary
"""

import enum
import logging
from typing import Awaitable, List, Optional, TypeVar

from audio_pipeline.downloader import TelegramAudioDownloader, VoiceResolver
from audio_pipeline.errors import (
    PipelineError,
    STAGE_FETCH,
    STAGE_RESOLVE,
    STAGE_SEND,
    STAGE_SUMMARIZE,
    STAGE_TRANSCODE,
    STAGE_TRANSCRIBE,
)
from audio_pipeline.summarizer import TranscriptSummarizer
from audio_pipeline.transcoder import AudioTranscoder
from audio_pipeline.transcriber import VoiceTranscriber
from bot.auth import Authenticator
from bot.models import IncomingMessage
from bot.responder import ResponseSender
from utils.logging_config import TimedLogger
from utils.temp_files import TransientFile
from utils.tg_audio import describe_voice

logger = logging.getLogger(__name__)

T = TypeVar("T")

AUTH_OK_TEXT = "✅ PIN accepted. You can now send voice messages."
AUTH_REJECTED_TEXT = "🔒 Access denied. Send the PIN to use this bot."
EMPTY_TRANSCRIPT_TEXT = "🔇 (no speech recognized)"
EMPTY_SUMMARY_TEXT = "🤷 (empty summary)"


class PipelineOutcome(str, enum.Enum):
    """Non-error results of handling one message"""

    COMPLETED = "completed"
    REJECTED = "rejected"
    AUTHENTICATED = "authenticated"
    NO_VOICE = "no_voice"


class MessagePipeline:
    """Gate + voice pipeline for one incoming message"""

    def __init__(
        self,
        authenticator: Authenticator,
        responder: ResponseSender,
        resolver: VoiceResolver,
        downloader: TelegramAudioDownloader,
        transcoder: AudioTranscoder,
        transcriber: VoiceTranscriber,
        summarizer: TranscriptSummarizer,
    ):
        self.authenticator = authenticator
        self.responder = responder
        self.resolver = resolver
        self.downloader = downloader
        self.transcoder = transcoder
        self.transcriber = transcriber
        self.summarizer = summarizer

    async def handle(self, message: IncomingMessage) -> PipelineOutcome:
        """
        Handle one message

        Returns:
            PipelineOutcome for every non-error result

        Raises:
            PipelineError: first failed stage, tagged with its name
        """
        just_authenticated = False

        if not self.authenticator.check_auth(message.sender):
            if not self.authenticator.authenticate(message.sender, message.text):
                logger.info(f"Rejected message from unauthenticated user {message.sender}")
                await self.responder.notify(message.chat_id, AUTH_REJECTED_TEXT, reply_to=message.message_id)
                return PipelineOutcome.REJECTED

            just_authenticated = True
            await self.responder.notify(message.chat_id, AUTH_OK_TEXT, reply_to=message.message_id)

        if not message.has_voice:
            return PipelineOutcome.AUTHENTICATED if just_authenticated else PipelineOutcome.NO_VOICE

        logger.info(
            f"Received a new voice message from {message.username or message.sender}: "
            f"{describe_voice(message.voice)}"
        )
        await self.process_voice(message)
        return PipelineOutcome.COMPLETED

    async def process_voice(self, message: IncomingMessage) -> None:
        """Stage sequence; transient files are released on every exit path"""
        transient: List[TransientFile] = []

        try:
            await self.responder.indicate(message.chat_id)

            url = await self._stage(STAGE_RESOLVE, self.resolver.resolve(message.voice))

            original = await self._stage(STAGE_FETCH, self.downloader.fetch(url))
            transient.append(original)

            transcoded = await self._stage(STAGE_TRANSCODE, self.transcoder.transcode(original))
            transient.append(transcoded)

            transcript = await self._stage(
                STAGE_TRANSCRIBE, self.transcriber.transcribe(transcoded), "transcription"
            )

            transcript_message_id = await self._stage(
                STAGE_SEND,
                self.responder.reply(message.chat_id, message.message_id, transcript or EMPTY_TRANSCRIPT_TEXT),
                "telegram",
            )

            await self.responder.indicate(message.chat_id)

            summary = await self._stage(
                STAGE_SUMMARIZE, self.summarizer.summarize(transcript), "summarization"
            )

            await self._stage(
                STAGE_SEND,
                self.responder.reply(message.chat_id, transcript_message_id, summary or EMPTY_SUMMARY_TEXT),
                "telegram",
            )
        finally:
            for item in reversed(transient):
                item.release()

    async def _stage(self, stage: str, call: Awaitable[T], service: Optional[str] = None) -> T:
        """Await one stage call, wrapping any failure with the stage name"""
        try:
            with TimedLogger(logger, f"{stage} stage", external_service=service, stage=stage):
                return await call
        except Exception as e:
            raise PipelineError(stage, e) from e
