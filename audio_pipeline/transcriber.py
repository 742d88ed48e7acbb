"""
Speech-to-text through an OpenAI-compatible transcription endpoint
"""

import logging
from typing import Any

import aiofiles
import groq
import openai

from audio_pipeline.errors import TranscriptionError
from utils.temp_files import TransientFile

logger = logging.getLogger(__name__)

# Errors from either SDK
API_ERRORS = (openai.OpenAIError, groq.GroqError)


class VoiceTranscriber:
    """Submits an audio file and returns the plain-text transcript"""

    def __init__(self, client: Any, model: str = "whisper-1"):
        self.client = client
        self.model = model

    async def transcribe(self, audio: TransientFile) -> str:
        """
        Transcribe audio file

        Args:
            audio: MP3 file produced by the transcoder

        Returns:
            Transcript text; empty string when no speech was recognized

        Raises:
            TranscriptionError: on API, network or file read errors
        """
        try:
            async with aiofiles.open(audio.path, "rb") as f:
                data = await f.read()

            response = await self.client.audio.transcriptions.create(
                model=self.model,
                file=(audio.path.name, data),
            )
        except API_ERRORS as e:
            raise TranscriptionError(f"Transcription request failed: {e}") from e
        except OSError as e:
            raise TranscriptionError(f"Failed to read audio file: {e}") from e

        text = getattr(response, "text", None)
        if text is None:
            raise TranscriptionError("Malformed transcription response: no text field")

        text = text.strip()
        logger.info(f"Transcription completed: {len(text)} characters")
        return text
