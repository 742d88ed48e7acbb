"""
Telegram voice file downloader
Resolves a voice reference to a direct URL and stores the file locally
"""

import asyncio
import logging
import os
from urllib.parse import urlparse

import aiofiles
import aiohttp

from audio_pipeline.errors import FetchError, ResolveError
from bot.models import VoiceRef
from bot.telegram_api import TelegramAPI, TelegramAPIError
from utils.temp_files import TempFileManager, TransientFile

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


class VoiceResolver:
    """Turns a voice reference into a direct download URL"""

    def __init__(self, api: TelegramAPI):
        self.api = api

    async def resolve(self, voice: VoiceRef) -> str:
        """
        Raises:
            ResolveError: if getFile fails or returns no file path
        """
        try:
            return await self.api.get_file_url(voice.file_id)
        except TelegramAPIError as e:
            raise ResolveError(f"Failed to get voice file URL: {e}") from e


class TelegramAudioDownloader:
    """Downloads a file by URL into a transient local file"""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        temp_manager: TempFileManager,
        max_file_size_mb: int = 20,
        timeout: float = 120,
    ):
        self.session = session
        self.temp_manager = temp_manager
        self.max_bytes = max_file_size_mb * 1024 * 1024
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    @staticmethod
    def _suffix_for(url: str) -> str:
        # Voice notes come as .oga/.ogg (Opus in an Ogg container)
        ext = os.path.splitext(urlparse(url).path)[1].lower()
        return ext or ".ogg"

    async def fetch(self, url: str) -> TransientFile:
        """
        Download a file and save it to a temporary file

        Args:
            url: Direct download URL

        Returns:
            TransientFile owned by the caller

        Raises:
            FetchError: on network errors, non-200 status, oversized or empty body.
                The partial file is removed before raising.
        """
        target = self.temp_manager.create_temp_file(suffix=self._suffix_for(url))
        written = 0

        try:
            async with self.session.get(url, timeout=self.timeout) as response:
                if response.status != 200:
                    raise FetchError(f"HTTP error {response.status} downloading file")

                if response.content_length and response.content_length > self.max_bytes:
                    raise FetchError(f"File too large: {response.content_length} bytes")

                async with aiofiles.open(target.path, "wb") as f:
                    async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                        written += len(chunk)
                        if written > self.max_bytes:
                            raise FetchError(f"File too large: more than {self.max_bytes} bytes")
                        await f.write(chunk)

            if written == 0:
                raise FetchError("Downloaded file is empty")

        except FetchError:
            target.release()
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            target.release()
            raise FetchError(f"Failed to download file: {e}") from e

        logger.info(f"Successfully downloaded: {target.path} ({written} bytes)")
        return target
