"""
Audio transcoding through an external ffmpeg process
"""

import asyncio
import logging
import subprocess
from typing import List, Optional

from audio_pipeline.errors import TranscodeError
from utils.ffmpeg import ensure_ffmpeg
from utils.temp_files import TempFileManager, TransientFile

logger = logging.getLogger(__name__)


class AudioTranscoder:
    """Converts a downloaded voice file to MP3 for the transcription service"""

    def __init__(
        self,
        temp_manager: TempFileManager,
        bitrate: str = "320k",
        ffmpeg_binary: Optional[str] = None,
    ):
        self.temp_manager = temp_manager
        self.bitrate = bitrate
        self.ffmpeg_binary = ffmpeg_binary

    def build_command(self, src_path: str, dst_path: str) -> List[str]:
        ffmpeg = ensure_ffmpeg(self.ffmpeg_binary)
        return [ffmpeg, "-y", "-i", src_path, "-acodec", "libmp3lame", "-ab", self.bitrate, dst_path]

    def _run(self, cmd: List[str]) -> None:
        """Blocking ffmpeg call, executed in the default executor"""
        try:
            subprocess.run(cmd, check=True, stdout=subprocess.DEVNULL, stderr=subprocess.PIPE)
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
            tail = stderr.splitlines()[-1] if stderr else "no output"
            raise TranscodeError(f"ffmpeg exited with code {e.returncode}: {tail}") from e
        except OSError as e:
            raise TranscodeError(f"Failed to run ffmpeg: {e}") from e

    async def transcode(self, source: TransientFile) -> TransientFile:
        """
        Transcode source to MP3

        Args:
            source: Downloaded file; stays owned by the caller

        Returns:
            New TransientFile with the MP3 output, owned by the caller

        Raises:
            TranscodeError: non-zero exit, I/O error or empty output.
                The output file is removed before raising.
        """
        target = self.temp_manager.create_temp_file(suffix=".mp3")

        try:
            try:
                cmd = self.build_command(str(source.path), str(target.path))
            except (RuntimeError, OSError) as e:
                raise TranscodeError(f"ffmpeg not available: {e}") from e
            logger.debug(f"Running: {' '.join(cmd)}")

            loop = asyncio.get_running_loop()
            future = loop.run_in_executor(None, self._run, cmd)
            try:
                await asyncio.shield(future)
            except asyncio.CancelledError:
                # ffmpeg keeps writing the target until the process exits
                await asyncio.wait([future])
                raise
            if target.size() == 0:
                raise TranscodeError("ffmpeg produced an empty file")
        except BaseException:
            target.release()
            raise

        logger.info(f"Transcoded {source.path.name} -> {target.path.name} ({target.size()} bytes)")
        return target
