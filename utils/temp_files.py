#!/usr/bin/env python3
"""
Transient file management for the voice pipeline
"""

import logging
import os
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

# Names of files created by this bot start with it
TEMP_PREFIX = "voice-"


@dataclass(frozen=True)
class TransientFile:
    """A local file owned by one pipeline run; must be released when done"""

    path: Path
    format: str

    def release(self) -> bool:
        """
        Delete the file. Safe to call more than once.

        Returns:
            True if the file is gone, False if removal failed
        """
        try:
            self.path.unlink()
            logger.debug(f"Deleted temp file: {self.path}")
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to cleanup {self.path}: {e}")
            return False
        return True

    def size(self) -> int:
        try:
            return self.path.stat().st_size
        except OSError:
            return 0


class TempFileManager:
    """Creates transient files inside a dedicated directory"""

    def __init__(self, temp_dir: Union[str, Path]):
        self.temp_dir = Path(temp_dir)
        self.temp_dir.mkdir(parents=True, exist_ok=True)

        logger.info(f"Temp file manager initialized: {self.temp_dir}")

    def create_temp_file(self, suffix: str = "", prefix: str = TEMP_PREFIX) -> TransientFile:
        """
        Create an empty temporary file

        Args:
            suffix: File suffix (e.g., '.ogg')
            prefix: File prefix

        Returns:
            TransientFile tagged with the suffix as its format
        """
        fd, temp_path = tempfile.mkstemp(
            suffix=suffix,
            prefix=prefix,
            dir=self.temp_dir
        )

        # Close file descriptor immediately
        os.close(fd)

        transient = TransientFile(Path(temp_path), suffix.lstrip('.') or 'bin')
        logger.debug(f"Created temp file: {transient.path}")
        return transient

    def cleanup_old_files(self, max_age_hours: float = 1.0) -> int:
        """
        Remove leftovers of a crashed run: files created by this bot
        (TEMP_PREFIX) and older than max_age_hours. Other files in the
        directory are never touched.

        Returns:
            Number of files removed
        """
        max_age_seconds = max_age_hours * 3600
        current_time = time.time()

        cleaned_count = 0
        for file_path in self.temp_dir.glob(f"{TEMP_PREFIX}*"):
            try:
                if not file_path.is_file():
                    continue
                file_age = current_time - file_path.stat().st_mtime
            except OSError as e:
                logger.warning(f"Error checking file age {file_path}: {e}")
                continue

            if file_age >= max_age_seconds and TransientFile(file_path, '').release():
                cleaned_count += 1

        if cleaned_count > 0:
            logger.info(f"Cleaned up {cleaned_count} leftover temp files")
        return cleaned_count
