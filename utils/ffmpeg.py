# utils/ffmpeg.py
import logging
import os
from typing import Optional

from imageio_ffmpeg import get_ffmpeg_exe

logger = logging.getLogger(__name__)

_BUNDLED_PATH: Optional[str] = None


def ensure_ffmpeg(override: Optional[str] = None) -> str:
    """Path to ffmpeg: FFMPEG_BINARY if set, otherwise the binary shipped with imageio-ffmpeg"""
    global _BUNDLED_PATH
    if override:
        return override
    if _BUNDLED_PATH is None or not os.path.exists(_BUNDLED_PATH):
        _BUNDLED_PATH = get_ffmpeg_exe()
        logger.info(f"Using bundled ffmpeg: {_BUNDLED_PATH}")
    return _BUNDLED_PATH
