"""
Voice processing pipeline for Telegram bot
Handles voice messages: download, transcode, transcription and summarization
"""

from .errors import PipelineError, StageError
from .handler import MessagePipeline, PipelineOutcome

__all__ = [
    'MessagePipeline',
    'PipelineOutcome',
    'PipelineError',
    'StageError',
]
