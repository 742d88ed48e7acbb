#!/usr/bin/env python3
"""
Structured logging configuration with JSON output and per-update tracking
"""

import json
import logging
import sys
import time
from contextvars import ContextVar
from typing import Optional

# Context variables for update tracking
update_id_var: ContextVar[Optional[int]] = ContextVar('update_id', default=None)
user_id_var: ContextVar[Optional[int]] = ContextVar('user_id', default=None)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def __init__(self, debug: bool = False):
        super().__init__()
        self.debug = debug

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON"""

        # Base log entry
        log_entry = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        # Add update context if available
        update_id = update_id_var.get()
        if update_id is not None:
            log_entry['update_id'] = update_id

        user_id = user_id_var.get()
        if user_id is not None:
            log_entry['user_id'] = user_id

        # Add extra fields from record
        for field in ('stage', 'duration', 'external_service', 'file_size'):
            value = getattr(record, field, None)
            if value is not None:
                log_entry[field] = value

        # Add exception info if present
        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        # Add module and function info for debugging
        if self.debug:
            log_entry.update({
                'module': record.module,
                'function': record.funcName,
                'line': record.lineno,
            })

        return json.dumps(log_entry, ensure_ascii=False)


def setup_logging(level: str = 'INFO', structured: bool = False, debug: bool = False) -> logging.Logger:
    """Configure the root logger"""

    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    if structured:
        formatter = StructuredFormatter(debug=debug)
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Silence noisy third-party loggers
    for name in ('urllib3', 'aiohttp', 'httpx', 'httpcore', 'openai', 'groq'):
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger


def set_update_context(update_id: int = None, user_id: int = None):
    """Set update context variables"""
    if update_id is not None:
        update_id_var.set(update_id)
    if user_id is not None:
        user_id_var.set(user_id)


def clear_update_context():
    """Clear update context variables"""
    update_id_var.set(None)
    user_id_var.set(None)


class TimedLogger:
    """Context manager for timing a pipeline stage"""

    def __init__(self, logger: logging.Logger, operation: str,
                 external_service: str = None, **extra_fields):
        self.logger = logger
        self.operation = operation
        self.external_service = external_service
        self.extra_fields = extra_fields
        self.start_time = None
        self.duration = None

    def __enter__(self):
        self.start_time = time.monotonic()
        self.logger.debug(
            f"Starting {self.operation}",
            extra={'external_service': self.external_service, **self.extra_fields}
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.monotonic() - self.start_time
        extra = {
            'duration': round(self.duration, 3),
            'external_service': self.external_service,
            **self.extra_fields
        }

        if exc_type is None:
            self.logger.info(f"Completed {self.operation} in {self.duration:.2f}s", extra=extra)
        else:
            # Traceback is logged once by the dispatch loop
            self.logger.warning(f"Failed {self.operation} after {self.duration:.2f}s: {exc_val}", extra=extra)
        return False
