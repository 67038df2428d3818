# ============================================================================
# src/biomarker_ingestion/utils/logging.py
# ============================================================================
"""
Logging configuration and utilities for the biomarker ingestion core.

Nothing logged through these helpers should carry document text. Callers log
lengths, counts and category names only.
"""

import functools
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..config import logging_settings
from .exceptions import ConfigurationError


TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[Path] = None,
    format_json: Optional[bool] = None
) -> None:
    """
    Configure root logging for an application embedding the core.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (default: LOG_LEVEL)
        log_file: Optional file that receives the same records as stdout
        format_json: One JSON object per line (default: LOG_JSON)

    Raises:
        ConfigurationError: unknown level name
    """
    level = level if level is not None else logging_settings.LOG_LEVEL
    format_json = format_json if format_json is not None else logging_settings.LOG_JSON

    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        raise ConfigurationError(f"Unknown log level: {level}")

    formatter = JsonFormatter() if format_json else logging.Formatter(TEXT_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)


class JsonFormatter(logging.Formatter):
    """
    One JSON object per record.

    Exceptions are reduced to their type unless include_traceback is set:
    extraction errors carry response tails in their messages.
    """

    def __init__(self, include_traceback: bool = False):
        super().__init__()
        self.include_traceback = include_traceback

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'location': f"{record.module}.{record.funcName}:{record.lineno}",
        }

        if record.exc_info and record.exc_info[0] is not None:
            entry['error_type'] = record.exc_info[0].__name__
            if self.include_traceback:
                entry['traceback'] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False)


def log_performance(logger: logging.Logger, operation: str):
    """
    Decorator to log operation performance.

    Args:
        logger: Logger instance
        operation: Operation name
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start_time = datetime.now()

            try:
                result = func(*args, **kwargs)
                duration = (datetime.now() - start_time).total_seconds()
                logger.info(f"{operation} completed in {duration:.3f}s")
                return result

            except Exception as e:
                duration = (datetime.now() - start_time).total_seconds()
                logger.error(f"{operation} failed after {duration:.3f}s: {type(e).__name__}")
                raise

        return wrapper
    return decorator
