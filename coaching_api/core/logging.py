import inspect
import json
import logging
import os
import time
import traceback
from contextlib import contextmanager
from datetime import datetime, timezone
from functools import wraps
from logging.handlers import RotatingFileHandler

from coaching_api.core.config import get_logging_config

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Attributes passed through `extra=` that end up in the JSON log lines
CONTEXT_FIELDS = ('request_id', 'user_id', 'batch_id', 'event', 'method', 'path', 'status_code')

MAX_LOG_BYTES = 10 * 1024 * 1024  # 10MB


class CustomJsonFormatter(logging.Formatter):
    """One JSON object per line, for the rotating file handlers"""

    def __init__(self, extra_fields=CONTEXT_FIELDS):
        super().__init__()
        self.extra_fields = extra_fields

    def format(self, record):
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
            "message": record.getMessage(),
        }
        payload.update(
            (field, getattr(record, field)) for field in self.extra_fields if hasattr(record, field)
        )
        if hasattr(record, 'duration'):
            payload['duration_ms'] = round(record.duration, 2)

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            payload['exception'] = {
                'type': exc_type.__name__,
                'message': str(exc_value),
                'traceback': traceback.format_exception(*record.exc_info),
            }
        return json.dumps(payload, default=str)


class LoggerFactory:
    """Builds the application logger: console always, JSON files when a log dir is configured"""

    @staticmethod
    def _file_handler(path: str, level: int) -> RotatingFileHandler:
        handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=5)
        handler.setLevel(level)
        handler.setFormatter(CustomJsonFormatter())
        return handler

    @staticmethod
    def create_logger(name: str, log_dir: str = None, level: str = "INFO") -> logging.Logger:
        numeric_level = getattr(logging, level.upper(), logging.INFO)
        logger = logging.getLogger(name)
        logger.setLevel(numeric_level)
        logger.handlers.clear()

        console = logging.StreamHandler()
        console.setLevel(numeric_level)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        logger.addHandler(console)

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            logger.addHandler(LoggerFactory._file_handler(os.path.join(log_dir, 'app.log'), numeric_level))
            logger.addHandler(LoggerFactory._file_handler(os.path.join(log_dir, 'error.log'), logging.ERROR))

        return logger


@contextmanager
def _timed_call(logger: logging.Logger, name: str):
    started = time.perf_counter()
    logger.debug(f"Entering function: {name}")
    try:
        yield
    except Exception:
        logger.warning(f"Error in function: {name}", exc_info=True)
        raise
    logger.debug(
        f"Exiting function: {name}",
        extra={'duration': (time.perf_counter() - started) * 1000}
    )


def log_function_call(logger):
    """Decorator to log function entry, exit, and performance"""
    def decorator(func):
        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                with _timed_call(logger, func.__qualname__):
                    return await func(*args, **kwargs)
            return async_wrapper

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            with _timed_call(logger, func.__qualname__):
                return func(*args, **kwargs)
        return sync_wrapper
    return decorator


# Create default logger instance
_logging_config = get_logging_config()
logger = LoggerFactory.create_logger(
    "CoachingInstituteLogger",
    log_dir=_logging_config["log_dir"],
    level=_logging_config["log_level"],
)
