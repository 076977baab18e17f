import json
import logging
import logging.handlers
import os

from config import settings

LOGGER_NAME = "signaling"


class JsonFormatter(logging.Formatter):
    """One JSON object per line; field values are escaped, never templated."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(log_file: str | None = None, max_log_days: int = 7) -> logging.Logger:
    """
    Configure the application logger with JSON lines output, optional daily file
    rotation, and the level taken from settings.

    Module loggers live under the ``signaling`` namespace and propagate here.
    """
    log_file = log_file if log_file is not None else settings.LOG_FILE

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    # Remove existing handlers to avoid duplication on reload
    logger.handlers.clear()

    formatter = JsonFormatter()

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_file:
        directory = os.path.dirname(log_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        file_handler = logging.handlers.TimedRotatingFileHandler(
            filename=log_file,
            when="midnight",
            interval=1,
            backupCount=max_log_days,
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Child logger of the application logger, e.g. ``get_logger(__name__)``."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
