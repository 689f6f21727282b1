# app/logging_config.py
from logging.handlers import RotatingFileHandler
import logging
import os

from app.config import settings

ACCESS_LOGGER_NAME = "app.access"

DEV_ACCESS_FORMAT = "%(message)s"
COMBINED_ACCESS_FORMAT = "%(asctime)s %(levelname)s %(message)s"

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 10


def configure_logging() -> logging.Logger:
    """
    Set the root log level and build the request logger.

    Request lines go to a size-rotated logs/server.log when LOG_TO_FILE is
    set, otherwise they propagate to the root handlers.
    """
    logging.basicConfig(level=settings.LOG_LEVEL.upper())

    access_logger = logging.getLogger(ACCESS_LOGGER_NAME)
    access_logger.setLevel(logging.INFO)

    if settings.LOG_TO_FILE and not access_logger.handlers:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        handler = RotatingFileHandler(
            os.path.join(settings.LOG_DIR, "server.log"),
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUP_COUNT,
        )
        handler.setFormatter(logging.Formatter(
            COMBINED_ACCESS_FORMAT if settings.is_production else DEV_ACCESS_FORMAT
        ))
        access_logger.addHandler(handler)
        access_logger.propagate = False

    return access_logger
