import logging
import sys
from pathlib import Path
from typing import Optional

from config.settings import get_settings

FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
CONSOLE_FORMAT = '%(levelname)s - %(message)s'


def _file_handler(path: str) -> logging.Handler:
    handler = logging.FileHandler(Path(path), encoding='utf-8')
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    return handler


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    if hasattr(handler.stream, 'reconfigure'):
        handler.stream.reconfigure(encoding='utf-8')
    return handler


def setup_logger(name: str = None, level: Optional[str] = None) -> logging.Logger:
    """
    Attach file and console handlers to a named logger, once.

    The file handler is skipped when LOG_FILE is empty.
    """
    logger = logging.getLogger(name or __name__)

    if logger.handlers:
        return logger

    settings = get_settings()
    level = (level or settings.LOG_LEVEL).upper()
    logger.setLevel(getattr(logging, level, logging.INFO))

    if settings.LOG_FILE:
        logger.addHandler(_file_handler(settings.LOG_FILE))
    logger.addHandler(_console_handler())

    return logger


def get_logger(name: str = None) -> logging.Logger:
    return setup_logger(name)
