"""
Logging utility
Application-wide logger setup
"""
import logging
import os
import sys
from pathlib import Path

LOG_FORMAT = '%(asctime)s | %(name)s | %(levelname)s | %(message)s'


def setup_logger(name: str = __name__, level: int = None) -> logging.Logger:
    """
    Configure and return a logger

    Level comes from LOG_LEVEL (default INFO) unless given. When LOG_FILE
    is set, records are also appended to that file.

    Args:
        name: logger name
        level: logging level

    Returns:
        configured Logger instance
    """
    if level is None:
        level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # avoid duplicate handlers
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    log_file = os.getenv("LOG_FILE")
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
