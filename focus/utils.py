"""Utility functions for the dashboard."""
import logging
import math
from datetime import datetime

from focus.config import LOG_DIR


def setup_logger(name: str = __name__) -> logging.Logger:
    """Set up and return a logger instance."""
    log_file = LOG_DIR / f"dashboard_{datetime.now().strftime('%Y%m%d')}.log"

    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    # File handler
    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setLevel(logging.INFO)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)

    # Formatter
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


def to_float(value):
    """Coerce API numerics (often sent as strings) to float, None when unparseable or non-finite."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(result):
        return None
    return result


def to_int(value):
    """Coerce API integers to int, None when unparseable."""
    result = to_float(value)
    if result is None:
        return None
    return int(result)
