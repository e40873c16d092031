import logging
from typing import Optional

from gospelera import config

LOGGER_NAME = "gospelera"


def setup_logger(name: str = LOGGER_NAME, level: Optional[str] = None) -> logging.Logger:
    """Configure the package logger once and return it.

    Child loggers created with ``logging.getLogger(__name__)`` inside the
    package propagate to this one.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level or config.log_level())

    if not logger.handlers:
        console_handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger
