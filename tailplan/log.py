"""Console logging with colour-coded levels."""
from __future__ import annotations

import logging

from colorama import Fore, Style, init as colorama_init

from tailplan.config import LOG_LEVEL

colorama_init()

LEVEL_COLORS = {
    logging.DEBUG: Style.DIM,
    logging.INFO: Fore.GREEN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED + Style.BRIGHT,
}


class ColorFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno, "")
        return f"{color}{message}{Style.RESET_ALL}"


_handler = logging.StreamHandler()
_handler.setFormatter(
    ColorFormatter(fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
)


def get_logger(name: str = "tailplan") -> logging.Logger:
    """Return a logger wired to the shared colour console handler."""
    logger = logging.getLogger(name)
    logger.setLevel(LOG_LEVEL)
    # Avoid duplicate handlers if called multiple times
    if _handler not in logger.handlers:
        logger.addHandler(_handler)
    logger.propagate = False
    return logger
