"""Configure the loguru sink used by the service, store and request layer."""

from __future__ import annotations

import sys
from typing import Any, Optional

from loguru import logger

LOG_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> "
    "<level>{level: <7}</level> "
    "<cyan>{name}</cyan>:{function} | {message}"
)


def configure_logging(level: str = "INFO", sink: Optional[Any] = None) -> int:
    """Replace loguru's default handler with one sink at ``level``.

    Returns the handler id so callers (tests, embedding apps) can remove it.
    """
    logger.remove()
    return logger.add(
        sink if sink is not None else sys.stderr,
        level=level.upper(),
        format=LOG_FORMAT,
        colorize=sink is None and sys.stderr.isatty(),
        backtrace=False,
        diagnose=False,
    )
