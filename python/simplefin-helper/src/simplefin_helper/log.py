"""Human-readable console logging for simplefin_helper."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from typing import TextIO


LOGGER_NAME = "simplefin_helper"


class TimestampFormatter(logging.Formatter):
    """Format records as `[<ISO-8601 UTC>] [LEVEL]: message`."""

    def __init__(self) -> None:
        """Initialize new instance."""
        super().__init__("[%(asctime)s] [%(levelname)s]: %(message)s")

    def formatTime(  # noqa: N802
        self, record: logging.LogRecord, datefmt: str | None = None
    ) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def configure_logging(
    level: int | str = logging.INFO, stream: TextIO | None = None
) -> logging.Logger:
    """Send simplefin_helper log records to the console.

    Replaces any handler installed by a previous call.

    Args:
        level: minimum level, e.g. `"DEBUG"` or `logging.WARNING`.
        stream: destination. Defaults to standard output.

    Returns:
        The configured package logger.

    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(TimestampFormatter())
    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.propagate = False
    return logger
