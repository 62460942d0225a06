from __future__ import annotations

import enum
import logging
from collections.abc import Callable

logger = logging.getLogger("pydatafile")


class Severity(enum.Enum):
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"
    CRITICAL = "critical"

    @property
    def level(self) -> int:
        """Return the :mod:`logging` level used for this severity."""
        return _LEVELS[self]


_LEVELS: dict[Severity, int] = {
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARN: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.FATAL: logging.CRITICAL,
    Severity.CRITICAL: logging.CRITICAL,
}

Reporter = Callable[[Severity, str], None]


def log_reporter(severity: Severity, message: str) -> None:
    """Forward a diagnostic message to the ``pydatafile`` logger."""
    logger.log(severity.level, message)
