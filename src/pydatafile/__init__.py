from .core import DataFile
from .diagnostics import Severity, log_reporter
from .errors import (
    AlreadyExistsError,
    DataFileError,
    DataFileIOError,
    InvalidStateError,
    NotFoundError,
    ParseError,
)
from .model import DEFAULT_SECTION, Key, Section
from .options import DEFAULT_DIALECT, Dialect, Flags

AUTOCREATE_SECTIONS = Flags.AUTOCREATE_SECTIONS
AUTOCREATE_KEYS = Flags.AUTOCREATE_KEYS


__all__ = [
    "DataFile",
    "Key",
    "Section",
    "DEFAULT_SECTION",
    "Flags",
    "AUTOCREATE_SECTIONS",
    "AUTOCREATE_KEYS",
    "Dialect",
    "DEFAULT_DIALECT",
    "Severity",
    "log_reporter",
    "DataFileError",
    "NotFoundError",
    "AlreadyExistsError",
    "DataFileIOError",
    "ParseError",
    "InvalidStateError",
]
