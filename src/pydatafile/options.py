from __future__ import annotations

import enum
from dataclasses import dataclass


class Flags(enum.IntFlag):
    """Per-document behaviour switches."""

    NONE = 0
    AUTOCREATE_SECTIONS = 1
    AUTOCREATE_KEYS = 2
    DEFAULT = AUTOCREATE_SECTIONS | AUTOCREATE_KEYS


@dataclass(frozen=True)
class Dialect:
    """Characters recognised by the text codec.

    ``delimiter`` separates a key from its value and ``comment`` starts a
    comment line.  Both are also the characters written back on save.
    """

    delimiter: str = "="
    comment: str = ";"
    whitespace: str = " \t\r\n"

    def __post_init__(self) -> None:
        if len(self.delimiter) != 1:
            raise ValueError(f"delimiter must be a single character: {self.delimiter!r}")
        if len(self.comment) != 1:
            raise ValueError(f"comment indicator must be a single character: {self.comment!r}")
        if self.delimiter == self.comment:
            raise ValueError("delimiter and comment indicator must differ")

    @property
    def trim_chars(self) -> str:
        return self.whitespace + self.delimiter


DEFAULT_DIALECT = Dialect()
