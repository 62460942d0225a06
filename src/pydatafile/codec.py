"""Line-oriented text codec for data files.

The format is a plain INI dialect::

    ;
    ; comment block attached to the section below
    ;
    [ServerSettings]
    Port=1200

Lines are classified in priority order: comment, section header, key/value,
blank.  Comment lines accumulate into a block that is attached to the next
section header or key.  Parsing is lenient: malformed lines are salvaged
where possible rather than rejected.
"""
from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from os import PathLike

from .errors import DataFileIOError, ParseError
from .model import Section
from .options import DEFAULT_DIALECT, Dialect

StrPath = str | PathLike[str]


class EntryKind(enum.Enum):
    SECTION = "section"
    KEY = "key"


@dataclass(frozen=True)
class Entry:
    kind: EntryKind
    name: str
    value: str = ""
    comment: str = ""


# ---------------------------------------------------------------------------
# Line helpers
# ---------------------------------------------------------------------------


def trim(text: str, dialect: Dialect = DEFAULT_DIALECT) -> str:
    """Strip whitespace and delimiter characters from both ends of *text*."""
    return text.strip(dialect.trim_chars)


def next_word(line: str, dialect: Dialect = DEFAULT_DIALECT) -> tuple[str, str]:
    """Split *line* at the first delimiter into ``(key, value)``.

    Without a delimiter the whole line is the key and the value is empty.
    """
    pos = line.find(dialect.delimiter)
    if pos < 0:
        return trim(line, dialect), ""
    return trim(line[:pos], dialect), trim(line[pos + 1:], dialect)


def is_comment(line: str, dialect: Dialect = DEFAULT_DIALECT) -> bool:
    return line.startswith(dialect.comment)


def section_name(line: str) -> str:
    name = line[1:]
    end = name.rfind("]")
    if end >= 0:
        name = name[:end]
    return name.strip()


def comment_block(comment: str, dialect: Dialect = DEFAULT_DIALECT) -> str:
    """Return *comment* with every line carrying the comment indicator."""
    comment = comment.strip(dialect.whitespace)
    if not comment:
        return ""
    lines = []
    for line in comment.splitlines():
        line = line.strip(dialect.whitespace)
        if not is_comment(line, dialect):
            line = f"{dialect.comment} {line}".rstrip()
        lines.append(line)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_lines(lines: Iterable[str], dialect: Dialect = DEFAULT_DIALECT) -> Iterator[Entry]:
    pending: list[str] = []
    for raw in lines:
        line = trim(raw, dialect)
        if is_comment(line, dialect):
            pending.append(line)
        elif line.startswith("["):
            yield Entry(EntryKind.SECTION, section_name(line), comment="\n".join(pending))
            pending = []
        elif line:
            key, value = next_word(line, dialect)
            if key:
                yield Entry(EntryKind.KEY, key, value, comment="\n".join(pending))
                pending = []


def parse_text(text: str, dialect: Dialect = DEFAULT_DIALECT) -> list[Entry]:
    return list(parse_lines(text.splitlines(), dialect))


def read_file(
    path: StrPath, dialect: Dialect = DEFAULT_DIALECT, encoding: str | None = None
) -> list[Entry]:
    """Parse the file at *path*.

    :class:`DataFileIOError` is raised if the file cannot be opened or
    decoded; nothing is returned in that case.
    """
    try:
        with open(path, encoding=encoding) as fh:
            return list(parse_lines(fh, dialect))
    except FileNotFoundError as exc:
        raise DataFileIOError(path, "no such file") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise DataFileIOError(path, str(exc)) from exc


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------


def render_lines(sections: Iterable[Section], dialect: Dialect = DEFAULT_DIALECT) -> Iterator[str]:
    for section in sections:
        block = comment_block(section.comment, dialect)
        if block:
            yield ""
            yield from block.split("\n")
        if section.name:
            if not block:
                yield ""
            yield f"[{section.name}]"
        for key in section.keys:
            if not key.name:
                continue
            key_block = comment_block(key.comment, dialect)
            if key_block:
                yield ""
                yield from key_block.split("\n")
            yield f"{key.name}{dialect.delimiter}{key.value}"


def render(sections: Iterable[Section], dialect: Dialect = DEFAULT_DIALECT) -> str:
    """Serialise *sections* into the canonical text form.

    Values are written verbatim; embedded newlines or delimiters will not
    survive a reload.
    """
    return "".join(f"{line}\n" for line in render_lines(sections, dialect))


def write_file(
    path: StrPath,
    sections: Iterable[Section],
    dialect: Dialect = DEFAULT_DIALECT,
    encoding: str | None = None,
) -> None:
    text = render(sections, dialect)
    try:
        with open(path, "w", encoding=encoding) as fh:
            fh.write(text)
    except (OSError, UnicodeEncodeError) as exc:
        raise DataFileIOError(path, str(exc)) from exc


# ---------------------------------------------------------------------------
# Typed values
# ---------------------------------------------------------------------------


def to_int(text: str) -> int:
    try:
        return int(float(text)) if "." in text else int(text)
    except (ValueError, OverflowError) as exc:
        raise ParseError(f"Expected int, got {text!r}") from exc


def to_float(text: str) -> float:
    try:
        return float(text)
    except ValueError as exc:
        raise ParseError(f"Expected float, got {text!r}") from exc


def to_bool(text: str) -> bool:
    """Lenient boolean: only ``1...``, ``true`` and ``yes`` are true."""
    return text.startswith("1") or text.casefold() in {"true", "yes"}


def from_int(value: int) -> str:
    return "%d" % value


def from_float(value: float) -> str:
    return "%g" % value


def from_bool(value: bool) -> str:
    return "True" if value else "False"
