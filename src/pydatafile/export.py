from __future__ import annotations

import json

import tomlkit

from .core import DataFile
from .model import Section


def to_dict(datafile: DataFile) -> dict[str, dict[str, str]]:
    """Return ``{section: {key: value}}`` in document order.

    The default section appears under ``""``.
    """
    return {s.name: {k.name: k.value for k in s} for s in datafile}


def to_json(datafile: DataFile, *, indent: int | None = 2) -> str:
    return json.dumps(to_dict(datafile), indent=indent)


def _comment_lines(comment: str, indicator: str) -> list[str]:
    lines = []
    for line in comment.strip().splitlines():
        line = line.strip()
        if line.startswith(indicator):
            line = line[len(indicator):].strip()
        if line:
            lines.append(line)
    return lines


def _fill(container, section: Section, indicator: str) -> None:
    for key in section:
        for line in _comment_lines(key.comment, indicator):
            container.add(tomlkit.comment(line))
        container.add(key.name, key.value)


def to_toml(datafile: DataFile) -> str:
    """Render the document as TOML.

    Keys of the default section become top-level keys, named sections become
    tables.  Values stay strings and comments are carried over as ``#`` lines.
    """
    indicator = datafile.dialect.comment
    doc = tomlkit.document()
    default = datafile.find_section("")
    if default is not None:
        for line in _comment_lines(default.comment, indicator):
            doc.add(tomlkit.comment(line))
        _fill(doc, default, indicator)
    for section in datafile:
        if section.is_default:
            continue
        table = tomlkit.table()
        for line in _comment_lines(section.comment, indicator):
            table.add(tomlkit.comment(line))
        _fill(table, section, indicator)
        doc.add(section.name, table)
    return tomlkit.dumps(doc)
