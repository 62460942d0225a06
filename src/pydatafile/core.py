from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from os import PathLike, fspath
from typing import Any

from . import codec
from .codec import EntryKind
from .diagnostics import Reporter, Severity, log_reporter
from .errors import AlreadyExistsError, DataFileIOError, NotFoundError, ParseError
from .model import DEFAULT_SECTION, Key, Section, find_section, same_name
from .options import DEFAULT_DIALECT, Dialect, Flags


class DataFile:
    """An ordered, commented key/value document backed by an INI-style file.

    Sections and keys are looked up case-insensitively and kept in insertion
    order.  Mutations only touch memory and mark the document dirty;
    :meth:`save` writes the whole document back.  Every operation reports
    failure through its return value rather than by raising.
    """

    def __init__(
        self,
        file_name: str | PathLike[str] | None = None,
        *,
        flags: Flags = Flags.DEFAULT,
        dialect: Dialect = DEFAULT_DIALECT,
        encoding: str | None = None,
        reporter: Reporter | None = None,
    ) -> None:
        self.flags = Flags(flags)
        self.dialect = dialect
        self.encoding = encoding
        self._reporter: Reporter = reporter or log_reporter
        self._sections: list[Section] = [Section(DEFAULT_SECTION)]
        self._file_name = ""
        self._dirty = False
        if file_name is not None:
            self._file_name = fspath(file_name)
            self.load(self._file_name)
            self._dirty = False

    # ----- state -----

    @property
    def file_name(self) -> str:
        return self._file_name

    def set_file_name(self, file_name: str | PathLike[str]) -> None:
        new = fspath(file_name)
        if self._file_name and not same_name(new, self._file_name):
            self._dirty = True
            self.report(
                Severity.WARN,
                f"The filename has changed from <{self._file_name}> to <{new}>.",
            )
        self._file_name = new

    @property
    def dirty(self) -> bool:
        return self._dirty

    @dirty.setter
    def dirty(self, value: bool) -> None:
        self._dirty = bool(value)

    def is_dirty(self) -> bool:
        return self._dirty

    def set_dirty(self, dirty: bool) -> None:
        self._dirty = bool(dirty)

    def clear(self) -> None:
        """Forget every section, the file name and the dirty flag."""
        self._dirty = False
        self._file_name = ""
        self._sections.clear()

    def report(self, severity: Severity, message: str) -> None:
        self._reporter(severity, message)

    @contextmanager
    def override_flags(self, flags: Flags):
        """Use *flags* for the duration of the block."""
        old = self.flags
        self.flags = Flags(flags)
        try:
            yield self
        finally:
            self.flags = old

    # ----- lookup -----

    @property
    def sections(self) -> tuple[Section, ...]:
        return tuple(self._sections)

    def find_section(self, name: str) -> Section | None:
        return find_section(self._sections, name)

    def find_key(self, key: str, section: str = DEFAULT_SECTION) -> Key | None:
        found = self.find_section(section)
        if found is None:
            return None
        return found.find(key)

    def has_section(self, name: str) -> bool:
        return self.find_section(name) is not None

    def has_key(self, key: str, section: str = DEFAULT_SECTION) -> bool:
        return self.find_key(key, section) is not None

    def section_count(self) -> int:
        return len(self._sections)

    def key_count(self) -> int:
        return sum(len(s) for s in self._sections)

    def section_names(self) -> list[str]:
        return [s.name for s in self._sections]

    def key_names(self, section: str = DEFAULT_SECTION) -> list[str]:
        found = self.find_section(section)
        return found.names() if found is not None else []

    def items(self, section: str = DEFAULT_SECTION) -> list[tuple[str, str]]:
        found = self.find_section(section)
        if found is None:
            return []
        return [(k.name, k.value) for k in found]

    def _require_section(self, name: str) -> Section:
        found = self.find_section(name)
        if found is None:
            raise NotFoundError(f"section [{name}] not found")
        return found

    def _require_key(self, key: str, section: str) -> Key:
        found = self._require_section(section).find(key)
        if found is None:
            raise NotFoundError(f"key {key!r} not found in [{section}]")
        return found

    # ----- sections -----

    def _add_section(self, name: str, comment: str) -> Section:
        if self.has_section(name):
            raise AlreadyExistsError(f"Section <{name}> already exists.")
        section = Section(name, comment)
        if name == DEFAULT_SECTION:
            # the default section's keys are written before any header
            self._sections.insert(0, section)
        else:
            self._sections.append(section)
        self._dirty = True
        return section

    def create_section(
        self, name: str, comment: str = "", keys: Iterable[Key] | None = None
    ) -> bool:
        """Append a new section, optionally populated with copies of *keys*.

        Returns False, leaving the document untouched, if a section with the
        same name already exists.
        """
        try:
            section = self._add_section(name, comment)
        except AlreadyExistsError as exc:
            self.report(Severity.INFO, f"[create_section] {exc} Aborting.")
            return False
        for key in keys or ():
            section.put(key.copy())
        return True

    def delete_section(self, name: str) -> bool:
        for i, section in enumerate(self._sections):
            if same_name(section.name, name):
                del self._sections[i]
                self._dirty = True
                return True
        return False

    def set_section_comment(self, name: str, comment: str) -> bool:
        found = self.find_section(name)
        if found is None:
            return False
        found.comment = comment
        self._dirty = True
        return True

    # ----- keys -----

    def set_value(
        self, key: str, value: Any, comment: str = "", section: str = DEFAULT_SECTION
    ) -> bool:
        """Set *key* in *section* to ``str(value)`` and replace its comment.

        Missing sections and keys are created only when the matching
        auto-create flag is set; otherwise False is returned and nothing
        changes.
        """
        target = self.find_section(section)
        if target is None:
            # a new section is only useful if the key may be created too
            if Flags.DEFAULT & ~self.flags:
                return False
            target = self._add_section(section, "")

        existing = target.find(key)
        if existing is None:
            if not self.flags & Flags.AUTOCREATE_KEYS:
                return False
            target.keys.append(Key(key, str(value), comment))
        else:
            existing.value = str(value)
            existing.comment = comment
        self._dirty = True
        return True

    def create_key(
        self, key: str, value: Any, comment: str = "", section: str = DEFAULT_SECTION
    ) -> bool:
        with self.override_flags(self.flags | Flags.AUTOCREATE_KEYS):
            return self.set_value(key, value, comment, section)

    def set_int(self, key: str, value: int, comment: str = "", section: str = DEFAULT_SECTION) -> bool:
        return self.set_value(key, codec.from_int(value), comment, section)

    def set_float(self, key: str, value: float, comment: str = "", section: str = DEFAULT_SECTION) -> bool:
        return self.set_value(key, codec.from_float(value), comment, section)

    def set_bool(self, key: str, value: bool, comment: str = "", section: str = DEFAULT_SECTION) -> bool:
        return self.set_value(key, codec.from_bool(value), comment, section)

    def set_key_comment(self, key: str, comment: str, section: str = DEFAULT_SECTION) -> bool:
        found = self.find_key(key, section)
        if found is None:
            return False
        found.comment = comment
        self._dirty = True
        return True

    def delete_key(self, key: str, section: str = DEFAULT_SECTION) -> bool:
        found = self.find_section(section)
        if found is None or not found.remove(key):
            return False
        self._dirty = True
        return True

    # ----- typed getters -----

    def _get_as(self, key: str, section: str, convert: Callable[[str], Any], default: Any) -> Any:
        try:
            return convert(self._require_key(key, section).value)
        except (NotFoundError, ParseError):
            return default

    def get_string(self, key: str, section: str = DEFAULT_SECTION, default: str | None = None) -> str | None:
        """Return the raw text of *key*, or ``default`` if it does not exist."""
        return self._get_as(key, section, str, default)

    def get_int(self, key: str, section: str = DEFAULT_SECTION, default: int | None = None) -> int | None:
        """Return *key* as an int.

        ``default`` is returned when the key is missing or its text is not a
        number.  Decimal text is truncated toward zero.
        """
        return self._get_as(key, section, codec.to_int, default)

    def get_float(self, key: str, section: str = DEFAULT_SECTION, default: float | None = None) -> float | None:
        return self._get_as(key, section, codec.to_float, default)

    def get_bool(self, key: str, section: str = DEFAULT_SECTION, default: bool | None = None) -> bool | None:
        """Return *key* as a bool.

        Text starting with ``1`` or equal to ``true``/``yes`` (any case) is
        True and every other value is False.  ``default`` is only used when
        the key is missing.
        """
        return self._get_as(key, section, codec.to_bool, default)

    # ----- persistence -----

    def load(self, file_name: str | PathLike[str] | None = None) -> bool:
        """Merge the contents of *file_name* (or the recorded file) into the document.

        Returns False without changing anything if the file cannot be read.
        """
        path = fspath(file_name) if file_name is not None else self._file_name
        if not path:
            self.report(Severity.INFO, "[load] No filename has been set.")
            return False
        try:
            entries = codec.read_file(path, self.dialect, self.encoding)
        except DataFileIOError as exc:
            self.report(Severity.INFO, f"[load] Unable to open file. Does it exist? ({exc})")
            return False

        if not self.has_section(DEFAULT_SECTION):
            self._sections.insert(0, Section(DEFAULT_SECTION))
        current = DEFAULT_SECTION
        with self.override_flags(self.flags | Flags.DEFAULT):
            for entry in entries:
                if entry.kind is EntryKind.SECTION:
                    self.create_section(entry.name, entry.comment)
                    current = entry.name
                else:
                    self.set_value(entry.name, entry.value, entry.comment, current)

        if not self._file_name:
            self._file_name = path
        self._dirty = False
        self.report(Severity.DEBUG, f"[load] Loaded {len(entries)} entries from <{path}>.")
        return True

    def is_empty(self) -> bool:
        """Return True if the document holds no sections and no keys."""
        return not self._sections and not self.key_count()

    def save(self, file_name: str | PathLike[str] | None = None) -> bool:
        """Write the whole document to *file_name* (or the recorded file).

        The target is truncated and rewritten in place.
        """
        if self.is_empty():
            self.report(Severity.INFO, "[save] Nothing to save.")
            return False
        path = fspath(file_name) if file_name is not None else self._file_name
        if not path:
            self.report(Severity.ERROR, "[save] No filename has been set.")
            return False
        try:
            codec.write_file(path, self._sections, self.dialect, self.encoding)
        except DataFileIOError as exc:
            self.report(Severity.ERROR, f"[save] Unable to save file. ({exc})")
            return False

        if not self._file_name:
            self._file_name = path
        self._dirty = False
        self.report(Severity.DEBUG, f"[save] Saved {self.key_count()} keys to <{path}>.")
        return True

    def close(self) -> bool:
        """Save if there are unsaved changes; returns False only if that save failed."""
        if not self._dirty:
            return True
        return self.save()

    # ----- protocol -----

    def __enter__(self) -> DataFile:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __del__(self) -> None:
        # auto-save on destruction; a failed save is only reported
        if getattr(self, "_dirty", False):
            self.close()

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has_section(name)

    def __iter__(self) -> Iterator[Section]:
        return iter(tuple(self._sections))

    def __repr__(self) -> str:
        return (
            f"DataFile({self._file_name!r}, sections={self.section_count()}, "
            f"keys={self.key_count()}, dirty={self._dirty})"
        )
