from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

DEFAULT_SECTION = ""


def same_name(a: str, b: str) -> bool:
    """Return True if section or key names *a* and *b* match ignoring case."""
    return a.casefold() == b.casefold()


@dataclass
class Key:
    name: str
    value: str = ""
    comment: str = ""

    def copy(self) -> Key:
        return Key(self.name, self.value, self.comment)


@dataclass
class Section:
    """An ordered group of keys.

    Key names are unique within a section under case-insensitive comparison.
    The section named ``""`` is the default section holding keys that appear
    before any header.
    """

    name: str = DEFAULT_SECTION
    comment: str = ""
    keys: list[Key] = field(default_factory=list)

    @property
    def is_default(self) -> bool:
        return self.name == DEFAULT_SECTION

    def index(self, name: str) -> int | None:
        for i, key in enumerate(self.keys):
            if same_name(key.name, name):
                return i
        return None

    def find(self, name: str) -> Key | None:
        i = self.index(name)
        return None if i is None else self.keys[i]

    def put(self, key: Key) -> None:
        """Append *key*, or replace an existing key with the same name in place."""
        i = self.index(key.name)
        if i is None:
            self.keys.append(key)
        else:
            self.keys[i] = key

    def remove(self, name: str) -> bool:
        i = self.index(name)
        if i is None:
            return False
        del self.keys[i]
        return True

    def names(self) -> list[str]:
        return [key.name for key in self.keys]

    def __iter__(self) -> Iterator[Key]:
        return iter(self.keys)

    def __len__(self) -> int:
        return len(self.keys)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.index(name) is not None


def find_section(sections: Iterable[Section], name: str) -> Section | None:
    for section in sections:
        if same_name(section.name, name):
            return section
    return None
