"""The tables and arrays a parsed TOML document is made of."""

from __future__ import annotations

import builtins
from enum import Enum
from typing import Callable, TypeVar, Union

from .errors import TomlError
from .values import (
    Timestamp,
    ValueType,
    parse_bool,
    parse_float,
    parse_int,
    parse_string,
    parse_timestamp,
    value_type,
)

_T = TypeVar("_T")


class ArrayKind(Enum):
    """What an array holds, or what a table entry is."""

    VALUE = "v"
    ARRAY = "a"
    TABLE = "t"
    MIXED = "m"


def _convert(raw: str | None, parser: Callable[[str], _T]) -> _T | None:
    if raw is None:
        return None
    try:
        return parser(raw)
    except TomlError:
        return None


class Table:
    """A TOML table: raw values, arrays and sub-tables, each keyed uniquely.

    Keys are listed values first, then arrays, then tables, each group in
    the order it was added.
    """

    def __init__(self, key: str | None = None, implicit: builtins.bool = False) -> None:
        self.key = key
        self.implicit = implicit
        self.readonly = False
        self._values: dict[str, str] = {}
        self._arrays: dict[str, Array] = {}
        self._tables: dict[str, Table] = {}

    def __len__(self) -> builtins.int:
        return len(self._values) + len(self._arrays) + len(self._tables)

    def __repr__(self) -> str:
        return f"Table(key={self.key!r}, keys={self.keys()!r})"

    def keys(self) -> list[str]:
        """Return every direct key of this table."""
        return [*self._values, *self._arrays, *self._tables]

    def key(self, index: builtins.int) -> str:
        """Return the key at ``index``."""
        keys = self.keys()
        if not 0 <= index < len(keys):
            raise IndexError(f"table key index out of range: {index}")
        return keys[index]

    def kind_of(self, key: str) -> ArrayKind | None:
        """Return whether ``key`` names a value, an array or a table."""
        if key in self._values:
            return ArrayKind.VALUE
        if key in self._arrays:
            return ArrayKind.ARRAY
        if key in self._tables:
            return ArrayKind.TABLE
        return None

    def unparsed(self, key: str) -> str | None:
        """Return the raw text of the value at ``key``."""
        return self._values.get(key)

    def string(self, key: str) -> str | None:
        return _convert(self.unparsed(key), parse_string)

    def bool(self, key: str) -> builtins.bool | None:
        return _convert(self.unparsed(key), parse_bool)

    def int(self, key: str) -> builtins.int | None:
        return _convert(self.unparsed(key), parse_int)

    def double(self, key: str) -> float | None:
        return _convert(self.unparsed(key), parse_float)

    def timestamp(self, key: str) -> Timestamp | None:
        return _convert(self.unparsed(key), parse_timestamp)

    def array(self, key: str) -> Array | None:
        return self._arrays.get(key)

    def table(self, key: str) -> Table | None:
        return self._tables.get(key)

    def _ensure_new(self, key: str) -> None:
        if self.kind_of(key) is not None:
            raise TomlError("key exists")

    def add_value(self, key: str, raw: str) -> None:
        """Store the raw text of a new value."""
        self._ensure_new(key)
        self._values[key] = raw

    def add_array(self, key: str, kind: ArrayKind | None = None) -> Array:
        """Create a new array under ``key``."""
        self._ensure_new(key)
        arr = Array(key, kind)
        self._arrays[key] = arr
        return arr

    def add_table(self, key: str, implicit: builtins.bool = False) -> Table:
        """Create a table under ``key``.

        A table made implicitly earlier becomes explicit and is returned.
        """
        if self.kind_of(key) is not None:
            existing = self._tables.get(key)
            if existing is not None and existing.implicit and not implicit:
                existing.implicit = False
                return existing
            raise TomlError("key exists")
        tab = Table(key, implicit)
        self._tables[key] = tab
        return tab


_Item = Union[str, "Array", Table]


class Array:
    """A TOML array of raw values, arrays and tables."""

    def __init__(self, key: str | None = None, kind: ArrayKind | None = None) -> None:
        self.key = key
        self.kind = kind
        self.type: ValueType | None = None
        self._items: list[_Item] = []

    def __len__(self) -> builtins.int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Array(key={self.key!r}, kind={self.kind}, len={len(self)})"

    def _item(self, index: builtins.int) -> _Item | None:
        if 0 <= index < len(self._items):
            return self._items[index]
        return None

    def unparsed(self, index: builtins.int) -> str | None:
        """Return the raw text of the value at ``index``."""
        item = self._item(index)
        return item if isinstance(item, str) else None

    def string(self, index: builtins.int) -> str | None:
        return _convert(self.unparsed(index), parse_string)

    def bool(self, index: builtins.int) -> builtins.bool | None:
        return _convert(self.unparsed(index), parse_bool)

    def int(self, index: builtins.int) -> builtins.int | None:
        return _convert(self.unparsed(index), parse_int)

    def double(self, index: builtins.int) -> float | None:
        return _convert(self.unparsed(index), parse_float)

    def timestamp(self, index: builtins.int) -> Timestamp | None:
        return _convert(self.unparsed(index), parse_timestamp)

    def array(self, index: builtins.int) -> Array | None:
        item = self._item(index)
        return item if isinstance(item, Array) else None

    def table(self, index: builtins.int) -> Table | None:
        item = self._item(index)
        return item if isinstance(item, Table) else None

    def _note_kind(self, kind: ArrayKind) -> None:
        if self.kind is None:
            self.kind = kind
        elif self.kind is not kind:
            self.kind = ArrayKind.MIXED

    def append_value(self, raw: str) -> None:
        """Append the raw text of a value, tracking the element type."""
        self._note_kind(ArrayKind.VALUE)
        vtype = value_type(raw)
        if not self._items:
            self.type = vtype
        elif self.type is not vtype:
            self.type = ValueType.MIXED
        self._items.append(raw)

    def append_array(self) -> Array:
        """Append and return a new, empty sub-array."""
        self._note_kind(ArrayKind.ARRAY)
        sub = Array()
        self._items.append(sub)
        return sub

    def append_table(self) -> Table:
        """Append and return a new, empty table."""
        self._note_kind(ArrayKind.TABLE)
        tab = Table()
        self._items.append(tab)
        return tab