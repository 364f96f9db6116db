"""Render parsed TOML documents as typed JSON, as used by the TOML test suite."""

from __future__ import annotations

import math
import sys
from typing import IO, Sequence

from .errors import TomlError
from .model import Array, ArrayKind, Table
from .parser import parse_file
from .values import TimestampKind, parse_bool, parse_float, parse_int, parse_string, parse_timestamp

_NAMED_ESCAPES = {
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
    '"': '\\"',
    "\\": "\\\\",
}


def escape_string(text: str) -> str:
    """Escape ``text`` for use inside a JSON string literal."""
    parts = []
    for ch in text:
        named = _NAMED_ESCAPES.get(ch)
        if named is not None:
            parts.append(named)
        elif ord(ch) <= 0x1F:
            parts.append(f"\\u00{ord(ch):02X}")
        else:
            parts.append(ch)
    return "".join(parts)


def _typed(kind: str, value: str) -> str:
    return f'{{"type": "{kind}","value": "{value}"}}'


def _try(parser, raw: str):
    try:
        return True, parser(raw)
    except TomlError:
        return False, None


def raw_to_json(raw: str) -> str:
    """Render one raw value as a ``{"type": ..., "value": ...}`` object."""
    ok, text = _try(parse_string, raw)
    if ok:
        return _typed("string", escape_string(text))
    ok, number = _try(parse_int, raw)
    if ok:
        return _typed("integer", str(number))
    ok, flag = _try(parse_bool, raw)
    if ok:
        return _typed("bool", "true" if flag else "false")
    ok, real = _try(parse_float, raw)
    if ok:
        if math.isnan(real):
            return _typed("float", "nan")
        return _typed("float", f"{real:.17g}")
    ok, ts = _try(parse_timestamp, raw)
    if ok:
        millisec = f".{ts.millisec:03d}" if ts.millisec else ""
        if ts.kind in (TimestampKind.OFFSET_DATETIME, TimestampKind.LOCAL_DATETIME):
            kind = "datetime" if ts.z is not None else "datetime-local"
            value = (
                f"{ts.year:04d}-{ts.month:02d}-{ts.day:02d}"
                f"T{ts.hour:02d}:{ts.minute:02d}:{ts.second:02d}{millisec}{ts.z or ''}"
            )
            return _typed(kind, value)
        if ts.kind is TimestampKind.LOCAL_DATE:
            return _typed("date-local", f"{ts.year:04d}-{ts.month:02d}-{ts.day:02d}")
        return _typed("time-local", f"{ts.hour:02d}:{ts.minute:02d}:{ts.second:02d}{millisec}")
    raise TomlError("unknown type")


def table_to_json(table: Table) -> str:
    """Render a table and everything below it."""
    entries = []
    for key in table.keys():
        raw = table.unparsed(key)
        if raw is not None:
            rendered = raw_to_json(raw)
        else:
            arr = table.array(key)
            if arr is not None:
                rendered = array_to_json(arr)
            else:
                sub = table.table(key)
                if sub is None:
                    raise TomlError(f"no value for key {key!r}")
                rendered = table_to_json(sub)
        entries.append(f'"{escape_string(key)}":{rendered}')
    return "{" + ",\n".join(entries) + "}"


def _table_array_to_json(array: Array) -> str:
    tables = []
    for index in range(len(array)):
        tab = array.table(index)
        if tab is None:
            break
        tables.append(table_to_json(tab))
    return "[" + ",".join(tables) + "]"


def array_to_json(array: Array) -> str:
    """Render an array and everything below it."""
    if array.kind is ArrayKind.TABLE:
        return _table_array_to_json(array)
    items = []
    for index in range(len(array)):
        sub = array.array(index)
        if sub is not None:
            items.append(array_to_json(sub))
            continue
        tab = array.table(index)
        if tab is not None:
            items.append(table_to_json(tab))
            continue
        raw = array.unparsed(index)
        if raw is not None:
            items.append(raw_to_json(raw))
            continue
        raise TomlError("unable to decode value in array")
    return "[" + ",".join(items) + "]"


def convert(fp: IO[str] | IO[bytes]) -> str:
    """Parse the TOML document in ``fp`` and return its JSON rendering."""
    return table_to_json(parse_file(fp)) + "\n"


def main(argv: Sequence[str] | None = None) -> int:
    """Convert each named file, or standard input, and print the JSON."""
    paths = list(sys.argv[1:] if argv is None else argv)
    try:
        if not paths:
            source = getattr(sys.stdin, "buffer", sys.stdin)
            sys.stdout.write(convert(source))
            return 0
        for path in paths:
            try:
                fp = open(path, "rb")
            except OSError as exc:
                sys.stderr.write(f"ERROR: cannot open {path}: {exc.strerror}\n")
                return 1
            with fp:
                sys.stdout.write(convert(fp))
    except TomlError as exc:
        sys.stdout.flush()
        sys.stderr.write(f"ERROR: {exc}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())