"""Conversion of raw TOML value text into Python values."""

from __future__ import annotations

import math
import re
import sys
from dataclasses import dataclass
from enum import Enum

from .errors import TomlError

_DIGITS = "0123456789"
_HEX_DIGITS = "0123456789abcdefABCDEF"
_CONTROL_CODES = frozenset(range(0x00, 0x09)) | frozenset(range(0x0A, 0x20)) | {0x7F}
_ESCAPES = {
    "b": "\b",
    "t": "\t",
    "n": "\n",
    "f": "\f",
    "r": "\r",
    '"': '"',
    "\\": "\\",
}
# Numbers whose text (with underscores removed) reaches this length are refused.
_NUMBER_TEXT_LIMIT = 100
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_INT_PATTERNS = {
    10: re.compile(r"[+-]?[0-9]+"),
    16: re.compile(r"[+-]?(?:0[xX])?[0-9a-fA-F]+"),
    8: re.compile(r"[+-]?[0-7]+"),
    2: re.compile(r"[+-]?[01]+"),
}
_INT_PREFIXES = {"x": 16, "o": 8, "b": 2}
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


class TimestampKind(Enum):
    """Which parts of a date and time a timestamp carries."""

    OFFSET_DATETIME = "d"
    LOCAL_DATETIME = "l"
    LOCAL_DATE = "D"
    LOCAL_TIME = "t"


class ValueType(Enum):
    """The type a raw value text is recognised as."""

    STRING = "s"
    BOOL = "b"
    INT = "i"
    DOUBLE = "d"
    TIMESTAMP = "T"
    DATE = "D"
    TIME = "t"
    UNKNOWN = "u"
    MIXED = "m"


@dataclass(frozen=True)
class Timestamp:
    """A TOML date, time or datetime; unused fields stay zero."""

    kind: TimestampKind
    year: int = 0
    month: int = 0
    day: int = 0
    hour: int = 0
    minute: int = 0
    second: int = 0
    millisec: int = 0
    z: str | None = None


def is_leap(year: int) -> bool:
    """Return whether ``year`` is a Gregorian leap year."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def encode_unicode_escape(code: int) -> str:
    """Return the character for a ``\\u``/``\\U`` escape code."""
    if 0xD800 <= code <= 0xDFFF or code > 0x10FFFF or code < 0:
        raise TomlError("illegal ucs code in \\u or \\U")
    return chr(code)


def _check_plain_char(ch: str, multiline: bool, is_key: bool) -> None:
    if is_key and ch == "\n":
        raise TomlError("literal newlines not allowed in key")
    code = ord(ch)
    if code in _CONTROL_CODES and not (multiline and ch in "\r\n"):
        raise TomlError(f"invalid char U+{code:04x}")


def normalize_literal(src: str, multiline: bool = False, is_key: bool = False) -> str:
    """Validate the body of a literal string and return it unchanged."""
    for ch in src:
        _check_plain_char(ch, multiline, is_key)
    return src


def normalize_basic(src: str, multiline: bool = False, is_key: bool = False) -> str:
    """Resolve the escapes in the body of a basic string."""
    out: list[str] = []
    pos = 0
    end = len(src)
    while pos < end:
        ch = src[pos]
        pos += 1
        if ch != "\\":
            _check_plain_char(ch, multiline, is_key)
            out.append(ch)
            continue

        if pos >= end:
            raise TomlError("last backslash is invalid")

        if multiline:
            ahead = pos
            while ahead < end and src[ahead] in " \t\r":
                ahead += 1
            if ahead < end and src[ahead] == "\n":
                while pos < end and src[pos] in " \t\r\n":
                    pos += 1
                continue

        esc = src[pos]
        pos += 1
        if esc in "uU":
            nhex = 4 if esc == "u" else 8
            hex_part = src[pos : pos + nhex]
            if any(d not in _HEX_DIGITS for d in hex_part):
                raise TomlError("invalid hex chars for \\u or \\U")
            if len(hex_part) < nhex:
                raise TomlError(f"\\{esc} expects {nhex} hex chars")
            pos += nhex
            out.append(encode_unicode_escape(int(hex_part, 16)))
            continue

        try:
            out.append(_ESCAPES[esc])
        except KeyError:
            raise TomlError(f"illegal escape char \\{esc}") from None
    return "".join(out)


def parse_string(raw: str) -> str:
    """Convert a quoted raw value into its string."""
    if not raw or raw[0] not in "'\"":
        raise TomlError("not a string")
    quote = raw[0]
    triple = quote * 3
    if raw.startswith(triple):
        if len(raw) < 6 or not raw.endswith(triple):
            raise TomlError("unterminated string")
        body = raw[3:-3]
        if body.startswith("\n"):
            body = body[1:]
        elif body.startswith("\r\n"):
            body = body[2:]
        multiline = True
    else:
        if len(raw) < 2 or raw[-1] != quote:
            raise TomlError("unterminated string")
        body = raw[1:-1]
        multiline = False

    if quote == "'":
        return normalize_literal(body, multiline, False)
    return normalize_basic(body, multiline, False)


def parse_bool(raw: str) -> bool:
    """Convert ``true`` or ``false``."""
    if raw == "true":
        return True
    if raw == "false":
        return False
    raise TomlError(f"not a boolean: {raw!r}")


def _strip_underscores(text: str, forbid_before_e: bool = False) -> str:
    for index, ch in enumerate(text):
        if ch != "_":
            continue
        following = text[index + 1 : index + 2]
        if following in ("_", ""):
            raise TomlError("misplaced underscore")
        if forbid_before_e and following == "e":
            raise TomlError("misplaced underscore")
    return text.replace("_", "")


def parse_int(raw: str) -> int:
    """Convert a raw integer, honouring TOML's prefixes and underscores."""
    text = raw
    sign = ""
    if text[:1] in ("+", "-") and text:
        sign, text = text[0], text[1:]
    if text.startswith("_"):
        raise TomlError("integer may not start with '_'")

    base = 10
    if text.startswith("0"):
        prefix = text[1:2]
        if prefix == "":
            return 0
        if prefix not in _INT_PREFIXES:
            raise TomlError("leading zeros are not allowed")
        base = _INT_PREFIXES[prefix]
        text = text[2:]
        if not text or sign or text.startswith("_"):
            raise TomlError("bad prefixed integer")

    buf = sign + _strip_underscores(text)
    if len(buf) >= _NUMBER_TEXT_LIMIT:
        raise TomlError("integer too long")
    if not buf:
        return 0
    if not buf.isascii() or not _INT_PATTERNS[base].fullmatch(buf):
        raise TomlError(f"not an integer: {raw!r}")
    value = int(buf, base)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise TomlError("integer out of range")
    return value


def _is_digit(ch: str) -> bool:
    return len(ch) == 1 and ch in _DIGITS


def parse_float(raw: str) -> float:
    """Convert a raw float, including ``inf`` and ``nan``."""
    text = raw
    sign = ""
    if text[:1] in ("+", "-") and text:
        sign, text = text[0], text[1:]
    if text.startswith("_"):
        raise TomlError("float may not start with '_'")

    dot = text.find(".")
    if dot >= 0 and (dot == 0 or not _is_digit(text[dot - 1]) or not _is_digit(text[dot + 1 : dot + 2])):
        raise TomlError("decimal point must be surrounded by digits")

    if text.startswith("0") and len(text) > 1 and text[1] not in "eE.":
        raise TomlError("leading zeros are not allowed")

    for index, ch in enumerate(text):
        if ch in "INFA":
            raise TomlError("inf and nan must be lower case")
        if ch == "e" and text[index + 1 : index + 2] == "_":
            raise TomlError("misplaced underscore")
    had_underscore = "_" in text
    buf = sign + _strip_underscores(text, forbid_before_e=True)

    if len(buf) >= _NUMBER_TEXT_LIMIT:
        raise TomlError("float too long")
    if not buf:
        return 0.0
    if not buf.isascii() or not _FLOAT_PATTERN.fullmatch(buf):
        raise TomlError(f"not a float: {raw!r}")

    value = float(buf)
    unsigned = buf.lstrip("+-").lower()
    special = unsigned.startswith(("inf", "nan"))
    if not special:
        if math.isinf(value):
            raise TomlError("float out of range")
        mantissa = unsigned.split("e")[0]
        if value == 0.0 and re.search(r"[1-9]", mantissa):
            raise TomlError("float out of range")
        if 0.0 < abs(value) < sys.float_info.min:
            raise TomlError("float out of range")
    if had_underscore and (math.isnan(value) or math.isinf(value)):
        raise TomlError("underscores not allowed in inf or nan")
    return value


def _scan_digits(text: str, pos: int, count: int) -> int | None:
    chunk = text[pos : pos + count]
    if len(chunk) == count and all(c in _DIGITS for c in chunk):
        return int(chunk)
    return None


def _scan_date(text: str, pos: int) -> tuple[int, int, int] | None:
    year = _scan_digits(text, pos, 4)
    if year is None or text[pos + 4 : pos + 5] != "-":
        return None
    month = _scan_digits(text, pos + 5, 2)
    if month is None or text[pos + 7 : pos + 8] != "-":
        return None
    day = _scan_digits(text, pos + 8, 2)
    if day is None:
        return None
    return year, month, day


def _scan_time(text: str, pos: int) -> tuple[int, int, int] | None:
    hour = _scan_digits(text, pos, 2)
    if hour is None or text[pos + 2 : pos + 3] != ":":
        return None
    minute = _scan_digits(text, pos + 3, 2)
    if minute is None or text[pos + 5 : pos + 6] != ":":
        return None
    second = _scan_digits(text, pos + 6, 2)
    if second is None:
        return None
    return hour, minute, second


def parse_timestamp(raw: str) -> Timestamp:
    """Convert a raw date, time or datetime."""
    bad = TomlError(f"not a timestamp: {raw!r}")
    end = len(raw)
    pos = 0
    kind: TimestampKind | None = None
    year = month = day = 0
    hour = minute = second = millisec = 0
    zone: str | None = None
    must_parse_time = False

    date = _scan_date(raw, 0)
    if date is not None:
        year, month, day = date
        if not (1 <= month <= 12 and 1 <= day <= 31):
            raise bad
        if month == 2 and day > (29 if is_leap(year) else 28):
            raise bad
        kind = TimestampKind.LOCAL_DATE
        pos = 10
        if pos < end:
            if raw[pos] not in "Tt ":
                raise bad
            must_parse_time = True
            pos += 1

    time = _scan_time(raw, pos)
    if time is not None:
        hour, minute, second = time
        if hour > 23 or minute > 59 or second > 60:
            raise bad
        kind = TimestampKind.LOCAL_DATETIME if kind is TimestampKind.LOCAL_DATE else TimestampKind.LOCAL_TIME
        pos += 8

        if raw[pos : pos + 1] == ".":
            pos += 1
            unit = 100
            while pos < end and raw[pos] in _DIGITS:
                millisec += int(raw[pos]) * unit
                unit //= 10
                pos += 1

        if pos < end:
            kind = TimestampKind.OFFSET_DATETIME
            if raw[pos] in "Zz":
                zone = "Z"
                pos += 1
            elif raw[pos] in "+-":
                start = pos
                pos += 1
                if _scan_digits(raw, pos, 2) is None:
                    raise bad
                pos += 2
                if raw[pos : pos + 1] == ":":
                    pos += 1
                    if _scan_digits(raw, pos, 2) is None:
                        raise bad
                    pos += 2
                zone = raw[start:pos]

    if pos != end or kind is None:
        raise bad
    if must_parse_time and kind is TimestampKind.LOCAL_DATE:
        raise bad
    return Timestamp(kind, year, month, day, hour, minute, second, millisec, zone)


def value_type(raw: str) -> ValueType:
    """Recognise the type of a raw value text."""
    if raw[:1] in ("'", '"') and raw:
        return ValueType.STRING
    for parser, kind in (
        (parse_bool, ValueType.BOOL),
        (parse_int, ValueType.INT),
        (parse_float, ValueType.DOUBLE),
    ):
        try:
            parser(raw)
        except TomlError:
            continue
        return kind
    try:
        ts = parse_timestamp(raw)
    except TomlError:
        return ValueType.UNKNOWN
    if ts.year and ts.hour:
        return ValueType.TIMESTAMP
    if ts.year:
        return ValueType.DATE
    return ValueType.TIME