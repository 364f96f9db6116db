"""Tokeniser for TOML documents."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from .errors import TomlSyntaxError

_DIGITS = "0123456789"
_HEX_DIGITS = "0123456789ABCDEFabcdef"
_SIMPLE_ESCAPES = 'btnfr"\\'
_DATETIME_CHARS = frozenset("0123456789.:+-Tt Zz")
_BARE_CHARS = "0123456789+-_."
_WHITESPACE = "\r \t"


class TokenType(Enum):
    """The kinds of token the lexer produces."""

    INVALID = auto()
    DOT = auto()
    COMMA = auto()
    EQUAL = auto()
    LBRACE = auto()
    RBRACE = auto()
    NEWLINE = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    STRING = auto()


_PUNCTUATION = {
    ",": TokenType.COMMA,
    "=": TokenType.EQUAL,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "\n": TokenType.NEWLINE,
}


@dataclass(frozen=True)
class Token:
    """One token: its type, the line it starts on, and its text."""

    type: TokenType
    lineno: int
    pos: int
    text: str
    eof: bool = False


def _scan_digits(text: str, pos: int, count: int) -> int | None:
    chunk = text[pos : pos + count]
    if len(chunk) == count and all(c in _DIGITS for c in chunk):
        return int(chunk)
    return None


def scan_date(text: str, pos: int = 0) -> tuple[int, int, int] | None:
    """Read ``YYYY-MM-DD`` at ``pos``; return its parts or ``None``."""
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


def scan_time(text: str, pos: int = 0) -> tuple[int, int, int] | None:
    """Read ``HH:MM:SS`` at ``pos``; return its parts or ``None``."""
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


def _span(text: str, pos: int, chars: str) -> int:
    end = len(text)
    while pos < end and text[pos] in chars:
        pos += 1
    return pos


class Lexer:
    """Splits a TOML document into tokens, one ``advance`` at a time.

    The current token starts as an empty newline on line 1, so the first
    call to ``advance`` yields the first real token.
    """

    def __init__(self, text: str) -> None:
        self.text = text.split("\0", 1)[0]
        self.token = Token(TokenType.NEWLINE, 1, 0, "")

    def advance(self, dot_is_special: bool) -> Token:
        """Consume the current token and return the next one."""
        current = self.token
        text = self.text
        end = len(text)
        pos = current.pos + len(current.text)
        lineno = current.lineno + current.text.count("\n")

        while pos < end:
            ch = text[pos]
            if ch == "#":
                newline = text.find("\n", pos)
                pos = end if newline < 0 else newline
                continue
            if dot_is_special and ch == ".":
                return self._set(TokenType.DOT, lineno, pos, 1)
            kind = _PUNCTUATION.get(ch)
            if kind is not None:
                return self._set(kind, lineno, pos, 1)
            if ch in _WHITESPACE:
                pos += 1
                continue
            return self._scan_string(pos, lineno, dot_is_special)

        self.token = Token(TokenType.NEWLINE, lineno, end, "", eof=True)
        return self.token

    def _set(self, kind: TokenType, lineno: int, pos: int, length: int) -> Token:
        self.token = Token(kind, lineno, pos, self.text[pos : pos + length])
        return self.token

    def _scan_escapes(self, pos: int, stop: int, lineno: int, multiline: bool) -> int:
        text = self.text
        hexreq = 0
        escape = False
        while pos < stop:
            ch = text[pos]
            if escape:
                escape = False
                if ch in _SIMPLE_ESCAPES:
                    pass
                elif ch == "u":
                    hexreq = 4
                elif ch == "U":
                    hexreq = 8
                elif multiline and text[_span(text, pos, " \t\r") :][:1] == "\n":
                    pass
                else:
                    raise TomlSyntaxError("bad escape char", lineno)
            elif hexreq:
                hexreq -= 1
                if ch not in _HEX_DIGITS:
                    raise TomlSyntaxError("expect hex char", lineno)
            elif ch == "\\":
                escape = True
            elif not multiline and ch in '\n"':
                break
            pos += 1
        if multiline:
            if escape:
                raise TomlSyntaxError("expect an escape char", lineno)
            if hexreq:
                raise TomlSyntaxError("expected more hex char", lineno)
        return pos

    @staticmethod
    def _skip_extra_quotes(text: str, q: int, quote: str, lineno: int, message: str) -> int:
        extra = 0
        while text[q + 3 : q + 4] == quote:
            extra += 1
            if extra >= 3:
                raise TomlSyntaxError(message, lineno)
            q += 1
        return q

    def _scan_string(self, start: int, lineno: int, dot_is_special: bool) -> Token:
        text = self.text
        end = len(text)

        if text.startswith("'''", start):
            q = text.find("'''", start + 3)
            if q < 0:
                raise TomlSyntaxError("unterminated triple-s-quote", lineno)
            q = self._skip_extra_quotes(text, q, "'", lineno, "too many ''' in triple-s-quote")
            return self._set(TokenType.STRING, lineno, start, q + 3 - start)

        if text.startswith('"""', start):
            q = start + 3
            while True:
                q = text.find('"""', q)
                if q < 0:
                    raise TomlSyntaxError("unterminated triple-d-quote", lineno)
                if text[q - 1] == "\\":
                    q += 1
                    continue
                break
            q = self._skip_extra_quotes(text, q, '"', lineno, 'too many """ in triple-d-quote')
            self._scan_escapes(start + 3, q, lineno, multiline=True)
            return self._set(TokenType.STRING, lineno, start, q + 3 - start)

        if text[start] == "'":
            pos = start + 1
            while pos < end and text[pos] not in "\n'":
                pos += 1
            if pos >= end or text[pos] != "'":
                raise TomlSyntaxError("unterminated s-quote", lineno)
            return self._set(TokenType.STRING, lineno, start, pos + 1 - start)

        if text[start] == '"':
            pos = self._scan_escapes(start + 1, end, lineno, multiline=False)
            if pos >= end or text[pos] != '"':
                raise TomlSyntaxError("unterminated quote", lineno)
            return self._set(TokenType.STRING, lineno, start, pos + 1 - start)

        if scan_date(text, start) is not None or scan_time(text, start) is not None:
            pos = start
            while pos < end and text[pos] in _DATETIME_CHARS:
                pos += 1
            while text[pos - 1] == " ":
                pos -= 1
            return self._set(TokenType.STRING, lineno, start, pos - start)

        pos = start
        while pos < end and text[pos] != "\n":
            ch = text[pos]
            if ch == "." and dot_is_special:
                break
            if "A" <= ch <= "Z" or "a" <= ch <= "z" or ch in _BARE_CHARS:
                pos += 1
                continue
            break
        return self._set(TokenType.STRING, lineno, start, pos - start)