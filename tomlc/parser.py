"""Parser that builds a table tree from a TOML document."""

from __future__ import annotations

from contextlib import contextmanager
from typing import IO, Iterator

from .errors import TomlError, TomlSyntaxError
from .lexer import Lexer, Token, TokenType
from .model import Array, ArrayKind, Table
from .values import normalize_basic, normalize_literal

_MAX_TABLE_PATH = 10
_ANONYMOUS_KEY = "__anon__"


@contextmanager
def _located(lineno: int) -> Iterator[None]:
    """Report value and model errors as syntax errors on ``lineno``."""
    try:
        yield
    except TomlSyntaxError:
        raise
    except TomlError as exc:
        raise TomlSyntaxError(exc.message, lineno) from None


def _is_bare_key_char(ch: str) -> bool:
    return (ch.isascii() and ch.isalnum()) or ch in "_-"


class Parser:
    """Reads one TOML document into a tree of tables and arrays."""

    def __init__(self, text: str) -> None:
        self.lexer = Lexer(text)
        self.root = Table()
        self.current = self.root

    @property
    def _token(self) -> Token:
        return self.lexer.token

    def _advance(self, dot_is_special: bool) -> Token:
        return self.lexer.advance(dot_is_special)

    def _eat(self, kind: TokenType, dot_is_special: bool) -> None:
        if self._token.type is not kind:
            raise TomlError(f"internal error: expected {kind.name}")
        self._advance(dot_is_special)

    def _syntax(self, message: str, lineno: int | None = None) -> TomlSyntaxError:
        return TomlSyntaxError(message, self._token.lineno if lineno is None else lineno)

    def parse(self) -> Table:
        """Parse the whole document and return its root table."""
        while not self._token.eof:
            token = self._token
            if token.type is TokenType.NEWLINE:
                self._advance(True)
            elif token.type is TokenType.STRING:
                self._parse_keyval(self.current)
                if self._token.type is not TokenType.NEWLINE:
                    raise self._syntax("extra chars after value")
                self._eat(TokenType.NEWLINE, True)
            elif token.type is TokenType.LBRACKET:
                self._parse_select()
            else:
                raise self._syntax("syntax error", token.lineno)
        return self.root

    def _normalize_key(self, token: Token) -> str:
        text = token.text
        quote = text[:1]
        if quote in ("'", '"'):
            if text[1:3] == quote * 2:
                body = text[3:-3]
                multiline = True
            else:
                body = text[1:-1]
                multiline = False
            normalize = normalize_literal if quote == "'" else normalize_basic
            with _located(token.lineno):
                return normalize(body, multiline, True)
        if not all(_is_bare_key_char(ch) for ch in text):
            raise TomlSyntaxError("bad key", token.lineno)
        return text

    def _create_table(self, tab: Table, key_token: Token) -> Table:
        key = self._normalize_key(key_token)
        with _located(key_token.lineno):
            return tab.add_table(key)

    def _create_array(self, tab: Table, key_token: Token, kind: ArrayKind | None) -> Array:
        key = self._normalize_key(key_token)
        with _located(key_token.lineno):
            return tab.add_array(key, kind)

    def _parse_keyval(self, tab: Table) -> None:
        if tab.readonly:
            raise self._syntax("cannot insert new entry into existing table")

        key = self._token
        self._eat(TokenType.STRING, True)

        if self._token.type is TokenType.DOT:
            subtab = tab.table(self._normalize_key(key))
            if subtab is None:
                subtab = self._create_table(tab, key)
            self._advance(True)
            self._parse_keyval(subtab)
            return

        if self._token.type is not TokenType.EQUAL:
            raise self._syntax("missing =")

        value = self._advance(False)
        if value.type is TokenType.STRING:
            name = self._normalize_key(key)
            with _located(key.lineno):
                tab.add_value(name, value.text)
            self._advance(True)
        elif value.type is TokenType.LBRACKET:
            self._parse_array(self._create_array(tab, key, None))
        elif value.type is TokenType.LBRACE:
            self._parse_inline_table(self._create_table(tab, key))
        else:
            raise self._syntax("syntax error")

    def _parse_inline_table(self, tab: Table) -> None:
        self._eat(TokenType.LBRACE, True)
        while True:
            if self._token.type is TokenType.NEWLINE:
                raise self._syntax("newline not allowed in inline table")
            if self._token.type is TokenType.RBRACE:
                break
            if self._token.type is not TokenType.STRING:
                raise self._syntax("expect a string")
            self._parse_keyval(tab)
            if self._token.type is TokenType.NEWLINE:
                raise self._syntax("newline not allowed in inline table")
            if self._token.type is TokenType.COMMA:
                self._eat(TokenType.COMMA, True)
                continue
            break
        self._eat(TokenType.RBRACE, True)
        tab.readonly = True

    def _skip_newlines(self, dot_is_special: bool) -> None:
        while self._token.type is TokenType.NEWLINE:
            if self._advance(dot_is_special).eof:
                break

    def _parse_array(self, arr: Array) -> None:
        self._eat(TokenType.LBRACKET, False)
        while True:
            self._skip_newlines(False)
            token = self._token
            if token.type is TokenType.RBRACKET:
                break
            if token.type is TokenType.STRING:
                arr.append_value(token.text)
                self._advance(False)
            elif token.type is TokenType.LBRACKET:
                self._parse_array(arr.append_array())
            elif token.type is TokenType.LBRACE:
                self._parse_inline_table(arr.append_table())
            else:
                raise self._syntax("syntax error")

            self._skip_newlines(False)
            if self._token.type is TokenType.COMMA:
                self._eat(TokenType.COMMA, False)
                continue
            break
        self._eat(TokenType.RBRACKET, True)

    def _fill_table_path(self) -> list[tuple[str, Token]]:
        path: list[tuple[str, Token]] = []
        while True:
            if len(path) >= _MAX_TABLE_PATH:
                raise self._syntax("table path is too deep; max allowed is 10.")
            token = self._token
            if token.type is not TokenType.STRING:
                raise self._syntax("invalid or missing key")
            path.append((self._normalize_key(token), token))

            if self._advance(True).type is TokenType.RBRACKET:
                break
            if self._token.type is not TokenType.DOT:
                raise self._syntax("invalid key")
            self._advance(True)
        return path

    def _walk_table_path(self, path: list[tuple[str, Token]]) -> Table:
        current = self.root
        for key, token in path:
            kind = current.kind_of(key)
            if kind is ArrayKind.TABLE:
                nxt = current.table(key)
            elif kind is ArrayKind.ARRAY:
                arr = current.array(key)
                if arr is None or arr.kind is not ArrayKind.TABLE or len(arr) == 0:
                    raise TomlError("internal error: array is not an array of tables")
                nxt = arr.table(len(arr) - 1)
            elif kind is ArrayKind.VALUE:
                raise TomlSyntaxError("key exists", token.lineno)
            else:
                nxt = current.add_table(key, implicit=True)
            if nxt is None:
                raise TomlError("internal error: missing table")
            current = nxt
        return current

    def _next_char_is(self, token: Token, ch: str) -> bool:
        return self.lexer.text[token.pos + 1 : token.pos + 2] == ch

    def _parse_select(self) -> None:
        double = self._next_char_is(self._token, "[")

        self._eat(TokenType.LBRACKET, True)
        if double:
            self._eat(TokenType.LBRACKET, True)

        path = self._fill_table_path()
        last_key, last_token = path.pop()
        parent = self._walk_table_path(path)

        if not double:
            self.current = self._create_table(parent, last_token)
        else:
            arr = parent.array(last_key)
            if arr is None:
                arr = self._create_array(parent, last_token, ArrayKind.TABLE)
            if arr.kind is not ArrayKind.TABLE:
                raise TomlSyntaxError("array mismatch", last_token.lineno)
            dest = arr.append_table()
            dest.key = _ANONYMOUS_KEY
            self.current = dest

        if self._token.type is not TokenType.RBRACKET:
            raise self._syntax("expects ]")
        if double:
            if not self._next_char_is(self._token, "]"):
                raise self._syntax("expects ]]")
            self._eat(TokenType.RBRACKET, True)
        self._eat(TokenType.RBRACKET, True)
        if self._token.type is not TokenType.NEWLINE:
            raise self._syntax("extra chars after ] or ]]")


def parse(text: str) -> Table:
    """Parse a TOML document held in a string."""
    return Parser(text).parse()


def parse_file(fp: IO[str] | IO[bytes]) -> Table:
    """Read a whole text or binary stream and parse it as TOML."""
    try:
        data = fp.read()
    except OSError as exc:
        raise TomlError(exc.strerror or "Error reading file") from exc
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TomlError(f"invalid UTF-8 at byte pos {exc.start}") from None
    return parse(data)