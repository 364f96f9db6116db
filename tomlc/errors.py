"""Exceptions raised while reading TOML documents and values."""

from __future__ import annotations


class TomlError(ValueError):
    """A TOML document or value could not be read.

    ``lineno`` is the line of the document the problem was found on, or
    ``None`` when the error concerns a lone value.
    """

    def __init__(self, message: str, lineno: int | None = None) -> None:
        self.message = message
        self.lineno = lineno
        super().__init__(self._render())

    def _render(self) -> str:
        if self.lineno is None:
            return self.message
        return f"line {self.lineno}: {self.message}"

    def __str__(self) -> str:
        return self._render()


class TomlSyntaxError(TomlError):
    """The document does not follow TOML syntax."""