"""A small TOML parser with typed value accessors and a TOML-to-JSON converter."""

__version__ = "1.0.0"
__all__ = ["errors", "values", "lexer", "model", "parser", "toml2json"]