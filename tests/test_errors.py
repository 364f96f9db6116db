import pytest

from tomlc.errors import TomlError, TomlSyntaxError


def test_message_with_line_number():
    err = TomlError("bad key", 3)
    assert str(err) == "line 3: bad key"
    assert err.message == "bad key"
    assert err.lineno == 3


def test_message_without_line_number():
    err = TomlError("out of memory")
    assert str(err) == "out of memory"
    assert err.lineno is None


def test_syntax_error_caught_as_toml_error():
    err = TomlSyntaxError("key exists", 7)
    assert isinstance(err, TomlError)
    assert str(err) == "line 7: key exists"
    assert err.lineno == 7
    assert err.message == "key exists"


def test_toml_error_caught_as_value_error():
    err = TomlSyntaxError("syntax error", 1)
    assert isinstance(err, ValueError)
    assert str(err) == "line 1: syntax error"


def test_raised_syntax_error_keeps_fields():
    err = TomlSyntaxError("missing =", 4)
    assert str(err) == "line 4: missing ="
    with pytest.raises(TomlError, match="^line 4: missing =$") as info:
        raise err
    assert info.value.lineno == 4
    assert info.value.message == "missing ="