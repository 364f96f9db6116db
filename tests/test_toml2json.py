import io
import json

import pytest

from tomlc.errors import TomlError
from tomlc.parser import parse
from tomlc.toml2json import (
    array_to_json,
    convert,
    escape_string,
    main,
    raw_to_json,
    table_to_json,
)


def test_escape_named_characters():
    assert escape_string('a"b\\c\n\t') == 'a\\"b\\\\c\\n\\t'


def test_escape_control_character_uses_upper_hex():
    assert escape_string("\x1f") == "\\u001F"
    assert escape_string("\x01") == "\\u0001"


def test_escape_leaves_non_ascii_alone():
    assert escape_string("héllo") == "héllo"


def test_raw_string():
    assert raw_to_json("'xxx'") == '{"type": "string","value": "xxx"}'


def test_raw_integer():
    assert json.loads(raw_to_json("42")) == {"type": "integer", "value": "42"}


def test_raw_bool():
    assert json.loads(raw_to_json("true")) == {"type": "bool", "value": "true"}


def test_raw_nan():
    assert json.loads(raw_to_json("nan")) == {"type": "float", "value": "nan"}


def test_raw_float_round_trips():
    out = json.loads(raw_to_json("1.5"))
    assert out["type"] == "float"
    assert float(out["value"]) == 1.5


def test_raw_offset_datetime():
    out = json.loads(raw_to_json("1979-05-27T07:32:00Z"))
    assert out == {"type": "datetime", "value": "1979-05-27T07:32:00Z"}


def test_raw_local_date():
    out = json.loads(raw_to_json("1979-05-27"))
    assert out == {"type": "date-local", "value": "1979-05-27"}


def test_raw_local_time_with_millisec():
    out = json.loads(raw_to_json("07:32:00.5"))
    assert out == {"type": "time-local", "value": "07:32:00.500"}


def test_raw_unknown_raises():
    with pytest.raises(TomlError):
        raw_to_json("bogus")


def test_table_to_json_is_valid_json():
    tab = parse("host = 'example.com'\nport = 80\n[tbl]\nkey = 'value'\n")
    out = json.loads(table_to_json(tab))
    assert out["host"] == {"type": "string", "value": "example.com"}
    assert out["port"] == {"type": "integer", "value": "80"}
    assert out["tbl"]["key"]["value"] == "value"


def test_array_of_tables():
    tab = parse("[[aot]]\nk = 'one'\n[[aot]]\nk = 'two'\n")
    out = json.loads(array_to_json(tab.array("aot")))
    assert [item["k"]["value"] for item in out] == ["one", "two"]


def test_nested_and_mixed_arrays():
    tab = parse("nested = [[1, 2], [3]]\nmixed = [1, 'one']\n")
    nested = json.loads(array_to_json(tab.array("nested")))
    assert [[v["value"] for v in inner] for inner in nested] == [["1", "2"], ["3"]]
    mixed = json.loads(array_to_json(tab.array("mixed")))
    assert [v["type"] for v in mixed] == ["integer", "string"]


def test_convert_text_and_bytes_agree():
    doc = "a = 1\nb = [true, false]\n"
    text_out = convert(io.StringIO(doc))
    bytes_out = convert(io.BytesIO(doc.encode()))
    assert text_out == bytes_out
    assert text_out.endswith("\n")
    assert json.loads(text_out)["b"][1]["value"] == "false"


def test_convert_reports_parse_error():
    with pytest.raises(TomlError):
        convert(io.StringIO("a = 1\na = 2\n"))


def test_main_with_file(tmp_path, capsys):
    path = tmp_path / "doc.toml"
    path.write_text("str = 'xxx'\n")
    assert main([str(path)]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out == {"str": {"type": "string", "value": "xxx"}}


def test_main_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "absent.toml")]) == 1
    assert "ERROR: cannot open" in capsys.readouterr().err


def test_main_bad_document(tmp_path, capsys):
    path = tmp_path / "bad.toml"
    path.write_text("x = 1\nx = 2\n")
    assert main([str(path)]) == 1
    assert capsys.readouterr().err.startswith("ERROR: line 2")


def test_main_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("n = 7\n"))
    assert main([]) == 0
    assert json.loads(capsys.readouterr().out)["n"]["value"] == "7"