import pytest

from tomlc.errors import TomlError
from tomlc.model import Array, ArrayKind, Table
from tomlc.values import TimestampKind, ValueType


def test_string_lookup_like_source_test():
    tbl = Table()
    tbl.add_value("str", "'xxx'")
    assert tbl.string("unknown") is None
    assert tbl.string("str") == "xxx"
    assert len(tbl.string("str")) == 3


def test_typed_lookups():
    tbl = Table()
    tbl.add_value("n", "42")
    tbl.add_value("f", "1.5")
    tbl.add_value("b", "true")
    tbl.add_value("s", "'x'")
    assert tbl.int("n") == 42
    assert tbl.double("f") == 1.5
    assert tbl.bool("b") is True
    assert tbl.bool("n") is None
    assert tbl.int("s") is None
    assert tbl.unparsed("f") == "1.5"
    assert tbl.unparsed("missing") is None


def test_timestamp_lookup():
    tbl = Table()
    tbl.add_value("d", "1979-05-27")
    ts = tbl.timestamp("d")
    assert ts.kind is TimestampKind.LOCAL_DATE
    assert (ts.year, ts.month, ts.day) == (1979, 5, 27)
    assert tbl.timestamp("missing") is None


def test_kind_of_and_getters():
    tbl = Table()
    tbl.add_value("v", "1")
    arr = tbl.add_array("a")
    sub = tbl.add_table("t")
    assert tbl.kind_of("v") is ArrayKind.VALUE
    assert tbl.kind_of("a") is ArrayKind.ARRAY
    assert tbl.kind_of("t") is ArrayKind.TABLE
    assert tbl.kind_of("none") is None
    assert tbl.array("a") is arr
    assert tbl.table("t") is sub
    assert tbl.array("t") is None
    assert tbl.table("a") is None
    assert sub.key == "t" and arr.key == "a"


@pytest.mark.parametrize("existing", ["value", "array", "table"])
def test_duplicate_keys_rejected(existing):
    tbl = Table()
    {"value": lambda: tbl.add_value("k", "1"),
     "array": lambda: tbl.add_array("k"),
     "table": lambda: tbl.add_table("k")}[existing]()
    with pytest.raises(TomlError, match="key exists"):
        tbl.add_value("k", "2")
    with pytest.raises(TomlError, match="key exists"):
        tbl.add_array("k")


def test_implicit_table_becomes_explicit_once():
    tbl = Table()
    implicit = tbl.add_table("a", implicit=True)
    assert implicit.implicit is True
    explicit = tbl.add_table("a")
    assert explicit is implicit
    assert explicit.implicit is False
    with pytest.raises(TomlError, match="key exists"):
        tbl.add_table("a")


def test_value_array():
    arr = Array("ints")
    for raw in ["1", "2", "3"]:
        arr.append_value(raw)
    assert arr.kind is ArrayKind.VALUE
    assert arr.type is ValueType.INT
    assert [arr.int(i) for i in range(len(arr))] == [1, 2, 3]
    assert arr.int(len(arr)) is None
    assert arr.int(-1) is None


def test_mixed_value_array():
    arr = Array("mixed")
    for raw in ["1", "'one'", "1.2"]:
        arr.append_value(raw)
    assert arr.kind is ArrayKind.VALUE
    assert arr.type is ValueType.MIXED
    assert arr.int(0) == 1
    assert arr.string(1) == "one"
    assert arr.double(2) == 1.2
    assert arr.int(1) is None


def test_nested_array_makes_kind_mixed():
    arr = Array("a")
    arr.append_value("1")
    sub = arr.append_array()
    assert arr.kind is ArrayKind.MIXED
    assert arr.array(1) is sub
    assert arr.array(0) is None
    assert arr.unparsed(1) is None
    assert arr.unparsed(0) == "1"


def test_array_of_tables():
    arr = Array("aot", ArrayKind.TABLE)
    first = arr.append_table()
    second = arr.append_table()
    first.add_value("k", "'one'")
    second.add_value("k", "'two'")
    assert arr.kind is ArrayKind.TABLE
    assert len(arr) == 2
    assert [arr.table(i).string("k") for i in range(len(arr))] == ["one", "two"]
    assert arr.table(2) is None
    assert arr.bool(0) is None


def test_array_of_arrays_kind():
    arr = Array("a")
    inner = arr.append_array()
    inner.append_value("true")
    assert arr.kind is ArrayKind.ARRAY
    assert arr.array(0).bool(0) is True
    assert arr.array(0).type is ValueType.BOOL


def test_array_timestamp_and_first_type():
    arr = Array("t")
    arr.append_value("07:32:00")
    assert arr.type is ValueType.TIME
    ts = arr.timestamp(0)
    assert ts.kind is TimestampKind.LOCAL_TIME
    assert (ts.hour, ts.minute, ts.second) == (7, 32, 0)