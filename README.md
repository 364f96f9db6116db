# tomlc

A small TOML parser. A document is parsed into `Table` and `Array` objects.
Values are kept as their raw text until you ask for them through a typed
accessor. The package also has a `toml2json` command that renders a document
as JSON with a type tag on every value.

## Install

    pip install .

## Parsing a document

```python
from tomlc.parser import parse
from tomlc.errors import TomlError

doc = """
host = 'example.com'
port = 80

[tbl]
key = 'value'
[tbl.sub]
subkey = 'subvalue'
"""

try:
    root = parse(doc)
except TomlError as exc:
    print("ERROR:", exc)       # e.g. "line 3: key exists"
    raise

print(root.string("host"), root.int("port"))   # example.com 80

tbl = root.table("tbl")
print(tbl.keys())                               # ['key', 'sub']
```

`parse_file(fp)` reads a whole open stream, text or binary (binary input is
decoded as UTF-8), and parses it. `Parser(text).parse()` does the same as
`parse(text)`.

## Tables and arrays

`tomlc.model.Table`:

- `len(table)` is the number of direct keys; `keys()` lists them, raw values
  first, then arrays, then sub-tables, each group in the order it was added;
  `key(index)` returns one of them.
- `kind_of(key)` says whether a key names a value, an array or a table
  (`ArrayKind.VALUE`, `ArrayKind.ARRAY`, `ArrayKind.TABLE`), or `None`.
- `string`, `bool`, `int`, `double` and `timestamp` convert the value at a
  key. They return `None` when the key is missing or its value is not of that
  type. `unparsed(key)` gives the raw text.
- `array(key)` and `table(key)` return nested containers, or `None`.

`tomlc.model.Array` has the same typed accessors, taking an index instead of
a key, plus `array(index)`, `table(index)` and `len()`. Its `kind` tells you
whether it holds values, arrays, tables or a mix, and `type` records the
value type of its elements (`tomlc.values.ValueType`), `MIXED` when they
differ.

```python
root = parse("ints = [1, 2, 3]\n[[aot]]\nk = 'one'\n[[aot]]\nk = 'two'\n")
ints = root.array("ints")
print([ints.int(i) for i in range(len(ints))])              # [1, 2, 3]

aot = root.array("aot")
print([aot.table(i).string("k") for i in range(len(aot))])  # ['one', 'two']
```

## Raw values

`tomlc.values` converts raw value text on its own: `parse_string`,
`parse_bool`, `parse_int`, `parse_float` and `parse_timestamp`. Each raises
`TomlError` on text it does not accept; `value_type(raw)` tells you which
kind of value a text is.

Integers must fit in 64 signed bits. Timestamps come back as a frozen
`Timestamp` with `year`, `month`, `day`, `hour`, `minute`, `second`,
`millisec` and `z` (the offset text, such as `Z` or `+05:30`); its `kind` is a
`TimestampKind`: `OFFSET_DATETIME`, `LOCAL_DATETIME`, `LOCAL_DATE` or
`LOCAL_TIME`.

## Errors

`tomlc.errors.TomlError` is a `ValueError`. Problems in a document are raised
as `TomlSyntaxError`, whose `lineno` holds the line number and whose message
reads `line N: ...`. Table headers may be at most 10 keys deep.

## Converting to JSON

The `toml2json` command reads each TOML file named on the command line, or
standard input when none is given, and writes one JSON object per document:

    toml2json config.toml
    cat config.toml | toml2json

`port = 80` becomes `{"port":{"type": "integer","value": "80"}}`. The type
tags are `string`, `integer`, `bool`, `float`, `datetime`, `datetime-local`,
`date-local` and `time-local`. On a parse error or an unreadable file the
command prints `ERROR: ...` to standard error and exits with status 1.

From Python, `tomlc.toml2json.convert(fp)` returns the same text, and
`table_to_json`, `array_to_json` and `raw_to_json` render parts of a parsed
document.

## What it does not do

The package only reads TOML. It has no writer: tables cannot be serialised
back to TOML, and the typed accessors convert values on each call rather than
building a plain Python `dict`.