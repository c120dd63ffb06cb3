# tnl

`tnl` reads and writes TNL, a small notation for structured data. A TNL document is an unnamed root object. Every object holds named attributes and a list of unnamed elements. A value can be `null`, `true`/`false`, an integer, a float, a string, an identifier, an array or a nested object. A value parsed from text keeps its `Location`, which gives its row and column. Error messages use this location to point at the problem.

The package also has a compact binary form. It uses a shared string table and variable-length integers.

It is a library only. It has no command-line tool.

## Installing

```
pip install .
```

To run the tests, install the test extra and run pytest:

```
pip install ".[test]"
pytest
```

## Parsing text

```python
from tnl.parser import parse, parse_value

doc = parse('name: "demo"\ncount: 3\nitem r"file.ext"', 0, 0, None)
print(doc.query_string("name").value)   # demo
print(doc.query_int("count").value)     # 3
print(doc.elements[0].value)            # item

value = parse_value("1_0010", 0, 0, None)
print(value.to_u32())                   # 10010
```

### Syntax

- Objects are written as `{ ... }`, as `@name { ... }` or as `@ns:name { ... }`. A bare `@name` is an empty object.
- Attributes are written as `key: value`. If the same attribute appears twice, `tnl.errors.ParseError` is raised.
- Items in objects and arrays may be separated by commas.
- Strings come in three forms:
  - quoted strings `"..."`, with escapes;
  - raw strings `r"..."` and `r#"..."#`;
  - back-quoted code blocks.
- Integers may be written in hex (`0x`), octal (`0o`) or binary (`0b`). Underscores are allowed as digit separators.
- Comments are written as `//` and `/* */`.

### Parsing functions

- `parse_value` returns `None` when the input holds no tokens.
- `parse_single` parses exactly one value and raises `ParseError` on empty input.
- `tokenize` returns the list of `Token`s.

### Value classes

The value classes live in `tnl.values`: `Null`, `Boolean`, `Integer`, `Float`, `String`, `Ident`, `Array` and `Object`.

- An `Integer` stores a `minus` flag and an unsigned 64-bit magnitude.
- `to_i8` … `to_u64` return `None` when the value does not fit.
- `Object.query_*` methods raise `tnl.errors.AccessError` when an attribute is missing or has the wrong type.

## Typed access

`tnl.accessor` reads values as given types. If a value is missing, has the wrong type or is out of range, it raises `AccessError`. The error message carries the value's location.

```python
from tnl.accessor import Accessor

root = Accessor(doc).as_object()
count = root.attribute("count").as_u8()   # 3
first = root.index(0).as_ident()          # "item"
missing = root.optional_attribute("x")    # None
```

`tnl.convert` converts a value straight into a Python type. It accepts these targets:

- `bool`, `int`, `float` and `str`;
- a fixed-width `IntType`;
- `Optional[T]`;
- `list[T]`.

A failed conversion raises `ParseError`.

```python
from tnl.convert import IntType, from_tnl, parse_to

numbers = parse_to("[1, 2, 3]", list[int])        # [1, 2, 3]
small = parse_to("-5", IntType.I8)                 # -5
```

## Building and formatting

`Builder` assembles a tree step by step. Its push methods and `end` return `False` when a value does not fit where it is placed. `build` closes any containers that are still open.

```python
from tnl.builder import Builder
from tnl.format import format_text

b = Builder()
b.begin_attribute("title")
b.push_string("hello")
b.end()
b.begin_object("entry", None)
b.push_int(False, 42)
b.end()
print(format_text(b.build()))
```

`format_text` renders a root object back into text. `TextFormatter` is the visitor behind it.

## Binary form

```python
from tnl.binary import load, save_binary

data = save_binary(doc)      # starts with b"TNL\0"
again = load(data)           # also accepts TNL text
```

`load_binary` reads the data that follows the header. Invalid binary data raises `tnl.binary.BinaryFormatError`.

`StringLibrary` is the string table. `write_value` and `read_value` handle single tagged values. Locations are not stored in the binary form.

## Variable-length integers

The integer codec can also be used on its own:

- `tnl.cint` handles unsigned values with `encode_unsigned`, `decode_unsigned`, `read_unsigned` and `write_unsigned`.
- `tnl.cint_signed` handles signed values with `encode_signed`, `decode_signed`, `read_signed` and `write_signed`.

Truncated data raises `DecompressError`. A value outside the allowed range raises `PositiveOverflowError` or `NegativeOverflowError`.