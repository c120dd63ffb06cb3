"""Binary form of documents.

A binary document starts with ``TNL\\0`` and a string table. The root
object's attributes and elements follow. Every string in the tree is stored
as an index into that table, and index 0 is always the empty string.
"""

from __future__ import annotations

import io
import struct
from typing import BinaryIO, Optional, Sequence

from tnl.cint import U64_MAX, DecompressError, encode_unsigned, read_unsigned
from tnl.errors import ParseError
from tnl.parser import parse
from tnl.values import (
    Array,
    Boolean,
    Float,
    Ident,
    Integer,
    Null,
    Object,
    String,
    Value,
    ValueType,
)

MAGIC = b"TNL\0"
_FLOAT = struct.Struct("<d")


class BinaryFormatError(ValueError):
    """Raised when binary data is not a valid document."""


class StringLibrary:
    """Interns strings and assigns each distinct one a stable index."""

    def __init__(self) -> None:
        self._strings: list[str] = [""]
        self._indices: dict[str, int] = {"": 0}

    def __len__(self) -> int:
        return len(self._strings)

    @property
    def strings(self) -> tuple[str, ...]:
        """All interned strings, in index order."""
        return tuple(self._strings)

    def index_of(self, string: str) -> int:
        """Return the index of ``string``, adding it on first use."""
        index = self._indices.get(string)
        if index is None:
            index = len(self._strings)
            self._strings.append(string)
            self._indices[string] = index
        return index

    def get(self, index: int) -> Optional[str]:
        """Return the string at ``index``, or ``None`` if there is none."""
        if 0 <= index < len(self._strings):
            return self._strings[index]
        return None

    def to_bytes(self) -> bytes:
        """Serialize the table; the implicit empty string is not stored."""
        parts = [encode_unsigned(len(self._strings) - 1)]
        for string in self._strings[1:]:
            raw = string.encode("utf-8")
            parts.append(encode_unsigned(len(raw)))
            parts.append(raw)
        return b"".join(parts)


def _write_payload(value: Value, strings: StringLibrary, out: BinaryIO) -> None:
    match value:
        case Null():
            pass
        case Boolean():
            out.write(b"\x01" if value.value else b"\x00")
        case Integer():
            out.write(b"\x01" if value.minus else b"\x00")
            out.write(encode_unsigned(value.value))
        case Float():
            out.write(_FLOAT.pack(value.value))
        case String() | Ident():
            out.write(encode_unsigned(strings.index_of(value.value)))
        case Array():
            _write_elements(value.elements, strings, out)
        case Object():
            out.write(encode_unsigned(strings.index_of(value.name)))
            if value.ns is not None:
                out.write(b"\x01")
                out.write(encode_unsigned(strings.index_of(value.ns)))
            else:
                out.write(b"\x00")
            _write_members(value, strings, out)
        case _:
            raise TypeError(f"cannot serialize {type(value).__name__}")


def _write_elements(elements: Sequence[Value], strings: StringLibrary, out: BinaryIO) -> None:
    out.write(encode_unsigned(len(elements)))
    for element in elements:
        write_value(element, strings, out)


def _write_members(obj: Object, strings: StringLibrary, out: BinaryIO) -> None:
    out.write(encode_unsigned(len(obj.attributes)))
    for key, value in obj.attributes.items():
        out.write(encode_unsigned(strings.index_of(key)))
        write_value(value, strings, out)
    _write_elements(obj.elements, strings, out)


def write_value(value: Value, strings: StringLibrary, out: BinaryIO) -> None:
    """Write a value's type tag and payload, interning its strings in ``strings``."""
    out.write(bytes([value.value_type]))
    _write_payload(value, strings, out)


def _read_exact(stream: BinaryIO, count: int) -> bytes:
    chunk = stream.read(count)
    if chunk is None or len(chunk) != count:
        raise BinaryFormatError("unexpected end of data")
    return chunk


def _uint(stream: BinaryIO, limit: int = U64_MAX) -> int:
    try:
        return read_unsigned(stream, limit)
    except DecompressError as exc:
        raise BinaryFormatError(str(exc)) from exc


def _bool(stream: BinaryIO) -> bool:
    byte = _read_exact(stream, 1)[0]
    if byte > 1:
        raise BinaryFormatError(f"invalid boolean byte {byte}")
    return byte == 1


def _string(strings: Sequence[str], stream: BinaryIO) -> str:
    index = _uint(stream)
    if index >= len(strings):
        raise BinaryFormatError(f"string index {index} out of range")
    return strings[index]


def _read_elements(strings: Sequence[str], stream: BinaryIO) -> list[Value]:
    return [read_value(strings, stream) for _ in range(_uint(stream))]


def _read_members(strings: Sequence[str], stream: BinaryIO, obj: Object) -> Object:
    for _ in range(_uint(stream)):
        key = _string(strings, stream)
        value = read_value(strings, stream)
        obj.attributes.setdefault(key, value)
    obj.elements = _read_elements(strings, stream)
    return obj


def read_value(strings: Sequence[str], stream: BinaryIO) -> Value:
    """Read one tagged value; string indices refer to ``strings``."""
    tag = _read_exact(stream, 1)[0]
    try:
        kind = ValueType(tag)
    except ValueError:
        raise BinaryFormatError(f"invalid value type {tag}") from None
    if kind is ValueType.NULL:
        return Null()
    if kind is ValueType.BOOL:
        return Boolean(_bool(stream))
    if kind is ValueType.INT:
        minus = _bool(stream)
        return Integer(_uint(stream), minus)
    if kind is ValueType.FLOAT:
        return Float(_FLOAT.unpack(_read_exact(stream, _FLOAT.size))[0])
    if kind is ValueType.IDENT:
        return Ident(_string(strings, stream))
    if kind is ValueType.STRING:
        return String(_string(strings, stream))
    if kind is ValueType.ARRAY:
        return Array(_read_elements(strings, stream))
    name = _string(strings, stream)
    ns = _string(strings, stream) if _bool(stream) else None
    return _read_members(strings, stream, Object(name=name, ns=ns))


def save_binary(obj: Object) -> bytes:
    """Serialize a root object, header and string table included."""
    strings = StringLibrary()
    body = io.BytesIO()
    _write_members(obj, strings, body)
    return MAGIC + strings.to_bytes() + body.getvalue()


def load_binary(data: bytes) -> Object:
    """Load a root object from binary data that follows the ``TNL\\0`` header."""
    stream = io.BytesIO(bytes(data))
    count = _uint(stream, U64_MAX - 1)
    strings = [""]
    for _ in range(count):
        raw = _read_exact(stream, _uint(stream))
        try:
            strings.append(raw.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise BinaryFormatError("string table is not valid UTF-8") from exc
    return _read_members(strings, stream, Object())


def load(data: bytes) -> Object:
    """Load a document in either form: binary if it starts with ``TNL\\0``, text otherwise."""
    data = bytes(data)
    if data[:len(MAGIC)] == MAGIC:
        return load_binary(data[len(MAGIC):])
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError("document is not valid UTF-8") from exc
    return parse(text)