"""The value tree of a document: primitives, arrays and objects."""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional

from tnl.cint import U64_MAX
from tnl.errors import AccessError, AccessErrorKind, Location

_TYPE_LABELS = {
    0: "`null`",
    1: "{bool}",
    2: "{int}",
    3: "{float}",
    4: "{ident}",
    5: "{string}",
    6: "{array}",
    7: "{object}",
}


class ValueType(enum.IntEnum):
    """The kind of a value; the integer is its tag in the binary form."""

    NULL = 0
    BOOL = 1
    INT = 2
    FLOAT = 3
    IDENT = 4
    STRING = 5
    ARRAY = 6
    OBJECT = 7

    def __str__(self) -> str:
        return _TYPE_LABELS[self.value]


class Visitor(abc.ABC):
    """Receives one call per value it is handed through ``Value.accept``."""

    @abc.abstractmethod
    def visit_object(self, value: "Object") -> Any:
        """Handle an object."""

    @abc.abstractmethod
    def visit_array(self, value: "Array") -> Any:
        """Handle an array."""

    @abc.abstractmethod
    def visit_null(self, value: "Null") -> Any:
        """Handle ``null``."""

    @abc.abstractmethod
    def visit_bool(self, value: "Boolean") -> Any:
        """Handle a boolean."""

    @abc.abstractmethod
    def visit_int(self, value: "Integer") -> Any:
        """Handle an integer."""

    @abc.abstractmethod
    def visit_float(self, value: "Float") -> Any:
        """Handle a float."""

    @abc.abstractmethod
    def visit_string(self, value: "String") -> Any:
        """Handle a string."""

    @abc.abstractmethod
    def visit_ident(self, value: "Ident") -> Any:
        """Handle an identifier."""


class Value:
    """Base of every value in a document."""

    value_type: ClassVar[ValueType]
    _visit: ClassVar[str]
    location: Location

    def accept(self, visitor: Visitor) -> Any:
        """Dispatch to the visitor method for this kind of value and return its result."""
        return getattr(visitor, self._visit)(self)

    def as_str(self) -> Optional[str]:
        """The text of a string or identifier, ``None`` for anything else."""
        return None


def _location_field() -> Any:
    return field(default=Location.DEFAULT, compare=False)


@dataclass
class Null(Value):
    """The ``null`` value."""

    location: Location = _location_field()

    value_type: ClassVar[ValueType] = ValueType.NULL
    _visit: ClassVar[str] = "visit_null"


@dataclass
class Boolean(Value):
    """``true`` or ``false``."""

    value: bool
    location: Location = _location_field()

    value_type: ClassVar[ValueType] = ValueType.BOOL
    _visit: ClassVar[str] = "visit_bool"


@dataclass
class Integer(Value):
    """An integer stored as a sign flag and an unsigned 64-bit magnitude."""

    value: int
    minus: bool = False
    location: Location = _location_field()

    value_type: ClassVar[ValueType] = ValueType.INT
    _visit: ClassVar[str] = "visit_int"

    def __post_init__(self) -> None:
        if not 0 <= self.value <= U64_MAX:
            raise ValueError(f"integer magnitude out of range: {self.value}")

    def _signed(self, bits: int) -> Optional[int]:
        if self.value >= 1 << (bits - 1):
            return None
        return -self.value if self.minus else self.value

    def _unsigned(self, bits: int) -> Optional[int]:
        if self.minus or self.value > (1 << bits) - 1:
            return None
        return self.value

    def to_i8(self) -> Optional[int]:
        return self._signed(8)

    def to_u8(self) -> Optional[int]:
        return self._unsigned(8)

    def to_i16(self) -> Optional[int]:
        return self._signed(16)

    def to_u16(self) -> Optional[int]:
        return self._unsigned(16)

    def to_i32(self) -> Optional[int]:
        return self._signed(32)

    def to_u32(self) -> Optional[int]:
        return self._unsigned(32)

    def to_i64(self) -> Optional[int]:
        return self._signed(64)

    def to_u64(self) -> Optional[int]:
        return self._unsigned(64)


@dataclass
class Float(Value):
    """A floating-point number."""

    value: float
    location: Location = _location_field()

    value_type: ClassVar[ValueType] = ValueType.FLOAT
    _visit: ClassVar[str] = "visit_float"


@dataclass
class String(Value):
    """A quoted string."""

    value: str
    location: Location = _location_field()

    value_type: ClassVar[ValueType] = ValueType.STRING
    _visit: ClassVar[str] = "visit_string"

    def as_str(self) -> Optional[str]:
        return self.value


@dataclass
class Ident(Value):
    """A bare identifier."""

    value: str
    location: Location = _location_field()

    value_type: ClassVar[ValueType] = ValueType.IDENT
    _visit: ClassVar[str] = "visit_ident"

    def as_str(self) -> Optional[str]:
        return self.value


@dataclass
class Array(Value):
    """An ordered list of values."""

    elements: list[Value] = field(default_factory=list)
    location: Location = _location_field()

    value_type: ClassVar[ValueType] = ValueType.ARRAY
    _visit: ClassVar[str] = "visit_array"


@dataclass
class Object(Value):
    """Named attributes in insertion order plus positional elements.

    The document root is an object with an empty name.
    """

    attributes: dict[str, Value] = field(default_factory=dict)
    elements: list[Value] = field(default_factory=list)
    name: str = ""
    ns: Optional[str] = None
    location: Location = _location_field()

    value_type: ClassVar[ValueType] = ValueType.OBJECT
    _visit: ClassVar[str] = "visit_object"

    def _lookup(self, name: str) -> Value:
        try:
            return self.attributes[name]
        except KeyError:
            raise AccessError(self.location, AccessErrorKind.ATTRIBUTE_NOT_FOUND, name) from None

    def _query(self, name: str, kind: type) -> Any:
        value = self._lookup(name)
        if not isinstance(value, kind):
            raise AccessError(
                value.location, AccessErrorKind.WRONG_TYPE, kind.value_type, value.value_type
            )
        return value

    def query_bool(self, name: str) -> Boolean:
        return self._query(name, Boolean)

    def query_int(self, name: str) -> Integer:
        return self._query(name, Integer)

    def query_float(self, name: str) -> Float:
        return self._query(name, Float)

    def query_ident(self, name: str) -> Ident:
        return self._query(name, Ident)

    def query_string(self, name: str) -> String:
        return self._query(name, String)

    def query_array(self, name: str) -> Array:
        return self._query(name, Array)

    def query_object(self, name: str) -> "Object":
        return self._query(name, Object)

    def query_ident_or_string(self, name: str) -> tuple[Location, str]:
        """Return the location and text of a string or identifier attribute."""
        value = self._lookup(name)
        text = value.as_str()
        if text is None:
            raise AccessError(
                value.location,
                AccessErrorKind.WRONG_TYPE2,
                ValueType.STRING,
                ValueType.IDENT,
                value.value_type,
            )
        return value.location, text