"""Checked, typed access to document values."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import Optional, Union

from tnl.errors import AccessError, AccessErrorKind
from tnl.values import (
    Array,
    Boolean,
    Float,
    Ident,
    Integer,
    Null,
    Object,
    Value,
    ValueType,
)

_F32 = struct.Struct("<f")


def _to_f32(number: float) -> float:
    try:
        return _F32.unpack(_F32.pack(number))[0]
    except OverflowError:
        return math.copysign(math.inf, number)


@dataclass(frozen=True)
class Accessor:
    """Wraps a value and reads it as a given type, raising ``AccessError`` otherwise."""

    value: Value

    def _wrong(self, expect: ValueType) -> AccessError:
        return AccessError(
            self.value.location, AccessErrorKind.WRONG_TYPE, expect, self.value.value_type
        )

    def _wrong2(self, first: ValueType, second: ValueType) -> AccessError:
        return AccessError(
            self.value.location,
            AccessErrorKind.WRONG_TYPE2,
            first,
            second,
            self.value.value_type,
        )

    def _int(self, label: str) -> int:
        if not isinstance(self.value, Integer):
            raise self._wrong(ValueType.INT)
        result = getattr(self.value, f"to_{label}")()
        if result is None:
            raise AccessError(self.value.location, AccessErrorKind.OUT_OF_RANGE_FOR, label)
        return result

    def is_null(self) -> bool:
        return isinstance(self.value, Null)

    def as_bool(self) -> bool:
        if isinstance(self.value, Boolean):
            return self.value.value
        raise self._wrong(ValueType.BOOL)

    def as_i8(self) -> int:
        return self._int("i8")

    def as_u8(self) -> int:
        return self._int("u8")

    def as_i16(self) -> int:
        return self._int("i16")

    def as_u16(self) -> int:
        return self._int("u16")

    def as_i32(self) -> int:
        return self._int("i32")

    def as_u32(self) -> int:
        return self._int("u32")

    def as_i64(self) -> int:
        return self._int("i64")

    def as_u64(self) -> int:
        return self._int("u64")

    def as_f64(self) -> float:
        if isinstance(self.value, Float):
            return self.value.value
        if isinstance(self.value, Integer):
            magnitude = float(self.value.value)
            return -magnitude if self.value.minus else magnitude
        raise self._wrong2(ValueType.INT, ValueType.FLOAT)

    def as_f32(self) -> float:
        """Read a number rounded to single precision."""
        return _to_f32(self.as_f64())

    def as_ident(self) -> str:
        if isinstance(self.value, Ident):
            return self.value.value
        raise self._wrong(ValueType.IDENT)

    def as_str(self) -> str:
        text = self.value.as_str()
        if text is None:
            raise self._wrong2(ValueType.STRING, ValueType.IDENT)
        return text

    def as_array(self) -> "ArrayAccessor":
        """Access an array, or the positional elements of an object."""
        if isinstance(self.value, (Array, Object)):
            return ArrayAccessor(self.value)
        raise self._wrong2(ValueType.ARRAY, ValueType.OBJECT)

    def as_object(self) -> "ObjectAccessor":
        if isinstance(self.value, Object):
            return ObjectAccessor(self.value)
        raise self._wrong(ValueType.OBJECT)


def _element(container: Union[Array, Object], index: int) -> Accessor:
    elements = container.elements
    if 0 <= index < len(elements):
        return Accessor(elements[index])
    raise AccessError(
        container.location, AccessErrorKind.INDEX_OUT_OF_RANGE, index, len(elements)
    )


@dataclass(frozen=True)
class ArrayAccessor:
    """Indexed access to the elements of an array or object."""

    value: Union[Array, Object]

    def __len__(self) -> int:
        return len(self.value.elements)

    def index(self, index: int) -> Accessor:
        return _element(self.value, index)


@dataclass(frozen=True)
class ObjectAccessor:
    """Access to the attributes and elements of an object."""

    value: Object

    def index(self, index: int) -> Accessor:
        return _element(self.value, index)

    def attribute(self, name: str) -> Accessor:
        try:
            return Accessor(self.value.attributes[name])
        except KeyError:
            raise AccessError(
                self.value.location, AccessErrorKind.ATTRIBUTE_NOT_FOUND, name
            ) from None

    def optional_attribute(self, name: str) -> Optional[Accessor]:
        found = self.value.attributes.get(name)
        return None if found is None else Accessor(found)