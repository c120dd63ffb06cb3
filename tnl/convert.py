"""Conversion of document values into plain Python values."""

from __future__ import annotations

import enum
import types
from typing import Any, Union, get_args, get_origin

from tnl.errors import ParseError
from tnl.parser import parse, parse_single
from tnl.values import Array, Boolean, Float, Integer, Null, Object, Value


class IntType(enum.Enum):
    """Fixed-width integer targets for ``from_tnl``."""

    I8 = ("i8", 8, True)
    I16 = ("i16", 16, True)
    I32 = ("i32", 32, True)
    I64 = ("i64", 64, True)
    ISIZE = ("isize", 64, True)
    U8 = ("u8", 8, False)
    U16 = ("u16", 16, False)
    U32 = ("u32", 32, False)
    U64 = ("u64", 64, False)
    USIZE = ("usize", 64, False)

    @property
    def bits(self) -> int:
        return self.value[1]

    @property
    def signed(self) -> bool:
        return self.value[2]


def _found(value: Value) -> str:
    return str(value.value_type)


def _to_int(value: Value, target: IntType) -> int:
    if not isinstance(value, Integer):
        raise ParseError.with_location(
            value.location, f"expect {{int}}, found {_found(value)}"
        )
    if target.signed:
        limit = 1 << (target.bits - 1)
        if (value.minus and value.value > limit) or value.value >= limit:
            raise ParseError.with_location(value.location, "out of range")
        return -value.value if value.minus else value.value
    if value.minus or value.value >= (1 << target.bits) - 1:
        raise ParseError.with_location(value.location, "out of range")
    return value.value


def _optional_inner(target: Any) -> Any:
    origin = get_origin(target)
    if origin is Union or origin is types.UnionType:
        args = get_args(target)
        rest = [arg for arg in args if arg is not type(None)]
        if len(args) == 2 and len(rest) == 1:
            return rest[0]
    return None


def from_tnl(value: Value, target: Any) -> Any:
    """Convert ``value`` into ``target``.

    Targets are ``bool``, ``int`` (as ``IntType.I64``), an ``IntType``,
    ``float``, ``str``, ``Optional[T]`` and ``list[T]``.
    """
    if target is bool:
        if isinstance(value, Boolean):
            return value.value
        raise ParseError.with_location(
            value.location, f"expect {{bool}}, found {_found(value)}"
        )
    if target is int:
        target = IntType.I64
    if isinstance(target, IntType):
        return _to_int(value, target)
    if target is float:
        if isinstance(value, Float):
            return value.value
        if isinstance(value, Integer):
            return -float(value.value) if value.minus else float(value.value)
        raise ParseError.with_location(
            value.location, f"expect {{int}} for {{float}}, found {_found(value)}"
        )
    if target is str:
        text = value.as_str()
        if text is None:
            raise ParseError.with_location(
                value.location, f"expect {{string}} for {{ident}}, found {_found(value)}"
            )
        return text
    inner = _optional_inner(target)
    if inner is not None:
        return None if isinstance(value, Null) else from_tnl(value, inner)
    if get_origin(target) is list:
        (item,) = get_args(target)
        if isinstance(value, (Array, Object)):
            return [from_tnl(element, item) for element in value.elements]
        raise ParseError.with_location(
            value.location, f"expect {{array}} for {{object}}, found {_found(value)}"
        )
    raise TypeError(f"unsupported conversion target: {target!r}")


def parse_to(content: str, target: Any) -> Any:
    """Parse a single value from ``content`` and convert it to ``target``."""
    return from_tnl(parse_single(content), target)


def parse_object_to(content: str, target: Any) -> Any:
    """Parse a whole document and convert its root object to ``target``."""
    return from_tnl(parse(content), target)