"""Incremental construction of a document tree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from tnl.values import Array, Boolean, Float, Ident, Integer, Null, Object, String, Value


@dataclass
class _AttributeFrame:
    name: str
    value: Optional[Value] = None


_Frame = Union[Array, Object, _AttributeFrame]


def _push(frame: _Frame, value: Value) -> bool:
    if isinstance(frame, _AttributeFrame):
        if frame.value is not None:
            return False
        frame.value = value
        return True
    frame.elements.append(value)
    return True


def _push_attribute(frame: _Frame, name: str, value: Value) -> bool:
    if not isinstance(frame, Object) or name in frame.attributes:
        return False
    frame.attributes[name] = value
    return True


def _close(frame: _Frame, parent: _Frame) -> bool:
    if isinstance(frame, _AttributeFrame):
        if frame.value is None:
            return False
        return _push_attribute(parent, frame.name, frame.value)
    return _push(parent, frame)


class Builder:
    """Builds a root object from a sequence of push/begin/end calls.

    The push methods and ``end`` return ``False`` when the value does not fit
    where it is placed; a container whose ``end`` fails is dropped.
    """

    def __init__(self) -> None:
        self._root = Object()
        self._stack: list[_Frame] = []

    def _top(self) -> _Frame:
        return self._stack[-1] if self._stack else self._root

    def push_null(self) -> bool:
        return _push(self._top(), Null())

    def push_bool(self, value: bool) -> bool:
        return _push(self._top(), Boolean(value))

    def push_int(self, minus: bool, value: int) -> bool:
        return _push(self._top(), Integer(value, minus))

    def push_float(self, value: float) -> bool:
        return _push(self._top(), Float(value))

    def push_string(self, value: str) -> bool:
        return _push(self._top(), String(value))

    def push_ident(self, value: str) -> bool:
        return _push(self._top(), Ident(value))

    def begin_array(self) -> None:
        self._stack.append(Array())

    def begin_object(self, name: str, ns: Optional[str] = None) -> None:
        self._stack.append(Object(name=name, ns=ns))

    def begin_attribute(self, name: str) -> None:
        self._stack.append(_AttributeFrame(name))

    def end(self) -> bool:
        """Close the innermost open container."""
        if not self._stack:
            return False
        frame = self._stack.pop()
        return _close(frame, self._top())

    def build(self) -> Object:
        """Close every open container and return the root object."""
        while self._stack:
            frame = self._stack.pop()
            _close(frame, self._top())
        root, self._root = self._root, Object()
        return root