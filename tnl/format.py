"""Rendering of documents back into their text form."""

from __future__ import annotations

import math
from decimal import Decimal

from tnl.values import (
    Array,
    Boolean,
    Float,
    Ident,
    Integer,
    Null,
    Object,
    String,
    Visitor,
)

_ESCAPES = {
    "\t": "\\t",
    "\r": "\\r",
    "\n": "\\n",
    "'": "\\'",
    '"': '\\"',
    "\\": "\\\\",
}


def _escape(text: str) -> str:
    parts = []
    for ch in text:
        if ch in _ESCAPES:
            parts.append(_ESCAPES[ch])
        elif " " <= ch <= "~":
            parts.append(ch)
        else:
            parts.append(f"\\u{{{ord(ch):x}}}")
    return "".join(parts)


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


class TextFormatter(Visitor):
    """Accumulates the text form of the values it visits in ``output``."""

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._indent = 0

    @property
    def output(self) -> str:
        return "".join(self._parts)

    def format(self, obj: Object) -> None:
        """Append a root object: one attribute or element per line."""
        for key, value in obj.attributes.items():
            self._parts.append(f"{key}: ")
            value.accept(self)
            self._new_line()
        for element in obj.elements:
            element.accept(self)
            self._new_line()

    def _new_line(self) -> None:
        self._parts.append("\n" + "    " * self._indent)

    def visit_object(self, value: Object) -> None:
        if value.name:
            if value.ns is not None:
                self._parts.append(f"@{value.ns}:{value.name} {{")
            else:
                self._parts.append(f"@{value.name} {{")
        else:
            self._parts.append("{")
        if not value.attributes and not value.elements:
            self._parts.append("}")
            return
        self._indent += 1
        for key, item in value.attributes.items():
            self._new_line()
            self._parts.append(f"{key}: ")
            item.accept(self)
        for element in value.elements:
            self._new_line()
            element.accept(self)
        self._indent -= 1
        self._new_line()
        self._parts.append("}")

    def visit_array(self, value: Array) -> None:
        if not value.elements:
            self._parts.append("[]")
            return
        self._parts.append("[")
        self._indent += 1
        for element in value.elements:
            self._new_line()
            element.accept(self)
        self._indent -= 1
        self._new_line()
        self._parts.append("]")

    def visit_null(self, value: Null) -> None:
        self._parts.append("null")

    def visit_bool(self, value: Boolean) -> None:
        self._parts.append("true" if value.value else "false")

    def visit_int(self, value: Integer) -> None:
        self._parts.append(f"-{value.value}" if value.minus else str(value.value))

    def visit_float(self, value: Float) -> None:
        self._parts.append(_format_float(value.value))

    def visit_string(self, value: String) -> None:
        self._parts.append(f'"{_escape(value.value)}"')

    def visit_ident(self, value: Ident) -> None:
        self._parts.append(value.value)


def format_text(obj: Object) -> str:
    """Return the text form of a root object."""
    formatter = TextFormatter()
    formatter.format(obj)
    return formatter.output