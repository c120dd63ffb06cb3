"""Tokenizer and recursive-descent parser for the text form of documents."""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass
from typing import Any, Iterator, Optional

from tnl.cint import U64_MAX
from tnl.errors import Location, ParseError, PathLike
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
)

_SYMBOLS = frozenset("@:{}[],-")
_KEYWORDS = frozenset({"null", "true", "false"})
_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "\\": "\\",
    '"': '"',
    "'": "'",
}
_IDENT = re.compile(r"[^\W\d]\w*")
_IDENT_CHAR = re.compile(r"\w")
_NUMBER = re.compile(
    r"0(?P<radix>[xXoObB])(?P<digits>[0-9a-zA-Z_]*)"
    r"|(?P<int>[0-9][0-9_]*)(?P<frac>\.[0-9][0-9_]*)?(?P<exp>[eE][+-]?[0-9][0-9_]*)?"
)
_RADIX = {"x": 16, "o": 8, "b": 2}


@dataclass(frozen=True)
class Token:
    """A lexical token.

    ``kind`` is one of ``ident``, ``keyword``, ``int``, ``float``, ``string``,
    ``code`` or ``symbol``; ``value`` holds the decoded content.
    """

    kind: str
    text: str
    value: Any
    location: Location


class _Scanner:
    def __init__(self, content: str, row: int, col: int, file: Optional[PathLike]) -> None:
        self.text = content
        self.pos = 0
        self.row = row
        self.col = col
        self.file = file

    def here(self) -> Location:
        return Location(self.file, self.row, self.col, self.row, self.col)

    def _peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else ""

    def _advance(self, count: int) -> None:
        chunk = self.text[self.pos:self.pos + count]
        newlines = chunk.count("\n")
        if newlines:
            self.row += newlines
            self.col = len(chunk) - chunk.rfind("\n") - 1
        else:
            self.col += len(chunk)
        self.pos += len(chunk)

    def _error(self, message: str) -> ParseError:
        return ParseError(message, self.row, self.col, self.file)

    def tokens(self) -> Iterator[Token]:
        while True:
            self._skip_trivia()
            if self.pos >= len(self.text):
                return
            start_pos, row, col = self.pos, self.row, self.col
            kind, value = self._scan_one()
            yield Token(
                kind,
                self.text[start_pos:self.pos],
                value,
                Location(self.file, row, col, self.row, self.col),
            )

    def _skip_trivia(self) -> None:
        while self.pos < len(self.text):
            ch = self._peek()
            if ch.isspace():
                self._advance(1)
            elif ch == "/" and self._peek(1) == "/":
                end = self.text.find("\n", self.pos)
                self._advance((len(self.text) if end < 0 else end) - self.pos)
            elif ch == "/" and self._peek(1) == "*":
                end = self.text.find("*/", self.pos + 2)
                if end < 0:
                    raise self._error("unterminated comment")
                self._advance(end + 2 - self.pos)
            else:
                return

    def _scan_one(self) -> tuple[str, Any]:
        ch = self._peek()
        if ch == '"':
            return "string", self._quoted()
        if ch == "r" and self._starts_raw():
            return "string", self._raw()
        if ch == "`":
            return "code", self._code_block()
        if "0" <= ch <= "9":
            return self._number()
        match = _IDENT.match(self.text, self.pos)
        if match:
            word = match.group()
            self._advance(len(word))
            return ("keyword" if word in _KEYWORDS else "ident"), word
        if ch in _SYMBOLS:
            self._advance(1)
            return "symbol", ch
        raise self._error(f"unexpected character `{ch}`")

    def _starts_raw(self) -> bool:
        offset = 1
        while self._peek(offset) == "#":
            offset += 1
        return self._peek(offset) == '"'

    def _quoted(self) -> str:
        self._advance(1)
        parts: list[str] = []
        while True:
            ch = self._peek()
            if not ch:
                raise self._error("unterminated string")
            if ch == '"':
                self._advance(1)
                return "".join(parts)
            if ch == "\\":
                parts.append(self._escape())
            else:
                parts.append(ch)
                self._advance(1)

    def _escape(self) -> str:
        self._advance(1)
        ch = self._peek()
        if ch in _SIMPLE_ESCAPES:
            self._advance(1)
            return _SIMPLE_ESCAPES[ch]
        if ch == "\n":
            self._advance(1)
            while self._peek().isspace():
                self._advance(1)
            return ""
        if ch == "x":
            digits = self.text[self.pos + 1:self.pos + 3]
            if len(digits) != 2 or not all(c in "0123456789abcdefABCDEF" for c in digits):
                raise self._error("invalid escape")
            code = int(digits, 16)
            if code > 0x7F:
                raise self._error("invalid escape")
            self._advance(3)
            return chr(code)
        if ch == "u" and self._peek(1) == "{":
            end = self.text.find("}", self.pos + 2)
            if end < 0:
                raise self._error("invalid escape")
            digits = self.text[self.pos + 2:end].replace("_", "")
            try:
                code = int(digits, 16)
            except ValueError:
                raise self._error("invalid escape") from None
            if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
                raise self._error("invalid escape")
            self._advance(end + 1 - self.pos)
            return chr(code)
        raise self._error("invalid escape")

    def _raw(self) -> str:
        self._advance(1)
        hashes = 0
        while self._peek() == "#":
            hashes += 1
            self._advance(1)
        self._advance(1)
        terminator = '"' + "#" * hashes
        end = self.text.find(terminator, self.pos)
        if end < 0:
            raise self._error("unterminated raw string")
        content = self.text[self.pos:end]
        self._advance(end + len(terminator) - self.pos)
        return content

    def _code_block(self) -> tuple[int, str]:
        count = 0
        while self._peek(count) == "`":
            count += 1
        self._advance(count)
        fence = "`" * count
        end = self.text.find(fence, self.pos)
        if end < 0:
            raise self._error("unterminated code block")
        content = self.text[self.pos:end]
        self._advance(end + count - self.pos)
        return count, content

    def _number(self) -> tuple[str, Any]:
        row, col = self.row, self.col
        match = _NUMBER.match(self.text, self.pos)
        assert match is not None
        following = self.text[match.end():match.end() + 1]
        if following and _IDENT_CHAR.match(following):
            raise ParseError("invalid number", row, col, self.file)
        self._advance(match.end() - self.pos)
        if match.group("radix"):
            digits = match.group("digits").replace("_", "")
            try:
                value = int(digits, _RADIX[match.group("radix").lower()])
            except ValueError:
                raise ParseError("invalid number", row, col, self.file) from None
        elif match.group("frac") or match.group("exp"):
            return "float", float(match.group().replace("_", ""))
        else:
            value = int(match.group("int").replace("_", ""))
        if value > U64_MAX:
            raise ParseError("integer too large", row, col, self.file)
        return "int", value


def tokenize(
    content: str, row: int = 0, col: int = 0, file: Optional[PathLike] = None
) -> list[Token]:
    """Split ``content`` into tokens, skipping whitespace and comments."""
    return list(_Scanner(content, row, col, file).tokens())


class _Parser:
    def __init__(self, tokens: list[Token], end: Location) -> None:
        self.tokens = tokens
        self.pos = 0
        self.end = end

    def peek(self, offset: int = 0) -> Optional[Token]:
        index = self.pos + offset
        return self.tokens[index] if index < len(self.tokens) else None

    def at_symbol(self, symbol: str, offset: int = 0) -> bool:
        token = self.peek(offset)
        return token is not None and token.kind == "symbol" and token.value == symbol

    def eof_error(self) -> ParseError:
        return ParseError.with_location(self.end, "unexpected end of input")

    @staticmethod
    def unexpected(token: Token) -> ParseError:
        return ParseError.with_location(token.location, f"unexpected token `{token.text}`")

    def take(self) -> Token:
        token = self.peek()
        if token is None:
            raise self.eof_error()
        self.pos += 1
        return token

    def take_name(self) -> Token:
        token = self.take()
        if token.kind not in ("ident", "string"):
            raise self.unexpected(token)
        return token

    def items(self, obj: Object, closing: Optional[str]) -> None:
        key_locations: dict[str, Location] = {}
        while True:
            token = self.peek()
            if token is None:
                if closing is None:
                    return
                raise self.eof_error()
            if closing is not None and self.at_symbol(closing):
                return
            if token.kind in ("ident", "string") and self.at_symbol(":", 1):
                self.pos += 2
                if token.value in obj.attributes:
                    raise ParseError.with_location(
                        key_locations[token.value], f"duplicated attribute `{token.value}`"
                    )
                key_locations[token.value] = token.location
                obj.attributes[token.value] = self.value()
            else:
                obj.elements.append(self.value())
            if self.at_symbol(","):
                self.pos += 1

    def value(self) -> Value:
        token = self.take()
        kind = token.kind
        if kind == "keyword":
            if token.value == "null":
                return Null(token.location)
            return Boolean(token.value == "true", token.location)
        if kind == "int":
            return Integer(token.value, False, token.location)
        if kind == "float":
            return Float(token.value, token.location)
        if kind == "string":
            return String(token.value, token.location)
        if kind == "ident":
            return Ident(token.value, token.location)
        if kind == "code":
            count, content = token.value
            location = dataclasses.replace(
                token.location,
                col=token.location.col + count,
                end_col=token.location.end_col - count,
            )
            return String(content, location)
        if token.value == "-":
            number = self.take()
            location = token.location.span(number.location)
            if number.kind == "int":
                return Integer(number.value, True, location)
            if number.kind == "float":
                return Float(-number.value, location)
            raise self.unexpected(number)
        if token.value == "{":
            obj = Object()
            self.items(obj, "}")
            obj.location = token.location.span(self.take().location)
            return obj
        if token.value == "@":
            return self.named_object(token)
        if token.value == "[":
            return self.array(token)
        raise self.unexpected(token)

    def named_object(self, start: Token) -> Object:
        first = self.take_name()
        last = first
        obj = Object(name=first.value)
        if self.at_symbol(":"):
            self.pos += 1
            second = self.take_name()
            obj.ns, obj.name = first.value, second.value
            last = second
        if self.at_symbol("{"):
            self.pos += 1
            self.items(obj, "}")
            last = self.take()
        obj.location = start.location.span(last.location)
        return obj

    def array(self, start: Token) -> Array:
        arr = Array()
        while not self.at_symbol("]"):
            if self.peek() is None:
                raise self.eof_error()
            arr.elements.append(self.value())
            if self.at_symbol(","):
                self.pos += 1
        arr.location = start.location.span(self.take().location)
        return arr


def _prepare(
    content: str, row: int, col: int, file: Optional[PathLike]
) -> _Parser:
    scanner = _Scanner(content, row, col, file)
    tokens = list(scanner.tokens())
    return _Parser(tokens, scanner.here())


def parse(
    content: str, row: int = 0, col: int = 0, file: Optional[PathLike] = None
) -> Object:
    """Parse a whole document into its unnamed root object."""
    parser = _prepare(content, row, col, file)
    root = Object(location=Location(file, row, col, parser.end.row, parser.end.col))
    parser.items(root, None)
    return root


def _single(parser: _Parser) -> Value:
    value = parser.value()
    extra = parser.peek()
    if extra is not None:
        raise parser.unexpected(extra)
    return value


def parse_value(
    content: str, row: int = 0, col: int = 0, file: Optional[PathLike] = None
) -> Optional[Value]:
    """Parse exactly one value; return ``None`` when the input holds no tokens."""
    parser = _prepare(content, row, col, file)
    if not parser.tokens:
        return None
    return _single(parser)


def parse_single(content: str) -> Value:
    """Parse exactly one value; empty input is an error."""
    return _single(_prepare(content, 0, 0, None))