"""Source locations and the errors raised while parsing and reading documents."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from typing import ClassVar, Optional, Union

PathLike = Union[str, "os.PathLike[str]"]


def _file_prefix(file: Optional[PathLike]) -> str:
    return "" if file is None else os.fspath(file)


@dataclass(frozen=True)
class Location:
    """A span of text in a source document; rows and columns count from zero."""

    file: Optional[PathLike] = None
    row: int = 0
    col: int = 0
    end_row: int = 0
    end_col: int = 0

    DEFAULT: ClassVar["Location"]

    def span(self, other: "Location") -> "Location":
        """Return the location running from the start of this one to the end of ``other``."""
        return Location(self.file, self.row, self.col, other.end_row, other.end_col)

    def __str__(self) -> str:
        prefix = _file_prefix(self.file)
        if self.row == self.end_row and self.col == self.end_col:
            return f"{prefix}:{self.row + 1}:{self.col + 1}"
        return (
            f"{prefix}:{self.row + 1}:{self.col + 1}"
            f"-{self.end_row + 1}:{self.end_col + 1}"
        )


Location.DEFAULT = Location()


class ParseError(Exception):
    """Raised when a document cannot be parsed or converted."""

    def __init__(
        self,
        message: str,
        row: int = 0,
        col: int = 0,
        file: Optional[PathLike] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.row = row
        self.col = col
        self.file = file

    @classmethod
    def with_location(cls, location: Location, message: str) -> "ParseError":
        """Build an error pointing at the start of ``location``."""
        return cls(message, location.row, location.col, location.file)

    def __str__(self) -> str:
        prefix = _file_prefix(self.file)
        return f"{prefix}:{self.row + 1}:{self.col + 1}: {self.message}"


class AccessErrorKind(enum.Enum):
    """What went wrong when reading a value; each member carries its message template."""

    WRONG_TYPE = "expect {0}, found {1}"
    WRONG_TYPE2 = "expect {0} or {1}, found {2}"
    OUT_OF_RANGE_FOR = "out of range for `{0}`"
    INDEX_OUT_OF_RANGE = "index({0}) out of range(0..{1})"
    ATTRIBUTE_NOT_FOUND = "attribute `{0}` not found"

    def describe(self, *details: object) -> str:
        """Render the message for this kind with its details."""
        return self.value.format(*details)


class AccessError(Exception):
    """Raised when a value does not have the expected shape."""

    def __init__(self, location: Location, kind: AccessErrorKind, *details: object) -> None:
        self.location = location
        self.kind = kind
        self.details = details
        super().__init__(f"{location}: {kind.describe(*details)}")

    @property
    def reason(self) -> str:
        """The message without the location."""
        return self.kind.describe(*self.details)