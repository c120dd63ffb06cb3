"""Compressed (variable-length) unsigned integer encoding.

The leading byte tells how many bytes follow through its count of leading
one bits: ``0xxxxxxx`` stands alone, ``10xxxxxx`` is followed by one byte,
``110xxxxx`` by two, and so on up to ``11111110`` (seven following bytes).
A leading ``0xFF`` is followed by the full eight-byte big-endian value.
"""

from __future__ import annotations

from typing import BinaryIO

U64_MAX = 0xFFFF_FFFF_FFFF_FFFF

# (largest value, encoded size, marker bits of the leading byte)
_UNSIGNED_FORMS = (
    (0x7F, 1, 0x00),
    (0x3FFF, 2, 0x80),
    (0x001F_FFFF, 3, 0xC0),
    (0x0FFF_FFFF, 4, 0xE0),
    (0x0007_FFFF_FFFF, 5, 0xF0),
    (0x03FF_FFFF_FFFF, 6, 0xF8),
    (0x0001_FFFF_FFFF_FFFF, 7, 0xFC),
    (0x00FF_FFFF_FFFF_FFFF, 8, 0xFE),
)

# Payload bits carried by the leading byte, by encoded size.
_LEAD_MASKS = {1: 0x7F, 2: 0x3F, 3: 0x1F, 4: 0x0F, 5: 0x07, 6: 0x03, 7: 0x01, 8: 0x00}


class DecompressError(ValueError):
    """Raised when compressed integer data cannot be decoded."""


class PositiveOverflowError(DecompressError):
    """The decoded number is too large for the target range."""

    def __init__(self, message: str = "number too large to fit in target type") -> None:
        super().__init__(message)


class NegativeOverflowError(DecompressError):
    """The decoded number is too small for the target range."""

    def __init__(self, message: str = "number too small to fit in target type") -> None:
        super().__init__(message)


def compressed_length(lead: int) -> int:
    """Return the total encoded size (lead byte included) announced by ``lead``."""
    if not 0 <= lead <= 0xFF:
        raise ValueError(f"lead byte out of range: {lead}")
    if lead < 0x80:
        return 1
    if lead < 0xC0:
        return 2
    if lead < 0xE0:
        return 3
    if lead < 0xF0:
        return 4
    if lead < 0xF8:
        return 5
    if lead < 0xFC:
        return 6
    if lead < 0xFE:
        return 7
    if lead == 0xFE:
        return 8
    return 9


def encode_unsigned(value: int) -> bytes:
    """Encode an unsigned 64-bit integer in compressed form."""
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"value out of range for u64: {value}")
    for limit, size, marker in _UNSIGNED_FORMS:
        if value <= limit:
            raw = value.to_bytes(size, "big")
            return bytes([raw[0] | marker]) + raw[1:]
    return b"\xff" + value.to_bytes(8, "big")


def _assemble(lead: int, rest: bytes) -> int:
    size = compressed_length(lead)
    if size == 9:
        return int.from_bytes(rest, "big")
    return int.from_bytes(bytes([lead & _LEAD_MASKS[size]]) + rest, "big")


def decode_unsigned(data: bytes) -> tuple[int, int]:
    """Decode a compressed unsigned integer from the start of ``data``.

    Returns the value and the number of bytes it took.
    """
    if not data:
        raise DecompressError("unexpected end of data")
    lead = data[0]
    size = compressed_length(lead)
    if len(data) < size:
        raise DecompressError("unexpected end of data")
    return _assemble(lead, bytes(data[1:size])), size


def _read_exact(stream: BinaryIO, count: int) -> bytes:
    chunk = stream.read(count)
    if chunk is None or len(chunk) != count:
        raise DecompressError("unexpected end of data")
    return chunk


def read_unsigned(stream: BinaryIO, limit: int = U64_MAX) -> int:
    """Read a compressed unsigned integer, rejecting values above ``limit``."""
    lead = _read_exact(stream, 1)[0]
    size = compressed_length(lead)
    rest = _read_exact(stream, size - 1) if size > 1 else b""
    value = _assemble(lead, rest)
    if value > limit:
        raise PositiveOverflowError()
    return value


def write_unsigned(stream: BinaryIO, value: int) -> int:
    """Write ``value`` in compressed form and return the number of bytes written."""
    encoded = encode_unsigned(value)
    stream.write(encoded)
    return len(encoded)