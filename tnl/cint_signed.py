"""Compressed (variable-length) signed integer encoding.

Uses the same leading-byte layout as the unsigned form. The payload is the
two's complement value: 7 bits per encoded byte for the first eight forms.
A leading ``0xFF`` is followed by the full eight-byte big-endian value.
"""

from __future__ import annotations

from typing import BinaryIO

from tnl.cint import (
    DecompressError,
    NegativeOverflowError,
    PositiveOverflowError,
    compressed_length,
    decode_unsigned,
)

I64_MIN = -(1 << 63)
I64_MAX = (1 << 63) - 1

# (largest value, smallest value excluded, encoded size, mask, marker)
_SIGNED_FORMS = (
    (0x3F, -0x40, 1, 0x7F, 0x00),
    (0x1FFF, -0x2000, 2, 0x3F, 0x80),
    (0x000F_FFFF, -0x0010_0000, 3, 0x1F, 0xC0),
    (0x07FF_FFFF, -0x0800_0000, 4, 0x0F, 0xE0),
    (0x0003_FFFF_FFFF, -0x0004_0000_0000, 5, 0x07, 0xF0),
    (0x01FF_FFFF_FFFF, -0x0200_0000_0000, 6, 0x03, 0xF8),
    (0xFFFF_FFFF_FFFF, -0x0001_0000_0000_0000, 7, 0x01, 0xFC),
    (0x007F_FFFF_FFFF_FFFF, -0x0080_0000_0000_0000, 8, 0x00, 0xFE),
)


def encode_signed(value: int) -> bytes:
    """Encode a signed 64-bit integer in compressed form."""
    if not I64_MIN <= value <= I64_MAX:
        raise ValueError(f"value out of range for i64: {value}")
    for high, low_excluded, size, mask, marker in _SIGNED_FORMS:
        if low_excluded < value <= high:
            raw = (value & ((1 << (8 * size)) - 1)).to_bytes(size, "big")
            return bytes([(raw[0] & mask) | marker]) + raw[1:]
    return b"\xff" + (value & 0xFFFF_FFFF_FFFF_FFFF).to_bytes(8, "big")


def _sign_extend(raw: int, size: int) -> int:
    bits = 64 if size == 9 else 7 * size
    if raw & (1 << (bits - 1)):
        return raw - (1 << bits)
    return raw


def decode_signed(data: bytes) -> tuple[int, int]:
    """Decode a compressed signed integer from the start of ``data``.

    Returns the value and the number of bytes it took.
    """
    raw, size = decode_unsigned(data)
    return _sign_extend(raw, size), size


def _read_exact(stream: BinaryIO, count: int) -> bytes:
    chunk = stream.read(count)
    if chunk is None or len(chunk) != count:
        raise DecompressError("unexpected end of data")
    return chunk


def read_signed(stream: BinaryIO, low: int = I64_MIN, high: int = I64_MAX) -> int:
    """Read a compressed signed integer, rejecting values outside ``low..=high``."""
    lead = _read_exact(stream, 1)
    size = compressed_length(lead[0])
    rest = _read_exact(stream, size - 1) if size > 1 else b""
    value, _ = decode_signed(lead + rest)
    if value < low:
        raise NegativeOverflowError()
    if value > high:
        raise PositiveOverflowError()
    return value


def write_signed(stream: BinaryIO, value: int) -> int:
    """Write ``value`` in compressed form and return the number of bytes written."""
    encoded = encode_signed(value)
    stream.write(encoded)
    return len(encoded)