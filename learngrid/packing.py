"""Conversions between numbers and the 8-byte little-endian system representation."""

from __future__ import annotations

import struct

_U64 = struct.Struct("<Q")
_F64 = struct.Struct("<d")
WIDTH = 8


def _check_width(data: bytes | bytearray | memoryview) -> None:
    if len(data) < WIDTH:
        raise ValueError(f"need at least {WIDTH} bytes, got {len(data)}")


def pack_u64(value: int) -> bytes:
    """Pack an unsigned 64-bit integer into 8 little-endian bytes."""
    return _U64.pack(value) if 0 <= value < 1 << 64 else value.to_bytes(WIDTH, "little")


def unpack_u64(data: bytes | bytearray | memoryview) -> int:
    """Read an unsigned 64-bit integer from the first 8 bytes of ``data``."""
    _check_width(data)
    return _U64.unpack_from(data)[0]


def pack_float(value: float) -> bytes:
    """Pack a float64 into 8 little-endian bytes."""
    return _F64.pack(value)


def unpack_float(data: bytes | bytearray | memoryview) -> float:
    """Read a float64 from the first 8 bytes of ``data``."""
    _check_width(data)
    return _F64.unpack_from(data)[0]