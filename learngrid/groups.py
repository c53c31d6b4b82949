"""Contiguous storage for columns of attributes of one kind."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .attributes import Attribute


class AttributeGroup(ABC):
    """Row-major storage for a set of attributes sharing a representation."""

    def __init__(self) -> None:
        self._attributes: list[Attribute] = []
        self._alloc = bytearray()
        self.max_row = 0

    @property
    def attributes(self) -> list[Attribute]:
        """The attributes in this group, in column order."""
        return list(self._attributes)

    @property
    def storage(self) -> bytes:
        """A copy of the underlying storage."""
        return bytes(self._alloc)

    def add_attribute(self, attr: Attribute) -> None:
        """Append an attribute as a new column."""
        self._attributes.append(attr)

    @abstractmethod
    def row_size_in_bytes(self) -> int:
        """Bytes taken by one row (rounded up)."""

    @abstractmethod
    def get(self, col: int, row: int) -> bytes:
        """Return the value at a column and row."""

    @abstractmethod
    def set(self, col: int, row: int, value: bytes) -> None:
        """Store a value at a column and row."""

    def resize(self, add: int) -> None:
        """Grow the storage by ``add`` zeroed bytes."""
        if add < 0:
            raise ValueError(f"cannot grow storage by {add} bytes")
        self._alloc.extend(bytes(add))

    def row_string(self, row: int) -> str:
        """Return the human-readable values of one row, space-separated."""
        return " ".join(
            attr.string_from_sys_val(self.get(col, row))
            for col, attr in enumerate(self._attributes)
        )

    def _check_position(self, col: int, row: int) -> None:
        if row < 0 or not 0 <= col < len(self._attributes):
            raise IndexError(f"position ({col}, {row}) out of range")

    def _mark_row(self, row: int) -> None:
        self.max_row = max(self.max_row, row + 1)


class FixedAttributeGroup(AttributeGroup):
    """Stores each value in a fixed number of bytes."""

    def __init__(self, size: int = 8) -> None:
        super().__init__()
        if size <= 0:
            raise ValueError("fixed-size groups need a positive value size")
        self.size = size

    def row_size_in_bytes(self) -> int:
        return len(self._attributes) * self.size

    def _offset(self, col: int, row: int) -> int:
        self._check_position(col, row)
        offset = row * self.row_size_in_bytes() + col * self.size
        if offset + self.size > len(self._alloc):
            raise IndexError(f"row {row} is beyond the allocated storage")
        return offset

    def get(self, col: int, row: int) -> bytes:
        offset = self._offset(col, row)
        return bytes(self._alloc[offset : offset + self.size])

    def set(self, col: int, row: int, value: bytes) -> None:
        if len(value) != self.size:
            raise ValueError(f"Tried to call set() with {len(value)} bytes, should be {self.size}")
        offset = self._offset(col, row)
        self._alloc[offset : offset + self.size] = value
        self._mark_row(row)

    def __str__(self) -> str:
        return "FixedAttributeGroup"


class BinaryAttributeGroup(AttributeGroup):
    """Stores each value as a single bit."""

    def row_size_in_bytes(self) -> int:
        return (len(self._attributes) + 7) // 8

    def _byte_offset(self, col: int, row: int) -> int:
        self._check_position(col, row)
        offset = row * self.row_size_in_bytes() + col // 8
        if offset >= len(self._alloc):
            raise IndexError(f"row {row} is beyond the allocated storage")
        return offset

    def get(self, col: int, row: int) -> bytes:
        offset = self._byte_offset(col, row)
        return b"\x01" if self._alloc[offset] & (1 << (col % 8)) else b"\x00"

    def set(self, col: int, row: int, value: bytes) -> None:
        offset = self._byte_offset(col, row)
        bit = 1 << (col % 8)
        if value[0] > 0:
            self._alloc[offset] |= bit
        else:
            self._alloc[offset] &= ~bit & 0xFF
        self._mark_row(row)

    def __str__(self) -> str:
        return "BinaryAttributeGroup"