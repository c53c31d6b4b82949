"""Typed column descriptions and their conversions to system values."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Any, Iterable, Mapping

from .packing import pack_float, pack_u64, unpack_float, unpack_u64


class AttributeType(IntEnum):
    """General kind of an attribute."""

    CATEGORICAL = 0
    FLOAT = 1
    BINARY = 2


class Attribute(ABC):
    """A named, typed column of a data grid.

    Attributes hash and compare by identity so that they can key
    dictionaries by reference; use :meth:`equals` for structural equality.
    """

    attr_type: AttributeType

    def __init__(self, name: str = "") -> None:
        self.name = name

    @abstractmethod
    def sys_val_from_string(self, value: str) -> bytes:
        """Convert a human-readable value into its system representation."""

    @abstractmethod
    def string_from_sys_val(self, raw: bytes) -> str:
        """Convert a system representation into a human-readable value."""

    @abstractmethod
    def equals(self, other: Attribute) -> bool:
        """Whether ``other`` describes the same column."""

    @abstractmethod
    def compatible(self, other: Attribute) -> bool:
        """Whether ``other`` can share storage with this attribute."""

    @abstractmethod
    def to_json(self) -> dict[str, Any]:
        """Return a JSON-ready mapping describing this attribute."""

    @abstractmethod
    def load_json(self, data: Mapping[str, Any] | None) -> None:
        """Restore type-specific settings from the ``attr`` part of a JSON mapping."""

    def __repr__(self) -> str:
        return str(self)


class BinaryAttribute(Attribute):
    """An attribute holding only 1 or 0, stored in a single byte."""

    attr_type = AttributeType.BINARY

    def sys_val_from_string(self, value: str) -> bytes:
        return b"\x01" if float(value) > 0 else b"\x00"

    def string_from_sys_val(self, raw: bytes) -> str:
        return "1" if raw[0] > 0 else "0"

    def equals(self, other: Attribute) -> bool:
        return isinstance(other, BinaryAttribute) and other.name == self.name

    def compatible(self, other: Attribute) -> bool:
        return isinstance(other, BinaryAttribute)

    def to_json(self) -> dict[str, Any]:
        return {"type": "binary", "name": self.name}

    def load_json(self, data: Mapping[str, Any] | None) -> None:
        return None

    def __str__(self) -> str:
        return f"BinaryAttribute({self.name})"


class CategoricalAttribute(Attribute):
    """An attribute holding discrete string values, stored as 8-byte indices."""

    attr_type = AttributeType.CATEGORICAL

    def __init__(self, name: str = "", values: Iterable[str] = ()) -> None:
        super().__init__(name)
        self._values: list[str] = []
        self._index: dict[str, int] = {}
        for value in values:
            self.sys_val_from_string(value)

    @property
    def values(self) -> list[str]:
        """The currently defined values, in index order."""
        return list(self._values)

    def _append(self, value: str) -> int:
        self._values.append(value)
        position = len(self._values) - 1
        self._index.setdefault(value, position)
        return position

    def sys_val(self, value: str) -> bytes | None:
        """Return the system value of ``value``, or None if it is unknown."""
        position = self._index.get(value)
        return None if position is None else pack_u64(position)

    def usr_val(self, raw: bytes) -> str:
        """Return the value stored at the index encoded in ``raw``."""
        return self._values[unpack_u64(raw)]

    def sys_val_from_string(self, value: str) -> bytes:
        """Return the index of ``value``, adding it if it is not yet known."""
        position = self._index.get(value)
        if position is None:
            position = self._append(value)
        return pack_u64(position)

    def string_from_sys_val(self, raw: bytes) -> str:
        position = unpack_u64(raw)
        if position >= len(self._values):
            raise IndexError(f"Out of range: {position} in {len(self._values)} ({self})")
        return self._values[position]

    def equals(self, other: Attribute) -> bool:
        return (
            isinstance(other, CategoricalAttribute)
            and other.name == self.name
            and other._values == self._values
        )

    def compatible(self, other: Attribute) -> bool:
        return isinstance(other, CategoricalAttribute) and other._values == self._values

    def to_json(self) -> dict[str, Any]:
        return {
            "type": "categorical",
            "name": self.name,
            "attr": {"values": list(self._values)},
        }

    def load_json(self, data: Mapping[str, Any] | None) -> None:
        if not data or "values" not in data:
            raise ValueError("categorical attribute needs a list of values")
        values = data["values"]
        if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
            raise TypeError("categorical values must be a list of strings")
        for value in values:
            self._append(value)

    def __str__(self) -> str:
        return f'CategoricalAttribute("{self.name}", [{" ".join(self._values)}])'


class FloatAttribute(Attribute):
    """An attribute holding float64 values, printed with a fixed precision."""

    attr_type = AttributeType.FLOAT

    def __init__(self, name: str = "", precision: int = 2) -> None:
        super().__init__(name)
        self.precision = precision

    def sys_val_from_string(self, value: str) -> bytes:
        """Parse ``value`` as a float; raises ValueError if it is not one."""
        return pack_float(float(value))

    def float_from_sys_val(self, raw: bytes) -> float:
        return unpack_float(raw)

    def string_from_sys_val(self, raw: bytes) -> str:
        value = unpack_float(raw)
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "+Inf" if value > 0 else "-Inf"
        return f"{value:.{self.precision}f}"

    def equals(self, other: Attribute) -> bool:
        return isinstance(other, FloatAttribute) and other.name == self.name

    def compatible(self, other: Attribute) -> bool:
        return isinstance(other, FloatAttribute)

    def to_json(self) -> dict[str, Any]:
        return {
            "type": "float",
            "name": self.name,
            "attr": {"precision": self.precision},
        }

    def load_json(self, data: Mapping[str, Any] | None) -> None:
        if not data or "precision" not in data:
            raise ValueError("Precision must be specified")
        self.precision = int(data["precision"])

    def __str__(self) -> str:
        return f"FloatAttribute({self.name})"