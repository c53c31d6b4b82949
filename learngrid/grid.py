"""Interfaces of data addressable by attribute and row."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Iterable, Iterator

from .attributes import Attribute
from .spec import AttributeSpec


class SortDirection(IntEnum):
    """Direction in which instances are sorted."""

    DESCENDING = 1
    ASCENDING = 2


class DataGrid(ABC):
    """Data of a known size addressed by attribute specification and row."""

    @abstractmethod
    def get_attribute(self, attr: Attribute) -> AttributeSpec:
        """Return the spec of the attribute equal to ``attr``; raise KeyError if none."""

    @abstractmethod
    def all_attributes(self) -> list[Attribute]:
        """Return every attribute."""

    @abstractmethod
    def add_class_attribute(self, attr: Attribute) -> None:
        """Mark an attribute as a class attribute; raise KeyError if unknown."""

    @abstractmethod
    def remove_class_attribute(self, attr: Attribute) -> None:
        """Unmark an attribute as a class attribute."""

    @abstractmethod
    def all_class_attributes(self) -> list[Attribute]:
        """Return every class attribute."""

    @abstractmethod
    def get(self, spec: AttributeSpec, row: int) -> bytes:
        """Return the system value at an attribute and row."""

    def iter_rows(self, specs: Iterable[AttributeSpec]) -> Iterator[tuple[list[bytes], int]]:
        """Yield the values of ``specs`` for each row, with the row number."""
        specs = list(specs)
        _, rows = self.size()
        for row in range(rows):
            yield [self.get(spec, row) for spec in specs], row

    @abstractmethod
    def row_string(self, row: int) -> str:
        """Return a human-readable form of one row."""

    @abstractmethod
    def size(self) -> tuple[int, int]:
        """Return the number of attributes and the number of rows."""


class UpdatableDataGrid(DataGrid):
    """A data grid whose values and layout can be changed."""

    @abstractmethod
    def set(self, spec: AttributeSpec, row: int, value: bytes) -> None:
        """Store a system value at an attribute and row."""

    @abstractmethod
    def add_attribute(self, attr: Attribute) -> AttributeSpec:
        """Add an attribute and return its spec."""

    @abstractmethod
    def extend(self, rows: int) -> None:
        """Allocate room for ``rows`` more rows."""