"""Set operations on attributes and resolution of attribute specs."""

from __future__ import annotations

from typing import Iterable

from .attributes import Attribute, FloatAttribute
from .grid import DataGrid
from .spec import AttributeSpec


def non_class_float_attributes(grid: DataGrid) -> list[Attribute]:
    """Float attributes of ``grid`` that are not class attributes."""
    class_attrs = grid.all_class_attributes()
    return [
        attr
        for attr in grid.all_attributes()
        if isinstance(attr, FloatAttribute)
        and not any(attr.equals(c) for c in class_attrs)
    ]


def non_class_attributes(grid: DataGrid) -> list[Attribute]:
    """Attributes of ``grid`` that are not class attributes."""
    return attribute_difference_references(grid.all_attributes(), grid.all_class_attributes())


def resolve_attributes(grid: DataGrid, attrs: Iterable[Attribute]) -> list[AttributeSpec]:
    """Return the spec of each attribute, in the order given."""
    specs = []
    for attr in attrs:
        try:
            specs.append(grid.get_attribute(attr))
        except KeyError as exc:
            raise KeyError(f"Error resolving Attribute {attr}: {exc}") from exc
    return specs


def resolve_all_attributes(grid: DataGrid) -> list[AttributeSpec]:
    """Return the spec of every attribute of ``grid``."""
    return resolve_attributes(grid, grid.all_attributes())


def attribute_intersect(first: Iterable[Attribute], second: Iterable[Attribute]) -> list[Attribute]:
    """Attributes of ``first`` equal to one in ``second``, in the order of ``first``."""
    second = list(second)
    return [a for a in first if any(a.equals(b) for b in second)]


def attribute_intersect_references(
    first: Iterable[Attribute], second: Iterable[Attribute]
) -> list[Attribute]:
    """Attributes present, by identity, in both sequences."""
    others = set(second)
    return [a for a in dict.fromkeys(first) if a in others]


def attribute_difference(first: Iterable[Attribute], second: Iterable[Attribute]) -> list[Attribute]:
    """Attributes of ``first`` not equal to any in ``second``, in the order of ``first``."""
    second = list(second)
    return [a for a in first if not any(a.equals(b) for b in second)]


def attribute_difference_references(
    first: Iterable[Attribute], second: Iterable[Attribute]
) -> list[Attribute]:
    """Attributes of ``first`` absent, by identity, from ``second``."""
    others = set(second)
    return [a for a in dict.fromkeys(first) if a not in others]