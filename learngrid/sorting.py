"""Sorting the rows of a grid by the bytes of chosen attributes."""

from __future__ import annotations

from typing import Iterable

from .attribute_utils import resolve_all_attributes
from .dense import DenseInstances
from .grid import DataGrid, SortDirection
from .spec import AttributeSpec
from .view import InstancesView


def _sort_key(values: list[bytes]) -> bytes:
    parts = [bytes(v) for v in values]
    if parts:
        first = parts[0]
        parts[0] = bytes([first[0] ^ 0x80]) + first[1:]
    # The last byte of the concatenation is the most significant.
    return b"".join(parts)[::-1]


def _sorted_order(grid: DataGrid, specs: Iterable[AttributeSpec]) -> list[int]:
    """Return, for each position of the ascending order, the source row placed there."""
    reversed_specs = list(specs)[::-1]
    _, rows = grid.size()
    keys = {row: _sort_key(values) for values, row in grid.iter_rows(reversed_specs)}
    return sorted(range(rows), key=lambda row: keys[row])


def _ordered(grid: DataGrid, direction: SortDirection, specs: Iterable[AttributeSpec]) -> list[int]:
    order = _sorted_order(grid, specs)
    if direction == SortDirection.DESCENDING:
        order.reverse()
    return order


def sort_instances(
    grid: DataGrid, direction: SortDirection, specs: Iterable[AttributeSpec]
) -> DenseInstances:
    """Reorder the rows of a DenseInstances in place by the given attributes.

    The ordering compares the raw system bytes, most significant first, with
    the first attribute given taking precedence.
    """
    if not isinstance(grid, DenseInstances):
        raise TypeError("Sort is not supported for this yet!")
    order = _ordered(grid, direction, specs)
    all_specs = resolve_all_attributes(grid)
    old_rows = [values for values, _ in grid.iter_rows(all_specs)]
    for new_row, old_row in enumerate(order):
        for spec, value in zip(all_specs, old_rows[old_row]):
            grid.set(spec, new_row, value)
    return grid


def lazy_sort(
    grid: DataGrid, direction: SortDirection, specs: Iterable[AttributeSpec]
) -> InstancesView:
    """Return a view of ``grid`` whose rows appear sorted, leaving ``grid`` unchanged."""
    order = _ordered(grid, direction, specs)
    row_map = {new_row: old_row for new_row, old_row in enumerate(order) if new_row != old_row}
    return InstancesView.from_rows(grid, row_map)