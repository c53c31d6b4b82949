"""Helpers for predictions, class distributions, splitting and comparing grids."""

from __future__ import annotations

import random
from typing import Callable

from .attribute_utils import attribute_intersect, resolve_attributes
from .attributes import Attribute, CategoricalAttribute, FloatAttribute
from .dense import DenseInstances
from .grid import DataGrid, UpdatableDataGrid
from .packing import unpack_float, unpack_u64
from .view import InstancesView


def generate_prediction_vector(grid: DataGrid) -> DenseInstances:
    """An empty grid holding only the class attributes of ``grid``, with as many rows."""
    _, rows = grid.size()
    result = DenseInstances()
    for attr in grid.all_class_attributes():
        result.add_attribute(attr)
        result.add_class_attribute(attr)
    result.extend(rows)
    return result


def _single_class_attribute(grid: DataGrid, missing: str) -> Attribute:
    class_attrs = grid.all_class_attributes()
    if len(class_attrs) > 1:
        raise ValueError("More than one class defined")
    if not class_attrs:
        raise ValueError(missing)
    return class_attrs[0]


def get_class(grid: DataGrid, row: int) -> str:
    """Return the class value of a row; the grid must have exactly one class attribute."""
    class_attr = _single_class_attribute(grid, "No class defined!")
    spec = grid.get_attribute(class_attr)
    return class_attr.string_from_sys_val(grid.get(spec, row))


def set_class(grid: UpdatableDataGrid, row: int, value: str) -> None:
    """Set the class value of a row; the grid must have exactly one class attribute."""
    class_attr = _single_class_attribute(grid, "No class Attributes are defined")
    spec = grid.get_attribute(class_attr)
    grid.set(spec, row, class_attr.sys_val_from_string(value))


def get_attribute_by_name(grid: DataGrid, name: str) -> Attribute | None:
    """Return the first attribute called ``name``, or None."""
    return next((a for a in grid.all_attributes() if a.name == name), None)


def _only_class_attribute(grid: DataGrid) -> Attribute:
    class_attrs = grid.all_class_attributes()
    if len(class_attrs) != 1:
        raise ValueError(
            f"Wrong number of class variables (has {len(class_attrs)}, should be 1)"
        )
    return class_attrs[0]


def class_distribution_by_binary_float_value(grid: DataGrid) -> list[int]:
    """Count rows whose float class is at most 0.5 and those above it."""
    class_attr = _only_class_attribute(grid)
    if not isinstance(class_attr, FloatAttribute):
        raise TypeError(f"Class Attribute must be FloatAttribute (is {class_attr})")
    counts = [0, 0]
    for values, _ in grid.iter_rows(resolve_attributes(grid, [class_attr])):
        counts[1 if unpack_float(values[0]) > 0.5 else 0] += 1
    return counts


def class_distribution_by_categorical_value(grid: DataGrid) -> list[int]:
    """Count rows of each categorical class value, indexed by the value's system index."""
    class_attr = _only_class_attribute(grid)
    if not isinstance(class_attr, CategoricalAttribute):
        raise TypeError(f"Class Attribute must be a CategoricalAttribute (is {class_attr})")
    counts = [0] * len(class_attr.values)
    for values, _ in grid.iter_rows(resolve_attributes(grid, [class_attr])):
        counts[unpack_u64(values[0])] += 1
    return counts


def class_distribution(grid: DataGrid) -> dict[str, int]:
    """Count the rows of each class value."""
    counts: dict[str, int] = {}
    _, rows = grid.size()
    for row in range(rows):
        cls = get_class(grid, row)
        counts[cls] = counts.get(cls, 0) + 1
    return counts


def _split_distribution(
    grid: DataGrid, split_of: Callable[[int], str]
) -> dict[str, dict[str, int]]:
    result: dict[str, dict[str, int]] = {}
    _, rows = grid.size()
    for row in range(rows):
        bucket = result.setdefault(split_of(row), {})
        cls = get_class(grid, row)
        bucket[cls] = bucket.get(cls, 0) + 1
    return result


def class_distribution_after_threshold(
    grid: DataGrid, attr: Attribute, value: float
) -> dict[str, dict[str, int]]:
    """Class counts on each side of a threshold: "1" above ``value``, "0" otherwise."""
    try:
        spec = grid.get_attribute(attr)
    except KeyError as exc:
        raise KeyError(f"Invalid attribute {attr} ({exc})") from exc
    if not isinstance(attr, FloatAttribute):
        raise TypeError("Must be numeric!")
    return _split_distribution(
        grid, lambda row: "1" if unpack_float(grid.get(spec, row)) > value else "0"
    )


def class_distribution_after_split(grid: DataGrid, attr: Attribute) -> dict[str, dict[str, int]]:
    """Class counts for each value of ``attr``."""
    try:
        spec = grid.get_attribute(attr)
    except KeyError as exc:
        raise KeyError(f"Invalid attribute {attr} ({exc})") from exc
    return _split_distribution(grid, lambda row: attr.string_from_sys_val(grid.get(spec, row)))


def _decompose(
    grid: DataGrid, attr: Attribute, key_of: Callable[[bytes], str]
) -> dict[str, InstancesView]:
    try:
        spec = grid.get_attribute(attr)
    except KeyError as exc:
        raise KeyError(f"Invalid Attribute index {attr}") from exc
    new_attrs = [a for a in grid.all_attributes() if not a.equals(attr)]
    row_maps: dict[str, list[int]] = {}
    for values, row in grid.iter_rows([spec]):
        row_maps.setdefault(key_of(values[0]), []).append(row)
    return {
        key: InstancesView.from_visible(grid, rows, new_attrs)
        for key, rows in row_maps.items()
    }


def decompose_on_numeric_attribute_threshold(
    grid: DataGrid, attr: Attribute, value: float
) -> dict[str, InstancesView]:
    """Split rows into views keyed "1" (above ``value``) and "0", without ``attr``."""
    if not isinstance(attr, FloatAttribute):
        raise TypeError("Invalid argument")
    return _decompose(grid, attr, lambda raw: "1" if unpack_float(raw) > value else "0")


def decompose_on_attribute_values(grid: DataGrid, attr: Attribute) -> dict[str, InstancesView]:
    """Split rows into views keyed by the value of ``attr``, without ``attr``."""
    return _decompose(grid, attr, attr.string_from_sys_val)


def train_test_split(grid: DataGrid, prop: float) -> tuple[InstancesView, InstancesView]:
    """Shuffle ``grid`` and split it into training and testing views.

    Roughly a fraction ``prop`` of the rows goes to the testing view;
    ``prop`` is meaningful between 0.0 and 1.0.
    """
    grid = shuffle(grid)
    _, rows = grid.size()
    threshold = int(100 * prop)
    training: list[int] = []
    testing: list[int] = []
    for row in range(rows):
        (training if random.randint(0, 100) > threshold else testing).append(row)
    attrs = grid.all_attributes()
    return (
        InstancesView.from_visible(grid, training, attrs),
        InstancesView.from_visible(grid, testing, attrs),
    )


def lazy_shuffle(grid: DataGrid) -> InstancesView:
    """A view of ``grid`` with randomised rows, leaving ``grid`` unchanged."""
    _, rows = grid.size()
    row_map: dict[int, int] = {}
    for i in range(rows):
        j = random.randint(0, i)
        row_map[i] = j
        row_map[j] = i
    return InstancesView.from_rows(grid, row_map)


def shuffle(grid: DataGrid) -> DataGrid:
    """Randomise row order in place for DenseInstances, otherwise through a view."""
    if not isinstance(grid, DenseInstances):
        return lazy_shuffle(grid)
    _, rows = grid.size()
    for i in range(rows):
        grid.swap_rows(i, random.randint(0, i))
    return grid


def sample_with_replacement(grid: DataGrid, size: int) -> InstancesView:
    """A view of ``size`` rows each drawn at random from ``grid``."""
    _, rows = grid.size()
    if rows <= 0:
        raise ValueError("cannot sample from a grid without rows")
    return InstancesView.from_rows(grid, {i: random.randrange(rows) for i in range(size)})


def check_compatible(first: DataGrid, second: DataGrid) -> list[Attribute] | None:
    """Return the shared attributes if both grids have the same ones, else None."""
    first_attrs = first.all_attributes()
    second_attrs = second.all_attributes()
    shared = attribute_intersect(first_attrs, second_attrs)
    if len(shared) != len(first_attrs) or len(shared) != len(second_attrs):
        return None
    return shared


def check_strictly_compatible(first: DataGrid, second: DataGrid) -> bool:
    """Whether two DenseInstances have the same groups holding equal attributes in order."""
    if not isinstance(first, DenseInstances) or not isinstance(second, DenseInstances):
        return False
    first_groups = first.all_attribute_groups()
    second_groups = second.all_attribute_groups()
    if first_groups.keys() != second_groups.keys():
        return False
    for name, group in first_groups.items():
        attrs1 = group.attributes
        attrs2 = second_groups[name].attributes
        if len(attrs1) != len(attrs2):
            return False
        if not all(a.equals(b) for a, b in zip(attrs1, attrs2)):
            return False
    return True


def instances_are_equal(first: DataGrid, second: DataGrid) -> bool:
    """Whether two grids hold equal attributes with the same values on every row."""
    _, rows = first.size()
    _, other_rows = second.size()
    if rows != other_rows:
        return False
    for attr in first.all_attributes():
        spec1 = first.get_attribute(attr)
        try:
            spec2 = second.get_attribute(attr)
        except KeyError:
            return False
        if not spec1.attr.equals(spec2.attr):
            return False
        for row in range(rows):
            if bytes(first.get(spec1, row)) != bytes(second.get(spec2, row)):
                return False
    return True