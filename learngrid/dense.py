"""A data grid that stores every value explicitly in attribute groups."""

from __future__ import annotations

import mmap
import threading
from typing import Iterable, Iterator

from .attribute_utils import resolve_all_attributes
from .attributes import Attribute, BinaryAttribute, CategoricalAttribute, FloatAttribute
from .groups import AttributeGroup, BinaryAttributeGroup, FixedAttributeGroup
from .grid import DataGrid, UpdatableDataGrid
from .spec import AttributeSpec

_PAGE_SIZE = mmap.PAGESIZE
_VALUE_WIDTH = 8
_MAX_DISPLAYED_ROWS = 30


class DenseInstances(UpdatableDataGrid):
    """Rows of values held in row-major attribute groups.

    Attributes are added first; :meth:`extend` then allocates storage and
    fixes the layout, after which no more attributes or groups can be added.
    """

    def __init__(self) -> None:
        self._group_ids: dict[str, int] = {}
        self._group_names: dict[int, str] = {}
        self._groups: list[AttributeGroup] = []
        self._lock = threading.RLock()
        self._fixed = False
        self._class_attrs: dict[AttributeSpec, bool] = {}
        self._max_row = 0
        self._attributes: list[Attribute] = []
        self._float_row_bytes = 0
        self._cat_row_bytes = 0
        self._bin_row_bits = 0

    # Attribute groups

    def _create_group(self, name: str, size: int) -> None:
        if self._fixed:
            raise RuntimeError("Can't add additional Attributes")
        group: AttributeGroup = FixedAttributeGroup(size) if size != 0 else BinaryAttributeGroup()
        group_id = len(self._groups)
        self._group_ids[name] = group_id
        self._group_names[group_id] = name
        self._groups.append(group)

    def create_attribute_group(self, name: str, size: int) -> None:
        """Add a named group; size 0 stores bits, otherwise ``size`` bytes per value."""
        with self._lock:
            self._create_group(name, size)

    def all_attribute_groups(self) -> dict[str, AttributeGroup]:
        """Return the groups keyed by name."""
        with self._lock:
            return {name: self._groups[gid] for name, gid in self._group_ids.items()}

    def get_attribute_group(self, name: str) -> AttributeGroup:
        """Return the group with the given name; raise KeyError if there is none."""
        with self._lock:
            try:
                return self._groups[self._group_ids[name]]
            except KeyError:
                raise KeyError(f"AttributeGroup '{name}' doesn't exist") from None

    def group_name(self, pond: int) -> str:
        """Return the name of the group with index ``pond``."""
        with self._lock:
            return self._group_names[pond]

    # Attributes

    def add_attribute(self, attr: Attribute) -> AttributeSpec:
        """Add an attribute to a default group for its type and return its spec."""
        with self._lock:
            if self._fixed:
                raise RuntimeError("Can't add additional Attributes")
            binary = False
            if isinstance(attr, CategoricalAttribute):
                self._cat_row_bytes += _VALUE_WIDTH
                name = f"CAT{self._cat_row_bytes // _PAGE_SIZE}"
            elif isinstance(attr, FloatAttribute):
                self._float_row_bytes += _VALUE_WIDTH
                name = f"FLOAT{self._float_row_bytes // _PAGE_SIZE}"
            elif isinstance(attr, BinaryAttribute):
                self._bin_row_bits += 1
                name = f"BIN{(self._bin_row_bits // 8) // _PAGE_SIZE}"
                binary = True
            else:
                raise TypeError("Unrecognised Attribute type")

            if name not in self._group_ids:
                self._create_group(name, 0 if binary else _VALUE_WIDTH)
            group_id = self._group_ids[name]
            group = self._groups[group_id]
            group.add_attribute(attr)
            self._attributes.append(attr)
            return AttributeSpec(group_id, len(group.attributes) - 1, attr)

    def add_attribute_to_attribute_group(self, attr: Attribute, group: str) -> AttributeSpec:
        """Add an attribute to a named group; every member must be compatible with it."""
        with self._lock:
            if group not in self._group_ids:
                raise KeyError(
                    f"AttributeGroup '{group}' doesn't exist. Call create_attribute_group() first"
                )
            group_id = self._group_ids[group]
            target = self._groups[group_id]
            for position, existing in enumerate(target.attributes):
                if not existing.compatible(attr):
                    raise ValueError(
                        f"Attribute {attr} is not Compatible with {existing} "
                        f"in pond '{group}' (position {position})"
                    )
            target.add_attribute(attr)
            self._attributes.append(attr)
            return AttributeSpec(group_id, len(target.attributes) - 1, attr)

    def get_attribute(self, attr: Attribute) -> AttributeSpec:
        with self._lock:
            for group_id, group in enumerate(self._groups):
                for position, existing in enumerate(group.attributes):
                    if existing.equals(attr):
                        return AttributeSpec(group_id, position, existing)
            raise KeyError(f"Couldn't resolve {attr}")

    def all_attributes(self) -> list[Attribute]:
        with self._lock:
            return [attr for group in self._groups for attr in group.attributes]

    def add_class_attribute(self, attr: Attribute) -> None:
        with self._lock:
            self._class_attrs[self.get_attribute(attr)] = True

    def remove_class_attribute(self, attr: Attribute) -> None:
        with self._lock:
            self._class_attrs[self.get_attribute(attr)] = False

    def all_class_attributes(self) -> list[Attribute]:
        with self._lock:
            return [spec.attr for spec, flag in self._class_attrs.items() if flag]

    # Storage

    def extend(self, rows: int) -> None:
        """Allocate room for ``rows`` more rows and fix the layout."""
        if rows < 0:
            raise ValueError(f"cannot extend by {rows} rows")
        with self._lock:
            for group in self._groups:
                group.resize(rows * group.row_size_in_bytes())
            self._fixed = True
            self._max_row += rows

    def set(self, spec: AttributeSpec, row: int, value: bytes) -> None:
        self._groups[spec.pond].set(spec.position, row, value)

    def get(self, spec: AttributeSpec, row: int) -> bytes:
        return self._groups[spec.pond].get(spec.position, row)

    def row_string(self, row: int) -> str:
        return " ".join(group.row_string(row) for group in self._groups)

    def iter_rows(self, specs: Iterable[AttributeSpec]) -> Iterator[tuple[list[bytes], int]]:
        specs = list(specs)
        for row in range(self._max_row):
            yield [self._groups[s.pond].get(s.position, row) for s in specs], row

    def size(self) -> tuple[int, int]:
        return len(self.all_attributes()), self._max_row

    def swap_rows(self, i: int, j: int) -> None:
        """Exchange the values of rows ``i`` and ``j``."""
        for spec in resolve_all_attributes(self):
            first = self.get(spec, i)
            second = self.get(spec, j)
            self.set(spec, j, first)
            self.set(spec, i, second)

    def __str__(self) -> str:
        specs = resolve_all_attributes(self)
        cols, rows = self.size()
        parts = [
            f"Instances with {rows} row(s) {cols} attribute(s)\n",
            "Attributes: \n",
        ]
        for spec in specs:
            prefix = "*\t" if self._class_attrs.get(spec, False) else "\t"
            parts.append(f"{prefix}{spec.attr}\n")
        parts.append("\nData:\n")
        shown = min(rows, _MAX_DISPLAYED_ROWS)
        for row in range(shown):
            values = "".join(
                f"{spec.attr.string_from_sys_val(self.get(spec, row))} " for spec in specs
            )
            parts.append(f"\t{values}\n")
        missing = rows - shown
        if missing:
            parts.append(f"\t...\n{missing} row(s) undisplayed")
        else:
            parts.append("All rows displayed")
        return "".join(parts)


def _copy_structure(grid: DataGrid) -> tuple[DenseInstances, list[AttributeSpec], list[AttributeSpec]]:
    result = DenseInstances()
    old_specs = []
    new_specs = []
    for attr in grid.all_attributes():
        old_specs.append(grid.get_attribute(attr))
        new_specs.append(result.add_attribute(attr))
    for attr in grid.all_class_attributes():
        result.add_class_attribute(attr)
    return result, old_specs, new_specs


def new_structural_copy(grid: DataGrid) -> DenseInstances:
    """An empty DenseInstances with the attributes and classes of ``grid``."""
    result, _, _ = _copy_structure(grid)
    return result


def new_dense_copy(grid: DataGrid) -> DenseInstances:
    """A DenseInstances holding a copy of every value of ``grid``."""
    result, old_specs, new_specs = _copy_structure(grid)
    _, rows = grid.size()
    result.extend(rows)
    for values, row in grid.iter_rows(old_specs):
        for spec, value in zip(new_specs, values):
            result.set(spec, row, value)
    return result


def copy_dense_instances(template: DenseInstances, template_attrs: Iterable[Attribute]) -> DenseInstances:
    """A DenseInstances with the same groups as ``template``, holding ``template_attrs``."""
    result = DenseInstances()
    for name, group in template.all_attribute_groups().items():
        result.create_attribute_group(name, 0 if isinstance(group, BinaryAttributeGroup) else _VALUE_WIDTH)
    for attr in template_attrs:
        spec = template.get_attribute(attr)
        result.add_attribute_to_attribute_group(attr, template.group_name(spec.pond))
    return result