"""Views that hide or reorder the rows and attributes of another grid."""

from __future__ import annotations

from typing import Iterable, Iterator, Mapping

from .attribute_utils import resolve_all_attributes, resolve_attributes
from .attributes import Attribute
from .grid import DataGrid
from .spec import AttributeSpec

_MAX_DISPLAYED_ROWS = 30


class InstancesView(DataGrid):
    """A read-through view of a source grid with a row mapping and attribute filter.

    The row mapping sends a row number of the view to a row number of the
    source. With masking on, only mapped rows exist; otherwise unmapped rows
    pass through unchanged.
    """

    def __init__(
        self,
        src: DataGrid,
        *,
        specs: Iterable[AttributeSpec] | None = None,
        rows: Mapping[int, int] | None = None,
        mask_rows: bool = False,
    ) -> None:
        self._src = src
        self._specs = None if specs is None else list(specs)
        self._rows = None if rows is None else dict(rows)
        self._mask_rows = mask_rows
        self._class_attrs: dict[Attribute, bool] = {}
        self._add_class_attrs_from_src()

    @classmethod
    def from_rows(cls, src: DataGrid, rows: Mapping[int, int]) -> InstancesView:
        """A view where view row ``k`` shows source row ``rows[k]``; other rows pass through."""
        return cls(src, rows=rows)

    @classmethod
    def from_visible(
        cls, src: DataGrid, rows: Iterable[int], attrs: Iterable[Attribute]
    ) -> InstancesView:
        """A view showing only the given source rows, in order, and only ``attrs``."""
        return cls(
            src,
            specs=resolve_attributes(src, attrs),
            rows=dict(enumerate(rows)),
            mask_rows=True,
        )

    @classmethod
    def from_attrs(cls, src: DataGrid, attrs: Iterable[Attribute]) -> InstancesView:
        """A view showing every row but only ``attrs``."""
        return cls(src, specs=resolve_attributes(src, attrs))

    def _add_class_attrs_from_src(self) -> None:
        for attr in self._src.all_class_attributes():
            if self._specs is None or any(s.attr.equals(attr) for s in self._specs):
                self._class_attrs[attr] = True

    def _resolve_row(self, row: int) -> int | None:
        if self._rows is not None:
            if row in self._rows:
                return self._rows[row]
            if self._mask_rows:
                return None
        return row

    def get_attribute(self, attr: Attribute) -> AttributeSpec:
        if attr is None:
            raise ValueError("Attribute can't be None")
        if self._specs is None:
            return self._src.get_attribute(attr)
        for spec in self._specs:
            if spec.attr.equals(attr):
                return spec
        raise KeyError("Requested Attribute has been filtered")

    def all_attributes(self) -> list[Attribute]:
        if self._specs is None:
            return self._src.all_attributes()
        return [spec.attr for spec in self._specs]

    def add_class_attribute(self, attr: Attribute) -> None:
        if not any(existing.equals(attr) for existing in self.all_attributes()):
            raise KeyError("Attribute has been filtered")
        self._class_attrs[attr] = True

    def remove_class_attribute(self, attr: Attribute) -> None:
        self._class_attrs[attr] = False

    def all_class_attributes(self) -> list[Attribute]:
        return [attr for attr, flag in self._class_attrs.items() if flag]

    def get(self, spec: AttributeSpec, row: int) -> bytes:
        source_row = self._resolve_row(row)
        if source_row is None:
            raise IndexError("Out of range")
        return self._src.get(spec, source_row)

    def iter_rows(self, specs: Iterable[AttributeSpec]) -> Iterator[tuple[list[bytes], int]]:
        specs = list(specs)
        if not self._mask_rows:
            yield from self._src.iter_rows(specs)
            return
        for view_row, source_row in self._rows.items():
            yield [self._src.get(spec, source_row) for spec in specs], view_row

    def size(self) -> tuple[int, int]:
        cols, rows = self._src.size()
        if self._specs is not None:
            cols = len(self._specs)
        if self._rows is not None:
            if self._mask_rows or len(self._rows) > rows:
                rows = len(self._rows)
        return cols, rows

    def row_string(self, row: int) -> str:
        return " ".join(
            spec.attr.string_from_sys_val(self.get(spec, row))
            for spec in resolve_all_attributes(self)
        )

    def __str__(self) -> str:
        specs = resolve_all_attributes(self)
        cols, rows = self.size()
        parts = [f"InstancesView with {rows} row(s) {cols} attribute(s)\n"]
        if self._specs is not None:
            parts.append("With defined Attribute view\n")
        if self._rows is not None:
            parts.append("With defined Row view\n")
        if self._mask_rows:
            parts.append("Row masking on.\n")
        parts.append("Attributes:\n")
        for spec in specs:
            prefix = "*\t" if self._class_attrs.get(spec.attr, False) else "\t"
            parts.append(f"{prefix}{spec.attr}\n")
        shown = min(rows, _MAX_DISPLAYED_ROWS)
        parts.append("Data:")
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