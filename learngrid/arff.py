"""Reading and writing dense ARFF files."""

from __future__ import annotations

import csv
from typing import IO, Iterable, Iterator

from .attribute_utils import non_class_attributes, resolve_attributes
from .attributes import Attribute, CategoricalAttribute, FloatAttribute
from .dense import DenseInstances
from .files import PathLike, csv_file_precision
from .grid import DataGrid, UpdatableDataGrid


def _lines(stream: IO[str]) -> Iterator[str]:
    for line in stream:
        yield line.rstrip("\n").removesuffix("\r")


def write_dense_arff(
    stream: IO[str], grid: DataGrid, attrs: Iterable[Attribute], relation: str
) -> None:
    """Write ``grid`` to ``stream`` as dense ARFF with the header attributes in order."""
    stream.write(f"@relation {relation}\n\n")
    specs = resolve_attributes(grid, attrs)
    for spec in specs:
        attr = spec.attr
        if isinstance(attr, CategoricalAttribute):
            kind = "{" + ", ".join(attr.values) + "}"
        else:
            kind = "real"
        stream.write(f"@attribute {attr.name} {kind}\n")
    stream.write("\n@data\n")
    for values, _ in grid.iter_rows(specs):
        line = ",".join(spec.attr.string_from_sys_val(v) for spec, v in zip(specs, values))
        stream.write(line + "\n")


def serialize_dense_arff_with_attributes(
    grid: DataGrid, attrs: Iterable[Attribute], path: PathLike, relation: str
) -> None:
    """Write ``grid`` into an existing file as dense ARFF with the given attribute order."""
    with open(path, "r+", newline="", encoding="utf-8") as stream:
        write_dense_arff(stream, grid, attrs, relation)


def serialize_dense_arff(grid: DataGrid, path: PathLike, relation: str) -> None:
    """Write ``grid`` into an existing file as dense ARFF, class attributes last."""
    attrs = non_class_attributes(grid) + grid.all_class_attributes()
    serialize_dense_arff_with_attributes(grid, attrs, path, relation)


def arff_row_count(path: PathLike) -> int:
    """Return the number of data rows in an ARFF file."""
    counting = False
    count = 0
    with open(path, newline="", encoding="utf-8") as stream:
        for line in _lines(stream):
            if not line:
                continue
            if counting:
                if line[0] not in "@%":
                    count += 1
            elif line[0] == "@" and line.lower() == "@data":
                counting = True
    return count


def _categories(fields: list[str]) -> list[str]:
    cats = list(fields[2:]) if len(fields) > 3 else fields[2].split(",")
    cats[0] = cats[0][1:]
    cats[-1] = cats[-1][:-1]
    result = []
    for cat in cats:
        cat = cat.strip()
        if cat.endswith(","):
            cat = cat[:-1]
        result.append(cat)
    return result


def arff_attributes(path: PathLike) -> list[Attribute]:
    """Return the attributes declared in the header of an ARFF file."""
    attrs: list[Attribute] = []
    with open(path, newline="", encoding="utf-8") as stream:
        for line in _lines(stream):
            if not line or line[0] != "@":
                continue
            fields = line.split()
            if len(fields) < 3 or fields[0].lower() != "@attribute":
                continue
            attr: Attribute
            if fields[2].lower() == "real":
                attr = FloatAttribute(fields[1], precision=0)
            elif fields[2].startswith("{"):
                if not fields[-1].endswith("}"):
                    raise ValueError(f"Missing categorical bracket on line '{line}'")
                attr = CategoricalAttribute(fields[1], _categories(fields))
            else:
                raise ValueError(f"Unsupported Attribute type {fields[2]} on line '{line}'")
            attrs.append(attr)

    precision = csv_file_precision(path)
    for attr in attrs:
        if isinstance(attr, FloatAttribute):
            attr.precision = precision
    return attrs


def build_instances_from_arff(
    stream: IO[str], attrs: Iterable[Attribute], grid: UpdatableDataGrid
) -> None:
    """Fill ``grid`` with the data section of a dense ARFF stream."""
    specs = resolve_attributes(grid, attrs)
    reading = False
    row = 0
    for line in _lines(stream):
        if line.startswith("%"):
            continue
        if not reading:
            if line.strip().lower() == "@data":
                reading = True
            continue
        for record in csv.reader([line]):
            if not record:
                continue
            try:
                for spec, value in zip(specs, record, strict=False):
                    value = value.strip()
                    attr = spec.attr
                    if isinstance(attr, CategoricalAttribute) and attr.sys_val(value) is None:
                        raise ValueError(f"Unexpected class on line '{line}'")
                    grid.set(spec, row, attr.sys_val_from_string(value))
                if len(record) > len(specs):
                    raise IndexError(
                        f"row {row} has {len(record)} fields but only {len(specs)} attributes"
                    )
            except ValueError as exc:
                raise ValueError(f"Error at line {row} (error {exc})") from exc
            row += 1


def load_dense_arff(path: PathLike) -> DenseInstances:
    """Read a dense ARFF file; its last attribute becomes the class."""
    rows = arff_row_count(path)
    attrs = arff_attributes(path)
    if not attrs:
        raise ValueError(f"no attributes declared in {path}")
    grid = DenseInstances()
    for attr in attrs:
        grid.add_attribute(attr)
    grid.add_class_attribute(attrs[-1])
    grid.extend(rows)
    with open(path, newline="", encoding="utf-8") as stream:
        build_instances_from_arff(stream, attrs, grid)
    return grid