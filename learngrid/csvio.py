"""Reading CSV data into dense instance grids."""

from __future__ import annotations

import csv
import re
from typing import IO, Iterable, Iterator, Mapping

from .attribute_utils import resolve_attributes
from .attributes import Attribute, BinaryAttribute, CategoricalAttribute, FloatAttribute
from .dense import DenseInstances, copy_dense_instances
from .grid import UpdatableDataGrid

_NUMBER = re.compile(r"[0-9]+(.[0-9]+)?")
_FLOAT_ENTRY = re.compile(r"[-+]?[0-9]*\.?[0-9]+([eE][-+]?[0-9]+)?")
_PRECISION_LINES = 6
_VALUE_WIDTH = 8


def _records(stream: IO[str]) -> Iterator[list[str]]:
    """Yield the CSV records of ``stream`` from its start, skipping empty lines."""
    stream.seek(0)
    reader = csv.reader(stream)
    expected: int | None = None
    for record in reader:
        if not record:
            continue
        if expected is None:
            expected = len(record)
        elif len(record) != expected:
            raise ValueError(
                f"record on line {reader.line_num}: wrong number of fields "
                f"({len(record)}, expected {expected})"
            )
        yield record


def _first_record(records: Iterator[list[str]]) -> list[str]:
    try:
        return next(records)
    except StopIteration:
        raise ValueError("unexpected end of CSV data") from None


def count_csv_rows(stream: IO[str]) -> int:
    """Return the number of records in ``stream``, header included."""
    return sum(1 for _ in _records(stream))


def estimate_precision(stream: IO[str]) -> int:
    """Return the most digits after a decimal point in the first data lines."""
    stream.seek(0)
    best = 0
    counted = 0
    for line in stream:
        if counted >= _PRECISION_LINES:
            break
        line = line.rstrip("\n").removesuffix("\r")
        if not line or line[0] in "@%":
            continue
        for match in _NUMBER.finditer(line):
            parts = match.group(0).split(".")
            if len(parts) == 2:
                best = max(best, len(parts[1]))
        counted += 1
    return best


def sniff_attribute_names(stream: IO[str], has_headers: bool) -> list[str]:
    """Return the header names, or column numbers as names when there is no header."""
    header = _first_record(_records(stream))
    if has_headers:
        return [name.strip() for name in header]
    return [str(i) for i in range(len(header))]


def sniff_attribute_types(stream: IO[str], has_headers: bool) -> list[Attribute]:
    """Guess an attribute type for each column from the first data row."""
    records = _records(stream)
    if has_headers:
        _first_record(records)
    columns = _first_record(records)
    attrs: list[Attribute] = [
        FloatAttribute("") if _FLOAT_ENTRY.fullmatch(entry.strip(" ")) else CategoricalAttribute()
        for entry in columns
    ]
    precision = estimate_precision(stream)
    for attr in attrs:
        if isinstance(attr, FloatAttribute):
            attr.precision = precision
    return attrs


def csv_attributes(stream: IO[str], has_headers: bool) -> list[Attribute]:
    """Return typed and named attributes for every column of ``stream``."""
    attrs = sniff_attribute_types(stream, has_headers)
    for attr, name in zip(attrs, sniff_attribute_names(stream, has_headers)):
        attr.name = name
    return attrs


def build_instances_from_csv(
    stream: IO[str],
    attrs: Iterable[Attribute],
    has_header: bool,
    grid: UpdatableDataGrid,
) -> None:
    """Fill ``grid`` with the records of ``stream``, column ``i`` going to ``attrs[i]``."""
    specs = resolve_attributes(grid, attrs)
    records = _records(stream)
    if has_header:
        next(records, None)
    for row, record in enumerate(records):
        if len(record) > len(specs):
            raise IndexError(f"row {row} has {len(record)} fields but only {len(specs)} attributes")
        try:
            for spec, value in zip(specs, record):
                grid.set(spec, row, spec.attr.sys_val_from_string(value.strip()))
        except ValueError as exc:
            raise ValueError(f"error at line {row} (error {exc})") from exc


def parse_csv_to_instances(stream: IO[str], has_headers: bool) -> DenseInstances:
    """Read ``stream`` into a DenseInstances whose last column is the class."""
    row_count = count_csv_rows(stream)
    if has_headers:
        row_count -= 1
    attrs = csv_attributes(stream, has_headers)
    if not attrs:
        raise ValueError("CSV data has no columns")
    instances = DenseInstances()
    for attr in attrs:
        instances.add_attribute(attr)
    instances.extend(row_count)
    build_instances_from_csv(stream, attrs, has_headers, instances)
    instances.add_class_attribute(attrs[-1])
    return instances


def match_attributes(
    attrs: Iterable[Attribute], template_attrs: Iterable[Attribute]
) -> list[Attribute]:
    """Replace each attribute by the last template attribute equal to it or sharing its name."""
    templates = list(template_attrs)
    matched = []
    for attr in attrs:
        result = attr
        for template in templates:
            if attr.equals(template) or attr.name == template.name:
                result = template
        matched.append(result)
    return matched


def parse_csv_to_templated_instances(
    stream: IO[str], has_headers: bool, template: DenseInstances
) -> DenseInstances:
    """Read ``stream`` using the layout and attributes of ``template``."""
    row_count = count_csv_rows(stream)
    if has_headers:
        row_count -= 1
    template_attrs = template.all_attributes()
    attrs = match_attributes(csv_attributes(stream, has_headers), template_attrs)
    instances = copy_dense_instances(template, template_attrs)
    instances.extend(row_count)
    build_instances_from_csv(stream, attrs, has_headers, instances)
    for attr in template.all_class_attributes():
        instances.add_class_attribute(attr)
    return instances


def parse_csv_to_instances_with_attribute_groups(
    stream: IO[str],
    attr_groups: Mapping[str, str],
    class_attr_groups: Mapping[str, str],
    attr_overrides: Mapping[int, Attribute],
    has_headers: bool,
) -> DenseInstances:
    """Read ``stream``, placing named attributes into named groups.

    ``attr_groups`` and ``class_attr_groups`` map attribute names to group
    names; attributes in the latter also become class attributes.
    ``attr_overrides`` replaces the sniffed attribute of a column.
    """
    row_count = count_csv_rows(stream)
    attrs = [
        attr_overrides.get(i, attr)
        for i, attr in enumerate(csv_attributes(stream, has_headers))
    ]

    group_sizes: dict[str, int] = {}
    combined: dict[str, str] = {}
    for name, group in attr_groups.items():
        group_sizes[group] = 0
        combined[name] = group
    for name, group in class_attr_groups.items():
        group_sizes[group] = _VALUE_WIDTH
        combined[name] = group
    for attr in attrs:
        group = combined.get(attr.name)
        if group is not None:
            group_sizes[group] = 0 if isinstance(attr, BinaryAttribute) else _VALUE_WIDTH

    instances = DenseInstances()
    for group, size in group_sizes.items():
        instances.create_attribute_group(group, size)

    for attr in attrs:
        group = combined.get(attr.name)
        if group is not None:
            instances.add_attribute_to_attribute_group(attr, group)
        else:
            instances.add_attribute(attr)
        if attr.name in class_attr_groups:
            instances.add_class_attribute(attr)

    instances.extend(row_count)
    build_instances_from_csv(stream, attrs, has_headers, instances)
    return instances