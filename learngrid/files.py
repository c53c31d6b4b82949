"""File-path front ends to the CSV readers."""

from __future__ import annotations

import os
from typing import Mapping

from .attributes import Attribute
from .csvio import (
    count_csv_rows,
    csv_attributes,
    estimate_precision,
    parse_csv_to_instances,
    parse_csv_to_instances_with_attribute_groups,
    parse_csv_to_templated_instances,
    sniff_attribute_names,
    sniff_attribute_types,
)
from .dense import DenseInstances

PathLike = str | os.PathLike


def _open(path: PathLike):
    return open(path, newline="", encoding="utf-8")


def csv_file_rows(path: PathLike) -> int:
    """Return the number of records in a CSV file, header included."""
    with _open(path) as stream:
        return count_csv_rows(stream)


def csv_file_precision(path: PathLike) -> int:
    """Return the most digits after a decimal point in the first data lines of a file."""
    with _open(path) as stream:
        return estimate_precision(stream)


def csv_file_attributes(path: PathLike, has_headers: bool) -> list[Attribute]:
    """Return typed and named attributes for every column of a CSV file."""
    with _open(path) as stream:
        return csv_attributes(stream, has_headers)


def csv_file_attribute_names(path: PathLike, has_headers: bool) -> list[str]:
    """Return the column names of a CSV file, or column numbers without a header."""
    with _open(path) as stream:
        return sniff_attribute_names(stream, has_headers)


def csv_file_attribute_types(path: PathLike, has_headers: bool) -> list[Attribute]:
    """Guess an attribute type for each column of a CSV file."""
    with _open(path) as stream:
        return sniff_attribute_types(stream, has_headers)


def load_csv(path: PathLike, has_headers: bool) -> DenseInstances:
    """Read a CSV file into a DenseInstances whose last column is the class."""
    with _open(path) as stream:
        return parse_csv_to_instances(stream, has_headers)


def load_templated_csv(path: PathLike, has_headers: bool, template: DenseInstances) -> DenseInstances:
    """Read a CSV file using the layout and attributes of ``template``."""
    with _open(path) as stream:
        return parse_csv_to_templated_instances(stream, has_headers, template)


def load_csv_with_attribute_groups(
    path: PathLike,
    attr_groups: Mapping[str, str],
    class_attr_groups: Mapping[str, str],
    attr_overrides: Mapping[int, Attribute],
    has_headers: bool,
) -> DenseInstances:
    """Read a CSV file, placing named attributes into named groups."""
    with _open(path) as stream:
        return parse_csv_to_instances_with_attribute_groups(
            stream, attr_groups, class_attr_groups, attr_overrides, has_headers
        )