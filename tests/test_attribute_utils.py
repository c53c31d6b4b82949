import pytest

from learngrid.attribute_utils import (
    attribute_difference,
    attribute_difference_references,
    attribute_intersect,
    attribute_intersect_references,
    non_class_attributes,
    non_class_float_attributes,
    resolve_all_attributes,
    resolve_attributes,
)
from learngrid.attributes import CategoricalAttribute, FloatAttribute
from learngrid.grid import DataGrid
from learngrid.spec import AttributeSpec


class ListGrid(DataGrid):
    def __init__(self, attrs, class_attrs=()):
        self._attrs = list(attrs)
        self._classes = list(class_attrs)

    def get_attribute(self, attr):
        for i, a in enumerate(self._attrs):
            if a.equals(attr):
                return AttributeSpec(0, i, a)
        raise KeyError(str(attr))

    def all_attributes(self):
        return list(self._attrs)

    def add_class_attribute(self, attr):
        self._classes.append(self.get_attribute(attr).attr)

    def remove_class_attribute(self, attr):
        self._classes.remove(self.get_attribute(attr).attr)

    def all_class_attributes(self):
        return list(self._classes)

    def get(self, spec, row):
        return b""

    def row_string(self, row):
        return ""

    def size(self):
        return len(self._attrs), 0


@pytest.fixture
def parts():
    a = FloatAttribute("a")
    b = FloatAttribute("b")
    c = CategoricalAttribute("c", ["x", "y"])
    return a, b, c


def test_non_class_float_attributes(parts):
    a, b, c = parts
    grid = ListGrid([a, b, c], [b])
    assert non_class_float_attributes(grid) == [a]


def test_non_class_attributes(parts):
    a, b, c = parts
    grid = ListGrid([a, b, c], [b])
    assert non_class_attributes(grid) == [a, c]


def test_resolve_attributes_keeps_order(parts):
    a, b, c = parts
    grid = ListGrid([a, b, c])
    specs = resolve_attributes(grid, [c, a])
    assert [s.attr for s in specs] == [c, a]
    assert [s.position for s in specs] == [2, 0]


def test_resolve_all_attributes(parts):
    grid = ListGrid(list(parts))
    specs = resolve_all_attributes(grid)
    assert [s.attr for s in specs] == list(parts)


def test_resolve_unknown_raises(parts):
    grid = ListGrid(list(parts))
    with pytest.raises(KeyError):
        resolve_attributes(grid, [FloatAttribute("missing")])


def test_intersect_uses_equality(parts):
    a, b, c = parts
    twin_c = CategoricalAttribute("c", ["x", "y"])
    assert attribute_intersect([a, b, c], [twin_c, a]) == [a, c]
    assert attribute_intersect([a, b, c], [twin_c])[0] is c


def test_intersect_references_uses_identity(parts):
    a, b, c = parts
    assert attribute_intersect_references([a, b, c], [FloatAttribute("a"), c]) == [c]


def test_difference_uses_equality(parts):
    a, b, c = parts
    assert attribute_difference([a, b, c], [FloatAttribute("b")]) == [a, c]


def test_difference_references_uses_identity(parts):
    a, b, c = parts
    assert attribute_difference_references([a, b, c], [FloatAttribute("b"), a]) == [b, c]


def test_reference_operations_drop_duplicates(parts):
    a, b, _ = parts
    assert attribute_difference_references([a, a, b], []) == [a, b]
    assert attribute_intersect_references([a, a, b], [a, b]) == [a, b]