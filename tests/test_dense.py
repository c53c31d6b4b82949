import mmap
import random

import pytest

from learngrid.attribute_utils import resolve_all_attributes
from learngrid.attributes import BinaryAttribute, CategoricalAttribute, FloatAttribute
from learngrid.dense import (
    DenseInstances,
    copy_dense_instances,
    new_dense_copy,
    new_structural_copy,
)
from learngrid.groups import BinaryAttributeGroup, FixedAttributeGroup
from learngrid.packing import pack_float, unpack_float


def _binary_instances(bits):
    inst = DenseInstances()
    for i in range(3):
        inst.add_attribute(BinaryAttribute(str(i)))
    by_name = {}
    for spec in resolve_all_attributes(inst):
        name = spec.attr.name
        assert name in {"0", "1", "2"}
        by_name[name] = spec
    specs = [by_name["0"], by_name["1"], by_name["2"]]
    inst.extend(len(bits))
    for row, values in enumerate(bits):
        for col, bit in enumerate(values):
            inst.set(specs[col], row, bytes([bit]))
    return inst, specs


def test_binary_group_simple():
    bits = [[1, 0, 0], [0, 1, 0], [0, 0, 1]]
    inst, specs = _binary_instances(bits)
    rows = list(inst.iter_rows(specs))
    assert len(rows) == 3
    for values, row in rows:
        assert all(len(v) == 1 for v in values)
        assert [v[0] for v in values] == bits[row]


def test_binary_group_random():
    rng = random.Random(42)
    bits = [[1 if rng.gauss(0, 1) >= 0 else 0 for _ in range(3)] for _ in range(50)]
    inst, specs = _binary_instances(bits)
    rows = list(inst.iter_rows(specs))
    assert len(rows) == 50
    for values, row in rows:
        assert all(len(v) == 1 for v in values)
        assert [v[0] for v in values] == bits[row]


def _iris_like():
    inst = DenseInstances()
    floats = [FloatAttribute(n, precision=1) for n in ("sl", "sw", "pl", "pw")]
    species = CategoricalAttribute("Species")
    specs = [inst.add_attribute(a) for a in floats]
    cls_spec = inst.add_attribute(species)
    inst.add_class_attribute(species)
    data = [
        ("5.1", "3.5", "1.4", "0.2", "Iris-setosa"),
        ("7.0", "3.2", "4.7", "1.4", "Iris-versicolor"),
        ("6.3", "3.3", "6.0", "2.5", "Iris-virginica"),
    ]
    inst.extend(len(data))
    for row, values in enumerate(data):
        for spec, value in zip(specs, values[:4]):
            inst.set(spec, row, spec.attr.sys_val_from_string(value))
        inst.set(cls_spec, row, species.sys_val_from_string(values[4]))
    return inst, floats, species


def test_row_string_and_size():
    inst, _, _ = _iris_like()
    assert inst.row_string(0) == "5.1 3.5 1.4 0.2 Iris-setosa"
    assert inst.row_string(2) == "6.3 3.3 6.0 2.5 Iris-virginica"
    assert inst.size() == (5, 3)


def test_attribute_ordering_and_groups():
    inst, floats, species = _iris_like()
    assert inst.all_attributes() == floats + [species]
    groups = inst.all_attribute_groups()
    assert set(groups) == {"FLOAT0", "CAT0"}
    assert isinstance(groups["FLOAT0"], FixedAttributeGroup)
    assert inst.get_attribute_group("CAT0").attributes == [species]


def test_class_attributes_add_and_remove():
    inst, floats, species = _iris_like()
    assert inst.all_class_attributes() == [species]
    inst.remove_class_attribute(species)
    assert inst.all_class_attributes() == []
    inst.add_class_attribute(floats[0])
    assert inst.all_class_attributes() == [floats[0]]


def test_get_attribute_by_equality():
    inst, floats, _ = _iris_like()
    spec = inst.get_attribute(FloatAttribute("pl"))
    assert spec.attr is floats[2]
    assert spec.position == 2
    with pytest.raises(KeyError):
        inst.get_attribute(FloatAttribute("missing"))


def test_cannot_add_after_extend():
    inst, _, _ = _iris_like()
    with pytest.raises(RuntimeError):
        inst.add_attribute(FloatAttribute("late"))
    with pytest.raises(RuntimeError):
        inst.create_attribute_group("late", 8)


def test_set_wrong_length_raises():
    inst, floats, _ = _iris_like()
    spec = inst.get_attribute(floats[0])
    with pytest.raises(ValueError):
        inst.set(spec, 0, b"\x00\x01")


def test_unknown_group_errors():
    inst = DenseInstances()
    with pytest.raises(KeyError):
        inst.get_attribute_group("nope")
    with pytest.raises(KeyError):
        inst.add_attribute_to_attribute_group(FloatAttribute("x"), "nope")


def test_incompatible_attribute_in_group():
    inst = DenseInstances()
    inst.create_attribute_group("G", 8)
    inst.add_attribute_to_attribute_group(CategoricalAttribute("a", ["x"]), "G")
    with pytest.raises(ValueError):
        inst.add_attribute_to_attribute_group(CategoricalAttribute("b", ["y"]), "G")


def test_class_group_with_overridden_attribute():
    inst = DenseInstances()
    number = CategoricalAttribute("Number")
    inst.create_attribute_group("ClassGroup", 8)
    spec = inst.add_attribute_to_attribute_group(number, "ClassGroup")
    pixel = FloatAttribute("pixel")
    inst.add_attribute(pixel)
    inst.add_class_attribute(number)
    inst.extend(2)
    inst.set(spec, 1, number.sys_val_from_string("7"))
    assert inst.get_attribute_group("ClassGroup").attributes == [number]
    assert inst.all_class_attributes() == [number]
    assert number.string_from_sys_val(inst.get(spec, 1)) == "7"


def test_high_dimensional_layout_spans_groups():
    count = (mmap.PAGESIZE // 8) * 2 + 1
    inst = DenseInstances()
    attrs = [FloatAttribute(str(i)) for i in range(count)]
    specs = [inst.add_attribute(a) for a in attrs]
    inst.extend(2)
    for i, spec in enumerate(specs):
        inst.set(spec, 1, pack_float(float(i)))
    float_groups = [n for n in inst.all_attribute_groups() if n.startswith("FLOAT")]
    assert len(float_groups) >= 2
    assert inst.size() == (count, 2)
    assert unpack_float(inst.get(specs[-1], 1)) == float(count - 1)
    assert unpack_float(inst.get(specs[-1], 0)) == 0.0


def test_binary_attributes_use_bit_group():
    inst = DenseInstances()
    attr = BinaryAttribute("b")
    spec = inst.add_attribute(attr)
    group = inst.get_attribute_group("BIN0")
    assert isinstance(group, BinaryAttributeGroup)
    assert group.attributes == [attr]
    assert group.row_size_in_bytes() == 1
    assert spec.position == 0


def test_swap_rows():
    inst, _, _ = _iris_like()
    first = inst.row_string(0)
    last = inst.row_string(2)
    inst.swap_rows(0, 2)
    assert inst.row_string(0) == last
    assert inst.row_string(2) == first


def test_iter_rows_can_stop_early():
    inst, floats, _ = _iris_like()
    spec = inst.get_attribute(floats[0])
    seen = []
    for values, row in inst.iter_rows([spec]):
        seen.append(row)
        if row == 1:
            break
    assert seen == [0, 1]


def test_string_summary():
    inst, _, _ = _iris_like()
    text = str(inst)
    assert text.startswith("Instances with 3 row(s) 5 attribute(s)\n")
    assert "*\tCategoricalAttribute(\"Species\"" in text
    assert "\nData:\n" in text
    assert text.endswith("All rows displayed")


def test_string_summary_truncates():
    inst = DenseInstances()
    attr = FloatAttribute("x")
    inst.add_attribute(attr)
    inst.extend(35)
    text = str(inst)
    assert text.endswith("5 row(s) undisplayed")


def test_new_dense_copy_matches():
    inst, _, _ = _iris_like()
    copy = new_dense_copy(inst)
    assert copy.size() == inst.size()
    for row in range(3):
        assert copy.row_string(row) == inst.row_string(row)
    assert [a.name for a in copy.all_class_attributes()] == ["Species"]


def test_new_structural_copy_is_empty():
    inst, _, species = _iris_like()
    copy = new_structural_copy(inst)
    assert copy.size() == (5, 0)
    assert copy.all_class_attributes() == [species]


def test_copy_dense_instances_keeps_groups():
    inst, floats, species = _iris_like()
    copy = copy_dense_instances(inst, inst.all_attributes())
    assert set(copy.all_attribute_groups()) == {"FLOAT0", "CAT0"}
    assert copy.get_attribute_group("CAT0").attributes == [species]
    assert copy.get_attribute_group("FLOAT0").attributes == floats
    assert copy.size() == (5, 0)