import io

import pytest

from learngrid.attributes import AttributeType, CategoricalAttribute, FloatAttribute
from learngrid.csvio import (
    build_instances_from_csv,
    count_csv_rows,
    csv_attributes,
    estimate_precision,
    match_attributes,
    parse_csv_to_instances,
    parse_csv_to_instances_with_attribute_groups,
    parse_csv_to_templated_instances,
    sniff_attribute_names,
    sniff_attribute_types,
)
from learngrid.dense import DenseInstances
from learngrid.packing import unpack_float

IRIS = (
    "Sepal length,Sepal width,Petal length,Petal width,Species\n"
    "5.1,3.5,1.4,0.2,Iris-setosa\n"
    "7.0,3.2,4.7,1.4,Iris-versicolor\n"
    "6.3,3.3,6.0,2.5,Iris-virginica\n"
)

IRIS_NO_HEADER = IRIS.split("\n", 1)[1]


def stream(text):
    return io.StringIO(text)


def test_count_rows_without_header():
    assert count_csv_rows(stream(IRIS_NO_HEADER)) == 3


def test_count_rows_includes_header():
    assert count_csv_rows(stream(IRIS)) == 4


def test_count_rows_skips_empty_lines():
    assert count_csv_rows(stream("a,b\n1,2\n\n3,4\n")) == 3


def test_count_rows_field_mismatch():
    with pytest.raises(ValueError):
        count_csv_rows(stream("a,b\n1\n"))


def test_estimate_precision_skips_directives():
    assert estimate_precision(stream("@relation x\n% comment\n1.234,5\n")) == 3


def test_estimate_precision_only_first_lines():
    text = "1.1\n" * 6 + "1.12345\n"
    assert estimate_precision(stream(text)) == 1


def test_attributes_types_and_names():
    attrs = csv_attributes(stream(IRIS), True)
    assert attrs[0].attr_type == AttributeType.FLOAT
    assert attrs[4].attr_type == AttributeType.CATEGORICAL
    assert attrs[0].name == "Sepal length"
    assert attrs[4].name == "Species"


def test_sniff_attribute_types():
    attrs = sniff_attribute_types(stream(IRIS), True)
    assert [a.attr_type for a in attrs] == [
        AttributeType.FLOAT,
        AttributeType.FLOAT,
        AttributeType.FLOAT,
        AttributeType.FLOAT,
        AttributeType.CATEGORICAL,
    ]
    assert attrs[0].precision == 1


def test_sniff_attribute_names():
    names = sniff_attribute_names(stream(IRIS), True)
    assert names == ["Sepal length", "Sepal width", "Petal length", "Petal width", "Species"]


def test_sniff_attribute_names_without_header():
    assert sniff_attribute_names(stream(IRIS_NO_HEADER), False) == ["0", "1", "2", "3", "4"]


def test_sniff_empty_stream():
    with pytest.raises(ValueError):
        sniff_attribute_names(stream(""), True)


def test_parse_rows():
    instances = parse_csv_to_instances(stream(IRIS), True)
    assert instances.row_string(0) == "5.1 3.5 1.4 0.2 Iris-setosa"
    assert instances.row_string(1) == "7.0 3.2 4.7 1.4 Iris-versicolor"
    assert instances.row_string(2) == "6.3 3.3 6.0 2.5 Iris-virginica"
    assert instances.size() == (5, 3)


def test_parse_sets_last_column_as_class():
    instances = parse_csv_to_instances(stream(IRIS), True)
    classes = instances.all_class_attributes()
    assert [c.name for c in classes] == ["Species"]


def test_parse_awkward_data_types():
    text = "value,label\n1.5,abc\n2.25,def\n"
    instances = parse_csv_to_instances(stream(text), True)
    attrs = instances.all_attributes()
    assert attrs[0].attr_type == AttributeType.FLOAT
    assert attrs[1].attr_type == AttributeType.CATEGORICAL


def test_build_reports_bad_value():
    text = "x,y\n1.5,a\nnope,b\n"
    attrs = csv_attributes(stream(text), True)
    grid = DenseInstances()
    for attr in attrs:
        grid.add_attribute(attr)
    grid.extend(2)
    with pytest.raises(ValueError, match="error at line 1"):
        build_instances_from_csv(stream(text), attrs, True, grid)


def test_match_attributes():
    original = FloatAttribute("x")
    template = FloatAttribute("x")
    other = CategoricalAttribute("y")
    result = match_attributes([original, other], [template])
    assert result[0] is template
    assert result[1] is other


def test_match_attributes_by_name_across_types():
    sniffed = CategoricalAttribute("Species")
    template = CategoricalAttribute("Species", ["a", "b"])
    assert match_attributes([sniffed], [template])[0] is template


def test_templated_instances_share_attributes():
    template = parse_csv_to_instances(stream(IRIS), True)
    text = (
        "Sepal length,Sepal width,Petal length,Petal width,Species\n"
        "6.3,3.3,6.0,2.5,Iris-virginica\n"
    )
    result = parse_csv_to_templated_instances(stream(text), True, template)
    species = template.all_class_attributes()[0]
    assert result.all_class_attributes() == [species]
    assert result.row_string(0) == "6.3 3.3 6.0 2.5 Iris-virginica"
    assert species.values == ["Iris-setosa", "Iris-versicolor", "Iris-virginica"]


def test_attribute_groups_with_class_override():
    text = "label,p1,p2\n3,0.5,0.25\n7,0.75,1.5\n"
    number = CategoricalAttribute("Number")
    result = parse_csv_to_instances_with_attribute_groups(
        stream(text), {}, {"Number": "ClassGroup"}, {0: number}, True
    )
    assert result.get_attribute_group("ClassGroup").attributes == [number]
    assert result.all_class_attributes() == [number]
    assert number.values == ["3", "7"]
    p1 = next(a for a in result.all_attributes() if a.name == "p1")
    assert unpack_float(result.get(result.get_attribute(p1), 1)) == 0.75


def test_attribute_groups_for_regular_attributes():
    text = "label,p1,p2\n3,0.5,0.25\n7,0.75,1.5\n"
    result = parse_csv_to_instances_with_attribute_groups(
        stream(text), {"p1": "Pixels", "p2": "Pixels"}, {}, {}, True
    )
    names = [a.name for a in result.get_attribute_group("Pixels").attributes]
    assert names == ["p1", "p2"]
    p2 = next(a for a in result.all_attributes() if a.name == "p2")
    assert unpack_float(result.get(result.get_attribute(p2), 0)) == 0.25