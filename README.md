# learngrid

`learngrid` holds tabular training data for machine-learning code. Each cell is
stored as packed bytes, and each column is described by an *attribute* that
gives its type and converts between text and stored bytes.

## What it offers

- **Attributes** (`learngrid.attributes`). `FloatAttribute` stores 8-byte
  floats and prints them with a fixed `precision`; `CategoricalAttribute`
  stores 8-byte indices into its list of `values`, adding new values as they
  are seen; `BinaryAttribute` stores a single 0 or 1. `equals` compares
  attributes by type, name and (for categorical ones) values in order.
- **Byte packing** (`learngrid.packing`). `pack_u64`, `unpack_u64`,
  `pack_float` and `unpack_float` convert to and from the 8-byte
  little-endian representation.
- **Dense instances** (`learngrid.dense`). `DenseInstances` keeps values in
  attribute groups (`learngrid.groups`): fixed-width groups for floats and
  categories, bit-packed groups for binary attributes. Attributes are added
  first; `extend` then allocates rows and fixes the layout. Named groups can be
  created with `create_attribute_group` and filled with
  `add_attribute_to_attribute_group`. `new_dense_copy`,
  `new_structural_copy` and `copy_dense_instances` build copies.
- **Views** (`learngrid.view`). `InstancesView.from_rows`,
  `InstancesView.from_visible` and `InstancesView.from_attrs` hide
  attributes, or hide and reorder rows, without copying data.
- **CSV** (`learngrid.csvio`, `learngrid.files`). Streams or file paths are
  read into `DenseInstances`; each column's type is guessed from the first data
  row, and float precision from the digits seen in the first lines. The last
  column becomes the class attribute. Templated loading and loading into named
  attribute groups are also available.
- **ARFF** (`learngrid.arff`). `load_dense_arff` reads a dense ARFF file (its
  last attribute becomes the class); `write_dense_arff` writes one to a stream,
  and `serialize_dense_arff` writes into an existing file.
- **Attribute JSON** (`learngrid.serialization`). Attributes can be turned
  into JSON and rebuilt, and matched back to the attributes of a grid.
- **Sorting** (`learngrid.sorting`). `sort_instances` reorders the rows of a
  `DenseInstances` in place by the raw bytes of the chosen attributes, and
  `lazy_sort` returns a reordered view. Both take `SortDirection.ASCENDING` or
  `SortDirection.DESCENDING` from `learngrid.grid`.
- **Utilities** (`learngrid.instance_utils`, `learngrid.attribute_utils`).
  Getting and setting class values, class distributions (overall, after a
  split on an attribute's values or on a threshold), decomposing a grid into
  views, shuffling, sampling with replacement, train/test splits, and checks
  that two grids are compatible, strictly compatible or equal; plus set
  operations on attribute lists and resolution of attribute specs.

## Installing

```
pip install .
```

To install the test dependencies and run the tests:

```
pip install .[test]
pytest
```

## A short tour

```python
from learngrid.files import load_csv
from learngrid.instance_utils import class_distribution, train_test_split
from learngrid.sorting import lazy_sort
from learngrid.grid import SortDirection
from learngrid.attribute_utils import resolve_all_attributes

data = load_csv("iris_headers.csv", has_headers=True)
print(data.row_string(0))
print(class_distribution(data))      # counts of each class value

specs = resolve_all_attributes(data)
ascending = lazy_sort(data, SortDirection.ASCENDING, specs[:-1])

train, test = train_test_split(data, 0.3)
```

## Errors

Bad input raises ordinary Python exceptions: `ValueError` for unparsable
values or malformed files, `KeyError` for attributes or groups that cannot be
found, `TypeError` for the wrong kind of attribute, `IndexError` for rows out
of range, and `RuntimeError` when attributes are added after `extend`.
Matching deserialised attributes to a grid raises
`learngrid.errors.LearnError`, which wraps the original cause with a
description and a captured stack; setting the environment variable
`LEARNGRID_FULL_DEBUG=true` makes its message include that stack.

## What it does not do

- It has no learning algorithms or classifiers; it only holds and prepares
  data.
- It does not save a whole `DenseInstances` to a binary archive or write CSV
  files; the only data writer is the dense ARFF one, and
  `serialize_dense_arff` needs the target file to exist already.
- It does not read sparse ARFF files.
- It has no command-line tool.