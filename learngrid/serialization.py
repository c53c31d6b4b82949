"""JSON serialisation of attributes."""

from __future__ import annotations

import json
from typing import Any, Iterable

from .attributes import Attribute, BinaryAttribute, CategoricalAttribute, FloatAttribute
from .errors import wrap_error

_ATTRIBUTE_TYPES: dict[str, type[Attribute]] = {
    "binary": BinaryAttribute,
    "float": FloatAttribute,
    "categorical": CategoricalAttribute,
}


def _dumps(value: Any) -> bytes:
    return json.dumps(value, sort_keys=True, separators=(",", ":")).encode("utf-8")


def marshal_attribute(attr: Attribute) -> dict[str, Any]:
    """Return the JSON mapping of an attribute."""
    return json.loads(_dumps(attr.to_json()))


def serialize_attribute(attr: Attribute) -> bytes:
    """Encode an attribute as JSON bytes."""
    return _dumps(attr.to_json())


def serialize_attributes(attrs: Iterable[Attribute]) -> bytes:
    """Encode a sequence of attributes as a JSON array."""
    return _dumps([a.to_json() for a in attrs])


def _build_attribute(raw: Any) -> Attribute:
    if not isinstance(raw, dict):
        raise ValueError(f"attribute must be a JSON object, got {raw!r}")
    kind = raw.get("type", "")
    try:
        attr = _ATTRIBUTE_TYPES[kind]()
    except KeyError:
        raise ValueError(f"Unrecognised Attribute format: {kind}") from None
    try:
        attr.load_json(raw.get("attr"))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Can't deserialize: {raw} (error: {exc})") from exc
    attr.name = raw.get("name", "")
    return attr


def deserialize_attribute(data: bytes | str) -> Attribute:
    """Rebuild an attribute from its JSON encoding."""
    return _build_attribute(json.loads(data))


def deserialize_attributes(data: bytes | str) -> list[Attribute]:
    """Rebuild a list of attributes from a JSON array."""
    try:
        raws = json.loads(data)
    except ValueError as exc:
        raise ValueError(f"Failed to deserialize attributes: {exc}") from exc
    if not isinstance(raws, list):
        raise ValueError("Failed to deserialize attributes: expected a JSON array")
    return [_build_attribute(raw) for raw in raws]


def replace_deserialized_attribute(deserialized: Attribute, grid: Any) -> Attribute:
    """Return the attribute of ``grid`` equal to ``deserialized``."""
    for attr in grid.all_attributes():
        if attr.equals(deserialized):
            return attr
    raise wrap_error(ValueError(f"Unable to match {deserialized} in {grid}"))


def replace_deserialized_attributes(deserialized: Iterable[Attribute], grid: Any) -> list[Attribute]:
    """Match every attribute in ``deserialized`` with its counterpart in ``grid``."""
    result = []
    for attr in deserialized:
        try:
            result.append(replace_deserialized_attribute(attr, grid))
        except Exception as exc:
            raise wrap_error(exc) from exc
    return result