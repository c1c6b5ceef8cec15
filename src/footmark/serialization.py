"""JSON round-trip for footmark models.

Converts extracted models, outlines, group trees and edit sets to/from
JSON-compatible dicts, so a host can hand them to a UI process or cache them
next to the document they came from.

All output is deterministic (sorted keys).

Example:
    from footmark import extract
    from footmark.serialization import to_json, from_json

    model = extract("See [^1].\\n\\n[^1]: note.")
    restored = from_json(to_json(model))
    assert restored == model

Thread Safety:
    All functions are pure and safe to call from any thread.

"""

from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any

from footmark.edits import EditOp, EditSet
from footmark.extract import (
    Definition,
    FootnoteModel,
    FootnoteRecord,
    OrphanedReference,
    Reference,
)
from footmark.grouping import GroupKind, GroupNode, SectionFootnote
from footmark.location import Position, Span
from footmark.outline import HeaderNode

# Registry of type names to classes for deserialization
_TYPES: dict[str, type] = {
    "Position": Position,
    "Span": Span,
    "Reference": Reference,
    "OrphanedReference": OrphanedReference,
    "Definition": Definition,
    "FootnoteRecord": FootnoteRecord,
    "FootnoteModel": FootnoteModel,
    "HeaderNode": HeaderNode,
    "SectionFootnote": SectionFootnote,
    "GroupNode": GroupNode,
    "EditOp": EditOp,
    "EditSet": EditSet,
}

# Fields holding enum members, stored by value
_ENUM_FIELDS: dict[str, type[Enum]] = {"kind": GroupKind}


def to_dict(obj: Any) -> dict[str, Any]:
    """Convert a footmark model object to a JSON-compatible dict.

    Includes a ``_type`` discriminator field for deserialization. Derived
    lookup tables are not serialized; they are rebuilt on load.

    Raises:
        TypeError: If ``obj`` is not a footmark model type
    """
    type_name = type(obj).__name__
    if _TYPES.get(type_name) is not type(obj):
        raise TypeError(f"Cannot serialize {type_name}")

    result: dict[str, Any] = {"_type": type_name}
    for f in fields(obj):
        if not f.init:
            continue
        result[f.name] = _serialize_value(getattr(obj, f.name))
    return result


def _serialize_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return to_dict(value)
    if isinstance(value, (tuple, list)):
        return [_serialize_value(item) for item in value]
    # Primitives: str, int, bool, None
    return value


def from_dict(data: dict[str, Any]) -> Any:
    """Reconstruct a footmark model object from a dict.

    Raises:
        ValueError: If ``_type`` is missing or unknown
    """
    type_name = data.get("_type")
    if type_name is None:
        raise ValueError("Missing '_type' field in serialized object")

    cls = _TYPES.get(type_name)
    if cls is None:
        raise ValueError(f"Unknown type: {type_name!r}")

    kwargs: dict[str, Any] = {}
    for f in fields(cls):
        if not f.init or f.name not in data:
            continue
        raw = data[f.name]
        enum_cls = _ENUM_FIELDS.get(f.name)
        kwargs[f.name] = enum_cls(raw) if enum_cls is not None else _deserialize_value(raw)
    return cls(**kwargs)


def _deserialize_value(value: Any) -> Any:
    if isinstance(value, dict) and "_type" in value:
        return from_dict(value)
    if isinstance(value, list):
        return tuple(_deserialize_value(item) for item in value)
    return value


def to_json(obj: Any, *, indent: int | None = None) -> str:
    """Serialize a model object (or a list of them, e.g. a group tree) to JSON."""
    if isinstance(obj, list):
        return json.dumps([to_dict(item) for item in obj], sort_keys=True, indent=indent)
    return json.dumps(to_dict(obj), sort_keys=True, indent=indent)


def from_json(data: str) -> Any:
    """Deserialize the output of ``to_json``."""
    raw = json.loads(data)
    if isinstance(raw, list):
        return [from_dict(item) for item in raw]
    return from_dict(raw)
