"""Tests for footmark.serialization: model JSON round-trip."""

import json

import pytest

from footmark.edits import EditOp, EditSet
from footmark.extract import extract
from footmark.grouping import GroupKind, GroupMode, group
from footmark.location import Span
from footmark.outline import outline
from footmark.serialization import from_dict, from_json, to_dict, to_json

TEXT = """Intro[^0].

# One
A[^1] and [^s], missing [^9].

# Two
Again [^s].

[^0]: zero
[^1]: one
[^s]: shared
[^u]: unused
[^u]: unused again
"""


class TestToDict:
    """Dict output shape."""

    def test_type_discriminator(self) -> None:
        data = to_dict(Span(1, 4))
        assert data == {"_type": "Span", "start": 1, "end": 4}

    def test_lookup_table_not_serialized(self) -> None:
        data = to_dict(extract(TEXT))
        assert "_by_id" not in data
        assert data["_type"] == "FootnoteModel"
        assert len(data["records"]) == 4

    def test_enum_stored_by_value(self) -> None:
        groups = group(extract(TEXT), outline(TEXT))
        assert to_dict(groups[-1])["kind"] == "unreferenced"

    def test_unknown_object_rejected(self) -> None:
        with pytest.raises(TypeError):
            to_dict(object())


class TestRoundTrip:
    """from_json(to_json(x)) == x for every model type."""

    def test_model(self) -> None:
        model = extract(TEXT)
        restored = from_json(to_json(model))
        assert restored == model
        assert len(restored.duplicate_definitions) == 1
        assert restored.orphaned[0].id == "9"

    def test_lookup_rebuilt(self) -> None:
        restored = from_json(to_json(extract(TEXT)))
        assert restored.require("s").reference_count == 2

    def test_outline(self) -> None:
        headers = outline(TEXT)
        assert from_json(to_json(headers)) == headers

    @pytest.mark.parametrize("mode", list(GroupMode))
    def test_group_tree(self, mode: GroupMode) -> None:
        groups = group(extract(TEXT), outline(TEXT), mode)
        restored = from_json(to_json(groups))
        assert restored == groups
        assert restored[-1].kind is GroupKind.UNREFERENCED

    def test_edit_set(self) -> None:
        edits = EditSet(
            "abc", (EditOp.delete(Span(0, 1)), EditOp.insert(3, "!")), collapse_spaces=True
        )
        assert from_json(to_json(edits)) == edits


class TestDeterminism:
    """Stable output for caching."""

    def test_sorted_keys(self) -> None:
        first = to_json(extract(TEXT))
        assert first == to_json(extract(TEXT))
        assert list(json.loads(first)) == sorted(json.loads(first))

    def test_indent(self) -> None:
        assert "\n" in to_json(Span(0, 1), indent=2)


class TestFromDictErrors:
    """Malformed payloads."""

    def test_missing_type(self) -> None:
        with pytest.raises(ValueError, match="_type"):
            from_dict({"start": 0, "end": 1})

    def test_unknown_type(self) -> None:
        with pytest.raises(ValueError, match="Unknown type"):
            from_dict({"_type": "Paragraph"})
