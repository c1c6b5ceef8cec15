"""Tests for footmark.extract: definitions, references and classification."""

import logging

import pytest

from footmark.config import EngineConfig, engine_config_context
from footmark.errors import DuplicateDefinitionError, FootnoteNotFoundError
from footmark.extract import extract, id_number, is_definition_token, is_integer_id


def _token_bounds(text: str, token: str, occurrence: int = 0) -> tuple[int, int]:
    start = -1
    for _ in range(occurrence + 1):
        start = text.index(token, start + 1)
    return start, start + len(token)


class TestIsDefinitionToken:
    """The definition/reference disambiguation predicate."""

    def test_definition_at_line_start(self) -> None:
        text = "[^1]: note"
        assert is_definition_token(text, *_token_bounds(text, "[^1]"))

    def test_definition_after_indent(self) -> None:
        text = "body\n  \t[^1]: note"
        assert is_definition_token(text, *_token_bounds(text, "[^1]"))

    def test_reference_followed_by_colon_mid_line(self) -> None:
        text = "As noted[^1]: the rest"
        assert not is_definition_token(text, *_token_bounds(text, "[^1]"))

    def test_reference_at_line_start_without_colon(self) -> None:
        text = "[^1] starts this line"
        assert not is_definition_token(text, *_token_bounds(text, "[^1]"))

    def test_definition_lookalike_inside_definition_content(self) -> None:
        text = "[^1]: compare [^2]: other"
        assert is_definition_token(text, *_token_bounds(text, "[^1]"))
        assert not is_definition_token(text, *_token_bounds(text, "[^2]"))

    def test_colon_separated_by_space_is_reference(self) -> None:
        text = "[^1] : not a definition"
        assert not is_definition_token(text, *_token_bounds(text, "[^1]"))

    def test_second_line_prefix_only(self) -> None:
        text = "text [^1]\n[^1]: def"
        assert not is_definition_token(text, *_token_bounds(text, "[^1]", 0))
        assert is_definition_token(text, *_token_bounds(text, "[^1]", 1))

    def test_token_at_end_of_text(self) -> None:
        text = "end [^1]"
        assert not is_definition_token(text, *_token_bounds(text, "[^1]"))


class TestExtractDefinitions:
    """First pass: definitions."""

    def test_basic_definition(self) -> None:
        model = extract("See [^1].\n\n[^1]: note.")
        (record,) = model.records
        assert record.id == "1"
        assert record.content == "note."
        assert record.definition.line == 2
        assert record.definition.span.slice(model.source) == "[^1]: note."

    def test_label_span_stops_before_content(self) -> None:
        model = extract("[^a]:   content here")
        definition = model.records[0].definition
        assert definition.label_span.slice(model.source) == "[^a]:   "
        assert definition.content == "content here"

    def test_empty_definition_is_valid(self) -> None:
        model = extract("x[^e]\n\n[^e]:")
        (record,) = model.records
        assert record.content == ""
        assert record.is_referenced

    def test_content_does_not_run_onto_next_line(self) -> None:
        model = extract("[^1]:\nnext line")
        assert model.records[0].content == ""
        assert model.records[0].definition.span.end == 5

    def test_crlf_line_endings(self) -> None:
        model = extract("a[^1]\r\n\r\n[^1]: note\r\n")
        assert model.records[0].content == "note"

    def test_indented_definition(self) -> None:
        model = extract("a[^1]\n\n  [^1]: indented")
        definition = model.records[0].definition
        assert definition.content == "indented"
        assert definition.span.start == model.source.index("[^1]:")

    def test_named_ids(self) -> None:
        model = extract("a[^my-note_2]\n\n[^my-note_2]: named")
        assert model.records[0].id == "my-note_2"
        assert model.records[0].is_referenced

    def test_definition_order(self) -> None:
        model = extract("[^b]: second\n[^a]: first")
        assert [r.id for r in model.records] == ["b", "a"]

    def test_non_ascii_id_is_plain_text(self) -> None:
        model = extract("x[^é]\n\n[^é]: note")
        assert model.records == ()
        assert model.orphaned == ()


class TestExtractReferences:
    """Second pass: references and orphan detection."""

    def test_reference_before_and_after_definition(self) -> None:
        model = extract("[^1]: a\n\ntext [^1] more [^1]")
        record = model.records[0]
        assert record.reference_count == 2
        assert [ref.line for ref in record.references] == [2, 2]
        assert record.first_reference is record.references[0]

    def test_reference_lines(self) -> None:
        model = extract("one\ntwo [^1]\n\nthree [^1]\n\n[^1]: x")
        assert [ref.line for ref in model.records[0].references] == [1, 3]

    def test_orphaned_references(self) -> None:
        model = extract("a [^5] b [^5] c [^6]")
        assert model.records == ()
        assert [o.id for o in model.orphaned] == ["5", "5", "6"]
        assert model.orphaned[0].span.slice(model.source) == "[^5]"

    def test_unreferenced_is_never_orphaned(self) -> None:
        model = extract("[^x]: orphan footnote")
        assert model.orphaned == ()
        (record,) = model.unreferenced
        assert record.id == "x"
        assert not record.is_referenced
        assert record.first_reference is None

    def test_reference_inside_definition_content(self) -> None:
        model = extract("a[^1]\n\n[^1]: see [^2]\n[^2]: other")
        second = model.get("2")
        assert second is not None
        assert second.reference_count == 1
        assert second.references[0].line == 2

    def test_flat_list_puts_unreferenced_last(self) -> None:
        model = extract("[^u]: unused\n[^r]: used\n\nx[^r]")
        assert [r.id for r in model.footnotes] == ["r", "u"]

    def test_lookup(self) -> None:
        model = extract("a[^1]\n\n[^1]: x")
        assert model.get("1") is model.require("1")
        assert model.get("2") is None
        assert model.ids == frozenset({"1"})
        with pytest.raises(FootnoteNotFoundError):
            model.require("2")


class TestDuplicateDefinitions:
    """Last definition wins; earlier ones are reported."""

    TEXT = "a[^1]\n\n[^1]: first\n[^1]: second"

    def test_last_one_wins(self) -> None:
        model = extract(self.TEXT)
        (record,) = model.records
        assert record.content == "second"
        assert record.definition.line == 3

    def test_overridden_definition_reported(self) -> None:
        model = extract(self.TEXT)
        (duplicate,) = model.duplicate_definitions
        assert duplicate.content == "first"
        assert duplicate.line == 2

    def test_warning_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="footmark"):
            extract(self.TEXT)
        assert "defined again" in caplog.text

    def test_strict_mode_argument(self) -> None:
        with pytest.raises(DuplicateDefinitionError, match="line 3"):
            extract(self.TEXT, strict_duplicates=True)

    def test_strict_mode_from_config(self) -> None:
        with engine_config_context(EngineConfig(strict_duplicates=True)):
            with pytest.raises(DuplicateDefinitionError):
                extract(self.TEXT)


class TestIdNumbers:
    """Numeric readings of footnote ids."""

    @pytest.mark.parametrize(
        ("footnote_id", "expected"),
        [("7", 7), ("10a", 10), ("007", 7), ("-3", -3), ("b12", None), ("note", None)],
    )
    def test_leading_number(self, footnote_id: str, expected: int | None) -> None:
        assert id_number(footnote_id) == expected

    def test_integer_id(self) -> None:
        assert is_integer_id("3")
        assert not is_integer_id("3a")
        assert not is_integer_id("-3")
