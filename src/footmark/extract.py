"""Footnote extraction.

Two passes over one text snapshot:

1. Definitions: ``[^id]: content`` anchored at the start of a line (leading
   spaces or tabs allowed). Content runs to the end of that line only.
2. References: every other ``[^id]`` in the text. A token that opens a
   definition is recognised by ``is_definition_token`` and skipped.

The result is a ``FootnoteModel``: one ``FootnoteRecord`` per defined id
(referenced or not) plus the ``OrphanedReference`` list for references whose
id has no definition. Models are immutable and tied to the text they were
built from; after any edit, extract again.

Example:
    >>> model = extract("See [^1].\\n\\n[^1]: note.")
    >>> [(r.id, r.content, r.reference_count) for r in model.records]
    [('1', 'note.', 1)]
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from footmark.config import get_engine_config
from footmark.errors import DuplicateDefinitionError, FootnoteNotFoundError
from footmark.location import Span, line_of
from footmark.utils.logger import get_logger

logger = get_logger(__name__)

# Ids are ASCII word characters and hyphens; "[^é]" is plain text
# group 1: label "[^id]:" plus spacing, group 2: id, group 3: content
_DEFINITION_RE = re.compile(
    r"^[ \t]*(\[\^([\w-]+)\]:[ \t]*)([^\r\n]*)", re.MULTILINE | re.ASCII
)
_REFERENCE_RE = re.compile(r"\[\^([\w-]+)\]", re.ASCII)
_LEADING_NUMBER_RE = re.compile(r"-?[0-9]+")
_INTEGER_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True, slots=True)
class Reference:
    """An in-body ``[^id]`` occurrence.

    Attributes:
        id: Footnote identifier (``[\\w-]+``), not necessarily numeric
        span: Range of the ``[^id]`` token
        line: Zero-based line of the token

    """

    id: str
    span: Span
    line: int


@dataclass(frozen=True, slots=True)
class OrphanedReference:
    """A reference whose id has no definition anywhere in the text."""

    id: str
    span: Span
    line: int


@dataclass(frozen=True, slots=True)
class Definition:
    """A line-anchored ``[^id]: content`` declaration.

    Attributes:
        id: Footnote identifier
        content: Text after ``]:`` up to the end of the line (may be empty)
        span: From ``[`` to the end of the line, line break excluded
        line: Zero-based line of the definition
        label_span: ``[^id]:`` plus the spacing before the content. Rewriting
            only this part never disturbs references inside the content.

    """

    id: str
    content: str
    span: Span
    line: int
    label_span: Span


@dataclass(frozen=True, slots=True)
class FootnoteRecord:
    """A defined footnote together with all of its references.

    Records are rebuilt from scratch on every extraction and never mutated.
    """

    id: str
    content: str
    definition: Definition
    references: tuple[Reference, ...] = ()

    @property
    def is_referenced(self) -> bool:
        return len(self.references) > 0

    @property
    def reference_count(self) -> int:
        return len(self.references)

    @property
    def first_reference(self) -> Reference | None:
        """Earliest reference in document order, or None if unreferenced."""
        return self.references[0] if self.references else None


@dataclass(frozen=True, slots=True)
class FootnoteModel:
    """Everything extracted from one text snapshot.

    Attributes:
        source: The exact text every span in this model refers to
        records: One record per defined id, in definition order
        orphaned: References without a definition, in document order
        duplicate_definitions: Definitions that were overridden by a later
            definition of the same id (last one wins)

    """

    source: str
    records: tuple[FootnoteRecord, ...] = ()
    orphaned: tuple[OrphanedReference, ...] = ()
    duplicate_definitions: tuple[Definition, ...] = ()
    _by_id: dict[str, FootnoteRecord] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        self._by_id.update((record.id, record) for record in self.records)

    @property
    def referenced(self) -> tuple[FootnoteRecord, ...]:
        return tuple(r for r in self.records if r.is_referenced)

    @property
    def unreferenced(self) -> tuple[FootnoteRecord, ...]:
        return tuple(r for r in self.records if not r.is_referenced)

    @property
    def footnotes(self) -> tuple[FootnoteRecord, ...]:
        """Flat list for simple consumers: referenced first, unreferenced last."""
        return self.referenced + self.unreferenced

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(self._by_id)

    def get(self, footnote_id: str) -> FootnoteRecord | None:
        return self._by_id.get(footnote_id)

    def require(self, footnote_id: str) -> FootnoteRecord:
        """Return the record for ``footnote_id``.

        Raises:
            FootnoteNotFoundError: If the id is not defined in this snapshot
        """
        record = self._by_id.get(footnote_id)
        if record is None:
            raise FootnoteNotFoundError(footnote_id)
        return record


def id_number(footnote_id: str) -> int | None:
    """Numeric value of a footnote id, read from its leading digits.

    This is the number used for ordering, gap detection and picking the next
    id: ``"12"`` and ``"12b"`` are both 12, ``"-3"`` is -3, ``"b12"`` and
    ``"note"`` have none.

    Example:
        >>> [id_number(i) for i in ("7", "10a", "note")]
        [7, 10, None]
    """
    match = _LEADING_NUMBER_RE.match(footnote_id)
    return int(match.group()) if match else None


def is_integer_id(footnote_id: str) -> bool:
    """True when the id is made of digits only, e.g. ``"3"`` but not ``"3a"``."""
    return _INTEGER_RE.fullmatch(footnote_id) is not None


def is_definition_token(text: str, start: int, end: int) -> bool:
    """Decide whether the ``[^id]`` token at ``text[start:end]`` opens a definition.

    A token is a definition label when everything between the start of its
    line and the token is spaces or tabs, and the character right after the
    token is ``:``. Anything else is a reference, including a ``[^id]:``
    that appears mid-line inside other text.

    Args:
        text: Full document text
        start: Offset of ``[``
        end: Offset just past ``]``

    Returns:
        True if the token is a definition label, not a reference
    """
    if not text.startswith(":", end):
        return False
    line_start = text.rfind("\n", 0, start) + 1
    return text[line_start:start].strip(" \t") == ""


def _scan_definitions(
    text: str, strict: bool
) -> tuple[dict[str, Definition], list[Definition]]:
    definitions: dict[str, Definition] = {}
    duplicates: list[Definition] = []

    for match in _DEFINITION_RE.finditer(text):
        footnote_id = match.group(2)
        definition = Definition(
            id=footnote_id,
            content=match.group(3),
            span=Span(match.start(1), match.end(3)),
            line=line_of(text, match.start(1)),
            label_span=Span(match.start(1), match.end(1)),
        )

        previous = definitions.get(footnote_id)
        if previous is not None:
            if strict:
                raise DuplicateDefinitionError(footnote_id, definition.line, previous.line)
            logger.warning(
                "Footnote [^%s] defined again on line %d; definition on line %d is ignored",
                footnote_id,
                definition.line,
                previous.line,
            )
            duplicates.append(previous)

        definitions[footnote_id] = definition

    return definitions, duplicates


def _scan_references(text: str) -> list[Reference]:
    references: list[Reference] = []
    line = 0
    counted_to = 0

    for match in _REFERENCE_RE.finditer(text):
        start, end = match.span()
        if is_definition_token(text, start, end):
            continue

        # Matches arrive in order, so count newlines incrementally
        line += text.count("\n", counted_to, start)
        counted_to = start
        references.append(Reference(id=match.group(1), span=Span(start, end), line=line))

    return references


def extract(text: str, *, strict_duplicates: bool | None = None) -> FootnoteModel:
    """Extract the footnote model from a document.

    Args:
        text: Full document text
        strict_duplicates: Raise on duplicate definitions instead of keeping
            the last one. Defaults to the active EngineConfig.

    Returns:
        FootnoteModel tied to ``text``

    Raises:
        DuplicateDefinitionError: In strict mode, if an id is defined twice
    """
    if strict_duplicates is None:
        strict_duplicates = get_engine_config().strict_duplicates

    definitions, duplicates = _scan_definitions(text, strict_duplicates)

    by_id: dict[str, list[Reference]] = {}
    orphaned: list[OrphanedReference] = []
    for ref in _scan_references(text):
        if ref.id in definitions:
            by_id.setdefault(ref.id, []).append(ref)
        else:
            orphaned.append(OrphanedReference(id=ref.id, span=ref.span, line=ref.line))

    records = tuple(
        FootnoteRecord(
            id=footnote_id,
            content=definition.content,
            definition=definition,
            references=tuple(by_id.get(footnote_id, ())),
        )
        for footnote_id, definition in definitions.items()
    )

    model = FootnoteModel(
        source=text,
        records=records,
        orphaned=tuple(orphaned),
        duplicate_definitions=tuple(duplicates),
    )
    logger.debug(
        "Extracted %d referenced, %d unreferenced, %d orphaned reference(s)",
        len(model.referenced),
        len(model.unreferenced),
        len(model.orphaned),
    )
    return model
