"""Edit sets and their application.

An ``EditSet`` is a batch of ``EditOp`` span replacements planned against one
text snapshot. All spans refer to that snapshot, never to an intermediate
state, so the batch is applied in one pass:

    new_text = apply(text, edits)

Application is all-or-nothing. Every span is validated before any output is
produced; a stale snapshot, an out-of-range span or two overlapping spans
abort the whole batch.

Normalization:
    Planners that delete tokens ask for follow-up cleanup through the
    ``collapse_spaces`` and ``collapse_blank_lines`` flags. Cleanup runs on the
    result text and only around the places where something was deleted, so
    indentation and blank lines elsewhere in the document are preserved.

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from footmark.errors import InvalidSpanError, OverlappingEditsError, StaleEditSetError
from footmark.location import Span
from footmark.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class EditOp:
    """Replace ``span`` of the source text with ``replacement``.

    An empty replacement deletes; an empty span inserts.
    """

    span: Span
    replacement: str = ""

    @classmethod
    def delete(cls, span: Span) -> EditOp:
        return cls(span, "")

    @classmethod
    def insert(cls, offset: int, text: str) -> EditOp:
        return cls(Span(offset, offset), text)

    @property
    def is_deletion(self) -> bool:
        return not self.replacement and not self.span.is_empty


@dataclass(frozen=True, slots=True)
class EditSet:
    """Ordered edit operations plus the text they were computed against.

    Attributes:
        source: Snapshot the spans refer to. ``apply`` refuses any other text.
        ops: Operations in planning order. For several insertions at the same
            offset, earlier ops end up earlier in the result.
        collapse_spaces: After applying, collapse runs of 2+ spaces at
            deletion sites to one space
        collapse_blank_lines: After applying, collapse runs of 3+ newlines at
            deletion sites to exactly two

    """

    source: str
    ops: tuple[EditOp, ...] = ()
    collapse_spaces: bool = False
    collapse_blank_lines: bool = False

    def __len__(self) -> int:
        return len(self.ops)

    def __iter__(self) -> Iterator[EditOp]:
        return iter(self.ops)

    @property
    def is_empty(self) -> bool:
        return not self.ops

    def merge(self, other: EditSet) -> EditSet:
        """Combine two edit sets planned against the same snapshot.

        Raises:
            StaleEditSetError: If the sets were planned on different texts
        """
        if other.source != self.source:
            raise StaleEditSetError("Cannot merge edit sets planned on different texts")
        return EditSet(
            source=self.source,
            ops=self.ops + other.ops,
            collapse_spaces=self.collapse_spaces or other.collapse_spaces,
            collapse_blank_lines=self.collapse_blank_lines or other.collapse_blank_lines,
        )


def _order_key(item: tuple[int, EditOp]) -> tuple[int, int, int]:
    index, op = item
    return op.span.start, op.span.end, index


def _ordered(ops: tuple[EditOp, ...]) -> list[EditOp]:
    """Operations in output order.

    Sorting by (start, end, planning index) and emitting left to right gives
    the same text as splicing right to left in the reverse order: an
    insertion sharing its offset with a replacement lands before it, and
    insertions sharing an offset keep their planning order.
    """
    indexed = sorted(enumerate(ops), key=_order_key)
    return [op for _, op in indexed]


def _validate(text: str, ordered: list[EditOp]) -> None:
    reach: Span | None = None
    for op in ordered:
        span = op.span
        if span.end > len(text):
            raise InvalidSpanError(f"Span exceeds text of length {len(text)}", span.start, span.end)
        if reach is not None and span.overlaps(reach):
            raise OverlappingEditsError((reach.start, reach.end), (span.start, span.end))
        if not span.is_empty and (reach is None or span.end > reach.end):
            reach = span


def _splice(text: str, ordered: list[EditOp]) -> tuple[str, list[int]]:
    """Build the result text; return it with the deletion sites in it."""
    pieces: list[str] = []
    sites: list[int] = []
    cursor = 0
    length = 0

    for op in ordered:
        kept = text[cursor : op.span.start]
        pieces.append(kept)
        pieces.append(op.replacement)
        length += len(kept)
        if op.is_deletion:
            sites.append(length)
        length += len(op.replacement)
        cursor = op.span.end

    pieces.append(text[cursor:])
    return "".join(pieces), sites


def _run_at(text: str, site: int, char: str) -> tuple[int, int]:
    """Bounds of the maximal run of ``char`` touching ``site``."""
    left = site
    while left > 0 and text[left - 1] == char:
        left -= 1
    right = site
    while right < len(text) and text[right] == char:
        right += 1
    return left, right


def _normalize(text: str, sites: Iterable[int], *, spaces: bool, blank_lines: bool) -> str:
    runs: set[tuple[int, int, str]] = set()
    for site in sites:
        if spaces:
            left, right = _run_at(text, site, " ")
            if right - left >= 2:
                runs.add((left, right, " "))
        if blank_lines:
            left, right = _run_at(text, site, "\n")
            if right - left >= 3:
                runs.add((left, right, "\n\n"))

    # Maximal runs are identical or disjoint; rewrite right to left
    for left, right, replacement in sorted(runs, reverse=True):
        text = text[:left] + replacement + text[right:]
    return text


def collapse_spaces_at(text: str, sites: Iterable[int]) -> str:
    """Collapse each run of 2+ spaces touching one of ``sites`` to a single space."""
    return _normalize(text, sites, spaces=True, blank_lines=False)


def collapse_blank_lines_at(text: str, sites: Iterable[int]) -> str:
    """Collapse each run of 3+ newlines touching one of ``sites`` to exactly two."""
    return _normalize(text, sites, spaces=False, blank_lines=True)


def apply(text: str, edits: EditSet | Iterable[EditOp]) -> str:
    """Apply a batch of edits to ``text``.

    Args:
        text: The text the edits were planned against
        edits: An EditSet (its source must equal ``text``) or bare operations

    Returns:
        The edited text, normalized as the EditSet requests

    Raises:
        StaleEditSetError: If ``text`` is not the EditSet's source
        InvalidSpanError: If a span ends beyond ``text``
        OverlappingEditsError: If two spans overlap
    """
    if isinstance(edits, EditSet):
        if edits.source != text:
            raise StaleEditSetError(
                "Edit set was planned against a different text; re-extract and plan again"
            )
        edit_set = edits
    else:
        edit_set = EditSet(source=text, ops=tuple(edits))

    if edit_set.is_empty:
        return text

    ordered = _ordered(edit_set.ops)
    _validate(text, ordered)
    result, sites = _splice(text, ordered)

    if sites and (edit_set.collapse_spaces or edit_set.collapse_blank_lines):
        result = _normalize(
            result,
            sites,
            spaces=edit_set.collapse_spaces,
            blank_lines=edit_set.collapse_blank_lines,
        )

    logger.debug("Applied %d edit(s), %d deletion site(s)", len(ordered), len(sites))
    return result
