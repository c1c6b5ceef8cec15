"""Navigation queries.

Pure lookups a host uses to move the cursor: where a footnote is defined,
where its n-th reference is, where a header went after an edit, where the
footnotes block starts, and where the document's content begins.

All lookups work on the current snapshot. Anything that cannot be found
raises a ``NotFoundError`` subclass; nothing guesses.
"""

from __future__ import annotations

import re

from footmark.errors import ReferenceNotFoundError
from footmark.extract import FootnoteModel, FootnoteRecord
from footmark.location import Position, offset_at, position_at
from footmark.outline import HeaderNode, find_header, outline

_DEFINITION_LINE_RE = re.compile(r"^\s*\[\^[\w-]+\]:", re.ASCII)
_NOTES_HEADING_RE = re.compile(r"^#{1,6}\s+(Notes?|Footnotes?)\s*$", re.IGNORECASE)


def definition_position(footnote_id: str, model: FootnoteModel) -> Position:
    """Position of the ``[`` that opens a footnote's definition.

    Raises:
        FootnoteNotFoundError: If the id is not defined
    """
    record = model.require(footnote_id)
    return position_at(model.source, record.definition.span.start)


def reference_position(footnote_id: str, model: FootnoteModel, index: int = 0) -> Position:
    """Position of a footnote's ``index``-th reference in document order.

    Raises:
        FootnoteNotFoundError: If the id is not defined
        ReferenceNotFoundError: If there is no reference at ``index``
    """
    record = model.require(footnote_id)
    if index < 0 or index >= record.reference_count:
        raise ReferenceNotFoundError(footnote_id, index)
    return position_at(model.source, record.references[index].span.start)


def header_position(header: HeaderNode, text: str) -> Position:
    """Start of ``header`` in ``text``, matched by text and level.

    Line numbers go stale as soon as the document changes, so the header is
    looked up again in the current text.

    Raises:
        HeaderNotFoundError: If the header no longer exists
    """
    current = find_header(outline(text), header.text, header.level)
    return Position(line=current.line, column=0, offset=offset_at(text, current.line, 0))


def footnotes_section_line(text: str) -> int | None:
    """Line to jump to for "go to footnotes".

    The first definition line if there is one, else the first heading named
    Note(s) or Footnote(s), else None.
    """
    lines = text.split("\n")
    for lineno, line in enumerate(lines):
        if _DEFINITION_LINE_RE.match(line):
            return lineno
    for lineno, line in enumerate(lines):
        if _NOTES_HEADING_RE.match(line):
            return lineno
    return None


def first_editable_line(text: str) -> int:
    """First line of real content.

    Skips a leading YAML front matter block (``---`` ... ``---``) and the
    blank lines after it. An unterminated front matter block yields line 1.
    """
    lines = text.split("\n")

    if lines[0].strip() == "---":
        for lineno in range(1, len(lines)):
            if lines[lineno].strip() == "---":
                for content_line in range(lineno + 1, len(lines)):
                    if lines[content_line].strip():
                        return content_line
                return lineno + 1
        return 1

    for lineno, line in enumerate(lines):
        if line.strip():
            return lineno
    return 0


def document_order(model: FootnoteModel) -> list[FootnoteRecord]:
    """Flat list view: referenced footnotes by first reference, unreferenced last."""
    referenced = sorted(model.referenced, key=lambda r: r.references[0].span.start)
    return referenced + list(model.unreferenced)
