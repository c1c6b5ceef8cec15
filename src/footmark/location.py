"""Positions and spans over one text snapshot.

Every offset in footmark is an absolute character index into the exact string
it was computed from. Lines and columns are zero-based and derived from the
offset for display and cursor placement only.

Spans from one parse are only valid against the text that produced them.
After any edit, re-extract instead of shifting old spans.

Thread Safety:
Position and Span are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass

from footmark.errors import InvalidSpanError


@dataclass(frozen=True, slots=True)
class Position:
    """A point in a text snapshot.

    Attributes:
        line: Zero-based line index
        column: Zero-based column within the line
        offset: Absolute character index into the text

    Examples:
        >>> position_at("ab\\ncd", 4)
        Position(line=1, column=1, offset=4)
    """

    line: int
    column: int
    offset: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open character range ``[start, end)``.

    Construction rejects negative offsets and ``start > end``. Whether the span
    fits a given text is checked where the text is known (``slice`` and the
    edit applicator).
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise InvalidSpanError("Invalid span", self.start, self.end)

    def __len__(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def overlaps(self, other: Span) -> bool:
        """True when the two spans share at least one character.

        Empty spans never overlap anything; an insertion point sitting on the
        boundary of another span is allowed.
        """
        if self.is_empty:
            return other.start < self.start < other.end
        if other.is_empty:
            return self.start < other.start < self.end
        return self.start < other.end and other.start < self.end

    def contains(self, other: Span) -> bool:
        """True when ``other`` lies entirely inside this span."""
        return self.start <= other.start and other.end <= self.end

    def slice(self, text: str) -> str:
        """Return the text covered by this span.

        Raises:
            InvalidSpanError: If the span extends beyond the text
        """
        if self.end > len(text):
            raise InvalidSpanError(f"Span exceeds text of length {len(text)}", self.start, self.end)
        return text[self.start : self.end]


def line_of(text: str, offset: int) -> int:
    """Zero-based line index of ``offset`` (number of newlines before it)."""
    return text.count("\n", 0, offset)


def position_at(text: str, offset: int) -> Position:
    """Derive line and column for an absolute offset.

    Args:
        text: The snapshot the offset refers to
        offset: Absolute index, ``0 <= offset <= len(text)``

    Returns:
        Position with zero-based line and column

    Raises:
        InvalidSpanError: If the offset is outside the text
    """
    if offset < 0 or offset > len(text):
        raise InvalidSpanError(f"Offset {offset} outside text of length {len(text)}")
    line_start = text.rfind("\n", 0, offset) + 1
    return Position(line=line_of(text, offset), column=offset - line_start, offset=offset)


def offset_at(text: str, line: int, column: int) -> int:
    """Convert a zero-based line/column (editor cursor) into an offset.

    Args:
        text: The snapshot the cursor refers to
        line: Zero-based line index
        column: Zero-based column; may equal the line length (end of line)

    Returns:
        Absolute offset into ``text``

    Raises:
        InvalidSpanError: If the line or column does not exist
    """
    if line < 0 or column < 0:
        raise InvalidSpanError(f"Negative cursor {line}:{column}")

    line_start = 0
    for _ in range(line):
        newline = text.find("\n", line_start)
        if newline == -1:
            raise InvalidSpanError(f"Line {line} beyond end of text")
        line_start = newline + 1

    line_end = text.find("\n", line_start)
    if line_end == -1:
        line_end = len(text)
    if column > line_end - line_start:
        raise InvalidSpanError(f"Column {column} beyond end of line {line}")
    return line_start + column
