"""ATX header outline.

Scans a document line by line for ATX headings (``# Title`` .. ``###### Title``)
and returns them in source order. The outline is the skeleton the grouper
hangs footnotes on.
"""

from __future__ import annotations

import re
from bisect import bisect_left
from collections.abc import Sequence
from dataclasses import dataclass

from footmark.errors import HeaderNotFoundError

_HEADER_RE = re.compile(r"^(#{1,6})\s+(.+)$")


@dataclass(frozen=True, slots=True)
class HeaderNode:
    """One ATX heading.

    Attributes:
        text: Heading text with surrounding whitespace stripped
        level: Number of leading ``#`` (1-6)
        line: Zero-based line index

    """

    text: str
    level: int
    line: int


def outline(text: str) -> list[HeaderNode]:
    """Extract ATX headings in line order.

    Each line is stripped before matching, so indented headings count.

    Example:
        >>> outline("# Intro\\ntext\\n## Details")
        [HeaderNode(text='Intro', level=1, line=0), HeaderNode(text='Details', level=2, line=2)]
    """
    headers: list[HeaderNode] = []
    for lineno, line in enumerate(text.split("\n")):
        match = _HEADER_RE.match(line.strip())
        if match:
            headers.append(
                HeaderNode(text=match.group(2).strip(), level=len(match.group(1)), line=lineno)
            )
    return headers


def nearest_header(headers: Sequence[HeaderNode], line: int) -> HeaderNode | None:
    """Return the closest header strictly above ``line``.

    Args:
        headers: Outline sorted by line
        line: Zero-based line of the item being placed

    Returns:
        The header, or None when ``line`` precedes every header
    """
    index = bisect_left(headers, line, key=_line_key)
    return headers[index - 1] if index > 0 else None


def _line_key(header: HeaderNode) -> int:
    return header.line


def find_header(headers: Sequence[HeaderNode], text: str, level: int) -> HeaderNode:
    """Look a header up by identity after a re-parse.

    Lines move when the document is edited; text and level do not. Returns the
    first match in document order.

    Raises:
        HeaderNotFoundError: If no header has this text and level
    """
    for header in headers:
        if header.text == text and header.level == level:
            return header
    raise HeaderNotFoundError(text, level)
