"""Exception classes for footmark.

Three kinds of failure exist:

- Caller-contract violations (``InvalidSpanError``, ``OverlappingEditsError``,
  ``StaleEditSetError``): an edit set was applied to the wrong text or holds
  impossible spans. The operation is aborted before anything is written.
- Not-found conditions (``NotFoundError`` subclasses): an id, reference or
  header is absent from the current model. Re-parse and retry, or report.
- Strict-mode diagnostics (``DuplicateDefinitionError``) and misuse of a
  planner (``NotUnreferencedError``).

Orphaned references and unreferenced footnotes are never errors; they are
reported as data on the model.
"""

from __future__ import annotations


class FootmarkError(Exception):
    """Base exception for all footmark errors.

    Subclass this for specific error categories.
    """

    pass


class InvalidSpanError(FootmarkError, ValueError):
    """A span or position does not fit the text it is used against.

    Raised for ``start > end``, negative offsets, or offsets beyond the end
    of the text.
    """

    def __init__(self, message: str, start: int | None = None, end: int | None = None) -> None:
        """Initialize span error.

        Args:
            message: Error description
            start: Offending span start (optional)
            end: Offending span end (optional)
        """
        self.start = start
        self.end = end

        location = ""
        if start is not None and end is not None:
            location = f" [{start}:{end}]"
        super().__init__(f"{message}{location}")


class OverlappingEditsError(FootmarkError):
    """Two edits in one edit set touch the same characters."""

    def __init__(self, first: tuple[int, int], second: tuple[int, int]) -> None:
        self.first = first
        self.second = second
        super().__init__(
            f"Edits overlap: [{first[0]}:{first[1]}] and [{second[0]}:{second[1]}]"
        )


class StaleEditSetError(FootmarkError):
    """An edit set is applied to text other than the text it was planned on.

    Spans are only valid against the exact snapshot that produced them.
    Re-extract the model from the current text and plan again.
    """

    pass


class NotFoundError(FootmarkError, LookupError):
    """Base for lookups that found nothing in the current model."""

    pass


class FootnoteNotFoundError(NotFoundError):
    """No footnote with the requested id exists in the model."""

    def __init__(self, footnote_id: str) -> None:
        self.footnote_id = footnote_id
        super().__init__(f"Footnote [^{footnote_id}] not found")


class ReferenceNotFoundError(NotFoundError):
    """A footnote exists but has no reference at the requested index."""

    def __init__(self, footnote_id: str, index: int) -> None:
        self.footnote_id = footnote_id
        self.index = index
        super().__init__(f"Footnote [^{footnote_id}] has no reference #{index}")


class HeaderNotFoundError(NotFoundError):
    """No header with the requested text and level exists in the outline."""

    def __init__(self, text: str, level: int) -> None:
        self.text = text
        self.level = level
        super().__init__(f"Header {'#' * level} {text!r} not found")


class DuplicateDefinitionError(FootmarkError):
    """A footnote id is defined more than once (strict mode only).

    In the default mode the last definition wins and the earlier ones are
    reported in ``FootnoteModel.duplicate_definitions``.
    """

    def __init__(self, footnote_id: str, lineno: int, previous_lineno: int) -> None:
        """Initialize duplicate definition error.

        Args:
            footnote_id: The id defined twice
            lineno: Zero-based line of the later definition
            previous_lineno: Zero-based line of the earlier definition
        """
        self.footnote_id = footnote_id
        self.lineno = lineno
        self.previous_lineno = previous_lineno
        super().__init__(
            f"Footnote [^{footnote_id}] defined on line {lineno} "
            f"was already defined on line {previous_lineno}"
        )


class NotUnreferencedError(FootmarkError):
    """A footnote passed for unreferenced removal still has references."""

    def __init__(self, footnote_id: str, reference_count: int) -> None:
        self.footnote_id = footnote_id
        self.reference_count = reference_count
        super().__init__(
            f"Footnote [^{footnote_id}] is referenced {reference_count} time(s)"
        )
