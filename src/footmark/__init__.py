"""footmark: footnote index and bulk rewrites for Markdown text.

Builds a structural index over ``[^id]`` references and ``[^id]: content``
definitions in a document, groups it under the header outline, and plans
position-accurate rewrites (renumbering, orphan removal, deletion, insertion)
as batches of span replacements that apply cleanly together.

Every operation is a pure function of the text. After an edit, extract again:
spans from an older snapshot are never reused.

Quick Start:
    >>> from footmark import extract, plan_renumber, apply
    >>> text = "First[^3], then[^7].\\n\\n[^3]: three\\n[^7]: seven"
    >>> model = extract(text)
    >>> gaps, edits = plan_renumber(model)
    >>> gaps
    ['1', '2', '4', '5', '6']
    >>> print(apply(text, edits))
    First[^1], then[^2].
    <BLANKLINE>
    [^1]: three
    [^2]: seven

    >>> # Outline view
    >>> from footmark import Footnotes
    >>> doc = Footnotes("# Intro\\nSee[^a].\\n\\n[^a]: note")
    >>> [g.title for g in doc.groups()]
    ['Intro', 'Unreferenced']

Installation:
    pip install footmark              # zero runtime dependencies
"""

from footmark.config import (
    EngineConfig,
    engine_config_context,
    get_engine_config,
    reset_engine_config,
    set_engine_config,
)
from footmark.edits import EditOp, EditSet, apply
from footmark.errors import (
    DuplicateDefinitionError,
    FootmarkError,
    FootnoteNotFoundError,
    HeaderNotFoundError,
    InvalidSpanError,
    NotFoundError,
    NotUnreferencedError,
    OverlappingEditsError,
    ReferenceNotFoundError,
    StaleEditSetError,
)
from footmark.extract import (
    Definition,
    FootnoteModel,
    FootnoteRecord,
    OrphanedReference,
    Reference,
    extract,
    id_number,
    is_definition_token,
)
from footmark.grouping import (
    GroupKind,
    GroupMode,
    GroupNode,
    SectionFootnote,
    count_footnotes,
    filter_groups,
    group,
    iter_groups,
)
from footmark.location import Position, Span, offset_at, position_at
from footmark.navigation import (
    definition_position,
    document_order,
    first_editable_line,
    footnotes_section_line,
    header_position,
    reference_position,
)
from footmark.outline import HeaderNode, find_header, outline
from footmark.planner import (
    find_gaps,
    next_footnote_id,
    plan_cleanup,
    plan_delete,
    plan_insert,
    plan_remove_orphaned,
    plan_remove_unreferenced,
    plan_renumber,
    plan_update,
)
from footmark.serialization import from_dict, from_json, to_dict, to_json
from footmark.utils.logger import set_debug

__version__ = "0.1.0"


class Footnotes:
    """One document snapshot with its model and outline.

    Usage:
        >>> doc = Footnotes("a[^1]\\n\\n[^1]: one")
        >>> doc.model.referenced[0].id
        '1'

        >>> # Edits produce a fresh snapshot; the old one stays valid for its text
        >>> _, edits = plan_renumber(doc.model)
        >>> doc = doc.apply(edits)

    Thread Safety:
        Immutable after construction. Safe to share between threads.

    """

    __slots__ = ("_headers", "_model", "text")

    def __init__(self, text: str) -> None:
        self.text = text
        self._model = extract(text)
        self._headers = outline(text)

    @property
    def model(self) -> FootnoteModel:
        return self._model

    @property
    def headers(self) -> list[HeaderNode]:
        return list(self._headers)

    def groups(self, mode: GroupMode | str | None = None) -> list[GroupNode]:
        """Footnote outline for this snapshot (see ``footmark.grouping.group``)."""
        return group(self._model, self._headers, mode)

    def apply(self, edits: EditSet) -> "Footnotes":
        """Apply an edit set planned on this snapshot and re-parse the result.

        Raises:
            StaleEditSetError: If the edits were planned on another snapshot
        """
        return Footnotes(apply(self.text, edits))

    def __repr__(self) -> str:
        return (
            f"Footnotes(records={len(self._model.records)}, "
            f"orphaned={len(self._model.orphaned)}, headers={len(self._headers)})"
        )


__all__ = [  # noqa: RUF022 - grouped by category
    # Version
    "__version__",
    # Core API
    "extract",
    "outline",
    "group",
    "apply",
    "Footnotes",
    # Planning
    "find_gaps",
    "next_footnote_id",
    "plan_renumber",
    "plan_remove_orphaned",
    "plan_remove_unreferenced",
    "plan_delete",
    "plan_insert",
    "plan_update",
    "plan_cleanup",
    # Model
    "Definition",
    "FootnoteModel",
    "FootnoteRecord",
    "OrphanedReference",
    "Reference",
    "id_number",
    "is_definition_token",
    # Outline and groups
    "HeaderNode",
    "find_header",
    "GroupKind",
    "GroupMode",
    "GroupNode",
    "SectionFootnote",
    "count_footnotes",
    "filter_groups",
    "iter_groups",
    # Edits
    "EditOp",
    "EditSet",
    # Location
    "Position",
    "Span",
    "offset_at",
    "position_at",
    # Navigation
    "definition_position",
    "document_order",
    "first_editable_line",
    "footnotes_section_line",
    "header_position",
    "reference_position",
    # Serialization
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    # Configuration (ContextVar-based)
    "EngineConfig",
    "get_engine_config",
    "set_engine_config",
    "reset_engine_config",
    "engine_config_context",
    # Logging
    "set_debug",
    # Errors
    "FootmarkError",
    "InvalidSpanError",
    "OverlappingEditsError",
    "StaleEditSetError",
    "NotFoundError",
    "FootnoteNotFoundError",
    "ReferenceNotFoundError",
    "HeaderNotFoundError",
    "DuplicateDefinitionError",
    "NotUnreferencedError",
]
