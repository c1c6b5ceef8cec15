"""Group footnotes under the document's header outline.

Every referenced footnote is placed under the nearest header strictly above
the line of a reference:

- ``GroupMode.SINGLE``: one placement per footnote, decided by its first
  reference.
- ``GroupMode.MULTI``: one placement per distinct section its references fall
  in. Each placement is a ``SectionFootnote`` view holding only the
  references of that section; the underlying record is shared, never copied.

Unreferenced footnotes always go to one synthetic bucket appended after all
real sections. Footnotes referenced before the first header go to a
headerless preamble group, emitted first.

The groups are then nested by header level with a level stack, so the result
mirrors the document outline (headers without footnotes included).

Example:
    >>> text = "# A\\nx[^1]\\n## B\\ny[^2]\\n\\n[^1]: one\\n[^2]: two\\n[^3]: three"
    >>> groups = group(extract(text), outline(text))
    >>> [g.title for g in groups]
    ['A', 'Unreferenced']
    >>> [g.title for g in groups[0].children]
    ['B']
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from enum import Enum, StrEnum
from functools import cmp_to_key

from footmark.config import get_engine_config
from footmark.extract import FootnoteModel, FootnoteRecord, Reference, id_number
from footmark.outline import HeaderNode, nearest_header
from footmark.utils.logger import get_logger

logger = get_logger(__name__)

UNREFERENCED_TITLE = "Unreferenced"


class GroupMode(StrEnum):
    """How referenced footnotes are placed into sections."""

    SINGLE = "single"
    MULTI = "multi"


class GroupKind(Enum):
    """What a group node stands for."""

    SECTION = "section"  # a real header
    PREAMBLE = "preamble"  # text before the first header
    UNREFERENCED = "unreferenced"  # synthetic bucket for unreferenced footnotes


@dataclass(frozen=True, slots=True)
class SectionFootnote:
    """A footnote as seen from one group.

    Attributes:
        record: The shared record from the model
        references: The references that fall in this group's section (all of
            them in single-section mode, none in the unreferenced bucket)
        appearance_sections: Number of distinct sections the footnote is
            referenced from (0 when unreferenced)

    """

    record: FootnoteRecord
    references: tuple[Reference, ...]
    appearance_sections: int

    @property
    def id(self) -> str:
        return self.record.id

    @property
    def content(self) -> str:
        return self.record.content

    @property
    def is_multi_section(self) -> bool:
        return self.appearance_sections > 1

    @property
    def is_unreferenced(self) -> bool:
        return not self.record.is_referenced


@dataclass(frozen=True, slots=True)
class GroupNode:
    """A node of the footnote outline.

    Children always have a deeper header level than their parent and lie
    between the parent's header and the next header of equal or lower level.
    """

    kind: GroupKind
    header: HeaderNode | None = None
    footnotes: tuple[SectionFootnote, ...] = ()
    children: tuple[GroupNode, ...] = ()

    @property
    def is_unreferenced(self) -> bool:
        return self.kind is GroupKind.UNREFERENCED

    @property
    def level(self) -> int:
        """Header level, 0 for the preamble and unreferenced groups."""
        return self.header.level if self.header is not None else 0

    @property
    def title(self) -> str:
        if self.header is not None:
            return self.header.text
        if self.is_unreferenced:
            return UNREFERENCED_TITLE
        return ""


def compare_ids(a: str, b: str) -> int:
    """Order two footnote ids.

    Ids are compared by the number their leading digits spell (see
    ``id_number``) when both have one, so ``"9" < "10a"``; ids with equal
    numbers, like ``"3"`` and ``"3a"``, compare equal and keep their order.
    If either id has no leading digits the two compare as plain strings.
    """
    a_number = id_number(a)
    b_number = id_number(b)
    if a_number is not None and b_number is not None:
        return a_number - b_number
    return (a > b) - (a < b)


sort_key_for_id = cmp_to_key(compare_ids)


def _sorted_views(views: Iterable[SectionFootnote]) -> tuple[SectionFootnote, ...]:
    return tuple(sorted(views, key=lambda view: sort_key_for_id(view.id)))


class _PendingGroup:
    """Mutable node used while the level stack is assembling the tree."""

    __slots__ = ("children", "footnotes", "header", "kind")

    def __init__(
        self, kind: GroupKind, header: HeaderNode | None, footnotes: tuple[SectionFootnote, ...]
    ) -> None:
        self.kind = kind
        self.header = header
        self.footnotes = footnotes
        self.children: list[_PendingGroup] = []

    def freeze(self) -> GroupNode:
        return GroupNode(
            kind=self.kind,
            header=self.header,
            footnotes=self.footnotes,
            children=tuple(child.freeze() for child in self.children),
        )


def _place(
    model: FootnoteModel, headers: Sequence[HeaderNode], mode: GroupMode
) -> tuple[dict[int | None, list[SectionFootnote]], list[SectionFootnote]]:
    """Assign views to section keys (header line, or None for the preamble)."""
    sections: dict[int | None, list[SectionFootnote]] = {}
    unreferenced: list[SectionFootnote] = []

    def section_key(ref: Reference) -> int | None:
        header = nearest_header(headers, ref.line)
        return header.line if header is not None else None

    for record in model.records:
        if not record.is_referenced:
            unreferenced.append(SectionFootnote(record, (), 0))
            continue

        if mode is GroupMode.SINGLE:
            key = section_key(record.references[0])
            sections.setdefault(key, []).append(SectionFootnote(record, record.references, 1))
            continue

        partitions: dict[int | None, list[Reference]] = {}
        for ref in record.references:
            partitions.setdefault(section_key(ref), []).append(ref)
        for key, refs in partitions.items():
            sections.setdefault(key, []).append(
                SectionFootnote(record, tuple(refs), len(partitions))
            )

    return sections, unreferenced


def group(
    model: FootnoteModel,
    headers: Sequence[HeaderNode],
    mode: GroupMode | str | None = None,
) -> list[GroupNode]:
    """Build the footnote outline.

    Args:
        model: Extracted footnote model
        headers: Header outline of the same text
        mode: Single- or multi-section placement. Defaults to the active
            EngineConfig.

    Returns:
        Root groups: the preamble group (if any footnote precedes every
        header), the header hierarchy, then the unreferenced bucket, which is
        always last and always present
    """
    mode = GroupMode(mode if mode is not None else get_engine_config().grouping_mode)
    ordered_headers = sorted(headers, key=lambda h: h.line)
    sections, unreferenced = _place(model, ordered_headers, mode)

    roots: list[_PendingGroup] = []
    if None in sections:
        roots.append(_PendingGroup(GroupKind.PREAMBLE, None, _sorted_views(sections[None])))

    stack: list[_PendingGroup] = []
    for header in ordered_headers:
        pending = _PendingGroup(
            GroupKind.SECTION, header, _sorted_views(sections.get(header.line, ()))
        )
        while stack and stack[-1].header.level >= header.level:  # type: ignore[union-attr]
            stack.pop()
        if stack:
            stack[-1].children.append(pending)
        else:
            roots.append(pending)
        stack.append(pending)

    roots.append(_PendingGroup(GroupKind.UNREFERENCED, None, _sorted_views(unreferenced)))

    logger.debug(
        "Grouped %d footnote(s) into %d section(s) (%s mode)",
        len(model.records),
        len(sections),
        mode.value,
    )
    return [pending.freeze() for pending in roots]


def iter_groups(groups: Iterable[GroupNode]) -> Iterator[GroupNode]:
    """Walk the outline depth-first, parents before children."""
    for node in groups:
        yield node
        yield from iter_groups(node.children)


def count_footnotes(node: GroupNode) -> int:
    """Number of footnote views in a group and all of its descendants."""
    return len(node.footnotes) + sum(count_footnotes(child) for child in node.children)


def filter_groups(groups: Iterable[GroupNode], term: str) -> list[GroupNode]:
    """Keep the parts of the outline that match a search term.

    Matching is case-insensitive. A group whose header matches keeps all of
    its footnotes; otherwise it keeps only footnotes whose id or content
    matches. A group survives if its header matches, any footnote matches,
    or any child survives. An empty term returns the outline unchanged.
    """
    needle = term.strip().lower()
    if not needle:
        return list(groups)

    filtered: list[GroupNode] = []
    for node in groups:
        header_matches = node.header is not None and needle in node.header.text.lower()
        matching = tuple(
            view
            for view in node.footnotes
            if needle in view.content.lower() or needle in view.id.lower()
        )
        children = tuple(filter_groups(node.children, needle))

        if header_matches or matching or children:
            filtered.append(
                GroupNode(
                    kind=node.kind,
                    header=node.header,
                    footnotes=node.footnotes if header_matches else matching,
                    children=children,
                )
            )
    return filtered
