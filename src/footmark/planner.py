"""Edit planning.

Every planner is a pure function from a ``FootnoteModel`` (which carries the
text it was extracted from) to an ``EditSet`` against that same text. Nothing
here modifies text; ``footmark.edits.apply`` does.

Spans inside one edit set never overlap: definitions are line-anchored and
disjoint from each other, references are disjoint from each other, and
renumbering rewrites only a definition's label, never its content, so
references nested inside definition content stay separate ops. A reference
written inside definition content does lie inside that definition's span:
planners that delete a whole definition drop such references from their ops.

Example:
    >>> model = extract("a [^2] b\\n\\n[^2]: two")
    >>> gaps, edits = plan_renumber(model)
    >>> gaps
    ['1']
    >>> apply(model.source, edits)
    'a [^1] b\\n\\n[^1]: two'
"""

from __future__ import annotations

from collections.abc import Collection, Iterable

from footmark.config import get_engine_config
from footmark.edits import EditOp, EditSet
from footmark.errors import FootmarkError, InvalidSpanError, NotUnreferencedError
from footmark.extract import FootnoteModel, FootnoteRecord, id_number, is_integer_id
from footmark.utils.logger import get_logger

logger = get_logger(__name__)


def _numbers(ids: Iterable[str]) -> set[int]:
    return {n for n in map(id_number, ids) if n is not None}


def _held_integers(ids: Iterable[str]) -> set[int]:
    """Integers spelled exactly by ids (``"3"`` holds 3, ``"3a"`` holds nothing)."""
    return {int(footnote_id) for footnote_id in ids if is_integer_id(footnote_id)}


def _avoid_collisions(option: bool | None) -> bool:
    return get_engine_config().avoid_id_collisions if option is None else option


def find_gaps(model: FootnoteModel) -> list[str]:
    """Missing integers below the highest referenced id number.

    Every referenced footnote whose id starts with digits counts, by the
    number those digits spell (``"3a"`` counts as 3). Every integer from 1 up
    to (not including) the maximum that is absent is a gap.

    Example:
        ids 1, 2, 5 referenced -> ['3', '4']
    """
    numbers = _numbers(record.id for record in model.referenced)
    if not numbers:
        return []
    return [str(n) for n in range(1, max(numbers)) if n not in numbers]


def next_footnote_id(model: FootnoteModel, *, avoid_collisions: bool | None = None) -> str:
    """Id for a newly inserted footnote: the first hole, not max + 1.

    Counts up from 1 and stops at the first integer no referenced footnote
    uses. With ``avoid_collisions`` (default from EngineConfig), integers
    spelled by unreferenced definitions and orphaned references are skipped
    too, so the new reference can never resolve to an existing definition.

    Example:
        ids 1, 2, 4 referenced -> '3'
    """
    used = _numbers(record.id for record in model.referenced)
    if _avoid_collisions(avoid_collisions):
        used |= _held_integers(record.id for record in model.records)
        used |= _held_integers(ref.id for ref in model.orphaned)
    candidate = 1
    while candidate in used:
        candidate += 1
    return str(candidate)


def _renumber_ops(
    model: FootnoteModel,
    exclude: Collection[str],
    *,
    avoid_collisions: bool,
    reserve_orphaned: bool,
) -> list[EditOp]:
    participants = sorted(
        (r for r in model.referenced if r.id not in exclude),
        key=lambda r: r.references[0].span.start,
    )

    reserved: set[int] = set()
    if avoid_collisions:
        reserved = _held_integers(
            r.id for r in model.records if r.id in exclude or not r.is_referenced
        )
        if reserve_orphaned:
            reserved |= _held_integers(ref.id for ref in model.orphaned)

    mapping: dict[str, str] = {}
    counter = 1
    for record in participants:
        while counter in reserved:
            counter += 1
        mapping[record.id] = str(counter)
        counter += 1

    ops: list[EditOp] = []
    for record in participants:
        new_id = mapping[record.id]
        if new_id == record.id:
            continue
        ops.append(EditOp(record.definition.label_span, f"[^{new_id}]: "))
        ops.extend(EditOp(ref.span, f"[^{new_id}]") for ref in record.references)

    logger.debug(
        "Renumbering %d footnote(s), %d changed",
        len(participants),
        sum(1 for old, new in mapping.items() if old != new),
    )
    return ops


def plan_renumber(
    model: FootnoteModel,
    *,
    exclude: Collection[str] = (),
    avoid_collisions: bool | None = None,
) -> tuple[list[str], EditSet]:
    """Renumber referenced footnotes 1..N in order of first reference.

    Args:
        model: Extracted model
        exclude: Ids that keep their current id
        avoid_collisions: Skip integers held by footnotes that keep their id
            (unreferenced and excluded definitions, orphaned references)
            instead of assigning plain 1..N. Defaults to EngineConfig.

    Returns:
        (gaps found before renumbering, edit set). Footnotes whose id does
        not change produce no ops, so a gap-free document already in order
        yields an empty edit set.
    """
    ops = _renumber_ops(
        model,
        exclude,
        avoid_collisions=_avoid_collisions(avoid_collisions),
        reserve_orphaned=True,
    )
    return find_gaps(model), EditSet(source=model.source, ops=tuple(ops))


def plan_remove_orphaned(model: FootnoteModel) -> EditSet:
    """Delete every reference that has no definition.

    Runs of spaces left behind are collapsed when the edit set is applied.
    """
    return EditSet(
        source=model.source,
        ops=tuple(EditOp.delete(ref.span) for ref in model.orphaned),
        collapse_spaces=get_engine_config().collapse_spaces,
    )


def plan_remove_unreferenced(ids: Iterable[str], model: FootnoteModel) -> EditSet:
    """Delete the definitions of unreferenced footnotes.

    Args:
        ids: Footnotes to remove; each must exist and have no references
        model: Extracted model

    Raises:
        FootnoteNotFoundError: If an id is not defined
        NotUnreferencedError: If a footnote still has references
    """
    ops: list[EditOp] = []
    seen: set[str] = set()
    for footnote_id in ids:
        if footnote_id in seen:
            continue
        seen.add(footnote_id)
        record = model.require(footnote_id)
        if record.is_referenced:
            raise NotUnreferencedError(footnote_id, record.reference_count)
        ops.append(EditOp.delete(record.definition.span))

    return EditSet(
        source=model.source,
        ops=tuple(ops),
        collapse_blank_lines=get_engine_config().collapse_blank_lines,
    )


def _full_deletion(record: FootnoteRecord) -> list[EditOp]:
    definition_span = record.definition.span
    ops = [EditOp.delete(definition_span)]
    # A reference written inside its own definition goes with the definition
    ops.extend(
        EditOp.delete(ref.span)
        for ref in record.references
        if not definition_span.contains(ref.span)
    )
    return ops


def plan_delete(footnote_id: str, model: FootnoteModel) -> EditSet:
    """Delete one footnote, or one use of it.

    - No references: delete the definition.
    - One reference: delete the definition and the reference.
    - Several references: delete only the first reference in document order;
      the definition and the other references stay.

    Raises:
        FootnoteNotFoundError: If the id is not defined
    """
    record = model.require(footnote_id)
    config = get_engine_config()

    if record.reference_count > 1:
        return EditSet(
            source=model.source,
            ops=(EditOp.delete(record.references[0].span),),
            collapse_spaces=config.collapse_spaces,
        )

    return EditSet(
        source=model.source,
        ops=tuple(_full_deletion(record)),
        collapse_spaces=config.collapse_spaces and record.is_referenced,
        collapse_blank_lines=config.collapse_blank_lines,
    )


def plan_insert(
    cursor_offset: int, model: FootnoteModel, *, avoid_collisions: bool | None = None
) -> tuple[str, EditSet, int]:
    """Insert a new footnote reference at the cursor and an empty definition.

    The definition goes on a new line right after the last existing
    definition, or at the end of the document behind a blank line when there
    are no definitions yet.

    Args:
        cursor_offset: Where the ``[^id]`` reference is inserted
        model: Extracted model
        avoid_collisions: Passed to ``next_footnote_id``

    Returns:
        (new id, edit set, cursor offset in the edited text just after
        ``[^id]: `` of the new definition)

    Raises:
        InvalidSpanError: If the cursor is outside the text
    """
    text = model.source
    if cursor_offset < 0 or cursor_offset > len(text):
        raise InvalidSpanError(f"Cursor {cursor_offset} outside text of length {len(text)}")

    new_id = next_footnote_id(model, avoid_collisions=avoid_collisions)
    reference = f"[^{new_id}]"
    definitions = [r.definition for r in model.records] + list(model.duplicate_definitions)

    if definitions:
        at = max(d.span.end for d in definitions)
        definition = f"\n[^{new_id}]: "
    else:
        at = len(text)
        if cursor_offset == at or not text.endswith("\n"):
            separator = "\n\n"
        elif text.endswith("\n\n"):
            separator = ""
        else:
            separator = "\n"
        definition = f"{separator}[^{new_id}]: "

    # Same offset: the reference is planned first, so it lands first
    ops = (EditOp.insert(cursor_offset, reference), EditOp.insert(at, definition))
    shift = len(reference) if cursor_offset <= at else 0
    new_cursor = at + shift + len(definition)

    logger.debug("Inserting footnote [^%s] at %d, definition at %d", new_id, cursor_offset, at)
    return new_id, EditSet(source=text, ops=ops), new_cursor


def plan_update(footnote_id: str, content: str, model: FootnoteModel) -> EditSet:
    """Replace a footnote's definition text.

    Raises:
        FootnoteNotFoundError: If the id is not defined
        FootmarkError: If the new content spans several lines
    """
    if "\n" in content or "\r" in content:
        raise FootmarkError("Footnote content must be a single line")
    record = model.require(footnote_id)
    return EditSet(
        source=model.source,
        ops=(EditOp(record.definition.span, f"[^{record.id}]: {content}"),),
    )


def plan_cleanup(
    model: FootnoteModel,
    *,
    remove_orphaned: bool = True,
    fill_gaps: bool = True,
    exclude: Collection[str] = (),
    avoid_collisions: bool | None = None,
) -> EditSet:
    """Remove orphaned references and renumber, as one edit set.

    Orphan deletions and renumbering rewrites touch disjoint spans of the same
    snapshot, so both fit in a single batch. With ``avoid_collisions``, ids of
    orphaned references are only reserved when those references are kept.
    """
    edits = EditSet(source=model.source)
    if remove_orphaned:
        edits = edits.merge(plan_remove_orphaned(model))
    if fill_gaps:
        ops = _renumber_ops(
            model,
            exclude,
            avoid_collisions=_avoid_collisions(avoid_collisions),
            reserve_orphaned=not remove_orphaned,
        )
        edits = edits.merge(EditSet(source=model.source, ops=tuple(ops)))
    return edits
