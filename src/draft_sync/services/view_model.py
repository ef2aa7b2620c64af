"""
Pool View Derivation

Pure functions that turn the roster, the mirrored pool and the local view
preferences into the ordered list of players to show. Nothing here mutates
its inputs.
"""

from collections.abc import Collection, Iterable, Sequence

from draft_sync.models import (
    AvailabilityScope,
    Entity,
    Pick,
    PresentedEntity,
    SortDirection,
    SortField,
    SortSpec,
    ViewFilter,
)


def taken_ids(
    roster: Iterable[Entity], available_entity_ids: Collection[int] | None
) -> frozenset[int]:
    """
    IDs of roster entries no longer in the pool.

    This is the only place the taken set is computed. A pool of None means
    the authority has not reported one yet, so nothing is taken.
    """
    if available_entity_ids is None:
        return frozenset()
    available = set(available_entity_ids)
    return frozenset(entity.id for entity in roster if entity.id not in available)


def _scope(
    roster: Sequence[Entity], taken: frozenset[int], scope: AvailabilityScope
) -> list[Entity]:
    if scope == AvailabilityScope.ALL:
        return list(roster)
    if scope == AvailabilityScope.TAKEN:
        return [entity for entity in roster if entity.id in taken]
    return [entity for entity in roster if entity.id not in taken]


def _matches_query(entity: Entity, query: str) -> bool:
    return query in entity.display_name.lower()


def _sort_key(entity: Entity, field: SortField) -> str:
    if field == SortField.CATEGORY:
        return entity.category_code
    return entity.last_name


def derive(
    roster: Sequence[Entity],
    available_entity_ids: Collection[int] | None,
    pick_history: Sequence[Pick],
    view_filter: ViewFilter,
) -> list[Entity]:
    """
    Ordered list of players to present.

    Steps, in order: availability scope, free-text search on the full name,
    category filter, then a stable sort of a copy by the chosen field.
    ``pick_history`` is part of the signature so callers pass the whole
    mirrored state; membership is decided by the pool alone.

    Args:
        roster: Full roster in server order
        available_entity_ids: Mirrored pool, or None before the first report
        pick_history: Mirrored pick history
        view_filter: Local search/category/scope/sort preferences

    Returns:
        A new list; the inputs are left untouched
    """
    taken = taken_ids(roster, available_entity_ids)
    entities = _scope(roster, taken, view_filter.scope)

    if view_filter.query:
        query = view_filter.query.lower()
        entities = [e for e in entities if _matches_query(e, query)]

    if view_filter.categories:
        entities = [e for e in entities if e.category_code in view_filter.categories]

    if view_filter.sort is not None:
        field = view_filter.sort.field
        entities = sorted(
            entities,
            key=lambda e: _sort_key(e, field),
            reverse=view_filter.sort.direction == SortDirection.DESC,
        )

    return entities


def present(
    roster: Sequence[Entity],
    available_entity_ids: Collection[int] | None,
    pick_history: Sequence[Pick],
    view_filter: ViewFilter,
) -> list[PresentedEntity]:
    """`derive` plus per-row taken and amateur flags, whichever scope is shown."""
    taken = taken_ids(roster, available_entity_ids)
    return [
        PresentedEntity(
            entity=entity,
            is_taken=entity.id in taken,
            is_amateur=entity.is_amateur,
        )
        for entity in derive(roster, available_entity_ids, pick_history, view_filter)
    ]


# ==================== Filter helpers ====================


def category_codes(roster: Iterable[Entity]) -> list[str]:
    """Sorted unique category codes, for the filter options."""
    return sorted({entity.category_code for entity in roster})


def toggle_sort(current: SortSpec | None, field: SortField) -> SortSpec | None:
    """Cycle a column's sort: off -> ascending -> descending -> off."""
    if current is None or current.field != field:
        return SortSpec(field=field, direction=SortDirection.ASC)
    if current.direction == SortDirection.ASC:
        return SortSpec(field=field, direction=SortDirection.DESC)
    return None


def toggle_category(
    selected: frozenset[str] | None, code: str
) -> frozenset[str] | None:
    """Add or remove one code; an emptied selection becomes None."""
    if not selected:
        return frozenset({code})
    if code in selected:
        remaining = selected - {code}
        return remaining or None
    return selected | {code}


def invert_categories(
    selected: frozenset[str] | None, all_codes: Iterable[str]
) -> frozenset[str] | None:
    """Select every code not currently selected."""
    inverted = frozenset(c for c in all_codes if not selected or c not in selected)
    return inverted or None
