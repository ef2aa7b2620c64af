"""Draft engine services."""

from draft_sync.services.connection import ConnectionManager, DraftRoom
from draft_sync.services.draft_state import (
    DraftStateMachine,
    expected_turn,
    map_resync_status,
)
from draft_sync.services.local_store import LocalState, LocalStore
from draft_sync.services.roster import EntityRepository
from draft_sync.services.view_model import (
    category_codes,
    derive,
    invert_categories,
    present,
    taken_ids,
    toggle_category,
    toggle_sort,
)

__all__ = [
    # Realtime
    "ConnectionManager",
    "DraftRoom",
    # State machine
    "DraftStateMachine",
    "expected_turn",
    "map_resync_status",
    # Roster
    "EntityRepository",
    # Local persistence
    "LocalState",
    "LocalStore",
    # View
    "category_codes",
    "derive",
    "invert_categories",
    "present",
    "taken_ids",
    "toggle_category",
    "toggle_sort",
]
