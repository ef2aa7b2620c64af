"""API package - FastAPI routes and dependencies."""

from draft_sync.api.dependencies import (
    DraftRoomDep,
    RoomManager,
    get_draft_room,
)

__all__ = [
    "RoomManager",
    "get_draft_room",
    "DraftRoomDep",
]
