"""
Draft Room API Routes

Read-only view of the mirrored draft, plus a frame bridge for processes
that own the realtime socket.
"""

from typing import Any

from fastapi import APIRouter, Body, HTTPException

from draft_sync.api.dependencies import (
    CategoryQuery,
    DraftRoomDep,
    ScopeQuery,
    SearchQuery,
    SortDirectionQuery,
    SortFieldQuery,
)
from draft_sync.clients.transport import PushTransport
from draft_sync.models import (
    AvailabilityScope,
    Pick,
    PresentedEntity,
    RoomSnapshot,
    SortDirection,
    SortSpec,
    ViewFilter,
)
from draft_sync.services.view_model import category_codes

router = APIRouter()


@router.get(
    "/state",
    response_model=RoomSnapshot,
    summary="Get draft room state",
    description="Connection status, whose turn it is and the mirrored draft session.",
)
async def get_state(room: DraftRoomDep) -> RoomSnapshot:
    """Get the current room snapshot."""
    return room.snapshot()


@router.get(
    "/players",
    response_model=list[PresentedEntity],
    summary="Get the player pool",
    description="Filtered and sorted players, each flagged when already drafted.",
)
async def get_players(
    room: DraftRoomDep,
    scope: ScopeQuery = AvailabilityScope.AVAILABLE,
    q: SearchQuery = "",
    category: CategoryQuery = None,
    sort: SortFieldQuery = None,
    direction: SortDirectionQuery = SortDirection.ASC,
) -> list[PresentedEntity]:
    """Get the presented player pool."""
    view_filter = ViewFilter(
        query=q,
        categories=frozenset(category) if category else None,
        scope=scope,
        sort=SortSpec(field=sort, direction=direction) if sort else None,
    )
    return room.view(view_filter)


@router.get(
    "/categories",
    response_model=list[str],
    summary="Get category filter options",
)
async def get_categories(room: DraftRoomDep) -> list[str]:
    """Unique category codes across the roster."""
    return category_codes(room.roster.roster)


@router.get(
    "/picks",
    response_model=list[Pick],
    summary="Get pick history",
)
async def get_picks(room: DraftRoomDep) -> list[Pick]:
    """Get all picks so far, in order."""
    return room.session.pick_history


@router.post(
    "/events",
    summary="Feed a realtime frame",
    description="Deliver one server message received by an external socket owner.",
)
async def post_event(
    room: DraftRoomDep,
    frame: dict[str, Any] = Body(...),
) -> dict[str, Any]:
    """Push one frame through the room's transport."""
    transport = room.connection.transport
    if not isinstance(transport, PushTransport):
        raise HTTPException(status_code=409, detail="Room transport does not accept frames")

    ignored_before = room.ignored_frames
    delivered = transport.push(frame)
    await room.wait_idle()
    return {
        "delivered": delivered,
        "ignored": delivered and room.ignored_frames > ignored_before,
        "status": room.session.status.value,
    }


@router.post(
    "/roster/reload",
    summary="Reload the roster",
    description="Fetch the roster for the current draft again.",
)
async def reload_roster(room: DraftRoomDep) -> dict[str, Any]:
    """Retry the roster load for the mirrored draft ID."""
    event_id = room.session.event_id
    if event_id is None:
        raise HTTPException(status_code=409, detail="No draft ID known yet")

    roster = await room.roster.load_roster(event_id)
    return {"draft_id": event_id, "players": len(roster), "error": room.roster.error}
