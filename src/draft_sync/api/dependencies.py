"""
API Dependencies

Shared dependencies for FastAPI route handlers: the draft room the API
serves and common query parameters.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Query

from draft_sync.clients.draft_api import DraftAPIClient
from draft_sync.clients.transport import PushTransport
from draft_sync.config import Settings
from draft_sync.models import AvailabilityScope, SortDirection, SortField
from draft_sync.services.connection import DraftRoom
from draft_sync.services.local_store import LocalStore


class RoomManager:
    """
    Holds the single DraftRoom served by the application.

    A room can be attached up front (CLI, tests); otherwise `open_default`
    builds one fed through a `PushTransport`.
    """

    _room: DraftRoom | None = None
    _client: DraftAPIClient | None = None

    @classmethod
    def attach(cls, room: DraftRoom | None) -> None:
        cls._room = room

    @classmethod
    def get_room(cls) -> DraftRoom | None:
        return cls._room

    @classmethod
    async def open_default(cls, settings: Settings) -> DraftRoom:
        """Create, start and attach a push-fed room."""
        cls._client = DraftAPIClient(settings)
        await cls._client.__aenter__()
        room = DraftRoom(
            cls._client,
            PushTransport(),
            local_store=LocalStore(settings.local_store_path),
        )
        await room.start()
        cls._room = room
        return room

    @classmethod
    async def close(cls) -> None:
        """Shut down the room this manager opened; attached rooms are left alone."""
        if cls._client is None:
            return
        if cls._room is not None:
            await cls._room.stop()
        await cls._client.__aexit__(None, None, None)
        cls._client = None
        cls._room = None


def get_draft_room() -> DraftRoom:
    """Dependency to get the served DraftRoom."""
    room = RoomManager.get_room()
    if room is None:
        raise HTTPException(status_code=503, detail="No draft room is open")
    return room


# Type alias for cleaner route signatures
DraftRoomDep = Annotated[DraftRoom, Depends(get_draft_room)]


# Common query parameters
ScopeQuery = Annotated[
    AvailabilityScope,
    Query(description="Which players to list: available, taken or all"),
]

SearchQuery = Annotated[
    str,
    Query(description="Case-insensitive name search", max_length=100),
]

CategoryQuery = Annotated[
    list[str] | None,
    Query(description="Category codes to keep (repeatable)"),
]

SortFieldQuery = Annotated[
    SortField | None,
    Query(description="Field to sort by"),
]

SortDirectionQuery = Annotated[
    SortDirection,
    Query(description="Sort direction"),
]
