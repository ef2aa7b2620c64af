"""Pydantic models and schemas."""

from draft_sync.models.entity import DraftEvent, Entity, JoinRequest, Participant
from draft_sync.models.events import (
    ClientMessage,
    DraftCompletedMessage,
    DraftPausedMessage,
    DraftResumedMessage,
    DraftStartedMessage,
    DraftStateMessage,
    ErrorMessage,
    MakePickMessage,
    PauseDraftMessage,
    PickMadeMessage,
    ResumeDraftMessage,
    ServerMessage,
    StartDraftMessage,
    TurnChangedMessage,
    parse_server_message,
)
from draft_sync.models.session import (
    ConnectionStatus,
    DraftSession,
    DraftStatus,
    Pick,
    RoomSnapshot,
)
from draft_sync.models.view import (
    AvailabilityScope,
    PresentedEntity,
    SortDirection,
    SortField,
    SortSpec,
    ViewFilter,
)

__all__ = [
    # Roster
    "DraftEvent",
    "Entity",
    "JoinRequest",
    "Participant",
    # Session
    "ConnectionStatus",
    "DraftSession",
    "DraftStatus",
    "Pick",
    "RoomSnapshot",
    # Server messages
    "DraftCompletedMessage",
    "DraftPausedMessage",
    "DraftResumedMessage",
    "DraftStartedMessage",
    "DraftStateMessage",
    "ErrorMessage",
    "PickMadeMessage",
    "ServerMessage",
    "TurnChangedMessage",
    "parse_server_message",
    # Client messages
    "ClientMessage",
    "MakePickMessage",
    "PauseDraftMessage",
    "ResumeDraftMessage",
    "StartDraftMessage",
    # View
    "AvailabilityScope",
    "PresentedEntity",
    "SortDirection",
    "SortField",
    "SortSpec",
    "ViewFilter",
]
