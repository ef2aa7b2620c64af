"""
Realtime protocol messages.

Inbound (server -> client) messages form a closed union discriminated by
``type``. Wire names from the draft server are accepted as aliases, along
with the participant/entity names used elsewhere in this package.
"""

import json
import logging
from typing import Annotated, Any, Literal, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
)

from draft_sync.models.session import Pick

logger = logging.getLogger(__name__)


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class _ServerMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


# ==================== Server -> Client ====================


class DraftStartedMessage(_ServerMessage):
    type: Literal["draft_started"] = "draft_started"
    event_id: int = Field(validation_alias=_alias("event_id", "eventID", "draftID"))
    current_turn: int = Field(validation_alias=_alias("current_turn", "currentTurn"))
    round_number: int = Field(validation_alias=_alias("round_number", "roundNumber"))
    turn_deadline: int | None = Field(
        default=None, validation_alias=_alias("turn_deadline", "turnDeadline")
    )


class DraftStateMessage(_ServerMessage):
    """Full resync of every mirrored field."""

    type: Literal["draft_state"] = "draft_state"
    event_id: int | None = Field(
        default=None, validation_alias=_alias("event_id", "eventID", "draftID")
    )
    status: str
    current_turn: int | None = Field(
        default=None, validation_alias=_alias("current_turn", "currentTurn")
    )
    round_number: int = Field(
        default=0, validation_alias=_alias("round_number", "roundNumber")
    )
    current_pick_index: int = Field(
        default=0, validation_alias=_alias("current_pick_index", "currentPickIndex")
    )
    total_rounds: int = Field(
        default=0, validation_alias=_alias("total_rounds", "totalRounds")
    )
    pick_order: list[int] = Field(
        default_factory=list, validation_alias=_alias("pick_order", "pickOrder")
    )
    available_entity_ids: list[int] | None = Field(
        default=None,
        validation_alias=_alias(
            "available_entity_ids",
            "availableEntityIDs",
            "availableEntities",
            "availablePlayers",
        ),
    )
    turn_deadline: int | None = Field(
        default=None, validation_alias=_alias("turn_deadline", "turnDeadline")
    )
    remaining_time: int = Field(
        default=0, validation_alias=_alias("remaining_time", "remainingTime")
    )
    pick_history: list[Pick] = Field(
        default_factory=list, validation_alias=_alias("pick_history", "pickHistory")
    )


class PickMadeMessage(_ServerMessage):
    type: Literal["pick_made"] = "pick_made"
    participant_id: int = Field(
        validation_alias=_alias("participant_id", "participantID", "userID")
    )
    entity_id: int = Field(validation_alias=_alias("entity_id", "entityID", "playerID"))
    round: int
    auto_selected: bool = Field(
        default=False,
        validation_alias=_alias("auto_selected", "autoSelected", "autoDraft"),
    )


class TurnChangedMessage(_ServerMessage):
    type: Literal["turn_changed"] = "turn_changed"
    current_turn: int = Field(validation_alias=_alias("current_turn", "currentTurn"))
    round_number: int = Field(validation_alias=_alias("round_number", "roundNumber"))
    turn_deadline: int | None = Field(
        default=None, validation_alias=_alias("turn_deadline", "turnDeadline")
    )


class DraftCompletedMessage(_ServerMessage):
    type: Literal["draft_completed"] = "draft_completed"
    event_id: int | None = Field(
        default=None, validation_alias=_alias("event_id", "eventID", "draftID")
    )
    total_picks: int | None = Field(
        default=None, validation_alias=_alias("total_picks", "totalPicks")
    )
    total_rounds: int = Field(
        default=0, validation_alias=_alias("total_rounds", "totalRounds")
    )


class DraftPausedMessage(_ServerMessage):
    type: Literal["draft_paused"] = "draft_paused"
    event_id: int | None = Field(
        default=None, validation_alias=_alias("event_id", "eventID", "draftID")
    )
    remaining_time: int = Field(
        validation_alias=_alias("remaining_time", "remainingTime")
    )


class DraftResumedMessage(_ServerMessage):
    type: Literal["draft_resumed"] = "draft_resumed"
    event_id: int | None = Field(
        default=None, validation_alias=_alias("event_id", "eventID", "draftID")
    )
    current_turn: int = Field(validation_alias=_alias("current_turn", "currentTurn"))
    round_number: int = Field(validation_alias=_alias("round_number", "roundNumber"))
    turn_deadline: int | None = Field(
        default=None, validation_alias=_alias("turn_deadline", "turnDeadline")
    )


class ErrorMessage(_ServerMessage):
    type: Literal["error"] = "error"
    error: str = Field(validation_alias=_alias("error", "message"))


ServerMessage = Annotated[
    Union[
        DraftStartedMessage,
        DraftStateMessage,
        PickMadeMessage,
        TurnChangedMessage,
        DraftCompletedMessage,
        DraftPausedMessage,
        DraftResumedMessage,
        ErrorMessage,
    ],
    Field(discriminator="type"),
]

_server_message_adapter: TypeAdapter[ServerMessage] = TypeAdapter(ServerMessage)

SERVER_MESSAGE_TYPES = frozenset(
    {
        "draft_started",
        "draft_state",
        "pick_made",
        "turn_changed",
        "draft_completed",
        "draft_paused",
        "draft_resumed",
        "error",
    }
)


def parse_server_message(raw: str | bytes | dict[str, Any]) -> ServerMessage | None:
    """
    Decode one inbound frame.

    Returns None for undecodable JSON, unknown ``type`` tags, and payloads
    that do not match their message shape. Never raises.
    """
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.debug("Undecodable frame")
            return None

    if not isinstance(raw, dict):
        logger.debug("Non-object frame: %r", type(raw).__name__)
        return None

    msg_type = raw.get("type")
    if msg_type not in SERVER_MESSAGE_TYPES:
        logger.debug("Unknown message type: %r", msg_type)
        return None

    try:
        return _server_message_adapter.validate_python(raw)
    except ValidationError as e:
        logger.debug("Malformed %s message (%d errors)", msg_type, e.error_count())
        return None


# ==================== Client -> Server ====================


class ClientMessage(BaseModel):
    """Base for outbound messages."""

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class StartDraftMessage(ClientMessage):
    type: Literal["start_draft"] = "start_draft"
    draft_id: int = Field(serialization_alias="eventID")
    pick_order: list[int] = Field(serialization_alias="pickOrder", min_length=1)
    total_rounds: int = Field(serialization_alias="totalRounds", ge=1)
    timer_duration: int = Field(
        serialization_alias="timerDuration", ge=1, description="Seconds per pick"
    )
    available_entities: list[int] = Field(
        default_factory=list, serialization_alias="availablePlayers"
    )


class MakePickMessage(ClientMessage):
    type: Literal["make_pick"] = "make_pick"
    participant_id: int = Field(serialization_alias="userID")
    entity_id: int = Field(serialization_alias="playerID")


class PauseDraftMessage(ClientMessage):
    type: Literal["pause_draft"] = "pause_draft"


class ResumeDraftMessage(ClientMessage):
    type: Literal["resume_draft"] = "resume_draft"
