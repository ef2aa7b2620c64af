"""
Draft session Pydantic models.

`DraftSession` is the client's mirror of the authority's draft state. It is
owned and mutated only by `DraftStateMachine`.
"""

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class DraftStatus(str, Enum):
    """Lifecycle of a draft as seen by the client."""

    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    PAUSED = "paused"
    COMPLETED = "completed"


class ConnectionStatus(str, Enum):
    """Realtime connection status."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class Pick(BaseModel):
    """One resolved selection."""

    model_config = ConfigDict(populate_by_name=True)

    participant_id: int = Field(
        validation_alias=AliasChoices("participant_id", "participantID", "userID"),
        serialization_alias="userID",
    )
    entity_id: int = Field(
        validation_alias=AliasChoices("entity_id", "entityID", "playerID"),
        serialization_alias="playerID",
    )
    pick_number: int = Field(
        validation_alias=AliasChoices("pick_number", "pickNumber"),
        serialization_alias="pickNumber",
        description="1-based overall pick number",
    )
    round: int
    auto_selected: bool = Field(
        default=False,
        validation_alias=AliasChoices("auto_selected", "autoSelected", "autoDraft"),
        serialization_alias="autoDraft",
        description="Pick made by the authority after the turn timer expired",
    )


class DraftSession(BaseModel):
    """Mirrored state of one draft."""

    event_id: int | None = None
    status: DraftStatus = DraftStatus.IDLE
    current_turn: int | None = None
    round_number: int = 0
    total_rounds: int = 0
    current_pick_index: int = 0
    pick_order: list[int] = Field(default_factory=list)
    turn_deadline: int | None = Field(
        default=None, description="Unix seconds after which the authority auto-picks"
    )
    remaining_time: int = Field(
        default=0, description="Seconds left on the frozen clock while paused"
    )
    available_entity_ids: list[int] | None = Field(
        default=None,
        description="None until the authority has reported a pool",
    )
    pick_history: list[Pick] = Field(default_factory=list)
    total_picks: int | None = None
    last_error: str | None = None

    def is_turn_of(self, participant_id: int | None) -> bool:
        """Whether the given participant may act now."""
        return participant_id is not None and self.current_turn == participant_id

    @property
    def picks_remaining(self) -> int | None:
        """Picks left in the draft, when the pick order and rounds are known."""
        if not self.pick_order or not self.total_rounds:
            return None
        return max(len(self.pick_order) * self.total_rounds - len(self.pick_history), 0)


class RoomSnapshot(BaseModel):
    """Everything a draft room screen shows besides the pool."""

    connection_status: ConnectionStatus
    awaiting_resync: bool = False
    participant_id: int | None = None
    is_my_turn: bool = False
    roster_size: int = 0
    roster_error: str | None = None
    ignored_frames: int = 0
    session: DraftSession
