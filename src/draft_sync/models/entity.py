"""
Roster and participant Pydantic models.

Field names follow Python conventions; the draft server's JSON names are
accepted as aliases.
"""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Entity(BaseModel):
    """A selectable item in the draft pool (a player)."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    first_name: str = Field(
        default="", validation_alias=AliasChoices("first_name", "firstName")
    )
    last_name: str = Field(
        default="", validation_alias=AliasChoices("last_name", "lastName", "last")
    )
    status: str = ""
    category_code: str = Field(
        default="",
        validation_alias=AliasChoices(
            "category_code", "categoryCode", "country_code", "countryCode"
        ),
        description="Grouping code used by the category filter",
    )

    @property
    def display_name(self) -> str:
        """Full name as searched and shown."""
        return f"{self.first_name} {self.last_name}"

    @property
    def is_amateur(self) -> bool:
        return self.status == "amateur"


class DraftEvent(BaseModel):
    """Draft event metadata from the resource server."""

    id: int
    name: str
    status: str = "not_started"
    max_picks_per_team: int = 0
    max_teams_per_player: int = 0
    stipulations: dict = Field(default_factory=dict)
    created_at: datetime | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None


class Participant(BaseModel):
    """A team that has joined a draft."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    draft_id: int | None = Field(
        default=None,
        validation_alias=AliasChoices("draft_id", "draftID", "eventID", "event_id"),
    )
    display_name: str = Field(
        validation_alias=AliasChoices(
            "display_name", "displayName", "username", "team_name", "teamName"
        )
    )
    created_at: datetime | None = None


class JoinRequest(BaseModel):
    """Body of the one-time join call."""

    display_name: str = Field(serialization_alias="team_name", min_length=1)
    passkey: str = Field(min_length=1)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)
