"""
Local view preferences and presentation rows.

A `ViewFilter` is owned by the presentation layer and never sent to the
draft server.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from draft_sync.models.entity import Entity


class AvailabilityScope(str, Enum):
    """Which slice of the roster to start from."""

    AVAILABLE = "available"
    TAKEN = "taken"
    ALL = "all"


class SortField(str, Enum):
    NAME = "name"
    CATEGORY = "category"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortSpec(BaseModel):
    """Sort a view by one field."""

    model_config = ConfigDict(frozen=True)

    field: SortField
    direction: SortDirection = SortDirection.ASC


class ViewFilter(BaseModel):
    """Search, category and sort preferences for the pool view."""

    query: str = ""
    categories: frozenset[str] | None = Field(
        default=None, description="Category codes to keep; None or empty keeps all"
    )
    scope: AvailabilityScope = AvailabilityScope.AVAILABLE
    sort: SortSpec | None = None


class PresentedEntity(BaseModel):
    """One row of the rendered pool."""

    entity: Entity
    is_taken: bool
    is_amateur: bool = False

    @property
    def display_name(self) -> str:
        return self.entity.display_name
