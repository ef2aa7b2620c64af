"""
Entity Repository

Holds the roster of selectable players for the active draft.
"""

import logging
from collections.abc import Callable

from draft_sync.clients.draft_api import DraftAPIClient, DraftAPIError
from draft_sync.models import Entity

logger = logging.getLogger(__name__)


class EntityRepository:
    """
    Roster holder backed by the draft server.

    Each load is a single attempt that replaces the roster wholesale on
    success. On failure the previous roster is kept and ``error`` is set;
    retrying is up to the caller. Concurrent loads for the same draft race
    and the last one to finish wins; callers that switch drafts pass
    ``is_current`` so a late result for the old draft is dropped.
    """

    def __init__(self, client: DraftAPIClient):
        self.client = client
        self._roster: list[Entity] = []
        self.draft_id: int | None = None
        self.error: str | None = None

    @property
    def roster(self) -> list[Entity]:
        """The full roster, in server order."""
        return list(self._roster)

    @property
    def roster_ids(self) -> set[int]:
        return {entity.id for entity in self._roster}

    def get(self, entity_id: int) -> Entity | None:
        """Look up a roster entry by ID."""
        for entity in self._roster:
            if entity.id == entity_id:
                return entity
        return None

    async def load_roster(
        self, draft_id: int, is_current: Callable[[int], bool] | None = None
    ) -> list[Entity]:
        """
        Fetch and replace the roster for a draft.

        Args:
            draft_id: Draft event ID
            is_current: Checked once the fetch completes; a result for a
                draft the caller has moved away from is discarded

        Returns:
            The roster now held (the previous one if the fetch failed)
        """
        self.error = None
        try:
            roster = await self.client.get_event_players(draft_id)
        except DraftAPIError as e:
            if is_current is not None and not is_current(draft_id):
                return self.roster
            self.error = e.message
            logger.warning("Roster load failed for draft %s: %s", draft_id, e.message)
            return self.roster

        if is_current is not None and not is_current(draft_id):
            logger.info("Discarding roster for draft %s, no longer current", draft_id)
            return self.roster

        self._roster = roster
        self.draft_id = draft_id
        logger.info("Loaded %d players for draft %s", len(roster), draft_id)
        return self.roster

    def clear(self) -> None:
        self._roster = []
        self.draft_id = None
        self.error = None
