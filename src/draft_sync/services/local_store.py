"""
Local Store

Remembers the last joined draft ID across restarts in a small JSON file.
"""

import logging
from pathlib import Path

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


class LocalState(BaseModel):
    draft_id: int | None = None
    participant_id: int | None = None


class LocalStore:
    """JSON-file persistence for `LocalState`."""

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def load(self) -> LocalState:
        """Read the stored state; a missing or unreadable file gives an empty one."""
        if not self.path.exists():
            return LocalState()
        try:
            return LocalState.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning("Ignoring unreadable local store %s: %s", self.path, e)
            return LocalState()

    def save(self, state: LocalState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(state.model_dump_json(), encoding="utf-8")

    def remember(self, draft_id: int, participant_id: int | None = None) -> None:
        """Store the draft (and optionally the participant) to rejoin later."""
        state = self.load()
        state.draft_id = draft_id
        if participant_id is not None:
            state.participant_id = participant_id
        self.save(state)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
