"""
Draft State Machine

Folds realtime protocol messages into the client's `DraftSession` mirror.

Every message is applied best-effort to the fields it names, whatever the
current status, because messages can be redelivered or reordered around a
reconnect. A later ``draft_state`` resync overwrites everything and heals
any drift left by dropped incremental messages.
"""

import logging
from collections.abc import Callable
from typing import Any

from draft_sync.models import (
    DraftCompletedMessage,
    DraftPausedMessage,
    DraftResumedMessage,
    DraftSession,
    DraftStartedMessage,
    DraftStateMessage,
    DraftStatus,
    ErrorMessage,
    Pick,
    PickMadeMessage,
    ServerMessage,
    TurnChangedMessage,
)

logger = logging.getLogger(__name__)

SessionListener = Callable[[DraftSession], None]

_RESYNC_STATUS = {
    "in_progress": DraftStatus.IN_PROGRESS,
    "paused": DraftStatus.PAUSED,
    "not_started": DraftStatus.IDLE,
    "idle": DraftStatus.IDLE,
}


def map_resync_status(status: str) -> DraftStatus:
    """Map the authority's status string; anything unrecognized means completed."""
    return _RESYNC_STATUS.get(status, DraftStatus.COMPLETED)


def expected_turn(pick_order: list[int], pick_index: int) -> int | None:
    """
    Participant on the clock at ``pick_index`` in a snake draft.

    Odd rounds run forward through ``pick_order``, even rounds backward.
    Display-only; ``DraftSession.current_turn`` from the authority wins.
    """
    if not pick_order or pick_index < 0:
        return None
    size = len(pick_order)
    round_number = pick_index // size + 1
    position = pick_index % size
    if round_number % 2 == 0:
        position = size - 1 - position
    return pick_order[position]


class DraftStateMachine:
    """
    Owner of one `DraftSession`.

    Each applied message replaces the session with an updated copy, so a
    session obtained earlier is never mutated. Listeners run synchronously
    after every state change, before the next message is applied.
    """

    def __init__(self, session: DraftSession | None = None):
        self._session = session or DraftSession()
        self._listeners: list[SessionListener] = []

    @property
    def session(self) -> DraftSession:
        return self._session

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def may_act(self, participant_id: int | None) -> bool:
        """Whether ``participant_id`` is the one on the clock."""
        return self._session.is_turn_of(participant_id)

    def apply(self, message: ServerMessage | None) -> bool:
        """
        Apply one inbound message.

        Args:
            message: A decoded server message, or None for a frame that
                failed to decode

        Returns:
            True if the session changed, False if the message was ignored
        """
        updates = self._reduce(message)
        if updates is None:
            return False

        logger.debug("Applied %s", message.type)
        self._commit(updates)
        return True

    def bind_event(self, event_id: int) -> bool:
        """Attach a draft ID before the authority has reported one."""
        if self._session.event_id is not None:
            return False
        self._commit({"event_id": event_id})
        return True

    def reset(self) -> None:
        """Revert to the idle initial state."""
        self._session = DraftSession()
        self._notify()

    def _commit(self, updates: dict[str, Any]) -> None:
        self._session = self._session.model_copy(update=updates)
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._session)

    def _reduce(self, message: ServerMessage | None) -> dict[str, Any] | None:
        """Field updates for one message, or None to ignore it."""
        session = self._session

        if isinstance(message, ErrorMessage):
            return {"last_error": message.error}

        if isinstance(message, DraftStartedMessage):
            return {
                "status": DraftStatus.IN_PROGRESS,
                "event_id": message.event_id,
                "current_turn": message.current_turn,
                "round_number": message.round_number,
                "turn_deadline": message.turn_deadline,
                "last_error": None,
            }

        if isinstance(message, DraftStateMessage):
            available = message.available_entity_ids
            return {
                "status": map_resync_status(message.status),
                "event_id": message.event_id,
                "current_turn": message.current_turn,
                "round_number": message.round_number,
                "total_rounds": message.total_rounds,
                "current_pick_index": message.current_pick_index,
                "pick_order": list(message.pick_order),
                "available_entity_ids": None if available is None else list(available),
                "pick_history": [pick.model_copy() for pick in message.pick_history],
                "turn_deadline": message.turn_deadline,
                "remaining_time": message.remaining_time,
                "last_error": None,
            }

        if isinstance(message, PickMadeMessage):
            pick = Pick(
                participant_id=message.participant_id,
                entity_id=message.entity_id,
                pick_number=len(session.pick_history) + 1,
                round=message.round,
                auto_selected=message.auto_selected,
            )
            available = session.available_entity_ids
            if available is not None:
                available = [eid for eid in available if eid != message.entity_id]
            return {
                "pick_history": [*session.pick_history, pick],
                "available_entity_ids": available,
                "last_error": None,
            }

        if isinstance(message, TurnChangedMessage):
            return {
                "current_turn": message.current_turn,
                "round_number": message.round_number,
                "turn_deadline": message.turn_deadline,
                "last_error": None,
            }

        if isinstance(message, DraftCompletedMessage):
            updates: dict[str, Any] = {
                "status": DraftStatus.COMPLETED,
                "total_rounds": message.total_rounds,
                "total_picks": message.total_picks,
                "last_error": None,
            }
            if message.event_id is not None:
                updates["event_id"] = message.event_id
            return updates

        if isinstance(message, DraftPausedMessage):
            return {
                "status": DraftStatus.PAUSED,
                "remaining_time": message.remaining_time,
                "last_error": None,
            }

        if isinstance(message, DraftResumedMessage):
            return {
                "status": DraftStatus.IN_PROGRESS,
                "current_turn": message.current_turn,
                "round_number": message.round_number,
                "turn_deadline": message.turn_deadline,
                "last_error": None,
            }

        # Unknown or undecodable message: no state change
        return None
