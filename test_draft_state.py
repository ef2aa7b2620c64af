"""Tests for the draft state machine."""

import pytest

from draft_sync.models import DraftSession, DraftStatus, Pick, parse_server_message
from draft_sync.services.draft_state import (
    DraftStateMachine,
    expected_turn,
    map_resync_status,
)


# ── Helpers ──────────────────────────────────────────────────────────

def _apply(machine, payload):
    return machine.apply(parse_server_message(payload))


def _started(machine, **overrides):
    payload = {
        "type": "draft_started",
        "eventID": 9,
        "currentTurn": 100,
        "roundNumber": 1,
        "turnDeadline": 1000,
    }
    payload.update(overrides)
    return _apply(machine, payload)


def _pick(machine, participant, entity, round=1, auto=False):
    return _apply(machine, {
        "type": "pick_made",
        "userID": participant,
        "playerID": entity,
        "round": round,
        "autoDraft": auto,
    })


RESYNC = {
    "type": "draft_state",
    "eventID": 9,
    "status": "in_progress",
    "currentTurn": 200,
    "roundNumber": 2,
    "currentPickIndex": 3,
    "totalRounds": 4,
    "pickOrder": [100, 200],
    "availablePlayers": [3, 4, 5],
    "turnDeadline": 5000,
    "remainingTime": 0,
    "pickHistory": [
        {"userID": 100, "playerID": 1, "pickNumber": 1, "round": 1, "autoDraft": False},
        {"userID": 200, "playerID": 2, "pickNumber": 2, "round": 1, "autoDraft": True},
    ],
}


# ── Scenarios ────────────────────────────────────────────────────────

class TestScenarios:
    def test_happy_path(self):
        machine = DraftStateMachine()
        machine.apply(parse_server_message(RESYNC | {"availablePlayers": [1, 2], "pickHistory": []}))
        _started(machine)

        assert machine.session.status == DraftStatus.IN_PROGRESS
        assert machine.session.current_turn == 100

        _apply(machine, {
            "type": "pick_made",
            "participantID": 100,
            "entityID": 1,
            "round": 1,
            "autoSelected": False,
        })

        assert machine.session.pick_history == [
            Pick(participant_id=100, entity_id=1, pick_number=1, round=1, auto_selected=False)
        ]
        assert 1 not in machine.session.available_entity_ids

    def test_error_then_continue(self):
        machine = DraftStateMachine()
        _started(machine)

        _apply(machine, {"type": "error", "error": "busy"})
        assert machine.session.last_error == "busy"
        assert machine.session.status == DraftStatus.IN_PROGRESS

        _apply(machine, {
            "type": "turn_changed",
            "currentTurn": 200,
            "roundNumber": 2,
            "turnDeadline": 2000,
        })
        assert machine.session.last_error is None
        assert machine.session.current_turn == 200
        assert machine.session.round_number == 2
        assert machine.session.turn_deadline == 2000

    def test_pause_resume(self):
        machine = DraftStateMachine()
        _started(machine)

        _apply(machine, {"type": "draft_paused", "eventID": 9, "remainingTime": 30})
        assert machine.session.status == DraftStatus.PAUSED
        assert machine.session.remaining_time == 30

        _apply(machine, {
            "type": "draft_resumed",
            "eventID": 9,
            "currentTurn": 100,
            "roundNumber": 2,
            "turnDeadline": 3000,
        })
        assert machine.session.status == DraftStatus.IN_PROGRESS
        assert machine.session.current_turn == 100
        assert machine.session.round_number == 2
        assert machine.session.turn_deadline == 3000


# ── Properties ───────────────────────────────────────────────────────

class TestResync:
    def test_resync_is_idempotent(self):
        machine = DraftStateMachine()
        _apply(machine, RESYNC)
        first = machine.session.model_dump()
        _apply(machine, RESYNC)
        assert machine.session.model_dump() == first

    def test_resync_overwrites_every_field(self):
        machine = DraftStateMachine()
        _started(machine, eventID=1, currentTurn=999)
        _pick(machine, 999, 42)
        _apply(machine, {"type": "error", "error": "stale"})

        _apply(machine, RESYNC)
        session = machine.session

        assert session.event_id == 9
        assert session.status == DraftStatus.IN_PROGRESS
        assert session.current_turn == 200
        assert session.round_number == 2
        assert session.total_rounds == 4
        assert session.current_pick_index == 3
        assert session.pick_order == [100, 200]
        assert session.available_entity_ids == [3, 4, 5]
        assert [p.entity_id for p in session.pick_history] == [1, 2]
        assert session.pick_history[1].auto_selected is True
        assert session.turn_deadline == 5000
        assert session.last_error is None

    @pytest.mark.parametrize(
        "status, expected",
        [
            ("in_progress", DraftStatus.IN_PROGRESS),
            ("paused", DraftStatus.PAUSED),
            ("completed", DraftStatus.COMPLETED),
            ("not_started", DraftStatus.IDLE),
            ("something_new", DraftStatus.COMPLETED),
        ],
    )
    def test_resync_status_mapping(self, status, expected):
        assert map_resync_status(status) == expected
        machine = DraftStateMachine()
        _apply(machine, RESYNC | {"status": status})
        assert machine.session.status == expected

    def test_missing_pool_stays_distinct_from_empty_pool(self):
        machine = DraftStateMachine()
        without_pool = {k: v for k, v in RESYNC.items() if k != "availablePlayers"}
        _apply(machine, without_pool)
        assert machine.session.available_entity_ids is None

        _apply(machine, RESYNC | {"availablePlayers": []})
        assert machine.session.available_entity_ids == []


class TestPicks:
    def test_pool_shrinks_by_one_per_pick(self):
        machine = DraftStateMachine()
        _apply(machine, RESYNC | {"availablePlayers": [10, 11, 12, 13], "pickHistory": []})

        for entity in (12, 10, 13):
            before = list(machine.session.available_entity_ids)
            _pick(machine, 100, entity)
            after = machine.session.available_entity_ids
            assert len(after) == len(before) - 1
            assert entity not in after
            assert set(after) < set(before)

    def test_pick_numbers_follow_history_position(self):
        machine = DraftStateMachine()
        _started(machine)
        for i, entity in enumerate([5, 6, 7, 8], start=1):
            _pick(machine, 100 + i, entity, round=(i + 1) // 2)

        history = machine.session.pick_history
        assert [p.pick_number for p in history] == [1, 2, 3, 4]
        assert [p.entity_id for p in history] == [5, 6, 7, 8]

    def test_pick_numbers_continue_after_resync(self):
        machine = DraftStateMachine()
        _apply(machine, RESYNC)
        _pick(machine, 100, 3)
        assert machine.session.pick_history[-1].pick_number == 3

    def test_auto_pick_is_flagged(self):
        machine = DraftStateMachine()
        _started(machine)
        _pick(machine, 100, 5, auto=True)
        assert machine.session.pick_history[0].auto_selected is True

    def test_pick_without_known_pool_keeps_pool_unknown(self):
        machine = DraftStateMachine()
        _pick(machine, 100, 5)
        assert machine.session.available_entity_ids is None
        assert len(machine.session.pick_history) == 1

    def test_pick_applies_even_when_not_in_progress(self):
        machine = DraftStateMachine()
        _apply(machine, RESYNC | {"status": "paused"})
        _pick(machine, 200, 4)
        assert machine.session.status == DraftStatus.PAUSED
        assert 4 not in machine.session.available_entity_ids


class TestTransitions:
    def test_initial_state_is_idle(self):
        session = DraftStateMachine().session
        assert session.status == DraftStatus.IDLE
        assert session.event_id is None
        assert session.current_turn is None
        assert session.available_entity_ids is None
        assert session.pick_history == []

    def test_draft_completed(self):
        machine = DraftStateMachine()
        _started(machine)
        _apply(machine, {"type": "draft_completed", "eventID": 9, "totalPicks": 8, "totalRounds": 4})
        assert machine.session.status == DraftStatus.COMPLETED
        assert machine.session.event_id == 9
        assert machine.session.total_rounds == 4
        assert machine.session.total_picks == 8

    def test_error_changes_nothing_else(self):
        machine = DraftStateMachine()
        _apply(machine, RESYNC)
        before = machine.session.model_dump(exclude={"last_error"})

        _apply(machine, {"type": "error", "error": "not your turn"})

        assert machine.session.last_error == "not your turn"
        assert machine.session.model_dump(exclude={"last_error"}) == before

    def test_error_is_overwritten_by_next_event(self):
        machine = DraftStateMachine()
        _started(machine)
        _apply(machine, {"type": "error", "error": "first"})
        _pick(machine, 100, 1)
        assert machine.session.last_error is None

    def test_reset_returns_to_idle(self):
        machine = DraftStateMachine()
        _apply(machine, RESYNC)
        machine.reset()
        assert machine.session == DraftSession()

    @pytest.mark.parametrize(
        "payload",
        [
            {"type": "draft_exploded", "eventID": 9},
            {"type": "pick_made", "userID": 100},
            {"type": "turn_changed", "currentTurn": "soon", "roundNumber": 1},
            {"eventID": 9},
            "not json at all",
            "[1, 2, 3]",
        ],
    )
    def test_unknown_or_malformed_messages_are_ignored(self, payload):
        machine = DraftStateMachine()
        _apply(machine, RESYNC)
        before = machine.session
        calls = []
        machine.subscribe(calls.append)

        assert _apply(machine, payload) is False
        assert machine.session is before
        assert calls == []


class TestOwnership:
    def test_earlier_sessions_are_not_mutated(self):
        machine = DraftStateMachine()
        _apply(machine, RESYNC)
        earlier = machine.session
        earlier_dump = earlier.model_dump()

        _pick(machine, 200, 3)
        _apply(machine, {"type": "turn_changed", "currentTurn": 100, "roundNumber": 2})

        assert earlier.model_dump() == earlier_dump
        assert machine.session is not earlier

    def test_listeners_see_each_change_before_the_next(self):
        machine = DraftStateMachine()
        seen = []
        machine.subscribe(lambda s: seen.append((s.current_turn, len(s.pick_history))))

        _started(machine)
        _pick(machine, 100, 1)
        _apply(machine, {"type": "turn_changed", "currentTurn": 200, "roundNumber": 1})

        assert seen == [(100, 0), (100, 1), (200, 1)]

    def test_unsubscribe(self):
        machine = DraftStateMachine()
        seen = []
        unsubscribe = machine.subscribe(seen.append)
        _started(machine)
        unsubscribe()
        _pick(machine, 100, 1)
        assert len(seen) == 1

    def test_separate_machines_do_not_share_state(self):
        a, b = DraftStateMachine(), DraftStateMachine()
        _started(a)
        _pick(a, 100, 1)
        assert b.session.status == DraftStatus.IDLE
        assert b.session.pick_history == []


class TestTurns:
    def test_may_act_only_on_own_turn(self):
        machine = DraftStateMachine()
        _started(machine)
        assert machine.may_act(100)
        assert not machine.may_act(200)
        assert not machine.may_act(None)

    def test_bind_event_only_before_authority_reports(self):
        machine = DraftStateMachine()
        assert machine.bind_event(7)
        assert machine.session.event_id == 7
        assert not machine.bind_event(8)
        _started(machine)
        assert machine.session.event_id == 9

    def test_expected_turn_snakes(self):
        order = [1, 2, 3]
        turns = [expected_turn(order, i) for i in range(9)]
        assert turns == [1, 2, 3, 3, 2, 1, 1, 2, 3]

    def test_expected_turn_without_order(self):
        assert expected_turn([], 0) is None

    def test_picks_remaining(self):
        machine = DraftStateMachine()
        _apply(machine, RESYNC)
        assert machine.session.picks_remaining == 2 * 4 - 2
