"""Tests for the read-only view API."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from conftest import draft_server
from draft_sync.api.dependencies import RoomManager
from draft_sync.clients.draft_api import DraftAPIClient
from draft_sync.clients.transport import PushTransport
from draft_sync.main import app
from draft_sync.services.connection import DraftRoom

RESYNC = {
    "type": "draft_state",
    "eventID": 9,
    "status": "in_progress",
    "currentTurn": 200,
    "roundNumber": 1,
    "totalRounds": 2,
    "pickOrder": [100, 200],
    "availablePlayers": [2, 3],
    "turnDeadline": 1000,
    "pickHistory": [
        {"userID": 100, "playerID": 1, "pickNumber": 1, "round": 1, "autoDraft": False},
    ],
}

def _open_room(settings, transport):
    client = DraftAPIClient(settings, transport=draft_server())
    asyncio.run(client.__aenter__())
    room = DraftRoom(client, transport, participant_id=200)
    asyncio.run(room.start())
    return client, room

@pytest.fixture
def api(settings):
    client, room = _open_room(settings, PushTransport())
    RoomManager.attach(room)
    with TestClient(app) as test_client:
        yield test_client
    RoomManager.attach(None)
    asyncio.run(client.__aexit__(None, None, None))

@pytest.fixture
def synced_api(api):
    response = api.post("/api/draft/events", json=RESYNC)
    assert response.status_code == 200
    return api

def test_health(api):
    response = api.get("/health")
    assert response.status_code == 200
    assert response.json()["connection"] == "connected"

def test_state_before_any_message(api):
    body = api.get("/api/draft/state").json()
    assert body["connection_status"] == "connected"
    assert body["awaiting_resync"] is True
    assert body["session"]["status"] == "idle"
    assert body["session"]["available_entity_ids"] is None

def test_post_event_applies_and_loads_roster(api):
    response = api.post("/api/draft/events", json=RESYNC)
    assert response.json() == {"delivered": True, "ignored": False, "status": "in_progress"}

    body = api.get("/api/draft/state").json()
    assert body["awaiting_resync"] is False
    assert body["is_my_turn"] is True
    assert body["roster_size"] == 3
    assert body["session"]["event_id"] == 9

def test_post_unknown_event_is_ignored(synced_api):
    response = synced_api.post("/api/draft/events", json={"type": "draft_exploded"})
    assert response.json() == {"delivered": True, "ignored": True, "status": "in_progress"}
    assert synced_api.get("/api/draft/state").json()["ignored_frames"] == 1

def test_players_default_to_available(synced_api):
    rows = synced_api.get("/api/draft/players").json()
    assert [r["entity"]["id"] for r in rows] == [2, 3]
    assert not any(r["is_taken"] for r in rows)
    assert [r["is_amateur"] for r in rows] == [True, False]

def test_players_filters_and_sort(synced_api):
    rows = synced_api.get(
        "/api/draft/players",
        params={"scope": "all", "category": ["US"], "sort": "name", "direction": "desc"},
    ).json()
    assert [(r["entity"]["last_name"], r["is_taken"]) for r in rows] == [
        ("Gamma", False),
        ("Alpha", True),
    ]

def test_players_search(synced_api):
    rows = synced_api.get("/api/draft/players", params={"scope": "all", "q": "BEA"}).json()
    assert [r["entity"]["id"] for r in rows] == [2]

def test_players_rejects_bad_scope(synced_api):
    assert synced_api.get("/api/draft/players", params={"scope": "nope"}).status_code == 422

def test_categories(synced_api):
    assert synced_api.get("/api/draft/categories").json() == ["SE", "US"]

def test_picks_use_wire_names(synced_api):
    synced_api.post(
        "/api/draft/events",
        json={"type": "pick_made", "userID": 200, "playerID": 3, "round": 1, "autoDraft": True},
    )
    picks = synced_api.get("/api/draft/picks").json()
    assert picks[-1] == {
        "userID": 200, "playerID": 3, "pickNumber": 2, "round": 1, "autoDraft": True,
    }

def test_roster_reload(synced_api):
    body = synced_api.post("/api/draft/roster/reload").json()
    assert body == {"draft_id": 9, "players": 3, "error": None}

def test_roster_reload_needs_draft_id(api):
    assert api.post("/api/draft/roster/reload").status_code == 409

def test_no_room_is_503():
    RoomManager.attach(None)
    response = TestClient(app).get("/api/draft/state")
    assert response.status_code == 503
