"""Shared fixtures for the draft-sync test suite."""

import json

import httpx
import pytest

from draft_sync.clients.draft_api import DraftAPIClient
from draft_sync.config import Settings
from draft_sync.models import Entity

BASE_URL = "http://draft.test"

ROSTER_PAYLOAD = [
    {"id": 1, "first_name": "Alan", "last_name": "Alpha", "status": "pro", "country_code": "US"},
    {"id": 2, "first_name": "Bea", "last_name": "Beta", "status": "amateur", "country_code": "SE"},
    {"id": 3, "first_name": "Cal", "last_name": "Gamma", "status": "pro", "country_code": "US"},
]


# ------------------------------------------------------------------
# Lightweight factories, no I/O
# ------------------------------------------------------------------

@pytest.fixture
def settings(tmp_path):
    return Settings(
        api_base_url=BASE_URL,
        api_timeout=5.0,
        local_store_path=tmp_path / "local.json",
        _env_file=None,
    )


@pytest.fixture
def roster():
    return [Entity.model_validate(p) for p in ROSTER_PAYLOAD]


def json_response(payload, status_code=200):
    return httpx.Response(status_code, content=json.dumps(payload).encode(),
                          headers={"Content-Type": "application/json"})


def draft_server(roster_payload=None, join_payload=None, join_status=200):
    """Mock transport for the draft server's resource endpoints."""
    roster_payload = ROSTER_PAYLOAD if roster_payload is None else roster_payload
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        path = request.url.path
        if request.method == "GET" and path.endswith("/players"):
            return json_response(roster_payload)
        if request.method == "POST" and path == "/events/join":
            if join_status != 200:
                return json_response(join_payload, join_status)
            return json_response(join_payload or {
                "id": 100, "event_id": 9, "username": "Team Rocket",
                "created_at": "2026-01-01T12:00:00Z",
            })
        return json_response({"error": "not found"}, 404)

    transport = httpx.MockTransport(handler)
    transport.requests = requests
    return transport


@pytest.fixture
def make_client(settings):
    """Build a DraftAPIClient over a mock transport (enter it with `async with`)."""

    def factory(transport: httpx.MockTransport | None = None) -> DraftAPIClient:
        return DraftAPIClient(settings, transport=transport or draft_server())

    return factory
