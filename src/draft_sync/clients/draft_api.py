"""
Async Draft Server Client

Handles the request/response endpoints of the draft server: event lookup,
the event roster and the one-time join call.
Uses httpx for async HTTP requests with connection pooling.
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from draft_sync.config import Settings, get_settings
from draft_sync.models import DraftEvent, Entity, JoinRequest, Participant

logger = logging.getLogger(__name__)


class DraftAPIError(Exception):
    """Exception raised for draft server errors."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


def error_message(response: httpx.Response) -> str:
    """Human-readable failure text: the JSON body's ``error`` field, else the status."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP {response.status_code}: {response.reason_phrase}"


class DraftAPIClient:
    """
    Async client for the draft server's resource endpoints.

    Usage:
        async with DraftAPIClient() as client:
            roster = await client.get_event_players(9)
            me = await client.join_draft("Team Rocket", "s3cret")
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or get_settings()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "DraftAPIClient":
        """Create HTTP client on context entry."""
        self._client = httpx.AsyncClient(
            base_url=self.settings.api_base_url,
            timeout=httpx.Timeout(self.settings.api_timeout),
            headers={"Accept": "application/json"},
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close HTTP client on context exit."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the HTTP client, raising if not initialized."""
        if self._client is None:
            raise RuntimeError(
                "DraftAPIClient must be used as async context manager: "
                "async with DraftAPIClient() as client: ..."
            )
        return self._client

    async def _request(
        self, method: str, endpoint: str, json: dict | None = None
    ) -> Any:
        """Make a request and return the decoded JSON body."""
        logger.debug("%s %s", method, endpoint)
        try:
            response = await self.client.request(method, endpoint, json=json)
        except httpx.HTTPError as e:
            raise DraftAPIError(f"Request failed: {endpoint}: {e}") from e

        if not response.is_success:
            raise DraftAPIError(error_message(response), status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise DraftAPIError(
                f"Invalid JSON from {endpoint}", status_code=response.status_code
            ) from e

    # ==================== Event Endpoints ====================

    async def get_events(self) -> list[DraftEvent]:
        """List all draft events."""
        data = await self._request("GET", "/events")
        try:
            return [DraftEvent.model_validate(event) for event in data or []]
        except (TypeError, ValidationError) as e:
            raise DraftAPIError(f"Malformed event list: {e}") from e

    async def get_event(self, event_id: int) -> DraftEvent:
        """
        Get a single draft event.

        Args:
            event_id: Draft event ID

        Returns:
            DraftEvent object
        """
        data = await self._request("GET", f"/events/{event_id}")
        try:
            return DraftEvent.model_validate(data)
        except ValidationError as e:
            raise DraftAPIError(f"Malformed event {event_id}: {e}") from e

    async def get_event_players(self, event_id: int) -> list[Entity]:
        """
        Get the roster of selectable players for a draft.

        Args:
            event_id: Draft event ID

        Returns:
            List of Entity objects, in server order
        """
        data = await self._request("GET", f"/events/{event_id}/players")
        if not isinstance(data, list):
            raise DraftAPIError(f"Malformed roster for event {event_id}")
        try:
            return [Entity.model_validate(player) for player in data]
        except ValidationError as e:
            raise DraftAPIError(f"Malformed roster for event {event_id}: {e}") from e

    # ==================== Participant Endpoints ====================

    async def join_draft(self, display_name: str, passkey: str) -> Participant:
        """
        Join (or rejoin) the draft that owns the given passkey.

        Args:
            display_name: Team name shown to other participants
            passkey: Draft passkey

        Returns:
            The Participant record for this client
        """
        try:
            body = JoinRequest(display_name=display_name, passkey=passkey)
        except ValidationError as e:
            raise DraftAPIError("Team name and passkey are required") from e

        data = await self._request("POST", "/events/join", json=body.to_wire())
        try:
            return Participant.model_validate(data)
        except ValidationError as e:
            raise DraftAPIError(f"Malformed join response: {e}") from e
