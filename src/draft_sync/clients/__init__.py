"""External collaborators: draft server API and realtime transport."""

from draft_sync.clients.draft_api import DraftAPIClient, DraftAPIError
from draft_sync.clients.transport import PushTransport, ReplayTransport, Transport

__all__ = [
    "DraftAPIClient",
    "DraftAPIError",
    "PushTransport",
    "ReplayTransport",
    "Transport",
]
