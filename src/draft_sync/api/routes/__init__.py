"""API route handlers."""

from draft_sync.api.routes import draft

__all__ = ["draft"]
