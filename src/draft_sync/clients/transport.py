"""
Realtime transport contract.

The socket itself (framing, reconnects, backoff) belongs to the caller. The
draft engine only needs idempotent connect/disconnect, a status value and
one callback per received frame, in arrival order.
"""

import asyncio
import json
import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any, Protocol

from draft_sync.models import ConnectionStatus

logger = logging.getLogger(__name__)

FrameHandler = Callable[[str], None]
StatusHandler = Callable[[ConnectionStatus], None]


class Transport(Protocol):
    """What a realtime transport must provide."""

    @property
    def status(self) -> ConnectionStatus: ...

    def on_frame(self, handler: FrameHandler) -> None: ...

    def on_status(self, handler: StatusHandler) -> None: ...

    async def connect(self) -> None: ...

    async def disconnect(self) -> None: ...

    async def send(self, frame: str) -> None: ...


class PushTransport:
    """
    Transport fed by its owner.

    A process that owns the real socket forwards each received frame with
    `push`; outbound frames queue up in ``sent`` for it to drain.
    """

    def __init__(self) -> None:
        self._status = ConnectionStatus.DISCONNECTED
        self._frame_handlers: list[FrameHandler] = []
        self._status_handlers: list[StatusHandler] = []
        self.sent: list[str] = []

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    def on_frame(self, handler: FrameHandler) -> None:
        self._frame_handlers.append(handler)

    def on_status(self, handler: StatusHandler) -> None:
        self._status_handlers.append(handler)

    def _set_status(self, status: ConnectionStatus) -> None:
        if status == self._status:
            return
        self._status = status
        for handler in list(self._status_handlers):
            handler(status)

    def push(self, frame: str | dict[str, Any]) -> bool:
        """Deliver one received frame; dropped unless connected."""
        if self._status != ConnectionStatus.CONNECTED:
            logger.warning("Dropping inbound frame while %s", self._status.value)
            return False
        if not isinstance(frame, str):
            frame = json.dumps(frame)
        for handler in list(self._frame_handlers):
            handler(frame)
        return True

    async def connect(self) -> None:
        if self._status != ConnectionStatus.DISCONNECTED:
            return
        self._set_status(ConnectionStatus.CONNECTING)
        await asyncio.sleep(0)
        self._set_status(ConnectionStatus.CONNECTED)

    async def disconnect(self) -> None:
        if self._status == ConnectionStatus.DISCONNECTED:
            return
        self._set_status(ConnectionStatus.DISCONNECTED)

    async def send(self, frame: str) -> None:
        if self._status != ConnectionStatus.CONNECTED:
            logger.warning("Dropping outbound frame while %s", self._status.value)
            return
        self.sent.append(frame)


class ReplayTransport(PushTransport):
    """
    Transport that plays back recorded frames.

    Every connect delivers the recording from the start, one frame per
    event-loop step, until the recording ends or the transport disconnects.
    """

    def __init__(self, frames: Iterable[str | dict[str, Any]]):
        super().__init__()
        self._frames = [f if isinstance(f, str) else json.dumps(f) for f in frames]

    @classmethod
    def from_file(cls, path: str | Path) -> "ReplayTransport":
        """Load frames from a JSON-lines file, skipping blank lines."""
        lines = Path(path).read_text(encoding="utf-8").splitlines()
        return cls(line for line in lines if line.strip())

    async def connect(self) -> None:
        if self._status != ConnectionStatus.DISCONNECTED:
            return
        await super().connect()

        for frame in self._frames:
            if not self.push(frame):
                break
            await asyncio.sleep(0)
