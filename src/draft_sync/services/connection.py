"""
Connection Lifecycle and Draft Room

`ConnectionManager` wraps a realtime `Transport`: idempotent connect and
disconnect, status surfacing, and decoding of every received frame.
`DraftRoom` wires it to the state machine, the roster repository and the
local store, and is the handle the CLI and the view API work with.
"""

import asyncio
import logging
from collections.abc import Callable

from draft_sync.clients.draft_api import DraftAPIClient, DraftAPIError
from draft_sync.clients.transport import Transport
from draft_sync.models import (
    ClientMessage,
    ConnectionStatus,
    DraftSession,
    DraftStateMessage,
    Participant,
    PresentedEntity,
    RoomSnapshot,
    ServerMessage,
    ViewFilter,
    parse_server_message,
)
from draft_sync.services.draft_state import DraftStateMachine
from draft_sync.services.local_store import LocalStore
from draft_sync.services.roster import EntityRepository
from draft_sync.services.view_model import present

logger = logging.getLogger(__name__)

MessageHandler = Callable[[ServerMessage | None, str], None]
StatusListener = Callable[[ConnectionStatus], None]


class ConnectionManager:
    """
    Lifecycle of one realtime connection.

    Reconnect policy belongs to the transport. After every fresh
    ``connected`` status the manager expects a ``draft_state`` resync and
    reports ``awaiting_resync`` until one arrives.
    """

    def __init__(self, transport: Transport):
        self.transport = transport
        self.awaiting_resync = False
        self._message_handlers: list[MessageHandler] = []
        self._status_listeners: list[StatusListener] = []

        transport.on_frame(self._on_frame)
        transport.on_status(self._on_status)

    @property
    def status(self) -> ConnectionStatus:
        return self.transport.status

    def on_message(self, handler: MessageHandler) -> None:
        """Receive every frame, decoded (None when undecodable), with the raw text."""
        self._message_handlers.append(handler)

    def on_status(self, listener: StatusListener) -> None:
        self._status_listeners.append(listener)

    async def connect(self) -> None:
        if self.status != ConnectionStatus.DISCONNECTED:
            return
        await self.transport.connect()

    async def disconnect(self) -> None:
        if self.status == ConnectionStatus.DISCONNECTED:
            return
        await self.transport.disconnect()

    async def send(self, message: ClientMessage) -> None:
        await self.transport.send(message.to_json())

    def _on_status(self, status: ConnectionStatus) -> None:
        logger.info("Connection %s", status.value)
        if status == ConnectionStatus.CONNECTED:
            self.awaiting_resync = True
        for listener in list(self._status_listeners):
            listener(status)

    def _on_frame(self, frame: str) -> None:
        message = parse_server_message(frame)
        if isinstance(message, DraftStateMessage):
            self.awaiting_resync = False
        for handler in list(self._message_handlers):
            handler(message, frame)


class DraftRoom:
    """
    One participant's view of one draft.

    Usage:
        async with DraftAPIClient() as client:
            room = DraftRoom(client, transport, participant_id=100)
            await room.start()
            rows = room.view(ViewFilter(query="al"))
    """

    def __init__(
        self,
        client: DraftAPIClient,
        transport: Transport,
        participant_id: int | None = None,
        local_store: LocalStore | None = None,
    ):
        self.client = client
        self.participant_id = participant_id
        self.local_store = local_store
        self.machine = DraftStateMachine()
        self.roster = EntityRepository(client)
        self.connection = ConnectionManager(transport)
        self.join_error: str | None = None
        self.ignored_frames = 0
        self._roster_requested: int | None = None
        self._pending: set[asyncio.Task] = set()

        self.connection.on_message(self._handle_message)
        self.machine.subscribe(self._on_session_change)

    # ==================== Read side ====================

    @property
    def session(self) -> DraftSession:
        return self.machine.session

    @property
    def connection_status(self) -> ConnectionStatus:
        return self.connection.status

    @property
    def is_my_turn(self) -> bool:
        return self.machine.may_act(self.participant_id)

    def snapshot(self) -> RoomSnapshot:
        return RoomSnapshot(
            connection_status=self.connection_status,
            awaiting_resync=self.connection.awaiting_resync,
            participant_id=self.participant_id,
            is_my_turn=self.is_my_turn,
            roster_size=len(self.roster.roster),
            roster_error=self.roster.error,
            ignored_frames=self.ignored_frames,
            session=self.session,
        )

    def view(self, view_filter: ViewFilter | None = None) -> list[PresentedEntity]:
        """Presented pool rows for the current roster and session."""
        session = self.session
        return present(
            self.roster.roster,
            session.available_entity_ids,
            session.pick_history,
            view_filter or ViewFilter(),
        )

    # ==================== Lifecycle ====================

    async def start(self) -> None:
        """Restore the remembered draft, if any, then connect."""
        if self.local_store is not None:
            remembered = self.local_store.load()
            if self.participant_id is None:
                self.participant_id = remembered.participant_id
            if remembered.draft_id is not None:
                self.machine.bind_event(remembered.draft_id)
        await self.connection.connect()

    async def stop(self) -> None:
        """Disconnect; the last known session stays on screen."""
        await self.connection.disconnect()

    async def leave(self) -> None:
        """Disconnect and forget this draft entirely."""
        await self.connection.disconnect()
        self._roster_requested = None
        for task in list(self._pending):
            task.cancel()
        self.machine.reset()
        self.roster.clear()
        if self.local_store is not None:
            self.local_store.clear()

    async def wait_idle(self) -> None:
        """Wait for background roster loads to finish or be cancelled."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # ==================== Actions ====================

    async def join(self, display_name: str, passkey: str) -> Participant | None:
        """Join a draft by passkey; failures are kept in ``join_error``."""
        self.join_error = None
        try:
            participant = await self.client.join_draft(display_name, passkey)
        except DraftAPIError as e:
            self.join_error = e.message or "Failed to join draft"
            logger.warning("Join failed: %s", self.join_error)
            return None

        self.participant_id = participant.id
        if participant.draft_id is not None:
            self.machine.bind_event(participant.draft_id)
            if self.local_store is not None:
                self.local_store.remember(participant.draft_id, participant.id)
        return participant

    async def send(self, message: ClientMessage) -> None:
        await self.connection.send(message)

    # ==================== Internals ====================

    def _handle_message(self, message: ServerMessage | None, frame: str) -> None:
        if message is None:
            self.ignored_frames += 1
            logger.warning("Ignored frame: %.200s", frame)
            return
        self.machine.apply(message)

    def _on_session_change(self, session: DraftSession) -> None:
        event_id = session.event_id
        if event_id is None or event_id == self._roster_requested:
            return
        if self.local_store is not None:
            self.local_store.remember(event_id, self.participant_id)
        self._schedule_roster_load(event_id)

    def _schedule_roster_load(self, event_id: int) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop; roster load for %s deferred", event_id)
            return
        self._roster_requested = event_id
        task = loop.create_task(
            self.roster.load_roster(event_id, is_current=self._is_current_draft)
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _is_current_draft(self, event_id: int) -> bool:
        return event_id == self._roster_requested
