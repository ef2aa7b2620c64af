"""
Draft Sync CLI

Command-line interface for inspecting draft rosters, joining a draft and
replaying recorded realtime sessions without running the API server.
"""

import argparse
import asyncio
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

from draft_sync.clients.draft_api import DraftAPIClient, DraftAPIError
from draft_sync.clients.transport import ReplayTransport
from draft_sync.config import get_settings
from draft_sync.logging_config import setup_logging
from draft_sync.models import (
    AvailabilityScope,
    PresentedEntity,
    SortDirection,
    SortField,
    SortSpec,
    ViewFilter,
)
from draft_sync.services.connection import DraftRoom
from draft_sync.services.local_store import LocalStore
from draft_sync.services.roster import EntityRepository
from draft_sync.services.view_model import present


class DraftConsole:
    """
    Library facade behind the CLI.

    Example:
        async with DraftConsole() as console:
            rows = await console.get_roster(9, ViewFilter(query="al"))
            room = await console.replay("draft.jsonl", participant_id=100)
            print(room.session.status)
    """

    def __init__(self) -> None:
        self.settings = get_settings()
        self.client: DraftAPIClient | None = None

    async def __aenter__(self):
        self.client = DraftAPIClient(self.settings)
        await self.client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.client:
            await self.client.__aexit__(exc_type, exc_val, exc_tb)

    def _require_client(self) -> DraftAPIClient:
        if not self.client:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self.client

    async def get_roster(
        self, draft_id: int, view_filter: ViewFilter
    ) -> tuple[list[PresentedEntity], str | None]:
        """Roster rows for a draft, before any pool is known."""
        repo = EntityRepository(self._require_client())
        roster = await repo.load_roster(draft_id)
        return present(roster, None, [], view_filter), repo.error

    async def join(self, team_name: str, passkey: str) -> dict[str, Any]:
        """Join a draft and remember it locally."""
        participant = await self._require_client().join_draft(team_name, passkey)
        if participant.draft_id is not None:
            LocalStore(self.settings.local_store_path).remember(
                participant.draft_id, participant.id
            )
        return participant.model_dump()

    async def replay(
        self, path: str | Path, participant_id: int | None = None
    ) -> DraftRoom:
        """Play a recorded session through a fresh room."""
        room = DraftRoom(
            self._require_client(),
            ReplayTransport.from_file(path),
            participant_id=participant_id,
        )
        await room.start()
        await room.wait_idle()
        return room


def _view_filter(args: argparse.Namespace, default_scope: str) -> ViewFilter:
    sort = None
    if args.sort:
        sort = SortSpec(
            field=SortField(args.sort),
            direction=SortDirection.DESC if args.desc else SortDirection.ASC,
        )
    return ViewFilter(
        query=args.search or "",
        categories=frozenset(args.category) if args.category else None,
        scope=AvailabilityScope(args.scope or default_scope),
        sort=sort,
    )


def _print_rows(rows: list[PresentedEntity]) -> None:
    print(f"{'ID':<8} {'Name':<30} {'Cat':<6} {'Status':<10}")
    print("-" * 58)
    for row in rows:
        entity = row.entity
        name = entity.display_name + (" (a)" if entity.is_amateur else "")
        flag = "drafted" if row.is_taken else ""
        print(f"{entity.id:<8} {name:<30} {entity.category_code:<6} {flag:<10}")


def _add_view_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--scope",
        choices=[s.value for s in AvailabilityScope],
        help="Which players to list",
    )
    parser.add_argument("--search", "-q", help="Case-insensitive name search")
    parser.add_argument(
        "--category", "-c", action="append", help="Category code (repeatable)"
    )
    parser.add_argument(
        "--sort", choices=[f.value for f in SortField], help="Sort field"
    )
    parser.add_argument("--desc", action="store_true", help="Sort descending")


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for all commands."""
    parser = argparse.ArgumentParser(
        description="Draft Sync CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List a draft's roster, filtered and sorted
  draft-sync roster 9 --search al --category US --sort name

  # Join a draft
  draft-sync join "Team Rocket" s3cret

  # Replay a recorded session as participant 100
  draft-sync replay session.jsonl --me 100 --scope all

  # Serve the read-only view API
  draft-sync serve
        """,
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: from settings)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # roster command
    roster_parser = subparsers.add_parser("roster", help="List a draft's roster")
    roster_parser.add_argument("draft_id", type=int, help="Draft event ID")
    _add_view_arguments(roster_parser)

    # join command
    join_parser = subparsers.add_parser("join", help="Join a draft by passkey")
    join_parser.add_argument("team_name", help="Team name")
    join_parser.add_argument("passkey", help="Draft passkey")

    # replay command
    replay_parser = subparsers.add_parser(
        "replay", help="Replay a JSON-lines recording of server messages"
    )
    replay_parser.add_argument("file", help="Recording, one JSON message per line")
    replay_parser.add_argument("--me", type=int, help="Your participant ID")
    _add_view_arguments(replay_parser)

    # serve command
    subparsers.add_parser("serve", help="Run the read-only view API")

    return parser


async def cli_main(args: argparse.Namespace):
    """Run one async command."""
    async with DraftConsole() as console:
        if args.command == "roster":
            rows, error = await console.get_roster(
                args.draft_id, _view_filter(args, AvailabilityScope.ALL.value)
            )
            if error:
                print(f"Failed to load roster: {error}")
                sys.exit(1)
            print(f"Draft {args.draft_id} - {len(rows)} player(s)\n")
            _print_rows(rows)

        elif args.command == "join":
            try:
                participant = await console.join(args.team_name, args.passkey)
            except DraftAPIError as e:
                print(f"Join failed: {e.message}")
                sys.exit(1)
            print(f"Joined draft {participant['draft_id']} as {participant['display_name']}")
            print(f"  Participant ID: {participant['id']}")

        elif args.command == "replay":
            room = await console.replay(args.file, participant_id=args.me)
            session = room.session

            print(f"Draft {session.event_id} - {session.status.value}")
            print(f"  Round: {session.round_number}/{session.total_rounds}")
            print(f"  Current turn: {session.current_turn or 'N/A'}")
            if args.me is not None:
                print(f"  {'YOUR TURN!' if room.is_my_turn else 'Waiting...'}")
            if session.turn_deadline:
                deadline = datetime.fromtimestamp(session.turn_deadline)
                print(f"  Turn deadline: {deadline:%H:%M:%S}")
            if session.last_error:
                print(f"  Error: {session.last_error}")
            if room.ignored_frames:
                print(f"  Ignored frames: {room.ignored_frames}")
            if room.roster.error:
                print(f"  Roster unavailable: {room.roster.error}")

            print(f"\nPick History ({len(session.pick_history)})")
            for pick in session.pick_history:
                auto = " (auto)" if pick.auto_selected else ""
                print(
                    f"  #{pick.pick_number} - User {pick.participant_id} picked "
                    f"Player {pick.entity_id} (Round {pick.round}){auto}"
                )

            rows = room.view(_view_filter(args, AvailabilityScope.AVAILABLE.value))
            print(f"\nPlayers ({len(rows)})")
            _print_rows(rows)


def run_cli():
    """Entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logging(args.log_level or get_settings().log_level)

    if args.command == "serve":
        from draft_sync.main import run

        run()
        return

    asyncio.run(cli_main(args))


if __name__ == "__main__":
    run_cli()
