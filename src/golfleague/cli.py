"""Command-line interface for seeding the league and deciding swaps."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import anyio

from golfleague.config import LeagueSettings
from golfleague.errors import LeagueError
from golfleague.models import SwapRequest, SwapStatus
from golfleague.notifications import build_gateway
from golfleague.persistence import LeagueStore
from golfleague.seed_loader import LeagueSeed
from golfleague.swaps import SwapCoordinator


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Golf league schedule and swap administration")
    parser.add_argument("--db", type=Path, default=None, help="SQLite database path (overrides GOLFLEAGUE_DB_PATH)")
    sub = parser.add_subparsers(dest="command", required=True)

    seed = sub.add_parser("seed", help="Load players and schedule rows from a JSON seed file")
    seed.add_argument("seed_file", type=Path, help="Seed JSON with 'players' and 'schedule' lists")

    sub.add_parser("swaps", help="List pending swap requests as JSON")

    approve = sub.add_parser("approve", help="Approve a pending swap request")
    approve.add_argument("swap_id")

    reject = sub.add_parser("reject", help="Reject a pending swap request")
    reject.add_argument("swap_id")

    serve = sub.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    return parser.parse_args(argv)


def _swap_to_dict(request: SwapRequest) -> dict:
    return {
        "id": request.swap_id,
        "weekId": request.week_id,
        "requestingPlayerId": request.requesting_player_id,
        "targetPlayerId": request.target_player_id,
        "status": request.status.value,
        "createdAt": request.created_at.isoformat(),
        "updatedAt": request.updated_at.isoformat() if request.updated_at else None,
    }


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    settings = LeagueSettings.from_env()
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
    db_path = args.db or settings.db_path

    if args.command == "serve":
        import uvicorn

        from golfleague.api import create_app

        app = create_app(settings, store=LeagueStore(db_path))
        uvicorn.run(app, host=args.host, port=args.port)
        return 0

    store = LeagueStore(db_path)
    coordinator = SwapCoordinator(
        store.swaps,
        store.schedule,
        store.players,
        build_gateway(settings, store.players),
        swap_mode=settings.swap_mode,
        notify_rejections=settings.notify_rejections,
    )

    try:
        if args.command == "seed":
            players, rows = LeagueSeed.load(args.seed_file).apply(store.players, store.schedule)
            print(f"Seeded {players} players and {rows} schedule entries into {db_path}")
        elif args.command == "swaps":
            print(json.dumps([_swap_to_dict(item) for item in coordinator.list_pending()], indent=2))
        else:
            decision = SwapStatus.APPROVED if args.command == "approve" else SwapStatus.REJECTED
            decided = anyio.run(coordinator.decide, args.swap_id, decision)
            print(json.dumps(_swap_to_dict(decided), indent=2))
    except LeagueError as exc:
        print(f"{type(exc).__name__}: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
