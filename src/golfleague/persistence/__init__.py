"""Persistence layer for the roster, the tee-time schedule and swap requests."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator, List, Optional

from golfleague.errors import ConflictError, DependencyFailure, InvalidStateError, NotFoundError
from golfleague.models import PlayerRecord, ScheduleEntry, SwapRequest, SwapStatus

from .protocols import PlayerDirectory, Reassignment, ScheduleStore, SwapRequestLedger


logger = logging.getLogger(__name__)

__all__ = [
    "LeagueStore",
    "SqlitePlayerDirectory",
    "SqliteScheduleStore",
    "SqliteSwapLedger",
    "PlayerDirectory",
    "Reassignment",
    "ScheduleStore",
    "SwapRequestLedger",
]


class LeagueStore:
    """SQLite-backed home for the three league tables.

    A connection is opened per operation and committed or rolled back as a
    unit, so each store method is atomic with respect to other callers.
    """

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path)
        self._ensure_schema()
        self.players = SqlitePlayerDirectory(self)
        self.schedule = SqliteScheduleStore(self)
        self.swaps = SqliteSwapLedger(self)

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path, timeout=10.0)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def transaction(
        self, operation: str, *, immediate: bool = False, **context: Any
    ) -> Iterator[sqlite3.Connection]:
        try:
            conn = self._connect()
        except (sqlite3.Error, OSError) as exc:
            logger.error("Could not open %s for %s %s: %s", self.db_path, operation, context, exc)
            raise DependencyFailure(
                f"{operation} failed: {exc}", operation=operation, context=context
            ) from exc
        try:
            if immediate:
                conn.execute("BEGIN IMMEDIATE")
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            logger.error("sqlite %s failed %s: %s", operation, context, exc)
            raise DependencyFailure(
                f"{operation} failed: {exc}", operation=operation, context=context
            ) from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self.transaction("ensure_schema") as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS players (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                email TEXT NOT NULL,
                phone_number TEXT,
                share INTEGER NOT NULL DEFAULT 50
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS schedule (
                week_id TEXT NOT NULL,
                player_id TEXT NOT NULL,
                time TEXT NOT NULL,
                course TEXT NOT NULL,
                PRIMARY KEY (week_id, player_id)
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS swap_requests (
                id TEXT PRIMARY KEY,
                week_id TEXT NOT NULL,
                requesting_player_id TEXT NOT NULL,
                target_player_id TEXT NOT NULL,
                status TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT
            )
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS swap_requests_status ON swap_requests (status)")


def _row_to_player(row: sqlite3.Row) -> PlayerRecord:
    return PlayerRecord(
        player_id=row["id"],
        name=row["name"],
        email=row["email"],
        phone_number=row["phone_number"],
        share=row["share"],
    )


def _row_to_entry(row: sqlite3.Row) -> ScheduleEntry:
    return ScheduleEntry(
        week_id=row["week_id"],
        player_id=row["player_id"],
        time=row["time"],
        course=row["course"],
    )


def _row_to_swap(row: sqlite3.Row) -> SwapRequest:
    return SwapRequest(
        swap_id=row["id"],
        week_id=row["week_id"],
        requesting_player_id=row["requesting_player_id"],
        target_player_id=row["target_player_id"],
        status=SwapStatus(row["status"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]) if row["updated_at"] else None,
    )


class SqlitePlayerDirectory:
    def __init__(self, store: LeagueStore):
        self._store = store

    def get(self, player_id: str) -> Optional[PlayerRecord]:
        with self._store.transaction("get_player", player_id=player_id) as conn:
            row = conn.execute("SELECT * FROM players WHERE id = ?", (player_id,)).fetchone()
        return _row_to_player(row) if row is not None else None

    def put(self, player: PlayerRecord) -> PlayerRecord:
        with self._store.transaction("put_player", player_id=player.player_id) as conn:
            conn.execute(
                """
                INSERT INTO players (id, name, email, phone_number, share)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    email = excluded.email,
                    phone_number = excluded.phone_number,
                    share = excluded.share
                """,
                (player.player_id, player.name, player.email, player.phone_number, player.share),
            )
        return player

    def list_all(self) -> List[PlayerRecord]:
        with self._store.transaction("list_players") as conn:
            rows = conn.execute("SELECT * FROM players ORDER BY name, id").fetchall()
        return [_row_to_player(row) for row in rows]

    def delete(self, player_id: str) -> None:
        with self._store.transaction("delete_player", immediate=True, player_id=player_id) as conn:
            if conn.execute("SELECT 1 FROM players WHERE id = ?", (player_id,)).fetchone() is None:
                raise NotFoundError(f"Player {player_id} not found")
            scheduled = conn.execute(
                "SELECT 1 FROM schedule WHERE player_id = ? LIMIT 1", (player_id,)
            ).fetchone()
            swapping = conn.execute(
                """
                SELECT 1 FROM swap_requests
                WHERE requesting_player_id = ? OR target_player_id = ?
                LIMIT 1
                """,
                (player_id, player_id),
            ).fetchone()
            if scheduled is not None or swapping is not None:
                raise ConflictError(
                    f"Player {player_id} is still referenced by schedule entries or swap requests"
                )
            conn.execute("DELETE FROM players WHERE id = ?", (player_id,))


class SqliteScheduleStore:
    def __init__(self, store: LeagueStore):
        self._store = store

    def get(self, week_id: str, player_id: str) -> Optional[ScheduleEntry]:
        with self._store.transaction("get_schedule_entry", week_id=week_id, player_id=player_id) as conn:
            row = self._fetch(conn, week_id, player_id)
        return _row_to_entry(row) if row is not None else None

    def put(self, entry: ScheduleEntry) -> ScheduleEntry:
        with self._store.transaction(
            "put_schedule_entry", week_id=entry.week_id, player_id=entry.player_id
        ) as conn:
            conn.execute(
                """
                INSERT INTO schedule (week_id, player_id, time, course)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(week_id, player_id) DO UPDATE SET
                    time = excluded.time,
                    course = excluded.course
                """,
                (entry.week_id, entry.player_id, entry.time, entry.course),
            )
        return entry

    def query_by_week(self, week_id: str) -> List[ScheduleEntry]:
        with self._store.transaction("query_schedule_week", week_id=week_id) as conn:
            rows = conn.execute(
                "SELECT * FROM schedule WHERE week_id = ? ORDER BY time, player_id", (week_id,)
            ).fetchall()
        return [_row_to_entry(row) for row in rows]

    def list_all(self) -> List[ScheduleEntry]:
        with self._store.transaction("list_schedule") as conn:
            rows = conn.execute("SELECT * FROM schedule ORDER BY week_id, time, player_id").fetchall()
        return [_row_to_entry(row) for row in rows]

    def reassign(self, week_id: str, from_player_id: str, to_player_id: str) -> Reassignment:
        with self._store.transaction(
            "reassign_schedule_entry",
            immediate=True,
            week_id=week_id,
            from_player_id=from_player_id,
            to_player_id=to_player_id,
        ) as conn:
            return self._repoint(conn, week_id, from_player_id, to_player_id)

    def exchange(self, week_id: str, player_a: str, player_b: str) -> Reassignment:
        with self._store.transaction(
            "exchange_schedule_entries",
            immediate=True,
            week_id=week_id,
            player_a=player_a,
            player_b=player_b,
        ) as conn:
            row_a = self._fetch(conn, week_id, player_a)
            row_b = self._fetch(conn, week_id, player_b)
            if row_a is None:
                raise NotFoundError(f"No schedule entry for {player_a} in week {week_id}")
            if row_b is None:
                return self._repoint(conn, week_id, player_a, player_b)
            entry_a = _row_to_entry(row_a)
            entry_b = _row_to_entry(row_b)
            swapped_a = entry_a.model_copy(update={"time": entry_b.time, "course": entry_b.course})
            swapped_b = entry_b.model_copy(update={"time": entry_a.time, "course": entry_a.course})
            for entry in (swapped_a, swapped_b):
                conn.execute(
                    "UPDATE schedule SET time = ?, course = ? WHERE week_id = ? AND player_id = ?",
                    (entry.time, entry.course, entry.week_id, entry.player_id),
                )
            return Reassignment(entries=(swapped_b, swapped_a))

    def _fetch(self, conn: sqlite3.Connection, week_id: str, player_id: str) -> Optional[sqlite3.Row]:
        return conn.execute(
            "SELECT * FROM schedule WHERE week_id = ? AND player_id = ?",
            (week_id, player_id),
        ).fetchone()

    def _repoint(
        self,
        conn: sqlite3.Connection,
        week_id: str,
        from_player_id: str,
        to_player_id: str,
    ) -> Reassignment:
        row = self._fetch(conn, week_id, from_player_id)
        if row is None:
            raise NotFoundError(f"No schedule entry for {from_player_id} in week {week_id}")
        existing = self._fetch(conn, week_id, to_player_id)
        displaced = _row_to_entry(existing) if existing is not None else None
        if displaced is not None:
            conn.execute(
                "DELETE FROM schedule WHERE week_id = ? AND player_id = ?",
                (week_id, to_player_id),
            )
        conn.execute(
            "UPDATE schedule SET player_id = ? WHERE week_id = ? AND player_id = ?",
            (to_player_id, week_id, from_player_id),
        )
        moved = _row_to_entry(row).model_copy(update={"player_id": to_player_id})
        return Reassignment(entries=(moved,), displaced=displaced)


class SqliteSwapLedger:
    def __init__(self, store: LeagueStore):
        self._store = store

    def get(self, swap_id: str) -> Optional[SwapRequest]:
        with self._store.transaction("get_swap_request", swap_id=swap_id) as conn:
            row = conn.execute("SELECT * FROM swap_requests WHERE id = ?", (swap_id,)).fetchone()
        return _row_to_swap(row) if row is not None else None

    def put(self, request: SwapRequest) -> SwapRequest:
        with self._store.transaction("put_swap_request", swap_id=request.swap_id) as conn:
            conn.execute(
                """
                INSERT INTO swap_requests (
                    id, week_id, requesting_player_id, target_player_id,
                    status, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    week_id = excluded.week_id,
                    requesting_player_id = excluded.requesting_player_id,
                    target_player_id = excluded.target_player_id,
                    status = excluded.status,
                    created_at = excluded.created_at,
                    updated_at = excluded.updated_at
                """,
                self._params(request),
            )
        return request

    def query_pending(self) -> List[SwapRequest]:
        with self._store.transaction("query_pending_swaps") as conn:
            rows = conn.execute(
                "SELECT * FROM swap_requests WHERE status = ? ORDER BY created_at, id",
                (SwapStatus.PENDING.value,),
            ).fetchall()
        return [_row_to_swap(row) for row in rows]

    def create_pending(self, request: SwapRequest) -> SwapRequest:
        with self._store.transaction("create_swap_request", immediate=True, swap_id=request.swap_id) as conn:
            cursor = conn.execute(
                """
                INSERT INTO swap_requests (
                    id, week_id, requesting_player_id, target_player_id,
                    status, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    status = excluded.status,
                    created_at = excluded.created_at,
                    updated_at = NULL
                WHERE swap_requests.status = ?
                    AND swap_requests.week_id = excluded.week_id
                    AND swap_requests.requesting_player_id = excluded.requesting_player_id
                    AND swap_requests.target_player_id = excluded.target_player_id
                """,
                (*self._params(request), SwapStatus.REJECTED.value),
            )
            if cursor.rowcount == 0:
                row = conn.execute(
                    "SELECT * FROM swap_requests WHERE id = ?", (request.swap_id,)
                ).fetchone()
                if row is not None and not _row_to_swap(row).same_players(request):
                    raise ConflictError(
                        f"Swap request id {request.swap_id} is already used by a request between "
                        f"{row['requesting_player_id']} and {row['target_player_id']}"
                    )
                status = row["status"] if row is not None else "unknown"
                raise ConflictError(f"Swap request {request.swap_id} already exists with status {status}")
        return request

    def transition(
        self,
        swap_id: str,
        expected: SwapStatus,
        new_status: SwapStatus,
        updated_at: datetime,
    ) -> SwapRequest:
        with self._store.transaction(
            "transition_swap_request", immediate=True, swap_id=swap_id, new_status=new_status.value
        ) as conn:
            cursor = conn.execute(
                "UPDATE swap_requests SET status = ?, updated_at = ? WHERE id = ? AND status = ?",
                (new_status.value, updated_at.isoformat(), swap_id, expected.value),
            )
            row = conn.execute("SELECT * FROM swap_requests WHERE id = ?", (swap_id,)).fetchone()
            if row is None:
                raise NotFoundError(f"Swap request {swap_id} not found")
            if cursor.rowcount == 0:
                raise InvalidStateError(
                    f"Swap request {swap_id} is {row['status']}, expected {expected.value}"
                )
        return _row_to_swap(row)

    def _params(self, request: SwapRequest) -> tuple[Any, ...]:
        return (
            request.swap_id,
            request.week_id,
            request.requesting_player_id,
            request.target_player_id,
            request.status.value,
            request.created_at.isoformat(),
            request.updated_at.isoformat() if request.updated_at else None,
        )
