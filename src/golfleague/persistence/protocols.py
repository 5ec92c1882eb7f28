"""Store contracts consumed by the swap coordinator and the API.

Implementations must apply every method as a single atomic step: a reader
never observes half of a ``reassign`` or ``exchange``, and ``transition`` is a
compare-and-set on the stored status.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol, Sequence, runtime_checkable

from golfleague.models import PlayerRecord, ScheduleEntry, SwapRequest, SwapStatus

__all__ = [
    "Reassignment",
    "PlayerDirectory",
    "ScheduleStore",
    "SwapRequestLedger",
]


@dataclass(frozen=True)
class Reassignment:
    """Schedule rows as they read after a reassignment.

    ``displaced`` holds the target's own row when a repoint replaced it.
    """

    entries: tuple[ScheduleEntry, ...]
    displaced: Optional[ScheduleEntry] = None


@runtime_checkable
class PlayerDirectory(Protocol):
    def get(self, player_id: str) -> Optional[PlayerRecord]: ...

    def put(self, player: PlayerRecord) -> PlayerRecord: ...

    def list_all(self) -> Sequence[PlayerRecord]: ...

    def delete(self, player_id: str) -> None:
        """Remove a player; raises ``ConflictError`` while still referenced."""
        ...


@runtime_checkable
class ScheduleStore(Protocol):
    def get(self, week_id: str, player_id: str) -> Optional[ScheduleEntry]: ...

    def put(self, entry: ScheduleEntry) -> ScheduleEntry: ...

    def query_by_week(self, week_id: str) -> Sequence[ScheduleEntry]: ...

    def list_all(self) -> Sequence[ScheduleEntry]: ...

    def reassign(self, week_id: str, from_player_id: str, to_player_id: str) -> Reassignment:
        """Re-key the (week, from) row to (week, to), replacing any row there."""
        ...

    def exchange(self, week_id: str, player_a: str, player_b: str) -> Reassignment:
        """Trade time and course between two rows; repoints when ``player_b`` has none."""
        ...


@runtime_checkable
class SwapRequestLedger(Protocol):
    def get(self, swap_id: str) -> Optional[SwapRequest]: ...

    def put(self, request: SwapRequest) -> SwapRequest: ...

    def query_pending(self) -> Sequence[SwapRequest]: ...

    def create_pending(self, request: SwapRequest) -> SwapRequest:
        """Insert a PENDING record unless a PENDING or APPROVED one already holds the id."""
        ...

    def transition(
        self,
        swap_id: str,
        expected: SwapStatus,
        new_status: SwapStatus,
        updated_at: datetime,
    ) -> SwapRequest:
        """Set ``new_status`` only if the stored status is still ``expected``."""
        ...
