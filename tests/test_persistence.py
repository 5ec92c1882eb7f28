from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from golfleague.errors import ConflictError, InvalidStateError, NotFoundError
from golfleague.models import PlayerRecord, ScheduleEntry, SwapRequest, SwapStatus
from golfleague.persistence import LeagueStore, PlayerDirectory, ScheduleStore, SwapRequestLedger


WEEK = "2024-05-12"
CREATED = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture()
def store(tmp_path: Path) -> LeagueStore:
    league = LeagueStore(tmp_path / "league.sqlite")
    for player_id, name in (("a@x.com", "Alice"), ("b@x.com", "Bob"), ("c@x.com", "Cara")):
        league.players.put(PlayerRecord(player_id=player_id, name=name, email=player_id))
    return league


def _pending(requester: str = "b@x.com", target: str = "a@x.com") -> SwapRequest:
    return SwapRequest.pending(WEEK, requester, target, created_at=CREATED)


def test_sqlite_stores_satisfy_protocols(store: LeagueStore):
    assert isinstance(store.players, PlayerDirectory)
    assert isinstance(store.schedule, ScheduleStore)
    assert isinstance(store.swaps, SwapRequestLedger)


def test_player_upsert_and_listing(store: LeagueStore):
    store.players.put(PlayerRecord(player_id="a@x.com", name="Alice A", email="a@x.com", share=25))

    player = store.players.get("a@x.com")
    assert player is not None
    assert player.name == "Alice A"
    assert player.share == 25
    assert [p.name for p in store.players.list_all()] == ["Alice A", "Bob", "Cara"]
    assert store.players.get("nobody") is None


def test_player_delete_refuses_dangling_references(store: LeagueStore):
    store.schedule.put(ScheduleEntry(week_id=WEEK, player_id="a@x.com"))
    with pytest.raises(ConflictError):
        store.players.delete("a@x.com")

    store.swaps.create_pending(_pending(requester="b@x.com", target="c@x.com"))
    with pytest.raises(ConflictError):
        store.players.delete("c@x.com")

    with pytest.raises(NotFoundError):
        store.players.delete("nobody")

    store.players.put(PlayerRecord(player_id="d@x.com", name="Dan", email="d@x.com"))
    store.players.delete("d@x.com")
    assert store.players.get("d@x.com") is None


def test_schedule_put_is_an_upsert_per_week_and_player(store: LeagueStore):
    store.schedule.put(ScheduleEntry(week_id=WEEK, player_id="a@x.com", time="5:30 PM", course="TBD"))
    store.schedule.put(ScheduleEntry(week_id=WEEK, player_id="a@x.com", time="6:00 PM", course="North"))
    store.schedule.put(ScheduleEntry(week_id="2024-05-19", player_id="a@x.com"))

    week = store.schedule.query_by_week(WEEK)
    assert week == [ScheduleEntry(week_id=WEEK, player_id="a@x.com", time="6:00 PM", course="North")]
    assert len(store.schedule.list_all()) == 2


def test_reassign_rekeys_row_and_reports_displaced_entry(store: LeagueStore):
    store.schedule.put(ScheduleEntry(week_id=WEEK, player_id="b@x.com", time="5:30 PM", course="South"))
    store.schedule.put(ScheduleEntry(week_id=WEEK, player_id="a@x.com", time="6:40 PM", course="North"))

    result = store.schedule.reassign(WEEK, "b@x.com", "a@x.com")

    assert result.entries == (ScheduleEntry(week_id=WEEK, player_id="a@x.com", time="5:30 PM", course="South"),)
    assert result.displaced == ScheduleEntry(week_id=WEEK, player_id="a@x.com", time="6:40 PM", course="North")
    assert store.schedule.get(WEEK, "b@x.com") is None
    assert store.schedule.query_by_week(WEEK) == list(result.entries)


def test_reassign_missing_row_changes_nothing(store: LeagueStore):
    store.schedule.put(ScheduleEntry(week_id=WEEK, player_id="a@x.com"))
    with pytest.raises(NotFoundError):
        store.schedule.reassign(WEEK, "b@x.com", "a@x.com")
    assert store.schedule.get(WEEK, "a@x.com") is not None


def test_exchange_trades_time_and_course(store: LeagueStore):
    store.schedule.put(ScheduleEntry(week_id=WEEK, player_id="b@x.com", time="5:30 PM", course="South"))
    store.schedule.put(ScheduleEntry(week_id=WEEK, player_id="a@x.com", time="6:40 PM", course="North"))

    store.schedule.exchange(WEEK, "b@x.com", "a@x.com")

    assert store.schedule.get(WEEK, "b@x.com").time == "6:40 PM"
    assert store.schedule.get(WEEK, "a@x.com").course == "South"


def test_exchange_without_target_row_repoints(store: LeagueStore):
    store.schedule.put(ScheduleEntry(week_id=WEEK, player_id="b@x.com", time="5:30 PM", course="South"))

    store.schedule.exchange(WEEK, "b@x.com", "a@x.com")

    assert store.schedule.get(WEEK, "b@x.com") is None
    assert store.schedule.get(WEEK, "a@x.com").course == "South"


def test_create_pending_conflicts_until_rejected(store: LeagueStore):
    store.swaps.create_pending(_pending())
    with pytest.raises(ConflictError):
        store.swaps.create_pending(_pending())

    store.swaps.transition("2024-05-12-b@x.com-a@x.com", SwapStatus.PENDING, SwapStatus.REJECTED, CREATED)
    later = CREATED + timedelta(days=1)
    store.swaps.create_pending(SwapRequest.pending(WEEK, "b@x.com", "a@x.com", created_at=later))

    stored = store.swaps.get("2024-05-12-b@x.com-a@x.com")
    assert stored.status is SwapStatus.PENDING
    assert stored.created_at == later
    assert stored.updated_at is None


def test_create_pending_refuses_to_replace_approved(store: LeagueStore):
    store.swaps.create_pending(_pending())
    store.swaps.transition("2024-05-12-b@x.com-a@x.com", SwapStatus.PENDING, SwapStatus.APPROVED, CREATED)

    with pytest.raises(ConflictError, match="APPROVED"):
        store.swaps.create_pending(_pending())
    assert store.swaps.get("2024-05-12-b@x.com-a@x.com").status is SwapStatus.APPROVED


def test_create_pending_rejects_colliding_id_from_other_players(store: LeagueStore):
    for player_id in ("a", "b-c", "a-b", "c"):
        store.players.put(PlayerRecord(player_id=player_id, name=player_id, email=f"{player_id}@x.com"))
    first = SwapRequest.pending(WEEK, "a", "b-c", created_at=CREATED)
    second = SwapRequest.pending(WEEK, "a-b", "c", created_at=CREATED + timedelta(days=1))
    assert first.swap_id == second.swap_id

    store.swaps.create_pending(first)
    store.swaps.transition(first.swap_id, SwapStatus.PENDING, SwapStatus.REJECTED, CREATED)

    with pytest.raises(ConflictError, match="already used"):
        store.swaps.create_pending(second)

    stored = store.swaps.get(first.swap_id)
    assert (stored.requesting_player_id, stored.target_player_id) == ("a", "b-c")
    assert stored.status is SwapStatus.REJECTED
    assert store.swaps.query_pending() == []


def test_transition_is_compare_and_set(store: LeagueStore):
    store.swaps.create_pending(_pending())
    decided_at = CREATED + timedelta(hours=2)

    approved = store.swaps.transition(
        "2024-05-12-b@x.com-a@x.com", SwapStatus.PENDING, SwapStatus.APPROVED, decided_at
    )
    assert approved.status is SwapStatus.APPROVED
    assert approved.updated_at == decided_at

    with pytest.raises(InvalidStateError):
        store.swaps.transition("2024-05-12-b@x.com-a@x.com", SwapStatus.PENDING, SwapStatus.REJECTED, decided_at)
    with pytest.raises(NotFoundError):
        store.swaps.transition("missing", SwapStatus.PENDING, SwapStatus.REJECTED, decided_at)
    assert store.swaps.get("2024-05-12-b@x.com-a@x.com").status is SwapStatus.APPROVED


def test_query_pending_and_put(store: LeagueStore):
    store.swaps.create_pending(_pending())
    store.swaps.create_pending(_pending(requester="c@x.com"))
    store.swaps.put(
        _pending(requester="c@x.com").model_copy(update={"status": SwapStatus.REJECTED, "updated_at": CREATED})
    )

    pending = store.swaps.query_pending()
    assert [request.swap_id for request in pending] == ["2024-05-12-b@x.com-a@x.com"]


def test_store_survives_reopen(tmp_path: Path):
    path = tmp_path / "nested" / "league.sqlite"
    LeagueStore(path).players.put(PlayerRecord(player_id="p1", name="Pat", email="p1@x.com"))
    assert LeagueStore(path).players.get("p1").name == "Pat"
