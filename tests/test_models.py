from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from golfleague.models import PlayerRecord, ScheduleEntry, SwapRequest, SwapStatus, make_swap_id


def test_swap_id_is_derived_from_week_and_players():
    assert make_swap_id("2024-05-12", "B", "A") == "2024-05-12-B-A"


def test_pending_swap_request_defaults():
    created_at = datetime(2024, 5, 1, tzinfo=timezone.utc)
    request = SwapRequest.pending("2024-05-12", "B", "A", created_at=created_at)

    assert request.swap_id == "2024-05-12-B-A"
    assert request.status is SwapStatus.PENDING
    assert not request.status.is_terminal
    assert request.updated_at is None


def test_swap_request_requires_distinct_players():
    with pytest.raises(ValidationError):
        SwapRequest.pending("2024-05-12", "A", "A", created_at=datetime.now(timezone.utc))


def test_records_are_frozen():
    player = PlayerRecord(player_id="p1", name="Pat", email="p1@example.com")
    entry = ScheduleEntry(week_id="2024-05-12", player_id="p1")

    assert player.share == 50
    assert (entry.time, entry.course) == ("5:30 PM", "TBD")
    with pytest.raises((TypeError, ValidationError)):
        player.name = "Other"  # type: ignore[misc]
    with pytest.raises((TypeError, ValidationError)):
        entry.player_id = "p2"  # type: ignore[misc]


def test_player_share_is_a_percentage():
    with pytest.raises(ValidationError):
        PlayerRecord(player_id="p1", name="Pat", email="p1@example.com", share=150)
