import json
from datetime import datetime, timezone

import pytest

from golfleague.cli import main
from golfleague.models import PlayerRecord, ScheduleEntry, SwapRequest
from golfleague.persistence import LeagueStore
from golfleague.seed_loader import LeagueSeed


SEED = {
    "players": [
        {"id": "alice@example.com", "name": "Alice Able", "phoneNumber": "402-555-0100", "percentage": 25},
        {"id": "bob@example.com", "name": "Bob Baker"},
    ],
    "schedule": [
        {"weekId": "2024-05-12", "playerId": "bob@example.com", "time": "6:10 PM", "course": "North"},
        {"week_id": "2024-05-19", "player_id": "alice@example.com"},
    ],
}


@pytest.fixture()
def seeded(tmp_path, monkeypatch):
    for name in ("SMTP_HOST", "EMAIL_FROM", "TWILIO_ACCOUNT_SID", "DB_PATH"):
        monkeypatch.delenv(f"GOLFLEAGUE_{name}", raising=False)
    seed_file = tmp_path / "seed.json"
    seed_file.write_text(json.dumps(SEED), encoding="utf-8")
    db_path = tmp_path / "league.sqlite"
    assert main(["--db", str(db_path), "seed", str(seed_file)]) == 0
    return db_path


def test_seed_loader_accepts_both_key_styles(tmp_path):
    seed_file = tmp_path / "seed.json"
    seed_file.write_text(json.dumps(SEED), encoding="utf-8")

    seed = LeagueSeed.load(seed_file)

    alice, bob = seed.players
    assert alice.share == 25
    assert alice.email == "alice@example.com"
    assert alice.phone_number == "402-555-0100"
    assert bob.share == 50
    assert seed.schedule[1] == ScheduleEntry(week_id="2024-05-19", player_id="alice@example.com")


def test_seed_save_then_load_keeps_records(tmp_path):
    seed = LeagueSeed(
        players=[PlayerRecord(player_id="p1", name="Pat", email="pat@example.com", share=75)],
        schedule=[ScheduleEntry(week_id="2024-06-02", player_id="p1", time="7:00 AM", course="South")],
    )
    path = tmp_path / "out.json"
    seed.save(path)

    assert LeagueSeed.load(path) == seed
    assert json.loads(path.read_text())["schedule"][0]["weekId"] == "2024-06-02"


def test_seed_command_populates_store(seeded, capsys):
    store = LeagueStore(seeded)
    assert [player.name for player in store.players.list_all()] == ["Alice Able", "Bob Baker"]
    assert store.schedule.get("2024-05-12", "bob@example.com").course == "North"


def test_approve_from_command_line(seeded, capsys):
    store = LeagueStore(seeded)

    store.swaps.create_pending(
        SwapRequest.pending(
            "2024-05-12",
            "bob@example.com",
            "alice@example.com",
            created_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
        )
    )
    swap_id = "2024-05-12-bob@example.com-alice@example.com"

    capsys.readouterr()
    assert main(["--db", str(seeded), "swaps"]) == 0
    listed = json.loads(capsys.readouterr().out)
    assert [item["id"] for item in listed] == [swap_id]

    assert main(["--db", str(seeded), "approve", swap_id]) == 0
    decided = json.loads(capsys.readouterr().out)
    assert decided["status"] == "APPROVED"

    entry = store.schedule.get("2024-05-12", "alice@example.com")
    assert (entry.time, entry.course) == ("6:10 PM", "North")
    assert store.schedule.get("2024-05-12", "bob@example.com") is None

    assert main(["--db", str(seeded), "reject", swap_id]) == 1
    assert "InvalidStateError" in capsys.readouterr().err


def test_unknown_swap_exits_nonzero(seeded, capsys):
    assert main(["--db", str(seeded), "approve", "missing"]) == 1
    assert "NotFoundError" in capsys.readouterr().err


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"players": [{"name": "No Id"}]}, "missing 'id'"),
        ({"players": [{"id": "p1", "name": "Pat", "share": 150}]}, "invalid row"),
        ({"schedule": [{"weekId": "2024-05-12"}]}, "missing 'player_id'"),
        (["not", "an", "object"], "must hold an object"),
    ],
)
def test_seed_with_bad_rows_reports_validation_error(tmp_path, capsys, payload, message):
    seed_file = tmp_path / "bad.json"
    seed_file.write_text(json.dumps(payload), encoding="utf-8")

    assert main(["--db", str(tmp_path / "league.sqlite"), "seed", str(seed_file)]) == 1

    err = capsys.readouterr().err
    assert err.startswith("ValidationError:")
    assert message in err
    assert LeagueStore(tmp_path / "league.sqlite").players.list_all() == []


def test_seed_with_missing_or_broken_file(tmp_path, capsys):
    db = str(tmp_path / "league.sqlite")
    assert main(["--db", db, "seed", str(tmp_path / "absent.json")]) == 1
    assert "NotFoundError" in capsys.readouterr().err

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert main(["--db", db, "seed", str(broken)]) == 1
    assert "not valid JSON" in capsys.readouterr().err
