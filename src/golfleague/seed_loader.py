"""Load and save roster/schedule seed files."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from pydantic import ValidationError as PydanticValidationError

from golfleague.errors import NotFoundError, ValidationError
from golfleague.models import DEFAULT_COURSE, DEFAULT_TEE_TIME, PlayerRecord, ScheduleEntry
from golfleague.persistence import PlayerDirectory, ScheduleStore


@dataclass
class LeagueSeed:
    players: List[PlayerRecord] = field(default_factory=list)
    schedule: List[ScheduleEntry] = field(default_factory=list)

    @classmethod
    def load(cls, path: Path) -> "LeagueSeed":
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise NotFoundError(f"Seed file {path} not found") from exc
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Seed file {path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ValidationError(f"Seed file {path} must hold an object with 'players' and 'schedule'")

        try:
            players = [cls._player(item) for item in data.get("players", [])]
            schedule = [cls._entry(item) for item in data.get("schedule", [])]
        except KeyError as exc:
            raise ValidationError(f"Seed file {path} has a row missing {exc}") from exc
        except (TypeError, AttributeError) as exc:
            raise ValidationError(f"Seed file {path} has a malformed row: {exc}") from exc
        except PydanticValidationError as exc:
            raise ValidationError(f"Seed file {path} has an invalid row: {exc}") from exc
        return cls(players=players, schedule=schedule)

    @staticmethod
    def _player(item: dict) -> PlayerRecord:
        return PlayerRecord(
            player_id=item["id"],
            name=item["name"],
            email=item.get("email") or item["id"],
            phone_number=item.get("phoneNumber") or item.get("phone_number"),
            share=item.get("share", item.get("percentage", 50)),
        )

    @staticmethod
    def _entry(item: dict) -> ScheduleEntry:
        return ScheduleEntry(
            week_id=item.get("weekId") or item["week_id"],
            player_id=item.get("playerId") or item["player_id"],
            time=item.get("time") or DEFAULT_TEE_TIME,
            course=item.get("course") or DEFAULT_COURSE,
        )

    def save(self, path: Path) -> None:
        payload = {
            "players": [
                {
                    "id": player.player_id,
                    "name": player.name,
                    "email": player.email,
                    "phoneNumber": player.phone_number,
                    "share": player.share,
                }
                for player in self.players
            ],
            "schedule": [
                {"weekId": entry.week_id, "playerId": entry.player_id, "time": entry.time, "course": entry.course}
                for entry in self.schedule
            ],
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def apply(self, directory: PlayerDirectory, schedule: ScheduleStore) -> tuple[int, int]:
        """Upsert every player, then every schedule row; returns the counts written."""
        for player in self.players:
            directory.put(player)
        for entry in self.schedule:
            schedule.put(entry)
        return len(self.players), len(self.schedule)
