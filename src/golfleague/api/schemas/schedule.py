from __future__ import annotations

from pydantic import Field

from golfleague.models import DEFAULT_COURSE, DEFAULT_TEE_TIME, ScheduleEntry

from .base import ApiModel


class ScheduleEntryPayload(ApiModel):
    week_id: str = Field(..., min_length=1)
    player_id: str = Field(..., min_length=1)
    time: str = DEFAULT_TEE_TIME
    course: str = DEFAULT_COURSE

    def to_entry(self) -> ScheduleEntry:
        return ScheduleEntry(week_id=self.week_id, player_id=self.player_id, time=self.time, course=self.course)

    @classmethod
    def from_entry(cls, entry: ScheduleEntry) -> "ScheduleEntryPayload":
        return cls(week_id=entry.week_id, player_id=entry.player_id, time=entry.time, course=entry.course)
