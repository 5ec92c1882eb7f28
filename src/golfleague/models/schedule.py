"""Tee-time slot assignments keyed by week and player."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


DEFAULT_TEE_TIME = "5:30 PM"
DEFAULT_COURSE = "TBD"


class ScheduleEntry(BaseModel):
    week_id: str = Field(..., min_length=1)
    player_id: str = Field(..., min_length=1)
    time: str = DEFAULT_TEE_TIME
    course: str = DEFAULT_COURSE

    model_config = ConfigDict(frozen=True)

    @property
    def key(self) -> tuple[str, str]:
        return (self.week_id, self.player_id)
