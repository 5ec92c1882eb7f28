"""Swap request records and their status lifecycle."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict


SWAP_ID_SEPARATOR = "-"


class SwapStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

    @property
    def is_terminal(self) -> bool:
        return self is not SwapStatus.PENDING


class SwapMode(str, Enum):
    """How an approved swap reassigns schedule rows.

    ``REPOINT`` re-keys the requester's row to the target. ``EXCHANGE`` trades
    time and course between both rows when the target is also scheduled.
    """

    REPOINT = "REPOINT"
    EXCHANGE = "EXCHANGE"


def make_swap_id(week_id: str, requesting_player_id: str, target_player_id: str) -> str:
    return SWAP_ID_SEPARATOR.join((week_id, requesting_player_id, target_player_id))


class SwapRequest(BaseModel):
    swap_id: str = Field(..., min_length=1)
    week_id: str = Field(..., min_length=1)
    requesting_player_id: str = Field(..., min_length=1)
    target_player_id: str = Field(..., min_length=1)
    status: SwapStatus = SwapStatus.PENDING
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _distinct_players(self) -> "SwapRequest":
        if self.requesting_player_id == self.target_player_id:
            raise ValueError("requesting and target player must differ")
        return self

    @property
    def derived_id(self) -> str:
        return make_swap_id(self.week_id, self.requesting_player_id, self.target_player_id)

    def same_players(self, other: "SwapRequest") -> bool:
        return (self.week_id, self.requesting_player_id, self.target_player_id) == (
            other.week_id,
            other.requesting_player_id,
            other.target_player_id,
        )

    @classmethod
    def pending(
        cls,
        week_id: str,
        requesting_player_id: str,
        target_player_id: str,
        *,
        created_at: datetime,
    ) -> "SwapRequest":
        return cls(
            swap_id=make_swap_id(week_id, requesting_player_id, target_player_id),
            week_id=week_id,
            requesting_player_id=requesting_player_id,
            target_player_id=target_player_id,
            status=SwapStatus.PENDING,
            created_at=created_at,
        )
