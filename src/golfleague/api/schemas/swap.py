from __future__ import annotations

from datetime import datetime
from typing import Optional

from golfleague.models import SwapRequest, SwapStatus

from .base import ApiModel


class SwapCreateRequest(ApiModel):
    week_id: str = ""
    requesting_player_id: str = ""
    target_player_id: str = ""


class SwapDecisionRequest(ApiModel):
    status: str


class SwapResponse(ApiModel):
    id: str
    week_id: str
    requesting_player_id: str
    target_player_id: str
    status: SwapStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: SwapRequest) -> "SwapResponse":
        return cls(
            id=record.swap_id,
            week_id=record.week_id,
            requesting_player_id=record.requesting_player_id,
            target_player_id=record.target_player_id,
            status=record.status,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
