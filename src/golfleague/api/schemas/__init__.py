"""Pydantic models for API I/O."""

from .player import PlayerCreateRequest, PlayerResponse, PlayerUpdateRequest
from .schedule import ScheduleEntryPayload
from .swap import SwapCreateRequest, SwapDecisionRequest, SwapResponse

__all__ = [
    "PlayerCreateRequest",
    "PlayerResponse",
    "PlayerUpdateRequest",
    "ScheduleEntryPayload",
    "SwapCreateRequest",
    "SwapDecisionRequest",
    "SwapResponse",
]
