"""Canonical league models shared across store, service and API layers."""

from .player import PlayerRecord
from .schedule import DEFAULT_COURSE, DEFAULT_TEE_TIME, ScheduleEntry
from .swap import SwapMode, SwapRequest, SwapStatus, make_swap_id

__all__ = [
    "PlayerRecord",
    "ScheduleEntry",
    "DEFAULT_COURSE",
    "DEFAULT_TEE_TIME",
    "SwapMode",
    "SwapRequest",
    "SwapStatus",
    "make_swap_id",
]
