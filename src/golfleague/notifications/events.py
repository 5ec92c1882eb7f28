"""Outbound notification event types."""

from __future__ import annotations

from enum import Enum


class EventType(str, Enum):
    SWAP_REQUESTED = "SWAP_REQUESTED"
    SWAP_APPROVED = "SWAP_APPROVED"
    SWAP_REJECTED = "SWAP_REJECTED"
    SCHEDULE_UPDATED = "SCHEDULE_UPDATED"
