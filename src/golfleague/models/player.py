"""Roster records shared by the directory, notification and API layers."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class PlayerRecord(BaseModel):
    """A league member; ``player_id`` is immutable and usually an email."""

    player_id: str = Field(..., min_length=1)
    name: str
    email: str
    phone_number: Optional[str] = None
    share: int = Field(default=50, ge=0, le=100)

    model_config = ConfigDict(frozen=True)
