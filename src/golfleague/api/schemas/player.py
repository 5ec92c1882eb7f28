from __future__ import annotations

from typing import Optional

from pydantic import Field

from golfleague.models import PlayerRecord

from .base import ApiModel


class PlayerCreateRequest(ApiModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone_number: Optional[str] = None
    share: int = Field(default=50, ge=0, le=100)

    def to_record(self) -> PlayerRecord:
        return PlayerRecord(
            player_id=self.id,
            name=self.name,
            email=self.email or self.id,
            phone_number=self.phone_number,
            share=self.share,
        )


class PlayerUpdateRequest(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = None
    phone_number: Optional[str] = None
    share: Optional[int] = Field(default=None, ge=0, le=100)

    def apply(self, record: PlayerRecord) -> PlayerRecord:
        updates = {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key == "phone_number"
        }
        return PlayerRecord.model_validate({**record.model_dump(), **updates})


class PlayerResponse(ApiModel):
    id: str
    name: str
    email: str
    phone_number: Optional[str] = None
    share: int

    @classmethod
    def from_record(cls, record: PlayerRecord) -> "PlayerResponse":
        return cls(
            id=record.player_id,
            name=record.name,
            email=record.email,
            phone_number=record.phone_number,
            share=record.share,
        )
