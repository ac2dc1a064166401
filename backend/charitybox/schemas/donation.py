from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from charitybox.core.clock import to_utc


class DonationCreate(BaseModel):
    # firmware on older boxes still posts "nominal"
    amount: Any = Field(default=None, validation_alias=AliasChoices("amount", "nominal"))
    device_id: Any = Field(default=None, validation_alias=AliasChoices("deviceId", "device_id"))


class DonationRead(BaseModel):
    id: UUID
    amount: int
    device_id: str
    recorded_at: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("recorded_at", "created_at", "updated_at")
    @classmethod
    def _as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_utc(value) if value is not None else None

    class Config:
        from_attributes = True
        populate_by_name = True
        alias_generator = to_camel


def serialize_donation(entry) -> dict:
    return DonationRead.model_validate(entry).model_dump(mode="json", by_alias=True)
