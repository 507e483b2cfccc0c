"""
Service (catalog listing) schemas.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, ValidationInfo, field_validator

from triplink.schemas.common import CamelModel, FlexibleDatetime, Money, check_date_range


class AvailabilityWindow(CamelModel):
    start_date: FlexibleDatetime
    end_date: FlexibleDatetime

    @field_validator("end_date")
    @classmethod
    def end_after_start(cls, v: datetime, info: ValidationInfo) -> datetime:
        check_date_range(info.data.get("start_date"), v)
        return v

    def covers(self, start: datetime, end: datetime) -> bool:
        return self.start_date <= start and end <= self.end_date


class ServiceCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    price: Money
    location: str = Field(min_length=1, max_length=200)
    category: str = Field(min_length=1, max_length=100)
    images: List[str] = Field(default_factory=list)
    availability: List[AvailabilityWindow] = Field(default_factory=list)

    @field_validator("title", "location", "category")
    @classmethod
    def not_blank(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped


class ServiceFilter(CamelModel):
    category: Optional[str] = None
    location: Optional[str] = None
    provider_id: Optional[int] = None
    min_price: Optional[Decimal] = Field(default=None, ge=0)
    max_price: Optional[Decimal] = Field(default=None, ge=0)


class ServiceResponse(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    price: Decimal
    location: str
    provider_id: int
    category: str
    images: List[str] = Field(default_factory=list)
    availability: List[AvailabilityWindow] = Field(default_factory=list)
    created_at: Optional[datetime] = None
