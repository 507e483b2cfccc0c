"""
Booking schemas.

Clients send serviceId and the date range; status and totalPrice are always
computed server-side, so any values for them in the body are ignored.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field, ValidationInfo, field_validator

from triplink.models.enums import BookingStatus
from triplink.schemas.common import CamelModel, FlexibleDatetime, blank_to_none, check_date_range


class BookingCreate(CamelModel):
    service_id: int = Field(gt=0)
    start_date: FlexibleDatetime
    end_date: Optional[FlexibleDatetime] = None
    # Units billed when no end date is given
    quantity: int = Field(default=1, ge=1, le=365)
    notes: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("end_date", "notes", mode="before")
    @classmethod
    def empty_as_missing(cls, v):
        return blank_to_none(v)

    @field_validator("end_date")
    @classmethod
    def end_after_start(cls, v: Optional[datetime], info: ValidationInfo) -> Optional[datetime]:
        check_date_range(info.data.get("start_date"), v)
        return v


class BookingResponse(CamelModel):
    id: int
    user_id: int
    service_id: int
    start_date: datetime
    end_date: Optional[datetime] = None
    status: BookingStatus
    total_price: Decimal
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
