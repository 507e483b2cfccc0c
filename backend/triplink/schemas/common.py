"""
TripLink Backend — Shared Schema Building Blocks
==================================================

What:  Base model and reusable field types for every request/response schema.
How:   - CamelModel: camelCase aliases on the wire, snake_case in Python,
         and from_attributes so ORM rows serialize directly.
       - FlexibleDatetime: accepts ISO-8601 datetimes or plain YYYY-MM-DD
         dates; naive values are taken as UTC.
       - Money: Decimal ≥ 0 with at most two decimal places; strings such as
         "49.99" are coerced.
"""

import re
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _parse_date_only(value: Any) -> Any:
    if isinstance(value, str) and _DATE_ONLY.match(value.strip()):
        return datetime.combine(date.fromisoformat(value.strip()), time.min, tzinfo=timezone.utc)
    return value


def _ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def blank_to_none(value: Any) -> Any:
    """Form clients send "" for untouched optional fields."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


FlexibleDatetime = Annotated[
    datetime,
    BeforeValidator(_parse_date_only),
    AfterValidator(_ensure_utc),
]

Money = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]


def check_date_range(start: Optional[datetime], end: Optional[datetime]) -> None:
    """Raises ValueError when both dates are present and start is after end."""
    if start is not None and end is not None and _ensure_utc(start) > _ensure_utc(end):
        raise ValueError("startDate must be on or before endDate")


# ══════════════════════════════════════════════════════════════════════════
# Error & Health Response Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "conflict",
            "message": "Booking 12 cannot be confirmed while it is cancelled",
            "details": {"booking_id": 12, "current_status": "cancelled"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional context (non-production only)")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="ok or degraded")
    environment: str = Field(description="Deployment environment name")
    timestamp: datetime = Field(description="Server time (UTC)")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
