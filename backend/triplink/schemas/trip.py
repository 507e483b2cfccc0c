"""
Trip and Post schemas.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, ValidationInfo, field_validator

from triplink.schemas.common import CamelModel, FlexibleDatetime, blank_to_none, check_date_range


class TripCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    destination: str = Field(min_length=1, max_length=200)
    start_date: Optional[FlexibleDatetime] = None
    end_date: Optional[FlexibleDatetime] = None
    is_private: bool = False
    members: List[int] = Field(default_factory=list)
    itinerary: List[Dict[str, Any]] = Field(default_factory=list)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def empty_as_missing(cls, v):
        return blank_to_none(v)

    @field_validator("members")
    @classmethod
    def unique_members(cls, v: List[int]) -> List[int]:
        return list(dict.fromkeys(v))

    @field_validator("end_date")
    @classmethod
    def end_after_start(cls, v: Optional[datetime], info: ValidationInfo) -> Optional[datetime]:
        check_date_range(info.data.get("start_date"), v)
        return v


class TripResponse(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    user_id: int
    destination: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_private: bool
    members: List[int] = Field(default_factory=list)
    itinerary: List[Dict[str, Any]] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class PostCreate(CamelModel):
    content: str = Field(min_length=1, max_length=10000)
    images: List[str] = Field(default_factory=list)

    @field_validator("content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class PostResponse(CamelModel):
    id: int
    user_id: int
    trip_id: int
    content: str
    images: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
