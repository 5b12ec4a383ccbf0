"""
Pydantic schemas for Trip entity.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List
from datetime import datetime

from tripsplit.schemas.member import MemberResponse


class TripBase(BaseModel):
    """Base trip schema."""
    name: str = Field(min_length=1, max_length=200)


class TripCreate(TripBase):
    """Schema for trip creation."""

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class TripResponse(TripBase):
    """Schema for trip response."""
    id: int
    is_settled: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TripDetailResponse(TripResponse):
    """Schema for detailed trip response with members."""
    members: List[MemberResponse] = []
