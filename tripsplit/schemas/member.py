"""
Pydantic schemas for Member entity.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional


class MemberSnapshot(BaseModel):
    """Immutable view of a trip member handed to the settlement engine."""
    id: int
    name: str
    payment_handle: Optional[str] = None  # e.g. a UPI id

    class Config:
        frozen = True
        from_attributes = True


class MemberCreate(BaseModel):
    """Schema for adding a member to a trip."""
    name: str = Field(min_length=1, max_length=100)
    payment_handle: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

    @field_validator("payment_handle")
    @classmethod
    def blank_handle_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class MemberUpdate(BaseModel):
    """Schema for member update. Only the payment handle is mutable."""
    payment_handle: Optional[str] = None

    @field_validator("payment_handle")
    @classmethod
    def blank_handle_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class MemberResponse(BaseModel):
    """Schema for member response."""
    id: int
    trip_id: int
    name: str
    payment_handle: Optional[str] = None

    class Config:
        from_attributes = True
