"""
Pydantic schemas for Expense entity.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Tuple
from datetime import datetime
from decimal import Decimal

from tripsplit.schemas.common import Money


def _unique_in_order(ids):
    seen = set()
    unique = []
    for member_id in ids:
        if member_id not in seen:
            seen.add(member_id)
            unique.append(member_id)
    return unique


class ExpenseSnapshot(BaseModel):
    """
    Immutable view of an expense with its participant ids expanded.

    No range checks happen here: the balance calculator validates every
    expense and reports the offending expense id.
    """
    id: int
    payer_id: int
    amount: Decimal
    participant_ids: Tuple[int, ...]
    category: str = "other"
    description: str = ""

    class Config:
        frozen = True

    @field_validator("participant_ids", mode="before")
    @classmethod
    def dedupe_participants(cls, v):
        return tuple(_unique_in_order(v))


class ExpenseCreate(BaseModel):
    """Schema for expense creation."""
    description: str = ""
    amount: Decimal = Field(gt=0, decimal_places=2)
    payer_id: int
    participant_ids: List[int] = Field(min_length=1)  # Member IDs who share this expense
    category: str = "other"

    @field_validator("participant_ids")
    @classmethod
    def dedupe_participants(cls, v: List[int]) -> List[int]:
        return _unique_in_order(v)

    @field_validator("category")
    @classmethod
    def normalize_category(cls, v: str) -> str:
        return v.strip().lower() or "other"


class ExpenseUpdate(BaseModel):
    """Schema for expense update."""
    description: Optional[str] = None
    amount: Optional[Decimal] = Field(default=None, gt=0, decimal_places=2)
    payer_id: Optional[int] = None
    participant_ids: Optional[List[int]] = Field(default=None, min_length=1)
    category: Optional[str] = None

    @field_validator("participant_ids")
    @classmethod
    def dedupe_participants(cls, v: Optional[List[int]]) -> Optional[List[int]]:
        return None if v is None else _unique_in_order(v)

    @field_validator("category")
    @classmethod
    def normalize_category(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip().lower() or "other"


class ExpenseResponse(BaseModel):
    """Schema for expense response."""
    id: int
    trip_id: int
    description: str
    amount: Money
    payer_id: int
    payer_name: str
    category: str
    participant_ids: List[int] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
