"""
Pydantic schemas for settlement calculation results.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional

from tripsplit.schemas.common import Money


class Settlement(BaseModel):
    """A single transfer: ``from_id`` pays ``to_id``."""
    from_id: int
    to_id: int
    amount: Money

    model_config = ConfigDict(frozen=True)


class DisplaySettlement(BaseModel):
    """Settlement enriched with member names and payment handles."""
    from_name: str
    to_name: str
    from_id: int
    to_id: int
    amount: Money
    to_payment_handle: Optional[str] = None  # where the payer should send money
    from_payment_handle: Optional[str] = None

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class MemberStats(BaseModel):
    """Per-member totals for presentation."""
    id: int
    name: str
    payment_handle: Optional[str] = None
    paid: Money
    owed: Money
    balance: Money

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class CalculationResponse(BaseModel):
    """Schema for the trip calculation endpoint."""
    member_stats: List[MemberStats]
    settlements: List[DisplaySettlement]

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
