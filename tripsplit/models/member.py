"""
Member model for trip participants.
"""
from sqlalchemy import Column, String, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from tripsplit.db.base import BaseModel


class Member(BaseModel):
    """A person taking part in a trip. Names are unique within a trip."""
    __tablename__ = "members"
    __table_args__ = (UniqueConstraint("trip_id", "name", name="uq_member_trip_name"),)

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    payment_handle = Column(String(100), nullable=True)  # e.g. UPI id

    # Relationships
    trip = relationship("Trip", back_populates="members")
    expenses_paid = relationship("Expense", back_populates="payer")
    expense_participants = relationship("ExpenseParticipant", back_populates="member")
