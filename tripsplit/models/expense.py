"""
Expense model for tracking spending.
"""
from sqlalchemy import Column, String, Numeric, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from tripsplit.db.base import BaseModel


class Expense(BaseModel):
    """Expense model representing a single spending event."""
    __tablename__ = "expenses"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    payer_id = Column(Integer, ForeignKey("members.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String(50), nullable=False, default="other")

    # Relationships
    trip = relationship("Trip", back_populates="expenses")
    payer = relationship("Member", back_populates="expenses_paid")
    participants = relationship(
        "ExpenseParticipant",
        back_populates="expense",
        cascade="all, delete-orphan",
        order_by="ExpenseParticipant.id",
    )

    @property
    def participant_ids(self):
        return [p.member_id for p in self.participants]


class ExpenseParticipant(BaseModel):
    """Junction table for Expense and Member: who shares this expense."""
    __tablename__ = "expense_participants"
    __table_args__ = (UniqueConstraint("expense_id", "member_id", name="uq_expense_member"),)

    expense_id = Column(Integer, ForeignKey("expenses.id"), nullable=False, index=True)
    member_id = Column(Integer, ForeignKey("members.id"), nullable=False, index=True)

    # Relationships
    expense = relationship("Expense", back_populates="participants")
    member = relationship("Member", back_populates="expense_participants")
