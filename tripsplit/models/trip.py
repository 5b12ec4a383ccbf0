"""
Trip model for shared expense tracking.
"""
from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship
from tripsplit.db.base import BaseModel


class Trip(BaseModel):
    """Trip model representing a group expense-sharing session."""
    __tablename__ = "trips"

    name = Column(String(200), nullable=False)
    is_settled = Column(Boolean, default=False, nullable=False)

    # Relationships
    members = relationship(
        "Member", back_populates="trip", cascade="all, delete-orphan", order_by="Member.id"
    )
    expenses = relationship(
        "Expense", back_populates="trip", cascade="all, delete-orphan", order_by="Expense.id"
    )
