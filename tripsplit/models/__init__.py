"""Models package - Import all models for SQLAlchemy registration."""
from tripsplit.models.trip import Trip
from tripsplit.models.member import Member
from tripsplit.models.expense import Expense, ExpenseParticipant

__all__ = [
    "Trip",
    "Member",
    "Expense",
    "ExpenseParticipant",
]
