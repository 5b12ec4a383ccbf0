"""
Read-side access to trip snapshots for the settlement engine.
"""
from decimal import Decimal
from typing import Dict, List, Protocol, Sequence

from sqlalchemy.orm import Session, selectinload

from tripsplit.models.expense import Expense
from tripsplit.models.member import Member
from tripsplit.models.trip import Trip
from tripsplit.schemas.expense import ExpenseSnapshot
from tripsplit.schemas.member import MemberSnapshot


class TripRepository(Protocol):
    """Source of immutable member and expense snapshots for a trip."""

    def trip_exists(self, trip_id: int) -> bool:
        ...

    def load_members(self, trip_id: int) -> List[MemberSnapshot]:
        """Members in insertion order."""
        ...

    def load_expenses_with_participants(self, trip_id: int) -> List[ExpenseSnapshot]:
        ...


class SqlAlchemyTripRepository:
    """TripRepository backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def trip_exists(self, trip_id: int) -> bool:
        return self.db.query(Trip.id).filter(Trip.id == trip_id).first() is not None

    def load_members(self, trip_id: int) -> List[MemberSnapshot]:
        members = self.db.query(Member).filter(
            Member.trip_id == trip_id
        ).order_by(Member.id).all()
        return [MemberSnapshot.model_validate(m) for m in members]

    def load_expenses_with_participants(self, trip_id: int) -> List[ExpenseSnapshot]:
        expenses = self.db.query(Expense).options(
            selectinload(Expense.participants)
        ).filter(
            Expense.trip_id == trip_id
        ).order_by(Expense.id).all()

        return [
            ExpenseSnapshot(
                id=e.id,
                payer_id=e.payer_id,
                amount=Decimal(e.amount),
                participant_ids=e.participant_ids,
                category=e.category,
                description=e.description or "",
            )
            for e in expenses
        ]


class InMemoryTripRepository:
    """TripRepository over plain lists, for scripts and tests."""

    def __init__(self):
        self._members: Dict[int, List[MemberSnapshot]] = {}
        self._expenses: Dict[int, List[ExpenseSnapshot]] = {}

    def add_trip(
        self,
        trip_id: int,
        members: Sequence[MemberSnapshot] = (),
        expenses: Sequence[ExpenseSnapshot] = (),
    ) -> None:
        self._members[trip_id] = list(members)
        self._expenses[trip_id] = list(expenses)

    def trip_exists(self, trip_id: int) -> bool:
        return trip_id in self._members

    def load_members(self, trip_id: int) -> List[MemberSnapshot]:
        return list(self._members.get(trip_id, []))

    def load_expenses_with_participants(self, trip_id: int) -> List[ExpenseSnapshot]:
        return list(self._expenses.get(trip_id, []))
