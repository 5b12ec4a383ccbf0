"""
Expense service for expense-related business logic.
"""
import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from tripsplit.core.exceptions import NotFoundError, TripSettledError, ValidationError
from tripsplit.models.expense import Expense, ExpenseParticipant
from tripsplit.models.member import Member
from tripsplit.models.trip import Trip
from tripsplit.services.trip_service import get_trip

logger = logging.getLogger(__name__)


def _ensure_open(trip: Trip) -> None:
    if trip.is_settled:
        raise TripSettledError(trip.id)


def _validate_expense_input(
    trip_id: int,
    amount: Decimal,
    payer_id: int,
    participant_ids: List[int],
    db: Session,
    expense_id: Optional[int] = None
) -> None:
    """Check amount, payer and participants against the trip roster."""
    label = f"Expense {expense_id}" if expense_id else "Expense"
    if amount is None or amount <= 0:
        raise ValidationError(f"{label}: amount must be positive", expense_id=expense_id)
    if not participant_ids:
        raise ValidationError(f"{label}: at least one participant is required", expense_id=expense_id)

    member_ids = {
        row.id for row in db.query(Member.id).filter(Member.trip_id == trip_id).all()
    }
    if payer_id not in member_ids:
        raise ValidationError(
            f"{label}: payer {payer_id} is not a member of trip {trip_id}",
            expense_id=expense_id
        )
    unknown = [pid for pid in participant_ids if pid not in member_ids]
    if unknown:
        raise ValidationError(
            f"{label}: participants {unknown} are not members of trip {trip_id}",
            expense_id=expense_id
        )


def get_expense(trip_id: int, expense_id: int, db: Session) -> Expense:
    """Get an expense of a trip or raise NotFoundError."""
    expense = db.query(Expense).filter(
        Expense.id == expense_id,
        Expense.trip_id == trip_id
    ).first()
    if not expense:
        raise NotFoundError(f"Expense {expense_id} not found in trip {trip_id}")
    return expense


def list_expenses(trip_id: int, db: Session) -> List[Expense]:
    """List expenses of a trip, oldest first, with payer and participants loaded."""
    get_trip(trip_id, db)
    return db.query(Expense).options(
        selectinload(Expense.payer),
        selectinload(Expense.participants)
    ).filter(
        Expense.trip_id == trip_id
    ).order_by(Expense.id).all()


def create_expense_with_participants(
    trip_id: int,
    payer_id: int,
    amount: Decimal,
    participant_ids: List[int],
    description: str = "",
    category: str = "other",
    db: Session = None
) -> Expense:
    """Create an expense shared equally by the given participants."""
    trip = get_trip(trip_id, db)
    _ensure_open(trip)
    _validate_expense_input(trip_id, amount, payer_id, participant_ids, db)

    expense = Expense(
        trip_id=trip_id,
        payer_id=payer_id,
        amount=amount,
        description=description or "",
        category=category or "other"
    )
    db.add(expense)
    db.flush()

    for member_id in participant_ids:
        db.add(ExpenseParticipant(expense_id=expense.id, member_id=member_id))

    db.commit()
    db.refresh(expense)
    logger.info(
        "Created expense %s in trip %s: %s paid %s for %d participants",
        expense.id, trip_id, payer_id, amount, len(participant_ids)
    )
    return expense


def update_expense(
    trip_id: int,
    expense_id: int,
    db: Session,
    amount: Optional[Decimal] = None,
    payer_id: Optional[int] = None,
    participant_ids: Optional[List[int]] = None,
    description: Optional[str] = None,
    category: Optional[str] = None
) -> Expense:
    """Update an expense; fields left as None keep their current value."""
    trip = get_trip(trip_id, db)
    _ensure_open(trip)
    expense = get_expense(trip_id, expense_id, db)

    new_amount = amount if amount is not None else Decimal(expense.amount)
    new_payer = payer_id if payer_id is not None else expense.payer_id
    new_participants = (
        participant_ids if participant_ids is not None else expense.participant_ids
    )
    _validate_expense_input(
        trip_id, new_amount, new_payer, new_participants, db, expense_id=expense_id
    )

    expense.amount = new_amount
    expense.payer_id = new_payer
    if description is not None:
        expense.description = description
    if category is not None:
        expense.category = category

    if participant_ids is not None:
        # Delete old rows first so the (expense_id, member_id) constraint holds
        expense.participants.clear()
        db.flush()
        expense.participants.extend(
            ExpenseParticipant(member_id=member_id) for member_id in participant_ids
        )

    db.commit()
    db.refresh(expense)
    logger.info("Updated expense %s in trip %s", expense_id, trip_id)
    return expense


def delete_expense(trip_id: int, expense_id: int, db: Session) -> None:
    """Delete an expense and its participants."""
    trip = get_trip(trip_id, db)
    _ensure_open(trip)
    expense = get_expense(trip_id, expense_id, db)

    db.delete(expense)
    db.commit()
    logger.info("Deleted expense %s from trip %s", expense_id, trip_id)
