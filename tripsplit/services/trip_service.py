"""
Trip service for trip and member business logic.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from tripsplit.core.exceptions import NotFoundError, ValidationError
from tripsplit.models.expense import Expense, ExpenseParticipant
from tripsplit.models.member import Member
from tripsplit.models.trip import Trip

logger = logging.getLogger(__name__)


def get_trip(trip_id: int, db: Session) -> Trip:
    """Get a trip or raise NotFoundError."""
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        raise NotFoundError(f"Trip {trip_id} not found")
    return trip


def list_trips(db: Session) -> List[Trip]:
    """List all trips, newest first."""
    return db.query(Trip).order_by(Trip.id.desc()).all()


def create_trip(name: str, db: Session) -> Trip:
    """Create a new, unsettled trip."""
    trip = Trip(name=name, is_settled=False)
    db.add(trip)
    db.commit()
    db.refresh(trip)
    logger.info("Created trip %s (%s)", trip.id, trip.name)
    return trip


def settle_trip(trip_id: int, db: Session) -> Trip:
    """Mark a trip as settled. Expenses are frozen afterwards."""
    trip = get_trip(trip_id, db)
    if not trip.is_settled:
        trip.is_settled = True
        db.commit()
        db.refresh(trip)
        logger.info("Trip %s marked as settled", trip_id)
    return trip


def reopen_trip(trip_id: int, db: Session) -> Trip:
    """Clear the settled flag so expenses can be edited again."""
    trip = get_trip(trip_id, db)
    if trip.is_settled:
        trip.is_settled = False
        db.commit()
        db.refresh(trip)
        logger.info("Trip %s reopened", trip_id)
    return trip


def get_member(trip_id: int, member_id: int, db: Session) -> Member:
    """Get a member of a trip or raise NotFoundError."""
    member = db.query(Member).filter(
        Member.id == member_id,
        Member.trip_id == trip_id
    ).first()
    if not member:
        raise NotFoundError(f"Member {member_id} not found in trip {trip_id}")
    return member


def list_members(trip_id: int, db: Session) -> List[Member]:
    """List members of a trip in the order they were added."""
    get_trip(trip_id, db)
    return db.query(Member).filter(Member.trip_id == trip_id).order_by(Member.id).all()


def add_member(
    trip_id: int,
    name: str,
    payment_handle: Optional[str] = None,
    db: Session = None
) -> Member:
    """Add a member to a trip. Names must be unique within the trip."""
    get_trip(trip_id, db)
    name = name.strip()

    existing = db.query(Member).filter(
        Member.trip_id == trip_id,
        Member.name == name
    ).first()
    if existing:
        raise ValidationError(f"Member '{name}' already exists in trip {trip_id}")

    member = Member(trip_id=trip_id, name=name, payment_handle=payment_handle)
    db.add(member)
    db.commit()
    db.refresh(member)
    logger.info("Added member %s (%s) to trip %s", member.id, member.name, trip_id)
    return member


def update_member_payment_handle(
    trip_id: int,
    member_id: int,
    payment_handle: Optional[str],
    db: Session
) -> Member:
    """Set or clear a member's payment handle."""
    member = get_member(trip_id, member_id, db)
    member.payment_handle = payment_handle
    db.commit()
    db.refresh(member)
    return member


def delete_member(trip_id: int, member_id: int, db: Session) -> None:
    """Delete a member that no expense refers to."""
    member = get_member(trip_id, member_id, db)

    paid_count = db.query(Expense).filter(Expense.payer_id == member_id).count()
    shared_count = db.query(ExpenseParticipant).filter(
        ExpenseParticipant.member_id == member_id
    ).count()
    if paid_count or shared_count:
        raise ValidationError(
            f"Member {member_id} is referenced by expenses and cannot be removed"
        )

    db.delete(member)
    db.commit()
    logger.info("Removed member %s from trip %s", member_id, trip_id)
