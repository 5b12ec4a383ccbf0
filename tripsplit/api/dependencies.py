"""
Shared FastAPI dependencies.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from tripsplit.db.session import get_db
from tripsplit.repositories.trip_repository import SqlAlchemyTripRepository, TripRepository


def get_trip_repository(db: Session = Depends(get_db)) -> TripRepository:
    """Repository feeding trip snapshots to the settlement engine."""
    return SqlAlchemyTripRepository(db)
