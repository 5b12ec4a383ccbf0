"""
Trip management routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from tripsplit.db.session import get_db
from tripsplit.schemas.trip import TripCreate, TripResponse, TripDetailResponse
from tripsplit.schemas.member import MemberResponse
from tripsplit.services import trip_service

router = APIRouter(prefix="/trips", tags=["trips"])


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_data: TripCreate,
    db: Session = Depends(get_db)
):
    """Create a new trip."""
    return trip_service.create_trip(trip_data.name, db)


@router.get("", response_model=List[TripResponse])
async def list_trips(db: Session = Depends(get_db)):
    """List all trips."""
    return trip_service.list_trips(db)


@router.get("/{trip_id}", response_model=TripDetailResponse)
async def get_trip(
    trip_id: int,
    db: Session = Depends(get_db)
):
    """Get trip details with members."""
    trip = trip_service.get_trip(trip_id, db)
    members = trip_service.list_members(trip_id, db)

    return TripDetailResponse(
        id=trip.id,
        name=trip.name,
        is_settled=trip.is_settled,
        created_at=trip.created_at,
        updated_at=trip.updated_at,
        members=[MemberResponse.model_validate(m) for m in members]
    )


@router.post("/{trip_id}/settle", response_model=TripResponse)
async def settle_trip(
    trip_id: int,
    db: Session = Depends(get_db)
):
    """Mark trip as settled. Expenses become read-only."""
    return trip_service.settle_trip(trip_id, db)


@router.post("/{trip_id}/reopen", response_model=TripResponse)
async def reopen_trip(
    trip_id: int,
    db: Session = Depends(get_db)
):
    """Reopen a settled trip."""
    return trip_service.reopen_trip(trip_id, db)
