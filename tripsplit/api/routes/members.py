"""
Trip member routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from tripsplit.db.session import get_db
from tripsplit.schemas.member import MemberCreate, MemberResponse, MemberUpdate
from tripsplit.services import trip_service

router = APIRouter(prefix="/trips", tags=["members"])


@router.get("/{trip_id}/members", response_model=List[MemberResponse])
async def list_members(
    trip_id: int,
    db: Session = Depends(get_db)
):
    """List trip members in the order they joined."""
    return trip_service.list_members(trip_id, db)


@router.post("/{trip_id}/members", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def add_member(
    trip_id: int,
    member_data: MemberCreate,
    db: Session = Depends(get_db)
):
    """Add a member to the trip."""
    return trip_service.add_member(
        trip_id=trip_id,
        name=member_data.name,
        payment_handle=member_data.payment_handle,
        db=db
    )


@router.patch("/{trip_id}/members/{member_id}", response_model=MemberResponse)
async def update_member(
    trip_id: int,
    member_id: int,
    member_data: MemberUpdate,
    db: Session = Depends(get_db)
):
    """Update a member's payment handle."""
    return trip_service.update_member_payment_handle(
        trip_id, member_id, member_data.payment_handle, db
    )


@router.delete("/{trip_id}/members/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_member(
    trip_id: int,
    member_id: int,
    db: Session = Depends(get_db)
):
    """Remove a member who is not referenced by any expense."""
    trip_service.delete_member(trip_id, member_id, db)
