"""
Settlement calculation routes.
"""
from fastapi import APIRouter, Depends
from tripsplit.api.dependencies import get_trip_repository
from tripsplit.repositories.trip_repository import TripRepository
from tripsplit.schemas.settlement import CalculationResponse
from tripsplit.services.settlement_service import calculate_trip

router = APIRouter(prefix="/trips", tags=["settlement"])


@router.get("/{trip_id}/calculate", response_model=CalculationResponse)
async def calculate(
    trip_id: int,
    repository: TripRepository = Depends(get_trip_repository)
):
    """Compute member statistics and the transfers that settle the trip."""
    result = calculate_trip(repository, trip_id)
    return result.to_response()
