"""
Error taxonomy shared by the settlement engine and the service layer.
"""
from typing import Optional


class TripSplitError(Exception):
    """Base exception for all TripSplit errors."""

    pass


class ValidationError(TripSplitError):
    """Raised when input violates a precondition (unknown member, bad amount, ...)."""

    def __init__(self, message: str, expense_id: Optional[int] = None):
        self.expense_id = expense_id
        super().__init__(message)


class NotFoundError(TripSplitError):
    """Raised when a trip, member or expense does not exist."""

    pass


class TripSettledError(TripSplitError):
    """Raised when an expense mutation is attempted on a settled trip."""

    def __init__(self, trip_id: int, message: Optional[str] = None):
        self.trip_id = trip_id
        super().__init__(
            message or f"Trip {trip_id} is settled; expenses can no longer be changed"
        )


class ConsistencyWarning(UserWarning):
    """Issued when balances drift from zero by more than the rounding epsilon."""

    pass
