"""
Settlement service: turns balances into transfers that zero every balance.
"""
import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import List, Optional, Sequence

from tripsplit.core.exceptions import NotFoundError
from tripsplit.core.money import EPSILON, round_half_up
from tripsplit.repositories.trip_repository import TripRepository
from tripsplit.schemas.expense import ExpenseSnapshot
from tripsplit.schemas.member import MemberSnapshot
from tripsplit.schemas.settlement import (
    CalculationResponse, DisplaySettlement, MemberStats, Settlement
)
from tripsplit.services.balance_service import (
    Balances, check_balance_consistency, compute_balances, compute_member_stats
)

logger = logging.getLogger(__name__)


class _Party:
    """Creditor or debtor with the amount still to be settled."""
    def __init__(self, member_id: int, remaining: Decimal):
        self.member_id = member_id
        self.remaining = remaining


class CalculationResult:
    """Balances, member statistics and display-ready settlements for a trip."""
    def __init__(
        self,
        balances: Balances,
        member_stats: List[MemberStats],
        settlements: List[DisplaySettlement],
    ):
        self.balances = balances
        self.member_stats = member_stats
        self.settlements = settlements

    def to_response(self) -> CalculationResponse:
        return CalculationResponse(member_stats=self.member_stats, settlements=self.settlements)


def match_settlements(balances: Mapping, member_order: Sequence[int]) -> List[Settlement]:
    """
    Pair debtors with creditors using a greedy two-pointer sweep.

    Both lists are built in ``member_order`` and never re-sorted, which makes
    the output deterministic. This is a heuristic: it produces at most
    ``creditors + debtors - 1`` transfers, not necessarily the minimum.
    """
    creditors: List[_Party] = []
    debtors: List[_Party] = []
    seen = set()

    for member_id in member_order:
        if member_id in seen or member_id not in balances:
            continue
        seen.add(member_id)
        balance = balances[member_id]
        if balance > EPSILON:
            creditors.append(_Party(member_id, balance))
        elif balance < -EPSILON:
            debtors.append(_Party(member_id, -balance))

    settlements: List[Settlement] = []
    creditor_idx = 0
    debtor_idx = 0

    while creditor_idx < len(creditors) and debtor_idx < len(debtors):
        creditor = creditors[creditor_idx]
        debtor = debtors[debtor_idx]

        settle_amount = min(creditor.remaining, debtor.remaining)
        settlements.append(Settlement(
            from_id=debtor.member_id,
            to_id=creditor.member_id,
            amount=round_half_up(settle_amount),
        ))

        creditor.remaining -= settle_amount
        debtor.remaining -= settle_amount

        if creditor.remaining < EPSILON:
            creditor_idx += 1
        if debtor.remaining < EPSILON:
            debtor_idx += 1

    logger.debug(
        "Matched %d creditors and %d debtors into %d settlements",
        len(creditors), len(debtors), len(settlements),
    )
    return settlements


def get_member(members: Sequence[MemberSnapshot], member_id: int) -> Optional[MemberSnapshot]:
    """Get member by ID."""
    for member in members:
        if member.id == member_id:
            return member
    return None


def get_member_name(members: Sequence[MemberSnapshot], member_id: int) -> str:
    """Get member name by ID, or a ``User <id>`` label if the member is unknown."""
    member = get_member(members, member_id)
    return member.name if member else f"User {member_id}"


def format_settlements(
    settlements: Sequence[Settlement],
    members: Sequence[MemberSnapshot],
) -> List[DisplaySettlement]:
    """Attach member names and payment handles to each settlement."""
    formatted = []
    for s in settlements:
        from_member = get_member(members, s.from_id)
        to_member = get_member(members, s.to_id)
        if from_member is None or to_member is None:
            logger.warning(
                "Settlement %s -> %s references a member missing from the roster",
                s.from_id, s.to_id,
            )

        formatted.append(DisplaySettlement(
            from_name=get_member_name(members, s.from_id),
            to_name=get_member_name(members, s.to_id),
            from_id=s.from_id,
            to_id=s.to_id,
            amount=s.amount,
            to_payment_handle=to_member.payment_handle if to_member else None,
            from_payment_handle=from_member.payment_handle if from_member else None,
        ))
    return formatted


def calculate_settlement(
    expenses: Sequence[ExpenseSnapshot],
    members: Sequence[MemberSnapshot],
) -> CalculationResult:
    """Run the full pipeline over in-memory snapshots."""
    balances = compute_balances(expenses, members)
    check_balance_consistency(balances)

    settlements = match_settlements(balances, [m.id for m in members])
    display = format_settlements(settlements, members)
    stats = compute_member_stats(expenses, members, balances)

    return CalculationResult(balances=balances, member_stats=stats, settlements=display)


def calculate_trip(repository: TripRepository, trip_id: int) -> CalculationResult:
    """
    Calculate balances and settlements for a stored trip.

    Raises NotFoundError if the trip does not exist.
    """
    if not repository.trip_exists(trip_id):
        raise NotFoundError(f"Trip {trip_id} not found")

    members = repository.load_members(trip_id)
    expenses = repository.load_expenses_with_participants(trip_id)
    logger.info(
        "Calculating settlement for trip %s (%d members, %d expenses)",
        trip_id, len(members), len(expenses),
    )
    return calculate_settlement(expenses, members)
