"""
Balance service: net balances and per-member statistics for a trip.

Positive balance = the member should receive money,
negative balance = the member owes money.
"""
import logging
import warnings
from collections.abc import Mapping
from decimal import Decimal
from typing import Dict, Iterable, Iterator, List, Sequence, Tuple

from tripsplit.core.exceptions import ConsistencyWarning, ValidationError
from tripsplit.core.money import EPSILON, ZERO, drift_tolerance, round_half_up
from tripsplit.schemas.expense import ExpenseSnapshot
from tripsplit.schemas.member import MemberSnapshot
from tripsplit.schemas.settlement import MemberStats

logger = logging.getLogger(__name__)


class Balances(Mapping):
    """
    Member id -> balance, iterated in trip member order.

    Settlement matching breaks ties by this order, so it is kept explicitly
    instead of relying on key sorting.
    """

    def __init__(self, items: Iterable[Tuple[int, Decimal]]):
        self._order: List[int] = []
        self._values: Dict[int, Decimal] = {}
        for member_id, amount in items:
            if member_id not in self._values:
                self._order.append(member_id)
            self._values[member_id] = amount

    def __getitem__(self, member_id: int) -> Decimal:
        return self._values[member_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def __repr__(self) -> str:
        pairs = ", ".join(f"{k}: {self._values[k]}" for k in self._order)
        return f"Balances({{{pairs}}})"

    @property
    def member_order(self) -> Tuple[int, ...]:
        return tuple(self._order)

    def total(self) -> Decimal:
        return sum(self._values.values(), ZERO)


def validate_expense(expense: ExpenseSnapshot, member_ids: Iterable[int]) -> None:
    """Raise ValidationError if the expense cannot be split among known members."""
    known = set(member_ids)
    if expense.amount <= 0:
        raise ValidationError(
            f"Expense {expense.id} has non-positive amount {expense.amount}",
            expense_id=expense.id,
        )
    if not expense.participant_ids:
        raise ValidationError(
            f"Expense {expense.id} has no participants",
            expense_id=expense.id,
        )
    if expense.payer_id not in known:
        raise ValidationError(
            f"Expense {expense.id} references unknown payer {expense.payer_id}",
            expense_id=expense.id,
        )
    unknown = [pid for pid in expense.participant_ids if pid not in known]
    if unknown:
        raise ValidationError(
            f"Expense {expense.id} references unknown participants {unknown}",
            expense_id=expense.id,
        )


def share_of(expense: ExpenseSnapshot) -> Decimal:
    """Equal share of one participant, unrounded."""
    return expense.amount / len(expense.participant_ids)


def compute_balances(
    expenses: Sequence[ExpenseSnapshot],
    members: Sequence[MemberSnapshot],
) -> Balances:
    """
    Compute every member's net balance.

    Members without expenses are included at 0. Amounts are accumulated
    exactly and each final balance is rounded half-up to cents.
    """
    member_ids = [m.id for m in members]
    raw: Dict[int, Decimal] = {member_id: ZERO for member_id in member_ids}

    for expense in expenses:
        validate_expense(expense, member_ids)
        share = share_of(expense)

        # Payer gets credited, each participant debited their share
        raw[expense.payer_id] += expense.amount
        for participant_id in expense.participant_ids:
            raw[participant_id] -= share

    balances = Balances((member_id, round_half_up(raw[member_id])) for member_id in member_ids)
    logger.debug(
        "Computed balances for %d members from %d expenses", len(balances), len(expenses)
    )
    return balances


def check_balance_consistency(balances: Mapping) -> Decimal:
    """
    Return the balance drift and warn if rounding cannot explain it.

    Every balance is rounded to cents on its own, so the sum may drift by up
    to half a cent per member. Anything beyond that bound points to bad
    upstream data and is reported with a ConsistencyWarning.
    """
    drift = sum(balances.values(), ZERO)
    tolerance = drift_tolerance(len(balances))
    if abs(drift) > tolerance:
        message = f"Balances sum to {drift}, expected 0 within {tolerance}"
        logger.warning(message)
        warnings.warn(message, ConsistencyWarning, stacklevel=2)
    return drift


def compute_member_stats(
    expenses: Sequence[ExpenseSnapshot],
    members: Sequence[MemberSnapshot],
    balances: Mapping,
) -> List[MemberStats]:
    """
    Total paid, total owed and balance per member, in member order.

    ``balance`` comes straight from ``balances`` so the displayed figure
    always matches the settlements computed from it.
    """
    paid: Dict[int, Decimal] = {m.id: ZERO for m in members}
    owed: Dict[int, Decimal] = {m.id: ZERO for m in members}

    for expense in expenses:
        if expense.payer_id in paid:
            paid[expense.payer_id] += expense.amount
        if not expense.participant_ids:
            continue
        share = share_of(expense)
        for participant_id in expense.participant_ids:
            if participant_id in owed:
                owed[participant_id] += share

    return [
        MemberStats(
            id=member.id,
            name=member.name,
            payment_handle=member.payment_handle,
            paid=round_half_up(paid[member.id]),
            owed=round_half_up(owed[member.id]),
            balance=balances.get(member.id, ZERO.quantize(EPSILON)),
        )
        for member in members
    ]
