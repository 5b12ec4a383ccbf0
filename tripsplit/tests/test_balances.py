"""Tests for balance calculation and member statistics."""

import random
import warnings
from decimal import Decimal

import pytest

from conftest import make_expense, make_member
from tripsplit.core.exceptions import ConsistencyWarning, ValidationError
from tripsplit.core.money import drift_tolerance
from tripsplit.services.balance_service import (
    Balances,
    check_balance_consistency,
    compute_balances,
    compute_member_stats,
)


class TestComputeBalances:
    def test_three_member_example(self, members, example_a_expenses):
        balances = compute_balances(example_a_expenses, members)

        assert dict(balances) == {1: Decimal("60"), 2: Decimal("-15"), 3: Decimal("-45")}
        assert balances.total() == 0

    def test_two_member_even_split(self):
        members = [make_member(1, "A"), make_member(2, "B")]
        expenses = [make_expense(1, payer_id=1, amount=50, participant_ids=[1, 2])]

        balances = compute_balances(expenses, members)

        assert dict(balances) == {1: Decimal("25"), 2: Decimal("-25")}

    def test_self_paid_expenses_net_to_zero(self, members):
        expenses = [
            make_expense(1, payer_id=3, amount=40, participant_ids=[3]),
            make_expense(2, payer_id=3, amount="12.34", participant_ids=[3]),
        ]

        balances = compute_balances(expenses, members)

        assert balances[3] == 0
        assert all(value == 0 for value in balances.values())

    def test_members_without_expenses_appear_at_zero(self, members):
        expenses = [make_expense(1, payer_id=1, amount=20, participant_ids=[1, 2])]

        balances = compute_balances(expenses, members)

        assert list(balances) == [1, 2, 3]
        assert balances[3] == Decimal("0.00")

    def test_no_expenses(self, members):
        balances = compute_balances([], members)
        assert dict(balances) == {1: 0, 2: 0, 3: 0}

    def test_payer_need_not_participate(self, members):
        expenses = [make_expense(1, payer_id=1, amount=30, participant_ids=[2, 3])]

        balances = compute_balances(expenses, members)

        assert dict(balances) == {1: Decimal("30"), 2: Decimal("-15"), 3: Decimal("-15")}

    def test_rounding_drift_stays_within_a_cent(self, members):
        expenses = [make_expense(1, payer_id=1, amount=100, participant_ids=[1, 2, 3])]

        balances = compute_balances(expenses, members)

        assert dict(balances) == {
            1: Decimal("66.67"),
            2: Decimal("-33.33"),
            3: Decimal("-33.33"),
        }
        assert balances.total() == Decimal("0.01")

    def test_half_cent_rounds_toward_positive(self):
        """0.025 -> 0.03 while -0.025 -> -0.02."""
        members = [make_member(1, "A"), make_member(2, "B")]
        expenses = [make_expense(1, payer_id=1, amount="0.05", participant_ids=[1, 2])]

        balances = compute_balances(expenses, members)

        assert balances[1] == Decimal("0.03")
        assert balances[2] == Decimal("-0.02")

    def test_balances_follow_member_order_not_id(self):
        members = [make_member(9, "Z"), make_member(2, "B"), make_member(5, "E")]

        balances = compute_balances([], members)

        assert balances.member_order == (9, 2, 5)

    def test_duplicate_participants_are_counted_once(self, members):
        expenses = [make_expense(1, payer_id=1, amount=30, participant_ids=[2, 2, 3])]

        balances = compute_balances(expenses, members)

        assert balances[2] == Decimal("-15")

    def test_inputs_are_not_mutated(self, members, example_a_expenses):
        before = [e.model_dump() for e in example_a_expenses]
        compute_balances(example_a_expenses, members)
        assert [e.model_dump() for e in example_a_expenses] == before

    def test_random_expense_sets_sum_to_zero(self):
        rng = random.Random(42)
        members = [make_member(i, f"M{i}") for i in range(1, 7)]
        ids = [m.id for m in members]

        for _ in range(50):
            expenses = []
            for expense_id in range(1, rng.randint(1, 12)):
                participants = rng.sample(ids, rng.randint(1, len(ids)))
                amount = Decimal(rng.randint(1, 100000)) / 100
                expenses.append(
                    make_expense(expense_id, rng.choice(ids), amount, participants)
                )

            balances = compute_balances(expenses, members)

            # each balance is off by at most half a cent, and no warning fires
            assert abs(balances.total()) <= drift_tolerance(len(members))
            with warnings.catch_warnings():
                warnings.simplefilter("error")
                check_balance_consistency(balances)


class TestValidation:
    def test_non_positive_amount(self, members):
        expenses = [make_expense(7, payer_id=1, amount=0, participant_ids=[1])]

        with pytest.raises(ValidationError) as exc_info:
            compute_balances(expenses, members)

        assert exc_info.value.expense_id == 7
        assert "Expense 7" in str(exc_info.value)

    def test_negative_amount(self, members):
        expenses = [make_expense(3, payer_id=1, amount=-5, participant_ids=[1])]
        with pytest.raises(ValidationError):
            compute_balances(expenses, members)

    def test_empty_participants(self, members):
        expenses = [make_expense(8, payer_id=1, amount=10, participant_ids=[])]

        with pytest.raises(ValidationError, match="no participants") as exc_info:
            compute_balances(expenses, members)

        assert exc_info.value.expense_id == 8

    def test_unknown_payer(self, members):
        expenses = [make_expense(2, payer_id=99, amount=10, participant_ids=[1])]
        with pytest.raises(ValidationError, match="unknown payer 99"):
            compute_balances(expenses, members)

    def test_unknown_participant(self, members):
        expenses = [make_expense(2, payer_id=1, amount=10, participant_ids=[1, 42])]
        with pytest.raises(ValidationError, match="42"):
            compute_balances(expenses, members)


class TestBalances:
    def test_mapping_behaviour(self):
        balances = Balances([(3, Decimal("1")), (1, Decimal("-1"))])

        assert list(balances) == [3, 1]
        assert len(balances) == 2
        assert balances.get(2) is None
        assert 3 in balances

    def test_repeated_id_keeps_first_position(self):
        balances = Balances([(3, Decimal("1")), (1, Decimal("-1")), (3, Decimal("2"))])

        assert balances.member_order == (3, 1)
        assert balances[3] == Decimal("2")


class TestConsistencyCheck:
    def test_drift_within_epsilon_is_silent(self):
        balances = Balances([(1, Decimal("66.67")), (2, Decimal("-33.33")), (3, Decimal("-33.33"))])

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            drift = check_balance_consistency(balances)

        assert drift == Decimal("0.01")

    def test_many_small_shares_drift_past_one_cent_silently(self):
        """1.00 split among six members leaves -0.02 after per-member rounding."""
        members = [make_member(i, f"M{i}") for i in range(1, 8)]
        expenses = [make_expense(1, payer_id=1, amount="1.00", participant_ids=[2, 3, 4, 5, 6, 7])]

        balances = compute_balances(expenses, members)

        assert balances[1] == Decimal("1.00")
        assert all(balances[i] == Decimal("-0.17") for i in range(2, 8))
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            drift = check_balance_consistency(balances)
        assert drift == Decimal("-0.02")
        assert abs(drift) <= drift_tolerance(len(balances))

    def test_drift_beyond_rounding_bound_warns(self):
        balances = Balances(
            [(1, Decimal("1.00"))] + [(i, Decimal("-0.17")) for i in range(2, 7)] + [(7, Decimal("-0.20"))]
        )

        with pytest.warns(ConsistencyWarning, match="within 0.04"):
            drift = check_balance_consistency(balances)

        assert drift == Decimal("-0.05")

    def test_large_drift_warns(self):
        balances = Balances([(1, Decimal("5")), (2, Decimal("-4"))])

        with pytest.warns(ConsistencyWarning):
            drift = check_balance_consistency(balances)

        assert drift == Decimal("1")


class TestMemberStats:
    def test_paid_owed_and_balance(self, members, example_a_expenses):
        balances = compute_balances(example_a_expenses, members)

        stats = compute_member_stats(example_a_expenses, members, balances)

        assert [s.id for s in stats] == [1, 2, 3]
        a, b, c = stats
        assert (a.paid, a.owed, a.balance) == (Decimal("90"), Decimal("30"), Decimal("60"))
        assert (b.paid, b.owed, b.balance) == (Decimal("30"), Decimal("45"), Decimal("-15"))
        assert (c.paid, c.owed, c.balance) == (Decimal("0"), Decimal("45"), Decimal("-45"))
        assert a.name == "A"
        assert a.payment_handle == "a@upi"
        assert b.payment_handle is None

    def test_balance_is_taken_from_calculator(self, members):
        expenses = [make_expense(1, payer_id=1, amount=100, participant_ids=[1, 2, 3])]
        balances = Balances([(1, Decimal("66.67")), (2, Decimal("-33.34")), (3, Decimal("-33.33"))])

        stats = compute_member_stats(expenses, members, balances)

        # owed is rounded on its own, balance is not recomputed from it
        assert stats[1].owed == Decimal("33.33")
        assert stats[1].balance == Decimal("-33.34")

    def test_owed_sums_unrounded_shares(self):
        members = [make_member(1, "A"), make_member(2, "B"), make_member(3, "C")]
        expenses = [
            make_expense(1, payer_id=1, amount=10, participant_ids=[1, 2, 3]),
            make_expense(2, payer_id=1, amount=10, participant_ids=[1, 2, 3]),
        ]
        balances = compute_balances(expenses, members)

        stats = compute_member_stats(expenses, members, balances)

        # 2 * 3.333... = 6.666... -> 6.67
        assert stats[1].owed == Decimal("6.67")
        assert stats[0].paid == Decimal("20.00")

    def test_member_without_expenses(self, members):
        stats = compute_member_stats([], members, compute_balances([], members))
        assert all(s.paid == 0 and s.owed == 0 and s.balance == 0 for s in stats)
