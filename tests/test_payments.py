"""
Tests for the payment-mode adapters (each mode and manual mode).
"""

from decimal import Decimal

from roomsettle.models.room import (
    ExpenseRecord,
    Member,
    PaymentMode,
    RoomPayment,
    SplitType,
)
from roomsettle.models.results import PayerEntry
from roomsettle.settlement import (
    calculate_each_payment,
    calculate_manual_debts,
    calculate_manual_payment,
    compute_balances,
    equal_mode_payments,
    equal_split_participants,
    manual_mode_payments,
    minimize_debts,
    payment_state_from_payments,
)


MEMBERS = [
    Member(user_id="u1", display_name="Alice"),
    Member(user_id="u2", display_name="Bob"),
    Member(user_id="u3", display_name="Charlie"),
]


def _payers(**amounts: str) -> list[PayerEntry]:
    return [PayerEntry(user_id=uid, amount=Decimal(a)) for uid, a in amounts.items()]


def _by_user(rows):
    return {row.user_id: row for row in rows}


class TestEqualSplitParticipants:
    """Tests for generating EQUAL expense shares."""

    def test_even_split(self):
        expense = ExpenseRecord(expense_id="e1", total_amount=Decimal("300"))
        rows = equal_split_participants(expense, MEMBERS)
        assert [r.owed_amount for r in rows] == [Decimal("100.00")] * 3
        assert all(r.expense_id == "e1" for r in rows)

    def test_leftover_cents_go_to_first_members(self):
        expense = ExpenseRecord(expense_id="e1", total_amount=Decimal("100"))
        rows = equal_split_participants(expense, MEMBERS)
        assert [r.owed_amount for r in rows] == [
            Decimal("33.34"), Decimal("33.33"), Decimal("33.33"),
        ]
        assert sum(r.owed_amount for r in rows) == Decimal("100")

    def test_no_members(self):
        expense = ExpenseRecord(expense_id="e1", total_amount=Decimal("10"))
        assert equal_split_participants(expense, []) == []

    def test_equal_expense_with_single_payer(self):
        """Each non-payer owes exactly total / N to the payer."""
        expense = ExpenseRecord(
            expense_id="e1",
            total_amount=Decimal("90"),
            split_type=SplitType.EQUAL,
        )
        participants = equal_split_participants(expense, MEMBERS)
        payments = manual_mode_payments(_payers(u2="90"))
        debts = minimize_debts(compute_balances(participants, payments))

        assert {(d.from_user, d.to_user, d.amount) for d in debts} == {
            ("u1", "u2", Decimal("30")),
            ("u3", "u2", Decimal("30")),
        }


class TestEachMode:
    """Tests for calculate_each_payment and equal_mode_payments."""

    def test_splits_total_equally(self):
        result = calculate_each_payment(Decimal("300"), MEMBERS, set())
        assert len(result) == 3
        for owed in result:
            assert owed.owed_amount == Decimal("100")
            assert owed.has_paid is False

    def test_marks_paid_members(self):
        result = _by_user(calculate_each_payment(Decimal("300"), MEMBERS, {"u1", "u3"}))
        assert result["u1"].has_paid is True
        assert result["u2"].has_paid is False
        assert result["u3"].has_paid is True

    def test_display_names_carried(self):
        result = calculate_each_payment(Decimal("30"), MEMBERS, set())
        assert [m.display_name for m in result] == ["Alice", "Bob", "Charlie"]

    def test_zero_total(self):
        for owed in calculate_each_payment(Decimal("0"), MEMBERS, set()):
            assert owed.owed_amount == Decimal("0")

    def test_empty_members(self):
        assert calculate_each_payment(Decimal("100"), [], set()) == []

    def test_uneven_split_rounds(self):
        for owed in calculate_each_payment(Decimal("100"), MEMBERS, set()):
            assert owed.owed_amount == Decimal("33.33")

    def test_synthetic_payments(self):
        """Flagged members pay their full share, others pay 0."""
        payments = _by_user(equal_mode_payments(Decimal("300"), MEMBERS, {"u2"}))
        assert payments["u1"].paid_amount == Decimal("0")
        assert payments["u2"].paid_amount == Decimal("100")
        assert payments["u3"].paid_amount == Decimal("0")


class TestManualPayment:
    """Tests for calculate_manual_payment."""

    def test_valid_when_amounts_match_total(self):
        result = calculate_manual_payment(Decimal("300"), MEMBERS, _payers(u1="300"))
        assert result.is_valid is True
        assert result.delta == Decimal("0")

    def test_under_total(self):
        result = calculate_manual_payment(Decimal("300"), MEMBERS, _payers(u1="200"))
        assert result.is_valid is False
        assert result.delta == Decimal("-100")

    def test_over_total(self):
        result = calculate_manual_payment(Decimal("300"), MEMBERS, _payers(u1="400"))
        assert result.is_valid is False
        assert result.delta == Decimal("100")

    def test_multiple_payers(self):
        result = calculate_manual_payment(
            Decimal("300"), MEMBERS, _payers(u1="150", u2="150"),
        )
        assert result.is_valid is True

    def test_payer_net_obligation(self):
        """Payers owe share minus paid; overpayers go negative."""
        result = calculate_manual_payment(
            Decimal("300"), MEMBERS, _payers(u1="150", u2="150"),
        )
        owed = _by_user(result.owed_list)
        assert owed["u1"].owed_amount == Decimal("-50")
        assert owed["u1"].has_paid is True
        assert owed["u2"].owed_amount == Decimal("-50")
        assert owed["u3"].owed_amount == Decimal("100")
        assert owed["u3"].has_paid is False

    def test_zero_amount_payer_is_not_a_payer(self):
        result = calculate_manual_payment(
            Decimal("300"), MEMBERS, _payers(u1="300", u2="0"),
        )
        owed = _by_user(result.owed_list)
        assert owed["u2"].has_paid is False
        assert owed["u2"].owed_amount == Decimal("100")

    def test_within_tolerance_is_valid(self):
        result = calculate_manual_payment(
            Decimal("100"), MEMBERS, _payers(u1="99.999"),
        )
        assert result.is_valid is True

    def test_zero_total_without_payers(self):
        result = calculate_manual_payment(Decimal("0"), MEMBERS, [])
        assert result.is_valid is True
        assert result.delta == Decimal("0")


class TestManualDebts:
    """Tests for calculate_manual_debts."""

    def test_non_payers_owe_the_payer(self):
        debts = calculate_manual_debts(Decimal("300"), MEMBERS, _payers(u1="300"))
        assert len(debts) == 2
        for debt in debts:
            assert debt.to_user == "u1"
            assert debt.amount == Decimal("100")

    def test_two_payers_split_the_non_payer(self):
        """Charlie's 100 is split between Alice and Bob."""
        debts = calculate_manual_debts(
            Decimal("300"), MEMBERS, _payers(u1="150", u2="150"),
        )
        assert [(d.from_user, d.to_user, d.amount) for d in debts] == [
            ("u3", "u1", Decimal("50")),
            ("u3", "u2", Decimal("50")),
        ]
        assert sum(d.amount for d in debts) == Decimal("100")

    def test_no_payers(self):
        assert calculate_manual_debts(Decimal("300"), MEMBERS, []) == []

    def test_no_members(self):
        assert calculate_manual_debts(Decimal("300"), [], _payers(u1="300")) == []

    def test_single_member_who_paid_everything(self):
        debts = calculate_manual_debts(
            Decimal("100"), MEMBERS[:1], _payers(u1="100"),
        )
        assert debts == []


class TestManualModePayments:
    """Tests for the payments written on manual finalize."""

    def test_one_row_per_payer(self):
        payments = manual_mode_payments(_payers(u1="120.456", u2="30"))
        assert [(p.user_id, p.paid_amount) for p in payments] == [
            ("u1", Decimal("120.46")),
            ("u2", Decimal("30.00")),
        ]


class TestPaymentState:
    """Tests for rebuilding the payment screen from stored payments."""

    def test_no_payments_is_each_mode(self):
        assert payment_state_from_payments([]) == (PaymentMode.EACH, [])

    def test_all_zero_payments_is_each_mode(self):
        payments = [
            RoomPayment(user_id="u1", paid_amount=Decimal("0")),
            RoomPayment(user_id="u2", paid_amount=Decimal("0")),
        ]
        assert payment_state_from_payments(payments) == (PaymentMode.EACH, [])

    def test_positive_payments_prefill_manual_mode(self):
        payments = [
            RoomPayment(user_id="u1", paid_amount=Decimal("120.50")),
            RoomPayment(user_id="u2", paid_amount=Decimal("0")),
            RoomPayment(user_id="u3", paid_amount=Decimal("79.50")),
        ]
        mode, payers = payment_state_from_payments(payments)

        assert mode == PaymentMode.MANUAL
        assert [(p.user_id, p.amount) for p in payers] == [
            ("u1", Decimal("120.50")),
            ("u3", Decimal("79.50")),
        ]
