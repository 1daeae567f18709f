"""
Payment-mode adapters.

Two ways of recording who has paid, both reduced to the same
balance -> debt pipeline:

EACH MODE:
    Everyone owes total / member_count and is only flagged paid or not.
    Flagged members contribute a synthetic RoomPayment of their full
    share, everyone else contributes 0.

MANUAL MODE:
    Some members are payers with explicit amounts. Everyone, payers
    included, owes the equal share. The payer amounts must add up to
    the total (within one cent) before the caller may finalize.

DESIGN DECISION: In both modes "what a member owes" is the equal share
of the room total. Itemized per-expense shares (ExpenseParticipant) are
what ``settle`` uses for the room-wide balances; these adapters only
drive the payment screens and the payments written on finalize.
"""

from decimal import ROUND_DOWN, Decimal
from typing import Iterable, Sequence

from roomsettle.models.results import (
    ManualPaymentResult,
    MemberOwed,
    PayerEntry,
    SimplifiedDebt,
)
from roomsettle.models.room import (
    ExpenseParticipant,
    ExpenseRecord,
    Member,
    PaymentMode,
    RoomPayment,
)
from roomsettle.settlement.balances import compute_balances
from roomsettle.settlement.debts import minimize_debts
from roomsettle.settlement.money import (
    CENT,
    TOLERANCE,
    ZERO,
    Number,
    equal_share,
    round_money,
    to_decimal,
)


# =============================================================================
# EXPENSE SHARES
# =============================================================================

def equal_split_participants(
    expense: ExpenseRecord,
    members: Sequence[Member],
) -> list[ExpenseParticipant]:
    """
    One participant row per member for an EQUAL expense.

    Shares are whole cents; leftover cents go to the first members in
    order so the rows always sum to ``total_amount``.
    """
    if not members:
        return []

    count = len(members)
    total = round_money(expense.total_amount)
    base = (total / count).quantize(CENT, rounding=ROUND_DOWN)
    remainder = int((total - base * count) / CENT)

    rows = []
    for index, member in enumerate(members):
        share = base + CENT if index < remainder else base
        rows.append(ExpenseParticipant(
            expense_id=expense.expense_id,
            user_id=member.user_id,
            owed_amount=share,
        ))
    return rows


# =============================================================================
# EACH MODE
# =============================================================================

def calculate_each_payment(
    total_amount: Number,
    members: Sequence[Member],
    paid_members: Iterable[str],
) -> list[MemberOwed]:
    """Equal share per member, flagged by whether they have paid."""
    if not members:
        return []

    paid = set(paid_members)
    share = round_money(equal_share(total_amount, len(members)))

    return [
        MemberOwed(
            user_id=m.user_id,
            display_name=m.display_name,
            owed_amount=share,
            has_paid=m.user_id in paid,
        )
        for m in members
    ]


def equal_mode_payments(
    total_amount: Number,
    members: Sequence[Member],
    paid_members: Iterable[str],
) -> list[RoomPayment]:
    """Synthetic payments: full share for flagged members, 0 for the rest."""
    return [
        RoomPayment(
            user_id=owed.user_id,
            paid_amount=owed.owed_amount if owed.has_paid else ZERO,
        )
        for owed in calculate_each_payment(total_amount, members, paid_members)
    ]


# =============================================================================
# MANUAL MODE
# =============================================================================

def _active_payer_ids(payers: Iterable[PayerEntry]) -> set[str]:
    return {p.user_id for p in payers if p.amount > 0}


def calculate_manual_payment(
    total_amount: Number,
    members: Sequence[Member],
    payers: Sequence[PayerEntry],
) -> ManualPaymentResult:
    """
    Reconcile payer amounts against the total.

    Payers with a zero amount count as non-payers. A payer's
    ``owed_amount`` is share - paid, so overpayers come out negative.
    """
    total = to_decimal(total_amount)
    payer_total = sum((p.amount for p in payers), ZERO)
    delta = round_money(payer_total - total)
    is_valid = abs(delta) < TOLERANCE

    payer_ids = _active_payer_ids(payers)
    paid_by: dict[str, Decimal] = {}
    for p in payers:
        paid_by[p.user_id] = paid_by.get(p.user_id, ZERO) + p.amount

    share = equal_share(total, len(members))
    owed_list = []

    for m in members:
        if m.user_id in payer_ids:
            owed_list.append(MemberOwed(
                user_id=m.user_id,
                display_name=m.display_name,
                owed_amount=round_money(share - paid_by[m.user_id]),
                has_paid=True,
            ))
        else:
            owed_list.append(MemberOwed(
                user_id=m.user_id,
                display_name=m.display_name,
                owed_amount=round_money(share),
                has_paid=False,
            ))

    return ManualPaymentResult(
        payers=list(payers),
        owed_list=owed_list,
        is_valid=is_valid,
        delta=delta,
    )


def manual_mode_payments(payers: Iterable[PayerEntry]) -> list[RoomPayment]:
    """Payments to write on finalize; one row per payer, amounts summed."""
    totals: dict[str, Decimal] = {}
    for p in payers:
        totals[p.user_id] = totals.get(p.user_id, ZERO) + p.amount
    return [
        RoomPayment(user_id=user_id, paid_amount=round_money(amount))
        for user_id, amount in totals.items()
    ]


def payment_state_from_payments(
    payments: Iterable[RoomPayment],
) -> tuple[PaymentMode, list[PayerEntry]]:
    """
    Rebuild the payment screen from stored payments.

    Anything paid at all means manual mode, with every member who paid
    more than 0 as a payer, amounts pre-filled. Otherwise each mode with
    nobody flagged.

    Each-mode payments with someone flagged read back as manual, the
    flagged members holding their full share.
    """
    payers = [
        PayerEntry(user_id=p.user_id, amount=p.paid_amount)
        for p in payments
        if p.paid_amount > 0
    ]
    if not payers:
        return PaymentMode.EACH, []
    return PaymentMode.MANUAL, payers


def calculate_manual_debts(
    total_amount: Number,
    members: Sequence[Member],
    payers: Sequence[PayerEntry],
) -> list[SimplifiedDebt]:
    """
    Who pays whom once the payers' amounts are taken into account.

    Every member owes the equal share; payers are credited what they
    entered. Empty when there are no members or no payers.
    """
    if not members or not payers:
        return []

    share = equal_share(total_amount, len(members))
    owed = [
        ExpenseParticipant(expense_id="manual", user_id=m.user_id, owed_amount=share)
        for m in members
    ]
    balances = compute_balances(owed, manual_mode_payments(payers))
    return minimize_debts(balances)
