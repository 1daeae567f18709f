"""
Balance computation.

balance = total paid (RoomPayment) - total owed (ExpenseParticipant)

Positive means the user is owed money, negative means they owe.
Each balance is rounded to cents before anyone classifies it.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable

from roomsettle.models.room import ExpenseParticipant, RoomPayment
from roomsettle.settlement.money import ZERO, round_money


def compute_balances(
    participants: Iterable[ExpenseParticipant],
    payments: Iterable[RoomPayment],
) -> dict[str, Decimal]:
    """
    Net each user's payments against their shares.

    Users appear in first-seen order: payers first, then participants.
    A user with no payment row is treated as having paid 0.
    """
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)

    for payment in payments:
        totals[payment.user_id] += payment.paid_amount

    for part in participants:
        totals[part.user_id] -= part.owed_amount

    return {user_id: round_money(amount) for user_id, amount in totals.items()}
