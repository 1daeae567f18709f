"""
Debt minimization.

Greedy two-pointer settlement: the largest debtor pays the largest
creditor as much as either can take, then whoever hit zero is dropped
and the walk continues. Not globally minimal in transfer count, but
deterministic and usually close.
"""

from decimal import Decimal
from typing import Mapping

import structlog

from roomsettle.models.results import SimplifiedDebt
from roomsettle.settlement.money import TOLERANCE, round_money


logger = structlog.get_logger(__name__)


def _split_positions(
    balances: Mapping[str, Decimal],
) -> tuple[list[list], list[list]]:
    """
    Partition into [user_id, amount] pairs, both sides positive.

    Users within one cent of zero are settled and left out.
    """
    debtors = []
    creditors = []

    for user_id, balance in balances.items():
        rounded = round_money(balance)
        if rounded < -TOLERANCE:
            debtors.append([user_id, -rounded])
        elif rounded > TOLERANCE:
            creditors.append([user_id, rounded])

    # Stable: equal amounts keep their input order.
    debtors.sort(key=lambda entry: entry[1], reverse=True)
    creditors.sort(key=lambda entry: entry[1], reverse=True)
    return debtors, creditors


def minimize_debts(balances: Mapping[str, Decimal]) -> list[SimplifiedDebt]:
    """
    Reduce signed balances to a list of pairwise transfers.

    Args:
        balances: user_id -> signed amount (positive = is owed)

    Returns:
        Transfers in settlement order; every amount is positive and
        no transfer goes from a user to themselves.
    """
    debtors, creditors = _split_positions(balances)

    transactions: list[SimplifiedDebt] = []
    d = 0
    c = 0

    while d < len(debtors) and c < len(creditors):
        debtor = debtors[d]
        creditor = creditors[c]
        settle_amount = min(debtor[1], creditor[1])

        amount = round_money(settle_amount)
        if amount > 0:
            transactions.append(SimplifiedDebt(
                from_user=debtor[0],
                to_user=creditor[0],
                amount=amount,
            ))

        debtor[1] -= settle_amount
        creditor[1] -= settle_amount

        if abs(debtor[1]) < TOLERANCE:
            d += 1
        if abs(creditor[1]) < TOLERANCE:
            c += 1

    logger.debug(
        "debts_minimized",
        debtor_count=len(debtors),
        creditor_count=len(creditors),
        transfer_count=len(transactions),
    )
    return transactions
