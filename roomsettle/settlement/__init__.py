"""
Settlement engine package.

compute_balances -> minimize_debts is the whole pipeline; the payment
adapters build its inputs for the two payment-tracking modes.
"""

from roomsettle.settlement.balances import compute_balances
from roomsettle.settlement.debts import minimize_debts
from roomsettle.settlement.money import (
    CENT,
    TOLERANCE,
    is_settled,
    round_money,
)
from roomsettle.settlement.payments import (
    calculate_each_payment,
    calculate_manual_debts,
    calculate_manual_payment,
    equal_mode_payments,
    equal_split_participants,
    manual_mode_payments,
    payment_state_from_payments,
)

__all__ = [
    "compute_balances",
    "minimize_debts",
    # Money
    "CENT",
    "TOLERANCE",
    "is_settled",
    "round_money",
    # Payment modes
    "calculate_each_payment",
    "calculate_manual_debts",
    "calculate_manual_payment",
    "equal_mode_payments",
    "equal_split_participants",
    "manual_mode_payments",
    "payment_state_from_payments",
]
