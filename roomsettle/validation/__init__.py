"""Validation package."""

from roomsettle.validation.validator import (
    AMOUNT_TOO_LARGE,
    NEGATIVE_AMOUNT,
    NOT_A_NUMBER,
    ExpenseValidator,
    InvalidAmountError,
    parse_payment_amount,
    validate_payment_amount,
)

__all__ = [
    "AMOUNT_TOO_LARGE",
    "NEGATIVE_AMOUNT",
    "NOT_A_NUMBER",
    "ExpenseValidator",
    "InvalidAmountError",
    "parse_payment_amount",
    "validate_payment_amount",
]
