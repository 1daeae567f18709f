"""
Input Validation

Two boundaries are checked here, before anything reaches the engine:

PAYMENT AMOUNTS:
- Text typed into an amount field
- Empty means "not entered yet" and is NOT zero
- Non-numeric, negative or oversized input is rejected with a reason, never coerced

EXPENSE SHARES:
- Participant rows should add up to the expense total
- The engine does not enforce this; skewed shares simply skew balances
- This validator reports the mismatch so the caller can block the save

IMPORTANT: Validation NEVER silently fixes issues.
It reports them for human review.
"""

import re
from decimal import Decimal
from typing import Iterable, Optional

from roomsettle.models.room import (
    MAX_AMOUNT,
    ExpenseParticipant,
    ExpenseRecord,
    SplitType,
)
from roomsettle.models.validation import ValidationIssue, ValidationResult
from roomsettle.settlement.money import TOLERANCE, ZERO, round_money


NOT_A_NUMBER = "Must be a valid number"
NEGATIVE_AMOUNT = "Amount cannot be negative"
AMOUNT_TOO_LARGE = "Amount is too large"

# Plain decimal notation only: no digit separators, no non-ASCII digits,
# no NaN or Infinity.
_PLAIN_NUMBER = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class InvalidAmountError(ValueError):
    """A typed payment amount was rejected."""

    def __init__(self, value: str, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"{reason}: {value!r}")


def _is_blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


def validate_payment_amount(value: Optional[str]) -> Optional[str]:
    """
    Check a typed amount.

    Returns None when the value is acceptable (including empty),
    otherwise a human-readable reason.
    """
    if _is_blank(value):
        return None

    text = value.strip()
    if not _PLAIN_NUMBER.fullmatch(text):
        return NOT_A_NUMBER

    try:
        amount = Decimal(text)
    except ArithmeticError:
        return NOT_A_NUMBER

    if amount < 0:
        return NEGATIVE_AMOUNT
    if amount > MAX_AMOUNT:
        return AMOUNT_TOO_LARGE
    return None


def parse_payment_amount(value: Optional[str]) -> Optional[Decimal]:
    """
    Parse a typed amount.

    Returns None for empty input, the amount rounded to cents otherwise.

    Raises:
        InvalidAmountError: If the value is non-numeric, negative or too large
    """
    reason = validate_payment_amount(value)
    if reason is not None:
        raise InvalidAmountError(value, reason)
    if _is_blank(value):
        return None
    return round_money(Decimal(value.strip()))


class ExpenseValidator:
    """
    Checks an expense against its participant rows.

    MANUAL splits are typed in by hand, so a total mismatch there is an
    error. EQUAL splits are generated, so a mismatch is only a warning
    (usually leftover cents from an older split).
    """

    def validate(
        self,
        expense: ExpenseRecord,
        participants: Iterable[ExpenseParticipant],
    ) -> ValidationResult:
        issues = []
        participants = list(participants)

        foreign = [p for p in participants if p.expense_id != expense.expense_id]
        if foreign:
            issues.append(ValidationIssue(
                field="participants",
                issue_type="foreign_row",
                message=(
                    f"{len(foreign)} participant row(s) belong to a different expense"
                ),
                severity="error",
                suggested_fix="Pass only this expense's participant rows",
            ))

        own = [p for p in participants if p.expense_id == expense.expense_id]
        if not own:
            issues.append(ValidationIssue(
                field="participants",
                issue_type="missing",
                message="Expense has no participants",
                severity="error",
                suggested_fix="Add at least one member to share this expense",
            ))
        else:
            shares_total = round_money(sum((p.owed_amount for p in own), ZERO))
            total = round_money(expense.total_amount)
            diff = shares_total - total

            if abs(diff) > TOLERANCE:
                severity = "error" if expense.split_type == SplitType.MANUAL else "warning"
                issues.append(ValidationIssue(
                    field="owed_amount",
                    issue_type="mismatch",
                    message=(
                        f"Shares add up to {shares_total}, expense total is {total}"
                    ),
                    severity=severity,
                    suggested_fix=(
                        f"Adjust the shares by {-diff} so they match the total"
                    ),
                ))

        warnings = [i.message for i in issues if i.severity == "warning"]
        is_valid = not any(i.severity == "error" for i in issues)

        return ValidationResult(
            expense_id=expense.expense_id,
            is_valid=is_valid,
            issues=issues,
            warnings=warnings,
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """One line per problem, for showing next to the expense form."""
        if result.is_valid and not result.warnings:
            return "All shares add up."

        lines = []
        for issue in result.issues:
            prefix = "Error" if issue.severity == "error" else "Check"
            lines.append(f"{prefix}: {issue.message}")
            if issue.suggested_fix:
                lines.append(f"  {issue.suggested_fix}")
        return "\n".join(lines)
