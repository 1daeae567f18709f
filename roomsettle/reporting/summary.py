"""
Shareable Room Summary

Plain text a member can paste into a chat: who is in the room, the
best date, and who pays whom.

Display names are resolved here, not in the engine. An id that no
longer matches a member (left the room, purged) shows as "Unknown".
"""

from datetime import date
from decimal import Decimal
from typing import Sequence

from roomsettle.models.results import DateScore, SimplifiedDebt
from roomsettle.models.room import ExpenseRecord, Member, Room
from roomsettle.reporting.currency import format_currency
from roomsettle.settlement.money import ZERO, equal_share


UNKNOWN_MEMBER = "Unknown"


def member_name(user_id: str, members: Sequence[Member]) -> str:
    """Display name for a user id, or "Unknown"."""
    for m in members:
        if m.user_id == user_id and m.display_name:
            return m.display_name
    return UNKNOWN_MEMBER


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_long_date(date_string: str) -> str:
    """"Saturday, June 1st, 2024". Unparseable dates are returned as-is."""
    try:
        d = date.fromisoformat(date_string)
    except ValueError:
        return date_string
    return f"{d:%A}, {d:%B} {_ordinal(d.day)}, {d.year}"


def format_short_date(date_string: str) -> str:
    """"Jun 2nd". Unparseable dates are returned as-is."""
    try:
        d = date.fromisoformat(date_string)
    except ValueError:
        return date_string
    return f"{d:%b} {_ordinal(d.day)}"


def build_share_text(
    room: Room,
    members: Sequence[Member],
    best_dates: Sequence[DateScore],
    expenses: Sequence[ExpenseRecord],
    debts: Sequence[SimplifiedDebt],
    runner_up_count: int = 3,
    default_currency: str = "USD",
) -> str:
    """
    Render the room summary.

    The date section is skipped when nobody has marked a date, and the
    money section is skipped when there are no expenses. Amounts use
    ``default_currency`` when the room has no currency of its own.
    """
    member_count = len(members)
    currency = room.currency or default_currency

    lines = [
        f"--- {room.name} Summary ---",
        f"Room Code: {room.room_id}",
        f"Members: {', '.join(m.display_name for m in members)}",
        "",
    ]

    if best_dates:
        best = best_dates[0]
        line = (
            f"Best Date: {format_long_date(best.date)}"
            f" ({best.available_count}/{member_count} free)"
        )
        if best.available_count == member_count:
            line += " - Perfect match!"
        lines.append(line)

        runner_ups = best_dates[1:1 + runner_up_count]
        if runner_ups:
            lines.append("Runner-ups: " + ", ".join(
                f"{format_short_date(d.date)} ({d.available_count}/{member_count})"
                for d in runner_ups
            ))
        lines.append("")

    if expenses:
        total: Decimal = sum((e.total_amount for e in expenses), ZERO)
        lines.append(f"Total Expenses: {format_currency(total, currency)}")
        lines.append(
            f"Per Person (avg): {format_currency(equal_share(total, member_count), currency)}"
        )
        lines.append("")

        if debts:
            lines.append("Settlements:")
            for debt in debts:
                lines.append(
                    f"  {member_name(debt.from_user, members)} -> "
                    f"{member_name(debt.to_user, members)}: "
                    f"{format_currency(debt.amount, currency)}"
                )
        else:
            lines.append("All settled up!")

    return "\n".join(lines) + "\n"
