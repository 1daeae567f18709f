"""
Room Snapshot Models

These models describe the read-only records a room is made of:
members, availability, expenses, per-member expense shares and
recorded payments.

DESIGN DECISION: Every record is frozen. The engine only ever sees a
snapshot handed to it by the caller, and it must not be able to mutate
what the store owns.

Records coming straight from the store use camelCase keys
(``userId``, ``paidAmount``). The aliases below let those documents
validate as-is while Python code keeps snake_case names.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# Largest amount any money field may hold. Keeps every sum and every
# cent rounding well inside the default 28-digit decimal context.
MAX_AMOUNT = Decimal("1000000000000")


class SplitType(str, Enum):
    """How an expense was divided when it was created."""
    EQUAL = "EQUAL"
    MANUAL = "MANUAL"


class PaymentMode(str, Enum):
    """
    Payment-tracking mode used at settlement time.

    EACH: everyone owes the same share and is only marked paid/unpaid.
    MANUAL: specific members are payers with explicit amounts.
    """
    EACH = "each"
    MANUAL = "manual"


class SnapshotModel(BaseModel):
    """Base for all store records: immutable, camelCase-aware."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        str_strip_whitespace=True,
    )


# =============================================================================
# ROOM AND MEMBERSHIP
# =============================================================================

class Room(SnapshotModel):
    """
    Room metadata.

    ``is_locked`` is carried for display only. Lock rules belong to the
    store, the engine never checks them. ``currency`` is None when the
    room never picked one; display code falls back to
    ``SettlementSettings.default_currency``.
    """

    room_id: str = Field(..., min_length=1)
    name: str = Field(default="")
    admin_id: Optional[str] = None
    is_locked: bool = False
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    created_at: datetime

    @field_validator('currency')
    @classmethod
    def upper_currency(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v else v

    @field_validator('created_at')
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Naive timestamps from the store are UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class Member(SnapshotModel):
    """A room member. ``user_id`` is unique within the room."""

    user_id: str = Field(..., min_length=1)
    display_name: str = Field(default="")


# =============================================================================
# AVAILABILITY
# =============================================================================

class DayAvailability(SnapshotModel):
    """One member's answer for one calendar day."""

    is_available: bool
    time_slots: list[str] = Field(default_factory=list)


class AvailabilityRecord(SnapshotModel):
    """
    A member's availability across dates.

    Keys are ISO calendar days ("2024-06-01"). A date missing from the
    map means "no opinion", which is not the same as
    ``is_available=False``.
    """

    user_id: str = Field(..., min_length=1)
    dates: dict[str, DayAvailability] = Field(default_factory=dict)


# =============================================================================
# EXPENSES AND PAYMENTS
# =============================================================================

class ExpenseRecord(SnapshotModel):
    """An itemized expense. Immutable once created."""

    expense_id: str = Field(..., min_length=1)
    description: str = Field(default="")
    total_amount: Decimal = Field(..., ge=0, le=MAX_AMOUNT)
    split_type: SplitType = SplitType.EQUAL
    created_at: Optional[datetime] = None


class ExpenseParticipant(SnapshotModel):
    """
    One member's share of one expense.

    For a given expense the shares should sum to ``total_amount``.
    This is not enforced here; see ExpenseValidator.
    """

    expense_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    owed_amount: Decimal = Field(..., ge=-MAX_AMOUNT, le=MAX_AMOUNT)


class RoomPayment(SnapshotModel):
    """
    Running total a member has handed over for the whole room.

    Overwritten wholesale on each settlement update, never accumulated.
    """

    user_id: str = Field(..., min_length=1)
    paid_amount: Decimal = Field(..., ge=0, le=MAX_AMOUNT)
