"""
Engine Output Models

Everything here is derived on each recomputation and never persisted.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from roomsettle.models.room import (
    AvailabilityRecord,
    ExpenseParticipant,
    ExpenseRecord,
    Member,
    MAX_AMOUNT,
    Room,
    RoomPayment,
    SnapshotModel,
)


# =============================================================================
# DATE SCORING
# =============================================================================

class DateScore(BaseModel):
    """
    How many members are free on one date.

    ``missing_users`` keeps the order of the member list it was seeded
    from; ``available_users`` keeps the order records were tallied in.
    """

    date: str
    available_count: int = Field(default=0, ge=0)
    available_users: list[str] = Field(default_factory=list)
    missing_users: list[str] = Field(default_factory=list)


# =============================================================================
# SETTLEMENT
# =============================================================================

class SimplifiedDebt(SnapshotModel):
    """A single directed transfer: ``from_user`` pays ``to_user``."""

    from_user: str
    to_user: str
    amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT)


class PayerEntry(SnapshotModel):
    """A member designated as payer in manual mode."""

    user_id: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0, le=MAX_AMOUNT)


class MemberOwed(BaseModel):
    """
    Per-member line for the payment screens.

    In manual mode ``owed_amount`` can be negative, meaning the member
    is owed money back.
    """

    user_id: str
    display_name: str
    owed_amount: Decimal
    has_paid: bool = False


class ManualPaymentResult(BaseModel):
    """
    Manual-mode reconciliation.

    ``delta`` is entered total minus required total. Callers block
    finalization while ``is_valid`` is False.
    """

    payers: list[PayerEntry] = Field(default_factory=list)
    owed_list: list[MemberOwed] = Field(default_factory=list)
    is_valid: bool
    delta: Decimal


# =============================================================================
# READ MODEL
# =============================================================================

class RoomSnapshot(BaseModel):
    """
    One consistent view of a room, loaded once per recomputation.

    The engine never holds subscription state. Whoever watches the
    store builds a fresh snapshot and hands it in.
    """

    room: Room
    members: list[Member] = Field(default_factory=list)
    availabilities: list[AvailabilityRecord] = Field(default_factory=list)
    expenses: list[ExpenseRecord] = Field(default_factory=list)
    participants: list[ExpenseParticipant] = Field(default_factory=list)
    payments: list[RoomPayment] = Field(default_factory=list)

    @property
    def member_ids(self) -> list[str]:
        return [m.user_id for m in self.members]

    @property
    def total_expenses(self) -> Decimal:
        return sum((e.total_amount for e in self.expenses), Decimal("0"))


class RoomSettlement(BaseModel):
    """Everything the best-date and balances displays need."""

    room_id: str
    best_dates: list[DateScore] = Field(default_factory=list)
    balances: dict[str, Decimal] = Field(default_factory=dict)
    debts: list[SimplifiedDebt] = Field(default_factory=list)
    total_expenses: Decimal = Decimal("0")
    per_person_average: Decimal = Decimal("0")

    @property
    def best_date(self) -> Optional[DateScore]:
        return self.best_dates[0] if self.best_dates else None

    @property
    def is_settled(self) -> bool:
        return not self.debts
