"""
Data Models Package

This package contains all Pydantic models used by Room Settle.
Store records are validated into these before reaching the engine.
"""

from roomsettle.models.room import (
    MAX_AMOUNT,
    AvailabilityRecord,
    DayAvailability,
    ExpenseParticipant,
    ExpenseRecord,
    Member,
    PaymentMode,
    Room,
    RoomPayment,
    SnapshotModel,
    SplitType,
)
from roomsettle.models.results import (
    DateScore,
    ManualPaymentResult,
    MemberOwed,
    PayerEntry,
    RoomSettlement,
    RoomSnapshot,
    SimplifiedDebt,
)
from roomsettle.models.validation import (
    ValidationIssue,
    ValidationResult,
)
from roomsettle.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Room records
    "MAX_AMOUNT",
    "AvailabilityRecord",
    "DayAvailability",
    "ExpenseParticipant",
    "ExpenseRecord",
    "Member",
    "PaymentMode",
    "Room",
    "RoomPayment",
    "SnapshotModel",
    "SplitType",
    # Engine outputs
    "DateScore",
    "ManualPaymentResult",
    "MemberOwed",
    "PayerEntry",
    "RoomSettlement",
    "RoomSnapshot",
    "SimplifiedDebt",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
