"""
Audit Models for Room Settle

Settlement actions that change what people owe, or that were refused,
are recorded as audit events:
1. Who finalized which payments, in which mode
2. Which finalizations were blocked and by how much
3. Which rooms the retention sweep removed

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Recomputation
    SNAPSHOT_LOADED = "snapshot_loaded"
    ROOM_SETTLED = "room_settled"
    SUMMARY_SHARED = "summary_shared"

    # Payments
    PAYMENTS_FINALIZED = "payments_finalized"
    FINALIZATION_BLOCKED = "finalization_blocked"
    AMOUNT_REJECTED = "amount_rejected"

    # Retention
    ROOM_PURGED = "room_purged"

    # System events
    SYSTEM_ERROR = "system_error"
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    ``entity_id`` is a room or user identifier from the store, so it is
    kept as an opaque string.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'room', 'payment')"
    )
    entity_id: Optional[str] = None

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one finalize action)"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.room_settled(room_id, debt_count, correlation_id)
        event = AuditEventBuilder.room_purged(room_id, created_at)
    """

    @staticmethod
    def snapshot_loaded(
        room_id: str,
        member_count: int,
        expense_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_LOADED,
            severity=AuditSeverity.DEBUG,
            entity_type="room",
            entity_id=room_id,
            correlation_id=correlation_id,
            description=f"Snapshot loaded: {member_count} members, {expense_count} expenses",
            details={
                "member_count": member_count,
                "expense_count": expense_count,
            },
        )

    @staticmethod
    def room_settled(
        room_id: str,
        debt_count: int,
        total_expenses: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ROOM_SETTLED,
            entity_type="room",
            entity_id=room_id,
            correlation_id=correlation_id,
            description=f"Settlement computed with {debt_count} transfers",
            details={
                "debt_count": debt_count,
                "total_expenses": total_expenses,
            },
        )

    @staticmethod
    def summary_shared(
        room_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUMMARY_SHARED,
            entity_type="room",
            entity_id=room_id,
            correlation_id=correlation_id,
            description="Share summary generated",
            is_user_action=True,
        )

    @staticmethod
    def payments_finalized(
        room_id: str,
        mode: str,
        payments: dict[str, str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENTS_FINALIZED,
            entity_type="room",
            entity_id=room_id,
            correlation_id=correlation_id,
            description=f"Payments finalized in {mode} mode",
            details={
                "mode": mode,
                "payments": payments,
            },
            is_user_action=True,
        )

    @staticmethod
    def finalization_blocked(
        room_id: str,
        delta: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FINALIZATION_BLOCKED,
            severity=AuditSeverity.WARNING,
            entity_type="room",
            entity_id=room_id,
            correlation_id=correlation_id,
            description=f"Finalization blocked: payer total off by {delta}",
            details={
                "delta": delta,
            },
            is_user_action=True,
        )

    @staticmethod
    def amount_rejected(
        user_id: str,
        value: str,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.AMOUNT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="payment",
            entity_id=user_id,
            correlation_id=correlation_id,
            description=f"Payment amount rejected: {reason}",
            details={
                "value": value,
                "reason": reason,
            },
            is_user_action=True,
        )

    @staticmethod
    def room_purged(
        room_id: str,
        created_at: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ROOM_PURGED,
            entity_type="room",
            entity_id=room_id,
            correlation_id=correlation_id,
            description=f"Room purged by retention sweep (created {created_at})",
            details={
                "created_at": created_at,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={
                "operation": operation,
            },
            correlation_id=correlation_id,
        )
