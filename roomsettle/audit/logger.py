"""
Audit Logger

DESIGN DECISION: Every action that changes or refuses to change what
people owe is logged. This provides:
1. Traceability of who finalized which payments
2. A record of blocked finalizations and rejected amounts
3. A trail of rooms removed by retention

The audit logger:
- Always writes a structured local log line
- Persists to audit storage when one is configured
- Never raises when persistence fails
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from roomsettle.models.audit import AuditEvent, AuditEventBuilder
from roomsettle.services.storage import AuditStorageInterface


structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence), when configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()
        severity = event.severity.value

        if severity in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif severity == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif severity == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_snapshot_loaded(
        self,
        room_id: str,
        member_count: int,
        expense_count: int,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.snapshot_loaded(
            room_id=room_id,
            member_count=member_count,
            expense_count=expense_count,
            correlation_id=correlation_id,
        ))

    async def log_room_settled(
        self,
        room_id: str,
        debt_count: int,
        total_expenses: str,
        correlation_id: UUID,
    ) -> None:
        """Log a completed settlement recomputation."""
        await self.log(AuditEventBuilder.room_settled(
            room_id=room_id,
            debt_count=debt_count,
            total_expenses=total_expenses,
            correlation_id=correlation_id,
        ))

    async def log_summary_shared(
        self,
        room_id: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.summary_shared(
            room_id=room_id,
            correlation_id=correlation_id,
        ))

    async def log_payments_finalized(
        self,
        room_id: str,
        mode: str,
        payments: dict[str, str],
        correlation_id: UUID,
    ) -> None:
        """Log payments written back to the store."""
        await self.log(AuditEventBuilder.payments_finalized(
            room_id=room_id,
            mode=mode,
            payments=payments,
            correlation_id=correlation_id,
        ))

    async def log_finalization_blocked(
        self,
        room_id: str,
        delta: str,
        correlation_id: UUID,
    ) -> None:
        """Log a manual-mode finalize refused because totals don't match."""
        await self.log(AuditEventBuilder.finalization_blocked(
            room_id=room_id,
            delta=delta,
            correlation_id=correlation_id,
        ))

    async def log_amount_rejected(
        self,
        user_id: str,
        value: str,
        reason: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.amount_rejected(
            user_id=user_id,
            value=value,
            reason=reason,
            correlation_id=correlation_id,
        ))

    async def log_room_purged(
        self,
        room_id: str,
        created_at: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.room_purged(
            room_id=room_id,
            created_at=created_at,
            correlation_id=correlation_id,
        ))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        await self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a store failure."""
        await self.log(AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g., finalizing payments).
    Pass it through all subsequent operations.
    """
    return uuid4()
