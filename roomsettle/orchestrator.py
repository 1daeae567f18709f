"""
Main Orchestrator for Room Settle

This module ties the pure engine to the room store and defines the
end-to-end flows for:
1. Settle (load snapshot -> score dates -> balances -> debts)
2. Finalize payments (typed amounts -> validate -> write payments)
3. Retention (find stale rooms -> delete with all their records)

DESIGN DECISION: The engine never talks to the store. Every
recomputation loads ONE snapshot and hands it to pure functions, so
re-running on each store update is always safe and never needs to
diff old against new state.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from roomsettle.audit import AuditLogger, create_correlation_id
from roomsettle.config import RetentionSettings, StoreSettings, get_settings
from roomsettle.models.results import (
    PayerEntry,
    RoomSettlement,
    RoomSnapshot,
)
from roomsettle.models.room import PaymentMode, RoomPayment
from roomsettle.reporting import build_share_text
from roomsettle.scheduling import score_dates
from roomsettle.services.storage import (
    InMemoryRoomStore,
    NotFoundError,
    RoomStoreInterface,
    StorageError,
    StoreConnectionError,
)
from roomsettle.settlement import (
    calculate_manual_payment,
    compute_balances,
    equal_mode_payments,
    manual_mode_payments,
    minimize_debts,
    payment_state_from_payments,
    round_money,
)
from roomsettle.settlement.money import equal_share
from roomsettle.validation import InvalidAmountError, parse_payment_amount


class FinalizationBlockedError(Exception):
    """Manual payer amounts don't add up to the room total."""

    def __init__(self, room_id: str, delta: Decimal):
        self.room_id = room_id
        self.delta = delta
        super().__init__(
            f"Payer amounts for room {room_id} are off by {delta}; "
            "they must add up to the total before finalizing"
        )


def settle_snapshot(snapshot: RoomSnapshot) -> RoomSettlement:
    """
    Run both engine leaves over one snapshot.

    Pure: the same snapshot always yields the same settlement.
    """
    best_dates = score_dates(snapshot.availabilities, snapshot.member_ids)
    balances = compute_balances(snapshot.participants, snapshot.payments)
    debts = minimize_debts(balances)
    total = snapshot.total_expenses

    return RoomSettlement(
        room_id=snapshot.room.room_id,
        best_dates=best_dates,
        balances=balances,
        debts=debts,
        total_expenses=round_money(total),
        per_person_average=round_money(equal_share(total, len(snapshot.members))),
    )


class RoomSettlementFlow:
    """
    Orchestrates settlement for one room at a time.

    Flow:
    1. Load → Read a consistent snapshot (retried on connection errors)
    2. Compute → Pure engine over the snapshot
    3. Finalize → Validate typed amounts, write payments wholesale

    Manual finalization is REFUSED while payer amounts don't match the
    total. The caller shows the delta and lets the user fix it.
    """

    def __init__(
        self,
        store: RoomStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
        store_settings: Optional[StoreSettings] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger
        self._store_settings = store_settings or get_settings().store
        self._settlement_settings = get_settings().settlement

    async def _read_snapshot(self, room_id: str) -> RoomSnapshot:
        room = await self._store.get_room(room_id)
        if room is None:
            raise NotFoundError(f"Room not found: {room_id}")

        return RoomSnapshot(
            room=room,
            members=await self._store.list_members(room_id),
            availabilities=await self._store.list_availabilities(room_id),
            expenses=await self._store.list_expenses(room_id),
            participants=await self._store.list_expense_participants(room_id),
            payments=await self._store.list_room_payments(room_id),
        )

    async def load_snapshot(
        self,
        room_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> RoomSnapshot:
        """
        Read one snapshot of the room.

        Raises:
            NotFoundError: If the room doesn't exist
            StoreConnectionError: If every attempt failed to reach the store
        """
        correlation_id = correlation_id or create_correlation_id()
        settings = self._store_settings

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(settings.retry_attempts),
                wait=wait_exponential(multiplier=1, max=settings.retry_max_wait_seconds),
                retry=retry_if_exception_type(StoreConnectionError),
                reraise=True,
            ):
                with attempt:
                    snapshot = await self._read_snapshot(room_id)
        except StoreConnectionError as e:
            if self._audit_logger:
                await self._audit_logger.log_storage_error(
                    operation="load_snapshot",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            await self._audit_logger.log_snapshot_loaded(
                room_id=room_id,
                member_count=len(snapshot.members),
                expense_count=len(snapshot.expenses),
                correlation_id=correlation_id,
            )
        return snapshot

    async def settle(
        self,
        room_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> RoomSettlement:
        """Load the room and compute best dates, balances and debts."""
        correlation_id = correlation_id or create_correlation_id()

        snapshot = await self.load_snapshot(room_id, correlation_id)
        settlement = settle_snapshot(snapshot)

        if self._audit_logger:
            await self._audit_logger.log_room_settled(
                room_id=room_id,
                debt_count=len(settlement.debts),
                total_expenses=str(settlement.total_expenses),
                correlation_id=correlation_id,
            )
        return settlement

    async def share_text(
        self,
        room_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> str:
        """Shareable plain-text summary of the room."""
        correlation_id = correlation_id or create_correlation_id()

        snapshot = await self.load_snapshot(room_id, correlation_id)
        settlement = settle_snapshot(snapshot)
        text = build_share_text(
            room=snapshot.room,
            members=snapshot.members,
            best_dates=settlement.best_dates,
            expenses=snapshot.expenses,
            debts=settlement.debts,
            runner_up_count=self._settlement_settings.runner_up_count,
            default_currency=self._settlement_settings.default_currency,
        )

        if self._audit_logger:
            await self._audit_logger.log_summary_shared(
                room_id=room_id,
                correlation_id=correlation_id,
            )
        return text

    async def payment_state(
        self,
        room_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[PaymentMode, list[PayerEntry]]:
        """Payment mode and pre-filled payers from the stored payments."""
        snapshot = await self.load_snapshot(room_id, correlation_id)
        return payment_state_from_payments(snapshot.payments)

    async def _parse_payers(
        self,
        payer_amounts: dict[str, Optional[str]],
        correlation_id: UUID,
    ) -> list[PayerEntry]:
        payers = []
        for user_id, value in payer_amounts.items():
            try:
                amount = parse_payment_amount(value)
            except InvalidAmountError as e:
                if self._audit_logger:
                    await self._audit_logger.log_amount_rejected(
                        user_id=user_id,
                        value=str(value),
                        reason=e.reason,
                        correlation_id=correlation_id,
                    )
                raise
            # Not entered yet
            if amount is None:
                continue
            payers.append(PayerEntry(user_id=user_id, amount=amount))
        return payers

    async def finalize_payments(
        self,
        room_id: str,
        mode: PaymentMode,
        paid_members: Optional[Iterable[str]] = None,
        payer_amounts: Optional[dict[str, Optional[str]]] = None,
        correlation_id: Optional[UUID] = None,
    ) -> list[RoomPayment]:
        """
        Write the room's payment totals.

        Args:
            mode: EACH uses ``paid_members``; MANUAL uses ``payer_amounts``
            paid_members: User ids flagged as paid (each mode)
            payer_amounts: user id -> typed amount (manual mode)

        Returns:
            The payments written, replacing any previous rows

        Raises:
            InvalidAmountError: If a typed amount is non-numeric or negative
            FinalizationBlockedError: If manual amounts don't match the total
        """
        correlation_id = correlation_id or create_correlation_id()
        mode = PaymentMode(mode)

        snapshot = await self.load_snapshot(room_id, correlation_id)
        total = snapshot.total_expenses

        if mode == PaymentMode.EACH:
            payments = equal_mode_payments(total, snapshot.members, paid_members or [])
        else:
            payers = await self._parse_payers(payer_amounts or {}, correlation_id)
            result = calculate_manual_payment(total, snapshot.members, payers)

            if not result.is_valid:
                if self._audit_logger:
                    await self._audit_logger.log_finalization_blocked(
                        room_id=room_id,
                        delta=str(result.delta),
                        correlation_id=correlation_id,
                    )
                raise FinalizationBlockedError(room_id, result.delta)

            payments = manual_mode_payments(payers)

        await self._store.replace_room_payments(room_id, payments)

        if self._audit_logger:
            await self._audit_logger.log_payments_finalized(
                room_id=room_id,
                mode=mode.value,
                payments={p.user_id: str(p.paid_amount) for p in payments},
                correlation_id=correlation_id,
            )
        return payments


class RetentionSweeper:
    """
    Scheduled cleanup of stale rooms.

    A room older than the configured age is deleted together with
    every record keyed by it. Anything that still references its users
    must cope with them being gone.
    """

    def __init__(
        self,
        store: RoomStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[RetentionSettings] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger
        self._settings = settings or get_settings().retention

    def cutoff(self, now: Optional[datetime] = None) -> datetime:
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now - timedelta(days=self._settings.max_age_days)

    async def purge(
        self,
        now: Optional[datetime] = None,
        correlation_id: Optional[UUID] = None,
    ) -> list[str]:
        """
        Delete every room created before the cutoff.

        Returns:
            IDs of the rooms that were deleted
        """
        correlation_id = correlation_id or create_correlation_id()
        stale = await self._store.list_rooms_created_before(self.cutoff(now))

        purged = []
        for room in stale:
            try:
                deleted = await self._store.delete_room(room.room_id)
            except StorageError as e:
                if self._audit_logger:
                    await self._audit_logger.log_storage_error(
                        operation="delete_room",
                        error_message=str(e),
                        correlation_id=correlation_id,
                    )
                raise

            if not deleted:
                continue
            purged.append(room.room_id)

            if self._audit_logger:
                await self._audit_logger.log_room_purged(
                    room_id=room.room_id,
                    created_at=room.created_at.isoformat(),
                    correlation_id=correlation_id,
                )
        return purged


def create_app_components(
    store: Optional[RoomStoreInterface] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> tuple[RoomSettlementFlow, RetentionSweeper]:
    """
    Factory function to create the application components.

    Args:
        store: Room store backend. Defaults to an empty in-memory store.
        audit_logger: Defaults to local-only logging.

    Returns:
        (settlement_flow, retention_sweeper)
    """
    store = store or InMemoryRoomStore()
    audit_logger = audit_logger or AuditLogger()

    return (
        RoomSettlementFlow(store=store, audit_logger=audit_logger),
        RetentionSweeper(store=store, audit_logger=audit_logger),
    )
