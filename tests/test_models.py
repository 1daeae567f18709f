"""
Tests for Room Settle

Test strategy:
1. Unit tests for the pure engine (scoring, balances, debts, adapters)
2. Flow tests against the in-memory store
3. No real backends in tests
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from roomsettle.config import (
    RetentionSettings,
    SettlementSettings,
    get_settings,
    validate_all_settings,
)
from roomsettle.models import (
    MAX_AMOUNT,
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    ExpenseParticipant,
    ExpenseRecord,
    Member,
    PayerEntry,
    PaymentMode,
    Room,
    RoomPayment,
    RoomSnapshot,
    SimplifiedDebt,
    SplitType,
)


class TestRoomModels:
    """Tests for the store record models."""

    def test_member_from_store_document(self):
        member = Member.model_validate({"userId": "u1", "displayName": "  Alice  "})
        assert member.user_id == "u1"
        assert member.display_name == "Alice"

    def test_records_are_frozen(self):
        member = Member(user_id="u1", display_name="Alice")
        with pytest.raises(ValidationError):
            member.display_name = "Bob"

    def test_expense_defaults(self):
        expense = ExpenseRecord(expense_id="e1", total_amount=Decimal("10"))
        assert expense.split_type == SplitType.EQUAL

    def test_expense_rejects_negative_total(self):
        with pytest.raises(ValidationError):
            ExpenseRecord(expense_id="e1", total_amount=Decimal("-1"))

    def test_payment_rejects_negative(self):
        with pytest.raises(ValidationError):
            RoomPayment(user_id="u1", paid_amount=Decimal("-5"))

    def test_participant_from_store_document(self):
        part = ExpenseParticipant.model_validate(
            {"expenseId": "e1", "userId": "u1", "owedAmount": "12.50"}
        )
        assert part.owed_amount == Decimal("12.50")

    @pytest.mark.parametrize("build", [
        lambda: RoomPayment(user_id="u1", paid_amount=Decimal("1e30")),
        lambda: ExpenseRecord(expense_id="e1", total_amount=Decimal("1e30")),
        lambda: ExpenseParticipant(expense_id="e1", user_id="u1", owed_amount=Decimal("-1e30")),
        lambda: PayerEntry(user_id="u1", amount=Decimal("1e30")),
    ])
    def test_money_fields_are_bounded(self, build):
        """Out-of-range amounts fail here instead of inside the engine."""
        with pytest.raises(ValidationError):
            build()

    def test_oversized_store_document(self):
        with pytest.raises(ValidationError):
            RoomPayment.model_validate({"userId": "u1", "paidAmount": "1e30"})
        payment = RoomPayment(user_id="u1", paid_amount=MAX_AMOUNT)
        assert payment.paid_amount == MAX_AMOUNT

    def test_split_type_values(self):
        assert SplitType("MANUAL") is SplitType.MANUAL
        assert PaymentMode("each") is PaymentMode.EACH

    def test_room_naive_timestamp_is_utc(self):
        room = Room(room_id="r1", created_at=datetime(2024, 5, 1))
        assert room.created_at.tzinfo == timezone.utc

    def test_room_currency_optional(self):
        room = Room(room_id="r1", created_at=datetime(2024, 5, 1))
        assert room.currency is None

    def test_room_currency_uppercased(self):
        room = Room(room_id="r1", currency="eur", created_at=datetime(2024, 5, 1))
        assert room.currency == "EUR"


class TestResultModels:
    """Tests for engine output models."""

    def test_debt_amount_must_be_positive(self):
        with pytest.raises(ValidationError):
            SimplifiedDebt(from_user="a", to_user="b", amount=Decimal("0"))

    def test_snapshot_helpers(self):
        snapshot = RoomSnapshot(
            room=Room(room_id="r1", created_at=datetime(2024, 5, 1)),
            members=[Member(user_id="u1"), Member(user_id="u2")],
            expenses=[
                ExpenseRecord(expense_id="e1", total_amount=Decimal("10.50")),
                ExpenseRecord(expense_id="e2", total_amount=Decimal("4.50")),
            ],
        )
        assert snapshot.member_ids == ["u1", "u2"]
        assert snapshot.total_expenses == Decimal("15.00")


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        event = AuditEvent(
            event_type=AuditEventType.ROOM_SETTLED,
            description="Settlement computed",
        )
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.tzinfo is not None

    def test_audit_event_to_log_dict(self):
        event = AuditEventBuilder.payments_finalized(
            room_id="r1",
            mode="manual",
            payments={"u1": "300.00"},
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "payments_finalized"
        assert log_dict["entity_id"] == "r1"
        assert log_dict["details"]["payments"] == {"u1": "300.00"}
        assert log_dict["correlation_id"] is None

    def test_finalization_blocked_is_warning(self):
        event = AuditEventBuilder.finalization_blocked(room_id="r1", delta="-100.00")
        assert event.severity == AuditSeverity.WARNING
        assert event.is_user_action is True

    def test_storage_error_is_error(self):
        event = AuditEventBuilder.storage_error("delete_room", "timeout")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "timeout"


class TestSettings:
    """Tests for pydantic-settings configuration."""

    def test_defaults(self):
        assert RetentionSettings().max_age_days == 30
        assert SettlementSettings().runner_up_count == 3

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("RETENTION_MAX_AGE_DAYS", "7")
        monkeypatch.setenv("SETTLEMENT_DEFAULT_CURRENCY", "eur")
        assert RetentionSettings().max_age_days == 7
        assert SettlementSettings().default_currency == "EUR"

    def test_invalid_env_value(self, monkeypatch):
        monkeypatch.setenv("RETENTION_MAX_AGE_DAYS", "0")
        with pytest.raises(ValidationError):
            RetentionSettings()

    def test_validate_all_settings(self):
        get_settings.cache_clear()
        results = validate_all_settings()
        assert results["settlement"] is True
        assert results["retention"] is True
        assert results["store"] is True
