"""
In-Memory Storage Implementation

Dict-backed stores for tests and local runs. Each read returns fresh
lists so callers can never mutate what the store holds.

TRADEOFFS:
- Nothing survives the process
- No realtime subscriptions; callers re-read after every write
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from roomsettle.models.audit import AuditEvent
from roomsettle.models.room import (
    AvailabilityRecord,
    ExpenseParticipant,
    ExpenseRecord,
    Member,
    Room,
    RoomPayment,
)
from roomsettle.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    NotFoundError,
    RoomStoreInterface,
)


class InMemoryRoomStore(RoomStoreInterface):
    """Room store held in plain dicts keyed by room id."""

    def __init__(self):
        self._rooms: dict[str, Room] = {}
        self._members: dict[str, dict[str, Member]] = {}
        self._availabilities: dict[str, dict[str, AvailabilityRecord]] = {}
        self._expenses: dict[str, list[ExpenseRecord]] = {}
        self._participants: dict[str, list[ExpenseParticipant]] = {}
        self._payments: dict[str, dict[str, RoomPayment]] = {}

    # -------------------------------------------------------------------------
    # Writes used to seed the store
    # -------------------------------------------------------------------------

    def add_room(self, room: Room) -> None:
        if room.room_id in self._rooms:
            raise DuplicateError(f"Room already exists: {room.room_id}")
        self._rooms[room.room_id] = room
        self._members[room.room_id] = {}
        self._availabilities[room.room_id] = {}
        self._expenses[room.room_id] = []
        self._participants[room.room_id] = []
        self._payments[room.room_id] = {}

    def _require_room(self, room_id: str) -> None:
        if room_id not in self._rooms:
            raise NotFoundError(f"Room not found: {room_id}")

    def add_member(self, room_id: str, member: Member) -> None:
        self._require_room(room_id)
        self._members[room_id][member.user_id] = member

    def remove_member(self, room_id: str, user_id: str) -> None:
        self._require_room(room_id)
        self._members[room_id].pop(user_id, None)

    def set_availability(self, room_id: str, record: AvailabilityRecord) -> None:
        self._require_room(room_id)
        self._availabilities[room_id][record.user_id] = record

    def add_expense(
        self,
        room_id: str,
        expense: ExpenseRecord,
        participants: list[ExpenseParticipant],
    ) -> None:
        self._require_room(room_id)
        if any(e.expense_id == expense.expense_id for e in self._expenses[room_id]):
            raise DuplicateError(f"Expense already exists: {expense.expense_id}")
        self._expenses[room_id].append(expense)
        self._participants[room_id].extend(participants)

    # -------------------------------------------------------------------------
    # RoomStoreInterface
    # -------------------------------------------------------------------------

    async def get_room(self, room_id: str) -> Optional[Room]:
        return self._rooms.get(room_id)

    async def list_members(self, room_id: str) -> list[Member]:
        return list(self._members.get(room_id, {}).values())

    async def list_availabilities(self, room_id: str) -> list[AvailabilityRecord]:
        return list(self._availabilities.get(room_id, {}).values())

    async def list_expenses(self, room_id: str) -> list[ExpenseRecord]:
        return list(self._expenses.get(room_id, []))

    async def list_expense_participants(self, room_id: str) -> list[ExpenseParticipant]:
        return list(self._participants.get(room_id, []))

    async def list_room_payments(self, room_id: str) -> list[RoomPayment]:
        return list(self._payments.get(room_id, {}).values())

    async def replace_room_payments(
        self,
        room_id: str,
        payments: list[RoomPayment],
    ) -> bool:
        self._require_room(room_id)
        self._payments[room_id] = {p.user_id: p for p in payments}
        return True

    async def list_rooms_created_before(self, cutoff: datetime) -> list[Room]:
        return [room for room in self._rooms.values() if room.created_at < cutoff]

    async def delete_room(self, room_id: str) -> bool:
        if room_id not in self._rooms:
            return False
        for table in (
            self._rooms,
            self._members,
            self._availabilities,
            self._expenses,
            self._participants,
            self._payments,
        ):
            table.pop(room_id, None)
        return True


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        return [
            e for e in self._events
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
