"""
Abstract Storage Interface

DESIGN DECISION: The room store is an external collaborator. Rooms,
members, availability, expenses and payments live in a managed
realtime datastore; this package only reads snapshots from it and
writes payment totals back.

Keeping it behind an interface allows us to:
1. Point the same flows at any backend
2. Use in-memory storage for testing
3. Keep the settlement engine free of I/O

Per-member records are keyed by room id + user id. Writes are
last-writer-wins; concurrency control belongs to the backend.
"""

from abc import ABC, abstractmethod
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


class RoomStoreInterface(ABC):
    """
    Abstract interface for room storage operations.

    Any backend must implement these methods.
    """

    @abstractmethod
    async def get_room(self, room_id: str) -> Optional[Room]:
        """
        Retrieve a room by its ID.

        Returns:
            The room if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_members(self, room_id: str) -> list[Member]:
        """Current members of a room, in join order."""
        pass

    @abstractmethod
    async def list_availabilities(self, room_id: str) -> list[AvailabilityRecord]:
        """One availability record per member who has answered."""
        pass

    @abstractmethod
    async def list_expenses(self, room_id: str) -> list[ExpenseRecord]:
        """All expenses of a room, oldest first."""
        pass

    @abstractmethod
    async def list_expense_participants(self, room_id: str) -> list[ExpenseParticipant]:
        """Participant rows for every expense in the room."""
        pass

    @abstractmethod
    async def list_room_payments(self, room_id: str) -> list[RoomPayment]:
        """At most one payment row per member."""
        pass

    @abstractmethod
    async def replace_room_payments(
        self,
        room_id: str,
        payments: list[RoomPayment],
    ) -> bool:
        """
        Overwrite the room's payment rows wholesale.

        Members missing from ``payments`` lose their row.

        Raises:
            NotFoundError: If the room doesn't exist
        """
        pass

    @abstractmethod
    async def list_rooms_created_before(self, cutoff: datetime) -> list[Room]:
        """Rooms whose ``created_at`` is strictly before ``cutoff``."""
        pass

    @abstractmethod
    async def delete_room(self, room_id: str) -> bool:
        """
        Delete a room and every record keyed by it.

        Returns:
            True if the room existed and was deleted
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event to the log."""
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """All events for one correlation ID, in chronological order."""
        pass

    @abstractmethod
    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """All events for one entity, in chronological order."""
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Most recent events, newest first."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class StoreConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
