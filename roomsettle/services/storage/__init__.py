"""
Storage Services Package

Provides the abstract room store and audit interfaces, plus in-memory
implementations. Production backends implement the same interfaces.
"""

from roomsettle.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    NotFoundError,
    RoomStoreInterface,
    StorageError,
    StoreConnectionError,
)
from roomsettle.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryRoomStore,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "RoomStoreInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    "StoreConnectionError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryRoomStore",
]
