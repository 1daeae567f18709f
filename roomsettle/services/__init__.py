"""Services package."""

from roomsettle.services.storage import (
    AuditStorageInterface,
    DuplicateError,
    InMemoryAuditStorage,
    InMemoryRoomStore,
    NotFoundError,
    RoomStoreInterface,
    StorageError,
    StoreConnectionError,
)

__all__ = [
    "AuditStorageInterface",
    "DuplicateError",
    "InMemoryAuditStorage",
    "InMemoryRoomStore",
    "NotFoundError",
    "RoomStoreInterface",
    "StorageError",
    "StoreConnectionError",
]
