"""Services package."""

from supertracker.services.storage import (
    CorruptStorageError,
    InMemoryKeyValueStorage,
    JsonFileKeyValueStorage,
    KeyValueStorageInterface,
    StorageError,
)

__all__ = [
    # Storage services
    "CorruptStorageError",
    "InMemoryKeyValueStorage",
    "JsonFileKeyValueStorage",
    "KeyValueStorageInterface",
    "StorageError",
]
