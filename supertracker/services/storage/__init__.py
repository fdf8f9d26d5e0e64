"""
Storage Services Package

Provides the key-value storage interface and its implementations.
The JSON file backend is the default; designed to be swappable.
"""

from supertracker.services.storage.interface import (
    CorruptStorageError,
    KeyValueStorageInterface,
    StorageError,
)
from supertracker.services.storage.json_file import JsonFileKeyValueStorage
from supertracker.services.storage.memory import InMemoryKeyValueStorage

__all__ = [
    # Interfaces
    "KeyValueStorageInterface",
    # Exceptions
    "CorruptStorageError",
    "StorageError",
    # Implementations
    "InMemoryKeyValueStorage",
    "JsonFileKeyValueStorage",
]
