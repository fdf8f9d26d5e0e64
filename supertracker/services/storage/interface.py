"""
Abstract Storage Interface

DESIGN DECISION: Settings persistence goes through a tiny key-value
interface, the same shape as browser local storage. This allows us to:
1. Use a JSON file on disk for the desktop/Streamlit front end
2. Use in-memory storage for testing
3. Swap in something else later without touching the settings logic

Values are strings. Serialization is the caller's job.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for key-value storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any existing value.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if the key existed
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptStorageError(StorageError):
    """Backing data exists but cannot be decoded."""
    pass
