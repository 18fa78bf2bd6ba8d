"""
Abstract Storage Interface

DESIGN DECISION: All persistence goes through a tiny key-value interface.
Each namespace (records, chat sessions, settings, theme) is one JSON
document stored under its own key. This allows us to:
1. Keep the data on local disk with no database setup
2. Use in-memory storage for testing
3. Swap in an indexed store later without touching business logic

The interface is intentionally minimal. Services read the whole document,
change it, and write the whole document back.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """
    Abstract interface for blob storage.

    Values are opaque strings (serialized JSON). The store never
    inspects them.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under key.

        Returns:
            The stored string, or None if the key was never written
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Replace the value stored under key.

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

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptDataError(StorageError):
    """A stored value could not be decoded."""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"Stored value for {key!r} is unreadable: {message}")
