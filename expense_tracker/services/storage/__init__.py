"""
Storage Services Package

Provides the abstract key-value interface and the local implementations.
"""

from expense_tracker.services.storage.interface import (
    CorruptDataError,
    KeyValueStore,
    StorageError,
)
from expense_tracker.services.storage.local import InMemoryStore, JsonFileStore

__all__ = [
    # Interface
    "KeyValueStore",
    # Exceptions
    "CorruptDataError",
    "StorageError",
    # Implementations
    "InMemoryStore",
    "JsonFileStore",
]
