"""
Storage Services Package

Provides the abstract expense store and its JSON slot implementations
(a file on disk, or an in-memory string).
"""

from moodspend.services.storage.interface import (
    CorruptDataError,
    ExpenseStorageInterface,
    StorageError,
)
from moodspend.services.storage.json_slot import (
    InMemoryExpenseStorage,
    JsonFileExpenseStorage,
    SlotExpenseStorage,
    deserialize_records,
    serialize_records,
)

__all__ = [
    # Interface
    "ExpenseStorageInterface",
    # Exceptions
    "CorruptDataError",
    "StorageError",
    # JSON slot implementations
    "InMemoryExpenseStorage",
    "JsonFileExpenseStorage",
    "SlotExpenseStorage",
    "deserialize_records",
    "serialize_records",
]
