"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the expense list in a JSON file on disk for normal use
2. Use in-memory storage for testing and throwaway sessions
3. Keep the query engine and the UI decoupled from where data lives

The interface is intentionally tiny. The whole collection is small enough
that replace-all is the only write primitive a backend really needs.
"""

from abc import ABC, abstractmethod
from typing import Iterable

from moodspend.models.expense import ExpenseRecord


class ExpenseStorageInterface(ABC):
    """
    Abstract interface for expense storage operations.

    The store holds an unordered collection. Display order is imposed by
    the query engine at render time, never here.
    """

    @abstractmethod
    def load_all(self) -> list[ExpenseRecord]:
        """
        Load every persisted expense.

        Returns:
            All records, or an empty list if nothing was ever persisted

        Raises:
            CorruptDataError: If the persisted state is not a valid
                serialized record list
        """
        pass

    @abstractmethod
    def replace_all(self, records: Iterable[ExpenseRecord]) -> None:
        """
        Atomically overwrite the entire persisted collection.

        Used by reset (with an empty list) and by import.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove the persisted slot so that it reads as empty."""
        pass

    def append(self, record: ExpenseRecord) -> None:
        """
        Add one record to the persisted collection.

        Uniqueness is guaranteed by id generation, not checked here.
        """
        records = self.load_all()
        records.append(record)
        self.replace_all(records)

    def delete_by_id(self, expense_id: str) -> bool:
        """
        Remove the record with the given id.

        Returns:
            True if a record was removed, False if the id was unknown
            (in which case nothing is written)
        """
        records = self.load_all()
        for index, record in enumerate(records):
            if record.id == expense_id:
                del records[index]
                self.replace_all(records)
                return True
        return False


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptDataError(StorageError):
    """Persisted state exists but cannot be read as a list of expenses."""

    def __init__(self, storage_key: str, reason: str):
        self.storage_key = storage_key
        self.reason = reason
        super().__init__(f"Persisted data in '{storage_key}' is corrupt: {reason}")
