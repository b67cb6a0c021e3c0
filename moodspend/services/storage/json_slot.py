"""
JSON Slot Storage Implementation

The whole expense list lives in one named slot as a JSON array of objects,
one object per expense. A missing slot reads as an empty array.

Two backends share the encoding:
- JsonFileExpenseStorage keeps the slot as `<data_dir>/<storage_key>.json`
- InMemoryExpenseStorage keeps the slot as a string attribute

TRADEOFFS:
- Every write rewrites the whole slot (fine at home-use scale)
- No locking; a single writer is assumed
- Amounts are written as JSON strings so Decimal values survive exactly;
  numeric amounts are still accepted when reading
"""

from abc import abstractmethod
from pathlib import Path
from typing import Iterable, Optional

from pydantic import TypeAdapter, ValidationError

from moodspend.models.expense import ExpenseRecord
from moodspend.services.storage.interface import (
    CorruptDataError,
    ExpenseStorageInterface,
    StorageError,
)


_RECORD_LIST = TypeAdapter(list[ExpenseRecord])


def serialize_records(records: Iterable[ExpenseRecord]) -> str:
    """Encode records as the JSON array kept in the slot."""
    return _RECORD_LIST.dump_json(list(records), indent=2).decode("utf-8")


def deserialize_records(raw: str, storage_key: str) -> list[ExpenseRecord]:
    """
    Decode the JSON array kept in the slot.

    Raises:
        CorruptDataError: If the text is not JSON, not an array, or any
            element is not a valid expense
    """
    try:
        return _RECORD_LIST.validate_json(raw)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ())) or "root"
        raise CorruptDataError(storage_key, f"{location}: {first['msg']}") from e


class SlotExpenseStorage(ExpenseStorageInterface):
    """Expense storage backed by a single serialized slot."""

    def __init__(self, storage_key: str):
        self._storage_key = storage_key

    @property
    def storage_key(self) -> str:
        return self._storage_key

    @abstractmethod
    def _read_slot(self) -> Optional[str]:
        """Return the raw slot contents, or None if the slot is absent."""
        pass

    @abstractmethod
    def _write_slot(self, raw: str) -> None:
        pass

    def load_all(self) -> list[ExpenseRecord]:
        raw = self._read_slot()
        if raw is None:
            return []
        return deserialize_records(raw, self._storage_key)

    def replace_all(self, records: Iterable[ExpenseRecord]) -> None:
        self._write_slot(serialize_records(records))


class JsonFileExpenseStorage(SlotExpenseStorage):
    """
    Slot kept as a JSON file on local disk.

    Writes go to a temporary sibling file first and are then moved over
    the slot, so a crash never leaves a half-written array behind.
    """

    def __init__(self, data_dir: Path, storage_key: str):
        super().__init__(storage_key)
        self._path = Path(data_dir) / f"{storage_key}.json"

    @property
    def path(self) -> Path:
        return self._path

    def _read_slot(self) -> Optional[str]:
        try:
            return self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise CorruptDataError(self._storage_key, f"not UTF-8 text: {e}") from e
        except OSError as e:
            raise StorageError(f"Failed to read {self._path}: {e}") from e

    def _write_slot(self, raw: str) -> None:
        tmp = self._path.with_suffix(".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(raw, encoding="utf-8")
            tmp.replace(self._path)
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}") from e

    def clear(self) -> None:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to remove {self._path}: {e}") from e


class InMemoryExpenseStorage(SlotExpenseStorage):
    """Slot kept in process memory. Used by tests and ephemeral sessions."""

    def __init__(
        self,
        storage_key: str = "emotional_expenses_v1",
        raw: Optional[str] = None,
    ):
        super().__init__(storage_key)
        self._raw = raw

    @property
    def raw(self) -> Optional[str]:
        """The serialized slot, exactly as persisted."""
        return self._raw

    def _read_slot(self) -> Optional[str]:
        return self._raw

    def _write_slot(self, raw: str) -> None:
        self._raw = raw

    def clear(self) -> None:
        self._raw = None
