"""Services package."""

from moodspend.services.storage import (
    CorruptDataError,
    ExpenseStorageInterface,
    InMemoryExpenseStorage,
    JsonFileExpenseStorage,
    StorageError,
)
from moodspend.services.transfer import (
    InvalidImportPayload,
    export_csv,
    parse_import,
)

__all__ = [
    # Storage services
    "CorruptDataError",
    "ExpenseStorageInterface",
    "InMemoryExpenseStorage",
    "JsonFileExpenseStorage",
    "StorageError",
    # Transfer services
    "InvalidImportPayload",
    "export_csv",
    "parse_import",
]
