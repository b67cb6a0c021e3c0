"""
Expense Tracker Orchestrator

This module ties together the store, the validator and the audit logger,
and defines every user-facing operation:
1. Add expense (form → validate → append)
2. Delete expense by id
3. Reset (wipe everything)
4. Export CSV / Import JSON (replace everything)
5. Dashboard (load → filter → aggregate → view model)

DESIGN DECISION: No operation here is fatal. A corrupt persisted blob is
logged and treated as empty (when recover_corrupt_data is on), a bad import
becomes a failed ImportOutcome, and an incomplete form creates nothing.
"""

from typing import Optional, Sequence, Union
from uuid import UUID

from pydantic import BaseModel, Field

from moodspend.audit import AuditLogger, create_correlation_id
from moodspend.config import AppSettings, Settings, get_settings
from moodspend.models.expense import (
    ExpenseForm,
    ExpenseRecord,
    FilterCriteria,
    ValidationIssue,
)
from moodspend.presentation import DashboardView, build_dashboard
from moodspend.services.storage import (
    CorruptDataError,
    ExpenseStorageInterface,
    InMemoryExpenseStorage,
    JsonFileExpenseStorage,
    StorageError,
)
from moodspend.services.transfer import InvalidImportPayload, export_csv, parse_import
from moodspend.validation import ExpenseValidator, IncompleteFormSubmission


class ImportOutcome(BaseModel):
    """What happened to one import attempt, ready to show to the user."""

    success: bool
    message: str
    imported_count: int = Field(default=0, ge=0)
    replaced_count: int = Field(default=0, ge=0)
    issues: list[ValidationIssue] = Field(default_factory=list)


class ExpenseTracker:
    """
    The application service behind the UI.

    Holds no record state of its own: every call reads the store afresh,
    so a re-render always shows what is persisted.
    """

    def __init__(
        self,
        storage: ExpenseStorageInterface,
        settings: Optional[AppSettings] = None,
        validator: Optional[ExpenseValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._settings = settings or get_settings().app
        self._validator = validator or ExpenseValidator(self._settings.amount_fallback)
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def settings(self) -> AppSettings:
        return self._settings

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    def _recover(self, error: CorruptDataError, correlation_id: Optional[UUID] = None) -> None:
        """Log a corrupt blob, or re-raise it when recovery is switched off."""
        if not self._settings.recover_corrupt_data:
            raise error
        self._audit_logger.log_corrupt_data_recovered(
            storage_key=error.storage_key,
            error_message=error.reason,
            correlation_id=correlation_id,
        )

    def _log_storage_error(
        self,
        action: str,
        error: StorageError,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._audit_logger.log_error(
            error_type=type(error).__name__,
            error_message=str(error),
            details={"action": action},
            correlation_id=correlation_id,
        )

    def load_expenses(self, correlation_id: Optional[UUID] = None) -> list[ExpenseRecord]:
        """
        Load every expense.

        Raises:
            CorruptDataError: Only when recover_corrupt_data is disabled
            StorageError: If the store cannot be read at all
        """
        try:
            try:
                return self._storage.load_all()
            except CorruptDataError as e:
                self._recover(e, correlation_id)
                return []
        except StorageError as e:
            self._log_storage_error("load", e, correlation_id)
            raise

    def add_expense(
        self,
        form: ExpenseForm,
        correlation_id: Optional[UUID] = None,
    ) -> Optional[ExpenseRecord]:
        """
        Create and persist an expense from form input.

        Returns:
            The new record, or None if the submission was incomplete
            (silently ignored: nothing is created and no error is raised)

        Raises:
            StorageError: If the record could not be written
        """
        try:
            record = self._validator.build_record(form)
        except IncompleteFormSubmission as e:
            self._audit_logger.log_submission_ignored(e.fields, correlation_id)
            return None

        try:
            try:
                self._storage.append(record)
            except CorruptDataError as e:
                self._recover(e, correlation_id)
                self._storage.replace_all([record])
        except StorageError as e:
            self._log_storage_error("add", e, correlation_id)
            raise

        self._audit_logger.log_expense_added(
            expense_id=record.id,
            amount=str(record.amount),
            mood=record.mood,
            correlation_id=correlation_id,
        )
        return record

    def delete_expense(self, expense_id: str, correlation_id: Optional[UUID] = None) -> bool:
        """
        Delete an expense by id.

        Returns:
            True if removed; False if no such id existed (nothing changes)
        """
        try:
            try:
                found = self._storage.delete_by_id(expense_id)
            except CorruptDataError as e:
                self._recover(e, correlation_id)
                found = False
        except StorageError as e:
            self._log_storage_error("delete", e, correlation_id)
            raise

        self._audit_logger.log_expense_deleted(expense_id, found, correlation_id)
        return found

    def reset(self, correlation_id: Optional[UUID] = None) -> int:
        """
        Wipe all expenses.

        Returns:
            How many expenses were removed
        """
        removed = len(self.load_expenses(correlation_id))
        try:
            self._storage.clear()
        except StorageError as e:
            self._log_storage_error("reset", e, correlation_id)
            raise
        self._audit_logger.log_store_reset(removed, correlation_id)
        return removed

    def export_csv(self, records: Optional[Sequence[ExpenseRecord]] = None) -> str:
        """
        Export the full store (not the filtered view) as CSV text.

        Args:
            records: Already loaded records; loaded from the store if omitted
        """
        if records is None:
            records = self.load_expenses()
        return export_csv(records)

    def record_export(self, exported_count: int, correlation_id: Optional[UUID] = None) -> None:
        """Note that the user downloaded an export of `exported_count` expenses."""
        self._audit_logger.log_data_exported(exported_count, correlation_id)

    def import_json(
        self,
        payload: Union[str, bytes],
        correlation_id: Optional[UUID] = None,
    ) -> ImportOutcome:
        """
        Replace every expense with the contents of a JSON import.

        The existing store is left untouched unless the whole payload is valid.
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            if isinstance(payload, bytes):
                if len(payload) > self._settings.max_import_size_bytes:
                    raise InvalidImportPayload(
                        f"File is larger than {self._settings.max_import_size_mb} MB"
                    )
                try:
                    payload = payload.decode("utf-8-sig")
                except UnicodeDecodeError as e:
                    raise InvalidImportPayload(f"File is not UTF-8 text: {e}") from e
            records = parse_import(payload, self._validator)
        except InvalidImportPayload as e:
            self._audit_logger.log_import_failed(e.message, e.issue_dicts, correlation_id)
            return ImportOutcome(
                success=False,
                message=f"Import failed: {e.message}",
                issues=e.issues,
            )

        try:
            replaced = len(self.load_expenses(correlation_id))
            try:
                self._storage.replace_all(records)
            except StorageError as e:
                self._log_storage_error("import", e, correlation_id)
                raise
        except StorageError as e:
            self._audit_logger.log_import_failed(str(e), correlation_id=correlation_id)
            return ImportOutcome(success=False, message=f"Import failed: {e}")

        self._audit_logger.log_data_imported(len(records), replaced, correlation_id)

        return ImportOutcome(
            success=True,
            message="Import successful!",
            imported_count=len(records),
            replaced_count=replaced,
        )

    def dashboard(
        self,
        criteria: Optional[FilterCriteria] = None,
        records: Optional[Sequence[ExpenseRecord]] = None,
    ) -> DashboardView:
        """
        Build the view model for the current records and filters.

        Args:
            criteria: Active filters; None shows everything
            records: Already loaded records; loaded from the store if omitted
        """
        if records is None:
            records = self.load_expenses()
        return build_dashboard(
            records,
            criteria,
            currency_symbol=self._settings.currency_symbol,
            min_records_for_insights=self._settings.min_records_for_insights,
        )


def create_storage(settings: Optional[Settings] = None) -> ExpenseStorageInterface:
    """Build the storage backend named in the storage settings."""
    storage_settings = (settings or get_settings()).storage
    if storage_settings.backend == "memory":
        return InMemoryExpenseStorage(storage_settings.storage_key)
    return JsonFileExpenseStorage(storage_settings.data_dir, storage_settings.storage_key)


def create_tracker(settings: Optional[Settings] = None) -> ExpenseTracker:
    """
    Factory function to create the tracker from configuration.

    Args:
        settings: Root settings; defaults to the cached get_settings()
    """
    settings = settings or get_settings()
    return ExpenseTracker(
        storage=create_storage(settings),
        settings=settings.app,
    )
