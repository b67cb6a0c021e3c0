"""
Audit Models for MoodSpend

Every mutation of the expense store and every failed user action is logged.
This gives:
1. A trail of what happened to the data (adds, deletes, resets, imports)
2. Debugging information when a persisted blob turns out to be corrupt
3. A record of submissions that were silently ignored

DESIGN DECISION: Audit events are emitted, never edited.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Record lifecycle
    EXPENSE_ADDED = "expense_added"
    EXPENSE_DELETED = "expense_deleted"
    SUBMISSION_IGNORED = "submission_ignored"

    # Bulk operations
    STORE_RESET = "store_reset"
    DATA_IMPORTED = "data_imported"
    IMPORT_FAILED = "import_failed"
    DATA_EXPORTED = "data_exported"

    # Storage health
    CORRUPT_DATA_RECOVERED = "corrupt_data_recovered"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # The expense this event is about, if any
    expense_id: Optional[str] = Field(
        default=None,
        description="ID of the expense this event relates to"
    )

    # Correlation - for tracking related events of one user action
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "expense_id": self.expense_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(expense_id, amount, mood)
        event = AuditEventBuilder.import_failed(reason, correlation_id)
    """

    @staticmethod
    def expense_added(
        expense_id: str,
        amount: str,
        mood: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            expense_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense added: {amount} while {mood}",
            details={
                "amount": amount,
                "mood": mood,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(
        expense_id: str,
        found: bool,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            expense_id=expense_id,
            correlation_id=correlation_id,
            description=(
                "Expense deleted" if found else "Delete requested for unknown expense"
            ),
            details={"found": found},
            is_user_action=True,
        )

    @staticmethod
    def submission_ignored(
        missing_fields: list[str],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUBMISSION_IGNORED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description="Incomplete expense submission ignored",
            details={"fields": missing_fields},
            is_user_action=True,
        )

    @staticmethod
    def store_reset(
        removed_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_RESET,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"All expenses cleared ({removed_count} removed)",
            details={"removed_count": removed_count},
            is_user_action=True,
        )

    @staticmethod
    def data_imported(
        imported_count: int,
        replaced_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_IMPORTED,
            correlation_id=correlation_id,
            description=(
                f"Imported {imported_count} expenses, replacing {replaced_count}"
            ),
            details={
                "imported_count": imported_count,
                "replaced_count": replaced_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def import_failed(
        reason: str,
        issues: Optional[list[dict]] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_FAILED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description="Import rejected, existing data left untouched",
            error_message=reason,
            details={"issues": issues or []},
            is_user_action=True,
        )

    @staticmethod
    def data_exported(
        exported_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_EXPORTED,
            correlation_id=correlation_id,
            description=f"Exported {exported_count} expenses to CSV",
            details={"exported_count": exported_count},
            is_user_action=True,
        )

    @staticmethod
    def corrupt_data_recovered(
        storage_key: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CORRUPT_DATA_RECOVERED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Persisted data in '{storage_key}' unreadable, treating as empty",
            error_message=error_message,
            details={"storage_key": storage_key},
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
