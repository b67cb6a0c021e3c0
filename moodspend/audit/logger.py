"""
Audit Logger

DESIGN DECISION: Every mutation of the expense store is logged.
This provides:
1. Traceability of adds, deletes, resets and imports
2. Debugging capability when persisted data turns out to be corrupt
3. Evidence of submissions that were ignored

The audit logger:
- Writes structured JSON lines through structlog
- Gracefully handles failures (never crashes the app if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
from typing import Callable, Optional
from uuid import UUID, uuid4

import structlog

from moodspend.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output to stderr at the given level."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper(), logging.INFO))


_LEVELS = {
    AuditSeverity.DEBUG: "debug",
    AuditSeverity.INFO: "info",
    AuditSeverity.WARNING: "warning",
    AuditSeverity.ERROR: "error",
}


class AuditLogger:
    """
    Central audit logging service.

    Keeps the events it emitted during this session so the UI can show a
    short history.
    """

    def __init__(self, history_size: int = 50):
        self._logger = structlog.get_logger("moodspend.audit")
        self._history: list[AuditEvent] = []
        self._history_size = history_size

    @property
    def history(self) -> list[AuditEvent]:
        """Events logged in this session, oldest first."""
        return list(self._history)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written, False if logging failed.
        """
        self._history.append(event)
        del self._history[:-self._history_size]

        try:
            method = getattr(self._logger, _LEVELS[event.severity])
            method("audit_event", **event.to_log_dict())
        except Exception as e:
            # Logging must never take the app down with it
            logging.getLogger(__name__).error("audit_log_failed: %s", e)
            return False
        return True

    def _emit(self, build: Callable[..., AuditEvent], **kwargs) -> bool:
        """Build an event and log it; a build failure is logged, not raised."""
        try:
            event = build(**kwargs)
        except Exception as e:
            logging.getLogger(__name__).error(
                "audit_event_build_failed: %s: %s", build.__name__, e
            )
            return False
        return self.log(event)

    def log_expense_added(
        self,
        expense_id: str,
        amount: str,
        mood: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a new expense."""
        self._emit(
            AuditEventBuilder.expense_added,
            expense_id=expense_id,
            amount=amount,
            mood=mood,
            correlation_id=correlation_id,
        )

    def log_expense_deleted(
        self,
        expense_id: str,
        found: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._emit(
            AuditEventBuilder.expense_deleted,
            expense_id=expense_id,
            found=found,
            correlation_id=correlation_id,
        )

    def log_submission_ignored(
        self,
        fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._emit(
            AuditEventBuilder.submission_ignored,
            missing_fields=fields,
            correlation_id=correlation_id,
        )

    def log_store_reset(
        self,
        removed_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._emit(
            AuditEventBuilder.store_reset,
            removed_count=removed_count,
            correlation_id=correlation_id,
        )

    def log_data_imported(
        self,
        imported_count: int,
        replaced_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._emit(
            AuditEventBuilder.data_imported,
            imported_count=imported_count,
            replaced_count=replaced_count,
            correlation_id=correlation_id,
        )

    def log_import_failed(
        self,
        reason: str,
        issues: Optional[list[dict]] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._emit(
            AuditEventBuilder.import_failed,
            reason=reason,
            issues=issues,
            correlation_id=correlation_id,
        )

    def log_data_exported(
        self,
        exported_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._emit(
            AuditEventBuilder.data_exported,
            exported_count=exported_count,
            correlation_id=correlation_id,
        )

    def log_corrupt_data_recovered(
        self,
        storage_key: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log that unreadable persisted data was treated as empty."""
        self._emit(
            AuditEventBuilder.corrupt_data_recovered,
            storage_key=storage_key,
            error_message=error_message,
            correlation_id=correlation_id,
        )

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self._emit(
            AuditEventBuilder.system_error,
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g., an import).
    """
    return uuid4()
