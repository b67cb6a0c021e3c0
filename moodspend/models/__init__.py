"""
Data Models Package

This package contains all Pydantic models used in MoodSpend.
All data flowing through the system must conform to these schemas.
"""

from moodspend.models.expense import (
    MAX_AMOUNT,
    UNCATEGORIZED,
    AmountFallback,
    ExpenseForm,
    ExpenseRecord,
    FilterCriteria,
    InsightReport,
    Mood,
    PaymentMethod,
    SpendTotals,
    ValidationIssue,
    ValidationResult,
    new_expense_id,
)
from moodspend.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "MAX_AMOUNT",
    "UNCATEGORIZED",
    "AmountFallback",
    "ExpenseForm",
    "ExpenseRecord",
    "FilterCriteria",
    "InsightReport",
    "Mood",
    "PaymentMethod",
    "SpendTotals",
    "ValidationIssue",
    "ValidationResult",
    "new_expense_id",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
