"""
Tests for MoodSpend

Test strategy:
1. Unit tests for individual components (models, validators, engine)
2. Flow tests for the tracker with in-memory storage
3. No files outside pytest's tmp_path, no network
"""

import pytest
from datetime import date
from decimal import Decimal

from pydantic import ValidationError

from moodspend.models.expense import (
    ExpenseRecord,
    FilterCriteria,
    Mood,
    ValidationIssue,
    ValidationResult,
)
from moodspend.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestExpenseRecord:
    """Tests for the ExpenseRecord model."""

    def test_record_creation_generates_id(self):
        """Test that a record gets an id when none is given."""
        record = ExpenseRecord(amount=Decimal("12.50"), date=date(2024, 1, 1), mood="Happy")
        assert record.id
        assert record.amount == Decimal("12.50")

    def test_ids_are_unique(self):
        """Test that generated ids differ."""
        first = ExpenseRecord(amount=Decimal("1"), date=date(2024, 1, 1), mood="Calm")
        second = ExpenseRecord(amount=Decimal("1"), date=date(2024, 1, 1), mood="Calm")
        assert first.id != second.id

    def test_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValidationError):
            ExpenseRecord(amount=Decimal("-5"), date=date(2024, 1, 1), mood="Calm")

    def test_rejects_missing_mood(self):
        """Test that mood is required."""
        with pytest.raises(ValidationError):
            ExpenseRecord(amount=Decimal("5"), date=date(2024, 1, 1))

    def test_blank_optional_fields_become_none(self):
        """Test that whitespace-only text fields are treated as absent."""
        record = ExpenseRecord(
            amount=Decimal("5"),
            date=date(2024, 1, 1),
            mood="Calm",
            category="   ",
            description="",
        )
        assert record.category is None
        assert record.description is None

    def test_record_is_immutable(self):
        """Test that records cannot be edited in place."""
        record = ExpenseRecord(amount=Decimal("5"), date=date(2024, 1, 1), mood="Calm")
        with pytest.raises(ValidationError):
            record.amount = Decimal("10")

    def test_year_month_and_weekday(self):
        """Test the derived date helpers (2024-01-07 is a Sunday)."""
        record = ExpenseRecord(amount=Decimal("5"), date=date(2024, 1, 7), mood="Calm")
        assert record.year_month == "2024-01"
        assert record.weekday_index == 0

    def test_storage_dict_uses_iso_date(self):
        """Test conversion to the persisted dict."""
        record = ExpenseRecord(
            id="abc",
            amount=Decimal("5.25"),
            date=date(2024, 3, 9),
            mood="Stressed",
        )
        data = record.to_storage_dict()
        assert data["id"] == "abc"
        assert data["date"] == "2024-03-09"
        assert Decimal(data["amount"]) == Decimal("5.25")

    def test_other_mood_labels_allowed(self):
        """Test that moods outside the form's list are accepted."""
        record = ExpenseRecord(amount=Decimal("5"), date=date(2024, 1, 1), mood="Nostalgic")
        assert record.mood == "Nostalgic"
        assert "Nostalgic" not in {m.value for m in Mood}


class TestFilterCriteria:
    """Tests for FilterCriteria."""

    def test_empty_strings_become_none(self):
        """Test that cleared widgets mean no criterion."""
        criteria = FilterCriteria(text_query="", mood=" ", year_month="")
        assert criteria.is_empty

    def test_year_month_format_enforced(self):
        """Test that year_month must look like YYYY-MM."""
        with pytest.raises(ValidationError):
            FilterCriteria(year_month="2024-13")
        with pytest.raises(ValidationError):
            FilterCriteria(year_month="January")

    def test_valid_year_month(self):
        criteria = FilterCriteria(year_month="2024-02")
        assert criteria.year_month == "2024-02"
        assert not criteria.is_empty

    def test_text_query_kept_as_typed(self):
        """Test that spaces in the search text are part of the query."""
        assert FilterCriteria(text_query=" coffee ").text_query == " coffee "
        blank = FilterCriteria(text_query=" ")
        assert blank.text_query == " "
        assert not blank.is_empty


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            is_valid=False,
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="missing",
                    message="Amount is required",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 1

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            is_valid=True,
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="invalid_format",
                    message="Not an amount; recorded as 0",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.error_count == 0
        assert len(result.warnings) == 1


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            description="Expense added",
        )
        assert event.event_type == AuditEventType.EXPENSE_ADDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.expense_added(
            expense_id="abc",
            amount="100",
            mood="Stressed",
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "expense_added"
        assert log_dict["expense_id"] == "abc"
        assert log_dict["details"]["mood"] == "Stressed"
        assert log_dict["is_user_action"] is True

    def test_import_failed_is_warning(self):
        """Test AuditEventBuilder.import_failed."""
        event = AuditEventBuilder.import_failed(reason="Invalid JSON")
        assert event.event_type == AuditEventType.IMPORT_FAILED
        assert event.severity == AuditSeverity.WARNING
        assert event.error_message == "Invalid JSON"

    def test_submission_ignored_is_debug(self):
        """Test that ignored submissions are logged quietly."""
        event = AuditEventBuilder.submission_ignored(["amount", "mood"])
        assert event.severity == AuditSeverity.DEBUG
        assert event.details["fields"] == ["amount", "mood"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
