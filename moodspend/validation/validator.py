"""
Boundary Validation

Every value that enters the tracker from the outside (the add-expense form,
an imported JSON file) passes through here exactly once. Inside the system
amounts are Decimal and dates are datetime.date, always.

DESIGN DECISION: Parsing is explicit. Nothing relies on implicit numeric
conversion. When an amount cannot be parsed, the configured AmountFallback
decides what happens:
- REJECT: the value is an error and the submission/import is refused
- ZERO: the value becomes 0 and a warning is reported

A negative amount, or one above MAX_AMOUNT, is always an error; it parses
fine, it's just wrong.

Validation NEVER silently fixes issues it doesn't have a policy for.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import ValidationError

from moodspend.models.expense import (
    MAX_AMOUNT,
    AmountFallback,
    ExpenseForm,
    ExpenseRecord,
    ValidationIssue,
    ValidationResult,
    new_expense_id,
)


REQUIRED_FIELDS = ("amount", "mood", "date")
TEXT_FIELDS = ("category", "description", "payment")


class AmountParseError(ValueError):
    """Raised when a value cannot be read as an amount."""
    pass


class IncompleteFormSubmission(Exception):
    """
    The add-expense form lacked a required field or held an invalid one.

    The tracker swallows this on purpose: an incomplete submission simply
    creates nothing.
    """

    def __init__(self, result: ValidationResult):
        self.result = result
        self.fields = [issue.field for issue in result.issues if issue.severity == "error"]
        super().__init__(f"Incomplete submission: {', '.join(self.fields)}")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_amount(raw: Any) -> Decimal:
    """
    Parse a raw amount into a finite Decimal.

    Accepts ints, floats, Decimals and numeric strings. Floats go through
    their shortest repr so 10.1 becomes Decimal("10.1"), not the binary
    expansion.

    Raises:
        AmountParseError: If the value is not a finite number
    """
    if isinstance(raw, bool):
        raise AmountParseError(f"Not an amount: {raw!r}")

    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, int):
        value = Decimal(raw)
    elif isinstance(raw, float):
        value = Decimal(repr(raw))
    elif isinstance(raw, str):
        try:
            value = Decimal(raw.strip())
        except InvalidOperation:
            raise AmountParseError(f"Not an amount: {raw!r}")
    else:
        raise AmountParseError(f"Not an amount: {raw!r}")

    if not value.is_finite():
        raise AmountParseError(f"Amount must be a finite number, got {raw!r}")
    return value


def parse_date(raw: Any) -> date:
    """
    Parse a raw date into a calendar date.

    Accepts date objects, datetimes (time dropped), ISO `YYYY-MM-DD` strings
    and ISO timestamps such as `2024-01-05T00:00:00.000Z`.

    Raises:
        ValueError: If the value is not a recognisable date
    """
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        if len(text) > 10 and text[10] in "T ":
            text = text[:10]
        return date.fromisoformat(text)
    raise ValueError(f"Not a date: {raw!r}")


class ExpenseValidator:
    """
    Validates raw expense input from the form or from an import payload.

    The same checks apply to both; import items additionally carry an id
    and the position they had in the payload.
    """

    def __init__(self, amount_fallback: AmountFallback = AmountFallback.REJECT):
        self._amount_fallback = AmountFallback(amount_fallback)

    @property
    def amount_fallback(self) -> AmountFallback:
        return self._amount_fallback

    def _check_fields(
        self,
        raw: dict[str, Any],
        record_index: Optional[int] = None,
    ) -> tuple[dict[str, Any], list[ValidationIssue]]:
        """
        Check required and text fields of one raw expense.

        Returns: (parsed_values, list_of_issues)
        """
        issues = []
        values: dict[str, Any] = {}

        def issue(field: str, issue_type: str, message: str, severity: str = "error"):
            issues.append(ValidationIssue(
                field=field,
                issue_type=issue_type,
                message=message,
                severity=severity,
                record_index=record_index,
            ))

        for field in REQUIRED_FIELDS:
            if _is_blank(raw.get(field)):
                issue(field, "missing", f"{field.capitalize()} is required")

        # Amount
        raw_amount = raw.get("amount")
        if not _is_blank(raw_amount):
            try:
                amount = parse_amount(raw_amount)
            except AmountParseError as e:
                if self._amount_fallback == AmountFallback.ZERO:
                    issue("amount", "invalid_format", f"{e}; recorded as 0", "warning")
                    values["amount"] = Decimal("0")
                else:
                    issue("amount", "invalid_format", str(e))
            else:
                if amount < 0:
                    issue("amount", "invalid_value", "Amount cannot be negative")
                elif amount > MAX_AMOUNT:
                    issue("amount", "invalid_value", f"Amount cannot exceed {MAX_AMOUNT}")
                else:
                    values["amount"] = amount

        # Date
        raw_date = raw.get("date")
        if not _is_blank(raw_date):
            try:
                values["date"] = parse_date(raw_date)
            except ValueError:
                issue("date", "invalid_format", f"Not a valid date: {raw_date!r}")

        # Mood
        raw_mood = raw.get("mood")
        if not _is_blank(raw_mood):
            if isinstance(raw_mood, str):
                values["mood"] = raw_mood.strip()
            else:
                issue("mood", "invalid_type", "Mood must be text")

        # Optional text fields
        for field in TEXT_FIELDS:
            value = raw.get(field)
            if _is_blank(value):
                values[field] = None
            elif isinstance(value, str):
                values[field] = value.strip()
            else:
                issue(field, "invalid_type", f"{field.capitalize()} must be text")

        return values, issues

    def _build(
        self,
        values: dict[str, Any],
        issues: list[ValidationIssue],
        record_index: Optional[int] = None,
    ) -> Optional[ExpenseRecord]:
        """Create the record, turning model constraint failures into issues."""
        try:
            return ExpenseRecord(**values)
        except ValidationError as e:
            for error in e.errors():
                field = str(error["loc"][0]) if error.get("loc") else "record"
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="invalid_value",
                    message=error["msg"],
                    severity="error",
                    record_index=record_index,
                ))
            return None

    def validate_form(self, form: ExpenseForm) -> tuple[Optional[ExpenseRecord], ValidationResult]:
        """
        Validate a form submission and build the record it describes.

        A fresh id is generated here; records get their identity at creation.

        Returns:
            (record or None, validation result)
        """
        values, issues = self._check_fields(form.model_dump())

        record = None
        if not any(i.severity == "error" for i in issues):
            values["id"] = new_expense_id()
            record = self._build(values, issues)

        result = ValidationResult(
            is_valid=not any(i.severity == "error" for i in issues),
            issues=issues,
        )
        return record, result

    def build_record(self, form: ExpenseForm) -> ExpenseRecord:
        """
        Build a record from a form submission.

        Raises:
            IncompleteFormSubmission: If any required field is missing or invalid
        """
        record, result = self.validate_form(form)
        if record is None:
            raise IncompleteFormSubmission(result)
        return record

    def validate_import_item(
        self,
        item: Any,
        record_index: int,
    ) -> tuple[Optional[ExpenseRecord], list[ValidationIssue]]:
        """
        Validate one element of an import payload.

        Items without an id get a new one. Ids that are numbers are kept
        as their text form.

        Returns:
            (record or None, list_of_issues)
        """
        if not isinstance(item, dict):
            return None, [ValidationIssue(
                field="record",
                issue_type="invalid_type",
                message=f"Expected an object, got {type(item).__name__}",
                severity="error",
                record_index=record_index,
            )]

        values, issues = self._check_fields(item, record_index)

        raw_id = item.get("id")
        if _is_blank(raw_id):
            values["id"] = new_expense_id()
        elif isinstance(raw_id, (str, int)) and not isinstance(raw_id, bool):
            values["id"] = str(raw_id).strip()
        else:
            issues.append(ValidationIssue(
                field="id",
                issue_type="invalid_type",
                message="Id must be text",
                severity="error",
                record_index=record_index,
            ))

        if any(i.severity == "error" for i in issues):
            return None, issues

        return self._build(values, issues, record_index), issues
