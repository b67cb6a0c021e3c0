"""
JSON Import

An import file is a JSON array of expense objects. A successful import
replaces the whole store; a failed one leaves it untouched, so parsing is
all-or-nothing: either every element becomes a valid ExpenseRecord or
InvalidImportPayload is raised.
"""

import json
from typing import Optional

from moodspend.models.expense import ExpenseRecord, ValidationIssue
from moodspend.validation import ExpenseValidator


class InvalidImportPayload(Exception):
    """The import text is not a JSON array of valid expenses."""

    def __init__(self, message: str, issues: Optional[list[ValidationIssue]] = None):
        self.message = message
        self.issues = issues or []
        super().__init__(message)

    @property
    def issue_dicts(self) -> list[dict]:
        return [issue.model_dump() for issue in self.issues]


def parse_import(text: str, validator: Optional[ExpenseValidator] = None) -> list[ExpenseRecord]:
    """
    Parse an import payload into records.

    Args:
        text: Raw JSON text
        validator: Validator applying the amount fallback policy

    Returns:
        The records, in payload order

    Raises:
        InvalidImportPayload: If the text is not JSON, the top level is not
            an array, any element is invalid, or ids repeat
    """
    validator = validator or ExpenseValidator()

    try:
        payload = json.loads(text)
    except (ValueError, TypeError, RecursionError) as e:
        # ValueError covers JSONDecodeError and oversized integer literals
        raise InvalidImportPayload(f"Invalid JSON: {e}") from e

    if not isinstance(payload, list):
        raise InvalidImportPayload("Invalid JSON format: expected an array of expenses")

    records = []
    issues = []
    seen_ids: set[str] = set()

    for index, item in enumerate(payload):
        record, item_issues = validator.validate_import_item(item, index)
        issues.extend(item_issues)
        if record is None:
            continue
        if record.id in seen_ids:
            issues.append(ValidationIssue(
                field="id",
                issue_type="duplicate",
                message=f"Duplicate id: {record.id}",
                severity="error",
                record_index=index,
            ))
            continue
        seen_ids.add(record.id)
        records.append(record)

    errors = [issue for issue in issues if issue.severity == "error"]
    if errors:
        first = errors[0]
        raise InvalidImportPayload(
            f"{len(errors)} invalid field(s); first at item {first.record_index}: {first.message}",
            issues,
        )

    return records
