"""Boundary validation package."""

from moodspend.validation.validator import (
    AmountParseError,
    ExpenseValidator,
    IncompleteFormSubmission,
    parse_amount,
    parse_date,
)

__all__ = [
    "AmountParseError",
    "ExpenseValidator",
    "IncompleteFormSubmission",
    "parse_amount",
    "parse_date",
]
