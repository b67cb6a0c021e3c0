"""
Core Data Models for MoodSpend

These models define the schemas for everything flowing through the tracker:
1. ExpenseRecord - the single persisted entity
2. ExpenseForm - raw, untrusted form input before parsing
3. FilterCriteria - what the user narrowed the view down to
4. Validation and insight result models

DESIGN DECISION: Dates are stored as datetime.date and amounts as Decimal.
Parsing happens once at the boundary (form, import, persisted blob) so the
query engine never has to guess what a value means.
"""

import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


UNCATEGORIZED = "Uncategorized"

# Largest amount a single expense may carry
MAX_AMOUNT = Decimal("999999999999.99")


# =============================================================================
# ENUMS - Finite set of suggested values
# =============================================================================

class Mood(str, Enum):
    """
    Moods offered on the expense form.

    Records may carry other labels (e.g. from an import); these are only
    the suggestions shown to the user.
    """
    HAPPY = "Happy"
    CALM = "Calm"
    STRESSED = "Stressed"
    SAD = "Sad"
    ANXIOUS = "Anxious"
    EXCITED = "Excited"
    BORED = "Bored"
    TIRED = "Tired"


class PaymentMethod(str, Enum):
    """Payment methods offered on the expense form."""
    UPI = "UPI"
    CASH = "Cash"
    CARD = "Card"
    NET_BANKING = "Net Banking"
    OTHER = "Other"


class AmountFallback(str, Enum):
    """
    What to do with an amount that cannot be parsed as a number.

    REJECT: the submission or import fails
    ZERO: the amount is recorded as 0 and a warning is raised
    """
    REJECT = "reject"
    ZERO = "zero"


def new_expense_id() -> str:
    """Generate an opaque, unique expense id."""
    return str(uuid4())


# =============================================================================
# CORE EXPENSE MODEL
# =============================================================================

class ExpenseRecord(BaseModel):
    """
    A single expense tagged with the mood it was made in.

    Records are immutable once created; there is no update-in-place.
    Optional text fields are normalised so that blank strings become None.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        default_factory=new_expense_id,
        min_length=1,
        description="Opaque unique expense id"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        le=MAX_AMOUNT,
        allow_inf_nan=False,
        description="Amount spent"
    )
    date: datetime.date = Field(
        ...,
        description="Calendar date of the expense"
    )
    category: Optional[str] = Field(
        default=None,
        max_length=100,
        description="Free-text category"
    )
    description: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Free-text description"
    )
    payment: Optional[str] = Field(
        default=None,
        max_length=50,
        description="Payment method label"
    )
    mood: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Mood at the time of spending"
    )

    @field_validator('category', 'description', 'payment', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        """Treat empty or whitespace-only text as absent."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def year_month(self) -> str:
        """The record's date truncated to YYYY-MM."""
        return self.date.strftime("%Y-%m")

    @property
    def weekday_index(self) -> int:
        """Day of week with 0=Sunday .. 6=Saturday."""
        return (self.date.weekday() + 1) % 7

    def to_storage_dict(self) -> dict:
        """Convert to the JSON-compatible dict kept in the persisted slot."""
        return self.model_dump(mode="json")


class ExpenseForm(BaseModel):
    """
    Raw input from the add-expense form.

    CRITICAL: Nothing here is trusted. Every field is a string (or a value
    straight from a widget) and goes through ExpenseValidator before an
    ExpenseRecord is created.
    """
    amount: Any = None
    date: Any = None
    category: Optional[str] = None
    description: Optional[str] = None
    payment: Optional[str] = None
    mood: Optional[str] = None


class FilterCriteria(BaseModel):
    """
    Criteria used to narrow the displayed expenses.

    Absent or empty criteria always match. The text query is matched as
    typed, surrounding spaces included.
    """

    text_query: Optional[str] = Field(
        default=None,
        description="Case-insensitive substring of description or category"
    )
    mood: Optional[str] = Field(
        default=None,
        description="Exact mood label"
    )
    year_month: Optional[str] = Field(
        default=None,
        pattern=r"^\d{4}-(0[1-9]|1[0-2])$",
        description="Month in YYYY-MM form"
    )

    @field_validator('text_query', mode='before')
    @classmethod
    def empty_query_to_none(cls, v):
        if v == "":
            return None
        return v

    @field_validator('mood', 'year_month', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @property
    def is_empty(self) -> bool:
        return not (self.text_query or self.mood or self.year_month)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'duplicate')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    record_index: Optional[int] = Field(
        default=None,
        ge=0,
        description="Position of the offending record in an import payload"
    )


class ValidationResult(BaseModel):
    """
    Result of validating one form submission or one import payload.

    Warnings don't block; errors do.
    """

    is_valid: bool = Field(
        ...,
        description="Overall validation result"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "warning"]


# =============================================================================
# AGGREGATION RESULT MODELS
# =============================================================================

class SpendTotals(BaseModel):
    """Grand total and number of records."""

    total: Decimal = Field(default=Decimal("0"))
    count: int = Field(default=0, ge=0)


class InsightReport(BaseModel):
    """
    Everything derived while composing insights.

    When there is not enough data only `messages` is populated and
    `enough_data` is False.
    """

    enough_data: bool
    top_mood: Optional[str] = None
    mood_averages: dict[str, Decimal] = Field(default_factory=dict)
    peak_weekday: Optional[int] = Field(default=None, ge=0, le=6)
    peak_weekday_name: Optional[str] = None
    messages: list[str] = Field(default_factory=list)
