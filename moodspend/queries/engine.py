"""
Query/Aggregation Engine

DESIGN DECISION: Every function here is pure. It takes a list of records
(plus criteria or a key) and returns a new value. Nothing touches storage,
nothing mutates its input.

The presentation layer renders exactly what these functions return, so key
ordering is part of the contract:
- group_sum_by keeps the order in which keys are first encountered
- sum_by_date sorts its keys ascending
"""

from decimal import Decimal
from typing import Callable, Iterable, Optional, Sequence, Union

from moodspend.models.expense import (
    UNCATEGORIZED,
    ExpenseRecord,
    FilterCriteria,
    SpendTotals,
)


KeyFunc = Callable[[ExpenseRecord], object]


def _matches(record: ExpenseRecord, criteria: FilterCriteria) -> bool:
    if criteria.text_query:
        needle = criteria.text_query.lower()
        haystacks = (record.description or "", record.category or "")
        if not any(needle in text.lower() for text in haystacks):
            return False

    if criteria.mood and record.mood != criteria.mood:
        return False

    if criteria.year_month and record.year_month != criteria.year_month:
        return False

    return True


def filter_expenses(
    records: Iterable[ExpenseRecord],
    criteria: Optional[FilterCriteria] = None,
) -> list[ExpenseRecord]:
    """
    Keep the records that satisfy every present criterion.

    - text_query: case-insensitive substring of description OR category
    - mood: exact match
    - year_month: exact match against the date truncated to YYYY-MM

    Input order is preserved.
    """
    if criteria is None or criteria.is_empty:
        return list(records)
    return [record for record in records if _matches(record, criteria)]


def sort_by_date_descending(records: Iterable[ExpenseRecord]) -> list[ExpenseRecord]:
    """Most recent first; records on the same date keep their original order."""
    return sorted(records, key=lambda record: record.date, reverse=True)


def _key_func(key: Union[str, KeyFunc]) -> KeyFunc:
    if callable(key):
        return key
    return lambda record: getattr(record, key)


def group_sum_by(
    records: Iterable[ExpenseRecord],
    key: Union[str, KeyFunc],
) -> dict[str, Decimal]:
    """
    Sum amounts per distinct key.

    Args:
        records: Records to aggregate
        key: A field name ("mood", "category", ...) or a function of a record

    Returns:
        {key: summed amount}, in order of first occurrence. Missing or
        falsy keys are grouped under "Uncategorized".
    """
    get_key = _key_func(key)
    totals: dict[str, Decimal] = {}
    for record in records:
        group = get_key(record) or UNCATEGORIZED
        group = str(group)
        totals[group] = totals.get(group, Decimal("0")) + record.amount
    return totals


def sum_by_date(records: Iterable[ExpenseRecord]) -> dict[str, Decimal]:
    """Daily spend keyed by ISO date string, sorted ascending by date."""
    by_date = group_sum_by(records, lambda record: record.date.isoformat())
    return {day: by_date[day] for day in sorted(by_date)}


def compute_totals(records: Sequence[ExpenseRecord]) -> SpendTotals:
    """Grand total of amounts and number of records."""
    return SpendTotals(
        total=sum((record.amount for record in records), Decimal("0")),
        count=len(records),
    )


def top_key(grouped: dict[str, Decimal]) -> Optional[tuple[str, Decimal]]:
    """Entry with the largest sum; the earliest key wins a tie."""
    if not grouped:
        return None
    return max(grouped.items(), key=lambda item: item[1])


def top_mood_by_spend(records: Iterable[ExpenseRecord]) -> Optional[tuple[str, Decimal]]:
    """
    The mood with the highest total spend.

    Returns:
        (mood, total) or None if there are no records
    """
    return top_key(group_sum_by(records, "mood"))


def average_amount(records: Iterable[ExpenseRecord], mood: str) -> Decimal:
    """Average ticket size for one mood; 0 when it has no records."""
    amounts = [record.amount for record in records if record.mood == mood]
    if not amounts:
        return Decimal("0")
    return sum(amounts, Decimal("0")) / len(amounts)
