"""Query/aggregation package."""

from moodspend.queries.engine import (
    average_amount,
    compute_totals,
    filter_expenses,
    group_sum_by,
    sort_by_date_descending,
    sum_by_date,
    top_key,
    top_mood_by_spend,
)
from moodspend.queries.insights import (
    MIN_RECORDS_FOR_INSIGHTS,
    NOT_ENOUGH_DATA,
    build_insight_report,
    derive_insights,
    peak_weekday,
)

__all__ = [
    "average_amount",
    "compute_totals",
    "filter_expenses",
    "group_sum_by",
    "sort_by_date_descending",
    "sum_by_date",
    "top_key",
    "top_mood_by_spend",
    "MIN_RECORDS_FOR_INSIGHTS",
    "NOT_ENOUGH_DATA",
    "build_insight_report",
    "derive_insights",
    "peak_weekday",
]
