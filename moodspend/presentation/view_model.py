"""
Dashboard View Model

Everything the UI draws is computed here from two inputs: the full record
list and the current filter criteria. The Streamlit page only lays the
result out; it never aggregates on its own.
"""

from decimal import Decimal
from typing import Optional, Sequence

from pydantic import BaseModel, Field

from moodspend.formatting import format_display_date, format_money
from moodspend.models.expense import ExpenseRecord, FilterCriteria
from moodspend.queries import (
    build_insight_report,
    compute_totals,
    filter_expenses,
    group_sum_by,
    sort_by_date_descending,
    sum_by_date,
    top_mood_by_spend,
)
from moodspend.queries.insights import MIN_RECORDS_FOR_INSIGHTS


PLACEHOLDER = "-"
NO_TOP_MOOD = "–"


class ExpenseRow(BaseModel):
    """One formatted table row."""

    id: str
    date: str
    amount: str
    category: str
    description: str
    payment: str
    mood: str


class ChartSeries(BaseModel):
    """Labels and values for one chart, in display order."""

    labels: list[str] = Field(default_factory=list)
    values: list[float] = Field(default_factory=list)

    @classmethod
    def from_mapping(cls, mapping: dict[str, Decimal]) -> "ChartSeries":
        return cls(
            labels=list(mapping.keys()),
            values=[float(value) for value in mapping.values()],
        )

    @property
    def is_empty(self) -> bool:
        return not self.labels


class DashboardView(BaseModel):
    """Everything one render of the dashboard needs."""

    criteria: FilterCriteria
    rows: list[ExpenseRow] = Field(default_factory=list)
    total: Decimal = Decimal("0")
    total_label: str
    count: int = 0
    top_mood_label: str = NO_TOP_MOOD
    insights: list[str] = Field(default_factory=list)
    mood_chart: ChartSeries = Field(default_factory=ChartSeries)
    time_chart: ChartSeries = Field(default_factory=ChartSeries)
    category_chart: ChartSeries = Field(default_factory=ChartSeries)


def to_row(record: ExpenseRecord, currency_symbol: str = "₹") -> ExpenseRow:
    """Format a record for the expenses table."""
    return ExpenseRow(
        id=record.id,
        date=format_display_date(record.date),
        amount=format_money(record.amount, currency_symbol),
        category=record.category or PLACEHOLDER,
        description=record.description or PLACEHOLDER,
        payment=record.payment or PLACEHOLDER,
        mood=record.mood,
    )


def build_dashboard(
    records: Sequence[ExpenseRecord],
    criteria: Optional[FilterCriteria] = None,
    currency_symbol: str = "₹",
    min_records_for_insights: int = MIN_RECORDS_FOR_INSIGHTS,
) -> DashboardView:
    """
    Build the dashboard for the given records and filters.

    Stats, insights and charts all describe the filtered records.
    """
    criteria = criteria or FilterCriteria()
    items = filter_expenses(records, criteria)

    totals = compute_totals(items)
    top = top_mood_by_spend(items)
    top_label = (
        f"{top[0]} · {format_money(top[1], currency_symbol, places=0)}"
        if top else NO_TOP_MOOD
    )

    report = build_insight_report(items, currency_symbol, min_records_for_insights)

    return DashboardView(
        criteria=criteria,
        rows=[to_row(record, currency_symbol) for record in sort_by_date_descending(items)],
        total=totals.total,
        total_label=format_money(totals.total, currency_symbol),
        count=totals.count,
        top_mood_label=top_label,
        insights=report.messages,
        mood_chart=ChartSeries.from_mapping(group_sum_by(items, "mood")),
        time_chart=ChartSeries.from_mapping(sum_by_date(items)),
        category_chart=ChartSeries.from_mapping(group_sum_by(items, "category")),
    )
