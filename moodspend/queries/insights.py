"""
Insight Derivation

Turns a list of mood-tagged expenses into a handful of plain-language
observations. These are threshold rules, not statistics:

1. Which mood do you spend the most in?
2. Is the average purchase bigger when Stressed than when Calm or Happy?
3. Which day of the week do you spend the most on?

Below the minimum record count only a single "not enough data" notice is
produced and nothing else is computed.
"""

from decimal import Decimal
from typing import Iterable, Sequence

from moodspend.formatting import WEEKDAY_NAMES, format_money
from moodspend.models.expense import ExpenseRecord, InsightReport, Mood
from moodspend.queries.engine import average_amount, group_sum_by, top_key


NOT_ENOUGH_DATA = "Add a few expenses to unlock insights."
MIN_RECORDS_FOR_INSIGHTS = 3

COMPARED_MOODS = (Mood.STRESSED.value, Mood.CALM.value, Mood.HAPPY.value)


def peak_weekday(records: Iterable[ExpenseRecord]) -> int:
    """
    Weekday (0=Sunday .. 6=Saturday) with the highest total spend.

    Ties go to the lowest weekday index. Returns 0 for an empty list.
    """
    by_weekday: dict[int, Decimal] = {}
    for record in records:
        day = record.weekday_index
        by_weekday[day] = by_weekday.get(day, Decimal("0")) + record.amount
    if not by_weekday:
        return 0
    return min(by_weekday, key=lambda day: (-by_weekday[day], day))


def build_insight_report(
    records: Sequence[ExpenseRecord],
    currency_symbol: str = "₹",
    min_records: int = MIN_RECORDS_FOR_INSIGHTS,
) -> InsightReport:
    """
    Derive insights and the intermediate values behind them.

    Args:
        records: The (already filtered) records to look at
        currency_symbol: Prefix for amounts quoted in messages
        min_records: Below this count only the not-enough-data notice is given

    Returns:
        InsightReport whose `messages` are the ordered observations
    """
    if len(records) < min_records:
        return InsightReport(enough_data=False, messages=[NOT_ENOUGH_DATA])

    top = top_key(group_sum_by(records, "mood"))
    top_mood = top[0] if top else None

    averages = {mood: average_amount(records, mood) for mood in COMPARED_MOODS}
    stressed = averages[Mood.STRESSED.value]
    calm = averages[Mood.CALM.value]
    happy = averages[Mood.HAPPY.value]

    weekday = peak_weekday(records)
    weekday_name = WEEKDAY_NAMES[weekday]

    messages = []
    if top_mood:
        messages.append(f"You spend the most when you feel **{top_mood}**.")
    if stressed > calm and stressed > happy:
        messages.append(
            "Average purchase size is higher when **Stressed** "
            f"({format_money(stressed, currency_symbol, places=0)})."
        )
    messages.append(f"Peak spend day: **{weekday_name}**.")

    return InsightReport(
        enough_data=True,
        top_mood=top_mood,
        mood_averages=averages,
        peak_weekday=weekday,
        peak_weekday_name=weekday_name,
        messages=messages,
    )


def derive_insights(
    records: Sequence[ExpenseRecord],
    currency_symbol: str = "₹",
    min_records: int = MIN_RECORDS_FOR_INSIGHTS,
) -> list[str]:
    """The ordered list of observation strings (or the single notice)."""
    return build_insight_report(records, currency_symbol, min_records).messages
