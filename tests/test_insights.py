"""Tests for insight derivation."""

from datetime import date
from decimal import Decimal

from moodspend.models.expense import ExpenseRecord
from moodspend.queries import (
    NOT_ENOUGH_DATA,
    build_insight_report,
    derive_insights,
    peak_weekday,
)


def make(amount, mood, day):
    return ExpenseRecord(amount=Decimal(str(amount)), mood=mood, date=date.fromisoformat(day))


class TestNotEnoughData:
    """Fewer than three records only ever produce the notice."""

    def test_empty(self):
        assert derive_insights([]) == [NOT_ENOUGH_DATA]

    def test_two_records_regardless_of_content(self):
        records = [
            make(1000, "Stressed", "2024-01-01"),
            make(1, "Calm", "2024-01-02"),
        ]
        report = build_insight_report(records)
        assert report.messages == [NOT_ENOUGH_DATA]
        assert report.enough_data is False
        assert report.top_mood is None
        assert report.peak_weekday is None

    def test_threshold_is_configurable(self):
        records = [make(10, "Happy", "2024-01-01")]
        assert derive_insights(records, min_records=1) != [NOT_ENOUGH_DATA]


class TestInsights:
    """Tests for the three observations."""

    def test_stressed_example(self):
        """Test the canonical three-record example."""
        records = [
            make(100, "Stressed", "2024-01-01"),
            make(10, "Calm", "2024-01-02"),
            make(10, "Happy", "2024-01-03"),
        ]
        report = build_insight_report(records)

        assert report.enough_data is True
        assert report.top_mood == "Stressed"
        assert report.mood_averages["Stressed"] == Decimal("100")
        # 2024-01-01 is a Monday
        assert report.peak_weekday == 1
        assert report.messages == [
            "You spend the most when you feel **Stressed**.",
            "Average purchase size is higher when **Stressed** (₹100).",
            "Peak spend day: **Mon**.",
        ]

    def test_stressed_observation_needs_strictly_higher_average(self):
        records = [
            make(50, "Stressed", "2024-01-01"),
            make(50, "Calm", "2024-01-02"),
            make(10, "Happy", "2024-01-03"),
        ]
        messages = derive_insights(records)
        assert not any("Average purchase" in m for m in messages)
        assert len(messages) == 2

    def test_stressed_observation_with_missing_groups(self):
        """Test that absent Calm/Happy groups count as average 0."""
        records = [
            make(5, "Stressed", "2024-01-01"),
            make(500, "Excited", "2024-01-02"),
            make(500, "Excited", "2024-01-03"),
        ]
        messages = derive_insights(records)
        assert messages[0] == "You spend the most when you feel **Excited**."
        assert "Average purchase size is higher when **Stressed** (₹5)." in messages

    def test_no_stressed_records(self):
        records = [
            make(5, "Happy", "2024-01-01"),
            make(5, "Happy", "2024-01-02"),
            make(5, "Happy", "2024-01-03"),
        ]
        report = build_insight_report(records)
        assert report.mood_averages["Stressed"] == Decimal("0")
        assert len(report.messages) == 2

    def test_currency_symbol(self):
        records = [
            make(100, "Stressed", "2024-01-01"),
            make(10, "Calm", "2024-01-02"),
            make(10, "Happy", "2024-01-03"),
        ]
        assert "($100)" in derive_insights(records, currency_symbol="$")[1]

    def test_average_rounds_half_up(self):
        records = [
            make(2, "Stressed", "2024-01-01"),
            make(3, "Stressed", "2024-01-01"),
            make(1, "Calm", "2024-01-02"),
        ]
        assert "(₹3)" in derive_insights(records)[1]


class TestPeakWeekday:
    """Tests for peak_weekday."""

    def test_highest_sum_wins(self):
        records = [
            make(10, "Calm", "2024-01-01"),  # Mon
            make(10, "Calm", "2024-01-08"),  # Mon
            make(15, "Calm", "2024-01-05"),  # Fri
        ]
        assert peak_weekday(records) == 1

    def test_tie_goes_to_lowest_index(self):
        records = [
            make(10, "Calm", "2024-01-06"),  # Sat
            make(10, "Calm", "2024-01-07"),  # Sun
            make(10, "Calm", "2024-01-03"),  # Wed
        ]
        assert peak_weekday(records) == 0

    def test_sunday_name(self):
        records = [
            make(99, "Calm", "2024-01-07"),
            make(1, "Calm", "2024-01-03"),
            make(1, "Happy", "2024-01-04"),
        ]
        assert derive_insights(records)[-1] == "Peak spend day: **Sun**."
