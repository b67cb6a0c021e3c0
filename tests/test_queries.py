"""Tests for the query/aggregation engine."""

import pytest
from datetime import date
from decimal import Decimal

from moodspend.models.expense import ExpenseRecord, FilterCriteria
from moodspend.queries import (
    average_amount,
    compute_totals,
    filter_expenses,
    group_sum_by,
    sort_by_date_descending,
    sum_by_date,
    top_mood_by_spend,
)


def make(amount, mood, day, **kwargs):
    return ExpenseRecord(
        amount=Decimal(str(amount)),
        mood=mood,
        date=date.fromisoformat(day),
        **kwargs,
    )


@pytest.fixture
def records():
    return [
        make(120, "Stressed", "2024-01-05", category="Food", description="Late pizza", id="a"),
        make(40, "Happy", "2024-01-06", category="Coffee", description="Cappuccino", id="b"),
        make(300, "Calm", "2024-02-01", category="Books", description="Novel", id="c"),
        make(15.5, "Stressed", "2024-02-01", description="Snacks", id="d"),
        make(60, "Happy", "2024-02-10", category="food", id="e"),
    ]


class TestFilterExpenses:
    """Tests for filter_expenses."""

    def test_no_criteria_returns_everything(self, records):
        assert filter_expenses(records, FilterCriteria()) == records
        assert filter_expenses(records) == records

    def test_text_matches_description_or_category(self, records):
        """Test case-insensitive substring against description OR category."""
        result = filter_expenses(records, FilterCriteria(text_query="FOOD"))
        assert [r.id for r in result] == ["a", "e"]

        result = filter_expenses(records, FilterCriteria(text_query="cappu"))
        assert [r.id for r in result] == ["b"]

    def test_text_with_missing_fields(self, records):
        """Test records without category/description simply don't match."""
        result = filter_expenses(records, FilterCriteria(text_query="snack"))
        assert [r.id for r in result] == ["d"]

    def test_mood_exact_match(self, records):
        result = filter_expenses(records, FilterCriteria(mood="Stressed"))
        assert [r.id for r in result] == ["a", "d"]

        assert filter_expenses(records, FilterCriteria(mood="stressed")) == []

    def test_year_month(self, records):
        result = filter_expenses(records, FilterCriteria(year_month="2024-02"))
        assert [r.id for r in result] == ["c", "d", "e"]

    def test_criteria_combine_with_and(self, records):
        """Test that all present criteria must hold."""
        criteria = FilterCriteria(text_query="food", mood="Happy", year_month="2024-02")
        assert [r.id for r in filter_expenses(records, criteria)] == ["e"]

        criteria = FilterCriteria(text_query="food", mood="Calm")
        assert filter_expenses(records, criteria) == []

    def test_filter_is_idempotent(self, records):
        """Test that filtering twice with the same criteria changes nothing."""
        criteria = FilterCriteria(text_query="o", year_month="2024-01")
        once = filter_expenses(records, criteria)
        assert filter_expenses(once, criteria) == once


class TestSortByDate:
    """Tests for sort_by_date_descending."""

    def test_most_recent_first(self, records):
        result = sort_by_date_descending(records)
        assert [r.id for r in result] == ["e", "c", "d", "b", "a"]

    def test_ties_keep_original_order(self, records):
        """Test that records on the same date keep encounter order."""
        reordered = [records[3], records[2]]
        assert [r.id for r in sort_by_date_descending(reordered)] == ["d", "c"]

    def test_does_not_mutate_input(self, records):
        ids = [r.id for r in records]
        sort_by_date_descending(records)
        assert [r.id for r in records] == ids


class TestGroupSumBy:
    """Tests for group_sum_by and friends."""

    def test_group_by_mood_insertion_order(self, records):
        result = group_sum_by(records, "mood")
        assert list(result) == ["Stressed", "Happy", "Calm"]
        assert result["Stressed"] == Decimal("135.5")
        assert result["Happy"] == Decimal("100")
        assert result["Calm"] == Decimal("300")

    def test_missing_key_is_uncategorized(self, records):
        result = group_sum_by(records, "category")
        assert result["Uncategorized"] == Decimal("15.5")
        # Category keys are case-sensitive
        assert result["Food"] == Decimal("120")
        assert result["food"] == Decimal("60")

    def test_callable_key(self, records):
        result = group_sum_by(records, lambda r: r.year_month)
        assert result == {"2024-01": Decimal("160"), "2024-02": Decimal("375.5")}

    def test_group_totals_match_grand_total(self, records):
        """Test that every grouping sums to the same grand total."""
        grand_total = compute_totals(records).total
        for key in ("mood", "category", "payment", "description"):
            assert sum(group_sum_by(records, key).values()) == grand_total

    def test_empty_input(self):
        assert group_sum_by([], "mood") == {}

    def test_sum_by_date_sorted_ascending(self, records):
        result = sum_by_date(list(reversed(records)))
        assert list(result) == ["2024-01-05", "2024-01-06", "2024-02-01", "2024-02-10"]
        assert result["2024-02-01"] == Decimal("315.5")


class TestTotalsAndTopMood:
    """Tests for compute_totals, top_mood_by_spend and average_amount."""

    def test_compute_totals(self, records):
        totals = compute_totals(records)
        assert totals.total == Decimal("535.5")
        assert totals.count == 5

    def test_compute_totals_empty(self):
        totals = compute_totals([])
        assert totals.total == Decimal("0")
        assert totals.count == 0

    def test_top_mood(self, records):
        assert top_mood_by_spend(records) == ("Calm", Decimal("300"))

    def test_top_mood_empty(self):
        assert top_mood_by_spend([]) is None

    def test_top_mood_tie_goes_to_first_encountered(self):
        tied = [
            make(50, "Happy", "2024-01-01"),
            make(50, "Calm", "2024-01-02"),
        ]
        assert top_mood_by_spend(tied)[0] == "Happy"

    def test_average_amount(self, records):
        assert average_amount(records, "Stressed") == Decimal("67.75")
        assert average_amount(records, "Sad") == Decimal("0")


class TestTextQuerySpacing:
    """The search text is a literal substring, spaces included."""

    def test_padded_query(self):
        records = [
            make(1, "Calm", "2024-01-01", description="iced coffee please", id="x"),
            make(2, "Calm", "2024-01-02", description="coffee", id="y"),
        ]
        result = filter_expenses(records, FilterCriteria(text_query=" coffee "))
        assert [r.id for r in result] == ["x"]

    def test_space_only_query(self):
        records = [
            make(1, "Calm", "2024-01-01", description="two words", id="x"),
            make(2, "Calm", "2024-01-02", description="word", id="y"),
        ]
        result = filter_expenses(records, FilterCriteria(text_query=" "))
        assert [r.id for r in result] == ["x"]
