"""Presentation view models."""

from moodspend.presentation.view_model import (
    ChartSeries,
    DashboardView,
    ExpenseRow,
    build_dashboard,
    to_row,
)

__all__ = [
    "ChartSeries",
    "DashboardView",
    "ExpenseRow",
    "build_dashboard",
    "to_row",
]
