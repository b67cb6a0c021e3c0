"""
MoodSpend - Source Package

A personal expense tracker that tags every purchase with the mood it was
made in, and turns those tags into simple spending insights.

DESIGN PRINCIPLES:
1. One flat list of expenses, persisted as a single JSON slot
2. Pure functions for filtering, grouping and insights
3. Parse at the boundary, never inside the engine
4. No failure is fatal; every one is logged
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "MoodSpend Team"
