"""Display formatting shared by insights and the dashboard."""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal, localcontext

WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def format_money(amount: Decimal, currency_symbol: str = "₹", places: int = 2) -> str:
    """Format an amount as e.g. ₹1234.50 (half-up rounding, no grouping)."""
    quantum = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        # Enough digits for the integer part of any total
        ctx.prec = max(ctx.prec, amount.adjusted() + places + 2)
        rounded = amount.quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{currency_symbol}{rounded}"


def format_display_date(value: date) -> str:
    """Format a date as e.g. Jan 05, 2024."""
    return value.strftime("%b %d, %Y")
