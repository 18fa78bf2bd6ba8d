"""
Calendar helpers shared by the record store and the aggregator.
"""

import calendar
from datetime import date


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a calendar month, both inclusive."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """
    Move delta months from (year, month).

    shift_month(2026, 1, -1) == (2025, 12)
    """
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_label(year: int, month: int) -> str:
    """Short label such as 'Oct 2026'."""
    return f"{calendar.month_abbr[month]} {year}"
