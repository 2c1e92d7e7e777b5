"""
Calendar helpers for month and fiscal-year windows.

Every window is half-open: [from, to).
"""
from datetime import date
from typing import List, Tuple

from intercompany.domain.exceptions import InvalidPeriodError


def next_month(month_start: date) -> date:
    """First day of the month after `month_start`."""
    if month_start.month == 12:
        return date(month_start.year + 1, 1, 1)
    return date(month_start.year, month_start.month + 1, 1)


def add_months(month_start: date, months: int) -> date:
    index = month_start.year * 12 + (month_start.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def month_window(year: int, month: int, min_year: int = 1) -> Tuple[date, date]:
    """
    Window covering one calendar month.

    Raises:
        InvalidPeriodError: If year is below `min_year` or month is not 1-12
    """
    if year < min_year or month < 1 or month > 12:
        raise InvalidPeriodError(f"Invalid year/month: {year}/{month}")
    start = date(year, month, 1)
    return start, next_month(start)


def months_in_window(date_from: date, date_to: date) -> List[date]:
    """
    First day of every calendar month touched by [date_from, date_to).

    Months are counted from the month of `date_from` up to, but excluding,
    the month of `date_to`.
    """
    months = []
    cursor = date_from.replace(day=1)
    end = date_to.replace(day=1)
    while cursor < end:
        months.append(cursor)
        cursor = next_month(cursor)
    return months


def fiscal_year_window(start_year: int, start_month: int = 7) -> Tuple[date, date]:
    """
    Twelve-month fiscal year starting on the first of `start_month`.

    Example: start_year=2024, start_month=7 -> [2024-07-01, 2025-07-01)
    """
    if start_month < 1 or start_month > 12:
        raise InvalidPeriodError(f"Invalid fiscal year start month: {start_month}")
    start = date(start_year, start_month, 1)
    return start, add_months(start, 12)


def validate_window(date_from: date, date_to: date) -> None:
    """
    Raises:
        InvalidPeriodError: If the window is empty or inverted
    """
    if date_from >= date_to:
        raise InvalidPeriodError(f"Window start {date_from} must be before end {date_to}")
