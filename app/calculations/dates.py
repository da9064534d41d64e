"""
Calendar Helpers

Month-granular date arithmetic used by the cash flow engine.
"""

from typing import Union
from datetime import date, datetime
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

# Timestamps above this are treated as milliseconds
MILLISECOND_THRESHOLD = 1e10


def now() -> date:
    """Return today's date (the default booking date)."""
    return date.today()


def add_months(value: date, months: int) -> date:
    """Add N calendar months, clamping to the end of shorter months."""
    return value + relativedelta(months=months)


def add_years(value: date, years: int) -> date:
    """Add N calendar years."""
    return value + relativedelta(years=years)


def is_before(first: date, second: date) -> bool:
    return first < second


def same_month(first: date, second: date) -> bool:
    """Check whether two dates fall in the same calendar month and year."""
    return first.year == second.year and first.month == second.month


def year(value: date) -> int:
    return value.year


def month(value: date) -> int:
    """Calendar month, 1 = January."""
    return value.month


def format_month_label(value: date) -> str:
    """Format a date as e.g. 'March 2026'."""
    return value.strftime("%B %Y")


def parse_date(value: Union[date, datetime, str, int, float]) -> date:
    """
    Coerce user input into a date.

    Accepts date/datetime objects, date strings ("2028-12-31", unpadded
    "2029-3-5" or a full timestamp, whose own date is kept) and unix
    timestamps in seconds or milliseconds.

    Raises:
        ValueError: If the value cannot be interpreted as a date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid date: {value!r}")
    if isinstance(value, (int, float)):
        timestamp = float(value)
        if timestamp > MILLISECOND_THRESHOLD:
            timestamp = timestamp / 1000
        return datetime.fromtimestamp(timestamp).date()
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return parse_date(int(text))
        try:
            return date_parser.parse(text).date()
        except (ValueError, OverflowError):
            raise ValueError(f"Invalid date: {value!r}")
    raise ValueError(f"Invalid date: {value!r}")
