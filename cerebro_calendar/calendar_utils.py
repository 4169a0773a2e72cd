"""Date-only calendar helpers for cerebro_calendar.

All arithmetic here works on ``datetime.date`` values with no time zone
attached, so stepping across DST transitions or zone boundaries can never move
an occurrence to a neighbouring day.
"""

import datetime
import logging
import os
from enum import Enum
from typing import Any, Callable, Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

# Clock returning the current local date; injected wherever "today" matters.
Clock = Callable[[], datetime.date]


class CalendarView(str, Enum):
    """Calendar views that each map to one expansion window."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


def to_date(value: Any) -> datetime.date:
    """Coerce a date-like value to a plain date.

    Accepts ``date``, ``datetime`` (its calendar date is kept as-is, no zone
    conversion) and strings. Strings are keyed on their leading ``YYYY-MM-DD``
    so ``"2024-01-03"`` and ``"2024-01-03T00:00:00.000Z"`` are the same day.

    Raises:
        ValueError: If the value cannot be read as a date
    """
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return datetime.date.fromisoformat(text[:10])
        except ValueError:
            pass
        try:
            return date_parser.parse(text).date()
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Invalid date value: {value!r}") from e
    raise ValueError(f"Unsupported date value: {value!r}")


def date_key(day: datetime.date) -> str:
    """Return the ``YYYY-MM-DD`` key used for exclusion and completion sets."""
    return day.isoformat()


def weekday_ordinal(day: datetime.date) -> int:
    """Return the weekday as 0=Sunday .. 6=Saturday."""
    return (day.weekday() + 1) % 7


def add_months(day: datetime.date, months: int) -> datetime.date:
    """Add calendar months, clamping to the last day of shorter months."""
    return day + relativedelta(months=months)


def add_years(day: datetime.date, years: int) -> datetime.date:
    """Add calendar years; Feb 29 clamps to Feb 28 in common years."""
    return day + relativedelta(years=years)


def start_of_week(day: datetime.date, week_starts_on: int = 0) -> datetime.date:
    """Return the first day of the week containing ``day``.

    Args:
        day: Any date in the week
        week_starts_on: Weekday ordinal the week starts on (0=Sunday)
    """
    offset = (weekday_ordinal(day) - week_starts_on) % 7
    return day - datetime.timedelta(days=offset)


def view_window(
    view: CalendarView,
    reference: datetime.date,
    week_starts_on: int = 0,
) -> tuple[datetime.date, datetime.date]:
    """Return the inclusive ``(start, end)`` window shown by a calendar view.

    Args:
        view: Calendar view being rendered
        reference: Date the view is centred on
        week_starts_on: Weekday ordinal the week starts on (0=Sunday)

    Returns:
        Tuple of inclusive start and end dates
    """
    view = CalendarView(view)
    if view == CalendarView.DAY:
        return reference, reference
    if view == CalendarView.WEEK:
        first = start_of_week(reference, week_starts_on)
        return first, first + datetime.timedelta(days=6)
    if view == CalendarView.MONTH:
        first = reference.replace(day=1)
        return first, add_months(first, 1) - datetime.timedelta(days=1)
    return datetime.date(reference.year, 1, 1), datetime.date(reference.year, 12, 31)


def today(clock: Optional[Clock] = None) -> datetime.date:
    """Return the current date from an injected clock.

    The ``CEREBRO_TEST_DATE`` environment variable overrides both the clock
    and the system date so tests can pin "today".

    Args:
        clock: Callable returning the current date; defaults to the system date

    Returns:
        Current date
    """
    test_date = os.environ.get("CEREBRO_TEST_DATE")
    if test_date:
        try:
            return to_date(test_date)
        except ValueError as e:
            logger.warning("Invalid CEREBRO_TEST_DATE: %s, error: %s", test_date, e)

    if clock is not None:
        return clock()
    return datetime.date.today()
