"""Daily and weekly summaries over expanded occurrences."""

import datetime
import logging
from collections import Counter
from collections.abc import Iterable
from typing import Any, Optional

from .calendar_utils import start_of_week
from .filters import occurrences_on
from .models import DailyReport, EventCategory, Occurrence

logger = logging.getLogger(__name__)

# Waking-day budget used for free time (16h)
DEFAULT_DAY_CAPACITY_MINUTES = 16 * 60


def build_daily_report(
    occurrences: Iterable[Occurrence],
    day: datetime.date,
    capacity_minutes: Optional[int] = None,
    settings: Any = None,
) -> DailyReport:
    """Summarize completion and busy time for ``day``.

    Args:
        occurrences: Expanded occurrences; only those dated ``day`` count
        day: Day to report on
        capacity_minutes: Minutes available in the day; when omitted it is
            read from ``settings.day_capacity_minutes`` (default 16h)
        settings: Optional settings object (e.g. `Config`)

    Returns:
        DailyReport for the day
    """
    if capacity_minutes is None:
        capacity_minutes = getattr(settings, "day_capacity_minutes", DEFAULT_DAY_CAPACITY_MINUTES)

    day_occurrences = occurrences_on(occurrences, day)
    total = len(day_occurrences)
    completed = sum(1 for o in day_occurrences if o.completed)
    busy = sum(o.duration_minutes for o in day_occurrences)

    return DailyReport(
        date=day,
        total=total,
        completed=completed,
        pending=total - completed,
        busy_minutes=busy,
        free_minutes=max(0, capacity_minutes - busy),
        completion_percent=(completed / total) * 100 if total else 0.0,
    )


def category_breakdown(
    occurrences: Iterable[Occurrence],
    reference: datetime.date,
    week_starts_on: Optional[int] = None,
    settings: Any = None,
) -> dict[EventCategory, int]:
    """Count occurrences per category in the week containing ``reference``.

    ``week_starts_on`` falls back to ``settings.week_starts_on``, then Sunday.
    """
    if week_starts_on is None:
        week_starts_on = getattr(settings, "week_starts_on", 0)
    first = start_of_week(reference, week_starts_on)
    last = first + datetime.timedelta(days=6)
    counts = Counter(o.category for o in occurrences if first <= o.date <= last)
    logger.debug("Category breakdown for week of %s: %s", first, dict(counts))
    return dict(counts)
