"""Day layout: pack same-day occurrences into non-overlapping columns."""

import datetime
import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence

from .interval_packing import pack_intervals
from .models import LayoutEvent, Occurrence

logger = logging.getLogger(__name__)


def layout_day(occurrences: Sequence[Occurrence]) -> list[LayoutEvent]:
    """Assign each occurrence of one day a column and overlap group size.

    Args:
        occurrences: Occurrences sharing one date

    Returns:
        Layout events ordered by start, longest first on ties, then input order
    """
    if not occurrences:
        return []

    dates = {occurrence.date for occurrence in occurrences}
    if len(dates) > 1:
        logger.warning(
            "layout_day received occurrences from %d dates; packing them as one day",
            len(dates),
        )

    packed = pack_intervals([(o.start_minute, o.end_minute) for o in occurrences])
    return [
        LayoutEvent(
            occurrence=occurrences[item.index],
            column_index=item.column,
            overlap_group_size=item.group_size,
        )
        for item in packed
    ]


def layout_days(occurrences: Iterable[Occurrence]) -> dict[datetime.date, list[LayoutEvent]]:
    """Group occurrences by date and lay out each day independently.

    Returns:
        Mapping of date to its layout events, in ascending date order
    """
    by_date: dict[datetime.date, list[Occurrence]] = defaultdict(list)
    for occurrence in occurrences:
        by_date[occurrence.date].append(occurrence)

    layouts = {day: layout_day(by_date[day]) for day in sorted(by_date)}
    logger.debug("Laid out %d days", len(layouts))
    return layouts
