"""Filtering helpers for definitions and occurrences."""

import datetime
from collections.abc import Iterable
from typing import Optional, TypeVar, Union

from .models import EventCategory, EventDefinition, EventStatus, Occurrence

T = TypeVar("T", EventDefinition, Occurrence)


def filter_by_categories(
    items: Iterable[T],
    categories: Iterable[Union[EventCategory, str]],
) -> list[T]:
    """Keep items whose category is one of ``categories``."""
    wanted = {EventCategory(category) for category in categories}
    return [item for item in items if item.category in wanted]


def filter_by_status(
    occurrences: Iterable[Occurrence],
    status: Optional[Union[EventStatus, str]] = None,
) -> list[Occurrence]:
    """Keep occurrences with the given status; None or "all" keeps everything."""
    if status is None or status == "all":
        return list(occurrences)
    wanted = EventStatus(status)
    return [occurrence for occurrence in occurrences if occurrence.status == wanted]


def occurrences_on(occurrences: Iterable[Occurrence], day: datetime.date) -> list[Occurrence]:
    """Return the occurrences dated ``day``."""
    return [occurrence for occurrence in occurrences if occurrence.date == day]
