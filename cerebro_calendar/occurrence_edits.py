"""Per-date edits on event definitions.

Editing one occurrence of a series never touches the series itself: it adds
or removes a date in the definition's exclusion or completion set. Every
function returns new definitions and leaves its inputs untouched.
"""

import datetime
import logging
from collections.abc import Sequence
from enum import Enum
from typing import Any

from .calendar_utils import to_date
from .models import EventDefinition, EventStatus

logger = logging.getLogger(__name__)


class DeleteMode(str, Enum):
    """Scope of a delete issued from one occurrence."""

    INSTANCE = "instance"
    SERIES = "series"


def exclude_occurrence(definition: EventDefinition, on: Any) -> EventDefinition:
    """Return a copy of ``definition`` that produces no occurrence on ``on``."""
    day = to_date(on)
    if day in definition.exclusions:
        return definition
    return definition.model_copy(update={"exclusions": definition.exclusions | {day}})


def toggle_occurrence_completion(definition: EventDefinition, on: Any) -> EventDefinition:
    """Flip the completion state of the occurrence on ``on``.

    Recurring definitions track completion per date; a non-recurring
    definition toggles its own status between completed and pending.
    """
    if not definition.recurs:
        new_status = (
            EventStatus.PENDING
            if definition.status == EventStatus.COMPLETED
            else EventStatus.COMPLETED
        )
        return definition.model_copy(update={"status": new_status})

    day = to_date(on)
    completions = definition.completions ^ {day}
    return definition.model_copy(update={"completions": frozenset(completions)})


def delete_occurrence(
    definitions: Sequence[EventDefinition],
    source_id: str,
    on: datetime.date,
    mode: DeleteMode = DeleteMode.INSTANCE,
) -> list[EventDefinition]:
    """Apply a delete issued from the occurrence of ``source_id`` on ``on``.

    Args:
        definitions: Current definitions
        source_id: ID of the definition the occurrence belongs to
        on: Date of the occurrence
        mode: INSTANCE removes only that date from a recurring series;
            SERIES (or any delete of a non-recurring event) drops the definition

    Returns:
        New list of definitions
    """
    mode = DeleteMode(mode)
    result: list[EventDefinition] = []
    found = False

    for definition in definitions:
        if definition.id != source_id:
            result.append(definition)
            continue
        found = True
        if mode == DeleteMode.INSTANCE and definition.recurs:
            result.append(exclude_occurrence(definition, on))

    if not found:
        logger.debug("delete_occurrence: no definition with id %s", source_id)
    return result
