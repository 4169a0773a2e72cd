"""Recurring event expansion for cerebro_calendar.

Turns persisted event definitions into the concrete occurrences that fall in
an inclusive date window. Two recurrence encodings are supported: iCalendar
RRULE strings (expanded with python-dateutil) and the legacy
frequency-plus-weekday-filter encoding, which is also the fallback when a rule
string cannot be parsed.
"""

import datetime
import logging
import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any, Optional

from dateutil.rrule import rruleset, rrulestr

from .calendar_utils import (
    CalendarView,
    add_months,
    add_years,
    date_key,
    view_window,
    weekday_ordinal,
)
from .exceptions import RuleParseError
from .models import (
    EventDefinition,
    EventStatus,
    LegacyRecurrence,
    Occurrence,
    RecurrenceFrequency,
    RuleRecurrence,
)

logger = logging.getLogger(__name__)

VIRTUAL_ID_SEPARATOR = "-virtual-"

# Upper bound on raw rule instances examined per emitted date (minutely rules)
ITERATIONS_PER_DATE = 1440

_SEPARATOR_SPACING = re.compile(r"\s*([;:=,])\s*")
_NON_POSITIVE_INTERVAL = re.compile(r"(?:^|[;:])INTERVAL=(?:-\d+|0+)(?:;|$)", re.IGNORECASE)


@dataclass
class ExpanderConfig:
    """Configuration for recurrence expansion."""

    default_duration_minutes: int = 60
    max_occurrences_per_rule: int = 1000

    @classmethod
    def from_settings(cls, settings: Any) -> "ExpanderConfig":
        """Extract expansion configuration from a settings object.

        Args:
            settings: Object with matching attributes (e.g. `Config`), or None

        Returns:
            ExpanderConfig with values from settings or defaults
        """
        if settings is None:
            return cls()
        return cls(
            default_duration_minutes=getattr(settings, "default_duration_minutes", 60),
            max_occurrences_per_rule=getattr(settings, "max_occurrences_per_rule", 1000),
        )


def virtual_occurrence_id(source_id: str, day: datetime.date) -> str:
    """Build the deterministic ID of a generated occurrence."""
    return f"{source_id}{VIRTUAL_ID_SEPARATOR}{date_key(day)}"


class RecurrenceExpander:
    """Expands event definitions into occurrences inside a date window.

    Expansion is pure: definitions are never mutated and repeated calls with
    the same inputs return equal results.
    """

    def __init__(self, settings: Any = None, diagnostics: Optional[logging.Logger] = None):
        """Initialize expander.

        Args:
            settings: Optional settings object (see `ExpanderConfig.from_settings`)
            diagnostics: Logger that receives rule parse failures; defaults to
                this module's logger
        """
        config = ExpanderConfig.from_settings(settings)
        self.default_duration = config.default_duration_minutes
        self.max_occurrences = config.max_occurrences_per_rule
        self.diagnostics = diagnostics or logger

    def expand(
        self,
        definitions: Iterable[EventDefinition],
        start: datetime.date,
        end: datetime.date,
    ) -> list[Occurrence]:
        """Expand every definition into the occurrences inside ``[start, end]``.

        Args:
            definitions: Event definitions to expand
            start: First date of the window (inclusive)
            end: Last date of the window (inclusive)

        Returns:
            Occurrences grouped by definition in input order; within a
            definition the master occurrence comes first, then virtual
            occurrences by ascending date
        """
        if start > end:
            logger.debug("Empty expansion window %s..%s", start, end)
            return []

        occurrences: list[Occurrence] = []
        count = 0
        for definition in definitions:
            occurrences.extend(self.expand_definition(definition, start, end))
            count += 1

        logger.debug(
            "Expanded %d definitions into %d occurrences for %s..%s",
            count,
            len(occurrences),
            start,
            end,
        )
        return occurrences

    def expand_definition(
        self,
        definition: EventDefinition,
        start: datetime.date,
        end: datetime.date,
    ) -> list[Occurrence]:
        """Expand a single definition into its occurrences inside the window."""
        results: list[Occurrence] = []
        anchor = definition.anchor_date

        if (
            start <= anchor <= end
            and anchor not in definition.exclusions
            and self._matches_weekday_filter(definition, anchor)
        ):
            if definition.recurs:
                completed = anchor in definition.completions
            else:
                completed = definition.status == EventStatus.COMPLETED
            results.append(self._build_occurrence(definition, anchor, completed, is_virtual=False))

        if not definition.recurs:
            return results

        spec = definition.recurrence_spec
        if isinstance(spec, RuleRecurrence):
            try:
                rule_days = self.rule_dates(spec.rule, anchor, start, end, definition.id)
            except RuleParseError as e:
                self.diagnostics.warning(
                    "Falling back to legacy recurrence for %s: %s", definition.id, e
                )
                spec = spec.fallback
            else:
                results.extend(self._virtual_occurrences(definition, rule_days))
                return results

        if isinstance(spec, LegacyRecurrence):
            results.extend(self._virtual_occurrences(definition, self.legacy_dates(spec, anchor, start, end)))
        return results

    def parse_rule(
        self,
        rule: str,
        anchor: datetime.date,
        definition_id: Optional[str] = None,
    ) -> rruleset:
        """Parse an RRULE string anchored at a zone-free midnight of ``anchor``.

        DTSTART lines inside the string are dropped so the anchor date is
        authoritative, and time zones are ignored so UNTIL values cannot shift
        the enumeration by a day.

        Args:
            rule: RRULE string, with or without the ``RRULE:`` prefix
            anchor: Date the series starts on
            definition_id: Owning definition, for error reporting

        Returns:
            Parsed rule set

        Raises:
            RuleParseError: If the string is empty, not valid RRULE grammar, or
                has a non-positive INTERVAL
        """
        lines = [_SEPARATOR_SPACING.sub(r"\1", line.strip()) for line in (rule or "").splitlines()]
        lines = [line for line in lines if line and not line.upper().startswith("DTSTART")]
        if not lines:
            raise RuleParseError("Empty RRULE string", rule=rule, definition_id=definition_id)
        if any(_NON_POSITIVE_INTERVAL.search(line) for line in lines):
            # dateutil accepts these but never advances past dtstart
            raise RuleParseError(
                f"INTERVAL must be positive: {rule!r}", rule=rule, definition_id=definition_id
            )

        dtstart = datetime.datetime.combine(anchor, datetime.time.min)
        try:
            return rrulestr("\n".join(lines), dtstart=dtstart, forceset=True, ignoretz=True)
        except (ValueError, TypeError, KeyError, IndexError, AttributeError) as e:
            raise RuleParseError(
                f"Invalid RRULE format: {rule!r} ({e})", rule=rule, definition_id=definition_id
            ) from e

    def rule_dates(
        self,
        rule: str,
        anchor: datetime.date,
        start: datetime.date,
        end: datetime.date,
        definition_id: Optional[str] = None,
    ) -> list[datetime.date]:
        """Enumerate the distinct dates a rule produces inside ``[start, end]``.

        Raises:
            RuleParseError: If the rule cannot be parsed or enumerated
        """
        rule_set = self.parse_rule(rule, anchor, definition_id)
        window_start = datetime.datetime.combine(start, datetime.time.min)
        window_end = datetime.datetime.combine(end, datetime.time.max)

        days: list[datetime.date] = []
        max_iterations = self.max_occurrences * ITERATIONS_PER_DATE
        try:
            for iteration, occurrence in enumerate(rule_set.xafter(window_start, inc=True)):
                if occurrence > window_end:
                    break
                if iteration >= max_iterations:
                    logger.warning(
                        "RRULE expansion for %s stopped after %d rule instances",
                        definition_id,
                        max_iterations,
                    )
                    break
                day = occurrence.date()
                if days and days[-1] == day:
                    continue
                if len(days) >= self.max_occurrences:
                    logger.warning(
                        "RRULE expansion for %s limited to %d occurrences",
                        definition_id,
                        self.max_occurrences,
                    )
                    break
                days.append(day)
        except (ValueError, TypeError, OverflowError) as e:
            raise RuleParseError(
                f"Failed to enumerate RRULE {rule!r} ({e})", rule=rule, definition_id=definition_id
            ) from e
        return days

    def legacy_dates(
        self,
        spec: LegacyRecurrence,
        anchor: datetime.date,
        start: datetime.date,
        end: datetime.date,
    ) -> Iterator[datetime.date]:
        """Step forward from the anchor by the legacy granularity.

        Each step advances the previously stepped date, so a month-end clamp
        carries forward (Jan 31 -> Feb 29 -> Mar 29). In day-by-day mode only
        weekdays in the filter are yielded.
        """
        if spec.frequency == RecurrenceFrequency.NONE:
            return

        day = self._last_step_before(spec, anchor, start)
        while True:
            day = self._next_step(spec, day)
            if day > end:
                return
            if day < start:
                continue
            if spec.day_by_day and weekday_ordinal(day) not in spec.weekday_filter:
                continue
            yield day

    @staticmethod
    def _next_step(spec: LegacyRecurrence, day: datetime.date) -> datetime.date:
        if spec.day_by_day or spec.frequency == RecurrenceFrequency.DAILY:
            return day + datetime.timedelta(days=1)
        if spec.frequency == RecurrenceFrequency.WEEKLY:
            return day + datetime.timedelta(weeks=1)
        if spec.frequency == RecurrenceFrequency.MONTHLY:
            return add_months(day, 1)
        return add_years(day, 1)

    @staticmethod
    def _last_step_before(
        spec: LegacyRecurrence, anchor: datetime.date, start: datetime.date
    ) -> datetime.date:
        # Fixed-length steps jump straight to the window; calendar steps walk
        # the chain from the anchor since earlier clamps decide later dates.
        if start <= anchor:
            return anchor
        if spec.day_by_day or spec.frequency == RecurrenceFrequency.DAILY:
            return start - datetime.timedelta(days=1)
        if spec.frequency == RecurrenceFrequency.WEEKLY:
            return anchor + datetime.timedelta(weeks=((start - anchor).days - 1) // 7)
        return anchor

    @staticmethod
    def _matches_weekday_filter(definition: EventDefinition, day: datetime.date) -> bool:
        return not definition.weekday_filter or weekday_ordinal(day) in definition.weekday_filter

    def _virtual_occurrences(
        self,
        definition: EventDefinition,
        days: Iterable[datetime.date],
    ) -> Iterator[Occurrence]:
        seen: set[datetime.date] = set()
        for day in days:
            if day == definition.anchor_date or day in definition.exclusions or day in seen:
                continue
            seen.add(day)
            yield self._build_occurrence(
                definition, day, day in definition.completions, is_virtual=True
            )

    def _build_occurrence(
        self,
        definition: EventDefinition,
        day: datetime.date,
        completed: bool,
        is_virtual: bool,
    ) -> Occurrence:
        duration = definition.duration_minutes
        if duration is None:
            duration = self.default_duration

        time_of_day = definition.time_of_day
        start_minute = 0 if time_of_day is None else time_of_day.hour * 60 + time_of_day.minute

        return Occurrence(
            source_id=definition.id,
            occurrence_id=virtual_occurrence_id(definition.id, day) if is_virtual else definition.id,
            date=day,
            start_minute=start_minute,
            end_minute=start_minute + duration,
            is_all_day=time_of_day is None,
            is_virtual=is_virtual,
            completed=completed,
            title=definition.title,
            category=definition.category,
            kind=definition.kind,
        )


def expand_recurring_events(
    definitions: Sequence[EventDefinition],
    start: datetime.date,
    end: datetime.date,
    settings: Any = None,
    diagnostics: Optional[logging.Logger] = None,
) -> list[Occurrence]:
    """Expand definitions into the occurrences inside ``[start, end]``.

    Args:
        definitions: Event definitions to expand
        start: First date of the window (inclusive)
        end: Last date of the window (inclusive)
        settings: Optional settings object (see `ExpanderConfig.from_settings`)
        diagnostics: Optional logger for rule parse failures

    Returns:
        List of occurrences, possibly empty
    """
    return RecurrenceExpander(settings, diagnostics).expand(definitions, start, end)


def expand_for_view(
    definitions: Sequence[EventDefinition],
    view: CalendarView,
    reference: datetime.date,
    settings: Any = None,
) -> list[Occurrence]:
    """Expand definitions over the window a calendar view shows around ``reference``."""
    week_starts_on = getattr(settings, "week_starts_on", 0) if settings is not None else 0
    start, end = view_window(view, reference, week_starts_on)
    return expand_recurring_events(definitions, start, end, settings)
