"""cerebro_calendar - recurring event expansion and day layout engine.

Expands persisted event definitions (legacy frequency encoding or iCalendar
RRULE strings, with per-date exclusions and completions) into the occurrences
inside a date window, and packs same-day occurrences into columns.
"""

__version__ = "1.0.0"

from .calendar_utils import CalendarView, today, view_window
from .config_loader import Config, load_config
from .day_layout import layout_day, layout_days
from .exceptions import CalendarEngineError, RuleParseError
from .interval_packing import assign_columns, max_concurrency, pack_intervals
from .logging_config import configure_logging
from .models import (
    DailyReport,
    EventCategory,
    EventDefinition,
    EventKind,
    EventStatus,
    LayoutEvent,
    LegacyRecurrence,
    Occurrence,
    RecurrenceFrequency,
    RuleRecurrence,
)
from .occurrence_edits import (
    DeleteMode,
    delete_occurrence,
    exclude_occurrence,
    toggle_occurrence_completion,
)
from .reports import build_daily_report, category_breakdown
from .rrule_expander import RecurrenceExpander, expand_for_view, expand_recurring_events

__all__ = [
    "CalendarEngineError",
    "CalendarView",
    "Config",
    "DailyReport",
    "DeleteMode",
    "EventCategory",
    "EventDefinition",
    "EventKind",
    "EventStatus",
    "LayoutEvent",
    "LegacyRecurrence",
    "Occurrence",
    "RecurrenceExpander",
    "RecurrenceFrequency",
    "RuleParseError",
    "RuleRecurrence",
    "assign_columns",
    "build_daily_report",
    "category_breakdown",
    "configure_logging",
    "delete_occurrence",
    "exclude_occurrence",
    "expand_for_view",
    "expand_recurring_events",
    "layout_day",
    "layout_days",
    "load_config",
    "max_concurrency",
    "pack_intervals",
    "today",
    "toggle_occurrence_completion",
    "view_window",
]
