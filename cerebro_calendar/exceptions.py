"""Exception hierarchy for the cerebro_calendar engine.

Only rule parsing has a meaningful failure mode inside the engine. It is raised
by the rule parser and recovered by the expander, which falls back to legacy
stepping and reports the failure to its diagnostic logger.
"""

from typing import Optional


class CalendarEngineError(Exception):
    """Base exception for all cerebro_calendar errors."""


class RuleParseError(CalendarEngineError):
    """A recurrence rule string could not be parsed.

    Raised when:
    - The string is not valid iCalendar RRULE grammar
    - FREQ is missing or unknown
    - A rule part has a malformed value (e.g. INTERVAL=bad)
    """

    def __init__(self, message: str, rule: str = "", definition_id: Optional[str] = None):
        super().__init__(message)
        self.rule = rule
        self.definition_id = definition_id
