"""Data models for recurring event expansion and day layout."""

import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .calendar_utils import to_date


class _AliasedEnum(str, Enum):
    """String enum that also accepts the Portuguese labels found in stored records."""

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {}

    @classmethod
    def _missing_(cls, value: object) -> Any:
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        for member in cls:
            if member.value == key or member.name.lower() == key:
                return member
        alias = cls._aliases().get(key)
        return cls(alias) if alias is not None else None


class RecurrenceFrequency(_AliasedEnum):
    """Legacy recurrence granularity."""

    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {
            "nenhuma": "none",
            "diária": "daily",
            "diaria": "daily",
            "semanal": "weekly",
            "mensal": "monthly",
            "anual": "yearly",
        }


class EventStatus(_AliasedEnum):
    """Completion status of a non-recurring definition."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {
            "pendente": "pending",
            "em andamento": "in_progress",
            "concluído": "completed",
            "concluido": "completed",
        }


class EventCategory(_AliasedEnum):
    """Calendar categories."""

    LIFE = "life"
    FAMILY = "family"
    WORK = "work"
    CONTENT = "content"
    HEALTH = "health"
    HOME = "home"
    BILLS = "bills"
    STUDIES = "studies"
    OTHER = "other"

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {
            "vida": "life",
            "família": "family",
            "familia": "family",
            "trabalho": "work",
            "conteúdo": "content",
            "conteudo": "content",
            "saúde": "health",
            "saude": "health",
            "casa": "home",
            "contas": "bills",
            "estudos": "studies",
            "outro": "other",
        }


class EventKind(_AliasedEnum):
    """Whether an event is a task to tick off or a fixed appointment."""

    TASK = "task"
    APPOINTMENT = "appointment"

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {"tarefa": "task", "compromisso": "appointment"}


# Recurrence encodings


class LegacyRecurrence(BaseModel):
    """Enum-plus-weekday-filter recurrence encoding."""

    kind: Literal["legacy"] = "legacy"
    frequency: RecurrenceFrequency
    weekday_filter: frozenset[int] = Field(default_factory=frozenset)

    model_config = ConfigDict(frozen=True)

    @property
    def day_by_day(self) -> bool:
        """Daily/Weekly with a weekday filter steps one day at a time."""
        return bool(self.weekday_filter) and self.frequency in (
            RecurrenceFrequency.DAILY,
            RecurrenceFrequency.WEEKLY,
        )


class RuleRecurrence(BaseModel):
    """iCalendar RRULE encoding, with the legacy encoding kept as parse fallback."""

    kind: Literal["rule"] = "rule"
    rule: str
    fallback: Optional[LegacyRecurrence] = None

    model_config = ConfigDict(frozen=True)


RecurrenceSpec = Annotated[Union[LegacyRecurrence, RuleRecurrence], Field(discriminator="kind")]


class EventDefinition(BaseModel):
    """Persisted master record of a calendar event."""

    id: str = Field(..., min_length=1, description="Stable definition ID")
    title: str = Field(default="", description="Event title")
    category: EventCategory = Field(default=EventCategory.OTHER, description="Event category")
    kind: EventKind = Field(default=EventKind.TASK, description="Task or appointment")

    # Time information
    anchor_date: datetime.date = Field(..., description="Date the event was created on")
    time_of_day: Optional[datetime.time] = Field(
        default=None, description="Start time; absent for all-day events"
    )
    duration_minutes: Optional[int] = Field(
        default=None, ge=0, description="Duration; absent uses the configured default"
    )

    # Recurrence
    recurrence: RecurrenceFrequency = Field(
        default=RecurrenceFrequency.NONE, description="Legacy recurrence granularity"
    )
    rrule: Optional[str] = Field(default=None, description="iCalendar RRULE string")
    weekday_filter: frozenset[int] = Field(
        default_factory=frozenset, description="Weekday ordinals, 0=Sunday"
    )
    is_recurring: bool = Field(default=False, description="Explicit recurring flag")

    # Per-date state
    exclusions: frozenset[datetime.date] = Field(
        default_factory=frozenset, description="Dates that produce no occurrence"
    )
    completions: frozenset[datetime.date] = Field(
        default_factory=frozenset, description="Dates whose occurrence is done"
    )
    status: EventStatus = Field(
        default=EventStatus.PENDING, description="Status of a non-recurring definition"
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("recurrence", mode="before")
    @classmethod
    def _coerce_recurrence(cls, value: Any) -> Any:
        if value is None:
            return RecurrenceFrequency.NONE
        return RecurrenceFrequency(value)

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> Any:
        if value is None:
            return EventStatus.PENDING
        return EventStatus(value)

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: Any) -> Any:
        if value is None:
            return EventCategory.OTHER
        return EventCategory(value)

    @field_validator("kind", mode="before")
    @classmethod
    def _coerce_kind(cls, value: Any) -> Any:
        if value is None:
            return EventKind.TASK
        return EventKind(value)

    @field_validator("anchor_date", mode="before")
    @classmethod
    def _coerce_anchor_date(cls, value: Any) -> datetime.date:
        return to_date(value)

    @field_validator("time_of_day", mode="before")
    @classmethod
    def _coerce_time_of_day(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("rrule", mode="before")
    @classmethod
    def _coerce_rrule(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("weekday_filter", mode="before")
    @classmethod
    def _coerce_weekday_filter(cls, value: Any) -> Any:
        return frozenset() if value is None else frozenset(value)

    @field_validator("weekday_filter")
    @classmethod
    def _check_weekday_filter(cls, value: frozenset[int]) -> frozenset[int]:
        invalid = sorted(day for day in value if not 0 <= day <= 6)
        if invalid:
            raise ValueError(f"weekday ordinals must be 0..6, got {invalid}")
        return value

    @field_validator("exclusions", "completions", mode="before")
    @classmethod
    def _coerce_date_set(cls, value: Any) -> frozenset[datetime.date]:
        if value is None:
            return frozenset()
        return frozenset(to_date(item) for item in value)

    @property
    def recurs(self) -> bool:
        """True when the definition expands beyond its master occurrence."""
        return self.recurrence != RecurrenceFrequency.NONE or self.is_recurring

    @property
    def recurrence_spec(self) -> Optional[Union[LegacyRecurrence, RuleRecurrence]]:
        """Return the authoritative recurrence encoding.

        A rule string always wins; a legacy frequency present alongside it is
        kept only as the fallback used when the rule cannot be parsed.
        """
        legacy = None
        if self.recurrence != RecurrenceFrequency.NONE:
            legacy = LegacyRecurrence(frequency=self.recurrence, weekday_filter=self.weekday_filter)
        if self.rrule:
            return RuleRecurrence(rule=self.rrule, fallback=legacy)
        return legacy


class Occurrence(BaseModel):
    """Concrete instance of a definition on one date. Never persisted."""

    source_id: str = Field(..., description="Owning definition ID")
    occurrence_id: str = Field(..., description="Definition ID, or a per-date virtual ID")
    date: datetime.date = Field(..., description="Occurrence date")
    start_minute: int = Field(..., ge=0, description="Start in minutes from midnight")
    end_minute: int = Field(..., ge=0, description="End in minutes from midnight")
    is_all_day: bool = Field(default=False, description="No time of day was given")
    is_virtual: bool = Field(default=False, description="Generated by recurrence expansion")
    completed: bool = Field(default=False, description="Resolved completion state")

    # Carried from the definition
    title: str = ""
    category: EventCategory = EventCategory.OTHER
    kind: EventKind = EventKind.TASK

    model_config = ConfigDict(frozen=True)

    @property
    def duration_minutes(self) -> int:
        return self.end_minute - self.start_minute

    @property
    def key(self) -> tuple[str, datetime.date]:
        """Deterministic identity of an occurrence."""
        return self.source_id, self.date

    @property
    def status(self) -> EventStatus:
        return EventStatus.COMPLETED if self.completed else EventStatus.PENDING


class LayoutEvent(BaseModel):
    """Occurrence placed in a column of its day."""

    occurrence: Occurrence
    column_index: int = Field(..., ge=0, description="0-based column")
    overlap_group_size: int = Field(..., ge=1, description="Columns spanned by overlapping events")

    model_config = ConfigDict(frozen=True)


class DailyReport(BaseModel):
    """Completion and time-budget summary for one day."""

    date: datetime.date
    total: int = 0
    completed: int = 0
    pending: int = 0
    busy_minutes: int = 0
    free_minutes: int = 0
    completion_percent: float = 0.0
