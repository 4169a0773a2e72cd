"""Shared fixtures for cerebro_calendar tests."""

import datetime
from collections.abc import Generator
from types import SimpleNamespace
from typing import Any, Callable

import pytest

from cerebro_calendar.models import EventDefinition, Occurrence


def pytest_configure(config: Any) -> None:
    """Register test markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "critical_path: Core functionality tests")


@pytest.fixture
def simple_settings() -> SimpleNamespace:
    """Lightweight settings object mirroring `Config` fields.

    Fields:
      - default_duration_minutes: duration for definitions without one
      - max_occurrences_per_rule: cap on rule-string occurrences
      - day_capacity_minutes: day budget used by reports
      - week_starts_on: weekday ordinal weeks start on (0=Sunday)
    """
    return SimpleNamespace(
        default_duration_minutes=60,
        max_occurrences_per_rule=1000,
        day_capacity_minutes=960,
        week_starts_on=0,
    )


@pytest.fixture
def make_definition() -> Callable[..., EventDefinition]:
    """Factory for EventDefinition with sensible defaults.

    Any field can be overridden by keyword; ``anchor_date`` defaults to
    Monday 2024-01-01.
    """

    def _make(**overrides: Any) -> EventDefinition:
        data: dict[str, Any] = {
            "id": "evt-1",
            "title": "Post reel",
            "anchor_date": datetime.date(2024, 1, 1),
        }
        data.update(overrides)
        return EventDefinition(**data)

    return _make


@pytest.fixture
def make_occurrence() -> Callable[..., Occurrence]:
    """Factory for a timed Occurrence on 2024-01-01 from ``HH:MM`` strings."""

    def _make(source_id: str, start: str, end: str, **overrides: Any) -> Occurrence:
        start_h, start_m = (int(part) for part in start.split(":"))
        end_h, end_m = (int(part) for part in end.split(":"))
        data: dict[str, Any] = {
            "source_id": source_id,
            "occurrence_id": source_id,
            "date": datetime.date(2024, 1, 1),
            "start_minute": start_h * 60 + start_m,
            "end_minute": end_h * 60 + end_m,
        }
        data.update(overrides)
        return Occurrence(**data)

    return _make


@pytest.fixture(autouse=True)
def clean_test_environment(monkeypatch: Any) -> Generator[None, Any, None]:
    """Ensure date and logging overrides do not leak between tests."""
    for name in ("CEREBRO_TEST_DATE", "CEREBRO_DEBUG", "CEREBRO_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    yield
