"""Unit tests for cerebro_calendar.reports and cerebro_calendar.filters."""

import datetime

import pytest

from cerebro_calendar.config_loader import load_config
from cerebro_calendar.filters import filter_by_categories, filter_by_status, occurrences_on
from cerebro_calendar.models import EventCategory, EventStatus
from cerebro_calendar.reports import (
    DEFAULT_DAY_CAPACITY_MINUTES,
    build_daily_report,
    category_breakdown,
)

pytestmark = pytest.mark.unit

JAN_1 = datetime.date(2024, 1, 1)


@pytest.fixture
def sample_day(make_occurrence):
    return [
        make_occurrence("reel", "09:00", "10:00", category=EventCategory.CONTENT, completed=True),
        make_occurrence("gym", "18:00", "19:30", category=EventCategory.HEALTH),
        make_occurrence("rent", "08:00", "08:15", category=EventCategory.BILLS),
        make_occurrence(
            "call", "09:00", "09:30", category=EventCategory.WORK, date=datetime.date(2024, 1, 2)
        ),
    ]


class TestDailyReport:
    """Tests for the daily summary."""

    def test_counts_only_the_requested_day(self, sample_day):
        report = build_daily_report(sample_day, JAN_1)

        assert report.date == JAN_1
        assert report.total == 3
        assert report.completed == 1
        assert report.pending == 2
        assert report.busy_minutes == 60 + 90 + 15
        assert report.free_minutes == DEFAULT_DAY_CAPACITY_MINUTES - 165
        assert report.completion_percent == pytest.approx(100 / 3)

    def test_empty_day(self):
        report = build_daily_report([], JAN_1)

        assert report.total == 0
        assert report.completion_percent == 0.0
        assert report.free_minutes == DEFAULT_DAY_CAPACITY_MINUTES

    def test_free_time_never_negative(self, make_occurrence):
        long_day = [make_occurrence("shift", "00:00", "23:00")]

        assert build_daily_report(long_day, JAN_1, capacity_minutes=600).free_minutes == 0

    def test_capacity_read_from_settings(self, sample_day, simple_settings):
        simple_settings.day_capacity_minutes = 480

        report = build_daily_report(sample_day, JAN_1, settings=simple_settings)

        assert report.free_minutes == 480 - 165

    def test_explicit_capacity_beats_settings(self, sample_day, simple_settings):
        report = build_daily_report(sample_day, JAN_1, capacity_minutes=300, settings=simple_settings)

        assert report.free_minutes == 300 - 165

    def test_capacity_from_loaded_config(self, sample_day, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("day_capacity_minutes: 600\n", encoding="utf-8")

        report = build_daily_report(sample_day, JAN_1, settings=load_config(path))

        assert report.free_minutes == 600 - 165


def test_category_breakdown_covers_one_week(sample_day, make_occurrence):
    next_week = make_occurrence("reel-2", "09:00", "10:00", date=datetime.date(2024, 1, 8))

    counts = category_breakdown(sample_day + [next_week], JAN_1)

    assert counts == {
        EventCategory.CONTENT: 1,
        EventCategory.HEALTH: 1,
        EventCategory.BILLS: 1,
        EventCategory.WORK: 1,
    }


class TestFilters:
    """Tests for category and status filters."""

    def test_filter_by_categories_accepts_labels(self, sample_day):
        kept = filter_by_categories(sample_day, ["Saúde", EventCategory.BILLS])

        assert [o.source_id for o in kept] == ["gym", "rent"]

    def test_filter_by_categories_empty_selection(self, sample_day):
        assert filter_by_categories(sample_day, []) == []

    def test_filter_by_status(self, sample_day):
        assert [o.source_id for o in filter_by_status(sample_day, EventStatus.COMPLETED)] == ["reel"]
        assert len(filter_by_status(sample_day, "pending")) == 3

    @pytest.mark.parametrize("status", [None, "all"])
    def test_filter_by_status_keeps_all(self, sample_day, status):
        assert filter_by_status(sample_day, status) == sample_day

    def test_occurrences_on(self, sample_day):
        assert [o.source_id for o in occurrences_on(sample_day, datetime.date(2024, 1, 2))] == ["call"]


def test_category_breakdown_week_start_from_settings(make_occurrence, simple_settings):
    sunday = make_occurrence("family", "10:00", "11:00", date=datetime.date(2024, 1, 7))
    simple_settings.week_starts_on = 1

    # Monday-first week of 2024-01-01 runs through Sunday 2024-01-07
    assert category_breakdown([sunday], JAN_1, settings=simple_settings) == {EventCategory.OTHER: 1}
    assert category_breakdown([sunday], JAN_1) == {}
