"""Unit tests for cerebro_calendar.config_loader."""

import logging

import pytest

from cerebro_calendar.config_loader import Config, load_config
from cerebro_calendar.rrule_expander import ExpanderConfig

pytestmark = pytest.mark.unit


class TestConfigFromDict:
    """Tests for Config.from_dict coercion."""

    def test_defaults(self):
        cfg = Config.from_dict(None)

        assert cfg == Config()
        assert cfg.default_duration_minutes == 60
        assert cfg.max_occurrences_per_rule == 1000
        assert cfg.day_capacity_minutes == 960
        assert cfg.week_starts_on == 0
        assert cfg.log_level == "INFO"

    def test_numeric_strings_coerced(self):
        cfg = Config.from_dict({"default_duration_minutes": "45", "week_starts_on": "1"})

        assert cfg.default_duration_minutes == 45
        assert cfg.week_starts_on == 1

    @pytest.mark.parametrize(
        ("key", "raw", "expected"),
        [
            ("default_duration_minutes", -10, 0),
            ("max_occurrences_per_rule", 0, 1),
            ("max_occurrences_per_rule", 50000, 10000),
            ("day_capacity_minutes", 2000, 1440),
            ("week_starts_on", 9, 6),
        ],
    )
    def test_out_of_range_values_clamped(self, key, raw, expected, caplog):
        with caplog.at_level(logging.WARNING, logger="cerebro_calendar.config_loader"):
            cfg = Config.from_dict({key: raw})

        assert getattr(cfg, key) == expected
        assert key in caplog.text

    def test_non_numeric_value_uses_default(self, caplog):
        with caplog.at_level(logging.WARNING, logger="cerebro_calendar.config_loader"):
            cfg = Config.from_dict({"day_capacity_minutes": "lots"})

        assert cfg.day_capacity_minutes == 960
        assert "not an int" in caplog.text

    def test_log_level_uppercased(self):
        assert Config.from_dict({"log_level": "debug"}).log_level == "DEBUG"


class TestLoadConfig:
    """Tests for reading YAML config files."""

    def test_missing_file_returns_defaults(self, tmp_path):
        assert load_config(tmp_path / "missing.yaml") == Config()

    def test_empty_file_returns_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(path) == Config()

    def test_values_loaded(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "default_duration_minutes: 30\nmax_occurrences_per_rule: 200\nlog_level: warning\n",
            encoding="utf-8",
        )

        cfg = load_config(str(path))

        assert cfg.default_duration_minutes == 30
        assert cfg.max_occurrences_per_rule == 200
        assert cfg.log_level == "WARNING"

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping"):
            load_config(path)

    def test_default_path_relative_to_cwd(self, tmp_path, monkeypatch):
        (tmp_path / "cerebro_calendar").mkdir()
        (tmp_path / "cerebro_calendar" / "config.yaml").write_text(
            "week_starts_on: 1\n", encoding="utf-8"
        )
        monkeypatch.chdir(tmp_path)

        assert load_config().week_starts_on == 1


def test_loaded_config_drives_expander(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("default_duration_minutes: 25\n", encoding="utf-8")

    config = ExpanderConfig.from_settings(load_config(path))

    assert config.default_duration_minutes == 25
    assert config.max_occurrences_per_rule == 1000
