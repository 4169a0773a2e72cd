"""cerebro_calendar.config_loader

Lightweight settings loader for cerebro_calendar.

- Reads YAML (PyYAML); JSON files load too since JSON is valid YAML.
- Exposes a typed dataclass `Config` and a `load_config()` helper that accepts
  an optional path override.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("cerebro_calendar") / "config.yaml"


@dataclass
class Config:
    """Typed configuration for cerebro_calendar.

    Fields:
        default_duration_minutes: duration used when a definition has none (>= 0)
        max_occurrences_per_rule: cap on rule-string occurrences per definition (1..10000)
        day_capacity_minutes: waking-day budget used by daily reports (0..1440)
        week_starts_on: weekday ordinal weeks start on, 0=Sunday (0..6)
        log_level: logging level name
    """

    default_duration_minutes: int = 60
    max_occurrences_per_rule: int = 1000
    day_capacity_minutes: int = 960
    week_starts_on: int = 0
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Config:
        """Create Config from a plain mapping, applying defaults and validation.

        Numeric-like values are coerced to int and clamped to their allowed
        range, logging a warning whenever a value is replaced.
        """
        if data is None:
            data = {}

        def _coerce_int(key: str, default: int, low: int, high: int | None = None) -> int:
            raw = data.get(key, default)
            try:
                value = int(raw)
            except (TypeError, ValueError):
                logger.warning("Config %s=%r is not an int; using default %d", key, raw, default)
                return default
            if value < low:
                logger.warning("%s %d below minimum; coercing to %d", key, value, low)
                return low
            if high is not None and value > high:
                logger.warning("%s %d above maximum; coercing to %d", key, value, high)
                return high
            return value

        log_level = data.get("log_level", "INFO")
        log_level = str(log_level).upper() if log_level is not None else "INFO"

        return cls(
            default_duration_minutes=_coerce_int("default_duration_minutes", 60, 0),
            max_occurrences_per_rule=_coerce_int("max_occurrences_per_rule", 1000, 1, 10000),
            day_capacity_minutes=_coerce_int("day_capacity_minutes", 960, 0, 1440),
            week_starts_on=_coerce_int("week_starts_on", 0, 0, 6),
            log_level=log_level,
        )


def load_config(path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file and return a Config instance.

    Args:
        path: Optional path to the config file. If not provided the default is
              ./cerebro_calendar/config.yaml (relative to current working dir).

    Returns:
        Config dataclass instance with values from file (or defaults).

    Behavior:
    - If file is missing: returns Config() with defaults.
    - If file is empty: returns Config() with defaults.
    - If file exists but top-level is not a mapping: raises ValueError.
    """
    p = Path(path) if path else Path.cwd() / DEFAULT_CONFIG_PATH
    logger.debug("Attempting to load config from %s", p)
    if not p.exists():
        logger.info("Config file %s not found; using defaults", p)
        return Config()

    raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        logger.warning("Config file %s parsed but top-level is not a mapping: %r", p, raw)
        raise ValueError("Config file must contain a mapping at top level")  # noqa: TRY004
    cfg = Config.from_dict(raw)
    logger.info("Loaded configuration from %s", p)
    logger.debug("Configuration values: %s", cfg)
    return cfg
