"""Datetime helpers."""

from __future__ import annotations

import os
from datetime import date

import pendulum

# Moscow time has been a fixed UTC+3 offset since 2014.
DEFAULT_TZ = "Europe/Moscow"
SNAPSHOT_FORMAT = "HH:mm"


def timezone_name() -> str:
    return os.environ.get("TIMEZONE", DEFAULT_TZ)


def now_in_tz() -> pendulum.DateTime:
    tz = pendulum.timezone(timezone_name())
    return pendulum.now(tz)


def today_in_tz() -> date:
    return now_in_tz().date()


def format_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def clock_minute(value: pendulum.DateTime | None = None) -> str:
    """Return ``HH:MM`` for *value* (default: now) in the reporting timezone."""
    value = value or now_in_tz()
    return value.in_timezone(timezone_name()).format(SNAPSHOT_FORMAT)
