"""Timezone utilities for US/Eastern market time."""

from datetime import date, datetime, time
from typing import Optional

import pytz
from dateutil import parser as date_parser

EASTERN_TZ = pytz.timezone("US/Eastern")


def now_eastern() -> datetime:
    """Return current time in US/Eastern timezone."""
    return datetime.now(EASTERN_TZ)


def to_eastern(dt: datetime) -> datetime:
    """Convert a datetime to US/Eastern timezone."""
    if dt.tzinfo is None:
        # Assume naive datetime is already Eastern
        return EASTERN_TZ.localize(dt)
    return dt.astimezone(EASTERN_TZ)


def at_eastern_time(day: date, hour: int, minute: int = 0) -> datetime:
    """Return the Eastern wall-clock instant on the given calendar day at hour:minute."""
    return EASTERN_TZ.localize(datetime.combine(day, time(hour, minute)))


def parse_datetime_eastern(value: str, default_tz: Optional[pytz.BaseTzInfo] = None) -> datetime:
    """
    Parse a datetime string and return it in US/Eastern timezone.

    If no timezone is provided in the string, assumes US/Eastern.
    Provider time series keys ("2024-06-14" or "2024-06-14 15:55:00") go through here.
    """
    dt = date_parser.parse(value)
    if dt.tzinfo is None:
        tz = default_tz or EASTERN_TZ
        dt = tz.localize(dt)
    return to_eastern(dt)


def to_naive_eastern(dt: datetime) -> datetime:
    """Convert to US/Eastern and drop tzinfo (storage format for DateTime columns)."""
    return to_eastern(dt).replace(tzinfo=None)
