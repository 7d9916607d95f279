"""Market session status computed from wall-clock time."""

from datetime import date, datetime, timedelta
from typing import Optional

from tradingdesk.core.timezone import at_eastern_time, now_eastern, to_eastern
from tradingdesk.domain.views import MarketStatus

OPEN_HOUR = 9
OPEN_MINUTE = 30
CLOSE_HOUR = 16


def _is_weekday(day: date) -> bool:
    return day.weekday() < 5


def next_market_open(now: datetime) -> datetime:
    """
    Today at 09:30, or the next weekday at 09:30 once today's session is
    over or when today is a weekend day.
    """
    local = to_eastern(now)
    day = local.date()
    if local.hour >= CLOSE_HOUR or not _is_weekday(day):
        day += timedelta(days=1)
        while not _is_weekday(day):
            day += timedelta(days=1)
    return at_eastern_time(day, OPEN_HOUR, OPEN_MINUTE)


def next_market_close(now: datetime) -> datetime:
    """Today at 16:00, or tomorrow at 16:00 once that has passed."""
    local = to_eastern(now)
    day = local.date()
    if local.hour >= CLOSE_HOUR:
        day += timedelta(days=1)
    return at_eastern_time(day, CLOSE_HOUR)


def get_market_status(now: Optional[datetime] = None) -> MarketStatus:
    """Open iff Monday-Friday with the Eastern hour in [9, 16)."""
    local = to_eastern(now) if now is not None else now_eastern()
    is_open = _is_weekday(local.date()) and OPEN_HOUR <= local.hour < CLOSE_HOUR
    return MarketStatus(
        is_open=is_open,
        next_open=next_market_open(local),
        next_close=next_market_close(local),
    )
