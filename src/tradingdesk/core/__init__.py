"""Core utilities and shared functionality."""

from tradingdesk.core.timezone import (
    now_eastern,
    to_eastern,
    at_eastern_time,
    to_naive_eastern,
    parse_datetime_eastern,
    EASTERN_TZ,
)
from tradingdesk.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    UpstreamUnavailableError,
)

__all__ = [
    "now_eastern",
    "to_eastern",
    "at_eastern_time",
    "to_naive_eastern",
    "parse_datetime_eastern",
    "EASTERN_TZ",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "UpstreamUnavailableError",
]
