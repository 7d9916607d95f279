"""Enumerations for domain models."""

from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Types of executed portfolio transactions."""

    BUY = "buy"
    SELL = "sell"


class SecurityType(str, Enum):
    """Instrument classes stored in the securities table."""

    STOCK = "stock"
    ETF = "etf"
    OTHER = "other"

    @classmethod
    def from_provider_type(cls, value: Optional[str]) -> "SecurityType":
        """Map a provider type label ("Equity", "ETF", ...) to a SecurityType."""
        label = (value or "").strip().lower()
        if label in ("equity", "stock"):
            return cls.STOCK
        if label == "etf":
            return cls.ETF
        return cls.OTHER


class QuoteSource(str, Enum):
    """Origin of a quote or series."""

    PROVIDER = "provider"
    SYNTHETIC = "synthetic"


class Timeframe(str, Enum):
    """Bar sizes accepted by the historical data endpoint."""

    MIN_1 = "1min"
    MIN_5 = "5min"
    MIN_15 = "15min"
    MIN_30 = "30min"
    MIN_60 = "60min"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def is_intraday(self) -> bool:
        return self.value.endswith("min")


class OutputSize(str, Enum):
    """Provider output size for historical series."""

    COMPACT = "compact"
    FULL = "full"
