"""View models for market data outputs.

These are the shapes returned to route handlers and written to the quote
cache. Serialization uses the camelCase wire keys consumers already expect.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from tradingdesk.core.timezone import parse_datetime_eastern
from tradingdesk.domain.models.enums import QuoteSource


@dataclass(frozen=True)
class Quote:
    """Point-in-time price for a symbol."""

    symbol: str
    price: float
    change: float
    change_percent: float
    volume: int
    previous_close: float
    timestamp: datetime
    source: QuoteSource

    def to_dict(self) -> dict[str, Any]:
        """Event / cache representation."""
        return {
            "symbol": self.symbol,
            "price": self.price,
            "change": self.change,
            "changePercent": self.change_percent,
            "volume": self.volume,
            "previousClose": self.previous_close,
            "timestamp": self.timestamp.isoformat(),
            "source": self.source.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Quote":
        return cls(
            symbol=data["symbol"],
            price=float(data["price"]),
            change=float(data["change"]),
            change_percent=float(data["changePercent"]),
            volume=int(data["volume"]),
            previous_close=float(data["previousClose"]),
            timestamp=parse_datetime_eastern(data["timestamp"]),
            source=QuoteSource(data["source"]),
        )


@dataclass(frozen=True)
class Candle:
    """OHLCV bar."""

    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Candle":
        return cls(
            timestamp=parse_datetime_eastern(data["timestamp"]),
            open=float(data["open"]),
            high=float(data["high"]),
            low=float(data["low"]),
            close=float(data["close"]),
            volume=int(data["volume"]),
        )


@dataclass(frozen=True)
class SecurityMatch:
    """Single symbol search hit."""

    symbol: str
    name: str
    type: str
    region: str
    currency: str
    market_open: Optional[str] = None
    market_close: Optional[str] = None
    timezone: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data = {
            "symbol": self.symbol,
            "name": self.name,
            "type": self.type,
            "region": self.region,
            "currency": self.currency,
        }
        # Provider extras are only present on upstream matches
        if self.market_open is not None:
            data["marketOpen"] = self.market_open
        if self.market_close is not None:
            data["marketClose"] = self.market_close
        if self.timezone is not None:
            data["timezone"] = self.timezone
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SecurityMatch":
        return cls(
            symbol=data["symbol"],
            name=data["name"],
            type=data["type"],
            region=data["region"],
            currency=data["currency"],
            market_open=data.get("marketOpen"),
            market_close=data.get("marketClose"),
            timezone=data.get("timezone"),
        )


@dataclass
class MarketStatus:
    """Open/closed state and the next session boundaries."""

    is_open: bool
    next_open: datetime
    next_close: datetime
    timezone: str = "US/Eastern"


@dataclass
class MarketMovers:
    """Top gainers, losers and most active symbols from the movers watch list."""

    gainers: list[Quote] = field(default_factory=list)
    losers: list[Quote] = field(default_factory=list)
    most_active: list[Quote] = field(default_factory=list)
