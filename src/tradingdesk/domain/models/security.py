"""Security and stored market data domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from tradingdesk.domain.models.enums import SecurityType, Timeframe


@dataclass
class Security:
    """Tradable instrument; symbol is unique across the table."""

    symbol: str
    name: str
    exchange: str = "NASDAQ"
    security_type: SecurityType = SecurityType.STOCK
    sector: Optional[str] = None
    industry: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.security_type, str):
            self.security_type = SecurityType(self.security_type)


@dataclass
class MarketDataRow:
    """Stored OHLCV bar for a security at a given timeframe."""

    security_id: int
    timestamp: datetime
    timeframe: Timeframe
    open_price: Decimal
    high_price: Decimal
    low_price: Decimal
    close_price: Decimal
    volume: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.timeframe, str):
            self.timeframe = Timeframe(self.timeframe)
