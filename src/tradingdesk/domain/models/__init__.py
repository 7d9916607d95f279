"""Domain models package."""

from tradingdesk.domain.models.enums import (
    TransactionType,
    SecurityType,
    QuoteSource,
    Timeframe,
    OutputSize,
)
from tradingdesk.domain.models.security import Security, MarketDataRow
from tradingdesk.domain.models.portfolio import Portfolio, Position
from tradingdesk.domain.models.transaction import Transaction

__all__ = [
    "TransactionType",
    "SecurityType",
    "QuoteSource",
    "Timeframe",
    "OutputSize",
    "Security",
    "MarketDataRow",
    "Portfolio",
    "Position",
    "Transaction",
]
