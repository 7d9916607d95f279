"""Domain layer - pure business models with no external dependencies."""

from tradingdesk.domain.models import (
    TransactionType,
    SecurityType,
    QuoteSource,
    Timeframe,
    OutputSize,
    Security,
    MarketDataRow,
    Portfolio,
    Position,
    Transaction,
)

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
