"""View models for service outputs."""

from tradingdesk.domain.views.market import (
    Quote,
    Candle,
    SecurityMatch,
    MarketStatus,
    MarketMovers,
)
from tradingdesk.domain.views.portfolio import (
    PortfolioSummary,
    AllocationItem,
    DailyFlow,
)

__all__ = [
    "Quote",
    "Candle",
    "SecurityMatch",
    "MarketStatus",
    "MarketMovers",
    "PortfolioSummary",
    "AllocationItem",
    "DailyFlow",
]
