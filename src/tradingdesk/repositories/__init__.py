"""Repository layer - data access abstractions and implementations."""

from tradingdesk.repositories.protocols import (
    SecurityRepository,
    MarketDataRepository,
    PortfolioRepository,
    PositionRepository,
    TransactionRepository,
)

__all__ = [
    "SecurityRepository",
    "MarketDataRepository",
    "PortfolioRepository",
    "PositionRepository",
    "TransactionRepository",
]
