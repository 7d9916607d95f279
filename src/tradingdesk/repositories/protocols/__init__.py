"""Repository protocol definitions (interfaces)."""

from tradingdesk.repositories.protocols.security_repo import (
    SecurityRepository,
    MarketDataRepository,
)
from tradingdesk.repositories.protocols.portfolio_repo import (
    PortfolioRepository,
    PositionRepository,
)
from tradingdesk.repositories.protocols.transaction_repo import TransactionRepository

__all__ = [
    "SecurityRepository",
    "MarketDataRepository",
    "PortfolioRepository",
    "PositionRepository",
    "TransactionRepository",
]
