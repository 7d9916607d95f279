"""Portfolio and position repository protocols."""

from typing import Optional, Protocol

from tradingdesk.domain.models import Portfolio, Position


class PortfolioRepository(Protocol):
    """Interface for portfolio data access."""

    def create(self, portfolio: Portfolio) -> Portfolio:
        """Persist a new portfolio."""
        ...

    def get_by_id(self, portfolio_id: str) -> Optional[Portfolio]:
        """Retrieve portfolio by ID."""
        ...

    def list_active_by_owner(self, owner_id: str) -> list[Portfolio]:
        """List an owner's active portfolios, newest first."""
        ...


class PositionRepository(Protocol):
    """Interface for position data access."""

    def list_by_portfolio(self, portfolio_id: str) -> list[Position]:
        """
        List positions joined with their security columns,
        ordered by market value descending.
        """
        ...

    def upsert(self, position: Position) -> Position:
        """Insert or update the position for (portfolio, security)."""
        ...
