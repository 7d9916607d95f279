"""Transaction repository protocol."""

from datetime import datetime
from typing import Optional, Protocol

from tradingdesk.domain.models import Transaction


class TransactionRepository(Protocol):
    """Interface for append-only transaction data access."""

    def create(self, transaction: Transaction) -> Transaction:
        """Persist a new transaction."""
        ...

    def list_by_portfolio(
        self,
        portfolio_id: str,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Transaction]:
        """List transactions for a portfolio, newest first."""
        ...

    def list_between(
        self,
        portfolio_id: str,
        start: datetime,
        end: datetime,
    ) -> list[Transaction]:
        """List transactions executed within [start, end], oldest first."""
        ...
