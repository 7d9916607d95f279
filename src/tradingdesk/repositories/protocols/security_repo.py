"""Security and stored market data repository protocols."""

from typing import Optional, Protocol

from tradingdesk.domain.models import MarketDataRow, Security, Timeframe


class SecurityRepository(Protocol):
    """Interface for security master data access."""

    def create(self, security: Security) -> Security:
        """Persist a new security and return it with its id."""
        ...

    def get_by_id(self, security_id: int) -> Optional[Security]:
        """Retrieve security by ID."""
        ...

    def get_by_symbol(self, symbol: str) -> Optional[Security]:
        """Retrieve security by its unique symbol."""
        ...


class MarketDataRepository(Protocol):
    """Interface for stored OHLCV bars."""

    def upsert_many(self, rows: list[MarketDataRow]) -> int:
        """Insert bars, updating OHLCV on (security, timestamp, timeframe) conflicts."""
        ...

    def list_for_security(self, security_id: int, timeframe: Timeframe) -> list[MarketDataRow]:
        """List stored bars for a security, oldest first."""
        ...
