"""Security master maintenance."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from tradingdesk.core.exceptions import NotFoundError
from tradingdesk.domain.models import MarketDataRow, Security, SecurityType, Timeframe
from tradingdesk.domain.views import Candle
from tradingdesk.repositories.protocols import MarketDataRepository, SecurityRepository

logger = logging.getLogger(__name__)


@dataclass
class SecurityCreate:
    """Input data for registering a security."""

    symbol: str
    name: str
    region: Optional[str] = None
    type: str = "Equity"
    sector: Optional[str] = None
    industry: Optional[str] = None


class SecurityService:
    """Stores securities and their historical bars."""

    def __init__(
        self,
        security_repo: SecurityRepository,
        market_data_repo: MarketDataRepository,
    ):
        self._security_repo = security_repo
        self._market_data_repo = market_data_repo

    def store_security(self, data: SecurityCreate) -> Security:
        """
        Idempotent upsert by symbol.

        Returns the existing row when the symbol is already known, otherwise
        inserts and returns the new row. Calling it twice never duplicates.
        """
        symbol = data.symbol.strip().upper()
        existing = self._security_repo.get_by_symbol(symbol)
        if existing:
            return existing

        logger.info("Registering security %s", symbol)
        return self._security_repo.create(
            Security(
                symbol=symbol,
                name=data.name,
                exchange=data.region or "NASDAQ",
                security_type=SecurityType.from_provider_type(data.type),
                sector=data.sector,
                industry=data.industry,
            )
        )

    def store_historical_data(
        self,
        symbol: str,
        timeframe: Timeframe,
        candles: list[Candle],
    ) -> int:
        """Persist candles for a known security; existing bars are overwritten."""
        security = self._security_repo.get_by_symbol(symbol.upper())
        if not security:
            raise NotFoundError("Security", symbol)

        rows = [
            MarketDataRow(
                security_id=security.id,
                timestamp=candle.timestamp,
                timeframe=timeframe,
                open_price=Decimal(str(candle.open)),
                high_price=Decimal(str(candle.high)),
                low_price=Decimal(str(candle.low)),
                close_price=Decimal(str(candle.close)),
                volume=candle.volume,
            )
            for candle in candles
        ]
        return self._market_data_repo.upsert_many(rows)
