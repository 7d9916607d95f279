"""Market data providers module."""

from tradingdesk.providers.market_data_provider import UpstreamQuoteProvider
from tradingdesk.providers.alpha_vantage import AlphaVantageProvider
from tradingdesk.providers.synthetic_provider import (
    SyntheticDataGenerator,
    FALLBACK_CATALOG,
    base_price_for,
)

__all__ = [
    "UpstreamQuoteProvider",
    "AlphaVantageProvider",
    "SyntheticDataGenerator",
    "FALLBACK_CATALOG",
    "base_price_for",
]
