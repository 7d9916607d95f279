"""Synthetic market data for offline, demo and fallback use."""

import random
from datetime import datetime, timedelta
from typing import Optional

from tradingdesk.core.timezone import now_eastern
from tradingdesk.domain.models import QuoteSource, Timeframe
from tradingdesk.domain.views import Candle, Quote, SecurityMatch


# Deterministic base prices for common symbols
_BASE_PRICES: dict[str, float] = {
    "AAPL": 175.00,
    "GOOGL": 2800.00,
    "MSFT": 340.00,
    "AMZN": 3200.00,
    "TSLA": 800.00,
    "NVDA": 450.00,
    "META": 320.00,
    "NFLX": 400.00,
    "SPY": 420.00,
    "QQQ": 350.00,
}
DEFAULT_BASE_PRICE = 100.00

# Well-known symbols served when symbol search upstream has nothing
FALLBACK_CATALOG: tuple[SecurityMatch, ...] = tuple(
    SecurityMatch(symbol=symbol, name=name, type="Equity", region="United States", currency="USD")
    for symbol, name in (
        ("AAPL", "Apple Inc."),
        ("GOOGL", "Alphabet Inc."),
        ("MSFT", "Microsoft Corporation"),
        ("AMZN", "Amazon.com Inc."),
        ("TSLA", "Tesla Inc."),
        ("NVDA", "NVIDIA Corporation"),
        ("META", "Meta Platforms Inc."),
        ("NFLX", "Netflix Inc."),
    )
)

MAX_SEARCH_RESULTS = 10


def base_price_for(symbol: str) -> float:
    """Return the reference price used to anchor synthetic data for a symbol."""
    return _BASE_PRICES.get(symbol.upper(), DEFAULT_BASE_PRICE)


class SyntheticDataGenerator:
    """
    Bounded-random price, candle and search data.

    All randomness comes from one random.Random; the same seed yields the
    same sequence of outputs. Without a seed the output is non-reproducible.
    """

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def quote(self, symbol: str, as_of: Optional[datetime] = None) -> Quote:
        """Current price within +/-5% of the symbol's base price."""
        symbol = symbol.upper()
        base = base_price_for(symbol)
        drift = (self._rng.random() - 0.5) * 0.1
        price = base * (1 + drift)
        change = price - base

        return Quote(
            symbol=symbol,
            price=round(price, 2),
            change=round(change, 2),
            change_percent=round(change / base * 100, 2),
            volume=self._volume(),
            previous_close=round(base, 2),
            timestamp=as_of or now_eastern(),
            source=QuoteSource.SYNTHETIC,
        )

    def history(
        self,
        symbol: str,
        timeframe: Timeframe = Timeframe.DAILY,
        now: Optional[datetime] = None,
    ) -> list[Candle]:
        """
        One candle per calendar day ending at now, oldest first.

        30 candles for daily, 100 for every other timeframe. open/close/high/low
        are generated so that low <= min(open, close) and high >= max(open, close).
        """
        base = base_price_for(symbol)
        days = 30 if timeframe == Timeframe.DAILY else 100
        end = now or now_eastern()

        candles: list[Candle] = []
        for offset in range(days - 1, -1, -1):
            open_ = base * (0.95 + self._rng.random() * 0.1)
            close = open_ * (0.98 + self._rng.random() * 0.04)
            high = max(open_, close) * (1 + self._rng.random() * 0.02)
            low = min(open_, close) * (1 - self._rng.random() * 0.02)
            candles.append(
                Candle(
                    timestamp=end - timedelta(days=offset),
                    open=round(open_, 2),
                    high=round(high, 2),
                    low=round(low, 2),
                    close=round(close, 2),
                    volume=self._volume(),
                )
            )
        return candles

    def search(self, query: str) -> list[SecurityMatch]:
        """Case-insensitive substring match on symbol or name over the fallback catalog."""
        needle = query.lower()
        matches = [
            match
            for match in FALLBACK_CATALOG
            if needle in match.symbol.lower() or needle in match.name.lower()
        ]
        return matches[:MAX_SEARCH_RESULTS]

    def _volume(self) -> int:
        return int(self._rng.random() * 1_000_000) + 100_000
