"""Market data gateway: cache, rate-limited upstream fetch, synthetic fallback."""

import asyncio
import json
import logging
from datetime import datetime
from typing import Any, Callable, Optional, TypeVar

from tradingdesk.cache import CacheStore
from tradingdesk.core.exceptions import UpstreamUnavailableError, ValidationError
from tradingdesk.core.timezone import now_eastern, parse_datetime_eastern
from tradingdesk.domain.models import OutputSize, QuoteSource, Timeframe
from tradingdesk.domain.views import Candle, MarketMovers, MarketStatus, Quote, SecurityMatch
from tradingdesk.providers.market_data_provider import UpstreamQuoteProvider
from tradingdesk.providers.synthetic_provider import MAX_SEARCH_RESULTS, SyntheticDataGenerator
from tradingdesk.services.market_status import get_market_status
from tradingdesk.services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_SYMBOL_LENGTH = 10
MAX_BATCH_SYMBOLS = 20
MOVERS_SYMBOLS = ["AAPL", "GOOGL", "MSFT", "AMZN", "TSLA", "NVDA", "META", "NFLX"]
TRENDING_SYMBOLS = ["AAPL", "TSLA", "NVDA", "GOOGL", "MSFT"]
INDEX_SYMBOLS = ["SPY", "QQQ", "DIA", "IWM", "VTI"]
MOVERS_LIMIT = 5

_SERIES_FUNCTIONS: dict[Timeframe, str] = {
    Timeframe.MIN_1: "TIME_SERIES_INTRADAY",
    Timeframe.MIN_5: "TIME_SERIES_INTRADAY",
    Timeframe.MIN_15: "TIME_SERIES_INTRADAY",
    Timeframe.MIN_30: "TIME_SERIES_INTRADAY",
    Timeframe.MIN_60: "TIME_SERIES_INTRADAY",
    Timeframe.DAILY: "TIME_SERIES_DAILY",
    Timeframe.WEEKLY: "TIME_SERIES_WEEKLY",
    Timeframe.MONTHLY: "TIME_SERIES_MONTHLY",
}


def normalize_symbol(symbol: str) -> str:
    """Uppercase and validate a ticker; rejects empty or over-long symbols."""
    cleaned = (symbol or "").strip().upper()
    if not cleaned or len(cleaned) > MAX_SYMBOL_LENGTH:
        raise ValidationError(f"Invalid symbol provided: '{symbol}'")
    return cleaned


def _parse_enum(enum_cls: type, value: Any, label: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {label} '{value}'; expected one of: {allowed}")


class MarketDataGateway:
    """
    Single entry point for quotes, history and symbol search.

    Lookup order is cache hit, then one rate-limited upstream call, then
    synthetic data. Upstream trouble of any kind (transport error, timeout,
    error message, rate-limit notice, empty body) is logged and absorbed;
    callers always get data back. There are no retries: one failed attempt
    goes straight to the fallback.
    """

    def __init__(
        self,
        provider: UpstreamQuoteProvider,
        cache: CacheStore,
        rate_limiter: RateLimiter,
        synthetic: SyntheticDataGenerator,
        quote_timeout: float = 10.0,
        history_timeout: float = 15.0,
        price_ttl: int = 30,
        history_ttl: int = 300,
        search_ttl: int = 3600,
    ):
        self._provider = provider
        self._cache = cache
        self._rate_limiter = rate_limiter
        self._synthetic = synthetic
        self._quote_timeout = quote_timeout
        self._history_timeout = history_timeout
        self._price_ttl = price_ttl
        self._history_ttl = history_ttl
        self._search_ttl = search_ttl

    # Quotes

    async def get_current_price(self, symbol: str) -> Quote:
        """
        Return the current quote for a symbol.

        Cached for price_ttl seconds under price:<SYMBOL>. Synthetic quotes
        are returned but never cached.
        """
        symbol = normalize_symbol(symbol)
        cache_key = f"price:{symbol}"

        cached = await self._read_cached(cache_key, Quote.from_dict)
        if cached is not None:
            return cached

        logger.info("Fetching current price for %s", symbol)
        try:
            body = await self._call_upstream(
                {"function": "GLOBAL_QUOTE", "symbol": symbol},
                self._quote_timeout,
            )
            quote = self._parse_quote(symbol, body)
        except UpstreamUnavailableError as exc:
            logger.warning("Using synthetic price for %s: %s", symbol, exc.message)
            return self._synthetic.quote(symbol)

        await self._cache.set(cache_key, json.dumps(quote.to_dict()), self._price_ttl)
        return quote

    async def get_current_prices(self, symbols: list[str]) -> list[Quote]:
        """Quotes for up to MAX_BATCH_SYMBOLS symbols, in request order."""
        if len(symbols) > MAX_BATCH_SYMBOLS:
            raise ValidationError(f"Maximum {MAX_BATCH_SYMBOLS} symbols allowed per request")
        normalized = [normalize_symbol(s) for s in symbols]
        return list(await asyncio.gather(*(self.get_current_price(s) for s in normalized)))

    async def get_market_movers(self) -> MarketMovers:
        """Top gainers, losers and most active names from MOVERS_SYMBOLS."""
        quotes = await self.get_current_prices(MOVERS_SYMBOLS)

        gainers = sorted(
            (q for q in quotes if q.change_percent > 0),
            key=lambda q: q.change_percent,
            reverse=True,
        )
        losers = sorted(
            (q for q in quotes if q.change_percent < 0),
            key=lambda q: q.change_percent,
        )
        most_active = sorted(quotes, key=lambda q: q.volume, reverse=True)

        return MarketMovers(
            gainers=gainers[:MOVERS_LIMIT],
            losers=losers[:MOVERS_LIMIT],
            most_active=most_active[:MOVERS_LIMIT],
        )

    async def get_trending(self) -> list[Quote]:
        return await self.get_current_prices(TRENDING_SYMBOLS)

    async def get_indices(self) -> list[Quote]:
        """Quotes for the broad-market ETFs used as index proxies."""
        return await self.get_current_prices(INDEX_SYMBOLS)

    # History

    async def get_historical_data(
        self,
        symbol: str,
        timeframe: str = "daily",
        output_size: str = "compact",
    ) -> list[Candle]:
        """
        Return OHLCV candles for a symbol, oldest first.

        Cached for history_ttl seconds under
        history:<SYMBOL>:<timeframe>:<output_size>.
        """
        symbol = normalize_symbol(symbol)
        tf: Timeframe = _parse_enum(Timeframe, timeframe, "timeframe")
        size: OutputSize = _parse_enum(OutputSize, output_size, "output size")
        cache_key = f"history:{symbol}:{tf.value}:{size.value}"

        cached = await self._read_cached(
            cache_key, lambda rows: [Candle.from_dict(row) for row in rows]
        )
        if cached is not None:
            return cached

        params = {
            "function": _SERIES_FUNCTIONS[tf],
            "symbol": symbol,
            "outputsize": size.value,
        }
        if tf.is_intraday:
            params["interval"] = tf.value

        logger.info("Fetching %s history for %s", tf.value, symbol)
        try:
            body = await self._call_upstream(params, self._history_timeout)
            candles = self._parse_series(body)
        except UpstreamUnavailableError as exc:
            logger.warning("Using synthetic history for %s: %s", symbol, exc.message)
            return self._synthetic.history(symbol, tf)

        await self._cache.set(
            cache_key, json.dumps([c.to_dict() for c in candles]), self._history_ttl
        )
        return candles

    # Search

    async def search_securities(self, query: str) -> list[SecurityMatch]:
        """
        Search symbols and names.

        A well-formed upstream answer with no matches is served from the
        fallback catalog and cached like a real answer. An upstream failure
        is served from the catalog without caching.
        """
        query = (query or "").strip()
        if not query:
            raise ValidationError("Search query must not be empty")
        cache_key = f"search:{query}"

        cached = await self._read_cached(
            cache_key, lambda rows: [SecurityMatch.from_dict(row) for row in rows]
        )
        if cached is not None:
            return cached

        logger.info("Searching securities for '%s'", query)
        try:
            body = await self._call_upstream(
                {"function": "SYMBOL_SEARCH", "keywords": query},
                self._quote_timeout,
            )
        except UpstreamUnavailableError as exc:
            logger.warning("Using fallback catalog for '%s': %s", query, exc.message)
            return self._synthetic.search(query)

        matches = self._parse_matches(body)
        if not matches:
            matches = self._synthetic.search(query)

        await self._cache.set(
            cache_key, json.dumps([m.to_dict() for m in matches]), self._search_ttl
        )
        return matches

    # Status

    def get_market_status(self, now: Optional[datetime] = None) -> MarketStatus:
        return get_market_status(now)

    async def close(self) -> None:
        await self._provider.close()
        await self._cache.close()

    # Internals

    async def _read_cached(self, key: str, decode: Callable[[Any], T]) -> Optional[T]:
        raw = await self._cache.get(key)
        if raw is None:
            return None
        try:
            return decode(json.loads(raw))
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning("Ignoring unreadable cache entry %s: %s", key, exc)
            return None

    async def _call_upstream(self, params: dict[str, Any], timeout: float) -> dict[str, Any]:
        """One rate-limited upstream call; every failure surfaces as UpstreamUnavailableError."""
        await self._rate_limiter.acquire()
        try:
            body = await asyncio.wait_for(self._provider.request(params, timeout), timeout)
        except UpstreamUnavailableError:
            raise
        except asyncio.TimeoutError as exc:
            raise UpstreamUnavailableError(f"Upstream timed out after {timeout}s") from exc
        except Exception as exc:
            raise UpstreamUnavailableError(f"Upstream request failed: {exc}") from exc

        if not isinstance(body, dict):
            raise UpstreamUnavailableError("Upstream returned an unexpected body")
        if body.get("Error Message"):
            raise UpstreamUnavailableError(f"API Error: {body['Error Message']}")
        if body.get("Note") or body.get("Information"):
            raise UpstreamUnavailableError("API rate limit exceeded")
        return body

    @staticmethod
    def _parse_quote(symbol: str, body: dict[str, Any]) -> Quote:
        raw = body.get("Global Quote")
        if not raw:
            raise UpstreamUnavailableError(f"Empty quote for {symbol}")
        try:
            return Quote(
                symbol=symbol,
                price=round(float(raw["05. price"]), 2),
                change=round(float(raw["09. change"]), 2),
                change_percent=round(float(str(raw["10. change percent"]).rstrip("%")), 2),
                volume=int(raw["06. volume"]),
                previous_close=round(float(raw["08. previous close"]), 2),
                timestamp=now_eastern(),
                source=QuoteSource.PROVIDER,
            )
        except (KeyError, ValueError, TypeError) as exc:
            raise UpstreamUnavailableError(f"Malformed quote for {symbol}: {exc}") from exc

    @staticmethod
    def _parse_series(body: dict[str, Any]) -> list[Candle]:
        series_key = next((key for key in body if "Time Series" in key), None)
        series = body.get(series_key) if series_key else None
        if not series:
            raise UpstreamUnavailableError("No time series in upstream response")
        try:
            candles = [
                Candle(
                    timestamp=parse_datetime_eastern(stamp),
                    open=float(bar["1. open"]),
                    high=float(bar["2. high"]),
                    low=float(bar["3. low"]),
                    close=float(bar["4. close"]),
                    volume=int(bar.get("5. volume") or 0),
                )
                for stamp, bar in series.items()
            ]
        except (KeyError, ValueError, TypeError, AttributeError) as exc:
            raise UpstreamUnavailableError(f"Malformed time series: {exc}") from exc
        candles.sort(key=lambda c: c.timestamp)
        return candles

    @staticmethod
    def _parse_matches(body: dict[str, Any]) -> list[SecurityMatch]:
        matches: list[SecurityMatch] = []
        seen: set[str] = set()
        for raw in body.get("bestMatches") or []:
            symbol = raw.get("1. symbol")
            if not symbol or symbol in seen:
                continue
            seen.add(symbol)
            matches.append(
                SecurityMatch(
                    symbol=symbol,
                    name=raw.get("2. name", ""),
                    type=raw.get("3. type", ""),
                    region=raw.get("4. region", ""),
                    currency=raw.get("8. currency", ""),
                    market_open=raw.get("5. marketOpen"),
                    market_close=raw.get("6. marketClose"),
                    timezone=raw.get("7. timezone"),
                )
            )
            if len(matches) == MAX_SEARCH_RESULTS:
                break
        return matches
