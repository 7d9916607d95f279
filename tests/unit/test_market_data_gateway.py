"""
Unit tests for MarketDataGateway.

Tests cover:
- Quote retrieval from the upstream provider
- Cache hits within TTL
- Synthetic fallback on errors, notices, empty bodies and timeouts
- Rate-limited spacing of concurrent upstream calls
- History parameters, parsing and fallback
- Search with catalog fallback
- Input validation
"""

import asyncio
import json

import pytest

from tradingdesk.cache import MemoryCacheStore
from tradingdesk.core.exceptions import ValidationError
from tradingdesk.domain.models import QuoteSource
from tradingdesk.services.market_data_gateway import MAX_BATCH_SYMBOLS, normalize_symbol

from tests.conftest import (
    FailingProvider,
    ScriptedProvider,
    daily_series_body,
    eastern_datetime,
    global_quote_body,
)


# =============================================================================
# CURRENT PRICE TESTS
# =============================================================================


class TestGetCurrentPrice:
    """Tests for get_current_price()."""

    def test_returns_provider_quote(self, gateway_factory, scripted_provider: ScriptedProvider):
        """
        GIVEN an upstream returning a valid global quote
        WHEN I request the price for "aapl"
        THEN a provider-sourced quote with parsed fields is returned
        """
        gateway = gateway_factory(scripted_provider)

        quote = asyncio.run(gateway.get_current_price("aapl"))

        assert quote.symbol == "AAPL"
        assert quote.source == QuoteSource.PROVIDER
        assert quote.price == 185.50
        assert quote.change == 1.25
        assert quote.change_percent == 0.68
        assert quote.volume == 52_000_000
        assert quote.previous_close == 184.25
        assert scripted_provider.calls == [{"function": "GLOBAL_QUOTE", "symbol": "AAPL"}]

    def test_second_call_within_ttl_hits_cache(
        self,
        gateway_factory,
        scripted_provider: ScriptedProvider,
    ):
        """
        GIVEN a successful first fetch
        WHEN the same symbol is requested again within the TTL
        THEN the upstream is called only once and the quotes match
        """
        gateway = gateway_factory(scripted_provider)

        async def scenario():
            return await gateway.get_current_price("AAPL"), await gateway.get_current_price("AAPL")

        first, second = asyncio.run(scenario())

        assert len(scripted_provider.calls) == 1
        assert first.price == second.price
        assert second.source == QuoteSource.PROVIDER

    def test_upstream_failure_falls_back_to_synthetic(
        self,
        gateway_factory,
        failing_provider: FailingProvider,
    ):
        """
        GIVEN an upstream that always fails
        WHEN I request a price
        THEN a synthetic quote is returned instead of raising
        """
        gateway = gateway_factory(failing_provider)

        quote = asyncio.run(gateway.get_current_price("TSLA"))

        assert quote.symbol == "TSLA"
        assert quote.source == QuoteSource.SYNTHETIC
        assert 760 <= quote.price <= 840

    def test_synthetic_quotes_are_not_cached(
        self,
        gateway_factory,
        failing_provider: FailingProvider,
    ):
        """
        GIVEN an upstream that always fails
        WHEN I request the same price twice
        THEN the upstream is tried both times
        """
        cache = MemoryCacheStore()
        gateway = gateway_factory(failing_provider, cache=cache)

        async def scenario():
            await gateway.get_current_price("AAPL")
            await gateway.get_current_price("AAPL")

        asyncio.run(scenario())

        assert len(failing_provider.calls) == 2
        assert len(cache) == 0

    @pytest.mark.parametrize(
        "body",
        [
            {"Error Message": "Invalid API call"},
            {"Note": "Thank you for using Alpha Vantage! Our standard API call frequency is 5 calls per minute"},
            {"Information": "Daily rate limit reached"},
            {"Global Quote": {}},
            {},
        ],
        ids=["error-message", "note", "information", "empty-quote", "empty-body"],
    )
    def test_unusable_body_falls_back(self, gateway_factory, body):
        """
        GIVEN an upstream returning an error, a rate-limit notice or nothing
        WHEN I request a price
        THEN a synthetic quote is returned
        """
        gateway = gateway_factory(ScriptedProvider(lambda params: body))

        quote = asyncio.run(gateway.get_current_price("MSFT"))

        assert quote.source == QuoteSource.SYNTHETIC

    def test_non_dict_body_falls_back(self, gateway_factory):
        """
        GIVEN an upstream returning a JSON list
        WHEN I request a price
        THEN a synthetic quote is returned
        """
        gateway = gateway_factory(ScriptedProvider(lambda params: ["unexpected"]))

        assert asyncio.run(gateway.get_current_price("MSFT")).source == QuoteSource.SYNTHETIC

    def test_transport_exception_falls_back(self, gateway_factory):
        """
        GIVEN an upstream raising an arbitrary exception
        WHEN I request a price
        THEN a synthetic quote is returned
        """

        def explode(params):
            raise ConnectionResetError("peer reset")

        gateway = gateway_factory(ScriptedProvider(explode))

        assert asyncio.run(gateway.get_current_price("NVDA")).source == QuoteSource.SYNTHETIC

    def test_timeout_falls_back(self, gateway_factory):
        """
        GIVEN an upstream slower than the quote timeout
        WHEN I request a price
        THEN the call is abandoned and a synthetic quote is returned
        """
        gateway = gateway_factory(ScriptedProvider(delay=0.5), quote_timeout=0.05)

        assert asyncio.run(gateway.get_current_price("AAPL")).source == QuoteSource.SYNTHETIC

    def test_corrupt_cache_entry_is_a_miss(self, gateway_factory, scripted_provider):
        """
        GIVEN an unreadable cached value for the symbol
        WHEN I request the price
        THEN the upstream is consulted and the entry is replaced
        """
        cache = MemoryCacheStore()
        gateway = gateway_factory(scripted_provider, cache=cache)

        async def scenario():
            await cache.set("price:AAPL", "not json", 30)
            quote = await gateway.get_current_price("AAPL")
            return quote, await cache.get("price:AAPL")

        quote, raw = asyncio.run(scenario())

        assert quote.source == QuoteSource.PROVIDER
        assert len(scripted_provider.calls) == 1
        assert json.loads(raw)["symbol"] == "AAPL"

    def test_cached_value_uses_camel_case_keys(self, gateway_factory, scripted_provider):
        """
        GIVEN a successful fetch
        WHEN inspecting the cached value
        THEN it is JSON with camelCase keys and an ISO timestamp
        """
        cache = MemoryCacheStore()
        gateway = gateway_factory(scripted_provider, cache=cache)

        async def scenario():
            await gateway.get_current_price("AAPL")
            return await cache.get("price:AAPL")

        data = json.loads(asyncio.run(scenario()))

        assert data["changePercent"] == 0.68
        assert data["previousClose"] == 184.25
        assert data["source"] == "provider"
        assert "T" in data["timestamp"]

    @pytest.mark.parametrize("symbol", ["", "   ", "TOOLONGSYMBOL"])
    def test_invalid_symbol_rejected_before_upstream(
        self,
        gateway_factory,
        scripted_provider,
        symbol: str,
    ):
        """
        GIVEN an empty or over-long symbol
        WHEN I request its price
        THEN ValidationError is raised and the upstream is never called
        """
        gateway = gateway_factory(scripted_provider)

        with pytest.raises(ValidationError):
            asyncio.run(gateway.get_current_price(symbol))
        assert scripted_provider.calls == []

    def test_normalize_symbol_strips_and_uppercases(self):
        """
        GIVEN a padded lowercase ticker
        WHEN normalizing it
        THEN it is stripped and uppercased
        """
        assert normalize_symbol("  brk.b ") == "BRK.B"


# =============================================================================
# RATE LIMITING TESTS
# =============================================================================


class TestUpstreamRateLimiting:
    """Tests for upstream call spacing."""

    def test_concurrent_distinct_symbols_are_spaced(self, gateway_factory, scripted_provider):
        """
        GIVEN a gateway with a 0.05s minimum interval
        WHEN four distinct symbols are requested concurrently
        THEN consecutive upstream calls start at least the interval apart
        """
        gateway = gateway_factory(scripted_provider, min_interval=0.05)

        async def scenario():
            return await gateway.get_current_prices(["AAPL", "MSFT", "GOOGL", "AMZN"])

        quotes = asyncio.run(scenario())

        assert [q.symbol for q in quotes] == ["AAPL", "MSFT", "GOOGL", "AMZN"]
        times = sorted(scripted_provider.call_times)
        assert len(times) == 4
        gaps = [b - a for a, b in zip(times, times[1:])]
        assert all(gap >= 0.045 for gap in gaps)


# =============================================================================
# BATCH AND MOVERS TESTS
# =============================================================================


class TestBatchQuotes:
    """Tests for get_current_prices() and derived lists."""

    def test_batch_limit(self, gateway_factory, scripted_provider):
        """
        GIVEN more symbols than the batch limit
        WHEN I request their prices
        THEN ValidationError is raised
        """
        gateway = gateway_factory(scripted_provider)
        symbols = [f"S{i}" for i in range(MAX_BATCH_SYMBOLS + 1)]

        with pytest.raises(ValidationError):
            asyncio.run(gateway.get_current_prices(symbols))

    def test_movers_are_ranked(self, gateway_factory):
        """
        GIVEN upstream quotes with mixed changes and volumes
        WHEN I request market movers
        THEN gainers are sorted descending, losers ascending, and most active by volume
        """
        changes = {
            "AAPL": ("2.0%", 10),
            "GOOGL": ("-1.0%", 50),
            "MSFT": ("0.5%", 30),
            "AMZN": ("-3.0%", 20),
            "TSLA": ("4.0%", 80),
            "NVDA": ("0.0%", 70),
            "META": ("1.0%", 60),
            "NFLX": ("-0.5%", 40),
        }

        def responder(params):
            pct, volume = changes[params["symbol"]]
            return global_quote_body(change_percent=pct, volume=volume)

        gateway = gateway_factory(ScriptedProvider(responder))

        movers = asyncio.run(gateway.get_market_movers())

        assert [q.symbol for q in movers.gainers] == ["TSLA", "AAPL", "META", "MSFT"]
        assert [q.symbol for q in movers.losers] == ["AMZN", "GOOGL", "NFLX"]
        assert [q.symbol for q in movers.most_active] == ["TSLA", "NVDA", "META", "GOOGL", "NFLX"]

    def test_indices_and_trending(self, gateway_factory, failing_provider):
        """
        GIVEN an offline upstream
        WHEN I request index and trending quotes
        THEN one synthetic quote per configured symbol is returned
        """
        gateway = gateway_factory(failing_provider)

        indices = asyncio.run(gateway.get_indices())
        trending = asyncio.run(gateway.get_trending())

        assert [q.symbol for q in indices] == ["SPY", "QQQ", "DIA", "IWM", "VTI"]
        assert [q.symbol for q in trending] == ["AAPL", "TSLA", "NVDA", "GOOGL", "MSFT"]


# =============================================================================
# HISTORY TESTS
# =============================================================================


class TestGetHistoricalData:
    """Tests for get_historical_data()."""

    def test_daily_params_and_ascending_candles(self, gateway_factory):
        """
        GIVEN an upstream daily series returned newest first
        WHEN I request daily compact history
        THEN the request params are correct and candles are sorted oldest first
        """
        provider = ScriptedProvider(
            lambda params: daily_series_body({
                "2024-06-14": (101.0, 103.0, 100.0, 102.0, 1000),
                "2024-06-13": (100.0, 102.0, 99.0, 101.0, 900),
                "2024-06-12": (99.0, 101.0, 98.0, 100.0, 800),
            })
        )
        gateway = gateway_factory(provider)

        candles = asyncio.run(gateway.get_historical_data("aapl"))

        assert provider.calls == [
            {"function": "TIME_SERIES_DAILY", "symbol": "AAPL", "outputsize": "compact"}
        ]
        assert [c.close for c in candles] == [100.0, 101.0, 102.0]
        assert candles[0].timestamp == eastern_datetime(2024, 6, 12, 0, 0)
        assert candles[-1].volume == 1000

    def test_intraday_adds_interval(self, gateway_factory):
        """
        GIVEN an intraday timeframe
        WHEN I request history
        THEN the intraday function is used with an interval param
        """
        provider = ScriptedProvider(
            lambda params: {
                "Time Series (5min)": {
                    "2024-06-14 15:55:00": {
                        "1. open": "1", "2. high": "2", "3. low": "0.5", "4. close": "1.5", "5. volume": "10",
                    }
                }
            }
        )
        gateway = gateway_factory(provider)

        candles = asyncio.run(gateway.get_historical_data("MSFT", "5min", "full"))

        assert provider.calls[0] == {
            "function": "TIME_SERIES_INTRADAY",
            "symbol": "MSFT",
            "outputsize": "full",
            "interval": "5min",
        }
        assert len(candles) == 1

    @pytest.mark.parametrize(
        "timeframe,function",
        [("weekly", "TIME_SERIES_WEEKLY"), ("monthly", "TIME_SERIES_MONTHLY")],
    )
    def test_long_timeframes_use_matching_function(self, gateway_factory, timeframe, function):
        """
        GIVEN a weekly or monthly timeframe
        WHEN I request history
        THEN the matching upstream function is used without an interval
        """
        provider = FailingProvider()
        gateway = gateway_factory(provider)

        asyncio.run(gateway.get_historical_data("SPY", timeframe))

        assert provider.calls[0]["function"] == function
        assert "interval" not in provider.calls[0]

    def test_history_is_cached(self, gateway_factory):
        """
        GIVEN a successful history fetch
        WHEN the same history is requested again
        THEN the upstream is called once
        """
        provider = ScriptedProvider(
            lambda params: daily_series_body({"2024-06-14": (1.0, 2.0, 0.5, 1.5, 10)})
        )
        gateway = gateway_factory(provider)

        async def scenario():
            await gateway.get_historical_data("AAPL")
            return await gateway.get_historical_data("AAPL")

        candles = asyncio.run(scenario())

        assert len(provider.calls) == 1
        assert candles[0].close == 1.5

    def test_failure_returns_synthetic_series(self, gateway_factory, failing_provider):
        """
        GIVEN an upstream that always fails
        WHEN I request daily and weekly history
        THEN 30 and 100 synthetic candles are returned
        """
        gateway = gateway_factory(failing_provider)

        daily = asyncio.run(gateway.get_historical_data("AAPL", "daily"))
        weekly = asyncio.run(gateway.get_historical_data("AAPL", "weekly"))

        assert len(daily) == 30
        assert len(weekly) == 100

    def test_missing_series_falls_back(self, gateway_factory):
        """
        GIVEN an upstream body without any time series
        WHEN I request history
        THEN synthetic candles are returned
        """
        gateway = gateway_factory(ScriptedProvider(lambda params: {"Meta Data": {}}))

        assert len(asyncio.run(gateway.get_historical_data("AAPL"))) == 30

    @pytest.mark.parametrize("timeframe,size", [("2min", "compact"), ("daily", "huge")])
    def test_invalid_parameters_rejected(self, gateway_factory, scripted_provider, timeframe, size):
        """
        GIVEN an unknown timeframe or output size
        WHEN I request history
        THEN ValidationError is raised
        """
        gateway = gateway_factory(scripted_provider)

        with pytest.raises(ValidationError):
            asyncio.run(gateway.get_historical_data("AAPL", timeframe, size))


# =============================================================================
# SEARCH TESTS
# =============================================================================


class TestSearchSecurities:
    """Tests for search_securities()."""

    def test_upstream_matches_are_deduplicated(self, gateway_factory):
        """
        GIVEN upstream matches with a duplicated symbol
        WHEN I search
        THEN each symbol appears once with its fields mapped
        """
        match = {
            "1. symbol": "AAPL",
            "2. name": "Apple Inc",
            "3. type": "Equity",
            "4. region": "United States",
            "5. marketOpen": "09:30",
            "6. marketClose": "16:00",
            "7. timezone": "UTC-04",
            "8. currency": "USD",
        }
        provider = ScriptedProvider(lambda params: {"bestMatches": [match, dict(match)]})
        gateway = gateway_factory(provider)

        results = asyncio.run(gateway.search_securities("apple"))

        assert provider.calls == [{"function": "SYMBOL_SEARCH", "keywords": "apple"}]
        assert len(results) == 1
        assert results[0].name == "Apple Inc"
        assert results[0].market_open == "09:30"
        assert results[0].timezone == "UTC-04"

    def test_upstream_results_are_capped(self, gateway_factory):
        """
        GIVEN more than ten upstream matches
        WHEN I search
        THEN ten results are returned
        """
        matches = [{"1. symbol": f"SYM{i}", "2. name": f"Company {i}"} for i in range(15)]
        gateway = gateway_factory(ScriptedProvider(lambda params: {"bestMatches": matches}))

        assert len(asyncio.run(gateway.search_securities("company"))) == 10

    def test_upstream_failure_uses_catalog(self, gateway_factory, failing_provider):
        """
        GIVEN an upstream that always fails
        WHEN I search "apple" and "zzz"
        THEN the catalog yields [AAPL] and [] respectively
        """
        gateway = gateway_factory(failing_provider)

        assert [m.symbol for m in asyncio.run(gateway.search_securities("apple"))] == ["AAPL"]
        assert asyncio.run(gateway.search_securities("zzz")) == []

    def test_failure_results_are_not_cached(self, gateway_factory, failing_provider):
        """
        GIVEN an upstream that always fails
        WHEN I search the same query twice
        THEN the upstream is tried both times
        """
        gateway = gateway_factory(failing_provider)

        async def scenario():
            await gateway.search_securities("apple")
            await gateway.search_securities("apple")

        asyncio.run(scenario())

        assert len(failing_provider.calls) == 2

    def test_empty_answer_uses_catalog_and_caches(self, gateway_factory):
        """
        GIVEN an upstream answering with no matches
        WHEN I search "tesla" twice
        THEN the catalog result is returned and cached
        """
        provider = ScriptedProvider(lambda params: {"bestMatches": []})
        gateway = gateway_factory(provider)

        async def scenario():
            return await gateway.search_securities("tesla"), await gateway.search_securities("tesla")

        first, second = asyncio.run(scenario())

        assert [m.symbol for m in first] == ["TSLA"]
        assert [m.symbol for m in second] == ["TSLA"]
        assert len(provider.calls) == 1

    def test_empty_query_rejected(self, gateway_factory, scripted_provider):
        """
        GIVEN a blank query
        WHEN I search
        THEN ValidationError is raised
        """
        gateway = gateway_factory(scripted_provider)

        with pytest.raises(ValidationError):
            asyncio.run(gateway.search_securities("  "))


# =============================================================================
# LIFECYCLE TESTS
# =============================================================================


class TestGatewayLifecycle:
    """Tests for status delegation and close()."""

    def test_market_status_delegates(self, gateway_factory, scripted_provider):
        """
        GIVEN a Tuesday at 10:00 Eastern
        WHEN I ask the gateway for market status
        THEN the market is open
        """
        gateway = gateway_factory(scripted_provider)

        status = gateway.get_market_status(eastern_datetime(2024, 6, 11, 10, 0))

        assert status.is_open is True

    def test_close_releases_provider_and_cache(self, gateway_factory, scripted_provider):
        """
        GIVEN a gateway with cached entries
        WHEN close() is awaited
        THEN the provider is closed and the cache is cleared
        """
        cache = MemoryCacheStore()
        gateway = gateway_factory(scripted_provider, cache=cache)

        async def scenario():
            await gateway.get_current_price("AAPL")
            await gateway.close()

        asyncio.run(scenario())

        assert scripted_provider.closed is True
        assert len(cache) == 0
