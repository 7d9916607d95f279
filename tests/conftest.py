"""
Pytest configuration and fixtures for trading desk tests.

This module provides:
- In-memory SQLite database fixtures
- Factory helpers for securities, portfolios, positions and transactions
- Scripted upstream providers that record every call
- Fake clocks for the rate limiter and cache
- Service and repository fixtures
- A TestClient wired to the test database and an offline gateway
"""

import asyncio
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Optional

import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from tradingdesk.main import app
from tradingdesk.api.deps import get_market_data_gateway, reset_market_data
from tradingdesk.cache import MemoryCacheStore
from tradingdesk.config.settings import Settings, reset_settings, set_settings
from tradingdesk.repositories.sqlalchemy.database import Base, get_db, reset_database
# Import ORM models to register them with Base before creating tables
from tradingdesk.repositories.sqlalchemy import orm_models  # noqa: F401
from tradingdesk.repositories.sqlalchemy import (
    SqlAlchemySecurityRepository,
    SqlAlchemyMarketDataRepository,
    SqlAlchemyPortfolioRepository,
    SqlAlchemyPositionRepository,
    SqlAlchemyTransactionRepository,
)
from tradingdesk.core.exceptions import UpstreamUnavailableError
from tradingdesk.core.timezone import EASTERN_TZ
from tradingdesk.domain.models import (
    Portfolio,
    Position,
    Security,
    SecurityType,
    Transaction,
    TransactionType,
)
from tradingdesk.providers import SyntheticDataGenerator
from tradingdesk.services import (
    MarketDataGateway,
    RateLimiter,
    SecurityService,
    ValuationEngine,
)


# =============================================================================
# TIMEZONE HELPERS
# =============================================================================


def eastern_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in US/Eastern timezone."""
    return EASTERN_TZ.localize(datetime(year, month, day, hour, minute, second))


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests (a Saturday)."""
    return eastern_datetime(2024, 6, 15, 14, 30, 0)


# =============================================================================
# FAKE CLOCKS
# =============================================================================


class FakeClock:
    """
    Manually advanced monotonic clock.

    sleep() advances the clock instead of waiting, and records each delay.
    """

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


@pytest.fixture
def fake_clock() -> FakeClock:
    """Provide a fake monotonic clock."""
    return FakeClock()


# =============================================================================
# UPSTREAM PROVIDER FIXTURES
# =============================================================================


def global_quote_body(
    price: float = 185.50,
    change: float = 1.25,
    change_percent: str = "0.6784%",
    volume: int = 52_000_000,
    previous_close: float = 184.25,
) -> dict[str, Any]:
    """Build an upstream GLOBAL_QUOTE response body."""
    return {
        "Global Quote": {
            "05. price": str(price),
            "06. volume": str(volume),
            "08. previous close": str(previous_close),
            "09. change": str(change),
            "10. change percent": change_percent,
        }
    }


def daily_series_body(bars: dict[str, tuple[float, float, float, float, int]]) -> dict[str, Any]:
    """Build an upstream TIME_SERIES_DAILY body from {date: (o, h, l, c, v)}."""
    return {
        "Meta Data": {"1. Information": "Daily Prices"},
        "Time Series (Daily)": {
            stamp: {
                "1. open": str(o),
                "2. high": str(h),
                "3. low": str(l),
                "4. close": str(c),
                "5. volume": str(v),
            }
            for stamp, (o, h, l, c, v) in bars.items()
        },
    }


class ScriptedProvider:
    """
    Upstream provider returning a scripted response per request.

    responder(params) returns the body, or raises to simulate failure.
    Every call is recorded with its params and the event loop time it started.
    """

    def __init__(
        self,
        responder: Optional[Callable[[dict[str, Any]], Any]] = None,
        delay: float = 0.0,
    ):
        self._responder = responder or (lambda params: global_quote_body())
        self._delay = delay
        self.calls: list[dict[str, Any]] = []
        self.call_times: list[float] = []
        self.closed = False

    async def request(self, params: dict[str, Any], timeout: float) -> dict[str, Any]:
        self.calls.append(dict(params))
        self.call_times.append(asyncio.get_running_loop().time())
        if self._delay:
            await asyncio.sleep(self._delay)
        return self._responder(params)

    async def close(self) -> None:
        self.closed = True


class FailingProvider(ScriptedProvider):
    """Upstream provider that always fails at the transport level."""

    def __init__(self):
        super().__init__(responder=self._fail)

    @staticmethod
    def _fail(params: dict[str, Any]) -> Any:
        raise UpstreamUnavailableError("Network unavailable")


@pytest.fixture
def scripted_provider() -> ScriptedProvider:
    """Provide an upstream provider returning a valid AAPL-like quote."""
    return ScriptedProvider()


@pytest.fixture
def failing_provider() -> FailingProvider:
    """Provide an upstream provider that always fails."""
    return FailingProvider()


@pytest.fixture
def synthetic() -> SyntheticDataGenerator:
    """Provide a seeded synthetic data generator."""
    return SyntheticDataGenerator(seed=42)


@pytest.fixture
def gateway_factory(synthetic) -> Callable[..., MarketDataGateway]:
    """Factory for gateways over a given provider, with no rate limit wait by default."""

    def _create_gateway(
        provider,
        cache: Optional[MemoryCacheStore] = None,
        min_interval: float = 0.0,
        **kwargs,
    ) -> MarketDataGateway:
        return MarketDataGateway(
            provider=provider,
            cache=cache if cache is not None else MemoryCacheStore(),
            rate_limiter=RateLimiter(min_interval=min_interval),
            synthetic=synthetic,
            **kwargs,
        )

    return _create_gateway


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    # Reset settings for clean state
    reset_settings()

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def security_repo(test_session) -> SqlAlchemySecurityRepository:
    """Provide test SecurityRepository."""
    return SqlAlchemySecurityRepository(test_session)


@pytest.fixture
def market_data_repo(test_session) -> SqlAlchemyMarketDataRepository:
    """Provide test MarketDataRepository."""
    return SqlAlchemyMarketDataRepository(test_session)


@pytest.fixture
def portfolio_repo(test_session) -> SqlAlchemyPortfolioRepository:
    """Provide test PortfolioRepository."""
    return SqlAlchemyPortfolioRepository(test_session)


@pytest.fixture
def position_repo(test_session) -> SqlAlchemyPositionRepository:
    """Provide test PositionRepository."""
    return SqlAlchemyPositionRepository(test_session)


@pytest.fixture
def transaction_repo(test_session) -> SqlAlchemyTransactionRepository:
    """Provide test TransactionRepository."""
    return SqlAlchemyTransactionRepository(test_session)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def security_service(security_repo, market_data_repo) -> SecurityService:
    """Provide test SecurityService."""
    return SecurityService(
        security_repo=security_repo,
        market_data_repo=market_data_repo,
    )


@pytest.fixture
def valuation_engine(portfolio_repo, position_repo, transaction_repo) -> ValuationEngine:
    """Provide test ValuationEngine."""
    return ValuationEngine(
        portfolio_repo=portfolio_repo,
        position_repo=position_repo,
        transaction_repo=transaction_repo,
    )


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def security_factory(security_repo) -> Callable[..., Security]:
    """Factory for creating test securities."""

    def _create_security(
        symbol: str = "AAPL",
        name: Optional[str] = None,
        sector: Optional[str] = "Technology",
        security_type: SecurityType = SecurityType.STOCK,
    ) -> Security:
        return security_repo.create(
            Security(
                symbol=symbol,
                name=name or f"{symbol} Inc.",
                sector=sector,
                security_type=security_type,
            )
        )

    return _create_security


@pytest.fixture
def portfolio_factory(portfolio_repo) -> Callable[..., Portfolio]:
    """Factory for creating test portfolios."""

    def _create_portfolio(
        initial_balance: Decimal = Decimal("10000.00"),
        current_balance: Optional[Decimal] = None,
        owner_id: str = "owner-1",
        name: Optional[str] = None,
        is_active: bool = True,
        created_at: Optional[datetime] = None,
    ) -> Portfolio:
        return portfolio_repo.create(
            Portfolio(
                id=str(uuid.uuid4()),
                owner_id=owner_id,
                name=name or f"Portfolio {uuid.uuid4().hex[:8]}",
                initial_balance=initial_balance,
                current_balance=current_balance if current_balance is not None else initial_balance,
                is_active=is_active,
                created_at=created_at,
            )
        )

    return _create_portfolio


@pytest.fixture
def position_factory(position_repo) -> Callable[..., Position]:
    """Factory for creating test positions."""

    def _create_position(
        portfolio_id: str,
        security_id: int,
        quantity: Decimal = Decimal("10"),
        average_cost: Decimal = Decimal("100"),
        market_value: Decimal = Decimal("1000"),
        unrealized_pnl: Decimal = Decimal("0"),
    ) -> Position:
        return position_repo.upsert(
            Position(
                portfolio_id=portfolio_id,
                security_id=security_id,
                quantity=quantity,
                average_cost=average_cost,
                market_value=market_value,
                unrealized_pnl=unrealized_pnl,
            )
        )

    return _create_position


@pytest.fixture
def transaction_factory(transaction_repo) -> Callable[..., Transaction]:
    """Factory for creating test transactions."""

    def _create_transaction(
        portfolio_id: str,
        security_id: int,
        txn_type: TransactionType,
        amount: Decimal,
        fee: Decimal = Decimal("0"),
        executed_at: Optional[datetime] = None,
        quantity: Optional[Decimal] = None,
        price: Optional[Decimal] = None,
    ) -> Transaction:
        return transaction_repo.create(
            Transaction(
                portfolio_id=portfolio_id,
                security_id=security_id,
                txn_type=txn_type,
                amount=amount,
                fee=fee,
                executed_at=executed_at or eastern_datetime(2024, 6, 14, 10, 0),
                quantity=quantity,
                price=price,
            )
        )

    return _create_transaction


# =============================================================================
# PRESET DATA FIXTURES
# =============================================================================


@pytest.fixture
def valued_portfolio(
    portfolio_factory,
    security_factory,
    position_factory,
    transaction_factory,
) -> Portfolio:
    """
    Portfolio with $10,000 initial, $9,000 cash, one $2,000 position
    carrying $500 unrealized P&L, and a $1,500 sell with a $10 fee.
    """
    portfolio = portfolio_factory(
        initial_balance=Decimal("10000.00"),
        current_balance=Decimal("9000.00"),
    )
    security = security_factory("AAPL")
    position_factory(
        portfolio.id,
        security.id,
        quantity=Decimal("10"),
        average_cost=Decimal("150"),
        market_value=Decimal("2000.00"),
        unrealized_pnl=Decimal("500.00"),
    )
    transaction_factory(
        portfolio.id,
        security.id,
        TransactionType.SELL,
        amount=Decimal("1500.00"),
        fee=Decimal("10.00"),
    )
    return portfolio


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def offline_gateway(gateway_factory, failing_provider) -> MarketDataGateway:
    """Gateway whose upstream is always down, so every answer is synthetic."""
    return gateway_factory(failing_provider)


@pytest.fixture
def client(test_engine, offline_gateway) -> TestClient:
    """Provide FastAPI test client with test database and offline gateway."""
    set_settings(Settings(database_url="sqlite:///:memory:", synthetic_seed=42))
    reset_database()
    reset_market_data()

    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_market_data_gateway] = lambda: offline_gateway
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    reset_database()
    reset_settings()


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def assert_decimal_equal(
    actual: Decimal,
    expected: Decimal,
    tolerance: Decimal = Decimal("0.01"),
) -> None:
    """Assert two Decimals are equal within tolerance."""
    diff = abs(actual - expected)
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"
