"""Dependency injection for FastAPI."""

from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from tradingdesk.cache import CacheStore, create_cache_store
from tradingdesk.config.settings import get_settings
from tradingdesk.providers import AlphaVantageProvider, SyntheticDataGenerator
from tradingdesk.repositories.sqlalchemy.database import get_db
from tradingdesk.repositories.sqlalchemy import (
    SqlAlchemySecurityRepository,
    SqlAlchemyMarketDataRepository,
    SqlAlchemyPortfolioRepository,
    SqlAlchemyPositionRepository,
    SqlAlchemyTransactionRepository,
)
from tradingdesk.services import (
    MarketDataGateway,
    PriceBroadcaster,
    RateLimiter,
    SecurityService,
    ValuationEngine,
)

# Process-wide market data state; the rate limit and cache span all requests
_cache_store: Optional[CacheStore] = None
_synthetic: Optional[SyntheticDataGenerator] = None
_gateway: Optional[MarketDataGateway] = None
_broadcaster: Optional[PriceBroadcaster] = None


def get_security_repo(db: Session = Depends(get_db)) -> SqlAlchemySecurityRepository:
    """Provide SecurityRepository instance."""
    return SqlAlchemySecurityRepository(db)


def get_market_data_repo(db: Session = Depends(get_db)) -> SqlAlchemyMarketDataRepository:
    """Provide MarketDataRepository instance."""
    return SqlAlchemyMarketDataRepository(db)


def get_portfolio_repo(db: Session = Depends(get_db)) -> SqlAlchemyPortfolioRepository:
    """Provide PortfolioRepository instance."""
    return SqlAlchemyPortfolioRepository(db)


def get_position_repo(db: Session = Depends(get_db)) -> SqlAlchemyPositionRepository:
    """Provide PositionRepository instance."""
    return SqlAlchemyPositionRepository(db)


def get_transaction_repo(db: Session = Depends(get_db)) -> SqlAlchemyTransactionRepository:
    """Provide TransactionRepository instance."""
    return SqlAlchemyTransactionRepository(db)


def get_cache_store() -> CacheStore:
    """Provide the shared cache store selected by settings."""
    global _cache_store
    if _cache_store is None:
        _cache_store = create_cache_store(get_settings())
    return _cache_store


def get_synthetic_generator() -> SyntheticDataGenerator:
    """Provide the shared synthetic data generator."""
    global _synthetic
    if _synthetic is None:
        _synthetic = SyntheticDataGenerator(seed=get_settings().synthetic_seed)
    return _synthetic


def get_market_data_gateway() -> MarketDataGateway:
    """Provide the shared MarketDataGateway instance."""
    global _gateway
    if _gateway is None:
        settings = get_settings()
        _gateway = MarketDataGateway(
            provider=AlphaVantageProvider(
                api_key=settings.alpha_vantage_api_key,
                base_url=settings.alpha_vantage_base_url,
            ),
            cache=get_cache_store(),
            rate_limiter=RateLimiter(min_interval=settings.rate_limit_interval_seconds),
            synthetic=get_synthetic_generator(),
            quote_timeout=settings.upstream_timeout_seconds,
            history_timeout=settings.history_timeout_seconds,
            price_ttl=settings.price_cache_ttl_seconds,
            history_ttl=settings.history_cache_ttl_seconds,
            search_ttl=settings.search_cache_ttl_seconds,
        )
    return _gateway


def get_price_broadcaster() -> PriceBroadcaster:
    """Provide the shared PriceBroadcaster instance."""
    global _broadcaster
    if _broadcaster is None:
        settings = get_settings()
        _broadcaster = PriceBroadcaster(
            cache=get_cache_store(),
            synthetic=get_synthetic_generator(),
            symbols=settings.price_simulation_symbols,
            interval=settings.price_simulation_interval_seconds,
            cache_ttl=settings.price_simulation_ttl_seconds,
        )
    return _broadcaster


async def shutdown_market_data() -> None:
    """Stop the simulation and release upstream and cache connections."""
    if _broadcaster is not None:
        await _broadcaster.stop()
    if _gateway is not None:
        # Also closes the shared cache store
        await _gateway.close()
    elif _cache_store is not None:
        await _cache_store.close()
    reset_market_data()


def reset_market_data() -> None:
    """Drop the shared market data objects (for reconfiguration)."""
    global _cache_store, _synthetic, _gateway, _broadcaster
    _cache_store = None
    _synthetic = None
    _gateway = None
    _broadcaster = None


def get_security_service(
    security_repo: SqlAlchemySecurityRepository = Depends(get_security_repo),
    market_data_repo: SqlAlchemyMarketDataRepository = Depends(get_market_data_repo),
) -> SecurityService:
    """Provide SecurityService instance."""
    return SecurityService(
        security_repo=security_repo,
        market_data_repo=market_data_repo,
    )


def get_valuation_engine(
    portfolio_repo: SqlAlchemyPortfolioRepository = Depends(get_portfolio_repo),
    position_repo: SqlAlchemyPositionRepository = Depends(get_position_repo),
    transaction_repo: SqlAlchemyTransactionRepository = Depends(get_transaction_repo),
) -> ValuationEngine:
    """Provide ValuationEngine instance."""
    return ValuationEngine(
        portfolio_repo=portfolio_repo,
        position_repo=position_repo,
        transaction_repo=transaction_repo,
    )
