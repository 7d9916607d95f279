"""Service layer - business logic orchestration."""

from tradingdesk.services.rate_limiter import RateLimiter
from tradingdesk.services.market_status import get_market_status
from tradingdesk.services.market_data_gateway import MarketDataGateway
from tradingdesk.services.price_broadcaster import PriceBroadcaster
from tradingdesk.services.security_service import SecurityService, SecurityCreate
from tradingdesk.services.valuation_engine import ValuationEngine

__all__ = [
    "RateLimiter",
    "get_market_status",
    "MarketDataGateway",
    "PriceBroadcaster",
    "SecurityService",
    "SecurityCreate",
    "ValuationEngine",
]
