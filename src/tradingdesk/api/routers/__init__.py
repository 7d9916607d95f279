"""API routers package."""

from tradingdesk.api.routers.market import router as market_router
from tradingdesk.api.routers.portfolios import router as portfolios_router

__all__ = [
    "market_router",
    "portfolios_router",
]
