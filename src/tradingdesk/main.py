"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from tradingdesk.config.settings import get_settings
from tradingdesk.config.logging_config import setup_logging
from tradingdesk.repositories.sqlalchemy.database import init_db
from tradingdesk.api.deps import get_price_broadcaster, shutdown_market_data
from tradingdesk.api.routers import market_router, portfolios_router
from tradingdesk.core.exceptions import AppError, NotFoundError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    init_db()
    if get_settings().price_simulation_enabled:
        get_price_broadcaster().start()
    yield
    # Shutdown
    await shutdown_market_data()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Market data gateway and portfolio valuation",
    version=settings.app_version,
    lifespan=lifespan,
)

# Include routers
app.include_router(market_router)
app.include_router(portfolios_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    status_code = 404 if isinstance(exc, NotFoundError) else 400
    if status_code == 400:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.code, "message": exc.message},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
