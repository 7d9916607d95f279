"""Market data endpoints."""

from fastapi import APIRouter, Depends, Query

from tradingdesk.api.deps import get_market_data_gateway, get_security_service
from tradingdesk.api.schemas import (
    QuoteResponse,
    QuoteListResponse,
    CandleResponse,
    HistoryResponse,
    SecurityMatchResponse,
    SearchResponse,
    MarketStatusResponse,
    MarketMoversResponse,
    SecurityCreateRequest,
    SecurityResponse,
    StoreHistoryRequest,
    StoreHistoryResponse,
)
from tradingdesk.core.exceptions import ValidationError
from tradingdesk.domain.models import Timeframe
from tradingdesk.domain.views import Candle
from tradingdesk.services import MarketDataGateway, SecurityService, SecurityCreate
from tradingdesk.services.market_data_gateway import normalize_symbol

router = APIRouter(prefix="/market", tags=["market"])


def _quote_list(quotes) -> QuoteListResponse:
    return QuoteListResponse(
        quotes=[QuoteResponse.model_validate(q) for q in quotes],
        count=len(quotes),
    )


@router.get("/price/{symbol}", response_model=QuoteResponse)
async def get_price(
    symbol: str,
    gateway: MarketDataGateway = Depends(get_market_data_gateway),
) -> QuoteResponse:
    """Get the current quote for a symbol."""
    quote = await gateway.get_current_price(symbol)
    return QuoteResponse.model_validate(quote)


@router.get("/prices", response_model=QuoteListResponse)
async def get_prices(
    symbols: str = Query(..., min_length=1, description="Comma-separated symbols (max 20)"),
    gateway: MarketDataGateway = Depends(get_market_data_gateway),
) -> QuoteListResponse:
    """Get current quotes for several symbols."""
    symbol_list = [s for s in (part.strip() for part in symbols.split(",")) if s]
    quotes = await gateway.get_current_prices(symbol_list)
    return _quote_list(quotes)


@router.get("/history/{symbol}", response_model=HistoryResponse)
async def get_history(
    symbol: str,
    timeframe: str = Query("daily", description="1min, 5min, 15min, 30min, 60min, daily, weekly or monthly"),
    output_size: str = Query("compact", alias="outputSize", description="compact or full"),
    gateway: MarketDataGateway = Depends(get_market_data_gateway),
) -> HistoryResponse:
    """Get OHLCV history for a symbol, oldest first."""
    candles = await gateway.get_historical_data(symbol, timeframe, output_size)
    return HistoryResponse(
        symbol=normalize_symbol(symbol),
        timeframe=timeframe,
        output_size=output_size,
        candles=[CandleResponse.model_validate(c) for c in candles],
    )


@router.post("/history/{symbol}", response_model=StoreHistoryResponse, status_code=201)
def store_history(
    symbol: str,
    data: StoreHistoryRequest,
    service: SecurityService = Depends(get_security_service),
) -> StoreHistoryResponse:
    """Persist bars for a stored security."""
    symbol = normalize_symbol(symbol)
    try:
        timeframe = Timeframe(data.timeframe)
    except ValueError:
        raise ValidationError(f"Invalid timeframe '{data.timeframe}'")

    candles = [
        Candle(
            timestamp=c.timestamp,
            open=c.open,
            high=c.high,
            low=c.low,
            close=c.close,
            volume=c.volume,
        )
        for c in data.candles
    ]
    stored = service.store_historical_data(symbol, timeframe, candles)
    return StoreHistoryResponse(symbol=symbol, timeframe=timeframe.value, stored=stored)


@router.get("/search", response_model=SearchResponse)
async def search_securities(
    q: str = Query(..., min_length=1, max_length=50, description="Symbol or company name"),
    gateway: MarketDataGateway = Depends(get_market_data_gateway),
) -> SearchResponse:
    """Search securities by symbol or name."""
    matches = await gateway.search_securities(q)
    return SearchResponse(
        query=q,
        results=[SecurityMatchResponse.model_validate(m) for m in matches],
        count=len(matches),
    )


@router.get("/status", response_model=MarketStatusResponse)
def get_status(
    gateway: MarketDataGateway = Depends(get_market_data_gateway),
) -> MarketStatusResponse:
    """Get the US equity session status."""
    return MarketStatusResponse.model_validate(gateway.get_market_status())


@router.get("/movers", response_model=MarketMoversResponse)
async def get_movers(
    gateway: MarketDataGateway = Depends(get_market_data_gateway),
) -> MarketMoversResponse:
    """Get top gainers, losers and most active symbols."""
    return MarketMoversResponse.model_validate(await gateway.get_market_movers())


@router.get("/trending", response_model=QuoteListResponse)
async def get_trending(
    gateway: MarketDataGateway = Depends(get_market_data_gateway),
) -> QuoteListResponse:
    """Get quotes for trending symbols."""
    return _quote_list(await gateway.get_trending())


@router.get("/indices", response_model=QuoteListResponse)
async def get_indices(
    gateway: MarketDataGateway = Depends(get_market_data_gateway),
) -> QuoteListResponse:
    """Get quotes for major index ETFs."""
    return _quote_list(await gateway.get_indices())


@router.post("/securities", response_model=SecurityResponse, status_code=201)
def store_security(
    data: SecurityCreateRequest,
    service: SecurityService = Depends(get_security_service),
) -> SecurityResponse:
    """Register a security; returns the existing row if already known."""
    security = service.store_security(
        SecurityCreate(
            symbol=data.symbol,
            name=data.name,
            region=data.region,
            type=data.type,
            sector=data.sector,
            industry=data.industry,
        )
    )
    return SecurityResponse.model_validate(security)
