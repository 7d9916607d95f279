"""Pydantic schemas for market data endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from tradingdesk.domain.models.enums import QuoteSource, SecurityType


class QuoteResponse(BaseModel):
    """Response schema for a single quote."""

    model_config = {"from_attributes": True}

    symbol: str
    price: float
    change: float
    change_percent: float
    volume: int
    previous_close: float
    timestamp: datetime
    source: QuoteSource


class QuoteListResponse(BaseModel):
    """Response schema for a batch of quotes."""

    quotes: list[QuoteResponse]
    count: int


class CandleResponse(BaseModel):
    """Response schema for one OHLCV bar."""

    model_config = {"from_attributes": True}

    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: int


class HistoryResponse(BaseModel):
    """Response schema for a symbol's price history."""

    symbol: str
    timeframe: str
    output_size: str
    candles: list[CandleResponse]


class SecurityMatchResponse(BaseModel):
    """Response schema for a search hit."""

    model_config = {"from_attributes": True}

    symbol: str
    name: str
    type: str
    region: str
    currency: str
    market_open: Optional[str] = None
    market_close: Optional[str] = None
    timezone: Optional[str] = None


class SearchResponse(BaseModel):
    """Response schema for symbol search."""

    query: str
    results: list[SecurityMatchResponse]
    count: int


class MarketStatusResponse(BaseModel):
    """Response schema for market session status."""

    model_config = {"from_attributes": True}

    is_open: bool
    next_open: datetime
    next_close: datetime
    timezone: str


class MarketMoversResponse(BaseModel):
    """Response schema for top gainers, losers and most active."""

    model_config = {"from_attributes": True}

    gainers: list[QuoteResponse]
    losers: list[QuoteResponse]
    most_active: list[QuoteResponse]


class SecurityCreateRequest(BaseModel):
    """Request schema for storing a security."""

    symbol: str = Field(..., min_length=1, max_length=10, description="Ticker symbol")
    name: str = Field(..., min_length=1, max_length=255, description="Security name")
    region: Optional[str] = Field(default=None, description="Exchange or region")
    type: str = Field(default="Equity", description="Provider security type")
    sector: Optional[str] = Field(default=None, max_length=100)
    industry: Optional[str] = Field(default=None, max_length=100)

    @field_validator("symbol")
    @classmethod
    def uppercase_symbol(cls, v: str) -> str:
        return v.strip().upper()


class SecurityResponse(BaseModel):
    """Response schema for a stored security."""

    model_config = {"from_attributes": True}

    id: int
    symbol: str
    name: str
    exchange: str
    security_type: SecurityType
    sector: Optional[str] = None
    industry: Optional[str] = None


class CandleRequest(BaseModel):
    """Request schema for one bar to persist."""

    timestamp: datetime
    open: float = Field(..., gt=0)
    high: float = Field(..., gt=0)
    low: float = Field(..., gt=0)
    close: float = Field(..., gt=0)
    volume: int = Field(default=0, ge=0)


class StoreHistoryRequest(BaseModel):
    """Request schema for persisting a batch of bars."""

    timeframe: str = Field(default="daily", description="Bar timeframe")
    candles: list[CandleRequest] = Field(..., min_length=1)


class StoreHistoryResponse(BaseModel):
    """Response schema for a history upload."""

    symbol: str
    timeframe: str
    stored: int
