"""Pydantic schemas for API request/response."""

from tradingdesk.api.schemas.market import (
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
    CandleRequest,
    StoreHistoryRequest,
    StoreHistoryResponse,
)
from tradingdesk.api.schemas.portfolio import (
    PortfolioSummaryResponse,
    PortfolioListResponse,
    PositionResponse,
    PositionListResponse,
    TransactionResponse,
    TransactionListResponse,
    DailyFlowResponse,
    PerformanceResponse,
    AllocationItemResponse,
    AllocationResponse,
)

__all__ = [
    "QuoteResponse",
    "QuoteListResponse",
    "CandleResponse",
    "HistoryResponse",
    "SecurityMatchResponse",
    "SearchResponse",
    "MarketStatusResponse",
    "MarketMoversResponse",
    "SecurityCreateRequest",
    "SecurityResponse",
    "CandleRequest",
    "StoreHistoryRequest",
    "StoreHistoryResponse",
    "PortfolioSummaryResponse",
    "PortfolioListResponse",
    "PositionResponse",
    "PositionListResponse",
    "TransactionResponse",
    "TransactionListResponse",
    "DailyFlowResponse",
    "PerformanceResponse",
    "AllocationItemResponse",
    "AllocationResponse",
]
