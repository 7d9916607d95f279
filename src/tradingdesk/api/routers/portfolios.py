"""Portfolio valuation endpoints."""

from fastapi import APIRouter, Depends, Query

from tradingdesk.api.deps import get_valuation_engine
from tradingdesk.api.schemas import (
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
from tradingdesk.domain.views import PortfolioSummary
from tradingdesk.services import ValuationEngine

router = APIRouter(prefix="/portfolios", tags=["portfolios"])


def _summary_response(summary: PortfolioSummary) -> PortfolioSummaryResponse:
    portfolio = summary.portfolio
    return PortfolioSummaryResponse(
        id=portfolio.id,
        owner_id=portfolio.owner_id,
        name=portfolio.name,
        description=portfolio.description,
        currency=portfolio.currency,
        initial_balance=portfolio.initial_balance,
        current_balance=portfolio.current_balance,
        positions_value=summary.positions_value,
        positions_count=summary.positions_count,
        total_value=summary.total_value,
        total_pnl=summary.total_pnl,
        total_pnl_percent=summary.total_pnl_percent,
        unrealized_pnl=summary.unrealized_pnl,
        realized_pnl=summary.realized_pnl,
        created_at=portfolio.created_at,
    )


@router.get("", response_model=PortfolioListResponse)
def list_portfolios(
    owner_id: str = Query(..., min_length=1, description="Owner whose active portfolios to list"),
    engine: ValuationEngine = Depends(get_valuation_engine),
) -> PortfolioListResponse:
    """List an owner's active portfolios with valuations."""
    summaries = engine.list_portfolios(owner_id)
    return PortfolioListResponse(
        portfolios=[_summary_response(s) for s in summaries],
        count=len(summaries),
    )


@router.get("/{portfolio_id}", response_model=PortfolioSummaryResponse)
def get_portfolio(
    portfolio_id: str,
    engine: ValuationEngine = Depends(get_valuation_engine),
) -> PortfolioSummaryResponse:
    """Get a portfolio with its current valuation."""
    return _summary_response(engine.summarize(portfolio_id))


@router.get("/{portfolio_id}/positions", response_model=PositionListResponse)
def get_positions(
    portfolio_id: str,
    engine: ValuationEngine = Depends(get_valuation_engine),
) -> PositionListResponse:
    """Get positions, highest market value first."""
    positions = engine.get_positions(portfolio_id)
    return PositionListResponse(
        positions=[PositionResponse.model_validate(p) for p in positions],
        count=len(positions),
    )


@router.get("/{portfolio_id}/transactions", response_model=TransactionListResponse)
def get_transactions(
    portfolio_id: str,
    limit: int = Query(50, ge=1, le=500, description="Maximum rows to return"),
    offset: int = Query(0, ge=0, description="Rows to skip"),
    engine: ValuationEngine = Depends(get_valuation_engine),
) -> TransactionListResponse:
    """Get transaction history, newest first."""
    transactions = engine.get_transactions(portfolio_id, limit=limit, offset=offset)
    return TransactionListResponse(
        transactions=[TransactionResponse.model_validate(t) for t in transactions],
        count=len(transactions),
        limit=limit,
        offset=offset,
    )


@router.get("/{portfolio_id}/performance", response_model=PerformanceResponse)
def get_performance(
    portfolio_id: str,
    days: int = Query(30, ge=1, le=365, description="Trailing window in days"),
    engine: ValuationEngine = Depends(get_valuation_engine),
) -> PerformanceResponse:
    """Get daily net trade flow over the trailing window."""
    history = engine.performance_history(portfolio_id, days=days)
    return PerformanceResponse(
        portfolio_id=portfolio_id,
        days=days,
        history=[DailyFlowResponse.model_validate(d) for d in history],
    )


@router.get("/{portfolio_id}/allocation/sector", response_model=AllocationResponse)
def get_sector_allocation(
    portfolio_id: str,
    engine: ValuationEngine = Depends(get_valuation_engine),
) -> AllocationResponse:
    """Get open positions grouped by sector."""
    items = engine.sector_allocation(portfolio_id)
    return AllocationResponse(
        portfolio_id=portfolio_id,
        items=[AllocationItemResponse.model_validate(i) for i in items],
    )


@router.get("/{portfolio_id}/allocation/type", response_model=AllocationResponse)
def get_type_allocation(
    portfolio_id: str,
    engine: ValuationEngine = Depends(get_valuation_engine),
) -> AllocationResponse:
    """Get open positions grouped by security type."""
    items = engine.type_allocation(portfolio_id)
    return AllocationResponse(
        portfolio_id=portfolio_id,
        items=[AllocationItemResponse.model_validate(i) for i in items],
    )
