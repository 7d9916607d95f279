"""Pydantic schemas for portfolio endpoints."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from tradingdesk.domain.models.enums import SecurityType, TransactionType


class PortfolioSummaryResponse(BaseModel):
    """Response schema for a valued portfolio."""

    id: str
    owner_id: str
    name: str
    description: Optional[str] = None
    currency: str
    initial_balance: Decimal
    current_balance: Decimal
    positions_value: Decimal
    positions_count: int
    total_value: Decimal
    total_pnl: Decimal
    total_pnl_percent: Decimal
    unrealized_pnl: Decimal
    realized_pnl: Decimal
    created_at: Optional[datetime] = None


class PortfolioListResponse(BaseModel):
    """Response schema for listing an owner's portfolios."""

    portfolios: list[PortfolioSummaryResponse]
    count: int


class PositionResponse(BaseModel):
    """Response schema for a single position."""

    model_config = {"from_attributes": True}

    id: Optional[int] = None
    security_id: int
    symbol: Optional[str] = None
    name: Optional[str] = None
    sector: Optional[str] = None
    security_type: Optional[SecurityType] = None
    quantity: Decimal
    average_cost: Decimal
    market_value: Decimal
    unrealized_pnl: Decimal


class PositionListResponse(BaseModel):
    """Response schema for a portfolio's positions."""

    positions: list[PositionResponse]
    count: int


class TransactionResponse(BaseModel):
    """Response schema for a single transaction."""

    model_config = {"from_attributes": True}

    id: Optional[int] = None
    security_id: int
    symbol: Optional[str] = None
    txn_type: TransactionType
    quantity: Optional[Decimal] = None
    price: Optional[Decimal] = None
    amount: Decimal
    fee: Decimal
    order_id: Optional[str] = None
    executed_at: datetime


class TransactionListResponse(BaseModel):
    """Response schema for a page of transactions."""

    transactions: list[TransactionResponse]
    count: int
    limit: int
    offset: int


class DailyFlowResponse(BaseModel):
    """Response schema for one day of net trade flow."""

    model_config = {"from_attributes": True}

    date: date
    net_flow: Decimal


class PerformanceResponse(BaseModel):
    """Response schema for trailing performance history."""

    portfolio_id: str
    days: int
    history: list[DailyFlowResponse]


class AllocationItemResponse(BaseModel):
    """Response schema for a single allocation bucket."""

    model_config = {"from_attributes": True}

    key: Optional[str] = None
    total_value: Decimal
    positions_count: int
    percentage: Decimal


class AllocationResponse(BaseModel):
    """Response schema for allocation breakdown."""

    portfolio_id: str
    items: list[AllocationItemResponse]
