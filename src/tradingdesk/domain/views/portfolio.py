"""View models for portfolio valuation outputs."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from tradingdesk.domain.models import Portfolio


@dataclass
class PortfolioSummary:
    """
    Derived valuation of a portfolio (never stored).

    total_pnl and unrealized_pnl + realized_pnl come from independent
    aggregations and are not reconciled against each other.
    """

    portfolio: Portfolio
    positions_value: Decimal
    positions_count: int
    total_value: Decimal
    total_pnl: Decimal
    total_pnl_percent: Decimal
    unrealized_pnl: Decimal
    realized_pnl: Decimal


@dataclass
class AllocationItem:
    """Single bucket in a sector or security-type breakdown."""

    key: Optional[str]
    total_value: Decimal
    positions_count: int
    percentage: Decimal = field(default_factory=lambda: Decimal("0"))


@dataclass
class DailyFlow:
    """Net trade cash flow for one calendar day (buys negative, sells positive)."""

    date: date
    net_flow: Decimal
