"""Valuation engine for portfolio summaries, P&L and allocation."""

from collections import defaultdict
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

from tradingdesk.core.exceptions import NotFoundError
from tradingdesk.core.timezone import now_eastern, to_eastern
from tradingdesk.domain.models import Portfolio, Position, Transaction, TransactionType
from tradingdesk.domain.views import AllocationItem, DailyFlow, PortfolioSummary
from tradingdesk.repositories.protocols import (
    PortfolioRepository,
    PositionRepository,
    TransactionRepository,
)

CENT = Decimal("0.01")
ZERO = Decimal("0")


class ValuationEngine:
    """
    Read-only aggregation over portfolio, position and transaction records.

    Each figure is derived from its own source table. In particular total P&L
    (from balances and market values) and unrealized + realized P&L (from
    positions and transactions) are computed independently and are not
    reconciled.
    """

    def __init__(
        self,
        portfolio_repo: PortfolioRepository,
        position_repo: PositionRepository,
        transaction_repo: TransactionRepository,
    ):
        self._portfolio_repo = portfolio_repo
        self._position_repo = position_repo
        self._transaction_repo = transaction_repo

    def summarize(self, portfolio_id: str) -> PortfolioSummary:
        """
        Point-in-time valuation of a portfolio.

        total_value = cash + sum(position market values)
        total_pnl = total_value - initial_balance
        realized_pnl = sum(sell: amount - fee, buy: -(amount + fee))
        """
        portfolio = self._get_portfolio(portfolio_id)
        return self._summarize(portfolio)

    def list_portfolios(self, owner_id: str) -> list[PortfolioSummary]:
        """Summaries of an owner's active portfolios, newest first."""
        return [
            self._summarize(portfolio)
            for portfolio in self._portfolio_repo.list_active_by_owner(owner_id)
        ]

    def get_positions(self, portfolio_id: str) -> list[Position]:
        """Positions with security info, highest market value first."""
        self._get_portfolio(portfolio_id)
        return self._position_repo.list_by_portfolio(portfolio_id)

    def get_transactions(
        self,
        portfolio_id: str,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Transaction]:
        """Transaction history, newest first."""
        self._get_portfolio(portfolio_id)
        return self._transaction_repo.list_by_portfolio(portfolio_id, limit=limit, offset=offset)

    def sector_allocation(self, portfolio_id: str) -> list[AllocationItem]:
        """Open positions grouped by sector, largest first."""
        return self._allocation(portfolio_id, lambda p: p.sector)

    def type_allocation(self, portfolio_id: str) -> list[AllocationItem]:
        """Open positions grouped by security type, largest first."""
        return self._allocation(
            portfolio_id,
            lambda p: p.security_type.value if p.security_type else None,
        )

    def performance_history(
        self,
        portfolio_id: str,
        days: int = 30,
        now: Optional[datetime] = None,
    ) -> list[DailyFlow]:
        """
        Daily net trade flow over the trailing window.

        Buys count as -amount and sells as +amount; fees are not included.
        Days without transactions are omitted.
        """
        self._get_portfolio(portfolio_id)
        end = to_eastern(now) if now is not None else now_eastern()
        start = end - timedelta(days=days)

        flows: dict[date, Decimal] = defaultdict(lambda: ZERO)
        for txn in self._transaction_repo.list_between(portfolio_id, start, end):
            day = to_eastern(txn.executed_at).date()
            if txn.txn_type == TransactionType.BUY:
                flows[day] -= txn.amount
            else:
                flows[day] += txn.amount

        return [
            DailyFlow(date=day, net_flow=flow.quantize(CENT))
            for day, flow in sorted(flows.items())
        ]

    def _get_portfolio(self, portfolio_id: str) -> Portfolio:
        portfolio = self._portfolio_repo.get_by_id(portfolio_id)
        if not portfolio:
            raise NotFoundError("Portfolio", portfolio_id)
        return portfolio

    def _summarize(self, portfolio: Portfolio) -> PortfolioSummary:
        positions = self._position_repo.list_by_portfolio(portfolio.id)
        transactions = self._transaction_repo.list_by_portfolio(portfolio.id)

        positions_value = sum((p.market_value for p in positions), ZERO)
        total_value = portfolio.current_balance + positions_value
        total_pnl = total_value - portfolio.initial_balance

        # Avoid division by zero for portfolios opened without funds
        total_pnl_percent = ZERO
        if portfolio.initial_balance > ZERO:
            total_pnl_percent = total_pnl / portfolio.initial_balance * 100

        unrealized_pnl = sum((p.unrealized_pnl for p in positions), ZERO)
        realized_pnl = sum((t.realized_cash_flow for t in transactions), ZERO)

        return PortfolioSummary(
            portfolio=portfolio,
            positions_value=positions_value.quantize(CENT),
            positions_count=len(positions),
            total_value=total_value.quantize(CENT),
            total_pnl=total_pnl.quantize(CENT),
            total_pnl_percent=total_pnl_percent.quantize(CENT),
            unrealized_pnl=unrealized_pnl.quantize(CENT),
            realized_pnl=realized_pnl.quantize(CENT),
        )

    def _allocation(
        self,
        portfolio_id: str,
        key_fn: Callable[[Position], Optional[str]],
    ) -> list[AllocationItem]:
        self._get_portfolio(portfolio_id)
        positions = [p for p in self._position_repo.list_by_portfolio(portfolio_id) if p.is_open]

        values: dict[Optional[str], Decimal] = defaultdict(lambda: ZERO)
        counts: dict[Optional[str], int] = defaultdict(int)
        for position in positions:
            key = key_fn(position)
            values[key] += position.market_value
            counts[key] += 1

        total = sum(values.values(), ZERO)
        items = [
            AllocationItem(
                key=key,
                total_value=value.quantize(CENT),
                positions_count=counts[key],
                percentage=(value / total * 100).quantize(CENT) if total else ZERO,
            )
            for key, value in values.items()
        ]
        items.sort(key=lambda item: item.total_value, reverse=True)
        return items
