"""Portfolio and Position domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from tradingdesk.domain.models.enums import SecurityType


@dataclass
class Portfolio:
    """
    Cash account owned by a single user.

    current_balance is cash only. It is mutated by order execution,
    never by valuation.
    """

    id: str
    owner_id: str
    name: str
    initial_balance: Decimal
    current_balance: Decimal
    currency: str = "USD"
    description: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = field(default=None)


@dataclass
class Position:
    """
    Holding of one security inside a portfolio.

    Closed positions are kept with quantity zero. Security columns
    (symbol, name, sector, security_type) are filled when read through
    the repository join.
    """

    portfolio_id: str
    security_id: int
    quantity: Decimal = field(default_factory=lambda: Decimal("0"))
    average_cost: Decimal = field(default_factory=lambda: Decimal("0"))
    market_value: Decimal = field(default_factory=lambda: Decimal("0"))
    unrealized_pnl: Decimal = field(default_factory=lambda: Decimal("0"))
    id: Optional[int] = None
    symbol: Optional[str] = None
    name: Optional[str] = None
    sector: Optional[str] = None
    security_type: Optional[SecurityType] = None

    @property
    def is_open(self) -> bool:
        return self.quantity > Decimal("0")
