"""Transaction domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from tradingdesk.domain.models.enums import TransactionType


@dataclass
class Transaction:
    """
    Executed fill against a portfolio (append-only).

    amount is the gross trade value (quantity x price); fee is charged on top.
    """

    portfolio_id: str
    security_id: int
    txn_type: TransactionType
    amount: Decimal
    executed_at: datetime
    fee: Decimal = field(default_factory=lambda: Decimal("0"))
    quantity: Optional[Decimal] = None
    price: Optional[Decimal] = None
    order_id: Optional[str] = None
    id: Optional[int] = None
    symbol: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.txn_type, str):
            self.txn_type = TransactionType(self.txn_type)

    @property
    def realized_cash_flow(self) -> Decimal:
        """
        Signed cash effect used for realized P&L.

        SELL: amount - fee. BUY: -(amount + fee).
        """
        if self.txn_type == TransactionType.SELL:
            return self.amount - self.fee
        return -(self.amount + self.fee)
