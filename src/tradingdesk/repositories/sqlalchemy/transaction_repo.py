"""SQLAlchemy implementation of TransactionRepository."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from tradingdesk.core.timezone import to_eastern, to_naive_eastern
from tradingdesk.domain.models import Transaction
from tradingdesk.repositories.sqlalchemy.orm_models import SecurityORM, TransactionORM


class SqlAlchemyTransactionRepository:
    """SQLAlchemy-backed transaction repository (append-only)."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, transaction: Transaction) -> Transaction:
        """Persist a new transaction."""
        orm_txn = TransactionORM(
            portfolio_id=transaction.portfolio_id,
            security_id=transaction.security_id,
            order_id=transaction.order_id,
            transaction_type=transaction.txn_type,
            quantity=transaction.quantity,
            price=transaction.price,
            amount=transaction.amount,
            fee=transaction.fee,
            executed_at=to_naive_eastern(transaction.executed_at),
        )
        self._db.add(orm_txn)
        self._db.commit()
        self._db.refresh(orm_txn)
        return self._to_domain(orm_txn, self._db.get(SecurityORM, orm_txn.security_id))

    def list_by_portfolio(
        self,
        portfolio_id: str,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Transaction]:
        """List transactions for a portfolio, newest first."""
        query = (
            self._db.query(TransactionORM, SecurityORM)
            .join(SecurityORM, TransactionORM.security_id == SecurityORM.id)
            .filter(TransactionORM.portfolio_id == portfolio_id)
            .order_by(TransactionORM.executed_at.desc(), TransactionORM.id.desc())
            .offset(offset)
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_domain(t, s) for t, s in query.all()]

    def list_between(
        self,
        portfolio_id: str,
        start: datetime,
        end: datetime,
    ) -> list[Transaction]:
        """List transactions executed within [start, end], oldest first."""
        rows = (
            self._db.query(TransactionORM, SecurityORM)
            .join(SecurityORM, TransactionORM.security_id == SecurityORM.id)
            .filter(
                TransactionORM.portfolio_id == portfolio_id,
                TransactionORM.executed_at >= to_naive_eastern(start),
                TransactionORM.executed_at <= to_naive_eastern(end),
            )
            .order_by(TransactionORM.executed_at, TransactionORM.id)
            .all()
        )
        return [self._to_domain(t, s) for t, s in rows]

    @staticmethod
    def _to_domain(orm: TransactionORM, security: Optional[SecurityORM]) -> Transaction:
        """Convert ORM model to domain model."""
        return Transaction(
            id=orm.id,
            portfolio_id=orm.portfolio_id,
            security_id=orm.security_id,
            order_id=orm.order_id,
            txn_type=orm.transaction_type,
            quantity=Decimal(str(orm.quantity)) if orm.quantity is not None else None,
            price=Decimal(str(orm.price)) if orm.price is not None else None,
            amount=Decimal(str(orm.amount)),
            fee=Decimal(str(orm.fee)) if orm.fee is not None else Decimal("0"),
            executed_at=to_eastern(orm.executed_at),
            symbol=security.symbol if security else None,
        )
