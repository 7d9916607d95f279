"""SQLAlchemy implementations of PortfolioRepository and PositionRepository."""

from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from tradingdesk.domain.models import Portfolio, Position
from tradingdesk.repositories.sqlalchemy.orm_models import (
    PortfolioORM,
    PositionORM,
    SecurityORM,
)


def _decimal(value) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


class SqlAlchemyPortfolioRepository:
    """SQLAlchemy-backed portfolio repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, portfolio: Portfolio) -> Portfolio:
        """Persist a new portfolio."""
        orm_portfolio = PortfolioORM(
            id=portfolio.id,
            owner_id=portfolio.owner_id,
            name=portfolio.name,
            description=portfolio.description,
            currency=portfolio.currency,
            initial_balance=portfolio.initial_balance,
            current_balance=portfolio.current_balance,
            is_active=portfolio.is_active,
        )
        if portfolio.created_at is not None:
            orm_portfolio.created_at = portfolio.created_at
        self._db.add(orm_portfolio)
        self._db.commit()
        self._db.refresh(orm_portfolio)
        return self._to_domain(orm_portfolio)

    def get_by_id(self, portfolio_id: str) -> Optional[Portfolio]:
        """Retrieve portfolio by ID."""
        orm_portfolio = self._db.query(PortfolioORM).filter(
            PortfolioORM.id == portfolio_id
        ).first()
        return self._to_domain(orm_portfolio) if orm_portfolio else None

    def list_active_by_owner(self, owner_id: str) -> list[Portfolio]:
        """List an owner's active portfolios, newest first."""
        orm_portfolios = (
            self._db.query(PortfolioORM)
            .filter(
                PortfolioORM.owner_id == owner_id,
                PortfolioORM.is_active == True,  # noqa: E712
            )
            .order_by(PortfolioORM.created_at.desc())
            .all()
        )
        return [self._to_domain(p) for p in orm_portfolios]

    @staticmethod
    def _to_domain(orm: PortfolioORM) -> Portfolio:
        """Convert ORM model to domain model."""
        return Portfolio(
            id=orm.id,
            owner_id=orm.owner_id,
            name=orm.name,
            description=orm.description,
            currency=orm.currency,
            initial_balance=_decimal(orm.initial_balance),
            current_balance=_decimal(orm.current_balance),
            is_active=bool(orm.is_active),
            created_at=orm.created_at,
        )


class SqlAlchemyPositionRepository:
    """SQLAlchemy-backed position repository."""

    def __init__(self, db: Session):
        self._db = db

    def list_by_portfolio(self, portfolio_id: str) -> list[Position]:
        """List positions with security columns, highest market value first."""
        rows = (
            self._db.query(PositionORM, SecurityORM)
            .join(SecurityORM, PositionORM.security_id == SecurityORM.id)
            .filter(PositionORM.portfolio_id == portfolio_id)
            .order_by(PositionORM.market_value.desc())
            .all()
        )
        return [self._to_domain(position, security) for position, security in rows]

    def upsert(self, position: Position) -> Position:
        """Insert or update the position for (portfolio, security)."""
        orm_position = (
            self._db.query(PositionORM)
            .filter(
                PositionORM.portfolio_id == position.portfolio_id,
                PositionORM.security_id == position.security_id,
            )
            .first()
        )

        if orm_position is None:
            orm_position = PositionORM(
                portfolio_id=position.portfolio_id,
                security_id=position.security_id,
            )
            self._db.add(orm_position)

        orm_position.quantity = position.quantity
        orm_position.average_cost = position.average_cost
        orm_position.market_value = position.market_value
        orm_position.unrealized_pnl = position.unrealized_pnl

        self._db.commit()
        self._db.refresh(orm_position)
        security = self._db.get(SecurityORM, orm_position.security_id)
        return self._to_domain(orm_position, security)

    @staticmethod
    def _to_domain(orm: PositionORM, security: Optional[SecurityORM]) -> Position:
        """Convert ORM rows to domain model."""
        return Position(
            id=orm.id,
            portfolio_id=orm.portfolio_id,
            security_id=orm.security_id,
            quantity=_decimal(orm.quantity),
            average_cost=_decimal(orm.average_cost),
            market_value=_decimal(orm.market_value),
            unrealized_pnl=_decimal(orm.unrealized_pnl),
            symbol=security.symbol if security else None,
            name=security.name if security else None,
            sector=security.sector if security else None,
            security_type=security.security_type if security else None,
        )
