"""SQLAlchemy implementations of SecurityRepository and MarketDataRepository."""

from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from tradingdesk.core.timezone import to_eastern, to_naive_eastern
from tradingdesk.domain.models import MarketDataRow, Security, Timeframe
from tradingdesk.repositories.sqlalchemy.orm_models import MarketDataORM, SecurityORM


class SqlAlchemySecurityRepository:
    """SQLAlchemy-backed security repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, security: Security) -> Security:
        """Persist a new security."""
        orm_security = SecurityORM(
            symbol=security.symbol,
            name=security.name,
            exchange=security.exchange,
            sector=security.sector,
            industry=security.industry,
            security_type=security.security_type,
        )
        self._db.add(orm_security)
        self._db.commit()
        self._db.refresh(orm_security)
        return self._to_domain(orm_security)

    def get_by_id(self, security_id: int) -> Optional[Security]:
        """Retrieve security by ID."""
        orm_security = self._db.query(SecurityORM).filter(
            SecurityORM.id == security_id
        ).first()
        return self._to_domain(orm_security) if orm_security else None

    def get_by_symbol(self, symbol: str) -> Optional[Security]:
        """Retrieve security by symbol."""
        orm_security = self._db.query(SecurityORM).filter(
            SecurityORM.symbol == symbol
        ).first()
        return self._to_domain(orm_security) if orm_security else None

    @staticmethod
    def _to_domain(orm: SecurityORM) -> Security:
        """Convert ORM model to domain model."""
        return Security(
            id=orm.id,
            symbol=orm.symbol,
            name=orm.name,
            exchange=orm.exchange,
            sector=orm.sector,
            industry=orm.industry,
            security_type=orm.security_type,
            created_at=orm.created_at,
        )


class SqlAlchemyMarketDataRepository:
    """SQLAlchemy-backed repository for stored OHLCV bars."""

    def __init__(self, db: Session):
        self._db = db

    def upsert_many(self, rows: list[MarketDataRow]) -> int:
        """Insert bars, updating OHLCV when (security, timestamp, timeframe) exists."""
        for row in rows:
            timestamp = to_naive_eastern(row.timestamp)
            orm_row = (
                self._db.query(MarketDataORM)
                .filter(
                    MarketDataORM.security_id == row.security_id,
                    MarketDataORM.timestamp == timestamp,
                    MarketDataORM.timeframe == row.timeframe,
                )
                .first()
            )
            if orm_row is None:
                orm_row = MarketDataORM(
                    security_id=row.security_id,
                    timestamp=timestamp,
                    timeframe=row.timeframe,
                )
                self._db.add(orm_row)
            orm_row.open_price = row.open_price
            orm_row.high_price = row.high_price
            orm_row.low_price = row.low_price
            orm_row.close_price = row.close_price
            orm_row.volume = row.volume
            # Flush so a repeated timestamp in the same batch updates instead of inserting
            self._db.flush()

        self._db.commit()
        return len(rows)

    def list_for_security(self, security_id: int, timeframe: Timeframe) -> list[MarketDataRow]:
        """List stored bars for a security, oldest first."""
        orm_rows = (
            self._db.query(MarketDataORM)
            .filter(
                MarketDataORM.security_id == security_id,
                MarketDataORM.timeframe == timeframe,
            )
            .order_by(MarketDataORM.timestamp)
            .all()
        )
        return [self._to_domain(r) for r in orm_rows]

    @staticmethod
    def _to_domain(orm: MarketDataORM) -> MarketDataRow:
        """Convert ORM model to domain model."""
        return MarketDataRow(
            security_id=orm.security_id,
            timestamp=to_eastern(orm.timestamp),
            timeframe=orm.timeframe,
            open_price=Decimal(str(orm.open_price)),
            high_price=Decimal(str(orm.high_price)),
            low_price=Decimal(str(orm.low_price)),
            close_price=Decimal(str(orm.close_price)),
            volume=orm.volume or 0,
        )
