"""SQLAlchemy ORM model definitions."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Enum as SqlEnum,
)
from sqlalchemy.orm import relationship

from tradingdesk.repositories.sqlalchemy.database import Base
from tradingdesk.domain.models.enums import SecurityType, Timeframe, TransactionType


class SecurityORM(Base):
    """SQLAlchemy model for Security."""

    __tablename__ = "securities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    symbol = Column(String(10), unique=True, nullable=False)
    name = Column(String(255), nullable=False)
    exchange = Column(String(50), nullable=False, default="NASDAQ")
    sector = Column(String(100), nullable=True)
    industry = Column(String(100), nullable=True)
    security_type = Column(
        SqlEnum(SecurityType),
        default=SecurityType.STOCK,
        nullable=False,
    )
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    positions = relationship("PositionORM", back_populates="security")


class PortfolioORM(Base):
    """SQLAlchemy model for Portfolio."""

    __tablename__ = "portfolios"

    id = Column(String(36), primary_key=True)
    owner_id = Column(String(36), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    currency = Column(String(3), nullable=False, default="USD")
    initial_balance = Column(Numeric(precision=18, scale=2), nullable=False)
    current_balance = Column(Numeric(precision=18, scale=2), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    positions = relationship("PositionORM", back_populates="portfolio")
    transactions = relationship("TransactionORM", back_populates="portfolio")


class PositionORM(Base):
    """SQLAlchemy model for Position."""

    __tablename__ = "positions"
    __table_args__ = (UniqueConstraint("portfolio_id", "security_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    portfolio_id = Column(String(36), ForeignKey("portfolios.id"), nullable=False)
    security_id = Column(Integer, ForeignKey("securities.id"), nullable=False)
    quantity = Column(Numeric(precision=18, scale=8), default=Decimal("0"))
    average_cost = Column(Numeric(precision=18, scale=4), default=Decimal("0"))
    market_value = Column(Numeric(precision=18, scale=2), default=Decimal("0"))
    unrealized_pnl = Column(Numeric(precision=18, scale=2), default=Decimal("0"))

    portfolio = relationship("PortfolioORM", back_populates="positions")
    security = relationship("SecurityORM", back_populates="positions")


class TransactionORM(Base):
    """SQLAlchemy model for Transaction (append-only fill record)."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    portfolio_id = Column(String(36), ForeignKey("portfolios.id"), nullable=False)
    security_id = Column(Integer, ForeignKey("securities.id"), nullable=False)
    order_id = Column(String(36), nullable=True)
    transaction_type = Column(SqlEnum(TransactionType), nullable=False)
    quantity = Column(Numeric(precision=18, scale=8), nullable=True)
    price = Column(Numeric(precision=18, scale=4), nullable=True)
    amount = Column(Numeric(precision=18, scale=2), nullable=False)
    fee = Column(Numeric(precision=18, scale=2), default=Decimal("0"))
    executed_at = Column(DateTime, nullable=False)

    portfolio = relationship("PortfolioORM", back_populates="transactions")
    security = relationship("SecurityORM")


class MarketDataORM(Base):
    """SQLAlchemy model for stored OHLCV bars."""

    __tablename__ = "market_data"
    __table_args__ = (UniqueConstraint("security_id", "timestamp", "timeframe"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    security_id = Column(Integer, ForeignKey("securities.id"), nullable=False)
    timestamp = Column(DateTime, nullable=False)
    timeframe = Column(SqlEnum(Timeframe), nullable=False)
    open_price = Column(Numeric(precision=18, scale=4), nullable=False)
    high_price = Column(Numeric(precision=18, scale=4), nullable=False)
    low_price = Column(Numeric(precision=18, scale=4), nullable=False)
    close_price = Column(Numeric(precision=18, scale=4), nullable=False)
    volume = Column(BigInteger, default=0)
