"""SQLAlchemy repository implementations."""

from tradingdesk.repositories.sqlalchemy.database import (
    get_engine,
    get_session_factory,
    get_db,
    init_db,
    reset_database,
    Base,
)
from tradingdesk.repositories.sqlalchemy.security_repo import (
    SqlAlchemySecurityRepository,
    SqlAlchemyMarketDataRepository,
)
from tradingdesk.repositories.sqlalchemy.portfolio_repo import (
    SqlAlchemyPortfolioRepository,
    SqlAlchemyPositionRepository,
)
from tradingdesk.repositories.sqlalchemy.transaction_repo import SqlAlchemyTransactionRepository

__all__ = [
    "get_engine",
    "get_session_factory",
    "get_db",
    "init_db",
    "reset_database",
    "Base",
    "SqlAlchemySecurityRepository",
    "SqlAlchemyMarketDataRepository",
    "SqlAlchemyPortfolioRepository",
    "SqlAlchemyPositionRepository",
    "SqlAlchemyTransactionRepository",
]
