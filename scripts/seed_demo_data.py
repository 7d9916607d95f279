#!/usr/bin/env python3
"""
Seed a demo portfolio with three months of simulated trading.

Creates the catalog securities, one portfolio with buys and sells on random
weekdays, and positions marked to synthetic prices.
Usage: from project root:
  python scripts/seed_demo_data.py [owner_id]
"""

import random
import sys
import uuid
from datetime import timedelta
from decimal import Decimal

from tradingdesk.config.logging_config import setup_logging
from tradingdesk.core.timezone import at_eastern_time, now_eastern
from tradingdesk.domain.models import Portfolio, Position, Transaction, TransactionType
from tradingdesk.providers import FALLBACK_CATALOG, SyntheticDataGenerator, base_price_for
from tradingdesk.repositories.sqlalchemy import (
    SqlAlchemyMarketDataRepository,
    SqlAlchemyPortfolioRepository,
    SqlAlchemyPositionRepository,
    SqlAlchemySecurityRepository,
    SqlAlchemyTransactionRepository,
    get_session_factory,
    init_db,
)
from tradingdesk.services import SecurityCreate, SecurityService, ValuationEngine

INITIAL_DEPOSIT = Decimal("50000")
DAYS = 90
MAX_TRANSACTIONS = 100
SEED = 2024
CENT = Decimal("0.01")


def simulate_trades(rng: random.Random, symbols: list[str]) -> list[dict]:
    """Walk weekdays over the last DAYS days and draw buys and sells."""
    today = now_eastern().date()
    day = today - timedelta(days=DAYS)
    cash = INITIAL_DEPOSIT
    holdings: dict[str, Decimal] = {}
    trades: list[dict] = []

    while day <= today and len(trades) < MAX_TRANSACTIONS:
        if day.weekday() < 5 and rng.random() < 0.35:
            symbol = rng.choice(symbols)
            price = (Decimal(str(base_price_for(symbol))) * Decimal(str(0.9 + rng.random() * 0.2))).quantize(CENT)
            held = holdings.get(symbol, Decimal("0"))
            executed_at = at_eastern_time(day, rng.randint(9, 15), rng.choice([0, 15, 30, 45]))

            if held > 0 and rng.random() < 0.35:
                quantity = Decimal(rng.randint(1, int(held)))
                txn_type = TransactionType.SELL
            else:
                quantity = Decimal(rng.randint(1, 10))
                txn_type = TransactionType.BUY

            amount = (quantity * price).quantize(CENT)
            fee = Decimal("0.99")
            if txn_type == TransactionType.BUY and amount + fee > cash:
                day += timedelta(days=1)
                continue

            if txn_type == TransactionType.BUY:
                cash -= amount + fee
                holdings[symbol] = held + quantity
            else:
                cash += amount - fee
                holdings[symbol] = held - quantity

            trades.append({
                "symbol": symbol,
                "txn_type": txn_type,
                "quantity": quantity,
                "price": price,
                "amount": amount,
                "fee": fee,
                "executed_at": executed_at,
            })
        day += timedelta(days=1)

    return trades


def seed(owner_id: str = "demo-user") -> str:
    """Create the demo data and return the new portfolio id."""
    setup_logging()
    init_db()
    session = get_session_factory()()
    rng = random.Random(SEED)
    synthetic = SyntheticDataGenerator(seed=SEED)

    try:
        security_repo = SqlAlchemySecurityRepository(session)
        security_service = SecurityService(security_repo, SqlAlchemyMarketDataRepository(session))
        securities = {
            match.symbol: security_service.store_security(
                SecurityCreate(symbol=match.symbol, name=match.name, type=match.type, sector="Technology")
            )
            for match in FALLBACK_CATALOG
        }
        print(f"✓ {len(securities)} securities registered")

        trades = simulate_trades(rng, list(securities))
        cash = INITIAL_DEPOSIT
        for trade in trades:
            if trade["txn_type"] == TransactionType.BUY:
                cash -= trade["amount"] + trade["fee"]
            else:
                cash += trade["amount"] - trade["fee"]

        portfolio_repo = SqlAlchemyPortfolioRepository(session)
        portfolio = portfolio_repo.create(
            Portfolio(
                id=str(uuid.uuid4()),
                owner_id=owner_id,
                name="Demo Portfolio",
                initial_balance=INITIAL_DEPOSIT,
                current_balance=cash,
                description="Seeded with simulated trades",
            )
        )
        print(f"✓ Portfolio {portfolio.id} created for {owner_id}")

        transaction_repo = SqlAlchemyTransactionRepository(session)
        lots: dict[str, tuple[Decimal, Decimal]] = {}
        for trade in trades:
            security = securities[trade["symbol"]]
            transaction_repo.create(
                Transaction(
                    portfolio_id=portfolio.id,
                    security_id=security.id,
                    txn_type=trade["txn_type"],
                    quantity=trade["quantity"],
                    price=trade["price"],
                    amount=trade["amount"],
                    fee=trade["fee"],
                    executed_at=trade["executed_at"],
                )
            )
            quantity, cost = lots.get(trade["symbol"], (Decimal("0"), Decimal("0")))
            if trade["txn_type"] == TransactionType.BUY:
                lots[trade["symbol"]] = (quantity + trade["quantity"], cost + trade["amount"])
            else:
                average = cost / quantity if quantity else Decimal("0")
                lots[trade["symbol"]] = (quantity - trade["quantity"], cost - average * trade["quantity"])
        print(f"✓ {len(trades)} transactions written")

        position_repo = SqlAlchemyPositionRepository(session)
        for symbol, (quantity, cost) in lots.items():
            price = Decimal(str(synthetic.quote(symbol).price))
            market_value = (quantity * price).quantize(CENT)
            position_repo.upsert(
                Position(
                    portfolio_id=portfolio.id,
                    security_id=securities[symbol].id,
                    quantity=quantity,
                    average_cost=(cost / quantity).quantize(Decimal("0.0001")) if quantity else Decimal("0"),
                    market_value=market_value,
                    unrealized_pnl=(market_value - cost).quantize(CENT),
                )
            )
        print(f"✓ {len(lots)} positions marked to market")

        engine = ValuationEngine(portfolio_repo, position_repo, transaction_repo)
        summary = engine.summarize(portfolio.id)
        print("=" * 60)
        print(f"Total value:    ${summary.total_value:,.2f}")
        print(f"Total P&L:      ${summary.total_pnl:,.2f} ({summary.total_pnl_percent}%)")
        print(f"Realized P&L:   ${summary.realized_pnl:,.2f}")
        print(f"Unrealized P&L: ${summary.unrealized_pnl:,.2f}")
        return portfolio.id
    finally:
        session.close()


if __name__ == "__main__":
    seed(*sys.argv[1:2])
