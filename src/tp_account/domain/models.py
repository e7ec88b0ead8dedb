"""Domain models for tp_account — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from uuid import UUID


@dataclass
class StockPosition:
    position_id: UUID
    account_id: UUID
    symbol: str                  # uppercase ticker, <= 10 chars
    quantity: int                # shares held, never pruned at 0
    average_price: Decimal       # cost basis per share, 4 dp
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Account:
    account_id: UUID
    client_id: UUID
    cash_balance: Decimal        # 2 dp, >= 0 enforced by the trading engine
    currency: str                # ISO 4217 code
    # keyed by symbol: at most one position per (account, symbol)
    positions: dict[str, StockPosition] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def has_sufficient_funds(self, amount: Decimal) -> bool:
        return self.cash_balance >= amount

    def get_position(self, symbol: str) -> StockPosition | None:
        return self.positions.get(symbol)

    def add_position(self, position: StockPosition) -> None:
        if position.symbol in self.positions:
            raise ValueError(f"Position for {position.symbol} already exists")
        self.positions[position.symbol] = position
