"""Order domain model — pure dataclass, no SQLAlchemy dependency."""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from src.tp_common.enums import OrderStatus, OrderType


@dataclass
class Order:
    order_id: UUID
    account_id: UUID
    symbol: str
    quantity: int
    price_per_share: Decimal  # price held fixed for the whole placement
    total_amount: Decimal     # price_per_share * quantity, 2 dp
    idempotency_key: UUID     # caller-supplied, globally unique
    order_type: OrderType = OrderType.BUY
    status: OrderStatus = OrderStatus.PENDING
    exchange_order_id: str | None = None
    error_message: str | None = None
    created_at: datetime | None = None
    executed_at: datetime | None = None

    def mark_executed(self, exchange_order_id: str, executed_at: datetime) -> None:
        self.exchange_order_id = exchange_order_id
        self.status = OrderStatus.EXECUTED
        self.executed_at = executed_at

    def mark_failed(self, error_message: str) -> None:
        self.status = OrderStatus.FAILED
        self.error_message = error_message
