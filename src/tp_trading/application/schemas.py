# src/tp_trading/application/schemas.py
import re
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from config.settings import settings
from src.tp_order.domain.models import Order

_SYMBOL_RE = re.compile(r"^[A-Z]+$")


class OrderRequest(BaseModel):
    account_id: UUID
    symbol: str
    quantity: int
    idempotency_key: UUID

    @field_validator("symbol")
    @classmethod
    def symbol_shape(cls, v: str) -> str:
        if not v:
            raise ValueError("Stock symbol is required")
        if len(v) > 10:
            raise ValueError("Symbol cannot exceed 10 characters")
        if not _SYMBOL_RE.match(v):
            raise ValueError("Symbol must contain only uppercase letters")
        return v

    @field_validator("quantity")
    @classmethod
    def quantity_bounds(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Quantity must be greater than zero")
        if v > settings.MAX_ORDER_QUANTITY:
            raise ValueError(
                f"Quantity cannot exceed {settings.MAX_ORDER_QUANTITY:,} shares"
            )
        return v


class OrderResponse(BaseModel):
    order_id: UUID
    account_id: UUID
    symbol: str
    order_type: str
    quantity: int
    price_per_share: Decimal
    total_amount: Decimal
    status: str
    created_at: datetime | None = None
    executed_at: datetime | None = None
    error_message: str | None = None

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls(
            order_id=order.order_id,
            account_id=order.account_id,
            symbol=order.symbol,
            order_type=order.order_type.value,
            quantity=order.quantity,
            price_per_share=order.price_per_share,
            total_amount=order.total_amount,
            status=order.status.value,
            created_at=order.created_at,
            executed_at=order.executed_at,
            error_message=order.error_message,
        )


class StockQuoteResponse(BaseModel):
    symbol: str
    price: Decimal
    timestamp: datetime


class ValidationRequest(BaseModel):
    """Pre-trade check input — deliberately lenient, the service reports problems."""

    account_id: UUID
    symbol: str = ""
    quantity: int = 0
    estimated_price: Decimal | None = None


class ValidationResponse(BaseModel):
    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    current_price: Decimal | None = None
    total_amount: Decimal | None = None
