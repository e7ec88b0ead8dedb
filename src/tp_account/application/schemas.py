"""Pydantic schemas for tp_account read API."""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel


class StockPositionResponse(BaseModel):
    symbol: str
    quantity: int
    average_price: Decimal
    current_price: Decimal
    # True when current_price is the average-price fallback, not a live quote
    price_is_fallback: bool = False


class AccountResponse(BaseModel):
    account_id: UUID
    client_id: UUID
    cash_balance: Decimal
    currency: str
    positions: list[StockPositionResponse]


class AccountBalanceResponse(BaseModel):
    account_id: UUID
    cash_balance: Decimal
    currency: str
