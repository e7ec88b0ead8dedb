"""Unified error codes and custom exceptions.

Error code ranges:
  2xxx: Account
  4xxx: Order / Trading
  9xxx: System
"""

from decimal import Decimal

from src.tp_common.money import money_to_display


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 2xxx: Account ---

class InsufficientFundsError(AppError):
    def __init__(
        self, required: Decimal, available: Decimal, currency: str | None = None
    ) -> None:
        self.required = required
        self.available = available
        super().__init__(
            2001,
            "Insufficient funds. "
            f"Required: {money_to_display(required, currency)}, "
            f"Available: {money_to_display(available, currency)}",
            422,
        )


class AccountNotFoundError(AppError):
    def __init__(self, account_id: object) -> None:
        super().__init__(2002, f"Account {account_id} not found", 404)


# --- 4xxx: Order / Trading ---

class OrderNotFoundError(AppError):
    def __init__(self, order_id: object) -> None:
        super().__init__(4004, f"Order not found: {order_id}", 404)


class IdempotencyConflictError(AppError):
    """Unique violation on orders.idempotency_key — resolved by the engine, never returned."""

    def __init__(self, idempotency_key: object) -> None:
        self.idempotency_key = idempotency_key
        super().__init__(4005, f"Duplicate idempotency key: {idempotency_key}", 409)


class ExecutionFailedError(AppError):
    def __init__(self, order_id: object, detail: str) -> None:
        self.order_id = order_id
        self.detail = detail
        super().__init__(4010, f"Order {order_id} failed on exchange: {detail}", 422)


class PricingUnavailableError(AppError):
    def __init__(self, symbol: str, detail: str) -> None:
        super().__init__(4011, f"Unable to price {symbol}: {detail}", 503)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class TransientStorageError(AppError):
    def __init__(self, detail: str = "Storage temporarily unavailable, retry with the same idempotency key") -> None:
        super().__init__(9003, detail, 503)
