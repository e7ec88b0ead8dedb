# src/tp_order/infrastructure/persistence.py
"""OrderRepository — raw SQL persistence implementation."""
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.tp_common.datetime_utils import as_utc
from src.tp_common.enums import OrderStatus, OrderType
from src.tp_common.errors import IdempotencyConflictError, OrderNotFoundError
from src.tp_order.domain.models import Order

IDEMPOTENCY_CONSTRAINT = "uq_orders_idempotency_key"

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_INSERT_ORDER_SQL = text("""
    INSERT INTO orders (order_id, account_id, symbol, order_type, quantity,
        price_per_share, total_amount, status, exchange_order_id,
        error_message, created_at, executed_at, idempotency_key)
    VALUES (:order_id, :account_id, :symbol, :order_type, :quantity,
        :price_per_share, :total_amount, :status, :exchange_order_id,
        :error_message, :created_at, :executed_at, :idempotency_key)
""")

_UPDATE_ORDER_SQL = text("""
    UPDATE orders
    SET status = :status,
        exchange_order_id = :exchange_order_id,
        error_message = :error_message,
        executed_at = :executed_at
    WHERE order_id = :order_id
""")

_SELECT_COLUMNS = """
    order_id, account_id, symbol, order_type, quantity,
    price_per_share, total_amount, status, exchange_order_id,
    error_message, created_at, executed_at, idempotency_key
"""

_GET_ORDER_BY_ID_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders WHERE order_id = :order_id
""")

_GET_ORDER_BY_IDEMPOTENCY_KEY_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders WHERE idempotency_key = :idempotency_key
""")

# order_id breaks created_at ties so pages never overlap or skip rows
_LIST_ORDERS_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders
    WHERE account_id = :account_id
    ORDER BY created_at DESC, order_id DESC
    LIMIT :limit OFFSET :offset
""")


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_order(row: Any) -> Order:
    """Convert a DB result row to an Order domain object."""
    return Order(
        order_id=row.order_id,
        account_id=row.account_id,
        symbol=row.symbol,
        order_type=OrderType(row.order_type),
        quantity=row.quantity,
        price_per_share=Decimal(row.price_per_share),
        total_amount=Decimal(row.total_amount),
        status=OrderStatus(row.status),
        exchange_order_id=row.exchange_order_id,
        error_message=row.error_message,
        created_at=as_utc(row.created_at),
        executed_at=as_utc(row.executed_at),
        idempotency_key=row.idempotency_key,
    )


def page_offset(page_number: int, page_size: int) -> int:
    """1-based page number to SQL OFFSET; pages below 1 are treated as the first."""
    return (max(page_number, 1) - 1) * page_size


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class OrderRepository:
    """Concrete implementation of OrderRepositoryProtocol using raw SQL."""

    async def add(self, db: AsyncSession, order: Order) -> None:
        try:
            await db.execute(
                _INSERT_ORDER_SQL,
                {
                    "order_id": order.order_id,
                    "account_id": order.account_id,
                    "symbol": order.symbol,
                    "order_type": order.order_type.value,
                    "quantity": order.quantity,
                    "price_per_share": order.price_per_share,
                    "total_amount": order.total_amount,
                    "status": order.status.value,
                    "exchange_order_id": order.exchange_order_id,
                    "error_message": order.error_message,
                    "created_at": order.created_at,
                    "executed_at": order.executed_at,
                    "idempotency_key": order.idempotency_key,
                },
            )
        except IntegrityError as exc:
            if IDEMPOTENCY_CONSTRAINT in str(exc.orig):
                raise IdempotencyConflictError(order.idempotency_key) from exc
            raise

    async def get_by_id(self, db: AsyncSession, order_id: UUID) -> Order | None:
        result = await db.execute(_GET_ORDER_BY_ID_SQL, {"order_id": order_id})
        row = result.fetchone()
        return _row_to_order(row) if row else None

    async def get_by_idempotency_key(
        self, db: AsyncSession, idempotency_key: UUID
    ) -> Order | None:
        result = await db.execute(
            _GET_ORDER_BY_IDEMPOTENCY_KEY_SQL, {"idempotency_key": idempotency_key}
        )
        row = result.fetchone()
        return _row_to_order(row) if row else None

    async def update_status(self, db: AsyncSession, order: Order) -> None:
        result = await db.execute(
            _UPDATE_ORDER_SQL,
            {
                "order_id": order.order_id,
                "status": order.status.value,
                "exchange_order_id": order.exchange_order_id,
                "error_message": order.error_message,
                "executed_at": order.executed_at,
            },
        )
        if result.rowcount == 0:
            raise OrderNotFoundError(order.order_id)

    async def list_by_account(
        self,
        db: AsyncSession,
        account_id: UUID,
        page_number: int,
        page_size: int,
    ) -> list[Order]:
        result = await db.execute(
            _LIST_ORDERS_SQL,
            {
                "account_id": account_id,
                "limit": page_size,
                "offset": page_offset(page_number, page_size),
            },
        )
        rows = result.fetchall()
        return [_row_to_order(row) for row in rows]
