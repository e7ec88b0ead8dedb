# src/tp_trading/application/service.py
"""TradingService — order placement engine plus order read operations.

place_order runs one buy as a single unit of work:

    idempotency check -> price (outside the transaction) -> begin
    -> lock account -> re-check idempotency key -> funds check
    -> insert Pending order -> execute
    -> debit cash -> upsert position -> ledger entry -> commit

If the exchange rejects or times out, the order is stored as Failed and the
transaction is COMMITTED before the failure is re-raised. The committed
Failed row is what consumes the idempotency key: a retry with the same key
replays the failure instead of trading again. Balance and positions are not
touched on that path.
"""

import asyncio
import logging
import uuid
from decimal import Decimal
from uuid import UUID

from sqlalchemy.exc import DBAPIError

from src.tp_account.domain.models import Account, StockPosition
from src.tp_account.domain.repository import AccountRepositoryProtocol
from src.tp_common.datetime_utils import utc_now
from src.tp_common.enums import OrderStatus, OrderType, TransactionType
from src.tp_common.errors import (
    AccountNotFoundError,
    AppError,
    ExecutionFailedError,
    IdempotencyConflictError,
    InsufficientFundsError,
    InternalError,
    OrderNotFoundError,
    PricingUnavailableError,
    TransientStorageError,
)
from src.tp_common.money import to_money, to_price
from src.tp_ledger.domain.models import Transaction
from src.tp_order.domain.models import Order
from src.tp_order.domain.repository import OrderRepositoryProtocol
from src.tp_trading.application.schemas import OrderRequest, OrderResponse
from src.tp_trading.domain.exchange import ExchangeClientProtocol
from src.tp_trading.domain.position_math import weighted_average_price
from src.tp_trading.domain.unit_of_work import UnitOfWorkProtocol

logger = logging.getLogger(__name__)

_MAX_ERROR_MESSAGE_LEN = 500


class TradingService:
    def __init__(
        self,
        accounts: AccountRepositoryProtocol,
        orders: OrderRepositoryProtocol,
        exchange: ExchangeClientProtocol,
        uow: UnitOfWorkProtocol,
        pricing_timeout: float | None = None,
        execution_timeout: float | None = None,
    ) -> None:
        self._accounts = accounts
        self._orders = orders
        self._exchange = exchange
        self._uow = uow
        self._pricing_timeout = pricing_timeout
        self._execution_timeout = execution_timeout

    # ------------------------------------------------------------------
    # Quotes
    # ------------------------------------------------------------------

    async def get_stock_price(self, symbol: str) -> Decimal:
        logger.info("Getting stock price for %s", symbol)
        try:
            price = await asyncio.wait_for(
                self._exchange.get_stock_price(symbol), timeout=self._pricing_timeout
            )
        except TimeoutError as exc:
            raise PricingUnavailableError(
                symbol, f"timed out after {self._pricing_timeout}s"
            ) from exc
        except AppError:
            raise
        except Exception as exc:
            raise PricingUnavailableError(symbol, str(exc) or exc.__class__.__name__) from exc
        return to_price(price)

    # ------------------------------------------------------------------
    # Order placement
    # ------------------------------------------------------------------

    async def place_order(self, request: OrderRequest) -> OrderResponse:
        logger.info(
            "Placing order: %d shares of %s for account %s",
            request.quantity,
            request.symbol,
            request.account_id,
        )
        db = self._uow.session

        existing = await self._orders.get_by_idempotency_key(db, request.idempotency_key)
        if existing is not None:
            logger.info(
                "Order with idempotency key %s already exists: %s",
                request.idempotency_key,
                existing.order_id,
            )
            return OrderResponse.from_order(existing)

        # Priced once, outside the transaction; held fixed from here on.
        price = await self.get_stock_price(request.symbol)
        total_amount = to_money(price * request.quantity)

        await self._uow.begin()
        try:
            order = await self._place_in_transaction(request, price, total_amount)
        except ExecutionFailedError:
            # already committed as Failed
            raise
        except IdempotencyConflictError:
            await self._uow.rollback()
            return await self._resolve_idempotency_conflict(request.idempotency_key)
        except AppError as exc:
            await self._uow.rollback()
            logger.warning(
                "Order rejected for account %s: %s", request.account_id, exc.message
            )
            raise
        except DBAPIError as exc:
            await self._uow.rollback()
            logger.exception("Storage failure placing order for account %s", request.account_id)
            raise TransientStorageError() from exc
        except Exception:
            await self._uow.rollback()
            logger.exception("Failed to place order for account %s", request.account_id)
            raise

        logger.info("Order %s executed successfully", order.order_id)
        return OrderResponse.from_order(order)

    async def _place_in_transaction(
        self, request: OrderRequest, price: Decimal, total_amount: Decimal
    ) -> Order:
        db = self._uow.session

        account = await self._accounts.get_with_positions(
            db, request.account_id, for_update=True
        )
        # A same-key request may have committed while we waited on the row lock.
        if await self._orders.get_by_idempotency_key(db, request.idempotency_key) is not None:
            raise IdempotencyConflictError(request.idempotency_key)
        if account is None:
            raise AccountNotFoundError(request.account_id)

        if not account.has_sufficient_funds(total_amount):
            raise InsufficientFundsError(total_amount, account.cash_balance, account.currency)

        order = Order(
            order_id=uuid.uuid4(),
            account_id=account.account_id,
            symbol=request.symbol,
            order_type=OrderType.BUY,
            quantity=request.quantity,
            price_per_share=price,
            total_amount=total_amount,
            status=OrderStatus.PENDING,
            created_at=utc_now(),
            idempotency_key=request.idempotency_key,
        )
        await self._orders.add(db, order)

        try:
            exchange_order_id = await asyncio.wait_for(
                self._exchange.execute_order(request.symbol, request.quantity),
                timeout=self._execution_timeout,
            )
        except Exception as exc:
            await self._record_execution_failure(order, exc)
            raise ExecutionFailedError(order.order_id, order.error_message or "") from exc

        order.mark_executed(exchange_order_id, utc_now())
        await self._orders.update_status(db, order)

        balance_before = account.cash_balance
        now = utc_now()
        account.cash_balance = balance_before - total_amount
        account.updated_at = now
        self._apply_buy(account, request.symbol, request.quantity, price)
        await self._accounts.update(db, account)

        await self._uow.transactions.add(
            db,
            Transaction(
                transaction_id=uuid.uuid4(),
                account_id=account.account_id,
                order_id=order.order_id,
                transaction_type=TransactionType.DEBIT,
                amount=total_amount,
                balance_before=balance_before,
                balance_after=account.cash_balance,
                created_at=now,
            ),
        )

        await self._uow.save_changes()
        await self._uow.commit()
        return order

    async def _record_execution_failure(self, order: Order, exc: Exception) -> None:
        if isinstance(exc, TimeoutError):
            detail = f"Exchange execution timed out after {self._execution_timeout}s"
        else:
            detail = str(exc) or exc.__class__.__name__
        logger.error(
            "Failed to execute order %s on exchange: %s", order.order_id, detail, exc_info=exc
        )
        order.mark_failed(detail[:_MAX_ERROR_MESSAGE_LEN])
        await self._orders.update_status(self._uow.session, order)
        await self._uow.save_changes()
        await self._uow.commit()

    @staticmethod
    def _apply_buy(account: Account, symbol: str, quantity: int, price: Decimal) -> None:
        now = account.updated_at or utc_now()
        position = account.get_position(symbol)
        if position is not None:
            position.average_price = weighted_average_price(
                position.quantity, position.average_price, quantity, price
            )
            position.quantity += quantity
            position.updated_at = now
            return
        account.add_position(
            StockPosition(
                position_id=uuid.uuid4(),
                account_id=account.account_id,
                symbol=symbol,
                quantity=quantity,
                average_price=price,
                created_at=now,
                updated_at=now,
            )
        )

    async def _resolve_idempotency_conflict(self, idempotency_key: UUID) -> OrderResponse:
        """A concurrent request inserted the same key first; return its order."""
        existing = await self._orders.get_by_idempotency_key(
            self._uow.session, idempotency_key
        )
        if existing is None:
            raise InternalError(
                f"Idempotency key {idempotency_key} conflicted but no order was found"
            )
        logger.info(
            "Resolved concurrent duplicate for idempotency key %s -> order %s",
            idempotency_key,
            existing.order_id,
        )
        return OrderResponse.from_order(existing)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_order(self, order_id: UUID) -> OrderResponse:
        logger.info("Getting order %s", order_id)
        order = await self._orders.get_by_id(self._uow.session, order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return OrderResponse.from_order(order)

    async def list_orders(
        self, account_id: UUID, page_number: int, page_size: int
    ) -> list[OrderResponse]:
        logger.info(
            "Getting orders for account %s, page %d, size %d",
            account_id,
            page_number,
            page_size,
        )
        orders = await self._orders.list_by_account(
            self._uow.session, account_id, page_number, page_size
        )
        return [OrderResponse.from_order(o) for o in orders]
