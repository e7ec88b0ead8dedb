"""In-memory fakes for the trading engine.

The fake unit of work snapshots the store on begin() and restores it on
rollback(), so tests can assert what a real transaction would have left
behind after commit or rollback.
"""

import asyncio
import copy
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal
from typing import Any
from uuid import UUID

import pytest

from src.tp_account.domain.models import Account, StockPosition
from src.tp_common.datetime_utils import utc_now
from src.tp_common.enums import OrderStatus
from src.tp_common.errors import IdempotencyConflictError, OrderNotFoundError
from src.tp_ledger.domain.models import Transaction
from src.tp_order.domain.models import Order
from src.tp_order.infrastructure.persistence import page_offset
from src.tp_trading.application.service import TradingService

ACCOUNT_ID = UUID("11111111-1111-1111-1111-111111111111")
CLIENT_ID = UUID("22222222-2222-2222-2222-222222222222")


@dataclass
class InMemoryStore:
    accounts: dict[UUID, Account] = field(default_factory=dict)
    orders: dict[UUID, Order] = field(default_factory=dict)
    transactions: list[Transaction] = field(default_factory=list)

    def snapshot(self) -> "InMemoryStore":
        return copy.deepcopy(self)

    def restore(self, other: "InMemoryStore") -> None:
        self.accounts = other.accounts
        self.orders = other.orders
        self.transactions = other.transactions


class FakeAccountRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self.update_error: Exception | None = None
        self.locked: list[UUID] = []
        # Runs just before a locking read returns, i.e. once the row lock is granted.
        self.on_lock: Callable[[], None] | None = None

    async def get_by_id(self, db: Any, account_id: UUID) -> Account | None:
        account = self._store.accounts.get(account_id)
        if account is None:
            return None
        result = copy.deepcopy(account)
        result.positions = {}
        return result

    async def get_with_positions(
        self, db: Any, account_id: UUID, for_update: bool = False
    ) -> Account | None:
        if for_update:
            self.locked.append(account_id)
            if self.on_lock is not None:
                self.on_lock()
        account = self._store.accounts.get(account_id)
        return copy.deepcopy(account) if account else None

    async def update(self, db: Any, account: Account) -> None:
        if self.update_error is not None:
            raise self.update_error
        self._store.accounts[account.account_id] = copy.deepcopy(account)

    async def has_sufficient_funds(
        self, db: Any, account_id: UUID, amount: Decimal
    ) -> bool:
        account = self._store.accounts.get(account_id)
        return account is not None and account.cash_balance >= amount


class FakeOrderRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        # Simulates a concurrent request that commits the same key first:
        # the order becomes visible only once add() has collided with it.
        self.raced_by: Order | None = None
        self.committed_elsewhere: dict[UUID, Order] = {}

    async def add(self, db: Any, order: Order) -> None:
        if self.raced_by is not None:
            winner, self.raced_by = self.raced_by, None
            self.committed_elsewhere[winner.idempotency_key] = winner
            raise IdempotencyConflictError(order.idempotency_key)
        if any(o.idempotency_key == order.idempotency_key for o in self._store.orders.values()):
            raise IdempotencyConflictError(order.idempotency_key)
        self._store.orders[order.order_id] = copy.deepcopy(order)

    async def get_by_id(self, db: Any, order_id: UUID) -> Order | None:
        order = self._store.orders.get(order_id)
        return copy.deepcopy(order) if order else None

    async def get_by_idempotency_key(self, db: Any, idempotency_key: UUID) -> Order | None:
        for order in self._store.orders.values():
            if order.idempotency_key == idempotency_key:
                return copy.deepcopy(order)
        return self.committed_elsewhere.get(idempotency_key)

    async def update_status(self, db: Any, order: Order) -> None:
        if order.order_id not in self._store.orders:
            raise OrderNotFoundError(order.order_id)
        self._store.orders[order.order_id] = copy.deepcopy(order)

    async def list_by_account(
        self, db: Any, account_id: UUID, page_number: int, page_size: int
    ) -> list[Order]:
        orders = sorted(
            (o for o in self._store.orders.values() if o.account_id == account_id),
            key=lambda o: (o.created_at, o.order_id),
            reverse=True,
        )
        offset = page_offset(page_number, page_size)
        return [copy.deepcopy(o) for o in orders[offset : offset + page_size]]


class FakeTransactionRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def add(self, db: Any, transaction: Transaction) -> None:
        self._store.transactions.append(transaction)


class FakeUnitOfWork:
    def __init__(self, store: InMemoryStore) -> None:
        self.session: Any = object()
        self.transactions = FakeTransactionRepository(store)
        self._store = store
        self._snapshot: InMemoryStore | None = None
        self.begins = 0
        self.commits = 0
        self.rollbacks = 0

    async def begin(self) -> None:
        self.begins += 1
        self._snapshot = self._store.snapshot()

    async def commit(self) -> None:
        self.commits += 1
        self._snapshot = None

    async def rollback(self) -> None:
        self.rollbacks += 1
        if self._snapshot is not None:
            self._store.restore(self._snapshot)
            self._snapshot = None

    async def save_changes(self) -> None:
        pass


class StubExchange:
    """Exchange double: fixed prices, optional failure or hang on either call."""

    def __init__(self, prices: dict[str, Decimal] | None = None) -> None:
        self.prices = prices or {
            "AAPL": Decimal("175.50"),
            "MSFT": Decimal("380.25"),
        }
        self.pricing_error: Exception | None = None
        self.execution_error: Exception | None = None
        self.hang_pricing = False
        self.hang_execution = False
        self.price_calls: list[str] = []
        self.executions: list[tuple[str, int]] = []

    async def get_stock_price(self, symbol: str) -> Decimal:
        self.price_calls.append(symbol)
        if self.hang_pricing:
            await asyncio.sleep(3600)
        if self.pricing_error is not None:
            raise self.pricing_error
        return self.prices.get(symbol, Decimal("100.00"))

    async def execute_order(self, symbol: str, quantity: int) -> str:
        if self.hang_execution:
            await asyncio.sleep(3600)
        if self.execution_error is not None:
            raise self.execution_error
        self.executions.append((symbol, quantity))
        return f"EXC-{len(self.executions):08d}"


def make_account(
    cash_balance: str = "50000.00",
    positions: dict[str, tuple[int, str]] | None = None,
    account_id: UUID = ACCOUNT_ID,
) -> Account:
    now = utc_now()
    account = Account(
        account_id=account_id,
        client_id=CLIENT_ID,
        cash_balance=Decimal(cash_balance),
        currency="EUR",
        created_at=now,
        updated_at=now,
    )
    for symbol, (quantity, average_price) in (positions or {}).items():
        account.add_position(
            StockPosition(
                position_id=uuid.uuid4(),
                account_id=account_id,
                symbol=symbol,
                quantity=quantity,
                average_price=Decimal(average_price),
                created_at=now,
                updated_at=now,
            )
        )
    return account


def make_order(account_id: UUID = ACCOUNT_ID, minutes_ago: int = 0, **kwargs: Any) -> Order:
    return Order(
        order_id=kwargs.get("order_id", uuid.uuid4()),
        account_id=account_id,
        symbol=kwargs.get("symbol", "AAPL"),
        quantity=kwargs.get("quantity", 1),
        price_per_share=kwargs.get("price_per_share", Decimal("175.5000")),
        total_amount=kwargs.get("total_amount", Decimal("175.50")),
        idempotency_key=kwargs.get("idempotency_key", uuid.uuid4()),
        status=kwargs.get("status", OrderStatus.PENDING),
        created_at=utc_now() - timedelta(minutes=minutes_ago),
    )


@pytest.fixture
def store() -> InMemoryStore:
    s = InMemoryStore()
    s.accounts[ACCOUNT_ID] = make_account(positions={"AAPL": (10, "150.0000")})
    return s


@pytest.fixture
def exchange() -> StubExchange:
    return StubExchange()


@pytest.fixture
def account_repo(store: InMemoryStore) -> FakeAccountRepository:
    return FakeAccountRepository(store)


@pytest.fixture
def order_repo(store: InMemoryStore) -> FakeOrderRepository:
    return FakeOrderRepository(store)


@pytest.fixture
def uow(store: InMemoryStore) -> FakeUnitOfWork:
    return FakeUnitOfWork(store)


@pytest.fixture
def trading_service(
    account_repo: FakeAccountRepository,
    order_repo: FakeOrderRepository,
    exchange: StubExchange,
    uow: FakeUnitOfWork,
) -> TradingService:
    return TradingService(
        accounts=account_repo,
        orders=order_repo,
        exchange=exchange,
        uow=uow,
        pricing_timeout=0.05,
        execution_timeout=0.05,
    )


@pytest.fixture
def account_factory():  # type: ignore[no-untyped-def]
    return make_account


@pytest.fixture
def order_factory():  # type: ignore[no-untyped-def]
    return make_order
