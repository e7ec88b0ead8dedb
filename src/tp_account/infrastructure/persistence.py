"""AccountRepository — concrete implementation of AccountRepositoryProtocol.

Reads used for display never lock. The trading engine passes ``for_update=True``
so the account row stays locked (SELECT ... FOR UPDATE) until its transaction
commits or rolls back; every balance/position write goes through that lock.

Transaction ownership: The CALLER (unit of work or application service) is
responsible for beginning and committing the transaction.
"""

from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.tp_account.domain.models import Account, StockPosition
from src.tp_common.datetime_utils import as_utc, utc_now
from src.tp_common.errors import AccountNotFoundError

# ---------------------------------------------------------------------------
# SQL: accounts
# ---------------------------------------------------------------------------

_ACCOUNT_COLUMNS = """
    account_id, client_id, cash_balance, currency, created_at, updated_at
"""

_GET_ACCOUNT_SQL = text(f"""
    SELECT {_ACCOUNT_COLUMNS}
    FROM accounts
    WHERE account_id = :account_id
""")

_GET_ACCOUNT_FOR_UPDATE_SQL = text(f"""
    SELECT {_ACCOUNT_COLUMNS}
    FROM accounts
    WHERE account_id = :account_id
    FOR UPDATE
""")

_GET_BALANCE_SQL = text("""
    SELECT cash_balance FROM accounts WHERE account_id = :account_id
""")

_UPDATE_ACCOUNT_SQL = text("""
    UPDATE accounts
    SET cash_balance = :cash_balance,
        updated_at = :updated_at
    WHERE account_id = :account_id
""")

# ---------------------------------------------------------------------------
# SQL: stock_positions
# ---------------------------------------------------------------------------

_LIST_POSITIONS_SQL = text("""
    SELECT position_id, account_id, symbol, quantity, average_price,
           created_at, updated_at
    FROM stock_positions
    WHERE account_id = :account_id
    ORDER BY symbol
""")

_UPSERT_POSITION_SQL = text("""
    INSERT INTO stock_positions
        (position_id, account_id, symbol, quantity, average_price,
         created_at, updated_at)
    VALUES
        (:position_id, :account_id, :symbol, :quantity, :average_price,
         :created_at, :updated_at)
    ON CONFLICT (account_id, symbol) DO UPDATE
        SET quantity = EXCLUDED.quantity,
            average_price = EXCLUDED.average_price,
            updated_at = EXCLUDED.updated_at
""")


def _row_to_account(row: Any) -> Account:
    return Account(
        account_id=row.account_id,
        client_id=row.client_id,
        cash_balance=Decimal(row.cash_balance),
        currency=row.currency,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


def _row_to_position(row: Any) -> StockPosition:
    return StockPosition(
        position_id=row.position_id,
        account_id=row.account_id,
        symbol=row.symbol,
        quantity=row.quantity,
        average_price=Decimal(row.average_price),
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


def _position_params(position: StockPosition) -> dict[str, Any]:
    now = utc_now()
    return {
        "position_id": position.position_id,
        "account_id": position.account_id,
        "symbol": position.symbol,
        "quantity": position.quantity,
        "average_price": position.average_price,
        "created_at": position.created_at or now,
        "updated_at": position.updated_at or now,
    }


class AccountRepository:
    """Raw SQL repository over accounts + stock_positions."""

    async def get_by_id(self, db: AsyncSession, account_id: UUID) -> Account | None:
        result = await db.execute(_GET_ACCOUNT_SQL, {"account_id": account_id})
        row = result.fetchone()
        return _row_to_account(row) if row else None

    async def get_with_positions(
        self, db: AsyncSession, account_id: UUID, for_update: bool = False
    ) -> Account | None:
        sql = _GET_ACCOUNT_FOR_UPDATE_SQL if for_update else _GET_ACCOUNT_SQL
        result = await db.execute(sql, {"account_id": account_id})
        row = result.fetchone()
        if row is None:
            return None
        account = _row_to_account(row)
        pos_result = await db.execute(_LIST_POSITIONS_SQL, {"account_id": account_id})
        for pos_row in pos_result.fetchall():
            position = _row_to_position(pos_row)
            account.positions[position.symbol] = position
        return account

    async def update(self, db: AsyncSession, account: Account) -> None:
        result = await db.execute(
            _UPDATE_ACCOUNT_SQL,
            {
                "account_id": account.account_id,
                "cash_balance": account.cash_balance,
                "updated_at": account.updated_at or utc_now(),
            },
        )
        if result.rowcount == 0:
            raise AccountNotFoundError(account.account_id)
        if account.positions:
            await db.execute(
                _UPSERT_POSITION_SQL,
                [_position_params(p) for p in account.positions.values()],
            )

    async def has_sufficient_funds(
        self, db: AsyncSession, account_id: UUID, amount: Decimal
    ) -> bool:
        result = await db.execute(_GET_BALANCE_SQL, {"account_id": account_id})
        row = result.fetchone()
        if row is None:
            return False
        return Decimal(row.cash_balance) >= amount
