"""TransactionRepository — inserts into the append-only transactions table.

Called by the trading engine within the unit of work's transaction.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.tp_ledger.domain.models import Transaction

_INSERT_TRANSACTION_SQL = text("""
    INSERT INTO transactions
        (transaction_id, account_id, order_id, transaction_type,
         amount, balance_before, balance_after, created_at)
    VALUES
        (:transaction_id, :account_id, :order_id, :transaction_type,
         :amount, :balance_before, :balance_after, :created_at)
""")


class TransactionRepository:
    async def add(self, db: AsyncSession, transaction: Transaction) -> None:
        """Insert one ledger row within the caller's transaction."""
        await db.execute(
            _INSERT_TRANSACTION_SQL,
            {
                "transaction_id": transaction.transaction_id,
                "account_id": transaction.account_id,
                "order_id": transaction.order_id,
                "transaction_type": transaction.transaction_type.value,
                "amount": transaction.amount,
                "balance_before": transaction.balance_before,
                "balance_after": transaction.balance_after,
                "created_at": transaction.created_at,
            },
        )
