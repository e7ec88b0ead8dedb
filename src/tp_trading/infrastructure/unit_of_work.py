"""SqlAlchemyUnitOfWork — wraps one request-scoped AsyncSession.

Repositories are stateless and take the session explicitly; everything they
execute between begin() and commit()/rollback() lands in one database
transaction.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.tp_ledger.domain.repository import TransactionRepositoryProtocol
from src.tp_ledger.infrastructure.persistence import TransactionRepository


class SqlAlchemyUnitOfWork:
    def __init__(
        self,
        session: AsyncSession,
        transactions: TransactionRepositoryProtocol | None = None,
    ) -> None:
        self.session = session
        self.transactions: TransactionRepositoryProtocol = (
            transactions or TransactionRepository()
        )

    async def begin(self) -> None:
        # Earlier reads (idempotency lookup) autobegin an implicit transaction;
        # end it so the write transaction starts clean.
        if self.session.in_transaction():
            await self.session.rollback()
        await self.session.begin()

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()

    async def save_changes(self) -> None:
        await self.session.flush()
