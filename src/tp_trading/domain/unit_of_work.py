"""Unit of Work Protocol — one atomic storage transaction spanning the stores."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.tp_ledger.domain.repository import TransactionRepositoryProtocol


class UnitOfWorkProtocol(Protocol):
    session: AsyncSession
    transactions: TransactionRepositoryProtocol

    async def begin(self) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...

    async def save_changes(self) -> None:
        """Flush pending writes without ending the transaction."""
        ...
