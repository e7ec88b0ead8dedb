"""TransactionRepository Protocol — write-once ledger, no update or delete."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.tp_ledger.domain.models import Transaction


class TransactionRepositoryProtocol(Protocol):
    async def add(self, db: AsyncSession, transaction: Transaction) -> None: ...
