"""Repository Protocol — dependency inversion for testability.

Unit tests inject a fake or mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from decimal import Decimal
from typing import Protocol
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.tp_account.domain.models import Account


class AccountRepositoryProtocol(Protocol):
    async def get_by_id(self, db: AsyncSession, account_id: UUID) -> Account | None: ...

    async def get_with_positions(
        self, db: AsyncSession, account_id: UUID, for_update: bool = False
    ) -> Account | None: ...

    async def update(self, db: AsyncSession, account: Account) -> None: ...

    async def has_sufficient_funds(
        self, db: AsyncSession, account_id: UUID, amount: Decimal
    ) -> bool: ...
