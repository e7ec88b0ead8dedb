"""OrderRepository Protocol — interface contract for persistence layer."""
from typing import Protocol
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.tp_order.domain.models import Order


class OrderRepositoryProtocol(Protocol):
    async def add(self, db: AsyncSession, order: Order) -> None:
        """Insert; raises IdempotencyConflictError if the key is already taken."""
        ...

    async def get_by_id(self, db: AsyncSession, order_id: UUID) -> Order | None: ...

    async def get_by_idempotency_key(
        self, db: AsyncSession, idempotency_key: UUID
    ) -> Order | None: ...

    async def update_status(self, db: AsyncSession, order: Order) -> None: ...

    async def list_by_account(
        self,
        db: AsyncSession,
        account_id: UUID,
        page_number: int,
        page_size: int,
    ) -> list[Order]:
        """Newest first by created_at; page_number is 1-based."""
        ...
