"""AccountApplicationService — read projections over accounts and positions.

All operations are read-only and run without an explicit transaction or row
locks. Position prices are display-only: a failed quote degrades to the
position's average price instead of failing the request. Order placement
never goes through here.
"""

import asyncio
import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.tp_account.application.schemas import (
    AccountBalanceResponse,
    AccountResponse,
    StockPositionResponse,
)
from src.tp_account.domain.models import StockPosition
from src.tp_account.domain.repository import AccountRepositoryProtocol
from src.tp_account.infrastructure.persistence import AccountRepository
from src.tp_account.infrastructure.quote_cache import QuoteCache
from src.tp_common.errors import AccountNotFoundError
from src.tp_common.money import to_price
from src.tp_trading.domain.exchange import ExchangeClientProtocol

logger = logging.getLogger(__name__)


class AccountApplicationService:
    def __init__(
        self,
        exchange: ExchangeClientProtocol,
        repo: AccountRepositoryProtocol | None = None,
        quote_cache: QuoteCache | None = None,
        pricing_timeout: float | None = None,
    ) -> None:
        self._exchange = exchange
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()
        self._quote_cache = quote_cache
        self._pricing_timeout = pricing_timeout

    async def get_account(self, db: AsyncSession, account_id: UUID) -> AccountResponse:
        logger.info("Getting account %s", account_id)
        account = await self._repo.get_with_positions(db, account_id)
        if account is None:
            logger.warning("Account %s not found", account_id)
            raise AccountNotFoundError(account_id)
        positions = [await self._price_position(p) for p in account.positions.values()]
        return AccountResponse(
            account_id=account.account_id,
            client_id=account.client_id,
            cash_balance=account.cash_balance,
            currency=account.currency,
            positions=positions,
        )

    async def get_balance(
        self, db: AsyncSession, account_id: UUID
    ) -> AccountBalanceResponse:
        logger.info("Getting balance for account %s", account_id)
        account = await self._repo.get_by_id(db, account_id)
        if account is None:
            logger.warning("Account %s not found", account_id)
            raise AccountNotFoundError(account_id)
        return AccountBalanceResponse(
            account_id=account.account_id,
            cash_balance=account.cash_balance,
            currency=account.currency,
        )

    async def get_positions(
        self, db: AsyncSession, account_id: UUID
    ) -> list[StockPositionResponse]:
        logger.info("Getting positions for account %s", account_id)
        account = await self._repo.get_with_positions(db, account_id)
        if account is None:
            logger.warning("Account %s not found", account_id)
            return []
        return [await self._price_position(p) for p in account.positions.values()]

    async def _price_position(self, position: StockPosition) -> StockPositionResponse:
        try:
            current_price = await self._current_price(position.symbol)
            is_fallback = False
        except Exception:
            logger.exception("Failed to get price for %s", position.symbol)
            current_price = position.average_price
            is_fallback = True
        return StockPositionResponse(
            symbol=position.symbol,
            quantity=position.quantity,
            average_price=position.average_price,
            current_price=current_price,
            price_is_fallback=is_fallback,
        )

    async def _current_price(self, symbol: str) -> Decimal:
        if self._quote_cache is not None:
            cached = await self._quote_cache.get(symbol)
            if cached is not None:
                return cached
        price = to_price(
            await asyncio.wait_for(
                self._exchange.get_stock_price(symbol), timeout=self._pricing_timeout
            )
        )
        if self._quote_cache is not None:
            await self._quote_cache.set(symbol, price)
        return price
