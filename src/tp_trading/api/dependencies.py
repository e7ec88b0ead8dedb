"""FastAPI dependency providers for the trading endpoints.

Each request gets its own session-bound unit of work; repositories and the
exchange client are stateless and shared.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.tp_account.infrastructure.persistence import AccountRepository
from src.tp_common.database import get_db_session
from src.tp_order.infrastructure.persistence import OrderRepository
from src.tp_trading.application.service import TradingService
from src.tp_trading.application.validation import ValidationService
from src.tp_trading.domain.exchange import ExchangeClientProtocol
from src.tp_trading.infrastructure.exchange_client import MockStockExchangeClient
from src.tp_trading.infrastructure.unit_of_work import SqlAlchemyUnitOfWork

_exchange_client = MockStockExchangeClient()
_account_repo = AccountRepository()
_order_repo = OrderRepository()


def get_exchange_client() -> ExchangeClientProtocol:
    return _exchange_client


def get_trading_service(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    exchange: Annotated[ExchangeClientProtocol, Depends(get_exchange_client)],
) -> TradingService:
    return TradingService(
        accounts=_account_repo,
        orders=_order_repo,
        exchange=exchange,
        uow=SqlAlchemyUnitOfWork(db),
        pricing_timeout=settings.PRICING_TIMEOUT_SECONDS,
        execution_timeout=settings.EXECUTION_TIMEOUT_SECONDS,
    )


def get_validation_service(
    exchange: Annotated[ExchangeClientProtocol, Depends(get_exchange_client)],
) -> ValidationService:
    return ValidationService(
        accounts=_account_repo,
        exchange=exchange,
        pricing_timeout=settings.PRICING_TIMEOUT_SECONDS,
    )
