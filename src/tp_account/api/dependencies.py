"""FastAPI dependency provider for the account read service."""

from typing import Annotated

import redis.asyncio as aioredis
from fastapi import Depends

from config.settings import settings
from src.tp_account.application.service import AccountApplicationService
from src.tp_account.infrastructure.persistence import AccountRepository
from src.tp_account.infrastructure.quote_cache import QuoteCache
from src.tp_common.redis_client import get_redis
from src.tp_trading.api.dependencies import get_exchange_client
from src.tp_trading.domain.exchange import ExchangeClientProtocol

_account_repo = AccountRepository()


def get_account_service(
    exchange: Annotated[ExchangeClientProtocol, Depends(get_exchange_client)],
    redis: Annotated[aioredis.Redis, Depends(get_redis)],
) -> AccountApplicationService:
    return AccountApplicationService(
        exchange=exchange,
        repo=_account_repo,
        quote_cache=QuoteCache(redis, settings.QUOTE_CACHE_TTL_SECONDS),
        pricing_timeout=settings.PRICING_TIMEOUT_SECONDS,
    )
