"""Short-TTL quote cache in Redis for the read projections.

Order placement never reads from here; it always prices against the exchange.
Key: f"quote:{symbol}" -> price as a decimal string.
"""

from decimal import Decimal

import redis.asyncio as aioredis


class QuoteCache:
    def __init__(self, redis: aioredis.Redis, ttl_seconds: int) -> None:
        self._redis = redis
        self._ttl_seconds = ttl_seconds

    @staticmethod
    def _key(symbol: str) -> str:
        return f"quote:{symbol.upper()}"

    async def get(self, symbol: str) -> Decimal | None:
        value = await self._redis.get(self._key(symbol))
        return Decimal(value) if value is not None else None

    async def set(self, symbol: str, price: Decimal) -> None:
        await self._redis.set(self._key(symbol), str(price), ex=self._ttl_seconds)
