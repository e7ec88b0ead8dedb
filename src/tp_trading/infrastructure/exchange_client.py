"""MockStockExchangeClient — stub implementation of ExchangeClientProtocol.

There is no real exchange connectivity: quotes come from a fixed table and
every execution is accepted with a generated exchange order id.
"""

import asyncio
import logging
import uuid
from decimal import Decimal

logger = logging.getLogger(__name__)

MOCK_PRICES: dict[str, Decimal] = {
    "AAPL": Decimal("175.50"),
    "MSFT": Decimal("380.25"),
    "GOOGL": Decimal("140.75"),
    "AMZN": Decimal("145.30"),
    "TSLA": Decimal("245.60"),
}
DEFAULT_MOCK_PRICE = Decimal("100.00")


class MockStockExchangeClient:
    def __init__(self, latency_seconds: float = 0.0) -> None:
        self._latency_seconds = latency_seconds

    async def get_stock_price(self, symbol: str) -> Decimal:
        logger.info("Getting stock price for %s (mock)", symbol)
        await self._simulate_latency()
        return MOCK_PRICES.get(symbol.upper(), DEFAULT_MOCK_PRICE)

    async def execute_order(self, symbol: str, quantity: int) -> str:
        logger.info("Executing order: %d shares of %s (mock)", quantity, symbol)
        await self._simulate_latency()
        return f"EXC-{uuid.uuid4().hex[:8].upper()}"

    async def _simulate_latency(self) -> None:
        if self._latency_seconds > 0:
            await asyncio.sleep(self._latency_seconds)
