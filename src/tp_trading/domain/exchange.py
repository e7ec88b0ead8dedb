"""Exchange (pricing + execution) port.

Both calls go over the network in a real deployment and may fail or hang;
callers bound them with timeouts.
"""

from decimal import Decimal
from typing import Protocol


class ExchangeClientProtocol(Protocol):
    async def get_stock_price(self, symbol: str) -> Decimal:
        """Current price per share. Raises on unknown symbol or network error."""
        ...

    async def execute_order(self, symbol: str, quantity: int) -> str:
        """Submit a buy and return the exchange's order id. Raises if rejected."""
        ...
