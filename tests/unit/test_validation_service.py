# tests/unit/test_validation_service.py
"""Unit tests for the pre-trade ValidationService."""
import asyncio
import uuid
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.tp_account.domain.models import Account
from src.tp_trading.application.schemas import ValidationRequest
from src.tp_trading.application.validation import ValidationService

ACCOUNT_ID = uuid.uuid4()


def _service(
    sufficient: bool = True, account: Account | None = None, price: str = "175.50"
) -> tuple[ValidationService, AsyncMock, AsyncMock]:
    repo = AsyncMock()
    repo.has_sufficient_funds.return_value = sufficient
    repo.get_by_id.return_value = account
    exchange = AsyncMock()
    exchange.get_stock_price.return_value = Decimal(price)
    return ValidationService(accounts=repo, exchange=exchange), repo, exchange


def _request(symbol: str = "AAPL", quantity: int = 10) -> ValidationRequest:
    return ValidationRequest(account_id=ACCOUNT_ID, symbol=symbol, quantity=quantity)


class TestValidateOrder:
    async def test_valid_order(self) -> None:
        svc, repo, _ = _service()

        result = await svc.validate_order(MagicMock(), _request())

        assert result.is_valid is True
        assert result.errors == []
        assert result.current_price == Decimal("175.5000")
        assert result.total_amount == Decimal("1755.00")
        repo.has_sufficient_funds.assert_awaited_once()

    async def test_zero_quantity(self) -> None:
        svc, _, _ = _service()
        result = await svc.validate_order(MagicMock(), _request(quantity=0))
        assert result.is_valid is False
        assert "Quantity must be greater than zero" in result.errors

    async def test_quantity_over_limit(self) -> None:
        svc, _, _ = _service()
        result = await svc.validate_order(MagicMock(), _request(quantity=10_001))
        assert "Quantity cannot exceed 10,000 shares" in result.errors

    async def test_missing_symbol_stops_early(self) -> None:
        svc, _, exchange = _service()

        result = await svc.validate_order(MagicMock(), _request(symbol="  "))

        assert result.errors == ["Stock symbol is required"]
        assert result.current_price is None
        exchange.get_stock_price.assert_not_awaited()

    async def test_pricing_failure_is_reported(self) -> None:
        svc, repo, exchange = _service()
        exchange.get_stock_price.side_effect = TimeoutError()

        result = await svc.validate_order(MagicMock(), _request())

        assert result.is_valid is False
        assert result.errors == ["Unable to retrieve current stock price"]
        repo.has_sufficient_funds.assert_not_awaited()

    async def test_hanging_price_feed_is_bounded(self) -> None:
        async def _hang(symbol: str) -> Decimal:
            await asyncio.sleep(3600)
            return Decimal("0")

        repo = AsyncMock()
        exchange = MagicMock()
        exchange.get_stock_price = _hang
        svc = ValidationService(accounts=repo, exchange=exchange, pricing_timeout=0.05)

        result = await svc.validate_order(MagicMock(), _request())

        assert result.is_valid is False
        assert result.errors == ["Unable to retrieve current stock price"]
        repo.has_sufficient_funds.assert_not_awaited()

    async def test_insufficient_funds_message(self) -> None:
        account = Account(
            account_id=ACCOUNT_ID,
            client_id=uuid.uuid4(),
            cash_balance=Decimal("1000.00"),
            currency="EUR",
        )
        svc, _, _ = _service(sufficient=False, account=account)

        result = await svc.validate_order(MagicMock(), _request(quantity=100))

        assert result.errors == [
            "Insufficient funds. Required: €17,550.00, Available: €1,000.00"
        ]
        assert result.total_amount == Decimal("17550.00")

    async def test_unknown_account(self) -> None:
        svc, _, _ = _service(sufficient=False, account=None)
        result = await svc.validate_order(MagicMock(), _request())
        assert result.errors == [f"Account {ACCOUNT_ID} not found"]

    async def test_balance_lookup_failure_is_reported(self) -> None:
        svc, repo, _ = _service()
        repo.has_sufficient_funds.side_effect = RuntimeError("db down")

        result = await svc.validate_order(MagicMock(), _request())

        assert result.errors == ["Unable to verify account balance"]
        assert result.is_valid is False
