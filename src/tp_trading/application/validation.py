# src/tp_trading/application/validation.py
"""ValidationService — pre-trade check, reports problems instead of raising.

Read-only: nothing here locks rows or writes. The real funds check happens
again inside place_order's transaction.
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.tp_account.domain.repository import AccountRepositoryProtocol
from src.tp_common.money import money_to_display, to_money, to_price
from src.tp_trading.application.schemas import ValidationRequest, ValidationResponse
from src.tp_trading.domain.exchange import ExchangeClientProtocol

logger = logging.getLogger(__name__)


class ValidationService:
    def __init__(
        self,
        accounts: AccountRepositoryProtocol,
        exchange: ExchangeClientProtocol,
        max_quantity: int | None = None,
        pricing_timeout: float | None = None,
    ) -> None:
        self._accounts = accounts
        self._exchange = exchange
        self._max_quantity = max_quantity or settings.MAX_ORDER_QUANTITY
        self._pricing_timeout = pricing_timeout or settings.PRICING_TIMEOUT_SECONDS

    async def validate_order(
        self, db: AsyncSession, request: ValidationRequest
    ) -> ValidationResponse:
        logger.info(
            "Validating order: %d shares of %s for account %s",
            request.quantity,
            request.symbol,
            request.account_id,
        )
        errors: list[str] = []

        if request.quantity <= 0:
            errors.append("Quantity must be greater than zero")
        if request.quantity > self._max_quantity:
            errors.append(f"Quantity cannot exceed {self._max_quantity:,} shares")
        if not request.symbol.strip():
            errors.append("Stock symbol is required")
            return ValidationResponse(is_valid=False, errors=errors)

        try:
            current_price = to_price(
                await asyncio.wait_for(
                    self._exchange.get_stock_price(request.symbol),
                    timeout=self._pricing_timeout,
                )
            )
        except Exception:
            logger.exception("Failed to get stock price for validation")
            errors.append("Unable to retrieve current stock price")
            return ValidationResponse(is_valid=False, errors=errors)

        total_amount = to_money(current_price * request.quantity)

        try:
            sufficient = await self._accounts.has_sufficient_funds(
                db, request.account_id, total_amount
            )
            if not sufficient:
                account = await self._accounts.get_by_id(db, request.account_id)
                if account is None:
                    errors.append(f"Account {request.account_id} not found")
                else:
                    errors.append(
                        "Insufficient funds. "
                        f"Required: {money_to_display(total_amount, account.currency)}, "
                        f"Available: {money_to_display(account.cash_balance, account.currency)}"
                    )
        except Exception:
            logger.exception("Failed to check account funds")
            errors.append("Unable to verify account balance")

        return ValidationResponse(
            is_valid=not errors,
            errors=errors,
            current_price=current_price,
            total_amount=total_amount,
        )
