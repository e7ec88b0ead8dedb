"""Tests for tp_common.errors and tp_common.response."""

import uuid
from decimal import Decimal

import pytest

from config.settings import settings
from src.tp_common.errors import (
    AccountNotFoundError,
    AppError,
    ExecutionFailedError,
    IdempotencyConflictError,
    InsufficientFundsError,
    InternalError,
    OrderNotFoundError,
    PricingUnavailableError,
    TransientStorageError,
)
from src.tp_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1, message="x"), Exception)


class TestSpecificErrors:
    def test_insufficient_funds(self) -> None:
        err = InsufficientFundsError(required=Decimal("17550"), available=Decimal("1000"))
        assert err.code == 2001
        assert err.http_status == 422
        assert err.message == "Insufficient funds. Required: €17,550.00, Available: €1,000.00"

    def test_insufficient_funds_other_currency(self) -> None:
        err = InsufficientFundsError(Decimal("5"), Decimal("1"), "USD")
        assert "$5.00" in err.message

    def test_insufficient_funds_defaults_to_configured_currency(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(settings, "DEFAULT_CURRENCY", "USD")
        err = InsufficientFundsError(Decimal("5"), Decimal("1"))
        assert err.message == "Insufficient funds. Required: $5.00, Available: $1.00"

    def test_account_not_found(self) -> None:
        account_id = uuid.uuid4()
        err = AccountNotFoundError(account_id)
        assert err.code == 2002
        assert err.http_status == 404
        assert str(account_id) in err.message

    def test_order_not_found(self) -> None:
        err = OrderNotFoundError("abc")
        assert err.code == 4004
        assert err.message == "Order not found: abc"

    def test_idempotency_conflict_keeps_key(self) -> None:
        key = uuid.uuid4()
        err = IdempotencyConflictError(key)
        assert err.idempotency_key == key
        assert err.http_status == 409

    def test_execution_failed(self) -> None:
        order_id = uuid.uuid4()
        err = ExecutionFailedError(order_id, "Market closed")
        assert err.code == 4010
        assert err.http_status == 422
        assert err.order_id == order_id
        assert err.detail == "Market closed"

    def test_pricing_unavailable(self) -> None:
        err = PricingUnavailableError("AAPL", "timed out")
        assert err.code == 4011
        assert err.http_status == 503
        assert err.message == "Unable to price AAPL: timed out"

    def test_system_errors(self) -> None:
        assert InternalError().code == 9002
        assert TransientStorageError().http_status == 503


class TestApiResponse:
    def test_success_response(self) -> None:
        resp = success_response({"key": "value"})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"key": "value"}
        assert resp.errors == []

    def test_error_response(self) -> None:
        resp = error_response(4000, "Validation failed", ["Quantity must be greater than zero"])
        assert resp.code == 4000
        assert resp.data is None
        assert resp.errors == ["Quantity must be greater than zero"]

    def test_request_id_format(self) -> None:
        resp = ApiResponse()
        assert resp.request_id.startswith("req_")
        assert len(resp.request_id) == 16
