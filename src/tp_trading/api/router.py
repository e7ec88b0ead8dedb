# src/tp_trading/api/router.py
"""Trading REST API — quotes, order placement and order history."""
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response

from src.tp_common.datetime_utils import utc_now
from src.tp_common.response import ApiResponse, success_response
from src.tp_trading.api.dependencies import get_trading_service
from src.tp_trading.application.schemas import OrderRequest, StockQuoteResponse
from src.tp_trading.application.service import TradingService

router = APIRouter(prefix="/trading", tags=["trading"])


def _wrap(data: object, request: Request) -> ApiResponse:
    resp = success_response(data)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/quote")
async def get_quote(
    svc: Annotated[TradingService, Depends(get_trading_service)],
    request: Request,
    symbol: str = Query(..., min_length=1, max_length=10, description="Ticker symbol"),
) -> ApiResponse:
    symbol = symbol.upper()
    price = await svc.get_stock_price(symbol)
    quote = StockQuoteResponse(symbol=symbol, price=price, timestamp=utc_now())
    return _wrap(quote.model_dump(mode="json"), request)


@router.post("/orders", status_code=201)
async def place_order(
    body: OrderRequest,
    svc: Annotated[TradingService, Depends(get_trading_service)],
    request: Request,
    response: Response,
) -> ApiResponse:
    order = await svc.place_order(body)
    response.headers["Location"] = f"{request.url.path}/{order.order_id}"
    return _wrap(order.model_dump(mode="json"), request)


@router.get("/orders")
async def list_orders(
    svc: Annotated[TradingService, Depends(get_trading_service)],
    request: Request,
    account_id: UUID = Query(..., description="Account whose orders to list"),
    page_number: int = Query(1, ge=1, description="1-based page number"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
) -> ApiResponse:
    orders = await svc.list_orders(account_id, page_number, page_size)
    return _wrap([o.model_dump(mode="json") for o in orders], request)


@router.get("/orders/{order_id}")
async def get_order(
    order_id: UUID,
    svc: Annotated[TradingService, Depends(get_trading_service)],
    request: Request,
) -> ApiResponse:
    order = await svc.get_order(order_id)
    return _wrap(order.model_dump(mode="json"), request)
