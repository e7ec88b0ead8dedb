"""tp_account REST API — read-only account, balance and position projections."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.tp_account.api.dependencies import get_account_service
from src.tp_account.application.service import AccountApplicationService
from src.tp_common.database import get_db_session
from src.tp_common.response import ApiResponse, success_response

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.get("/{account_id}")
async def get_account(
    account_id: UUID,
    svc: Annotated[AccountApplicationService, Depends(get_account_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await svc.get_account(db, account_id)
    resp = success_response(data.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/{account_id}/balance")
async def get_balance(
    account_id: UUID,
    svc: Annotated[AccountApplicationService, Depends(get_account_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await svc.get_balance(db, account_id)
    resp = success_response(data.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/{account_id}/positions")
async def get_positions(
    account_id: UUID,
    svc: Annotated[AccountApplicationService, Depends(get_account_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    positions = await svc.get_positions(db, account_id)
    resp = success_response([p.model_dump(mode="json") for p in positions])
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
