# src/tp_trading/api/validation_router.py
"""Pre-trade validation endpoint — always 200, problems are in the body."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.tp_common.database import get_db_session
from src.tp_common.response import ApiResponse, success_response
from src.tp_trading.api.dependencies import get_validation_service
from src.tp_trading.application.schemas import ValidationRequest
from src.tp_trading.application.validation import ValidationService

router = APIRouter(prefix="/validation", tags=["validation"])


@router.post("/order")
async def validate_order(
    body: ValidationRequest,
    svc: Annotated[ValidationService, Depends(get_validation_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    result = await svc.validate_order(db, body)
    resp = success_response(result.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
