"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.tp_account.api.router import router as account_router
from src.tp_common.database import engine
from src.tp_common.errors import AppError
from src.tp_common.redis_client import close_redis, get_redis
from src.tp_common.response import error_response
from src.tp_gateway.middleware.request_log import RequestLogMiddleware
from src.tp_trading.api.router import router as trading_router
from src.tp_trading.api.validation_router import router as validation_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

VALIDATION_ERROR_CODE = 4000


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB + Redis connections. Shutdown: dispose."""
    # Startup
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    redis = await get_redis()
    await redis.ping()
    logger.info("Starting %s", settings.APP_NAME)
    yield
    # Shutdown
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    description="Client cash accounts, stock positions and buy orders",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("Server error on %s: %s", request.url.path, exc.message)
    else:
        logger.warning("Business error on %s: %s", request.url.path, exc.message)
    resp = error_response(exc.code, exc.message)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = [
        str(err.get("msg", "")).removeprefix("Value error, ") for err in exc.errors()
    ]
    resp = error_response(VALIDATION_ERROR_CODE, "Validation failed", messages)
    return JSONResponse(status_code=400, content=resp.model_dump())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("An unexpected error occurred on %s", request.url.path)
    resp = error_response(9002, "An internal server error occurred")
    return JSONResponse(status_code=500, content=resp.model_dump())


app.include_router(account_router, prefix="/api/v1")
app.include_router(trading_router, prefix="/api/v1")
app.include_router(validation_router, prefix="/api/v1")


@app.get("/api/v1/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
