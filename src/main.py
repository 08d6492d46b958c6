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
from src.br_common.database import engine
from src.br_common.errors import AppError, internal_error, validation_failed
from src.br_common.logging_config import configure_logging
from src.br_common.redis_client import close_redis, get_redis
from src.br_common.response import error_response, request_id_of
from src.br_gateway.middleware.rate_limit import RateLimitMiddleware, default_rules
from src.br_gateway.middleware.request_log import RequestLogMiddleware
from src.br_market.api.router import router as instruments_router
from src.br_order.api.router import router as orders_router
from src.br_portfolio.api.router import router as users_router

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB + Redis connections. Shutdown: dispose."""
    # Startup
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    await get_redis()
    logger.info("Startup complete app=%s", settings.APP_NAME)
    yield
    # Shutdown
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


# Last added runs first: request IDs are assigned before the limiter sees the request
app.add_middleware(RateLimitMiddleware, rules=default_rules())
app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("Request failed path=%s error=%r", request.url.path, exc)
    resp = error_response(exc.code, exc.message, request_id_of(request))
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    err = validation_failed(f"Validation failed: {details}")
    resp = error_response(err.code, err.message, request_id_of(request))
    return JSONResponse(status_code=err.http_status, content=resp.model_dump())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error path=%s", request.url.path)
    err = internal_error()
    resp = error_response(err.code, err.message, request_id_of(request))
    return JSONResponse(status_code=err.http_status, content=resp.model_dump())


app.include_router(orders_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(instruments_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
