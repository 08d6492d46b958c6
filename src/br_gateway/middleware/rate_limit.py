"""Rate limiting middleware.

Fixed windows per client IP, one counter per matching rule:

    key   = "ratelimit:{rule}:{ip}:{window_start}"
    count = INCR key   (EXPIRE on first hit)
    count > limit  ->  429 with the standard error envelope

Default rules: every route except /health (global), ``POST /api/v1/orders``
(orders) and ``GET /api/v1/instruments/search`` (search). A request counts
against each rule it matches, in order, and stops at the first exceeded one.

Redis is not on the money path: if it is unreachable the request is let
through and a warning is logged.
"""

import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

import redis.asyncio as aioredis
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from config.settings import settings
from src.br_common.errors import rate_limited
from src.br_common.redis_client import get_redis, hit_window
from src.br_common.response import error_response, request_id_of

logger = logging.getLogger(__name__)

_WINDOW_SECONDS = 60
_EXEMPT_PATHS = frozenset({"/health"})


@dataclass(frozen=True)
class RateLimitRule:
    """``path=None`` matches every non-exempt path; ``method=None`` every method."""

    name: str
    limit_per_minute: int
    method: str | None = None
    path: str | None = None

    def matches(self, method: str, path: str) -> bool:
        if self.limit_per_minute <= 0 or path in _EXEMPT_PATHS:
            return False
        if self.method is not None and method != self.method:
            return False
        return self.path is None or path == self.path


def default_rules() -> list[RateLimitRule]:
    return [
        RateLimitRule("global", settings.GLOBAL_RATE_LIMIT_PER_MINUTE),
        RateLimitRule("orders", settings.ORDER_RATE_LIMIT_PER_MINUTE, "POST", "/api/v1/orders"),
        RateLimitRule(
            "search", settings.SEARCH_RATE_LIMIT_PER_MINUTE, "GET", "/api/v1/instruments/search"
        ),
    ]


def client_ip(request: Request) -> str:
    """First X-Forwarded-For hop when behind a proxy, else the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        rules: Sequence[RateLimitRule] | None = None,
        redis_getter: Callable[[], Awaitable[aioredis.Redis]] = get_redis,
    ) -> None:
        super().__init__(app)
        self._rules = list(default_rules() if rules is None else rules)
        self._redis_getter = redis_getter

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path.rstrip("/") or "/"
        matched = [rule for rule in self._rules if rule.matches(request.method, path)]
        if not matched:
            return await call_next(request)

        ip = client_ip(request)
        window = int(time.time()) // _WINDOW_SECONDS
        try:
            redis = await self._redis_getter()
            for rule in matched:
                key = f"ratelimit:{rule.name}:{ip}:{window}"
                count = await hit_window(redis, key, _WINDOW_SECONDS)
                if count > rule.limit_per_minute:
                    logger.warning(
                        "Rate limit exceeded rule=%s ip=%s count=%d", rule.name, ip, count
                    )
                    return self._too_many_requests(request)
        except (RedisError, OSError) as exc:
            logger.warning("Rate limiter unavailable, allowing request ip=%s error=%s", ip, exc)

        return await call_next(request)

    @staticmethod
    def _too_many_requests(request: Request) -> JSONResponse:
        err = rate_limited()
        resp = error_response(err.code, err.message, request_id_of(request))
        return JSONResponse(
            status_code=err.http_status,
            content=resp.model_dump(),
            headers={"Retry-After": str(_WINDOW_SECONDS)},
        )
