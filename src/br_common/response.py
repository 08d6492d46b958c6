"""Unified API response envelope.

Every endpoint, success or error, returns:
{
    "code": 0,           // 0=success, non-0=AppError code
    "message": "success",
    "data": { ... },     // null on error
    "timestamp": "...",
    "request_id": "req_..."
}

A REJECTED order is a success (code 0); only AppError produces a non-zero code.
"""

import uuid
from typing import Any

from pydantic import BaseModel, Field
from starlette.requests import Request

from src.br_common.datetime_utils import utc_now


def _new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: utc_now().isoformat())
    request_id: str = Field(default_factory=_new_request_id)


def request_id_of(request: Request) -> str | None:
    """Request id assigned by RequestLogMiddleware, if it ran."""
    return getattr(request.state, "request_id", None)


def _envelope(code: int, message: str, data: Any, request_id: str | None) -> ApiResponse:
    return ApiResponse(
        code=code,
        message=message,
        data=data,
        request_id=request_id or _new_request_id(),
    )


def success_response(data: Any = None, request_id: str | None = None) -> ApiResponse:
    return _envelope(0, "success", data, request_id)


def error_response(code: int, message: str, request_id: str | None = None) -> ApiResponse:
    return _envelope(code, message, None, request_id)
