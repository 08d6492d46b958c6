"""Users REST API — portfolio and order history."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Request

from src.br_common.datetime_utils import parse_cursor
from src.br_common.errors import validation_failed
from src.br_common.response import ApiResponse, request_id_of, success_response
from src.br_order.api.router import get_order_service
from src.br_order.application.schemas import OrderPageResponse
from src.br_order.application.service import OrderExecutionService
from src.br_portfolio.application.schemas import PortfolioResponse
from src.br_portfolio.application.service import PortfolioService

router = APIRouter(prefix="/users", tags=["users"])

_service = PortfolioService()


def get_portfolio_service() -> PortfolioService:
    return _service


@router.get("/{user_id}/portfolio")
async def get_portfolio(
    request: Request,
    service: Annotated[PortfolioService, Depends(get_portfolio_service)],
    user_id: int = Path(..., gt=0),
) -> ApiResponse:
    portfolio = await service.get_user_portfolio(user_id)
    data = PortfolioResponse.from_domain(portfolio)
    return success_response(data.model_dump(mode="json"), request_id_of(request))


@router.get("/{user_id}/orders")
async def list_user_orders(
    request: Request,
    service: Annotated[OrderExecutionService, Depends(get_order_service)],
    user_id: int = Path(..., gt=0),
    limit: int | None = Query(None, ge=1, le=200, description="Items per page"),
    cursor: str | None = Query(None, description="ISO-8601 created_at of the last seen order"),
) -> ApiResponse:
    try:
        cursor_ts = parse_cursor(cursor)
    except ValueError:
        raise validation_failed(f"Invalid cursor: {cursor}") from None
    page = await service.get_user_orders(user_id, limit, cursor_ts)
    data = OrderPageResponse.from_domain(page)
    return success_response(data.model_dump(mode="json"), request_id_of(request))
