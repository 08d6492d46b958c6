"""Orders REST API — 3 endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request

from src.br_common.response import ApiResponse, request_id_of, success_response
from src.br_order.application.schemas import (
    CancelOrderRequest,
    CancelOrderResponse,
    CreateOrderRequest,
    ExecuteOrderResponse,
    OrderOut,
)
from src.br_order.application.service import OrderExecutionService

router = APIRouter(prefix="/orders", tags=["orders"])

_service = OrderExecutionService()


def get_order_service() -> OrderExecutionService:
    return _service


@router.post("", status_code=201)
async def create_order(
    body: CreateOrderRequest,
    request: Request,
    service: Annotated[OrderExecutionService, Depends(get_order_service)],
) -> ApiResponse:
    result = await service.execute_order(body.to_command())
    data = ExecuteOrderResponse.from_result(result)
    return success_response(data.model_dump(mode="json"), request_id_of(request))


@router.get("/{order_id}")
async def get_order(
    request: Request,
    service: Annotated[OrderExecutionService, Depends(get_order_service)],
    order_id: int = Path(..., gt=0),
) -> ApiResponse:
    order = await service.get_order_by_id(order_id)
    data = OrderOut.from_domain(order)
    return success_response(data.model_dump(mode="json"), request_id_of(request))


@router.patch("/{order_id}/cancel")
async def cancel_order(
    body: CancelOrderRequest,
    request: Request,
    service: Annotated[OrderExecutionService, Depends(get_order_service)],
    order_id: int = Path(..., gt=0),
) -> ApiResponse:
    order = await service.cancel_order(order_id, body.user_id)
    data = CancelOrderResponse(order=OrderOut.from_domain(order))
    return success_response(data.model_dump(mode="json"), request_id_of(request))
