"""Instruments REST API — 1 endpoint."""

from fastapi import APIRouter, Query, Request

from config.settings import settings
from src.br_common.response import ApiResponse, request_id_of, success_response
from src.br_market.application.service import InstrumentService

router = APIRouter(prefix="/instruments", tags=["instruments"])

_service = InstrumentService(max_results=settings.MAX_SEARCH_RESULTS)


@router.get("/search")
async def search_instruments(
    request: Request,
    q: str = Query(..., min_length=1, max_length=100, description="Ticker or name fragment"),
) -> ApiResponse:
    data = await _service.search(q)
    return success_response(data.model_dump(mode="json"), request_id_of(request))
