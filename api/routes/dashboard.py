"""Dashboard aggregation endpoints."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from api.schemas import (
    DashboardSummaryResponse,
    EnergyDataResponse,
    FinancialDataResponse,
    ProblemDetail,
)
from api.validators import validate_client_number, validate_date_range
from core.dependencies import get_dashboard_service
from services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

_ERROR_RESPONSES = {
    422: {"description": "Validation Error", "model": ProblemDetail},
    503: {"description": "Service Unavailable", "model": ProblemDetail},
}


class DashboardFilters:
    """Shared query parameters for every dashboard endpoint."""

    def __init__(
        self,
        client_number: Optional[str] = Query(None, alias="clientNumber"),
        start_date: Optional[date] = Query(None, alias="startDate"),
        end_date: Optional[date] = Query(None, alias="endDate"),
    ):
        validate_date_range(start_date, end_date)
        self.client_number = validate_client_number(client_number)
        self.start_date = start_date
        self.end_date = end_date


@router.get("/energy", response_model=List[EnergyDataResponse], responses=_ERROR_RESPONSES)
async def get_energy_data(
    filters: DashboardFilters = Depends(),
    service: DashboardService = Depends(get_dashboard_service),
):
    items = await service.get_energy_data(
        filters.client_number, filters.start_date, filters.end_date
    )
    return [EnergyDataResponse(**item) for item in items]


@router.get(
    "/financial", response_model=List[FinancialDataResponse], responses=_ERROR_RESPONSES
)
async def get_financial_data(
    filters: DashboardFilters = Depends(),
    service: DashboardService = Depends(get_dashboard_service),
):
    items = await service.get_financial_data(
        filters.client_number, filters.start_date, filters.end_date
    )
    return [FinancialDataResponse(**item) for item in items]


@router.get("/summary", response_model=DashboardSummaryResponse, responses=_ERROR_RESPONSES)
async def get_summary(
    filters: DashboardFilters = Depends(),
    service: DashboardService = Depends(get_dashboard_service),
):
    summary = await service.get_summary(
        filters.client_number, filters.start_date, filters.end_date
    )
    return DashboardSummaryResponse(**summary)
