"""FastAPI dependency injection functions.

This module provides dependency injection utilities for FastAPI routes,
enabling clean separation of concerns and improved testability.
"""

from typing import Any

from fastapi import HTTPException, Request, status

from extraction.orchestrator import PdfExtractionService
from services.dashboard_service import DashboardService
from services.invoice_service import InvoiceService


def _from_state(request: Request, name: str, label: str) -> Any:
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{label} unavailable",
        )
    return value


async def get_extraction_service(request: Request) -> PdfExtractionService:
    return _from_state(request, "extraction_service", "Extraction service")


async def get_invoice_service(request: Request) -> InvoiceService:
    """Get invoice service from app state.

    Raises:
        HTTPException: 503 if the database or object storage is unavailable
    """
    return _from_state(request, "invoice_service", "Invoice service")


async def get_dashboard_service(request: Request) -> DashboardService:
    return _from_state(request, "dashboard_service", "Dashboard service")
