"""Invoice upload, listing and status endpoints."""

import logging
from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, File, Query, Request, UploadFile, status

from api.file_validation import validate_upload_file
from api.schemas import (
    InvoiceListResponse,
    InvoiceResponse,
    InvoiceStatusResponse,
    PdfUrlResponse,
    ProblemDetail,
    UnprocessedInvoiceResponse,
    UploadResponse,
)
from api.validators import (
    validate_client_number,
    validate_date_range,
    validate_object_name_security,
)
from core.dependencies import get_invoice_service
from core.logging_utils import sanitize_filename
from core.settings import pdf_settings
from extraction.core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from extraction.models.invoice import InvoiceFilters, InvoiceStatus
from services.invoice_service import InvoiceService
from services.mappers import build_invoice_response

router = APIRouter(prefix="/invoices", tags=["invoices"])
logger = logging.getLogger(__name__)

_ERROR_RESPONSES = {
    404: {"description": "Not Found", "model": ProblemDetail},
    422: {"description": "Validation Error", "model": ProblemDetail},
    503: {"description": "Service Unavailable", "model": ProblemDetail},
}


@router.post(
    "/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={
        413: {"description": "Payload Too Large", "model": ProblemDetail},
        **_ERROR_RESPONSES,
    },
)
async def upload_invoice(
    request: Request,
    background_tasks: BackgroundTasks,
    file: UploadFile = File(..., description="CEMIG bill PDF"),
    service: InvoiceService = Depends(get_invoice_service),
):
    trace_id = getattr(request.state, "trace_id", None)
    logger.info(
        "[UPLOAD] file=%s", sanitize_filename(file.filename), extra={"trace_id": trace_id}
    )

    await validate_upload_file(file, pdf_settings.PDF_MAX_SIZE)
    content = await file.read()

    result = await service.upload_invoice(
        content, file.filename or "invoice.pdf", background_tasks
    )
    return UploadResponse(**result)


@router.get("", response_model=InvoiceListResponse, responses=_ERROR_RESPONSES)
async def list_invoices(
    client_number: Optional[str] = Query(None, alias="clientNumber"),
    invoice_status: Optional[InvoiceStatus] = Query(None, alias="status"),
    month: Optional[date] = Query(None, description="Any day of the reference month"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    service: InvoiceService = Depends(get_invoice_service),
):
    validate_date_range(start_date, end_date)
    filters = InvoiceFilters(
        client_number=validate_client_number(client_number),
        status=invoice_status,
        month=month,
        start_date=start_date,
        end_date=end_date,
        page=page,
        limit=limit,
    )
    result = await service.find_all(filters)
    return InvoiceListResponse(
        items=[build_invoice_response(i) for i in result["items"]],
        total=result["total"],
        page=result["page"],
        limit=result["limit"],
    )


@router.get(
    "/unprocessed",
    response_model=List[UnprocessedInvoiceResponse],
    responses=_ERROR_RESPONSES,
)
async def list_unprocessed(service: InvoiceService = Depends(get_invoice_service)):
    objects = await service.list_unprocessed()
    return [UnprocessedInvoiceResponse(**obj) for obj in objects]


@router.post(
    "/reprocess/{object_name:path}",
    response_model=UploadResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses=_ERROR_RESPONSES,
)
async def reprocess_invoice(
    object_name: str,
    background_tasks: BackgroundTasks,
    service: InvoiceService = Depends(get_invoice_service),
):
    validate_object_name_security(object_name)
    result = await service.reprocess_unprocessed(object_name, background_tasks)
    return UploadResponse(**result)


@router.get("/{invoice_id}", response_model=InvoiceResponse, responses=_ERROR_RESPONSES)
async def get_invoice(
    invoice_id: UUID, service: InvoiceService = Depends(get_invoice_service)
):
    return build_invoice_response(await service.get_invoice(invoice_id))


@router.get(
    "/{invoice_id}/status",
    response_model=InvoiceStatusResponse,
    responses=_ERROR_RESPONSES,
)
async def get_invoice_status(
    invoice_id: UUID, service: InvoiceService = Depends(get_invoice_service)
):
    result = await service.get_status(invoice_id)
    return InvoiceStatusResponse(
        id=result["id"], status=result["status"].value, error=result["error"]
    )


@router.get("/{invoice_id}/pdf", response_model=PdfUrlResponse, responses=_ERROR_RESPONSES)
async def get_invoice_pdf(
    invoice_id: UUID, service: InvoiceService = Depends(get_invoice_service)
):
    return PdfUrlResponse(url=await service.get_pdf_url(invoice_id))
