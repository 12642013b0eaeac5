"""Synchronous PDF extraction endpoint."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile

from api.file_validation import validate_upload_file
from api.schemas import ExtractionResponse, ProblemDetail
from core.dependencies import get_extraction_service
from core.logging_utils import sanitize_client_number, sanitize_filename
from core.settings import pdf_settings
from extraction.orchestrator import PdfExtractionService
from services.mappers import build_extraction_response

router = APIRouter(prefix="/pdf", tags=["pdf"])
logger = logging.getLogger(__name__)


@router.post(
    "/extract",
    response_model=ExtractionResponse,
    responses={
        413: {"description": "Payload Too Large", "model": ProblemDetail},
        422: {"description": "Extraction or Validation Error", "model": ProblemDetail},
    },
)
async def extract_pdf(
    request: Request,
    file: UploadFile = File(..., description="Bill PDF"),
    layout: Optional[str] = Query(None, description="Layout name (default from settings)"),
    use_cache: bool = Query(True, alias="useCache"),
    validate_result: bool = Query(True, alias="validate"),
    service: PdfExtractionService = Depends(get_extraction_service),
):
    trace_id = getattr(request.state, "trace_id", None)
    await validate_upload_file(file, pdf_settings.PDF_MAX_SIZE)
    content = await file.read()

    result = await service.extract_data(
        content,
        layout or pdf_settings.DEFAULT_LAYOUT,
        use_cache=use_cache,
        validate_result=validate_result,
    )

    logger.info(
        "[EXTRACT] file=%s client=%s fields=%d",
        sanitize_filename(file.filename),
        sanitize_client_number(result.data.get("client_number")),
        len(result.data),
        extra={"trace_id": trace_id, "layout": result.metadata.layout},
    )
    return build_extraction_response(result)
