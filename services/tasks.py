import asyncio
import logging
import uuid
from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import BackgroundTasks

from extraction.core.errors import message_for
from extraction.core.exceptions import (
    ExternalServiceError,
    PdfExtractionError,
    ResourceNotFoundError,
)
from extraction.models.invoice import InvoiceStatus

if TYPE_CHECKING:
    from extraction.database.invoice_repository import InvoiceRepository
    from extraction.orchestrator import PdfExtractionService
    from services.storage import PdfStorage

logger = logging.getLogger(__name__)


# ==============================================================================
# Invoice Processing Job
# ==============================================================================


async def _mark_failed(
    repository: "InvoiceRepository", invoice_id: UUID, message: str, job_id: str
) -> None:
    try:
        await repository.update_status(invoice_id, InvoiceStatus.FAILED, error=message)
    except Exception as e:
        logger.critical(
            f"🚨 CRITICAL: Failed to mark invoice FAILED: {e}. "
            f"MANUAL INTERVENTION REQUIRED.",
            extra={"invoice_id": str(invoice_id), "job_id": job_id},
            exc_info=True,
        )


async def process_invoice_job(
    invoice_id: UUID,
    object_key: str,
    layout_name: str,
    extraction_service: "PdfExtractionService",
    repository: "InvoiceRepository",
    storage: "PdfStorage",
    max_attempts: int = 3,
    backoff_seconds: float = 1.0,
    job_id: str | None = None,
    refresh_cache: bool = False,
) -> bool:
    """Download, extract and persist one invoice PDF.

    Status goes PENDING → PROCESSING → COMPLETED, or FAILED with a readable
    message. Only retryable failures (unknown errors, storage outages) are
    attempted again, with exponential backoff. Never raises: it runs as a
    background task with nobody left to catch.

    Args:
        invoice_id: Invoice row to fill
        object_key: PDF object name in the processed bucket
        layout_name: Layout to extract with
        extraction_service: Orchestrator
        repository: Invoice persistence
        storage: PDF object storage
        max_attempts: Total attempts, first one included
        backoff_seconds: Delay before the second attempt, doubled after each
        job_id: Correlation ID for log lines, generated when omitted
        refresh_cache: Drop the cached extraction of the PDF before the first attempt

    Returns:
        True if the invoice was completed
    """
    job_id = job_id or str(uuid.uuid4())
    log_extra = {"invoice_id": str(invoice_id), "job_id": job_id}

    try:
        await repository.update_status(invoice_id, InvoiceStatus.PROCESSING)
    except Exception as e:
        logger.error(f"Could not mark invoice PROCESSING: {e}", extra=log_extra, exc_info=True)

    for attempt in range(1, max_attempts + 1):
        try:
            pdf_bytes = await storage.download_pdf(object_key)
            if refresh_cache:
                await extraction_service.invalidate_cache(pdf_bytes)
                refresh_cache = False
            result = await extraction_service.extract_data(
                pdf_bytes, layout_name, use_cache=True, validate_result=True
            )
            await repository.complete(invoice_id, result.data)
            logger.info(
                f"✅ Invoice processed on attempt {attempt}",
                extra={**log_extra, "attempt": attempt},
            )
            return True

        except PdfExtractionError as e:
            failure, retryable = e.user_message(), e.retryable
            logger.warning(
                f"Extraction failed ({', '.join(e.codes)}) on attempt {attempt}/{max_attempts}",
                extra={**log_extra, "attempt": attempt, "error_code": e.error_code},
            )
        except ResourceNotFoundError as e:
            failure, retryable = f"PDF não encontrado: {object_key}", False
            logger.error(f"{e.message}: {object_key}", extra=log_extra)
        except ExternalServiceError as e:
            failure, retryable = message_for("UNKNOWN_ERROR"), e.retryable
            logger.warning(
                f"{e.message} on attempt {attempt}/{max_attempts}",
                extra={**log_extra, "attempt": attempt, "error_code": e.error_code},
            )
        except Exception as e:
            failure, retryable = message_for("UNKNOWN_ERROR"), True
            logger.error(
                f"Unexpected job error on attempt {attempt}/{max_attempts}: {e}",
                extra={**log_extra, "attempt": attempt},
                exc_info=True,
            )

        if not retryable or attempt == max_attempts:
            await _mark_failed(repository, invoice_id, failure, job_id)
            logger.error(f"❌ Invoice failed: {failure}", extra=log_extra)
            return False

        backoff = backoff_seconds * (2 ** (attempt - 1))
        logger.info(f"Retrying invoice job in {backoff}s", extra=log_extra)
        await asyncio.sleep(backoff)

    return False


# ==============================================================================
# Enqueueing
# ==============================================================================


def enqueue_invoice_job(
    background_tasks: BackgroundTasks,
    invoice_id: UUID,
    object_key: str,
    layout_name: str,
    extraction_service: "PdfExtractionService",
    repository: "InvoiceRepository",
    storage: "PdfStorage",
    max_attempts: int = 3,
    backoff_seconds: float = 1.0,
    refresh_cache: bool = False,
) -> str:
    """Schedule ``process_invoice_job`` after the response is sent.

    Returns:
        Job ID used to correlate the job's log lines
    """
    job_id = str(uuid.uuid4())
    background_tasks.add_task(
        process_invoice_job,
        invoice_id,
        object_key,
        layout_name,
        extraction_service,
        repository,
        storage,
        max_attempts,
        backoff_seconds,
        job_id,
        refresh_cache=refresh_cache,
    )
    logger.info(
        f"Invoice job queued for {object_key}",
        extra={"invoice_id": str(invoice_id), "job_id": job_id},
    )
    return job_id
