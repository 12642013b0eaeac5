"""Invoice use cases behind the /invoices routes."""

import logging
from typing import Any
from uuid import UUID

from fastapi import BackgroundTasks

from extraction.core.exceptions import ResourceNotFoundError
from extraction.database.invoice_repository import InvoiceRepository
from extraction.models.invoice import Invoice, InvoiceFilters
from extraction.orchestrator import PdfExtractionService
from services.storage import PdfStorage
from services.tasks import enqueue_invoice_job

logger = logging.getLogger(__name__)


class InvoiceService:
    """
    Stores uploaded bills, tracks their invoice rows and schedules extraction.

    Args:
        repository: Invoice persistence
        storage: PDF object storage
        extraction_service: Orchestrator used by the background job
        layout_name: Layout applied to every upload
        job_max_attempts: Attempts per job, first one included
        job_backoff_seconds: First retry delay, doubled after each attempt
        pdf_url_expires_seconds: Lifetime of presigned download URLs
    """

    def __init__(
        self,
        repository: InvoiceRepository,
        storage: PdfStorage,
        extraction_service: PdfExtractionService,
        layout_name: str,
        job_max_attempts: int = 3,
        job_backoff_seconds: float = 1.0,
        pdf_url_expires_seconds: int = 3600,
    ):
        self.repository = repository
        self.storage = storage
        self.extraction_service = extraction_service
        self.layout_name = layout_name
        self.job_max_attempts = job_max_attempts
        self.job_backoff_seconds = job_backoff_seconds
        self.pdf_url_expires_seconds = pdf_url_expires_seconds

    def _enqueue(
        self,
        background_tasks: BackgroundTasks,
        invoice: Invoice,
        object_key: str,
        refresh_cache: bool = False,
    ) -> str:
        return enqueue_invoice_job(
            background_tasks,
            invoice.id,
            object_key,
            self.layout_name,
            self.extraction_service,
            self.repository,
            self.storage,
            self.job_max_attempts,
            self.job_backoff_seconds,
            refresh_cache=refresh_cache,
        )

    async def upload_invoice(
        self, pdf_bytes: bytes, filename: str, background_tasks: BackgroundTasks
    ) -> dict[str, Any]:
        object_key = await self.storage.upload_pdf(
            pdf_bytes, filename, self.storage.processed_bucket
        )
        invoice = await self.repository.create(pdf_url=object_key)
        job_id = self._enqueue(background_tasks, invoice, object_key)
        return {
            "message": "Fatura enviada para processamento",
            "job_id": job_id,
            "invoice_id": invoice.id,
        }

    async def reprocess_unprocessed(
        self, object_name: str, background_tasks: BackgroundTasks
    ) -> dict[str, Any]:
        """Move an incoming-bucket PDF to the processed bucket and queue a fresh extraction."""
        object_key = await self.storage.move_pdf(
            object_name, self.storage.incoming_bucket, self.storage.processed_bucket
        )
        invoice = await self.repository.create(pdf_url=object_key)
        job_id = self._enqueue(background_tasks, invoice, object_key, refresh_cache=True)
        return {
            "message": "Fatura enviada para reprocessamento",
            "job_id": job_id,
            "invoice_id": invoice.id,
        }

    async def list_unprocessed(self) -> list[dict[str, Any]]:
        return await self.storage.list_pdfs(self.storage.incoming_bucket)

    async def get_invoice(self, invoice_id: UUID) -> Invoice:
        invoice = await self.repository.find_by_id(invoice_id)
        if invoice is None:
            raise ResourceNotFoundError("Invoice", str(invoice_id))
        return invoice

    async def get_status(self, invoice_id: UUID) -> dict[str, Any]:
        invoice = await self.get_invoice(invoice_id)
        return {"id": invoice.id, "status": invoice.status, "error": invoice.error}

    async def find_all(self, filters: InvoiceFilters) -> dict[str, Any]:
        invoices, total = await self.repository.find_all(filters)
        return {
            "items": invoices,
            "total": total,
            "page": filters.page,
            "limit": filters.limit,
        }

    async def get_pdf_url(self, invoice_id: UUID) -> str:
        invoice = await self.get_invoice(invoice_id)
        if not invoice.pdf_url:
            raise ResourceNotFoundError("PDF", str(invoice_id))
        return await self.storage.get_pdf_url(
            invoice.pdf_url, self.storage.processed_bucket, self.pdf_url_expires_seconds
        )
