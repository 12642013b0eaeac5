"""Response mapping utilities for API endpoints."""

from api.schemas import (
    ExtractionConfidenceResponse,
    ExtractionMetadataResponse,
    ExtractionResponse,
    InvoiceResponse,
)
from extraction.models.dto import ExtractionResult, serialize_record
from extraction.models.invoice import Invoice, InvoiceStatus
from pydantic.alias_generators import to_camel


def build_extraction_response(result: ExtractionResult) -> ExtractionResponse:
    """Map an orchestrator result to the camelCase wire shape."""
    return ExtractionResponse(
        data=serialize_record(result.data),
        confidence=[
            ExtractionConfidenceResponse(
                field=to_camel(c.field),
                value=c.value,
                confidence=c.confidence,
                method=c.method,
            )
            for c in result.confidence
        ],
        metadata=ExtractionMetadataResponse(
            num_pages=result.metadata.num_pages,
            layout=result.metadata.layout,
            processing_time_ms=result.metadata.processing_time_ms,
        ),
    )


def build_invoice_response(invoice: Invoice) -> InvoiceResponse:
    completed = invoice.status is InvoiceStatus.COMPLETED
    return InvoiceResponse(
        **invoice.model_dump(exclude={"status"}),
        status=invoice.status.value,
        total_consumption=invoice.total_consumption if completed else None,
        total_value_without_gd=invoice.total_value_without_gd if completed else None,
        economy_gd=invoice.economy_gd if completed else None,
    )
