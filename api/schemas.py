"""Pydantic request/response schemas for API endpoints.

Responses are serialized with camelCase keys.
"""

from datetime import date, datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details for HTTP APIs.

    This standardized error format provides structured, machine-readable
    error information for HTTP API responses. Extraction failures add the
    per-field ``errors`` list and the ``partialData`` extracted so far.

    See: https://www.rfc-editor.org/rfc/rfc7807
    """

    type: str = Field(..., description="URI reference identifying the problem type")
    title: str = Field(..., description="Short, human-readable summary of the problem")
    status: int = Field(..., description="HTTP status code for this problem")
    detail: Optional[str] = Field(
        None, description="Human-readable explanation specific to this occurrence"
    )
    instance: Optional[str] = Field(
        None,
        description="URI reference identifying this specific occurrence (e.g., request path)",
    )

    # Extension members (allowed by RFC 7807)
    code: str = Field(..., description="Application-specific error code")
    category: str = Field(
        ..., description="Error category (client_error, server_error, etc.)"
    )
    retryable: bool = Field(
        default=False, description="Whether the request can be retried"
    )
    trace_id: Optional[str] = Field(
        None, description="Distributed tracing ID for correlation across services"
    )
    errors: Optional[List[dict[str, Any]]] = Field(
        None, description="Extraction errors as {code, message, field?}"
    )
    partial_data: Optional[dict[str, Any]] = Field(
        None,
        alias="partialData",
        description="Fields extracted before validation rejected the record",
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "type": "/errors/INVALID_DATA",
                "title": "PDF extraction failed",
                "status": 422,
                "detail": "Dados extraídos da fatura são inválidos",
                "instance": "/pdf/extract",
                "code": "INVALID_DATA",
                "category": "client_error",
                "retryable": False,
                "trace_id": "a1b2c3d4-e5f6-7890-abcd-ef1234567890",
                "errors": [
                    {"code": "INVALID_DATA", "message": "Dados extraídos da fatura são inválidos"},
                    {
                        "code": "INVALID_SCEE_VALUE",
                        "message": "scee_value inválido",
                        "field": "scee_value",
                    },
                ],
                "partialData": {"clientNumber": "7204076116", "referenceMonth": "2024-01-01"},
            }
        },
    )


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ==============================================================================
# Extraction
# ==============================================================================


class ExtractionConfidenceResponse(CamelModel):
    field: str
    value: str
    confidence: float
    method: str


class ExtractionMetadataResponse(CamelModel):
    num_pages: int = Field(..., description="Pages in the PDF (0 when served from cache)")
    layout: str
    processing_time_ms: float = Field(..., description="0 when served from cache")


class ExtractionResponse(CamelModel):
    """Synchronous extraction result."""

    data: dict[str, Any] = Field(..., description="Extracted fields, camelCase keys")
    confidence: List[ExtractionConfidenceResponse]
    metadata: ExtractionMetadataResponse

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "data": {
                    "clientNumber": "7204076116",
                    "referenceMonth": "2024-01-01",
                    "electricityQuantity": 50,
                    "electricityValue": 47.75,
                    "sceeQuantity": 456,
                    "sceeValue": 235.42,
                    "compensatedEnergyQuantity": 456,
                    "compensatedEnergyValue": -225.42,
                    "publicLightingValue": 49.43,
                },
                "confidence": [
                    {
                        "field": "clientNumber",
                        "value": "7204076116",
                        "confidence": 1.0,
                        "method": "regex",
                    }
                ],
                "metadata": {"numPages": 2, "layout": "CEMIG", "processingTimeMs": 84.2},
            }
        },
    )


# ==============================================================================
# Invoices
# ==============================================================================


class UploadResponse(CamelModel):
    message: str
    job_id: str = Field(..., description="Correlates the background job's log lines")
    invoice_id: UUID


class InvoiceStatusResponse(CamelModel):
    id: UUID
    status: str = Field(..., description="PENDING, PROCESSING, COMPLETED or FAILED")
    error: Optional[str] = Field(None, description="Failure message when FAILED")


class InvoiceResponse(CamelModel):
    id: UUID
    status: str
    client_number: Optional[str] = None
    reference_month: Optional[date] = None
    electricity_quantity: Optional[float] = None
    electricity_value: Optional[float] = None
    scee_quantity: Optional[float] = None
    scee_value: Optional[float] = None
    compensated_energy_quantity: Optional[float] = None
    compensated_energy_value: Optional[float] = None
    public_lighting_value: Optional[float] = None
    total_consumption: Optional[float] = None
    total_value_without_gd: Optional[float] = None
    economy_gd: Optional[float] = None
    pdf_url: Optional[str] = None
    error: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class InvoiceListResponse(CamelModel):
    items: List[InvoiceResponse]
    total: int
    page: int
    limit: int


class PdfUrlResponse(CamelModel):
    url: str = Field(..., description="Presigned download URL")


class UnprocessedInvoiceResponse(CamelModel):
    name: str
    size: Optional[int] = None
    last_modified: Optional[datetime] = None


# ==============================================================================
# Dashboard
# ==============================================================================


class EnergyDataResponse(CamelModel):
    client_number: Optional[str] = None
    electricity_consumption: float = Field(..., description="Electricity + SCEE (kWh)")
    compensated_energy: float = Field(..., description="Compensated energy (kWh)")
    month: Optional[date] = None


class FinancialDataResponse(CamelModel):
    client_number: Optional[str] = None
    total_without_gd: float = Field(..., description="Electricity + SCEE + public lighting (R$)")
    gd_savings: float = Field(..., description="Distributed generation savings (R$)")
    month: Optional[date] = None


class DashboardSummaryResponse(CamelModel):
    invoice_count: int
    total_electricity_consumption: float
    total_compensated_energy: float
    total_without_gd: float
    total_gd_savings: float
    savings_percentage: float = Field(..., description="GD savings / total without GD × 100")


# ==============================================================================
# Health
# ==============================================================================


class DependencyHealth(BaseModel):
    """Connection status of one backing service."""

    status: str = Field(..., description="Connection status (connected/disconnected)")
    latency_ms: float | None = Field(
        None, description="Connection latency in milliseconds"
    )
    error: str | None = Field(None, description="Error message if disconnected")


class HealthResponse(BaseModel):
    """System health status response."""

    status: str = Field(..., description="Overall system status (healthy/unhealthy)")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    database: DependencyHealth = Field(..., description="Database connection status")
    redis: DependencyHealth = Field(..., description="Redis connection status")
