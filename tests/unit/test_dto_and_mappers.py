"""Unit tests for record serialization and API response mapping."""

import json
import logging
import uuid
from datetime import date

from core.logging_utils import sanitize_client_number, sanitize_filename
from extraction.core.logging_config import StructuredFormatter
from extraction.models.dto import (
    CachedExtraction,
    ExtractionConfidence,
    ExtractionMetadata,
    ExtractionResult,
    deserialize_record,
    serialize_record,
)
from extraction.models.invoice import Invoice, InvoiceStatus
from services.mappers import build_extraction_response, build_invoice_response

RECORD = {
    "client_number": "7204076116",
    "reference_month": date(2024, 1, 1),
    "scee_value": 235.42,
}


class TestRecordSerialization:
    """Tests for camelCase/ISO record conversion."""

    def test_serialize(self):
        assert serialize_record(RECORD) == {
            "clientNumber": "7204076116",
            "referenceMonth": "2024-01-01",
            "sceeValue": 235.42,
        }

    def test_deserialize_restores_dates_only_for_date_fields(self):
        payload = serialize_record(RECORD)
        assert deserialize_record(payload, ["reference_month"]) == RECORD
        assert deserialize_record(payload)["reference_month"] == "2024-01-01"

    def test_cache_payload_is_json(self):
        """Test the cache payload survives json.dumps and back."""
        cached = CachedExtraction(
            hash="ab12", result=RECORD, confidence=ExtractionConfidence.for_record(RECORD)
        )
        payload = json.loads(json.dumps(cached.to_cache_payload()))

        restored = CachedExtraction.from_cache_payload(payload, ["reference_month"])

        assert restored.result == RECORD
        assert restored.confidence == cached.confidence
        assert payload["confidence"][0]["field"] == "clientNumber"


class TestMappers:
    """Tests for wire-shape mapping."""

    def test_extraction_response(self):
        result = ExtractionResult(
            data=RECORD,
            confidence=ExtractionConfidence.for_record(RECORD),
            metadata=ExtractionMetadata(num_pages=1, layout="CEMIG", processing_time_ms=3.5),
        )

        body = build_extraction_response(result).model_dump(by_alias=True)

        assert body["data"]["referenceMonth"] == "2024-01-01"
        assert body["confidence"][1]["field"] == "referenceMonth"
        assert body["metadata"] == {"numPages": 1, "layout": "CEMIG", "processingTimeMs": 3.5}

    def test_pending_invoice_has_no_totals(self):
        """Test derived totals are only reported for completed invoices."""
        response = build_invoice_response(Invoice(id=uuid.uuid4()))
        assert response.status == "PENDING"
        assert response.total_consumption is None
        assert response.economy_gd is None

    def test_completed_invoice_totals(self):
        invoice = Invoice(
            id=uuid.uuid4(),
            status=InvoiceStatus.COMPLETED,
            electricity_value=47.75,
            scee_value=235.42,
            public_lighting_value=49.43,
            compensated_energy_value=-225.42,
        )
        response = build_invoice_response(invoice)
        assert round(response.total_value_without_gd, 2) == 332.6
        assert response.economy_gd == 225.42


class TestLoggingHelpers:
    """Tests for PII masking and the JSON formatter."""

    def test_sanitize_client_number(self):
        assert sanitize_client_number("7204076116") == "720***16"
        assert sanitize_client_number(None) == "***"

    def test_sanitize_filename(self):
        assert sanitize_filename("a\nb.pdf") == "a b.pdf"
        assert sanitize_filename("x" * 100, max_length=10) == "xxxxxxx..."
        assert sanitize_filename(None) == "N/A"

    def test_structured_formatter_includes_extras(self):
        record = logging.LogRecord(
            "extraction.orchestrator", logging.INFO, __file__, 1, "Cache hit", None, None
        )
        record.content_hash = "ab12"
        record.layout = "CEMIG"

        line = json.loads(StructuredFormatter().format(record))

        assert line["message"] == "Cache hit"
        assert line["content_hash"] == "ab12"
        assert line["layout"] == "CEMIG"
        assert line["level"] == "INFO"
