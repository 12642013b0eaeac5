"""Unit tests for exception hierarchy."""

from datetime import date

from extraction.core.errors import ErrorCode, make_error, message_for
from extraction.core.exceptions import (
    BaseError,
    CacheError,
    ClientError,
    ErrorCategory,
    ExternalServiceError,
    PayloadTooLargeError,
    PdfExtractionError,
    ResourceNotFoundError,
    ServerError,
    StorageError,
    ValidationError,
)


class TestBaseError:
    """Tests for BaseError class."""

    def test_base_error_creation(self):
        """Test BaseError can be created with all parameters."""
        error = BaseError(
            message="Test error",
            error_code="TEST_ERROR",
            category=ErrorCategory.CLIENT_ERROR,
            http_status=400,
            details={"detail": "Additional info", "field": "test"},
            retryable=False,
        )

        assert str(error) == "Test error"
        assert error.error_code == "TEST_ERROR"
        assert error.http_status == 400
        assert error.details == {"detail": "Additional info", "field": "test"}
        assert error.retryable is False

    def test_base_error_to_dict(self):
        """Test BaseError converts to RFC 7807 format."""
        error = BaseError(
            message="Test error",
            error_code="TEST_ERROR",
            category=ErrorCategory.CLIENT_ERROR,
            http_status=400,
            details={"detail": "Additional context"},
        )

        result = error.to_dict()

        assert result["type"] == "/errors/TEST_ERROR"
        assert result["title"] == "Test error"
        assert result["status"] == 400
        assert result["code"] == "TEST_ERROR"
        assert result["category"] == "client_error"
        assert result["detail"] == "Additional context"
        assert result["retryable"] is False


class TestClientErrors:
    """Tests for ClientError and subclasses."""

    def test_client_error_custom_status(self):
        error = ClientError(message="Not found", error_code="NOT_FOUND", http_status=404)
        assert error.http_status == 404
        assert error.category == ErrorCategory.CLIENT_ERROR

    def test_validation_error(self):
        """Test ValidationError records the offending field."""
        error = ValidationError(
            message="Client number must be exactly 10 digits",
            field="clientNumber",
            details={"received": "123"},
        )

        assert error.http_status == 422
        assert error.error_code == "VALIDATION_ERROR"
        assert error.details == {"received": "123", "field": "clientNumber"}

    def test_resource_not_found(self):
        error = ResourceNotFoundError(resource_type="Invoice", resource_id="42")
        assert error.http_status == 404
        assert error.message == "Invoice not found"
        assert error.details["resource_id"] == "42"

    def test_payload_too_large(self):
        error = PayloadTooLargeError(max_size_mb=5, actual_size_mb=7.25)
        assert error.http_status == 413
        assert "7.25MB" in error.message
        assert "max: 5MB" in error.message


class TestServerErrors:
    """Tests for ServerError and external service failures."""

    def test_server_error_defaults(self):
        error = ServerError(message="Internal error", error_code="INTERNAL_ERROR")
        assert error.http_status == 500
        assert error.retryable is False

    def test_external_service_timeout(self):
        """Test ExternalServiceError with timeout."""
        error = ExternalServiceError(
            service_name="Storage", error_type="timeout", details={"timeout_seconds": 30}
        )

        assert error.http_status == 504
        assert error.error_code == "STORAGE_TIMEOUT"
        assert error.retryable is True
        assert error.details["timeout_seconds"] == 30

    def test_external_service_unavailable(self):
        error = ExternalServiceError(service_name="Database", error_type="unavailable")
        assert error.http_status == 503
        assert error.error_code == "DATABASE_UNAVAILABLE"

    def test_cache_error(self):
        error = CacheError("get", details={"key": "pdf:abc"})
        assert isinstance(error, ExternalServiceError)
        assert error.error_code == "CACHE_ERROR"
        assert error.details["operation"] == "get"
        assert error.details["key"] == "pdf:abc"

    def test_storage_error(self):
        error = StorageError("upload", "bill.pdf", "invoices-processed")
        assert error.http_status == 502
        assert error.details["object_name"] == "bill.pdf"
        assert error.details["bucket"] == "invoices-processed"


class TestPdfExtractionError:
    """Tests for the extraction failure carrying per-field errors."""

    def test_client_side_code(self):
        """Test input errors are 422 and not retryable."""
        error = PdfExtractionError([make_error("PDF_EMPTY")])
        assert error.error_code == "PDF_EMPTY"
        assert error.http_status == 422
        assert error.category == ErrorCategory.CLIENT_ERROR
        assert error.retryable is False

    def test_unknown_error_is_retryable(self):
        error = PdfExtractionError([make_error("UNKNOWN_ERROR")])
        assert error.http_status == 500
        assert error.retryable is True

    def test_to_dict_includes_errors_and_partial_data(self):
        errors = [
            make_error("INVALID_DATA"),
            make_error("INVALID_SCEE_VALUE", "scee_value inválido", field="scee_value"),
        ]
        error = PdfExtractionError(
            errors,
            partial_data={"client_number": "7204076116", "reference_month": date(2024, 1, 1)},
        )

        result = error.to_dict()

        assert result["code"] == "INVALID_DATA"
        assert result["detail"] == message_for("INVALID_DATA")
        assert result["errors"] == errors
        assert result["partialData"] == {
            "clientNumber": "7204076116",
            "referenceMonth": "2024-01-01",
        }

    def test_user_message_joins_messages(self):
        error = PdfExtractionError(
            [make_error("INVALID_DATA"), make_error("INVALID_SCEE_VALUE", "scee_value inválido")]
        )
        assert error.user_message() == (
            "Dados extraídos da fatura são inválidos; scee_value inválido"
        )
        assert error.codes == ["INVALID_DATA", "INVALID_SCEE_VALUE"]

    def test_no_partial_data_key_when_absent(self):
        assert "partialData" not in PdfExtractionError([make_error("PDF_EMPTY")]).to_dict()


class TestErrorCode:
    """Tests for the error code registry."""

    def test_registered_code(self):
        spec = ErrorCode.get_spec("LAYOUT_NOT_FOUND")
        assert spec.category == "client_error"
        assert spec.retryable is False

    def test_field_codes_are_client_errors(self):
        """Test unregistered INVALID_<FIELD> codes are validation failures."""
        spec = ErrorCode.get_spec("INVALID_CLIENT_NUMBER")
        assert spec.category == "client_error"
        assert spec.retryable is False

    def test_make_error_with_field(self):
        assert make_error("INVALID_SCEE_VALUE", "x", field="scee_value") == {
            "code": "INVALID_SCEE_VALUE",
            "message": "x",
            "field": "scee_value",
        }

    def test_make_error_default_message(self):
        assert make_error("PDF_EMPTY")["message"] == "PDF não contém texto extraível"
