"""Custom exception hierarchy for Lumi.

All application exceptions inherit from BaseError and provide structured error
information compatible with RFC 7807 Problem Details for HTTP APIs.
"""

from datetime import date
from enum import Enum
from typing import Any, Optional

from pydantic.alias_generators import to_camel

from extraction.core.errors import ErrorCode


class ErrorCategory(str, Enum):
    """Error categories for classification and monitoring."""

    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    EXTERNAL_SERVICE = "external_service"
    VALIDATION = "validation"


class BaseError(Exception):
    """Base exception for all Lumi errors.

    Attributes:
        message: Human-readable error message
        error_code: Application-specific error code
        category: Error category for classification
        http_status: HTTP status code to return
        details: Additional context (dict)
        retryable: Whether the operation can be retried
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        category: ErrorCategory,
        http_status: int,
        details: Optional[dict[str, Any]] = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.category = category
        self.http_status = http_status
        self.details = details or {}
        self.retryable = retryable

    def to_dict(self) -> dict[str, Any]:
        """Convert to RFC 7807 Problem Details format."""
        return {
            "type": f"/errors/{self.error_code}",
            "title": self.message,
            "status": self.http_status,
            "code": self.error_code,
            "detail": self.details.get("detail"),
            "category": self.category.value,
            "retryable": self.retryable,
        }


class ClientError(BaseError):
    """Base for client errors (4xx). Not retryable."""

    def __init__(self, message: str, error_code: str, **kwargs):
        super().__init__(
            message=message,
            error_code=error_code,
            category=ErrorCategory.CLIENT_ERROR,
            http_status=kwargs.pop("http_status", 400),
            retryable=False,
            **kwargs,
        )


class ValidationError(ClientError):
    """Input validation failed (422 Unprocessable Entity).

    Args:
        message: Validation error description
        field: Name of the field that failed validation
        details: Additional validation context
    """

    def __init__(self, message: str, field: str, **kwargs):
        additional_details = kwargs.pop("details", {})
        additional_details["field"] = field
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            http_status=422,
            details=additional_details,
            **kwargs,
        )


class ResourceNotFoundError(ClientError):
    """Resource not found (404).

    Args:
        resource_type: Type of resource (e.g., "Invoice", "PDF")
        resource_id: Identifier of the missing resource
    """

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            message=f"{resource_type} not found",
            error_code="RESOURCE_NOT_FOUND",
            http_status=404,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class PayloadTooLargeError(ClientError):
    """Payload too large (413).

    Args:
        max_size_mb: Maximum allowed size in MB
        actual_size_mb: Actual file size in MB
    """

    def __init__(self, max_size_mb: float, actual_size_mb: float):
        super().__init__(
            message=f"File too large: {actual_size_mb:.2f}MB (max: {max_size_mb:g}MB)",
            error_code="PAYLOAD_TOO_LARGE",
            http_status=413,
            details={"max_size_mb": max_size_mb, "actual_size_mb": actual_size_mb},
        )


class ServerError(BaseError):
    """Base for server errors (5xx). Some are retryable."""

    def __init__(self, message: str, error_code: str, **kwargs):
        super().__init__(
            message=message,
            error_code=error_code,
            category=ErrorCategory.SERVER_ERROR,
            http_status=kwargs.pop("http_status", 500),
            retryable=kwargs.pop("retryable", False),
            **kwargs,
        )


class ExternalServiceError(ServerError):
    """External service failure (502 Bad Gateway / 504 Gateway Timeout).

    Raised when external services (Redis, MinIO, PostgreSQL) fail or timeout.
    These errors are retryable as they may be transient.

    Args:
        service_name: Name of the external service
        error_type: Type of error ("timeout", "unavailable", "error")
        details: Additional error context
    """

    def __init__(self, service_name: str, error_type: str, **kwargs):
        if error_type == "timeout":
            http_status = 504
        elif error_type == "unavailable":
            http_status = 503
        else:
            http_status = 502

        additional_details = kwargs.pop("details", {})
        additional_details.update(
            {
                "service": service_name,
                "error_type": error_type,
            }
        )

        super().__init__(
            message=f"{service_name} service {error_type}",
            error_code=f"{service_name.upper()}_{error_type.upper()}",
            http_status=http_status,
            retryable=True,
            details=additional_details,
            **kwargs,
        )


class CacheError(ExternalServiceError):
    """Cache store read/write failure. Always absorbed by callers."""

    def __init__(self, operation: str, **kwargs):
        details = kwargs.pop("details", {})
        details["operation"] = operation
        super().__init__(service_name="Cache", error_type="error", details=details, **kwargs)


class StorageError(ExternalServiceError):
    """Object storage (MinIO) operation failure."""

    def __init__(self, operation: str, object_name: str, bucket: str, **kwargs):
        details = kwargs.pop("details", {})
        details.update({"operation": operation, "object_name": object_name, "bucket": bucket})
        super().__init__(service_name="Storage", error_type="error", details=details, **kwargs)


def _jsonable_record(record: dict[str, Any]) -> dict[str, Any]:
    return {
        to_camel(key): value.isoformat() if isinstance(value, date) else value
        for key, value in record.items()
    }


class PdfExtractionError(BaseError):
    """PDF extraction failed.

    Carries every failure as a ``{code, message, field?}`` entry. The first
    entry's code decides category, HTTP status and retryability.

    Args:
        errors: Error entries, see ``make_error``
        partial_data: Fields extracted before validation rejected the record
    """

    def __init__(
        self,
        errors: list[dict[str, str]],
        partial_data: Optional[dict[str, Any]] = None,
    ):
        primary = errors[0]["code"] if errors else "UNKNOWN_ERROR"
        spec = ErrorCode.get_spec(primary)
        client_side = spec.category == "client_error"
        super().__init__(
            message="PDF extraction failed",
            error_code=primary,
            category=ErrorCategory.CLIENT_ERROR if client_side else ErrorCategory.SERVER_ERROR,
            http_status=422 if client_side else 500,
            details={"detail": errors[0]["message"] if errors else None},
            retryable=spec.retryable,
        )
        self.errors = errors
        self.partial_data = partial_data

    @property
    def codes(self) -> list[str]:
        return [e["code"] for e in self.errors]

    def user_message(self) -> str:
        """Human-readable summary for the invoice status field."""
        return "; ".join(e["message"] for e in self.errors)

    def to_dict(self) -> dict[str, Any]:
        problem = super().to_dict()
        problem["errors"] = self.errors
        if self.partial_data is not None:
            problem["partialData"] = _jsonable_record(self.partial_data)
        return problem
