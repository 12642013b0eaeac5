"""
Centralized error code registry with specifications.

Provides single source of truth for extraction error codes, including the
Portuguese messages shown to end users, error categories (client/server),
and retryability flags used by the invoice processing job.
"""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class ErrorSpec:
    """Specification for a single error type."""

    code: str
    message_pt: str  # Portuguese message for UI
    category: str  # "client_error" or "server_error"
    retryable: bool  # True if the job can be retried


class ErrorCode(Enum):
    """Centralized error code registry.

    Usage:
        error_spec = ErrorCode.get_spec("PDF_PARSE_ERROR")
        print(error_spec.message_pt, error_spec.category, error_spec.retryable)
    """

    # ========================================
    # INPUT ERRORS (not retryable)
    # ========================================
    INVALID_BUFFER = ErrorSpec(
        "INVALID_BUFFER",
        "O buffer fornecido não é válido",
        "client_error",
        False,
    )
    LAYOUT_NOT_FOUND = ErrorSpec(
        "LAYOUT_NOT_FOUND",
        "Layout de fatura não encontrado",
        "client_error",
        False,
    )

    # ========================================
    # CONVERSION ERRORS (not retryable, same bytes fail the same way)
    # ========================================
    PDF_PARSE_ERROR = ErrorSpec(
        "PDF_PARSE_ERROR",
        "Erro ao processar o arquivo PDF",
        "client_error",
        False,
    )
    PDF_EMPTY = ErrorSpec(
        "PDF_EMPTY",
        "PDF não contém texto extraível",
        "client_error",
        False,
    )

    # ========================================
    # EXTRACTION VALIDATION ERRORS
    # ========================================
    INVALID_DATA = ErrorSpec(
        "INVALID_DATA",
        "Dados extraídos da fatura são inválidos",
        "client_error",
        False,
    )

    # ========================================
    # FALLBACK
    # ========================================
    UNKNOWN_ERROR = ErrorSpec(
        "UNKNOWN_ERROR",
        "Erro desconhecido",
        "server_error",
        True,
    )

    @classmethod
    def get_spec(cls, code: str) -> ErrorSpec:
        """Get error specification by code string.

        Per-field ``INVALID_<FIELD>`` codes are validation failures and share
        the INVALID_DATA category. Unregistered codes get a generic spec.
        """
        for error in cls:
            if error.value.code == code:
                return error.value
        if code.startswith("INVALID_"):
            return ErrorSpec(code, f"Campo inválido: {code[8:].lower()}", "client_error", False)
        return ErrorSpec(code, f"Erro: {code}", "server_error", False)


def message_for(code: str) -> str:
    """Get Portuguese message for error code."""
    return ErrorCode.get_spec(code).message_pt


def make_error(
    code: str, message: str | None = None, field: str | None = None
) -> dict[str, str]:
    """Create error dict with code, message and (optionally) field."""
    error = {"code": code, "message": message or message_for(code)}
    if field is not None:
        error["field"] = field
    return error
