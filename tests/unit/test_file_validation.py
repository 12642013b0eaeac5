"""Unit tests for PDF upload validation."""

import io
from datetime import date

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from api.file_validation import validate_upload_file
from api.validators import (
    validate_client_number,
    validate_date_range,
    validate_object_name_security,
)
from extraction.core.exceptions import PayloadTooLargeError, ValidationError
from extraction.utils.file_detection import detect_file_type_from_bytes


def _upload(content: bytes, content_type: str = "application/pdf", filename: str = "fatura.pdf"):
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


class TestValidateUploadFile:
    """Tests for validate_upload_file function."""

    @pytest.mark.asyncio
    async def test_valid_pdf_file(self):
        """Test valid PDF file passes validation."""
        file = _upload(b"%PDF-1.4 " + b"x" * 100)
        await validate_upload_file(file)
        assert file.file.tell() == 0

    @pytest.mark.asyncio
    async def test_wrong_content_type(self):
        """Test non-PDF content types are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            await validate_upload_file(_upload(b"%PDF-1.4", content_type="image/png"))
        assert exc_info.value.details["field"] == "file"
        assert exc_info.value.details["allowed_types"] == ["application/pdf"]

    @pytest.mark.asyncio
    async def test_empty_file(self):
        with pytest.raises(ValidationError) as exc_info:
            await validate_upload_file(_upload(b""))
        assert exc_info.value.details["file_size"] == 0

    @pytest.mark.asyncio
    async def test_too_large(self):
        """Test files over the limit raise 413."""
        with pytest.raises(PayloadTooLargeError) as exc_info:
            await validate_upload_file(_upload(b"%PDF-1.4" + b"x" * 100), max_size_bytes=50)
        assert exc_info.value.http_status == 413

    @pytest.mark.asyncio
    async def test_invalid_magic_bytes(self):
        """Test a declared PDF that is not a PDF is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            await validate_upload_file(_upload(b"GIF89a not a pdf"))
        assert exc_info.value.details["expected_types"] == ["pdf"]


class TestFileDetection:
    """Tests for magic byte detection."""

    def test_pdf_detected(self):
        assert detect_file_type_from_bytes(b"%PDF-1.7") == ("pdf", "application/pdf")

    def test_other_formats_rejected(self):
        assert detect_file_type_from_bytes(b"\x89PNG\r\n\x1a\n") is None


class TestRequestValidators:
    """Tests for shared query and path validators."""

    def test_client_number_ok(self):
        assert validate_client_number(" 7204076116 ") == "7204076116"
        assert validate_client_number(None) is None

    @pytest.mark.parametrize("value", ["720407611", "72040761160", "72040A6116"])
    def test_client_number_rejected(self, value):
        with pytest.raises(ValidationError) as exc_info:
            validate_client_number(value)
        assert exc_info.value.details["field"] == "clientNumber"

    def test_date_range(self):
        validate_date_range(date(2024, 1, 1), date(2024, 1, 1))
        validate_date_range(None, date(2024, 1, 1))
        with pytest.raises(ValidationError):
            validate_date_range(date(2024, 2, 1), date(2024, 1, 1))

    @pytest.mark.parametrize("name", ["../etc/passwd", "/abs.pdf", " ", "a" * 1025])
    def test_object_name_rejected(self, name):
        with pytest.raises(ValidationError):
            validate_object_name_security(name)

    def test_object_name_ok(self):
        assert validate_object_name_security("1700000000000-fatura.pdf") == (
            "1700000000000-fatura.pdf"
        )
