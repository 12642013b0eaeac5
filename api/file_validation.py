"""File upload validation utilities.

This module contains async validation logic for PDF uploads,
including size checks, content type verification, and magic byte detection.
"""

import logging
import os

from fastapi import UploadFile

from core.logging_utils import sanitize_filename
from extraction.core.config import ALLOWED_CONTENT_TYPES, PDF_MAX_SIZE_BYTES
from extraction.core.exceptions import PayloadTooLargeError, ValidationError
from extraction.utils.file_detection import detect_file_type_from_bytes

logger = logging.getLogger(__name__)

_MB = 1024 * 1024


def _get_file_size(file: UploadFile) -> int:
    file.file.seek(0, os.SEEK_END)
    size = file.file.tell()
    file.file.seek(0)
    return size


def _validate_file_size(size: int, max_size_bytes: int) -> None:
    if size == 0:
        raise ValidationError(
            message="File is empty (0 bytes)",
            field="file",
            details={"file_size": 0},
        )

    if size > max_size_bytes:
        raise PayloadTooLargeError(
            max_size_mb=max_size_bytes / _MB,
            actual_size_mb=size / _MB,
        )


async def validate_upload_file(
    file: UploadFile, max_size_bytes: int = PDF_MAX_SIZE_BYTES
) -> None:
    """Validate uploaded file for content type, size, and magic bytes.

    Args:
        file: FastAPI UploadFile object
        max_size_bytes: Upper size limit

    Raises:
        ValidationError: If file fails validation checks
        PayloadTooLargeError: If file exceeds size limit
    """
    if file.content_type not in ALLOWED_CONTENT_TYPES:
        raise ValidationError(
            message=f"Invalid content type: {file.content_type}",
            field="file",
            details={"allowed_types": sorted(ALLOWED_CONTENT_TYPES)},
        )

    file_size = _get_file_size(file)
    _validate_file_size(file_size, max_size_bytes)

    file.file.seek(0)
    header = file.file.read(8)
    file.file.seek(0)

    if detect_file_type_from_bytes(header) is None:
        raise ValidationError(
            message="Unsupported file type (invalid magic bytes)",
            field="file",
            details={"magic_bytes": header.hex(), "expected_types": ["pdf"]},
        )

    logger.info(
        "File validated: name=%s size=%d content_type=%s",
        sanitize_filename(file.filename),
        file_size,
        file.content_type,
    )
