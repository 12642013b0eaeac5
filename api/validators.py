"""Shared request validators.

Reusable checks for path and query parameters so every route applies the
same rules.
"""

from datetime import date
from typing import Optional

from extraction.core.config import CLIENT_NUMBER_DIGITS, OBJECT_NAME_MAX_LENGTH
from extraction.core.exceptions import ValidationError


def validate_object_name_security(object_name: str) -> str:
    """Validate a storage object name for traversal and length.

    Security checks:
    - Prevent directory traversal attacks (..)
    - Prevent absolute paths (/)
    - Check max length

    Raises:
        ValidationError: If the name fails security validation
    """
    if not object_name.strip():
        raise ValidationError("Object name cannot be empty", field="object_name")

    if ".." in object_name:
        raise ValidationError(
            "Object name cannot contain '..' (directory traversal)", field="object_name"
        )

    if object_name.startswith("/"):
        raise ValidationError(
            "Object name cannot start with '/' (absolute path)", field="object_name"
        )

    if len(object_name) > OBJECT_NAME_MAX_LENGTH:
        raise ValidationError(
            f"Object name exceeds maximum length of {OBJECT_NAME_MAX_LENGTH}",
            field="object_name",
        )

    return object_name


def validate_client_number(client_number: Optional[str]) -> Optional[str]:
    """Client number filters must be exactly the utility's digit count."""
    if client_number is None:
        return None
    client_number = client_number.strip()
    if not client_number.isdigit() or len(client_number) != CLIENT_NUMBER_DIGITS:
        raise ValidationError(
            f"Client number must be exactly {CLIENT_NUMBER_DIGITS} digits",
            field="clientNumber",
        )
    return client_number


def validate_date_range(start_date: Optional[date], end_date: Optional[date]) -> None:
    if start_date and end_date and start_date > end_date:
        raise ValidationError(
            "startDate must not be after endDate",
            field="startDate",
            details={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        )
