"""
Field-level validation of extracted records.

Checks presence of required fields and type of numeric fields, returning
every problem found. A record with any error is rejected as a whole.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from extraction.core.errors import make_error

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[dict[str, str]] = field(default_factory=list)
    data: Optional[dict[str, Any]] = None


def field_error_code(field_name: str) -> str:
    return f"INVALID_{field_name.upper()}"


def is_number(value: Any) -> bool:
    """True for int/float values that are not NaN (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def _field_error(field_name: str, value: Any) -> dict[str, str]:
    logger.warning(f"{field_name} inválido: {value!r}")
    return make_error(
        field_error_code(field_name),
        message=f"{field_name} inválido",
        field=field_name,
    )


def validate_extracted_data(
    data: dict[str, Any],
    required_fields: Iterable[str],
    numeric_fields: Iterable[str],
) -> ValidationResult:
    """
    Validate a record against required and numeric field lists.

    Args:
      data: Record to check (missing keys count as missing fields).
      required_fields: Names that must be present and truthy.
      numeric_fields: Names that must hold a non-NaN int or float.

    Returns:
      ``ValidationResult``; ``data`` is set only when the record is valid.
    """
    errors: list[dict[str, str]] = []

    for name in required_fields:
        value = data.get(name)
        if not value:
            errors.append(_field_error(name, value))

    for name in numeric_fields:
        value = data.get(name)
        if not is_number(value):
            errors.append(_field_error(name, value))

    if errors:
        logger.warning(f"Validação falhou com {len(errors)} erros")
        return ValidationResult(is_valid=False, errors=errors, data=None)

    return ValidationResult(is_valid=True, errors=[], data=data)
