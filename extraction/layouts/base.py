"""
Layout abstraction: a named bundle of field extractors for one bill format.

Each field owns an ordered chain of regular expressions, most specific first.
The first pattern that matches wins; later patterns cover alternate
phrasings found in real bill variants.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Optional, Sequence

from extraction.processors.validator import (
    field_error_code,
    validate_extracted_data,
)
from extraction.core.errors import make_error
from extraction.utils.normalizers import (
    normalize_whitespace,
    parse_decimal,
    parse_month_year,
)

logger = logging.getLogger(__name__)


class FieldKind(str, Enum):
    TEXT = "text"
    INTEGER = "integer"
    DECIMAL = "decimal"
    NEGATED_DECIMAL = "negated_decimal"
    MONTH_YEAR = "month_year"


NUMERIC_KINDS = frozenset({FieldKind.INTEGER, FieldKind.DECIMAL, FieldKind.NEGATED_DECIMAL})


def compile_patterns(*sources: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(source, re.IGNORECASE) for source in sources)


def find_first_match(
    text: str, patterns: Sequence[re.Pattern[str]]
) -> Optional[re.Match[str]]:
    """
    Return the first match of ``patterns`` over ``text``.

    Every pattern is tried against the whitespace-normalized text before any
    pattern is tried against the raw text.
    """
    normalized = normalize_whitespace(text)
    for candidate in (normalized, text):
        for pattern in patterns:
            match = pattern.search(candidate)
            if match:
                return match
    return None


def _parse_integer(raw: str) -> int | float:
    value = parse_decimal(raw)
    return int(value) if value.is_integer() else value


@dataclass(frozen=True)
class ExtractionField:
    """One named invoice attribute with its pattern chain and parser."""

    name: str
    patterns: tuple[re.Pattern[str], ...]
    kind: FieldKind = FieldKind.TEXT

    def parse(self, match: re.Match[str]) -> Any:
        """Turn a match into a typed value; None means the field is absent."""
        if self.kind is FieldKind.MONTH_YEAR:
            return parse_month_year(match.group(1), match.group(2))
        raw = match.group(1)
        if self.kind is FieldKind.INTEGER:
            return _parse_integer(raw)
        if self.kind is FieldKind.DECIMAL:
            return parse_decimal(raw)
        if self.kind is FieldKind.NEGATED_DECIMAL:
            # Bills print the credit either signed or unsigned; stored negative.
            return -abs(parse_decimal(raw))
        return raw.strip()

    def extract(self, text: str) -> Any:
        match = find_first_match(text, self.patterns)
        if match is None:
            return None
        return self.parse(match)


@dataclass(frozen=True)
class Layout:
    """Field extraction and validation rules for one bill format."""

    name: str
    version: str
    fields: tuple[ExtractionField, ...]
    format_rules: dict[str, re.Pattern[str]] = field(default_factory=dict)

    @property
    def patterns(self) -> dict[str, tuple[re.Pattern[str], ...]]:
        return {f.name: f.patterns for f in self.fields}

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    @property
    def date_fields(self) -> list[str]:
        return [f.name for f in self.fields if f.kind is FieldKind.MONTH_YEAR]

    @property
    def numeric_fields(self) -> list[str]:
        return [f.name for f in self.fields if f.kind in NUMERIC_KINDS]

    @property
    def required_fields(self) -> list[str]:
        return [f.name for f in self.fields if f.kind not in NUMERIC_KINDS]

    def extract(self, text: str) -> dict[str, Any]:
        """Run every field's chain in layout order; unmatched fields are left out."""
        record: dict[str, Any] = {}
        for extraction_field in self.fields:
            value = extraction_field.extract(text)
            if value is not None:
                record[extraction_field.name] = value
        missing = [name for name in self.field_names if name not in record]
        if missing:
            logger.debug(
                f"Layout {self.name}: no match for {', '.join(missing)}",
                extra={"layout": self.name},
            )
        return record

    def collect_errors(self, record: dict[str, Any]) -> list[dict[str, str]]:
        """Every validation problem in ``record``, one entry per field."""
        errors = list(
            validate_extracted_data(
                record, self.required_fields, self.numeric_fields
            ).errors
        )
        flagged = {e.get("field") for e in errors}

        for name, rule in self.format_rules.items():
            value = record.get(name)
            if name in flagged or not value:
                continue
            if not isinstance(value, str) or not rule.fullmatch(value):
                errors.append(
                    make_error(field_error_code(name), f"{name} inválido", field=name)
                )
                flagged.add(name)

        for name in self.date_fields:
            value = record.get(name)
            if name in flagged or value is None:
                continue
            if not isinstance(value, date):
                errors.append(
                    make_error(field_error_code(name), f"{name} inválido", field=name)
                )

        return errors

    def validate(self, record: dict[str, Any]) -> bool:
        return not self.collect_errors(record)
