"""
Typed contracts passed between the extraction orchestrator, the cache layer
and the API.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel, to_snake

from extraction.core.config import EXTRACTION_CONFIDENCE, EXTRACTION_METHOD
from extraction.utils.dates import parse_iso_date


def serialize_record(record: dict[str, Any]) -> dict[str, Any]:
    """Convert a record to JSON-ready form: camelCase keys, ISO dates."""
    return {
        to_camel(key): value.isoformat() if isinstance(value, date) else value
        for key, value in record.items()
    }


def deserialize_record(
    payload: dict[str, Any], date_fields: Iterable[str] = ()
) -> dict[str, Any]:
    """Inverse of ``serialize_record``; ``date_fields`` are snake_case names."""
    date_fields = set(date_fields)
    record: dict[str, Any] = {}
    for key, value in payload.items():
        name = to_snake(key)
        if name in date_fields and isinstance(value, str):
            value = parse_iso_date(value)
        record[name] = value
    return record


class ExtractionConfidence(BaseModel):
    """Per-field extraction confidence. The score is a constant 1.0."""

    field: str
    value: str
    confidence: float = EXTRACTION_CONFIDENCE
    method: str = EXTRACTION_METHOD

    @classmethod
    def for_record(cls, record: dict[str, Any]) -> list[ExtractionConfidence]:
        return [
            cls(
                field=name,
                value=value.isoformat() if isinstance(value, date) else str(value),
            )
            for name, value in record.items()
        ]


class ExtractionMetadata(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    num_pages: int
    layout: str
    processing_time_ms: float


class ExtractionResult(BaseModel):
    """Outcome of a successful extraction."""

    data: dict[str, Any]
    confidence: list[ExtractionConfidence]
    metadata: ExtractionMetadata


class CachedExtraction(BaseModel):
    """A stored extraction, keyed by the SHA-256 of the original PDF bytes."""

    hash: str
    result: dict[str, Any]
    confidence: list[ExtractionConfidence]
    timestamp: datetime = Field(default_factory=lambda: datetime.now().astimezone())

    def to_cache_payload(self) -> dict[str, Any]:
        return {
            "hash": self.hash,
            "result": serialize_record(self.result),
            "confidence": [
                {**c.model_dump(), "field": to_camel(c.field)} for c in self.confidence
            ],
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_cache_payload(
        cls, payload: dict[str, Any], date_fields: Iterable[str] = ()
    ) -> CachedExtraction:
        return cls(
            hash=payload["hash"],
            result=deserialize_record(payload["result"], date_fields),
            confidence=[
                ExtractionConfidence(**{**c, "field": to_snake(c["field"])})
                for c in payload.get("confidence", [])
            ],
            timestamp=payload["timestamp"],
        )
