"""Invoice record persisted per uploaded bill."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel

from extraction.core.config import DEFAULT_PAGE_SIZE

EXTRACTED_FIELDS = (
    "client_number",
    "reference_month",
    "electricity_quantity",
    "electricity_value",
    "scee_quantity",
    "scee_value",
    "compensated_energy_quantity",
    "compensated_energy_value",
    "public_lighting_value",
)


class InvoiceStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class Invoice(BaseModel):
    id: UUID
    status: InvoiceStatus = InvoiceStatus.PENDING
    client_number: Optional[str] = None
    reference_month: Optional[date] = None
    electricity_quantity: Optional[float] = None
    electricity_value: Optional[float] = None
    scee_quantity: Optional[float] = None
    scee_value: Optional[float] = None
    compensated_energy_quantity: Optional[float] = None
    compensated_energy_value: Optional[float] = None
    public_lighting_value: Optional[float] = None
    pdf_url: Optional[str] = None
    error: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def total_consumption(self) -> float:
        """Electricity + SCEE + compensated kWh."""
        return (
            (self.electricity_quantity or 0)
            + (self.scee_quantity or 0)
            + (self.compensated_energy_quantity or 0)
        )

    @property
    def total_value_without_gd(self) -> float:
        """What the bill would cost without distributed generation credits (R$)."""
        return (
            (self.electricity_value or 0)
            + (self.scee_value or 0)
            + (self.public_lighting_value or 0)
        )

    @property
    def economy_gd(self) -> float:
        return abs(self.compensated_energy_value or 0)

    @classmethod
    def from_row(cls, row: Any) -> Invoice:
        """Build from an asyncpg Record (NUMERIC columns arrive as Decimal)."""
        values = dict(row)
        for name in EXTRACTED_FIELDS:
            value = values.get(name)
            if value is not None and name not in ("client_number", "reference_month"):
                values[name] = float(value)
        return cls(**values)


@dataclass
class InvoiceFilters:
    client_number: Optional[str] = None
    status: Optional[InvoiceStatus] = None
    month: Optional[date] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
