"""Invoice persistence over asyncpg.

Extracted columns are written only together with ``status='COMPLETED'``;
failed runs keep them NULL and record the error message instead.
"""

import logging
import uuid
from datetime import date
from typing import Any, Optional
from uuid import UUID

from extraction.database.manager import DatabaseManager
from extraction.models.invoice import (
    EXTRACTED_FIELDS,
    Invoice,
    InvoiceFilters,
    InvoiceStatus,
)
from extraction.utils.retry import retry_on_db_error

logger = logging.getLogger(__name__)

_SELECT_COLUMNS = ", ".join(
    ("id", "status", *EXTRACTED_FIELDS, "pdf_url", "error", "created_at", "updated_at")
)


def _build_where(filters: InvoiceFilters) -> tuple[str, list[Any]]:
    clauses: list[str] = []
    params: list[Any] = []

    def add(clause: str, value: Any) -> None:
        params.append(value)
        clauses.append(clause.format(n=len(params)))

    if filters.client_number:
        add("client_number = ${n}", filters.client_number)
    if filters.status:
        add("status = ${n}", filters.status.value)
    if filters.month:
        add("date_trunc('month', reference_month) = date_trunc('month', ${n}::date)", filters.month)
    else:
        if filters.start_date:
            add("reference_month >= ${n}", filters.start_date)
        if filters.end_date:
            add("reference_month <= ${n}", filters.end_date)

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    return where, params


class InvoiceRepository:
    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager

    @retry_on_db_error()
    async def create(self, pdf_url: str, invoice_id: Optional[UUID] = None) -> Invoice:
        """Insert a PENDING invoice for a stored PDF."""
        pool = await self.db_manager.get_pool()
        query = f"""
            INSERT INTO invoices (id, status, pdf_url)
            VALUES ($1, $2, $3)
            RETURNING {_SELECT_COLUMNS}
        """
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                query, invoice_id or uuid.uuid4(), InvoiceStatus.PENDING.value, pdf_url
            )
        invoice = Invoice.from_row(row)
        logger.info("Invoice created", extra={"invoice_id": str(invoice.id)})
        return invoice

    @retry_on_db_error()
    async def find_by_id(self, invoice_id: UUID) -> Optional[Invoice]:
        pool = await self.db_manager.get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {_SELECT_COLUMNS} FROM invoices WHERE id = $1", invoice_id
            )
        return Invoice.from_row(row) if row else None

    @retry_on_db_error()
    async def find_all(self, filters: InvoiceFilters) -> tuple[list[Invoice], int]:
        """One page of invoices ordered by reference month, plus the total count."""
        where, params = _build_where(filters)
        pool = await self.db_manager.get_pool()
        n = len(params)
        query = f"""
            SELECT {_SELECT_COLUMNS} FROM invoices {where}
            ORDER BY reference_month ASC NULLS LAST, created_at ASC
            LIMIT ${n + 1} OFFSET ${n + 2}
        """
        async with pool.acquire() as conn:
            rows = await conn.fetch(query, *params, filters.limit, filters.offset)
            total = await conn.fetchval(f"SELECT COUNT(*) FROM invoices {where}", *params)
        return [Invoice.from_row(r) for r in rows], total

    @retry_on_db_error()
    async def find_completed(
        self,
        client_number: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Invoice]:
        """Every COMPLETED invoice in range, ordered by reference month."""
        filters = InvoiceFilters(
            client_number=client_number,
            status=InvoiceStatus.COMPLETED,
            start_date=start_date,
            end_date=end_date,
        )
        where, params = _build_where(filters)
        pool = await self.db_manager.get_pool()
        async with pool.acquire() as conn:
            rows = await conn.fetch(
                f"SELECT {_SELECT_COLUMNS} FROM invoices {where} ORDER BY reference_month ASC",
                *params,
            )
        return [Invoice.from_row(r) for r in rows]

    @retry_on_db_error()
    async def update_status(
        self, invoice_id: UUID, status: InvoiceStatus, error: Optional[str] = None
    ) -> bool:
        """Set status (and error message). Returns False if the row is missing."""
        pool = await self.db_manager.get_pool()
        query = """
            UPDATE invoices
            SET status = $1, error = $2, updated_at = NOW()
            WHERE id = $3
            RETURNING id
        """
        async with pool.acquire() as conn:
            result = await conn.fetchval(query, status.value, error, invoice_id)
        if result is None:
            logger.warning(
                f"No invoice found, status update to {status.value} skipped",
                extra={"invoice_id": str(invoice_id)},
            )
            return False
        logger.debug(
            f"Invoice status set to {status.value}", extra={"invoice_id": str(invoice_id)}
        )
        return True

    @retry_on_db_error()
    async def complete(self, invoice_id: UUID, record: dict[str, Any]) -> bool:
        """Write a validated extraction and mark the invoice COMPLETED."""
        assignments = ", ".join(
            f"{name} = ${i}" for i, name in enumerate(EXTRACTED_FIELDS, start=1)
        )
        n = len(EXTRACTED_FIELDS)
        query = f"""
            UPDATE invoices
            SET {assignments}, status = ${n + 1}, error = NULL, updated_at = NOW()
            WHERE id = ${n + 2}
            RETURNING id
        """
        values = [record.get(name) for name in EXTRACTED_FIELDS]
        pool = await self.db_manager.get_pool()
        async with pool.acquire() as conn:
            result = await conn.fetchval(
                query, *values, InvoiceStatus.COMPLETED.value, invoice_id
            )
        if result is None:
            logger.warning(
                "No invoice found, extraction result dropped",
                extra={"invoice_id": str(invoice_id)},
            )
            return False
        logger.info("Invoice completed", extra={"invoice_id": str(invoice_id)})
        return True
