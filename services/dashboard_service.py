"""Dashboard aggregations over completed invoices.

Results are cached in Redis (cache-aside). Cache failures only cost a
recomputation and are never surfaced to callers.
"""

import json
import logging
from datetime import date
from typing import Any, Awaitable, Callable, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from extraction.core.config import (
    DASHBOARD_CACHE_KEY_PREFIX,
    DASHBOARD_CACHE_TTL_SECONDS,
)
from extraction.database.invoice_repository import InvoiceRepository
from extraction.models.invoice import Invoice

logger = logging.getLogger(__name__)


def _month(invoice: Invoice) -> Optional[str]:
    return invoice.reference_month.isoformat() if invoice.reference_month else None


def energy_item(invoice: Invoice) -> dict[str, Any]:
    return {
        "client_number": invoice.client_number,
        "electricity_consumption": (invoice.electricity_quantity or 0)
        + (invoice.scee_quantity or 0),
        "compensated_energy": invoice.compensated_energy_quantity or 0,
        "month": _month(invoice),
    }


def financial_item(invoice: Invoice) -> dict[str, Any]:
    return {
        "client_number": invoice.client_number,
        "total_without_gd": round(invoice.total_value_without_gd, 2),
        "gd_savings": round(invoice.economy_gd, 2),
        "month": _month(invoice),
    }


def summarize(invoices: list[Invoice]) -> dict[str, Any]:
    """Totals over ``invoices`` plus GD savings as a percentage of the gross bill."""
    energy = [energy_item(i) for i in invoices]
    financial = [financial_item(i) for i in invoices]
    total_without_gd = round(sum(f["total_without_gd"] for f in financial), 2)
    total_gd_savings = round(sum(f["gd_savings"] for f in financial), 2)
    savings_percentage = (
        round(total_gd_savings / total_without_gd * 100, 2) if total_without_gd else 0
    )
    return {
        "invoice_count": len(invoices),
        "total_electricity_consumption": sum(e["electricity_consumption"] for e in energy),
        "total_compensated_energy": sum(e["compensated_energy"] for e in energy),
        "total_without_gd": total_without_gd,
        "total_gd_savings": total_gd_savings,
        "savings_percentage": savings_percentage,
    }


class DashboardService:
    def __init__(
        self,
        repository: InvoiceRepository,
        redis: Optional[Redis] = None,
        ttl_seconds: int = DASHBOARD_CACHE_TTL_SECONDS,
    ):
        self.repository = repository
        self._redis = redis
        self._ttl = ttl_seconds

    @staticmethod
    def cache_key(
        kind: str,
        client_number: Optional[str],
        start_date: Optional[date],
        end_date: Optional[date],
    ) -> str:
        parts = [
            client_number or "all",
            start_date.isoformat() if start_date else "",
            end_date.isoformat() if end_date else "",
        ]
        return f"{DASHBOARD_CACHE_KEY_PREFIX}{kind}:{':'.join(parts)}"

    async def _cached(self, key: str, compute: Callable[[], Awaitable[Any]]) -> Any:
        if self._redis is not None:
            try:
                raw = await self._redis.get(key)
                if raw is not None:
                    logger.debug(f"Dashboard cache hit: {key}")
                    return json.loads(raw)
            except (RedisError, ValueError) as e:
                logger.warning(f"Dashboard cache read failed for {key}: {e}")

        value = await compute()

        if self._redis is not None:
            try:
                await self._redis.setex(key, self._ttl, json.dumps(value))
            except RedisError as e:
                logger.warning(f"Dashboard cache write failed for {key}: {e}")
        return value

    async def get_energy_data(
        self,
        client_number: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[dict[str, Any]]:
        async def compute() -> list[dict[str, Any]]:
            invoices = await self.repository.find_completed(client_number, start_date, end_date)
            return [energy_item(i) for i in invoices]

        key = self.cache_key("energy", client_number, start_date, end_date)
        return await self._cached(key, compute)

    async def get_financial_data(
        self,
        client_number: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[dict[str, Any]]:
        async def compute() -> list[dict[str, Any]]:
            invoices = await self.repository.find_completed(client_number, start_date, end_date)
            return [financial_item(i) for i in invoices]

        key = self.cache_key("financial", client_number, start_date, end_date)
        return await self._cached(key, compute)

    async def get_summary(
        self,
        client_number: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> dict[str, Any]:
        async def compute() -> dict[str, Any]:
            invoices = await self.repository.find_completed(client_number, start_date, end_date)
            return summarize(invoices)

        key = self.cache_key("summary", client_number, start_date, end_date)
        return await self._cached(key, compute)
