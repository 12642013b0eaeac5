"""
Content-hash cache for PDF extractions.

Entries are keyed by the SHA-256 of the original PDF bytes, so identical
uploads under different filenames share one entry. Two levels: a bounded
in-process map checked first, then Redis (JSON under ``pdf:<hash>``).
Entries are written once and never mutated.
"""

import hashlib
import json
import logging
import time
from collections import OrderedDict
from typing import Iterable, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from extraction.core.config import (
    MEMORY_CACHE_MAX_ITEMS,
    PDF_CACHE_KEY_PREFIX,
    PDF_CACHE_TTL_SECONDS,
)
from extraction.core.exceptions import CacheError
from extraction.models.dto import CachedExtraction

logger = logging.getLogger(__name__)


class PdfCacheService:
    """
    Two-level extraction cache.

    Args:
        redis: Async Redis client, or None for an in-process cache only
        ttl_seconds: Entry lifetime in both levels
        memory_max_items: In-process entries kept before the oldest is evicted
    """

    def __init__(
        self,
        redis: Optional[Redis] = None,
        ttl_seconds: int = PDF_CACHE_TTL_SECONDS,
        memory_max_items: int = MEMORY_CACHE_MAX_ITEMS,
    ):
        self._redis = redis
        self._ttl = ttl_seconds
        self._memory_max_items = memory_max_items
        self._memory: OrderedDict[str, tuple[float, CachedExtraction]] = OrderedDict()

    @staticmethod
    def generate_hash(pdf_bytes: bytes) -> str:
        return hashlib.sha256(pdf_bytes).hexdigest()

    @staticmethod
    def cache_key(content_hash: str) -> str:
        return f"{PDF_CACHE_KEY_PREFIX}{content_hash}"

    def _memory_get(self, content_hash: str) -> Optional[CachedExtraction]:
        entry = self._memory.get(content_hash)
        if entry is None:
            return None
        expires_at, cached = entry
        if expires_at <= time.monotonic():
            del self._memory[content_hash]
            return None
        return cached

    def _memory_set(self, cached: CachedExtraction) -> None:
        self._memory[cached.hash] = (time.monotonic() + self._ttl, cached)
        self._memory.move_to_end(cached.hash)
        while len(self._memory) > self._memory_max_items:
            self._memory.popitem(last=False)

    async def get_cached_extraction(
        self, pdf_bytes: bytes, date_fields: Iterable[str] = ()
    ) -> Optional[CachedExtraction]:
        """
        Look up a prior extraction of these exact bytes.

        Args:
            pdf_bytes: Original PDF content
            date_fields: Record fields stored as ISO strings to turn back into dates

        Returns:
            The cached extraction, or None on a miss

        Raises:
            CacheError: Redis failed or held an unreadable entry
        """
        content_hash = self.generate_hash(pdf_bytes)
        cached = self._memory_get(content_hash)
        if cached is not None:
            logger.debug("Cache hit (memory)", extra={"content_hash": content_hash})
            return cached

        if self._redis is None:
            return None

        key = self.cache_key(content_hash)
        try:
            raw = await self._redis.get(key)
        except RedisError as e:
            raise CacheError("get", details={"key": key, "error": str(e)}) from e

        if raw is None:
            return None

        try:
            payload = json.loads(raw)
            cached = CachedExtraction.from_cache_payload(payload, date_fields)
        except (ValueError, KeyError, TypeError) as e:
            raise CacheError("decode", details={"key": key, "error": str(e)}) from e

        logger.debug("Cache hit (redis)", extra={"content_hash": content_hash})
        self._memory_set(cached)
        return cached

    async def set_cached_extraction(
        self, pdf_bytes: bytes, cached: CachedExtraction
    ) -> None:
        """Store ``cached`` under the hash of ``pdf_bytes`` in both levels."""
        content_hash = self.generate_hash(pdf_bytes)
        if cached.hash != content_hash:
            cached = cached.model_copy(update={"hash": content_hash})
        self._memory_set(cached)

        if self._redis is None:
            return

        key = self.cache_key(content_hash)
        try:
            await self._redis.setex(key, self._ttl, json.dumps(cached.to_cache_payload()))
        except RedisError as e:
            raise CacheError("set", details={"key": key, "error": str(e)}) from e
        logger.debug(
            f"Extraction cached for {self._ttl}s", extra={"content_hash": content_hash}
        )

    async def invalidate(self, pdf_bytes: bytes) -> None:
        content_hash = self.generate_hash(pdf_bytes)
        self._memory.pop(content_hash, None)
        if self._redis is None:
            return
        key = self.cache_key(content_hash)
        try:
            await self._redis.delete(key)
        except RedisError as e:
            raise CacheError("delete", details={"key": key, "error": str(e)}) from e
