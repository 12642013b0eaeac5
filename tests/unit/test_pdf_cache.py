"""Unit tests for the two-level PDF extraction cache."""

import json
from datetime import date

import pytest

from conftest import SAMPLE_PDF_BYTES
from extraction.cache.pdf_cache import PdfCacheService
from extraction.core.exceptions import CacheError
from extraction.models.dto import CachedExtraction, ExtractionConfidence

RECORD = {
    "client_number": "7204076116",
    "reference_month": date(2024, 1, 1),
    "compensated_energy_value": -225.42,
}


def _cached(content_hash: str) -> CachedExtraction:
    return CachedExtraction(
        hash=content_hash,
        result=dict(RECORD),
        confidence=ExtractionConfidence.for_record(RECORD),
    )


class TestKeys:
    """Tests for hashing and key layout."""

    def test_hash_is_sha256_hex(self):
        content_hash = PdfCacheService.generate_hash(b"abc")
        assert content_hash == (
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        )

    def test_cache_key_prefix(self):
        assert PdfCacheService.cache_key("deadbeef") == "pdf:deadbeef"

    def test_same_bytes_same_hash(self):
        """Test the key depends on content only."""
        assert PdfCacheService.generate_hash(SAMPLE_PDF_BYTES) == (
            PdfCacheService.generate_hash(bytes(SAMPLE_PDF_BYTES))
        )


class TestMemoryLevel:
    """Tests for the in-process level."""

    @pytest.mark.asyncio
    async def test_miss_without_redis(self):
        cache = PdfCacheService(redis=None)
        assert await cache.get_cached_extraction(SAMPLE_PDF_BYTES) is None

    @pytest.mark.asyncio
    async def test_hit_returns_same_entry(self):
        """Test a stored entry is served from memory without Redis."""
        cache = PdfCacheService(redis=None)
        cached = _cached(cache.generate_hash(SAMPLE_PDF_BYTES))
        await cache.set_cached_extraction(SAMPLE_PDF_BYTES, cached)

        hit = await cache.get_cached_extraction(SAMPLE_PDF_BYTES)
        assert hit.result == RECORD

    @pytest.mark.asyncio
    async def test_expired_entry_is_a_miss(self):
        cache = PdfCacheService(redis=None, ttl_seconds=0)
        await cache.set_cached_extraction(
            SAMPLE_PDF_BYTES, _cached(cache.generate_hash(SAMPLE_PDF_BYTES))
        )
        assert await cache.get_cached_extraction(SAMPLE_PDF_BYTES) is None

    @pytest.mark.asyncio
    async def test_oldest_entry_evicted(self):
        """Test the bound on in-process entries."""
        cache = PdfCacheService(redis=None, memory_max_items=1)
        first, second = b"%PDF first", b"%PDF second"
        await cache.set_cached_extraction(first, _cached(cache.generate_hash(first)))
        await cache.set_cached_extraction(second, _cached(cache.generate_hash(second)))

        assert await cache.get_cached_extraction(first) is None
        assert await cache.get_cached_extraction(second) is not None

    @pytest.mark.asyncio
    async def test_hash_corrected_on_write(self):
        """Test entries are always stored under the hash of the given bytes."""
        cache = PdfCacheService(redis=None)
        await cache.set_cached_extraction(SAMPLE_PDF_BYTES, _cached("wrong"))
        hit = await cache.get_cached_extraction(SAMPLE_PDF_BYTES)
        assert hit.hash == cache.generate_hash(SAMPLE_PDF_BYTES)


class TestRedisLevel:
    """Tests for the Redis level."""

    @pytest.mark.asyncio
    async def test_write_uses_key_and_ttl(self, fake_redis):
        """Test entries are written with SETEX under pdf:<hash>."""
        cache = PdfCacheService(redis=fake_redis, ttl_seconds=600)
        content_hash = cache.generate_hash(SAMPLE_PDF_BYTES)
        await cache.set_cached_extraction(SAMPLE_PDF_BYTES, _cached(content_hash))

        key = f"pdf:{content_hash}"
        assert fake_redis.ttls[key] == 600
        payload = json.loads(fake_redis.store[key])
        assert payload["hash"] == content_hash
        assert payload["result"]["clientNumber"] == "7204076116"
        assert payload["result"]["referenceMonth"] == "2024-01-01"

    @pytest.mark.asyncio
    async def test_read_restores_dates(self, fake_redis):
        """Test a Redis hit turns ISO strings back into dates for date fields."""
        writer = PdfCacheService(redis=fake_redis)
        await writer.set_cached_extraction(
            SAMPLE_PDF_BYTES, _cached(writer.generate_hash(SAMPLE_PDF_BYTES))
        )

        reader = PdfCacheService(redis=fake_redis)
        hit = await reader.get_cached_extraction(SAMPLE_PDF_BYTES, ["reference_month"])

        assert hit.result == RECORD
        assert [c.field for c in hit.confidence] == list(RECORD)

    @pytest.mark.asyncio
    async def test_redis_error_raises_cache_error(self, broken_redis):
        cache = PdfCacheService(redis=broken_redis)
        with pytest.raises(CacheError) as exc_info:
            await cache.get_cached_extraction(SAMPLE_PDF_BYTES)
        assert exc_info.value.details["operation"] == "get"

    @pytest.mark.asyncio
    async def test_write_error_raises_cache_error(self, broken_redis):
        cache = PdfCacheService(redis=broken_redis)
        with pytest.raises(CacheError) as exc_info:
            await cache.set_cached_extraction(
                SAMPLE_PDF_BYTES, _cached(cache.generate_hash(SAMPLE_PDF_BYTES))
            )
        assert exc_info.value.details["operation"] == "set"

    @pytest.mark.asyncio
    async def test_corrupt_entry_raises_cache_error(self, fake_redis):
        cache = PdfCacheService(redis=fake_redis)
        key = cache.cache_key(cache.generate_hash(SAMPLE_PDF_BYTES))
        fake_redis.store[key] = "{not json"

        with pytest.raises(CacheError) as exc_info:
            await cache.get_cached_extraction(SAMPLE_PDF_BYTES)
        assert exc_info.value.details["operation"] == "decode"

    @pytest.mark.asyncio
    async def test_invalidate_removes_both_levels(self, fake_redis):
        cache = PdfCacheService(redis=fake_redis)
        await cache.set_cached_extraction(
            SAMPLE_PDF_BYTES, _cached(cache.generate_hash(SAMPLE_PDF_BYTES))
        )
        await cache.invalidate(SAMPLE_PDF_BYTES)

        assert fake_redis.store == {}
        assert await cache.get_cached_extraction(SAMPLE_PDF_BYTES) is None
