"""Shared fixtures: sample bill text and in-memory fakes for Redis and pypdf."""

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from extraction.processors.text_extractor import PdfText

SAMPLE_BILL_TEXT = (
    "Nº DO CLIENTE 7204076116 ... Referente a JAN/2024 ... "
    "Energia Elétrica kWh 50 47,75 ... "
    "Energia SCEE s/ICMS kWh 456 235,42 ... "
    "Energia compensada GD I kWh 456 -225,42 ... "
    "Contrib Ilum Publica Municipal 49,43"
)

SAMPLE_PDF_BYTES = b"%PDF-1.4 sample bill bytes"


class FakeRedis:
    """Dict-backed stand-in for ``redis.asyncio.Redis`` (decode_responses=True)."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key):
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        self.store[key] = value
        self.ttls[key] = ttl
        return True

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
        return removed

    async def ping(self):
        return True


class BrokenRedis:
    """Every call fails like a Redis server that went away."""

    async def get(self, key):
        raise RedisConnectionError("Connection refused")

    async def setex(self, key, ttl, value):
        raise RedisConnectionError("Connection refused")

    async def delete(self, *keys):
        raise RedisConnectionError("Connection refused")

    async def ping(self):
        raise RedisConnectionError("Connection refused")


class FakeTextExtractor:
    """Returns canned text and counts conversions."""

    def __init__(self, text: str = SAMPLE_BILL_TEXT, num_pages: int = 2, error=None):
        self.text = text
        self.num_pages = num_pages
        self.error = error
        self.calls = 0

    async def extract(self, pdf_bytes: bytes) -> PdfText:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return PdfText(text=self.text, num_pages=self.num_pages)


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_BILL_TEXT


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def broken_redis() -> BrokenRedis:
    return BrokenRedis()
