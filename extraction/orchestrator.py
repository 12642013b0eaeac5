from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional

from extraction.cache.pdf_cache import PdfCacheService
from extraction.core.config import LOG_TEXT_PREVIEW_CHARS
from extraction.core.errors import ErrorCode, make_error
from extraction.core.exceptions import CacheError, PdfExtractionError
from extraction.layouts.base import Layout
from extraction.layouts.registry import LayoutRegistry
from extraction.models.dto import (
    CachedExtraction,
    ExtractionConfidence,
    ExtractionMetadata,
    ExtractionResult,
)
from extraction.processors.text_extractor import PdfTextExtractor

logger = logging.getLogger(__name__)


@dataclass
class ExtractionContext:
    pdf_bytes: bytes
    layout: Layout
    content_hash: Optional[str] = None
    text: str = ""
    num_pages: int = 0
    record: dict[str, Any] = field(default_factory=dict)
    started_at: float = field(default_factory=time.perf_counter)

    @property
    def log_extra(self) -> dict[str, Any]:
        return {"layout": self.layout.name, "content_hash": self.content_hash}

    def elapsed_ms(self) -> float:
        return round((time.perf_counter() - self.started_at) * 1000, 2)


def _fail(code: str, message: Optional[str] = None, partial_data: Optional[dict] = None):
    return PdfExtractionError([make_error(code, message)], partial_data=partial_data)


class PdfExtractionService:
    """
    Runs one PDF through conversion, field extraction, validation and caching.

    Args:
        registry: Layouts available by name
        cache: Content-hash cache; cache failures are logged and ignored
        text_extractor: PDF → text converter
    """

    def __init__(
        self,
        registry: LayoutRegistry,
        cache: PdfCacheService,
        text_extractor: Optional[PdfTextExtractor] = None,
    ) -> None:
        self.registry = registry
        self.cache = cache
        self.text_extractor = text_extractor or PdfTextExtractor()

    def _resolve_layout(self, layout_name: str) -> Layout:
        layout = self.registry.get(layout_name)
        if layout is None:
            raise _fail(
                ErrorCode.LAYOUT_NOT_FOUND.value.code,
                f"Layout {layout_name} não encontrado",
            )
        return layout

    async def _read_cache(self, ctx: ExtractionContext) -> Optional[CachedExtraction]:
        ctx.content_hash = self.cache.generate_hash(ctx.pdf_bytes)
        try:
            return await self.cache.get_cached_extraction(
                ctx.pdf_bytes, ctx.layout.date_fields
            )
        except CacheError as e:
            logger.warning(f"Cache read failed, extracting anyway: {e}", extra=ctx.log_extra)
            return None

    async def _write_cache(
        self, ctx: ExtractionContext, confidence: list[ExtractionConfidence]
    ) -> None:
        cached = CachedExtraction(
            hash=ctx.content_hash or self.cache.generate_hash(ctx.pdf_bytes),
            result=ctx.record,
            confidence=confidence,
        )
        try:
            await self.cache.set_cached_extraction(ctx.pdf_bytes, cached)
        except CacheError as e:
            logger.warning(f"Cache write failed: {e}", extra=ctx.log_extra)

    async def invalidate_cache(self, pdf_bytes: bytes) -> None:
        """Drop any cached extraction of ``pdf_bytes`` so the next call re-extracts."""
        try:
            await self.cache.invalidate(pdf_bytes)
        except CacheError as e:
            logger.warning(f"Cache invalidation failed: {e}")

    async def _stage_convert(self, ctx: ExtractionContext) -> None:
        try:
            pdf_text = await self.text_extractor.extract(ctx.pdf_bytes)
        except Exception as e:
            logger.warning(f"PDF conversion failed: {e}", extra=ctx.log_extra)
            raise _fail(ErrorCode.PDF_PARSE_ERROR.value.code) from e

        if not pdf_text.text.strip():
            raise _fail(ErrorCode.PDF_EMPTY.value.code)
        ctx.text = pdf_text.text
        ctx.num_pages = pdf_text.num_pages
        logger.debug(
            f"PDF text preview: {ctx.text[:LOG_TEXT_PREVIEW_CHARS]!r}", extra=ctx.log_extra
        )

    def _stage_validate(self, ctx: ExtractionContext) -> None:
        field_errors = ctx.layout.collect_errors(ctx.record)
        if not field_errors:
            return
        logger.warning(
            f"Extracted data rejected: {', '.join(e['code'] for e in field_errors)}",
            extra={**ctx.log_extra, "error_code": ErrorCode.INVALID_DATA.value.code},
        )
        raise PdfExtractionError(
            [make_error(ErrorCode.INVALID_DATA.value.code), *field_errors],
            partial_data=dict(ctx.record),
        )

    async def extract_data(
        self,
        pdf_bytes: bytes,
        layout_name: str,
        use_cache: bool = True,
        validate_result: bool = True,
    ) -> ExtractionResult:
        """
        Extract invoice fields from a PDF.

        Args:
            pdf_bytes: Raw PDF content
            layout_name: Registered layout to apply
            use_cache: Read and write the content-hash cache
            validate_result: Reject records failing the layout's validation

        Returns:
            ExtractionResult with the record, per-field confidence and metadata.
            Cache hits report zero pages and zero processing time.

        Raises:
            PdfExtractionError: Every failure, see ``ErrorCode``
        """
        if not isinstance(pdf_bytes, (bytes, bytearray)) or not pdf_bytes:
            raise _fail(ErrorCode.INVALID_BUFFER.value.code)
        pdf_bytes = bytes(pdf_bytes)

        try:
            ctx = ExtractionContext(pdf_bytes=pdf_bytes, layout=self._resolve_layout(layout_name))

            if use_cache:
                cached = await self._read_cache(ctx)
                if cached is not None:
                    logger.info("Extraction served from cache", extra=ctx.log_extra)
                    return ExtractionResult(
                        data=dict(cached.result),
                        confidence=list(cached.confidence),
                        metadata=ExtractionMetadata(
                            num_pages=0, layout=ctx.layout.name, processing_time_ms=0
                        ),
                    )

            await self._stage_convert(ctx)
            ctx.record = ctx.layout.extract(ctx.text)

            if validate_result:
                self._stage_validate(ctx)

            confidence = ExtractionConfidence.for_record(ctx.record)

            # Only validated records enter the cache; hits skip validation.
            if use_cache and validate_result:
                await self._write_cache(ctx, confidence)

            elapsed = ctx.elapsed_ms()
            logger.info(
                f"Extracted {len(ctx.record)} fields from {ctx.num_pages} pages",
                extra={**ctx.log_extra, "duration_ms": elapsed},
            )
            return ExtractionResult(
                data=ctx.record,
                confidence=confidence,
                metadata=ExtractionMetadata(
                    num_pages=ctx.num_pages,
                    layout=ctx.layout.name,
                    processing_time_ms=elapsed,
                ),
            )
        except PdfExtractionError:
            raise
        except Exception as e:
            logger.exception(f"Unexpected extraction error: {e}")
            raise _fail(ErrorCode.UNKNOWN_ERROR.value.code) from e
