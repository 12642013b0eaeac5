"""Unit tests for pypdf text conversion."""

import io

import pytest
from pypdf import PdfWriter

from extraction.processors.text_extractor import PdfTextExtractor


def _blank_pdf(pages: int) -> bytes:
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=72, height=72)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


class TestPdfTextExtractor:
    """Tests for PdfTextExtractor."""

    @pytest.mark.asyncio
    async def test_counts_pages(self):
        """Test a PDF without a text layer converts to blank text."""
        result = await PdfTextExtractor().extract(_blank_pdf(2))
        assert result.num_pages == 2
        assert result.text.strip() == ""

    @pytest.mark.asyncio
    async def test_garbage_bytes_raise(self):
        with pytest.raises(Exception):
            await PdfTextExtractor().extract(b"definitely not a pdf")
