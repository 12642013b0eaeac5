"""PDF bytes → plain text via pypdf, off the event loop."""

import asyncio
import io
import logging
from dataclasses import dataclass

from pypdf import PdfReader

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PdfText:
    text: str
    num_pages: int


def _read_pdf_text(pdf_bytes: bytes) -> PdfText:
    reader = PdfReader(io.BytesIO(pdf_bytes))
    pages = [page.extract_text() or "" for page in reader.pages]
    return PdfText(text="\n".join(pages), num_pages=len(pages))


class PdfTextExtractor:
    """Converts PDF bytes to text in the default thread pool executor."""

    async def extract(self, pdf_bytes: bytes) -> PdfText:
        loop = asyncio.get_event_loop()
        result = await loop.run_in_executor(None, lambda: _read_pdf_text(pdf_bytes))
        logger.debug(f"PDF converted: {result.num_pages} pages, {len(result.text)} chars")
        return result
