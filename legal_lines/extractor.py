"""PDF text extraction with pdfplumber."""

from __future__ import annotations

import io
from typing import Protocol

import pdfplumber

from .errors import UpstreamExtractionError
from .logging import get_logger
from .segmenter import PAGE_BREAK

logger = get_logger(__name__)


class TextExtractor(Protocol):
    def extract(self, pdf_bytes: bytes) -> str:
        ...


class PdfTextExtractor:
    """Extracts one text blob per PDF, pages joined by a form feed."""

    def __init__(self, page_break: str = PAGE_BREAK) -> None:
        self.page_break = page_break

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            logger.error("pdf_extraction_failed", error=str(exc), size=len(pdf_bytes))
            raise UpstreamExtractionError(f"Failed to extract PDF text: {exc}") from exc

        text = self.page_break.join(pages)
        logger.info("pdf_extracted", pages=len(pages), characters=len(text))
        return text
