"""Ingest documents: extract, reflow, store."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Optional

from .db import LineDatabase
from .errors import InvalidUploadError
from .extractor import TextExtractor
from .logging import get_logger, log_context
from .pipeline import process_text
from .rules import RuleSet

logger = get_logger(__name__)


@dataclass(slots=True)
class IngestResult:
    document_id: str
    line_count: int


class DocumentIngestor:
    def __init__(
        self,
        database: LineDatabase,
        extractor: TextExtractor,
        rules: RuleSet,
        batch_size: int = 500,
        store_original_pdf: bool = True,
    ) -> None:
        self.database = database
        self.extractor = extractor
        self.rules = rules
        self.batch_size = batch_size
        self.store_original_pdf = store_original_pdf

    def ingest(self, name: str, pdf_bytes: bytes) -> IngestResult:
        if not pdf_bytes:
            raise InvalidUploadError("No file content provided")
        with log_context(document_name=name):
            logger.info("ingest_start", size=len(pdf_bytes))
            text = self.extractor.extract(pdf_bytes)
            original_pdf = base64.b64encode(pdf_bytes).decode("ascii") if self.store_original_pdf else None
            return self._store(name, text, original_pdf)

    def ingest_text(self, name: str, text: str) -> IngestResult:
        with log_context(document_name=name):
            logger.info("ingest_text_start", characters=len(text))
            return self._store(name, text, None)

    def _store(self, name: str, text: str, original_pdf: Optional[str]) -> IngestResult:
        lines = process_text(text, self.rules)
        document_id = self.database.create_document_with_lines(
            name, original_pdf, lines, batch_size=self.batch_size
        )
        logger.info("ingest_done", document_id=document_id, lines=len(lines))
        return IngestResult(document_id=document_id, line_count=len(lines))
