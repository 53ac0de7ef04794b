"""Error taxonomy for ingestion and editing."""

from __future__ import annotations


class LegalLinesError(Exception):
    """Base class for errors raised by this package."""


class LineNotFoundError(LegalLinesError, LookupError):
    def __init__(self, line_id: str) -> None:
        super().__init__(f"Line not found: {line_id}")
        self.line_id = line_id


class UpstreamExtractionError(LegalLinesError):
    """The text extractor failed; the original exception is chained."""


class InvalidUploadError(LegalLinesError, ValueError):
    """Upload payload rejected before extraction."""
