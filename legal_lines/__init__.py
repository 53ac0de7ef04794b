"""Reflow extracted statute text into stable, editable legal lines."""

from .models import CandidateLine, CanonicalLine, RawPage
from .pipeline import process_text

__all__ = [
    "CandidateLine",
    "CanonicalLine",
    "RawPage",
    "process_text",
    "config",
    "rules",
    "noise",
    "segmenter",
    "reflow",
    "renumber",
    "pipeline",
    "edits",
    "diff",
    "db",
    "ingest",
    "cli",
]
