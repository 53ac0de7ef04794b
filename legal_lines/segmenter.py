"""Split an extracted text blob into pages and candidate lines."""

from __future__ import annotations

from typing import List, Optional

from .models import CandidateLine, RawPage
from .noise import is_noise
from .rules import NoiseRules

PAGE_BREAK = "\f"
LINE_BREAK = "\n"


def split_pages(text: str, page_break: str = PAGE_BREAK, line_break: str = LINE_BREAK) -> List[RawPage]:
    """Split on the page break and number the pages that have content.

    Blank pages are dropped before numbering, so they never consume a page
    number.
    """
    if not page_break:
        raise ValueError("page_break must be a non-empty string")
    pages = [chunk for chunk in text.split(page_break) if chunk.strip()]
    return [
        RawPage(page_number=index, lines=chunk.split(line_break))
        for index, chunk in enumerate(pages, start=1)
    ]


def candidate_lines(pages: List[RawPage], noise_rules: Optional[NoiseRules] = None) -> List[CandidateLine]:
    candidates: List[CandidateLine] = []
    for page in pages:
        for raw in page.lines:
            trimmed = raw.strip()
            if not trimmed or is_noise(trimmed, noise_rules):
                continue
            candidates.append(
                CandidateLine(
                    text=trimmed,
                    page_number=page.page_number,
                    provisional_index=len(candidates),
                )
            )
    return candidates


def segment(
    text: str,
    page_break: str = PAGE_BREAK,
    line_break: str = LINE_BREAK,
    noise_rules: Optional[NoiseRules] = None,
) -> List[CandidateLine]:
    return candidate_lines(split_pages(text, page_break, line_break), noise_rules)
