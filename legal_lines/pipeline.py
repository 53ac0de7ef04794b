"""Text-to-lines pipeline: segment, reflow, renumber."""

from __future__ import annotations

from typing import List, Optional

from .logging import get_logger
from .models import CanonicalLine
from .reflow import merge_wrapped_lines
from .renumber import renumber
from .rules import DEFAULT_RULES, RuleSet
from .segmenter import LINE_BREAK, PAGE_BREAK, segment

logger = get_logger(__name__)


def process_text(
    text: str,
    rules: Optional[RuleSet] = None,
    page_break: str = PAGE_BREAK,
    line_break: str = LINE_BREAK,
) -> List[CanonicalLine]:
    """Turn extracted document text into numbered canonical lines.

    A blob with no usable text yields an empty list. Anything other than a
    string raises ``TypeError``.
    """
    if not isinstance(text, str):
        raise TypeError(f"text must be a string, not {type(text).__name__}")

    rules = rules or DEFAULT_RULES
    candidates = segment(text, page_break, line_break, rules.noise)
    merged = merge_wrapped_lines(candidates, rules.reflow)
    lines = renumber(merged)

    logger.debug(
        "pipeline_done",
        candidates=len(candidates),
        merged=len(candidates) - len(merged),
        lines=len(lines),
    )
    return lines
