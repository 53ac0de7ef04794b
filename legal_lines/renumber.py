"""Final line numbering, applied once after reflow."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Union

from .models import CandidateLine, CanonicalLine


def renumber(lines: Iterable[Union[CandidateLine, CanonicalLine]]) -> List[CanonicalLine]:
    """Number lines 1..N in order, keeping page and text as they are."""
    numbered: List[CanonicalLine] = []
    for index, line in enumerate(lines, start=1):
        if isinstance(line, CanonicalLine):
            numbered.append(replace(line, line_number=index))
        else:
            numbered.append(CanonicalLine(line_number=index, page_number=line.page_number, text=line.text))
    return numbered
