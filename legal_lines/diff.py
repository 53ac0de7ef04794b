"""Word-level diff between an original line and its edit."""

from __future__ import annotations

import re
from dataclasses import dataclass
from difflib import SequenceMatcher
from enum import Enum
from typing import List

_TOKEN_RE = re.compile(r"\s+|[^\s]+")


class SpanTag(str, Enum):
    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True, slots=True)
class DiffSpan:
    tag: SpanTag
    value: str

    def to_dict(self) -> dict:
        return {"tag": self.tag.value, "value": self.value}


def tokenize(text: str) -> List[str]:
    return _TOKEN_RE.findall(text)


def word_diff(original: str, edited: str) -> List[DiffSpan]:
    """Diff two strings word by word, keeping whitespace runs as tokens.

    Concatenating the unchanged and removed spans gives back ``original``;
    unchanged and added spans give back ``edited``.
    """
    a = tokenize(original)
    b = tokenize(edited)
    spans: List[DiffSpan] = []

    def emit(tag: SpanTag, tokens: List[str]) -> None:
        if not tokens:
            return
        value = "".join(tokens)
        if spans and spans[-1].tag is tag:
            spans[-1] = DiffSpan(tag, spans[-1].value + value)
        else:
            spans.append(DiffSpan(tag, value))

    matcher = SequenceMatcher(None, a, b, autojunk=False)
    for op, i1, i2, j1, j2 in matcher.get_opcodes():
        if op == "equal":
            emit(SpanTag.UNCHANGED, a[i1:i2])
            continue
        # replace is reported as removal followed by addition
        emit(SpanTag.REMOVED, a[i1:i2])
        emit(SpanTag.ADDED, b[j1:j2])
    return spans
