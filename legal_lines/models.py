"""Line and document records produced by the pipeline and the store."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Optional


def check_edit_state(is_edited: bool, edited_text: Optional[str]) -> None:
    if is_edited and edited_text is None:
        raise ValueError("an edited line needs edited_text")


@dataclass(slots=True)
class RawPage:
    """Raw (untrimmed, unfiltered) lines of one non-empty page."""

    page_number: int
    lines: List[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class CandidateLine:
    """Trimmed, non-noise line awaiting reflow.

    ``provisional_index`` only orders candidates inside the pipeline; the
    renumberer discards it.
    """

    text: str
    page_number: int
    provisional_index: int


@dataclass(frozen=True, slots=True)
class CanonicalLine:
    line_number: int
    page_number: int
    text: str
    is_edited: bool = False
    edited_text: Optional[str] = None

    def __post_init__(self) -> None:
        check_edit_state(self.is_edited, self.edited_text)

    @property
    def current_text(self) -> str:
        if self.is_edited and self.edited_text is not None:
            return self.edited_text
        return self.text

    def with_edit(self, is_edited: bool, edited_text: Optional[str]) -> "CanonicalLine":
        return replace(self, is_edited=is_edited, edited_text=edited_text)


@dataclass(slots=True)
class LineRecord:
    """Persisted line, keyed by its own id."""

    id: str
    document_id: str
    line_number: int
    page_number: int
    text: str
    is_edited: bool = False
    edited_text: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def current_text(self) -> str:
        if self.is_edited and self.edited_text is not None:
            return self.edited_text
        return self.text

    def as_canonical(self) -> CanonicalLine:
        return CanonicalLine(
            line_number=self.line_number,
            page_number=self.page_number,
            text=self.text,
            is_edited=self.is_edited,
            edited_text=self.edited_text,
        )


@dataclass(slots=True)
class DocumentSummary:
    id: str
    name: str
    created_at: datetime
    updated_at: datetime
    line_count: int = 0


@dataclass(slots=True)
class Document:
    id: str
    name: str
    created_at: datetime
    updated_at: datetime
    lines: List[LineRecord] = field(default_factory=list)
