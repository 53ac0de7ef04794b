"""Edit reconciliation: how a user's edit coexists with the original text.

The original ``text`` of a line never changes.  An edit is kept only while it
differs from that text; submitting the original text again clears the edit.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Protocol, Union

from .diff import DiffSpan, word_diff
from .errors import LineNotFoundError
from .logging import get_logger
from .models import LineRecord, check_edit_state

logger = get_logger(__name__)


class ViewMode(str, Enum):
    ORIGINAL = "original"
    CURRENT = "current"
    DIFF = "diff"


class EditableLine(Protocol):
    text: str
    is_edited: bool
    edited_text: Optional[str]


@dataclass(frozen=True, slots=True)
class EditState:
    is_edited: bool
    edited_text: Optional[str]

    def __post_init__(self) -> None:
        check_edit_state(self.is_edited, self.edited_text)


UNEDITED = EditState(is_edited=False, edited_text=None)


def propose_edit(line: EditableLine, new_text: str) -> EditState:
    if new_text == line.text:
        return UNEDITED
    return EditState(is_edited=True, edited_text=new_text)


def current_text(line: EditableLine) -> str:
    if line.is_edited and line.edited_text is not None:
        return line.edited_text
    return line.text


def has_effective_edit(line: EditableLine) -> bool:
    return line.is_edited and line.edited_text is not None and line.edited_text != line.text


def render(line: EditableLine, mode: Union[ViewMode, str] = ViewMode.CURRENT) -> Union[str, List[DiffSpan]]:
    mode = ViewMode(mode)
    if mode is ViewMode.ORIGINAL:
        return line.text
    if mode is ViewMode.DIFF and has_effective_edit(line):
        return word_diff(line.text, line.edited_text)
    return current_text(line)


class LineStore(Protocol):
    def fetch_line(self, line_id: str) -> Optional[LineRecord]:
        ...

    def update_line_edit(self, line_id: str, state: EditState) -> LineRecord:
        ...


class EditService:
    """Applies edits through a line store."""

    def __init__(self, store: LineStore) -> None:
        self.store = store

    def commit_edit(self, line_id: str, new_text: str) -> LineRecord:
        if new_text is None:
            raise TypeError("new_text must be a string")
        line = self.store.fetch_line(line_id)
        if line is None:
            raise LineNotFoundError(line_id)
        state = propose_edit(line, new_text)
        updated = self.store.update_line_edit(line_id, state)
        logger.info(
            "line_updated",
            line_id=line_id,
            document_id=updated.document_id,
            line_number=updated.line_number,
            is_edited=state.is_edited,
        )
        return updated

    def revert(self, line_id: str) -> LineRecord:
        line = self.store.fetch_line(line_id)
        if line is None:
            raise LineNotFoundError(line_id)
        return self.commit_edit(line_id, line.text)


def filter_lines(
    lines: Iterable[LineRecord],
    search: Optional[str] = None,
    edited_only: bool = False,
) -> List[LineRecord]:
    selected = [line for line in lines if has_effective_edit(line)] if edited_only else list(lines)
    if search:
        needle = search.lower()
        selected = [line for line in selected if needle in current_text(line).lower()]
    return selected


def export_text(lines: Iterable[LineRecord], mode: Union[ViewMode, str] = ViewMode.CURRENT) -> str:
    """Plain-text export, one ``"<line number>. <text>"`` row per line."""
    mode = ViewMode(mode)
    rows = []
    for line in lines:
        content = line.text if mode is ViewMode.ORIGINAL else current_text(line)
        rows.append(f"{line.line_number}. {content}")
    return "\n".join(rows)


def export_filename(document_name: str, mode: Union[ViewMode, str] = ViewMode.CURRENT) -> str:
    return f"{document_name.replace('.pdf', '', 1)}_{ViewMode(mode).value}.txt"
