import pytest
from sqlalchemy.exc import IntegrityError

from legal_lines.edits import EditService, EditState
from legal_lines.errors import LineNotFoundError
from legal_lines.ingest import DocumentIngestor
from legal_lines.models import CanonicalLine
from legal_lines.pipeline import process_text
from legal_lines.rules import DEFAULT_RULES


def _numbered(count):
    return [CanonicalLine(line_number=i, page_number=1 + i // 4, text=f"line {i}") for i in range(1, count + 1)]


def test_insert_lines_in_batches_keeps_numbering(sqlite_db):
    document_id = sqlite_db.create_document("law.pdf")

    inserted = sqlite_db.insert_lines(document_id, _numbered(7), batch_size=3)

    assert inserted == 7
    stored = sqlite_db.fetch_lines(document_id)
    assert [line.line_number for line in stored] == list(range(1, 8))
    assert [line.text for line in stored] == [f"line {i}" for i in range(1, 8)]
    assert all(line.is_edited is False and line.edited_text is None for line in stored)


def test_create_document_with_lines(sqlite_db):
    document_id = sqlite_db.create_document_with_lines("law.pdf", None, _numbered(5), batch_size=2)

    document = sqlite_db.fetch_document(document_id)
    assert document is not None
    assert [line.line_number for line in document.lines] == [1, 2, 3, 4, 5]


def test_failed_line_insert_leaves_no_document(sqlite_db):
    lines = _numbered(4) + [CanonicalLine(line_number=2, page_number=1, text="duplicate")]

    with pytest.raises(IntegrityError):
        sqlite_db.create_document_with_lines("law.pdf", None, lines, batch_size=2)

    assert sqlite_db.list_documents() == []


def test_ingest_failure_rolls_back_document(sqlite_db, static_extractor, monkeypatch):
    def broken_insert(conn, document_id, lines, batch_size):
        raise RuntimeError("connection dropped")

    monkeypatch.setattr(sqlite_db, "_insert_line_rows", broken_insert)
    ingestor = DocumentIngestor(sqlite_db, static_extractor, DEFAULT_RULES)

    with pytest.raises(RuntimeError):
        ingestor.ingest("law.pdf", b"%PDF-1.7 fake")

    assert sqlite_db.list_documents() == []


def test_fetch_document_and_list_documents(sqlite_db):
    first = sqlite_db.create_document("first.pdf", original_pdf="JVBERi0=")
    sqlite_db.insert_lines(first, process_text("Title.\fSEC. 1. SHORT TITLE.\nThis Act may be\ncited as the Test Act."))
    second = sqlite_db.create_document("empty.pdf")

    document = sqlite_db.fetch_document(first)
    assert document is not None
    assert document.name == "first.pdf"
    assert [(line.line_number, line.page_number, line.text) for line in document.lines] == [
        (1, 1, "Title."),
        (2, 2, "SEC. 1. SHORT TITLE."),
        (3, 2, "This Act may be cited as the Test Act."),
    ]

    counts = {summary.id: summary.line_count for summary in sqlite_db.list_documents()}
    assert counts == {first: 3, second: 0}
    assert sqlite_db.fetch_document("missing") is None


def test_update_line_edit_touches_document(sqlite_db):
    document_id = sqlite_db.create_document("law.pdf")
    sqlite_db.insert_lines(document_id, _numbered(2))
    before = sqlite_db.fetch_document(document_id).updated_at
    line = sqlite_db.fetch_lines(document_id)[0]

    updated = sqlite_db.update_line_edit(line.id, EditState(is_edited=True, edited_text="edited"))

    assert updated.is_edited is True
    assert updated.edited_text == "edited"
    assert updated.text == "line 1"
    assert sqlite_db.fetch_document(document_id).updated_at >= before


def test_update_missing_line_raises(sqlite_db):
    with pytest.raises(LineNotFoundError):
        sqlite_db.update_line_edit("missing", EditState(is_edited=False, edited_text=None))


def test_edit_service_against_database(sqlite_db):
    document_id = sqlite_db.create_document("law.pdf")
    sqlite_db.insert_lines(document_id, _numbered(1))
    line_id = sqlite_db.fetch_lines(document_id)[0].id
    service = EditService(sqlite_db)

    service.commit_edit(line_id, "rewritten")
    reverted = service.revert(line_id)

    assert reverted.is_edited is False
    assert reverted.edited_text is None
    assert sqlite_db.fetch_line(line_id).text == "line 1"


def test_delete_document_removes_lines(sqlite_db):
    document_id = sqlite_db.create_document("law.pdf")
    sqlite_db.insert_lines(document_id, _numbered(3))

    assert sqlite_db.delete_document(document_id) is True
    assert sqlite_db.fetch_document(document_id) is None
    assert sqlite_db.fetch_lines(document_id) == []
    assert sqlite_db.delete_document(document_id) is False
