import pytest

from legal_lines.db import LineDatabase

SAMPLE_TEXT = "Title.\fSEC. 1. SHORT TITLE.\nThis Act may be\ncited as the Test Act.\f"


class StaticExtractor:
    """Stands in for the PDF extractor and returns fixed text."""

    def __init__(self, text: str = SAMPLE_TEXT) -> None:
        self.text = text
        self.calls = 0

    def extract(self, pdf_bytes: bytes) -> str:
        self.calls += 1
        return self.text


@pytest.fixture()
def sqlite_url(tmp_path):
    return f"sqlite:///{tmp_path / 'lines.db'}"


@pytest.fixture()
def sqlite_db(sqlite_url):
    database = LineDatabase(sqlite_url)
    database.ensure_schema()
    yield database
    database.dispose()


@pytest.fixture()
def static_extractor():
    return StaticExtractor()
