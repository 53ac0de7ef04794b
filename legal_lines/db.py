"""Document and line storage using SQLAlchemy Core."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    create_engine,
    delete,
    func,
    select,
    update,
)
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.orm import sessionmaker

from .edits import EditState
from .errors import LineNotFoundError
from .logging import get_logger
from .models import CanonicalLine, Document, DocumentSummary, LineRecord

logger = get_logger(__name__)

metadata = MetaData()

documents_table = Table(
    "documents",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", Text, nullable=False),
    Column("original_pdf", Text),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

lines_table = Table(
    "lines",
    metadata,
    Column("id", String(36), primary_key=True),
    Column(
        "document_id",
        String(36),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("line_number", Integer, nullable=False),
    Column("text", Text, nullable=False),
    Column("page_number", Integer, nullable=False),
    Column("is_edited", Boolean, nullable=False, default=False),
    Column("edited_text", Text),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("document_id", "line_number", name="uq_lines_document_line_number"),
)

DOCUMENT_COLUMNS = (
    documents_table.c.id,
    documents_table.c.name,
    documents_table.c.created_at,
    documents_table.c.updated_at,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LineDatabase:
    def __init__(self, dsn: str):
        driver_dsn = _ensure_psycopg_driver(dsn)
        self.engine: Engine = create_engine(driver_dsn, future=True, pool_pre_ping=True)
        self.Session = sessionmaker(self.engine, expire_on_commit=False, future=True)

    def dispose(self) -> None:
        self.engine.dispose()

    def ensure_schema(self) -> None:
        metadata.create_all(self.engine)

    def create_document(self, name: str, original_pdf: Optional[str] = None) -> str:
        with self.engine.begin() as conn:
            document_id = self._insert_document(conn, name, original_pdf)
        logger.info("document_created", document_id=document_id, name=name)
        return document_id

    def insert_lines(
        self,
        document_id: str,
        lines: Sequence[CanonicalLine],
        batch_size: int = 500,
    ) -> int:
        """Insert numbered lines in batches; numbering is already final."""
        with self.engine.begin() as conn:
            count = self._insert_line_rows(conn, document_id, lines, batch_size)
        logger.info("lines_inserted", document_id=document_id, count=count)
        return count

    def create_document_with_lines(
        self,
        name: str,
        original_pdf: Optional[str],
        lines: Sequence[CanonicalLine],
        batch_size: int = 500,
    ) -> str:
        """Store a document and all of its lines, or nothing at all."""
        with self.engine.begin() as conn:
            document_id = self._insert_document(conn, name, original_pdf)
            count = self._insert_line_rows(conn, document_id, lines, batch_size)
        logger.info("document_created", document_id=document_id, name=name, lines=count)
        return document_id

    def _insert_document(self, conn: Connection, name: str, original_pdf: Optional[str]) -> str:
        document_id = str(uuid.uuid4())
        now = _utcnow()
        conn.execute(
            documents_table.insert().values(
                id=document_id,
                name=name,
                original_pdf=original_pdf,
                created_at=now,
                updated_at=now,
            )
        )
        return document_id

    def _insert_line_rows(
        self,
        conn: Connection,
        document_id: str,
        lines: Sequence[CanonicalLine],
        batch_size: int,
    ) -> int:
        now = _utcnow()
        rows = [
            {
                "id": str(uuid.uuid4()),
                "document_id": document_id,
                "line_number": line.line_number,
                "text": line.text,
                "page_number": line.page_number,
                "is_edited": False,
                "edited_text": None,
                "created_at": now,
                "updated_at": now,
            }
            for line in lines
        ]
        total_batches = (len(rows) + batch_size - 1) // batch_size
        for number, chunk in enumerate(_chunked(rows, batch_size), start=1):
            conn.execute(lines_table.insert(), chunk)
            logger.debug(
                "line_batch_inserted",
                document_id=document_id,
                batch=number,
                batches=total_batches,
            )
        return len(rows)

    def fetch_line(self, line_id: str) -> Optional[LineRecord]:
        with self.Session() as session:
            row = session.execute(
                select(lines_table).where(lines_table.c.id == line_id)
            ).mappings().first()
            if not row:
                return None
            return _hydrate_line(row)

    def fetch_lines(self, document_id: str) -> List[LineRecord]:
        with self.Session() as session:
            rows = session.execute(
                select(lines_table)
                .where(lines_table.c.document_id == document_id)
                .order_by(lines_table.c.line_number)
            ).mappings()
            return [_hydrate_line(row) for row in rows]

    def update_line_edit(self, line_id: str, state: EditState) -> LineRecord:
        now = _utcnow()
        with self.engine.begin() as conn:
            document_id = conn.execute(
                select(lines_table.c.document_id).where(lines_table.c.id == line_id)
            ).scalar_one_or_none()
            if document_id is None:
                raise LineNotFoundError(line_id)

            conn.execute(
                update(lines_table)
                .where(lines_table.c.id == line_id)
                .values(
                    is_edited=state.is_edited,
                    edited_text=state.edited_text,
                    updated_at=now,
                )
            )
            conn.execute(
                update(documents_table)
                .where(documents_table.c.id == document_id)
                .values(updated_at=now)
            )
            row = conn.execute(
                select(lines_table).where(lines_table.c.id == line_id)
            ).mappings().one()
        return _hydrate_line(row)

    def fetch_document(self, document_id: str) -> Optional[Document]:
        with self.Session() as session:
            row = session.execute(
                select(*DOCUMENT_COLUMNS).where(documents_table.c.id == document_id)
            ).mappings().first()
            if not row:
                return None

            line_rows = session.execute(
                select(lines_table)
                .where(lines_table.c.document_id == document_id)
                .order_by(lines_table.c.line_number)
            ).mappings()
            return Document(
                id=row["id"],
                name=row["name"],
                created_at=row["created_at"],
                updated_at=row["updated_at"],
                lines=[_hydrate_line(line_row) for line_row in line_rows],
            )

    def list_documents(self) -> List[DocumentSummary]:
        """Newest first, with line counts; the stored PDF is never loaded."""
        counts = (
            select(lines_table.c.document_id, func.count().label("line_count"))
            .group_by(lines_table.c.document_id)
            .subquery()
        )
        query = (
            select(*DOCUMENT_COLUMNS, func.coalesce(counts.c.line_count, 0).label("line_count"))
            .select_from(documents_table.outerjoin(counts, counts.c.document_id == documents_table.c.id))
            .order_by(documents_table.c.created_at.desc())
        )
        with self.Session() as session:
            return [
                DocumentSummary(
                    id=row["id"],
                    name=row["name"],
                    created_at=row["created_at"],
                    updated_at=row["updated_at"],
                    line_count=int(row["line_count"]),
                )
                for row in session.execute(query).mappings()
            ]

    def delete_document(self, document_id: str) -> bool:
        with self.engine.begin() as conn:
            # SQLite does not enforce the cascade unless foreign keys are enabled
            conn.execute(delete(lines_table).where(lines_table.c.document_id == document_id))
            result = conn.execute(delete(documents_table).where(documents_table.c.id == document_id))
        deleted = result.rowcount > 0
        logger.info("document_deleted", document_id=document_id, deleted=deleted)
        return deleted


def _hydrate_line(row) -> LineRecord:
    return LineRecord(
        id=row["id"],
        document_id=row["document_id"],
        line_number=row["line_number"],
        page_number=row["page_number"],
        text=row["text"],
        is_edited=bool(row["is_edited"]),
        edited_text=row["edited_text"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _ensure_psycopg_driver(dsn: str) -> str:
    if dsn.startswith("postgresql://") and "+psycopg" not in dsn:
        return dsn.replace("postgresql://", "postgresql+psycopg://", 1)
    if dsn.startswith("postgres://") and "+psycopg" not in dsn:
        return dsn.replace("postgres://", "postgresql+psycopg://", 1)
    return dsn


def _chunked(items: Iterable, chunk_size: int):
    bucket = []
    for item in items:
        bucket.append(item)
        if len(bucket) >= chunk_size:
            yield bucket
            bucket = []
    if bucket:
        yield bucket
