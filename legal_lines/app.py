"""FastAPI application for uploading documents and editing their lines."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional, Union
from urllib.parse import quote

from fastapi import Depends, FastAPI, File, HTTPException, Query, Request, UploadFile
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from .edits import ViewMode, export_filename, export_text, filter_lines, render
from .errors import InvalidUploadError, LineNotFoundError, UpstreamExtractionError
from .logging import get_logger
from .models import LineRecord
from .runtime import Runtime, build_runtime

logger = get_logger(__name__)


class LineOut(BaseModel):
    id: str
    document_id: str
    line_number: int
    page_number: int
    text: str
    is_edited: bool
    edited_text: Optional[str] = None
    updated_at: Optional[datetime] = None


class DocumentSummaryOut(BaseModel):
    id: str
    name: str
    created_at: datetime
    updated_at: datetime
    line_count: int


class DocumentOut(BaseModel):
    id: str
    name: str
    created_at: datetime
    updated_at: datetime
    lines: List[LineOut]


class UploadOut(BaseModel):
    document_id: str
    line_count: int


class EditIn(BaseModel):
    edited_text: str


class DiffSpanOut(BaseModel):
    tag: str
    value: str


class RenderedLineOut(BaseModel):
    line: LineOut
    mode: ViewMode
    content: Union[str, List[DiffSpanOut]]


def _line_out(line: LineRecord) -> LineOut:
    return LineOut(
        id=line.id,
        document_id=line.document_id,
        line_number=line.line_number,
        page_number=line.page_number,
        text=line.text,
        is_edited=line.is_edited,
        edited_text=line.edited_text,
        updated_at=line.updated_at,
    )


def _content_disposition(filename: str) -> str:
    # header values are latin-1; non-ASCII names go in the RFC 5987 filename* parameter
    fallback = filename.encode("ascii", "replace").decode("ascii")
    fallback = fallback.replace("?", "_").replace('"', "_")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


@asynccontextmanager
async def lifespan(app: FastAPI):
    owned = getattr(app.state, "runtime", None) is None
    if owned:
        app.state.runtime = build_runtime()
    try:
        yield
    finally:
        if owned:
            app.state.runtime.close()


def get_runtime(request: Request) -> Runtime:
    runtime: Runtime = request.app.state.runtime
    return runtime


def create_app(runtime: Runtime | None = None) -> FastAPI:
    api = FastAPI(title="Legal Lines Service", version="1.0.0", lifespan=lifespan)
    if runtime is not None:
        api.state.runtime = runtime

    @api.get("/health")
    def health(runtime: Runtime = Depends(get_runtime)) -> dict:
        return {"status": "healthy", "service": "legal-lines"}

    @api.get("/documents", response_model=List[DocumentSummaryOut])
    def list_documents(runtime: Runtime = Depends(get_runtime)):
        return [
            DocumentSummaryOut(
                id=doc.id,
                name=doc.name,
                created_at=doc.created_at,
                updated_at=doc.updated_at,
                line_count=doc.line_count,
            )
            for doc in runtime.database.list_documents()
        ]

    @api.post("/documents", response_model=UploadOut, status_code=201)
    async def upload_document(
        file: UploadFile = File(...),
        runtime: Runtime = Depends(get_runtime),
    ):
        if file.content_type != "application/pdf":
            raise HTTPException(
                status_code=415,
                detail=f"Invalid file type: {file.content_type}. Please upload a PDF file.",
            )
        content = await file.read()
        if len(content) > runtime.config.max_upload_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"File too large. Maximum size is {runtime.config.max_upload_mb}MB",
            )

        try:
            result = runtime.ingestor.ingest(file.filename or "document.pdf", content)
        except InvalidUploadError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except UpstreamExtractionError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return UploadOut(document_id=result.document_id, line_count=result.line_count)

    @api.get("/documents/{document_id}", response_model=DocumentOut)
    def get_document(
        document_id: str,
        search: Optional[str] = Query(None, description="Case-insensitive text filter"),
        edited_only: bool = Query(False, description="Only lines with an active edit"),
        runtime: Runtime = Depends(get_runtime),
    ):
        document = runtime.database.fetch_document(document_id)
        if not document:
            raise HTTPException(status_code=404, detail="Document not found")
        lines = filter_lines(document.lines, search=search, edited_only=edited_only)
        return DocumentOut(
            id=document.id,
            name=document.name,
            created_at=document.created_at,
            updated_at=document.updated_at,
            lines=[_line_out(line) for line in lines],
        )

    @api.delete("/documents/{document_id}", status_code=204)
    def delete_document(document_id: str, runtime: Runtime = Depends(get_runtime)):
        if not runtime.database.delete_document(document_id):
            raise HTTPException(status_code=404, detail="Document not found")

    @api.get("/documents/{document_id}/export", response_class=PlainTextResponse)
    def export_document(
        document_id: str,
        mode: ViewMode = Query(ViewMode.CURRENT),
        runtime: Runtime = Depends(get_runtime),
    ):
        if mode is ViewMode.DIFF:
            raise HTTPException(status_code=400, detail="Export supports original or current mode")
        document = runtime.database.fetch_document(document_id)
        if not document:
            raise HTTPException(status_code=404, detail="Document not found")
        filename = export_filename(document.name, mode)
        return PlainTextResponse(
            export_text(document.lines, mode),
            headers={"Content-Disposition": _content_disposition(filename)},
        )

    @api.get("/lines/{line_id}", response_model=RenderedLineOut)
    def get_line(
        line_id: str,
        mode: ViewMode = Query(ViewMode.CURRENT),
        runtime: Runtime = Depends(get_runtime),
    ):
        line = runtime.database.fetch_line(line_id)
        if not line:
            raise HTTPException(status_code=404, detail="Line not found")
        content = render(line, mode)
        if not isinstance(content, str):
            content = [DiffSpanOut(**span.to_dict()) for span in content]
        return RenderedLineOut(line=_line_out(line), mode=mode, content=content)

    @api.put("/lines/{line_id}", response_model=LineOut)
    def update_line(line_id: str, payload: EditIn, runtime: Runtime = Depends(get_runtime)):
        try:
            line = runtime.editor.commit_edit(line_id, payload.edited_text)
        except LineNotFoundError as exc:
            raise HTTPException(status_code=404, detail="Line not found") from exc
        return _line_out(line)

    @api.post("/lines/{line_id}/revert", response_model=LineOut)
    def revert_line(line_id: str, runtime: Runtime = Depends(get_runtime)):
        try:
            line = runtime.editor.revert(line_id)
        except LineNotFoundError as exc:
            raise HTTPException(status_code=404, detail="Line not found") from exc
        return _line_out(line)

    return api
