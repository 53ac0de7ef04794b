"""Command-line interface for the legal lines pipeline and store."""

from __future__ import annotations

import json
from contextlib import closing
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import typer

from .edits import ViewMode, export_filename, export_text, render
from .errors import LegalLinesError, LineNotFoundError
from .extractor import PdfTextExtractor
from .logging import configure_logging, get_logger
from .pipeline import process_text
from .rules import load_rules
from .runtime import build_runtime

logger = get_logger(__name__)

app = typer.Typer(add_completion=False, help="Reflow statute PDFs into numbered, editable lines")


@app.command("process")
def process_command(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="PDF file, or text with --text"),
    as_text: bool = typer.Option(False, "--text", help="Treat the input as already-extracted text"),
    rules_file: Optional[Path] = typer.Option(None, "--rules", exists=True, help="JSON rule table"),
) -> None:
    """Run the pipeline on one file and print one JSON object per line."""
    configure_logging("WARNING", json_logs=False)
    # UnicodeDecodeError and JSONDecodeError are both ValueErrors
    try:
        rules = load_rules(rules_file)
    except ValueError as exc:
        typer.echo(f"Invalid rule file {rules_file}: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    try:
        if as_text:
            text = path.read_text(encoding="utf-8")
        else:
            text = PdfTextExtractor().extract(path.read_bytes())
    except UnicodeDecodeError as exc:
        typer.echo(f"{path} is not UTF-8 text: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    except LegalLinesError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    for line in process_text(text, rules):
        typer.echo(json.dumps(asdict(line), ensure_ascii=False))


@app.command("ingest")
def ingest_command(
    path: Path = typer.Argument(..., exists=True, dir_okay=False),
    name: Optional[str] = typer.Option(None, "--name", help="Document name (defaults to file name)"),
) -> None:
    runtime = build_runtime()
    with closing(runtime):
        try:
            result = runtime.ingestor.ingest(name or path.name, path.read_bytes())
        except LegalLinesError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=1) from exc
        typer.echo(json.dumps({"document_id": result.document_id, "line_count": result.line_count}))


@app.command("show")
def show_command(
    document_id: str = typer.Argument(...),
    mode: ViewMode = typer.Option(ViewMode.CURRENT, "--mode"),
) -> None:
    runtime = build_runtime()
    with closing(runtime):
        document = runtime.database.fetch_document(document_id)
        if not document:
            typer.echo("Document not found", err=True)
            raise typer.Exit(code=1)
        for line in document.lines:
            content = render(line, mode)
            if not isinstance(content, str):
                content = "".join(_mark_span(span.tag.value, span.value) for span in content)
            typer.echo(f"{line.line_number:>5} p{line.page_number:<4} {content}")


@app.command("edit")
def edit_command(
    line_id: str = typer.Argument(...),
    new_text: str = typer.Argument(...),
) -> None:
    runtime = build_runtime()
    with closing(runtime):
        try:
            line = runtime.editor.commit_edit(line_id, new_text)
        except LineNotFoundError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=1) from exc
        typer.echo(json.dumps({"id": line.id, "is_edited": line.is_edited, "edited_text": line.edited_text}))


@app.command("revert")
def revert_command(line_id: str = typer.Argument(...)) -> None:
    runtime = build_runtime()
    with closing(runtime):
        try:
            line = runtime.editor.revert(line_id)
        except LineNotFoundError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=1) from exc
        typer.echo(json.dumps({"id": line.id, "is_edited": line.is_edited, "edited_text": line.edited_text}))


@app.command("export")
def export_command(
    document_id: str = typer.Argument(...),
    mode: ViewMode = typer.Option(ViewMode.CURRENT, "--mode"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Directory for the export file"),
) -> None:
    if mode is ViewMode.DIFF:
        raise typer.BadParameter("export supports original or current mode")
    runtime = build_runtime()
    with closing(runtime):
        document = runtime.database.fetch_document(document_id)
        if not document:
            typer.echo("Document not found", err=True)
            raise typer.Exit(code=1)
        content = export_text(document.lines, mode)
        if output is None:
            typer.echo(content)
            return
        target = output / export_filename(document.name, mode)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content + "\n", encoding="utf-8")
        typer.echo(str(target))


@app.command("service")
def service_command(
    host: str = typer.Option("0.0.0.0", "--host", help="Service bind host"),
    port: int = typer.Option(8000, "--port", help="Service port"),
) -> None:
    import uvicorn

    uvicorn.run(
        "legal_lines.app:create_app",
        host=host,
        port=port,
        factory=True,
        log_level="info",
    )


def _mark_span(tag: str, value: str) -> str:
    if tag == "removed":
        return f"[-{value}-]"
    if tag == "added":
        return f"{{+{value}+}}"
    return value


def main():
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
