"""Runtime wiring for CLI and service entrypoints."""

from __future__ import annotations

from dataclasses import dataclass

from .config import AppConfig, load_config
from .db import LineDatabase
from .edits import EditService
from .extractor import PdfTextExtractor
from .ingest import DocumentIngestor
from .logging import configure_logging
from .rules import RuleSet, load_rules


@dataclass(slots=True)
class Runtime:
    config: AppConfig
    database: LineDatabase
    rules: RuleSet
    ingestor: DocumentIngestor
    editor: EditService

    def close(self) -> None:
        self.database.dispose()


def build_runtime(config: AppConfig | None = None) -> Runtime:
    cfg = config or load_config()
    configure_logging(cfg.log_level, json_logs=cfg.log_json)

    database = LineDatabase(cfg.database_url)
    database.ensure_schema()
    rules = load_rules(cfg.rules_file)

    ingestor = DocumentIngestor(
        database,
        PdfTextExtractor(),
        rules,
        batch_size=cfg.insert_batch_size,
        store_original_pdf=cfg.store_original_pdf,
    )
    editor = EditService(database)

    return Runtime(
        config=cfg,
        database=database,
        rules=rules,
        ingestor=ingestor,
        editor=editor,
    )
