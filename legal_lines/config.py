"""Configuration loader for the legal lines service."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


def _get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(key)
    if value is not None:
        value = value.strip()
        if value == "":
            return default
        return value
    return default


def _get_int(key: str, default: int) -> int:
    value = _get_env(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"Environment variable {key} must be an integer") from exc


def _get_bool(key: str, default: bool) -> bool:
    value = _get_env(key)
    if value is None:
        return default
    value_lower = value.lower()
    if value_lower in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if value_lower in {"0", "false", "f", "no", "n", "off"}:
        return False
    raise ValueError(f"Environment variable {key} must be a boolean")


DEFAULT_DATABASE_URL = "sqlite:///legal_lines.db"


@dataclass(slots=True)
class AppConfig:
    database_url: str
    log_level: str
    log_json: bool
    insert_batch_size: int
    max_upload_mb: int
    rules_file: Optional[Path]
    store_original_pdf: bool

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


def load_config() -> AppConfig:
    database_url = _get_env("DATABASE_URL", DEFAULT_DATABASE_URL)
    log_level = _get_env("LOG_LEVEL", "INFO").upper()
    log_json = _get_bool("LOG_JSON", True)
    insert_batch_size = max(1, _get_int("LINE_INSERT_BATCH_SIZE", 500))
    max_upload_mb = max(1, _get_int("MAX_UPLOAD_MB", 50))

    rules_value = _get_env("RULES_FILE")
    rules_file = Path(rules_value) if rules_value else None
    if rules_file is not None and not rules_file.is_file():
        raise ValueError(f"RULES_FILE does not exist: {rules_file}")

    store_original_pdf = _get_bool("STORE_ORIGINAL_PDF", True)

    return AppConfig(
        database_url=database_url,
        log_level=log_level,
        log_json=log_json,
        insert_batch_size=insert_batch_size,
        max_upload_mb=max_upload_mb,
        rules_file=rules_file,
        store_original_pdf=store_original_pdf,
    )
