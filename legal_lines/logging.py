"""structlog setup shared by the CLI and the HTTP service."""

from __future__ import annotations

import logging
from typing import Any

import structlog

SERVICE_NAME = "legal-lines"


def _add_service(logger: Any, method_name: str, event_dict: dict) -> dict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """Route structlog through stdlib logging on stderr.

    The service emits one JSON object per event. The CLI passes
    ``json_logs=False`` so warnings stay readable next to the JSON line
    records it prints on stdout.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", level=log_level)
    logging.getLogger().setLevel(log_level)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            _add_service,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def log_context(**values: Any):
    """Context manager binding ``values`` to every event logged inside it."""
    return structlog.contextvars.bound_contextvars(**values)


def get_logger(name: str | None = None) -> Any:
    return structlog.get_logger(name)
