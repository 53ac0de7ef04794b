import pytest
import structlog

from legal_lines.logging import SERVICE_NAME, configure_logging, log_context


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    configure_logging()


@pytest.mark.parametrize(
    "json_logs, renderer",
    [(True, structlog.processors.JSONRenderer), (False, structlog.dev.ConsoleRenderer)],
)
def test_configure_logging_selects_renderer(json_logs, renderer):
    configure_logging("DEBUG", json_logs=json_logs)

    processors = structlog.get_config()["processors"]
    assert isinstance(processors[-1], renderer)
    assert structlog.contextvars.merge_contextvars in processors


def test_events_carry_service_and_bound_context():
    configure_logging()
    processors = structlog.get_config()["processors"]
    merge, add_service = processors[0], processors[4]

    with log_context(document_name="Public Law 118-5.pdf"):
        event = merge(None, "info", {"event": "ingest_start"})
    event = add_service(None, "info", event)

    assert event == {
        "event": "ingest_start",
        "document_name": "Public Law 118-5.pdf",
        "service": SERVICE_NAME,
    }
    assert structlog.contextvars.get_contextvars() == {}
