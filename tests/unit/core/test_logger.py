"""
Unit tests for the shared logger.
"""

import json
import logging

import pytest

from clinic_appointments.config.settings import Settings
from clinic_appointments.core.shared import (
    ColoredFormatter,
    JSONFormatter,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
    get_workflow_logger,
)
from clinic_appointments.core.shared.logger import CONTEXT_ATTR


def make_record(message: str = "hello", **attrs) -> logging.LogRecord:
    record = logging.LogRecord("workflow.test", logging.WARNING, __file__, 10, message, None, None)
    for key, value in attrs.items():
        setattr(record, key, value)
    return record


# ===== FIXTURES =====


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    engine = logging.getLogger("sqlalchemy.engine")
    previous = (list(root.handlers), root.level, engine.level)
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = previous[0]
    root.setLevel(previous[1])
    engine.setLevel(previous[2])


# ===== FORMATTERS =====


@pytest.mark.unit
def test_json_formatter_includes_workflow_context():
    record = make_record(**{CONTEXT_ATTR: {"appointment_uuid": "a-1"}})

    data = json.loads(JSONFormatter().format(record))

    assert data["level"] == "WARNING"
    assert data["message"] == "hello"
    assert data["context"] == {"appointment_uuid": "a-1"}


@pytest.mark.unit
def test_json_formatter_omits_empty_context():
    data = json.loads(JSONFormatter().format(make_record()))

    assert "context" not in data
    assert "exception" not in data


@pytest.mark.unit
def test_colored_formatter_restores_levelname():
    record = make_record()

    output = ColoredFormatter("%(levelname)s %(message)s").format(record)

    assert "\033[33m" in output
    assert record.levelname == "WARNING"


# ===== CONTEXT LOGGER =====


@pytest.mark.unit
def test_workflow_logger_carries_operation_context():
    log = get_workflow_logger("reschedule").with_context(original_uuid="a-1")

    assert log.name == "workflow.reschedule"
    assert log.context == {"component": "workflow", "operation": "reschedule", "original_uuid": "a-1"}


@pytest.mark.unit
def test_context_logger_merges_call_kwargs(caplog):
    log = get_logger("clinic.test", {"component": "test"})

    with caplog.at_level(logging.INFO, logger="clinic.test"):
        log.info("saved", status="Scheduled")

    assert getattr(caplog.records[-1], CONTEXT_ATTR) == {"component": "test", "status": "Scheduled"}
    assert log.context == {"component": "test"}


@pytest.mark.unit
def test_context_logger_exception_attaches_traceback(caplog):
    log = get_logger("clinic.test")

    with caplog.at_level(logging.ERROR, logger="clinic.test"):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            log.exception("failed")

    record = caplog.records[-1]
    assert record.levelno == logging.ERROR
    assert record.exc_info is not None


# ===== CONFIGURATION =====


@pytest.mark.unit
def test_configure_logging_json_with_file(tmp_path, restore_root_logger):
    # Arrange
    log_file = tmp_path / "workflow.log"

    # Act
    configure_logging(level="debug", format_type="json", log_file=str(log_file))

    # Assert
    root = restore_root_logger
    assert root.level == logging.DEBUG
    assert isinstance(root.handlers[0].formatter, JSONFormatter)
    assert isinstance(root.handlers[1], logging.FileHandler)
    assert isinstance(root.handlers[1].formatter, JSONFormatter)
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


@pytest.mark.unit
def test_configure_logging_from_settings(restore_root_logger):
    settings = Settings(_env_file=None, LOG_LEVEL="warning", LOG_FORMAT="plain", DB_ECHO=True)

    configure_logging_from_settings(settings)

    root = restore_root_logger
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
    assert type(root.handlers[0].formatter) is logging.Formatter
    assert logging.getLogger("sqlalchemy.engine").level == logging.INFO
