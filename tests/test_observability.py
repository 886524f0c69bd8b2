import json
import logging
import sys
from datetime import datetime

import pytest

from workerindex.observability import (
    LOG_LEVEL_ENV,
    SERVICE_VERSION,
    JsonLogFormatter,
    init_telemetry,
    shutdown_telemetry,
)


@pytest.fixture(autouse=True)
def _cleanup(monkeypatch):
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    yield
    shutdown_telemetry()


def _record(level=logging.INFO, msg="hello %s", args=("world",), exc_info=None):
    return logging.LogRecord("workerindex.test", level, __file__, 10, msg, args, exc_info)


def _lines(text):
    return [json.loads(line) for line in text.splitlines() if line.strip()]


def test_format_fields():
    out = json.loads(JsonLogFormatter().format(_record()))
    assert out["fields"]["message"] == "hello world"
    assert out["target"] == "workerindex.test"
    assert out["level"] == "INFO"
    assert "resource" not in out


def test_format_warning_level():
    out = json.loads(JsonLogFormatter().format(_record(level=logging.WARNING)))
    assert out["level"] == "WARN"


def test_format_resource():
    out = json.loads(JsonLogFormatter("mpi-service").format(_record()))
    assert out["resource"]["service.name"] == "mpi-service"
    assert out["resource"]["service.version"] == SERVICE_VERSION


def test_format_timestamp_matches_record():
    record = _record()
    out = json.loads(JsonLogFormatter().format(record))
    stamp = out["timestamp"]
    assert stamp.endswith("Z")
    parsed = datetime.fromisoformat(stamp[:-1] + "+00:00")
    assert abs(parsed.timestamp() - record.created) < 0.001


def test_format_exception():
    try:
        raise ValueError("bad input")
    except ValueError:
        record = _record(exc_info=sys.exc_info())
    out = json.loads(JsonLogFormatter().format(record))
    assert "ValueError" in out["fields"]["exception"]
    assert "bad input" in out["fields"]["exception"]


def test_init_and_shutdown(capsys):
    root = logging.getLogger()
    before = root.level
    handler = init_telemetry("mpi-service", "info")
    assert handler in root.handlers
    logging.getLogger("workerindex.obs").info("started %d", 1)
    lines = _lines(capsys.readouterr().out)
    assert lines[-1]["fields"]["message"] == "started 1"
    assert lines[-1]["resource"]["service.name"] == "mpi-service"
    shutdown_telemetry()
    assert handler not in root.handlers
    assert root.level == before


def test_init_twice_keeps_one_handler():
    first = init_telemetry("mpi-service")
    second = init_telemetry("mpi-service")
    root = logging.getLogger()
    assert first not in root.handlers
    assert second in root.handlers


def test_invalid_level_raises():
    with pytest.raises(ValueError):
        init_telemetry("mpi-service", "loud")