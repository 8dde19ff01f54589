import json
import logging

from digitizer.app_logging import JsonFormatter, configure_logging


def _record(**extra):
    record = logging.LogRecord("digitizer.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_merges_extra_fields():
    payload = json.loads(JsonFormatter().format(_record(page_id="abc", skipped_files=["a.txt"], meta={"n": 1})))

    assert payload["message"] == "hello world"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "digitizer.test"
    assert payload["ts"].endswith("Z")
    assert payload["page_id"] == "abc"
    assert payload["skipped_files"] == ["a.txt"]
    assert payload["meta"] == {"n": 1}
    assert "levelno" not in payload


def test_configure_logging_text_mode(monkeypatch):
    monkeypatch.setenv("LOG_FORMAT", "text")
    configure_logging()

    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert not isinstance(handlers[0].formatter, JsonFormatter)
    assert logging.getLogger("httpx").level == logging.WARNING

    configure_logging(structured=True)
    assert isinstance(logging.getLogger().handlers[0].formatter, JsonFormatter)
