from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Attributes every LogRecord carries; anything else was passed through ``extra``.
_RESERVED_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# SDK loggers that are chatty at INFO (one line per HTTP request or token refresh).
_QUIET_LOGGERS: Dict[str, int] = {
  "uvicorn.access": logging.WARNING,
  "httpx": logging.WARNING,
  "openai": logging.WARNING,
  "azure.identity": logging.WARNING,
  "azure.core.pipeline.policies.http_logging_policy": logging.WARNING,
}


def _jsonable(value: Any) -> Any:
  if value is None or isinstance(value, (str, int, float, bool)):
    return value
  if isinstance(value, (list, tuple, set)):
    return [_jsonable(item) for item in value]
  if isinstance(value, dict):
    return {str(key): _jsonable(item) for key, item in value.items()}
  return str(value)


class JsonFormatter(logging.Formatter):
  """One JSON object per line; ``extra`` fields are merged into the payload."""

  def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
    payload: dict[str, Any] = {
      "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
      "level": record.levelname,
      "logger": record.name,
      "message": record.getMessage(),
    }
    if record.exc_info:
      payload["exc_info"] = self.formatException(record.exc_info)
    for key, value in record.__dict__.items():
      if key.startswith("_") or key in _RESERVED_ATTRS or key in payload:
        continue
      payload[key] = _jsonable(value)
    return json.dumps(payload, ensure_ascii=False)


def _log_level() -> str:
  return os.getenv("LOG_LEVEL", "INFO").upper()


def _structured_default() -> bool:
  return os.getenv("LOG_FORMAT", "json").strip().lower() != "text"


def configure_logging(structured: Optional[bool] = None) -> None:
  """Install a single stdout handler on the root logger.

  ``structured`` falls back to the LOG_FORMAT environment variable
  (``json`` or ``text``).
  """
  if structured is None:
    structured = _structured_default()

  root = logging.getLogger()
  for handler in list(root.handlers):
    root.removeHandler(handler)

  root.setLevel(_log_level())
  stream_handler = logging.StreamHandler(sys.stdout)
  stream_handler.setFormatter(JsonFormatter() if structured else logging.Formatter(_TEXT_FORMAT))
  root.addHandler(stream_handler)

  for name, level in _QUIET_LOGGERS.items():
    logging.getLogger(name).setLevel(level)
