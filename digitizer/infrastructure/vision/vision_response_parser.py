"""Parse vision model payloads into extracted rows."""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from digitizer.domain.entities.page_record import Row, Scalar

ROW_CONTAINER_KEYS = ("rows", "data", "items", "records")


class VisionResponseParser:
    """Converts raw vision payloads into rows of column-name to scalar."""

    def parse_rows(self, payload: Any) -> Optional[List[Row]]:
        """Return the rows carried by ``payload``.

        Returns ``None`` when the payload has no recognizable row list.
        """
        items = self._locate_rows(payload)
        if items is None:
            return None

        rows: List[Row] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            rows.append({_column_name(key): _to_scalar(value) for key, value in item.items()})
        return rows

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _locate_rows(self, payload: Any) -> Optional[List[Any]]:
        if isinstance(payload, list):
            return payload
        if not isinstance(payload, dict):
            return None

        for key in ROW_CONTAINER_KEYS:
            value = payload.get(key)
            if isinstance(value, list):
                return value

        list_values = [value for value in payload.values() if isinstance(value, list)]
        if len(list_values) == 1:
            return list_values[0]

        # A single flat object (e.g. a form) is one row.
        if payload and all(not isinstance(value, (list, dict)) for value in payload.values()):
            return [payload]
        return None


def _column_name(key: Any) -> str:
    return str(key).strip()


def _to_scalar(value: Any) -> Scalar:
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, list):
        return ", ".join(_safe_str(item) for item in value if item is not None)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    return _safe_str(value)


def _safe_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    return str(value)
