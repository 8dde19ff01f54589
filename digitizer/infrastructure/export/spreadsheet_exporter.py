"""CSV and Excel encoders for extracted page rows."""
from __future__ import annotations

import csv
import logging
from io import BytesIO, StringIO
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from openpyxl import Workbook

from digitizer.constants import (
    MASTER_PAGE_NUMBER_COLUMN,
    MASTER_SHEET_TITLE,
    MASTER_SOURCE_FILE_COLUMN,
    MAX_SHEET_TITLE_LENGTH,
    MULTI_SHEET_TITLE_TEMPLATE,
)
from digitizer.domain.entities.page_record import PageRecord, Row, Scalar

logger = logging.getLogger(__name__)

# (1-based position of the page in the session, page)
IndexedPage = Tuple[int, PageRecord]


def collect_headers(rows: Iterable[Mapping[str, Scalar]]) -> List[str]:
    """Union of row keys in first-seen order."""
    seen: Dict[str, None] = {}
    for row in rows:
        for key in row:
            seen.setdefault(key, None)
    return list(seen)


def _cell(value: Scalar) -> Scalar:
    return "" if value is None else value


class SpreadsheetExporter:
    """Encodes rows as CSV or as openpyxl workbooks."""

    def to_csv(self, rows: Sequence[Row]) -> bytes:
        headers = collect_headers(rows)
        buffer = StringIO()
        writer = csv.writer(buffer)
        writer.writerow(headers)
        for row in rows:
            writer.writerow([_cell(row.get(header)) for header in headers])
        # BOM so Excel opens UTF-8 CSV files correctly.
        return buffer.getvalue().encode("utf-8-sig")

    def to_multi_sheet(self, pages: Sequence[IndexedPage]) -> Optional[bytes]:
        """One sheet per page with rows; ``None`` when no page has any."""
        wb = Workbook()
        wb.remove(wb.active)

        for index, page in pages:
            rows = page.extracted_data
            if not rows:
                continue
            title = MULTI_SHEET_TITLE_TEMPLATE.format(index=index)[:MAX_SHEET_TITLE_LENGTH]
            self._write_sheet(wb, title, rows)

        if not wb.sheetnames:
            return None
        return self._save(wb)

    def to_master_sheet(self, pages: Sequence[IndexedPage]) -> Optional[bytes]:
        """Single sheet with every row, prefixed by page number and source file.

        Extracted columns named like the prefix columns keep the extracted value.
        """
        combined: List[Row] = []
        for index, page in pages:
            for row in page.extracted_data or []:
                merged: Row = {
                    MASTER_PAGE_NUMBER_COLUMN: index,
                    MASTER_SOURCE_FILE_COLUMN: page.name,
                }
                merged.update(row)
                combined.append(merged)

        if not combined:
            return None

        wb = Workbook()
        wb.remove(wb.active)
        self._write_sheet(wb, MASTER_SHEET_TITLE, combined)
        return self._save(wb)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _write_sheet(wb: Workbook, title: str, rows: Sequence[Row]) -> None:
        ws = wb.create_sheet(title=title)
        headers = collect_headers(rows)
        ws.append(headers)
        for row in rows:
            ws.append([_cell(row.get(header)) for header in headers])

    @staticmethod
    def _save(wb: Workbook) -> bytes:
        buffer = BytesIO()
        wb.save(buffer)
        return buffer.getvalue()
