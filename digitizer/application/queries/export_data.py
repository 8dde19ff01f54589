"""
ExportData Query - encodes extracted rows for download.

Only pages with extracted rows contribute. An export with nothing to write
raises NothingToExportError instead of producing an empty file.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol, Sequence, Tuple

from digitizer.constants import (
    DEFAULT_CSV_FILENAME,
    DEFAULT_MASTER_SHEET_FILENAME,
    DEFAULT_MULTI_SHEET_FILENAME,
    NOTHING_TO_EXPORT_MESSAGE,
)
from digitizer.domain.entities.page_record import PageRecord, Row
from digitizer.domain.exceptions import EntityNotFoundError, NothingToExportError
from digitizer.domain.repositories.session_repository import SessionRepository

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CSV_MEDIA_TYPE = "text/csv"


class Exporter(Protocol):
    def to_csv(self, rows: Sequence[Row]) -> bytes: ...

    def to_multi_sheet(self, pages: Sequence[Tuple[int, PageRecord]]) -> Optional[bytes]: ...

    def to_master_sheet(self, pages: Sequence[Tuple[int, PageRecord]]) -> Optional[bytes]: ...


class ExportFormat(str, Enum):
    CSV = "csv"
    MULTI_SHEET = "multi"
    MASTER_SHEET = "master"


@dataclass(frozen=True)
class ExportDataQuery:
    export_format: ExportFormat
    page_id: Optional[str] = None
    filename: Optional[str] = None


@dataclass(frozen=True)
class ExportFile:
    filename: str
    media_type: str
    content: bytes


class ExportDataHandler:
    """Handles ExportData queries."""

    def __init__(self, session_repository: SessionRepository, exporter: Exporter):
        self._session = session_repository
        self._exporter = exporter

    def handle(self, query: ExportDataQuery) -> ExportFile:
        if query.export_format == ExportFormat.CSV:
            return self._export_csv(query)

        indexed = self._indexed_pages()
        if query.export_format == ExportFormat.MASTER_SHEET:
            content = self._exporter.to_master_sheet(indexed)
            filename = query.filename or DEFAULT_MASTER_SHEET_FILENAME
        else:
            content = self._exporter.to_multi_sheet(indexed)
            filename = query.filename or DEFAULT_MULTI_SHEET_FILENAME

        if content is None:
            raise NothingToExportError(NOTHING_TO_EXPORT_MESSAGE)
        logger.info("Exported workbook %s", filename, extra={"export_format": query.export_format.value})
        return ExportFile(filename=filename, media_type=XLSX_MEDIA_TYPE, content=content)

    def _export_csv(self, query: ExportDataQuery) -> ExportFile:
        rows: List[Row]
        if query.page_id is not None:
            page = self._session.find_page(query.page_id)
            if page is None:
                raise EntityNotFoundError("PageRecord", query.page_id)
            rows = list(page.extracted_data or [])
        else:
            rows = [row for _, page in self._indexed_pages() for row in page.extracted_data or []]

        if not rows:
            raise NothingToExportError(NOTHING_TO_EXPORT_MESSAGE)
        return ExportFile(
            filename=query.filename or DEFAULT_CSV_FILENAME,
            media_type=CSV_MEDIA_TYPE,
            content=self._exporter.to_csv(rows),
        )

    def _indexed_pages(self) -> List[Tuple[int, PageRecord]]:
        """Eligible pages with their 1-based position in the session."""
        return [
            (index, page)
            for index, page in enumerate(self._session.list_pages(), start=1)
            if page.is_eligible()
        ]
