"""IngestFiles Command - turns uploaded files into page records.

Best effort: a file that cannot be read is skipped and logged, so one bad
file never aborts the rest of the upload.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

from digitizer.constants import IMAGE_MEDIA_PREFIX, PDF_MEDIA_TYPE, PDF_PAGE_NAME_TEMPLATE
from digitizer.domain.entities.page_record import PageRecord
from digitizer.domain.repositories.session_repository import SessionRepository
from digitizer.domain.value_objects.global_status import GlobalStatus

logger = logging.getLogger(__name__)

_GENERIC_MEDIA_TYPES = {"", "application/octet-stream", "binary/octet-stream"}


class RenderedPdfPage(Protocol):
    page_number: int
    image: bytes
    image_mime: str


class PdfRasterizer(Protocol):
    def render_bytes(self, data: bytes) -> Sequence[RenderedPdfPage]: ...


@dataclass(frozen=True)
class UploadedFile:
    """A file blob tagged with its name and MIME type."""

    name: str
    media_type: str
    data: bytes


@dataclass(frozen=True)
class IngestFilesCommand:
    files: List[UploadedFile]


@dataclass(frozen=True)
class IngestionResult:
    pages: List[PageRecord] = field(default_factory=list)
    skipped_files: List[str] = field(default_factory=list)


def _is_pdf(file: UploadedFile) -> bool:
    media_type = (file.media_type or "").lower()
    if media_type == PDF_MEDIA_TYPE:
        return True
    return media_type in _GENERIC_MEDIA_TYPES and file.name.lower().endswith(".pdf")


def _is_image(file: UploadedFile) -> bool:
    return (file.media_type or "").lower().startswith(IMAGE_MEDIA_PREFIX)


class IngestFilesHandler:
    """Handles IngestFiles commands. The only writer that grows the page sequence."""

    def __init__(
        self,
        session_repository: SessionRepository,
        pdf_renderer: PdfRasterizer,
        *,
        max_file_bytes: Optional[int] = None,
    ):
        self._session = session_repository
        self._pdf = pdf_renderer
        self._max_file_bytes = max_file_bytes

    async def handle(self, command: IngestFilesCommand) -> IngestionResult:
        if not command.files:
            return IngestionResult()

        self._session.begin_activity(GlobalStatus.UPLOADING)
        try:
            new_pages: List[PageRecord] = []
            skipped: List[str] = []
            for file in command.files:
                pages = await self._ingest_file(file)
                if pages:
                    new_pages.extend(pages)
                else:
                    skipped.append(file.name)

            self._session.add_pages(new_pages)
        finally:
            self._session.end_activity(GlobalStatus.UPLOADING)

        logger.info(
            "Ingested %s files into %s pages",
            len(command.files),
            len(new_pages),
            extra={"skipped_files": skipped},
        )
        return IngestionResult(pages=new_pages, skipped_files=skipped)

    async def _ingest_file(self, file: UploadedFile) -> List[PageRecord]:
        if not file.data:
            logger.warning("Skipping empty file %s", file.name)
            return []
        if self._max_file_bytes is not None and len(file.data) > self._max_file_bytes:
            logger.warning("Skipping %s: %s bytes exceeds the upload limit", file.name, len(file.data))
            return []

        if _is_pdf(file):
            try:
                rendered = await asyncio.to_thread(self._pdf.render_bytes, file.data)
            except Exception:  # noqa: BLE001 - one unreadable PDF must not abort the upload
                logger.exception("Error processing file %s", file.name)
                return []
            return [
                PageRecord.create(
                    name=PDF_PAGE_NAME_TEMPLATE.format(file_name=file.name, page_number=page.page_number),
                    image=page.image,
                    mime=page.image_mime,
                )
                for page in rendered
            ]

        if _is_image(file):
            return [PageRecord.create(name=file.name, image=file.data, mime=file.media_type.lower())]

        logger.warning("Skipping %s: unsupported media type %r", file.name, file.media_type)
        return []
