"""ExtractPage Command - drives one page through extraction.

The transition to ``extracting`` is committed synchronously before the
remote call is awaited, so readers see the in-flight state immediately.
Failures are recorded on the page and never raised to the caller.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol

from digitizer.domain.entities.page_record import PageRecord
from digitizer.domain.exceptions import EntityNotFoundError, InvalidPageTransitionError
from digitizer.domain.repositories.session_repository import SessionRepository
from digitizer.domain.value_objects.page_status import PageState

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_MESSAGE = "Failed to extract data from image. Please try a clearer image."


class VisionClient(Protocol):
    async def extract_rows(self, image: bytes, mime_type: str) -> List[Dict[str, Any]]: ...


@dataclass(frozen=True)
class ExtractPageCommand:
    page_id: str


@dataclass(frozen=True)
class PendingExtraction:
    """An extraction that has been committed as in flight."""

    page_id: str
    image: bytes
    mime_type: str


class ExtractPageHandler:
    """Per-page extraction state machine: idle/complete/error → extracting → complete|error."""

    def __init__(self, session_repository: SessionRepository, vision_client: VisionClient):
        self._session = session_repository
        self._vision = vision_client

    def begin(
        self,
        page_id: str,
        prepare: Optional[Callable[[PageRecord], PageRecord]] = None,
    ) -> Optional[PendingExtraction]:
        """Commit the page as extracting and return what to send.

        The status check and the write happen in one store update, so two
        concurrent calls cannot both launch the same page. ``prepare`` is
        applied to the current record inside that same update.

        Returns ``None`` (no-op) when the page has no image payload.

        Raises:
            EntityNotFoundError: the page does not exist
            InvalidPageTransitionError: the page is already extracting
        """
        launched: List[PendingExtraction] = []

        def _start(page: PageRecord) -> PageRecord:
            if not page.status.can_transition_to(PageState.EXTRACTING):
                raise InvalidPageTransitionError(page_id, page.status.state.value, PageState.EXTRACTING.value)
            if prepare is not None:
                page = prepare(page)
            image = page.image_payload
            if not image:
                return page
            launched.append(PendingExtraction(page_id=page_id, image=image, mime_type=page.payload_mime))
            return page.start_extraction()

        if self._session.update_page(page_id, _start) is None:
            raise EntityNotFoundError("PageRecord", page_id)
        if not launched:
            logger.info("Page has no image payload, nothing to extract", extra={"page_id": page_id})
            return None
        return launched[0]

    async def finish(self, pending: PendingExtraction) -> Optional[PageRecord]:
        """Await the extraction service and record the outcome on the page.

        Returns the updated page, or ``None`` when the page was removed (or
        reset) while the call was in flight.
        """
        try:
            rows = await self._vision.extract_rows(pending.image, pending.mime_type)
            error_message = None
        except Exception as exc:  # noqa: BLE001 - failures are per page
            logger.exception("Extraction failed", extra={"page_id": pending.page_id})
            rows = None
            error_message = str(exc) or DEFAULT_FAILURE_MESSAGE

        return self._commit(pending.page_id, rows, error_message)

    async def handle(self, command: ExtractPageCommand) -> Optional[PageRecord]:
        pending = self.begin(command.page_id)
        if pending is None:
            return self._session.find_page(command.page_id)
        return await self.finish(pending)

    def _commit(self, page_id: str, rows: Optional[List[Dict[str, Any]]], error_message: Optional[str]) -> Optional[PageRecord]:
        settled: List[PageRecord] = []

        def _settle(page: PageRecord) -> PageRecord:
            if not page.status.is_extracting():
                return page
            if error_message is None:
                try:
                    updated = page.complete_extraction(rows or [])
                except ValueError as exc:
                    logger.warning("Extraction returned malformed rows: %s", exc, extra={"page_id": page_id})
                    updated = page.fail_extraction(f"Malformed extraction result: {exc}")
            else:
                updated = page.fail_extraction(error_message)
            settled.append(updated)
            return updated

        self._session.update_page(page_id, _settle)
        if not settled:
            logger.info("Discarding extraction result for a page no longer in flight", extra={"page_id": page_id})
            return None
        updated = settled[0]
        logger.info(
            "Page extraction settled",
            extra={"page_id": page_id, "status": updated.status.state.value, "rows": updated.row_count},
        )
        return updated
