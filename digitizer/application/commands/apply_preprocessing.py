"""ApplyPreprocessing Command - filters a page image, then re-extracts.

Filters are always computed from the page's original image. Pre-processing
is always followed by an extraction attempt; there is no save-only path.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from digitizer.application.commands.extract_page import ExtractPageHandler, PendingExtraction
from digitizer.constants import PNG_MEDIA_TYPE
from digitizer.domain.entities.page_record import PageRecord
from digitizer.domain.exceptions import EntityNotFoundError, InvalidPageTransitionError
from digitizer.domain.repositories.session_repository import SessionRepository
from digitizer.domain.value_objects.image_settings import ImageProcessingSettings
from digitizer.domain.value_objects.page_status import PageState

logger = logging.getLogger(__name__)

FilterFn = Callable[[bytes, ImageProcessingSettings], bytes]


@dataclass(frozen=True)
class ApplyPreprocessingCommand:
    page_id: str
    settings: ImageProcessingSettings


class ApplyPreprocessingHandler:
    """Handles ApplyPreprocessing commands."""

    def __init__(
        self,
        session_repository: SessionRepository,
        extract_page_handler: ExtractPageHandler,
        apply_filters: FilterFn,
    ):
        self._session = session_repository
        self._extract = extract_page_handler
        self._apply_filters = apply_filters

    async def render(self, page_id: str, settings: ImageProcessingSettings) -> bytes:
        """Filtered version of the page's original image, without storing it."""
        page = self._require_page(page_id)
        return await asyncio.to_thread(self._apply_filters, page.original_image, settings)

    async def begin(self, command: ApplyPreprocessingCommand) -> Optional[PendingExtraction]:
        """Store the filtered image and commit the page as extracting."""
        page = self._require_page(command.page_id)
        if page.status.is_extracting():
            raise InvalidPageTransitionError(page.id, page.status.state.value, PageState.EXTRACTING.value)

        processed = await asyncio.to_thread(self._apply_filters, page.original_image, command.settings)

        # The page may have changed while the filters ran; the image is stored
        # in the same update that commits the extraction.
        pending = self._extract.begin(
            command.page_id,
            prepare=lambda current: current.with_processed_image(processed, PNG_MEDIA_TYPE),
        )
        logger.info(
            "Stored pre-processed image",
            extra={"page_id": command.page_id, **command.settings.to_dict()},
        )
        return pending

    async def handle(self, command: ApplyPreprocessingCommand) -> Optional[PageRecord]:
        pending = await self.begin(command)
        if pending is None:
            return self._session.find_page(command.page_id)
        return await self._extract.finish(pending)

    def _require_page(self, page_id: str) -> PageRecord:
        page = self._session.find_page(page_id)
        if page is None:
            raise EntityNotFoundError("PageRecord", page_id)
        return page
