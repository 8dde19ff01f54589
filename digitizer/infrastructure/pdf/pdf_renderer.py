"""PDF rendering utilities for the infrastructure layer."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

import fitz  # type: ignore

from digitizer.constants import PNG_MEDIA_TYPE

logger = logging.getLogger(__name__)


class PdfRenderError(RuntimeError):
    """Raised when a PDF cannot be opened or rasterized."""


@dataclass(frozen=True)
class RenderedPage:
    """Represents an image generated from a PDF page."""

    page_number: int
    image: bytes
    image_mime: str = PNG_MEDIA_TYPE

    def __post_init__(self) -> None:
        if self.page_number < 1:
            raise ValueError("page_number must be >= 1")


class PdfRenderer:
    """Rasterizes PDF documents held in memory, one image per page."""

    def __init__(self, *, zoom: float = 2.0) -> None:
        self._zoom = zoom

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def render_bytes(self, data: bytes) -> List[RenderedPage]:
        """Render every page to PNG, in document order."""

        rendered_pages: List[RenderedPage] = []
        try:
            with self._open(data) as document:
                matrix = fitz.Matrix(self._zoom, self._zoom)
                for index in range(document.page_count):
                    page = document.load_page(index)
                    pixmap = page.get_pixmap(matrix=matrix, alpha=False)
                    rendered_pages.append(
                        RenderedPage(
                            page_number=index + 1,
                            image=pixmap.tobytes("png"),
                            image_mime=PNG_MEDIA_TYPE,
                        )
                    )
        except PdfRenderError:
            raise
        except Exception as exc:
            raise PdfRenderError(f"Failed to rasterize PDF: {exc}") from exc

        logger.debug("Rendered %s pages", len(rendered_pages))
        return rendered_pages

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _open(data: bytes):
        if not data:
            raise PdfRenderError("PDF payload is empty")
        try:
            return fitz.open(stream=data, filetype="pdf")
        except Exception as exc:
            raise PdfRenderError(f"Unable to open PDF: {exc}") from exc
