"""PDF and image infrastructure utilities."""

from .pdf_renderer import PdfRenderError, PdfRenderer, RenderedPage
from .image_processor import ImageProcessingError, apply_filters, image_to_data_url

__all__ = [
    "ImageProcessingError",
    "PdfRenderError",
    "PdfRenderer",
    "RenderedPage",
    "apply_filters",
    "image_to_data_url",
]
