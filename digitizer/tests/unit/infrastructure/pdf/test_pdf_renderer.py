from unittest.mock import MagicMock, patch

import pytest

from digitizer.infrastructure.pdf.pdf_renderer import PdfRenderError, PdfRenderer, RenderedPage


@pytest.fixture
def mock_pdf():
    document = MagicMock()
    document.page_count = 2
    pixmaps = []

    def load_page(index):
        page = MagicMock()
        pixmap = MagicMock()
        pixmap.tobytes.return_value = f"png-{index + 1}".encode()
        pixmaps.append(pixmap)
        page.get_pixmap.return_value = pixmap
        return page

    document.load_page.side_effect = load_page

    context_manager = MagicMock()
    context_manager.__enter__.return_value = document
    context_manager.__exit__.return_value = None

    with patch("digitizer.infrastructure.pdf.pdf_renderer.fitz.open", return_value=context_manager) as opener:
        yield opener, pixmaps


def test_render_bytes_creates_one_png_per_page(mock_pdf):
    opener, pixmaps = mock_pdf
    renderer = PdfRenderer(zoom=2.0)

    pages = renderer.render_bytes(b"%PDF-1.4")

    assert len(pages) == 2
    assert all(isinstance(page, RenderedPage) for page in pages)
    assert [page.page_number for page in pages] == [1, 2]
    assert [page.image for page in pages] == [b"png-1", b"png-2"]
    assert all(page.image_mime == "image/png" for page in pages)
    opener.assert_called_once_with(stream=b"%PDF-1.4", filetype="pdf")
    for pixmap in pixmaps:
        pixmap.tobytes.assert_called_once_with("png")


def test_empty_payload_raises():
    with pytest.raises(PdfRenderError):
        PdfRenderer().render_bytes(b"")


def test_unreadable_pdf_raises_render_error():
    with patch("digitizer.infrastructure.pdf.pdf_renderer.fitz.open", side_effect=RuntimeError("broken")):
        with pytest.raises(PdfRenderError, match="broken"):
            PdfRenderer().render_bytes(b"not a pdf")


def test_rendered_page_numbers_start_at_one():
    with pytest.raises(ValueError):
        RenderedPage(page_number=0, image=b"x")
