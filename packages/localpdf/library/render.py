"""Page rasterization backed by PyMuPDF."""

from __future__ import annotations

import fitz

from ..core.config import DEFAULT_JPEG_QUALITY
from ..core.exceptions import EngineFailureError
from ..core.utils import get_logger
from ..protocol.messages import ImageFormat

LOGGER = get_logger("localpdf.render")

POINTS_PER_INCH = 72


class RasterDocument:
    """An open document that renders one page at a time."""

    def __init__(self, document: fitz.Document, name: str, *, jpeg_quality: int) -> None:
        self._document = document
        self.name = name
        self.jpeg_quality = jpeg_quality

    @property
    def page_count(self) -> int:
        return self._document.page_count

    def render(self, index: int, *, dpi: int, image_format: ImageFormat) -> bytes:
        """Render the zero-based page ``index`` at ``dpi`` into image bytes."""

        scale = dpi / POINTS_PER_INCH
        try:
            page = self._document.load_page(index)
            pixmap = page.get_pixmap(
                matrix=fitz.Matrix(scale, scale),
                colorspace=fitz.csRGB,
                alpha=image_format is ImageFormat.PNG,
            )
            if image_format is ImageFormat.JPG:
                return pixmap.tobytes("jpg", jpg_quality=self.jpeg_quality)
            return pixmap.tobytes("png")
        except Exception as exc:  # PyMuPDF raises RuntimeError subclasses
            raise EngineFailureError(f"Failed to render page {index + 1} of {self.name} ({exc})") from exc

    def close(self) -> None:
        self._document.close()


class RenderEngine:
    """Opens documents for rasterization."""

    def __init__(self, *, jpeg_quality: int = DEFAULT_JPEG_QUALITY) -> None:
        self.jpeg_quality = jpeg_quality

    def open(self, data: bytes, *, name: str) -> RasterDocument:
        try:
            document = fitz.open(stream=data, filetype="pdf")
        except Exception as exc:  # PyMuPDF raises RuntimeError subclasses
            raise EngineFailureError(f"Failed to open {name} for rendering ({exc})") from exc
        LOGGER.debug("Opened %s for rendering (%d pages)", name, document.page_count)
        return RasterDocument(document, name, jpeg_quality=self.jpeg_quality)


__all__ = ["POINTS_PER_INCH", "RasterDocument", "RenderEngine"]
