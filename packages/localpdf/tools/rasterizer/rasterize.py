"""Operation rendering every page to an image and packing them in an archive."""

from __future__ import annotations

import asyncio

from ...archive.zipstore import ArchiveEntry, build_archive
from ...core.exceptions import ValidationError
from ...core.utils import base_name, get_logger
from ...protocol.messages import ZIP_MEDIA_TYPE, ImageFormat, OperationKind, RasterizeRequest, ResultEvent
from ..common.interfaces import BaseOperation
from ..common.pipeline import register_operation
from ..common.progress import phase_percent

LOGGER = get_logger("localpdf.tools.rasterize")

MIN_DPI = 1
MAX_DPI = 1200


def page_image_name(index: int, image_format: ImageFormat) -> str:
    """Return the archive name for zero-based page ``index``."""

    return f"page_{index + 1:03d}.{image_format.value}"


@register_operation(OperationKind.RASTERIZE)
class RasterizeOperation(BaseOperation):
    async def run(self) -> ResultEvent:
        request: RasterizeRequest = self.request
        image_format = ImageFormat(request.format)
        dpi = request.dpi
        if not MIN_DPI <= dpi <= MAX_DPI:
            raise ValidationError(f"Resolution must be between {MIN_DPI} and {MAX_DPI} DPI, got {dpi}.")

        document = request.document
        self.progress(5, "Initializing renderer")
        unlocked = await self.decrypt(document)
        raster = await asyncio.to_thread(self.context.renderer.open, unlocked, name=document.name)

        entries: list[ArchiveEntry] = []
        try:
            total = raster.page_count
            if not total:
                raise ValidationError("PDF has no pages.")
            for index in range(total):
                self.progress(phase_percent(index, total, 10, 80), f"Rendering page {index + 1}")
                image = await asyncio.to_thread(raster.render, index, dpi=dpi, image_format=image_format)
                entries.append(ArchiveEntry(page_image_name(index, image_format), image))
        finally:
            raster.close()

        self.progress(85, "Packaging archive")
        archive = await asyncio.to_thread(build_archive, entries)
        LOGGER.info("Rendered %d pages of %s at %d DPI", len(entries), document.name, dpi)
        self.progress(100, "Done")
        return self.result(f"{base_name(document.name)}_images_{image_format.value}.zip", archive, ZIP_MEDIA_TYPE)
