"""Operation copying selected pages out of a document."""

from __future__ import annotations

import asyncio
from typing import Sequence

from ...archive.zipstore import ArchiveEntry, build_archive
from ...core.exceptions import ValidationError
from ...core.utils import base_name, get_logger
from ...library.documents import LoadedDocument
from ...pages.ranges import PageSelection, clamp_pages, format_range_label
from ...protocol.messages import (
    PDF_MEDIA_TYPE,
    ZIP_MEDIA_TYPE,
    ExtractRequest,
    OperationKind,
    OutputMode,
    ResultEvent,
)
from ..common.interfaces import BaseOperation
from ..common.pipeline import register_operation
from ..common.progress import phase_percent

LOGGER = get_logger("localpdf.tools.extract")


def unique_entry_name(stem: str, used: set[str], suffix: str = ".pdf") -> str:
    """Return ``stem + suffix``, numbered when the name is already taken."""

    name = f"{stem}{suffix}"
    counter = 2
    while name in used:
        name = f"{stem}_{counter}{suffix}"
        counter += 1
    used.add(name)
    return name


@register_operation(OperationKind.EXTRACT)
class ExtractOperation(BaseOperation):
    async def run(self) -> ResultEvent:
        request: ExtractRequest = self.request
        selection = PageSelection.from_pages(request.pages, request.groups)
        if not selection:
            raise ValidationError("No pages selected.")

        document = request.document
        self.progress(5, "Loading PDF")
        unlocked = await self.decrypt(document)
        source = await asyncio.to_thread(self.context.documents.load, unlocked, name=document.name)

        pages = clamp_pages(selection.pages, source.page_count)
        if not pages:
            raise ValidationError("No valid pages selected.")

        base = base_name(document.name)
        if OutputMode(request.mode) is OutputMode.ARCHIVE:
            groups = selection.groups or (selection.pages,)
            return await self._extract_archive(source, groups, base)
        return await self._extract_single(source, pages, base)

    async def _extract_single(self, source: LoadedDocument, pages: Sequence[int], base: str) -> ResultEvent:
        self.progress(40, "Extracting pages")
        payload = await asyncio.to_thread(
            self.context.documents.assemble,
            [(source, pages)],
            metadata=source.metadata(),
        )
        LOGGER.debug("Extracted pages %s from %s", list(pages), source.name)
        self.progress(80, "Saving")
        self.progress(100, "Done")
        return self.result(f"{base}_pages.pdf", payload, PDF_MEDIA_TYPE)

    async def _extract_archive(
        self,
        source: LoadedDocument,
        groups: Sequence[Sequence[int]],
        base: str,
    ) -> ResultEvent:
        ranges = [pages for pages in (clamp_pages(group, source.page_count) for group in groups) if pages]
        if not ranges:
            raise ValidationError("No valid pages selected.")

        metadata = source.metadata()
        used: set[str] = set()
        entries: list[ArchiveEntry] = []
        for index, pages in enumerate(ranges):
            self.progress(
                phase_percent(index, len(ranges), 10, 70),
                f"Extracting pages {','.join(str(page) for page in pages)}",
            )
            payload = await asyncio.to_thread(
                self.context.documents.assemble,
                [(source, pages)],
                metadata=metadata,
            )
            label = format_range_label(pages) or f"range{index + 1}"
            entries.append(ArchiveEntry(unique_entry_name(f"{base}_{label}", used), payload))

        self.progress(85, "Packaging archive")
        archive = await asyncio.to_thread(build_archive, entries)
        LOGGER.debug("Packed %d page ranges from %s", len(entries), source.name)
        self.progress(100, "Done")
        return self.result(f"{base}_pages.zip", archive, ZIP_MEDIA_TYPE)
