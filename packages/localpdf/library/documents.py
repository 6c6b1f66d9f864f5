"""Page copying and document assembly backed by :mod:`pypdf`."""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Iterable, Sequence

from pypdf import PdfReader, PdfWriter

from ..core.exceptions import EngineFailureError
from ..core.utils import get_logger

LOGGER = get_logger("localpdf.library")


@dataclass
class LoadedDocument:
    """A parsed, already decrypted document."""

    name: str
    reader: PdfReader

    @property
    def page_count(self) -> int:
        return len(self.reader.pages)

    def metadata(self) -> dict[str, str]:
        metadata = self.reader.metadata or {}
        return {
            key: str(value)
            for key, value in metadata.items()
            if isinstance(key, str) and value is not None
        }


class DocumentLibrary:
    """Loads documents and assembles new ones from selected pages."""

    def load(self, data: bytes, *, name: str) -> LoadedDocument:
        try:
            reader = PdfReader(io.BytesIO(data))
            # Touch the page tree so structural errors surface here.
            len(reader.pages)
        except Exception as exc:  # pypdf exceptions vary
            raise EngineFailureError(f"Failed to read {name} ({exc})") from exc
        return LoadedDocument(name=name, reader=reader)

    def assemble(
        self,
        parts: Iterable[tuple[LoadedDocument, Sequence[int] | None]],
        *,
        metadata: dict[str, str] | None = None,
    ) -> bytes:
        """Build a new document from ``parts``.

        Each part is a loaded document and the 1-based page numbers to copy
        from it, in order; ``None`` copies every page.
        """

        writer = PdfWriter()
        try:
            for document, pages in parts:
                numbers = range(1, document.page_count + 1) if pages is None else pages
                for number in numbers:
                    LOGGER.debug("Adding page %s from %s", number, document.name)
                    writer.add_page(document.reader.pages[number - 1])
            if metadata:
                writer.add_metadata(metadata)
            buffer = io.BytesIO()
            writer.write(buffer)
        except Exception as exc:  # pypdf exceptions vary
            raise EngineFailureError(f"Failed to assemble document ({exc})") from exc
        return buffer.getvalue()


__all__ = ["DocumentLibrary", "LoadedDocument"]
