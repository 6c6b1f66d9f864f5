"""Operation appending the pages of several documents into one."""

from __future__ import annotations

import asyncio

from ...core.exceptions import ValidationError
from ...core.utils import get_logger
from ...library.documents import LoadedDocument
from ...protocol.messages import PDF_MEDIA_TYPE, CombineRequest, OperationKind, ResultEvent
from ..common.interfaces import BaseOperation
from ..common.pipeline import register_operation
from ..common.progress import phase_percent

LOGGER = get_logger("localpdf.tools.combine")

MIN_DOCUMENTS = 2
OUTPUT_NAME = "merged.pdf"


@register_operation(OperationKind.COMBINE)
class CombineOperation(BaseOperation):
    """Append every page of every input, in the order the inputs were given.

    Metadata of the first input is carried over to the combined document.
    """

    async def run(self) -> ResultEvent:
        request: CombineRequest = self.request
        documents = request.documents
        if len(documents) < MIN_DOCUMENTS:
            raise ValidationError(f"Combine needs at least {MIN_DOCUMENTS} PDFs.")

        library = self.context.documents
        self.progress(5, "Loading PDFs")
        loaded: list[LoadedDocument] = []
        for index, document in enumerate(documents):
            self.progress(phase_percent(index, len(documents), 10, 70), f"Importing {document.name}")
            unlocked = await self.decrypt(document)
            loaded.append(await asyncio.to_thread(library.load, unlocked, name=document.name))

        self.progress(80, "Saving")
        payload = await asyncio.to_thread(
            library.assemble,
            [(document, None) for document in loaded],
            metadata=loaded[0].metadata(),
        )
        LOGGER.info(
            "Combined %d PDFs (%d pages)",
            len(loaded),
            sum(document.page_count for document in loaded),
        )
        self.progress(100, "Done")
        return self.result(OUTPUT_NAME, payload, PDF_MEDIA_TYPE)
