"""Operation recompressing a document through the rewrite engine."""

from __future__ import annotations

from ...core.utils import base_name, get_logger
from ...protocol.messages import PDF_MEDIA_TYPE, CompressionTier, OperationKind, ResultEvent, ShrinkRequest
from ..common.interfaces import BaseOperation
from ..common.pipeline import register_operation

LOGGER = get_logger("localpdf.tools.shrink")


@register_operation(OperationKind.SHRINK)
class ShrinkOperation(BaseOperation):
    async def run(self) -> ResultEvent:
        request: ShrinkRequest = self.request
        document = request.document
        rewrite = self.context.rewrite

        self.progress(5, "Initializing rewrite engine")
        await rewrite.ensure_ready()
        unlocked = await self.decrypt(document)

        self.progress(30, "Rewriting PDF")
        payload = await rewrite.recompress(unlocked, request.tier)
        LOGGER.info(
            "Shrunk %s from %d to %d bytes (tier %s)",
            document.name,
            len(document.data),
            len(payload),
            CompressionTier(request.tier).value,
        )
        self.progress(100, "Done")
        return self.result(f"compressed_{base_name(document.name)}.pdf", payload, PDF_MEDIA_TYPE)
