"""Job engine: accepts requests, dispatches operations and reports events.

Every accepted job ends with exactly one :class:`ResultEvent` or
:class:`ErrorEvent`, whatever happens inside the operation. Payloads that
cannot be decoded produce a single :class:`ErrorEvent` for the job id that
could be recovered, or :data:`UNKNOWN_JOB_ID`.
"""

from __future__ import annotations

import asyncio
from typing import Any

from .core.config import EngineSettings
from .core.exceptions import LocalPdfError, ProtocolError
from .core.utils import get_logger
from .library.documents import DocumentLibrary
from .library.render import RenderEngine
from .protocol.messages import (
    CombineRequest,
    EngineEvent,
    ErrorEvent,
    ExtractRequest,
    RasterizeRequest,
    ShrinkRequest,
    decode_request,
)
from .rewrite.adapter import RewriteAdapter, get_rewrite_adapter
from .tools import load_builtin_operations
from .tools.common.interfaces import JobContext
from .tools.common.pipeline import registry
from .tools.common.progress import EventSink, ProgressReporter

LOGGER = get_logger("localpdf.engine")

_REQUEST_TYPES = (CombineRequest, ExtractRequest, ShrinkRequest, RasterizeRequest)


class JobEngine:
    """Runs one job at a time against shared collaborators."""

    def __init__(
        self,
        *,
        rewrite: RewriteAdapter | None = None,
        documents: DocumentLibrary | None = None,
        renderer: RenderEngine | None = None,
        settings: EngineSettings | None = None,
    ) -> None:
        load_builtin_operations()
        self.settings = settings or EngineSettings.from_env()
        self.settings.apply_logging()
        self.rewrite = rewrite or get_rewrite_adapter(self.settings)
        self.documents = documents or DocumentLibrary()
        self.renderer = renderer or RenderEngine(jpeg_quality=self.settings.jpeg_quality)

    async def submit(self, request: Any, emit: EventSink) -> EngineEvent:
        """Run ``request`` (typed or a plain mapping) and return its terminal event."""

        if not isinstance(request, _REQUEST_TYPES):
            try:
                request = decode_request(request)
            except ProtocolError as exc:
                LOGGER.error("Rejected request for job %s: %s", exc.job_id, exc)
                event = ErrorEvent(job_id=exc.job_id, message=str(exc))
                emit(event)
                return event

        reporter = ProgressReporter(request.job_id, emit)
        context = JobContext(
            request=request,
            reporter=reporter,
            rewrite=self.rewrite,
            documents=self.documents,
            renderer=self.renderer,
        )
        LOGGER.debug("Starting %s job %s", request.kind.value, request.job_id)
        try:
            operation = registry.create(request.kind, context)
            result = await operation.run()
        except LocalPdfError as exc:
            LOGGER.error("Job %s failed: %s", request.job_id, exc)
            return reporter.fail(str(exc))
        except Exception as exc:  # any failure must still terminate the job
            LOGGER.exception("Job %s failed unexpectedly", request.job_id)
            return reporter.fail(str(exc) or exc.__class__.__name__)

        LOGGER.info("Job %s finished: %s (%d bytes)", request.job_id, result.output_name, len(result.payload))
        return reporter.succeed(result)


def run_job(request: Any, *, engine: JobEngine | None = None) -> list[EngineEvent]:
    """Run ``request`` synchronously and return every event it produced."""

    events: list[EngineEvent] = []
    asyncio.run((engine or JobEngine()).submit(request, events.append))
    return events


__all__ = ["JobEngine", "run_job"]
