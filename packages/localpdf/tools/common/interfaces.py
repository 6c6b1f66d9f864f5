"""Core interfaces and context objects shared by localpdf operations."""

from __future__ import annotations

from dataclasses import dataclass

from ...library.documents import DocumentLibrary
from ...library.render import RenderEngine
from ...protocol.messages import InputDocument, JobRequest, OperationKind, ResultEvent
from ...rewrite.adapter import RewriteAdapter
from .progress import ProgressReporter


@dataclass
class JobContext:
    """Holds the request and collaborators for one job invocation."""

    request: JobRequest
    reporter: ProgressReporter
    rewrite: RewriteAdapter
    documents: DocumentLibrary
    renderer: RenderEngine

    @property
    def job_id(self) -> str:
        return self.request.job_id


class BaseOperation:
    """Base class for all dispatchable operations."""

    kind: OperationKind

    def __init__(self, context: JobContext) -> None:
        self.context = context

    @property
    def request(self) -> JobRequest:
        return self.context.request

    def progress(self, percent: int, note: str | None = None) -> None:
        self.context.reporter.progress(percent, note)

    async def decrypt(self, document: InputDocument) -> bytes:
        return await self.context.rewrite.decrypt(
            document.data,
            document.password,
            label=document.name,
        )

    def result(self, output_name: str, payload: bytes, media_type: str) -> ResultEvent:
        return ResultEvent(
            job_id=self.context.job_id,
            output_name=output_name,
            payload=payload,
            media_type=media_type,
        )

    async def run(self) -> ResultEvent:  # pragma: no cover - implemented by subclasses
        raise NotImplementedError
