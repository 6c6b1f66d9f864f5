"""Requester-side job registry tracking the lifecycle of submitted jobs."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum

from ..core.utils import get_logger
from .messages import EngineEvent, ErrorEvent, OperationKind, ProgressEvent, ResultEvent

LOGGER = get_logger("localpdf.jobs")


class JobStatus(str, Enum):
    QUEUED = "queued"
    RUNNING = "running"
    DONE = "done"
    ERROR = "error"

    @property
    def finished(self) -> bool:
        return self in (JobStatus.DONE, JobStatus.ERROR)


def new_job_id(created_at: float) -> str:
    return f"job_{uuid.uuid4().hex[:12]}_{int(created_at * 1000):x}"


@dataclass
class Job:
    """One submitted transformation and its current state."""

    id: str
    kind: OperationKind
    created_at: float
    input_count: int = 1
    status: JobStatus = JobStatus.QUEUED
    progress: int = 0
    note: str | None = None
    output_name: str | None = None
    output: bytes | None = field(default=None, repr=False)
    media_type: str | None = None
    error: str | None = None

    def apply(self, event: EngineEvent) -> bool:
        """Apply ``event`` and return ``True`` when the job changed.

        Finished jobs ignore every further event.
        """

        if self.status.finished:
            LOGGER.warning("Ignoring %s for finished job %s", type(event).__name__, self.id)
            return False

        if isinstance(event, ProgressEvent):
            self.status = JobStatus.RUNNING
            self.progress = max(self.progress, min(100, max(0, event.percent)))
            self.note = event.note
        elif isinstance(event, ResultEvent):
            self.status = JobStatus.DONE
            self.progress = 100
            self.output_name = event.output_name
            self.output = event.payload
            self.media_type = event.media_type
        elif isinstance(event, ErrorEvent):
            self.status = JobStatus.ERROR
            self.error = event.message
        else:  # pragma: no cover - closed event set
            raise TypeError(f"Unsupported event: {event!r}")
        return True


class JobRegistry:
    """Registry owning all jobs created during the current session."""

    def __init__(self) -> None:
        self._jobs: dict[str, Job] = {}

    def create(self, kind: OperationKind, input_count: int = 1) -> Job:
        created_at = time.time()
        job_id = new_job_id(created_at)
        while job_id in self._jobs:  # pragma: no cover - uuid collision
            job_id = new_job_id(created_at)
        job = Job(id=job_id, kind=OperationKind(kind), created_at=created_at, input_count=input_count)
        self._jobs[job_id] = job
        LOGGER.debug("Created job %s (%s)", job_id, job.kind.value)
        return job

    def get(self, job_id: str) -> Job | None:
        return self._jobs.get(job_id)

    def apply(self, event: EngineEvent) -> Job | None:
        job = self._jobs.get(event.job_id)
        if job is None:
            LOGGER.warning("Event for unknown job %s", event.job_id)
            return None
        job.apply(event)
        return job

    def jobs(self) -> list[Job]:
        """Return all jobs, newest first."""

        return list(reversed(self._jobs.values()))

    def clear_finished(self) -> int:
        finished = [job_id for job_id, job in self._jobs.items() if job.status.finished]
        for job_id in finished:
            del self._jobs[job_id]
        return len(finished)

    def __len__(self) -> int:
        return len(self._jobs)


__all__ = ["Job", "JobRegistry", "JobStatus", "new_job_id"]
