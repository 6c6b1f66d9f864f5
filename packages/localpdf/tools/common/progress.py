"""Progress reporting with the one-terminal-event guarantee."""

from __future__ import annotations

from typing import Callable

from ...protocol.messages import EngineEvent, ErrorEvent, ProgressEvent, ResultEvent

EventSink = Callable[[EngineEvent], None]


def phase_percent(index: int, total: int, low: int, high: int) -> int:
    """Interpolate the percent for unit ``index`` of ``total`` within ``low..high``."""

    if total <= 0:
        return low
    return low + (index * (high - low)) // total


class ProgressReporter:
    """Emits events for one job.

    Percentages are clamped to ``0..100`` and never decrease. Exactly one
    terminal event may be emitted; anything after it is refused.
    """

    def __init__(self, job_id: str, emit: EventSink) -> None:
        self.job_id = job_id
        self._emit = emit
        self._percent = 0
        self._terminal: EngineEvent | None = None

    @property
    def percent(self) -> int:
        return self._percent

    @property
    def terminal(self) -> EngineEvent | None:
        return self._terminal

    def _check_open(self) -> None:
        if self._terminal is not None:
            raise RuntimeError(f"Job {self.job_id} already finished")

    def progress(self, percent: int, note: str | None = None) -> ProgressEvent:
        self._check_open()
        self._percent = max(self._percent, min(100, max(0, int(percent))))
        event = ProgressEvent(job_id=self.job_id, percent=self._percent, note=note)
        self._emit(event)
        return event

    def succeed(self, event: ResultEvent) -> ResultEvent:
        self._check_open()
        self._terminal = event
        self._emit(event)
        return event

    def fail(self, message: str) -> ErrorEvent:
        self._check_open()
        event = ErrorEvent(job_id=self.job_id, message=message)
        self._terminal = event
        self._emit(event)
        return event


__all__ = ["EventSink", "ProgressReporter", "phase_percent"]
