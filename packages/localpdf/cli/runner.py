"""Shared helpers running a job from the command line."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Iterable

from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn

from ..core.utils import resolve_path
from ..engine import JobEngine
from ..protocol.jobs import JobRegistry, JobStatus
from ..protocol.messages import EngineEvent, InputDocument, JobRequest, OperationKind, ProgressEvent

console = Console(stderr=True)


def load_document(path: str | Path, password: str | None = None) -> InputDocument:
    """Read ``path`` into an :class:`InputDocument` named after the file."""

    source = resolve_path(path)
    return InputDocument(name=source.name, data=source.read_bytes(), password=password or None)


def parse_passwords(
    values: Iterable[str],
    names: Iterable[str],
) -> tuple[dict[str, str], str | None]:
    """Split ``NAME=SECRET`` options into per-file passwords and a default.

    A value only counts as ``NAME=SECRET`` when ``NAME`` is one of ``names``;
    anything else, ``=`` included, is the default password.
    """

    known = set(names)
    per_file: dict[str, str] = {}
    default: str | None = None
    for value in values:
        name, separator, secret = value.partition("=")
        if separator and name in known:
            per_file[name] = secret
        else:
            default = value
    return per_file, default


def resolve_destination(output: str | None, output_name: str) -> Path:
    if output is None:
        return Path.cwd() / output_name
    destination = resolve_path(output)
    if destination.is_dir():
        return destination / output_name
    destination.parent.mkdir(parents=True, exist_ok=True)
    return destination


def execute(
    kind: OperationKind,
    build_request,
    output: str | None,
    *,
    input_count: int = 1,
) -> Path:
    """Register a job, run it with a progress bar and write its result.

    ``build_request`` receives the new job id and returns the request.
    Exits with status 1 when the job ends with an error.
    """

    registry = JobRegistry()
    job = registry.create(kind, input_count)
    request: JobRequest = build_request(job.id)
    engine = JobEngine()

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(kind.value.capitalize(), total=100)

        def on_event(event: EngineEvent) -> None:
            registry.apply(event)
            if isinstance(event, ProgressEvent):
                progress.update(task, completed=event.percent, description=event.note or kind.value.capitalize())

        asyncio.run(engine.submit(request, on_event))

    if job.status is not JobStatus.DONE:
        console.print(f"[bold red]✗ Error:[/bold red] {job.error}")
        sys.exit(1)

    destination = resolve_destination(output, job.output_name or "output")
    destination.write_bytes(job.output or b"")
    console.print(f"[bold green]✓ Wrote[/bold green] {destination} [dim]({len(job.output or b'')} bytes)[/dim]")
    return destination


__all__ = ["console", "execute", "load_document", "parse_passwords", "resolve_destination"]
