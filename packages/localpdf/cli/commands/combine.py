"""CLI command combining PDFs."""

from __future__ import annotations

from pathlib import Path

import click

from ...protocol.messages import CombineRequest, OperationKind
from ..runner import execute, load_document, parse_passwords


@click.command(name="combine")
@click.argument("inputs", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(), help="Output file or directory")
@click.option(
    "--password",
    "passwords",
    multiple=True,
    help="Password as FILE=SECRET for one input, or SECRET for all inputs",
)
def combine(inputs, output, passwords):
    """
    Combine PDFs into one, keeping the order given on the command line.

    Example:

        localpdf combine cover.pdf body.pdf -o book.pdf
    """
    per_file, default = parse_passwords(passwords, [Path(path).name for path in inputs])

    def build(job_id: str) -> CombineRequest:
        documents = []
        for path in inputs:
            documents.append(load_document(path, per_file.get(Path(path).name, default)))
        return CombineRequest(job_id=job_id, documents=tuple(documents))

    execute(OperationKind.COMBINE, build, output, input_count=len(inputs))
