"""CLI command shrinking a PDF."""

from __future__ import annotations

import click

from ...protocol.messages import CompressionTier, OperationKind, ShrinkRequest
from ..runner import execute, load_document


@click.command(name="shrink")
@click.argument("input_pdf", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--level",
    type=click.Choice([tier.value for tier in CompressionTier]),
    default=CompressionTier.BALANCED.value,
    show_default=True,
    help="Compression tier",
)
@click.option("--output", "-o", type=click.Path(), help="Output file or directory")
@click.option("--password", default=None, help="Password of the input PDF")
def shrink(input_pdf, level, output, password):
    """Rewrite a PDF with object streams and recompressed streams."""

    def build(job_id: str) -> ShrinkRequest:
        return ShrinkRequest(
            job_id=job_id,
            document=load_document(input_pdf, password),
            tier=CompressionTier(level),
        )

    execute(OperationKind.SHRINK, build, output)
