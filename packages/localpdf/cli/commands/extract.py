"""CLI command extracting pages."""

from __future__ import annotations

import click

from ...pages.ranges import parse_page_groups
from ...protocol.messages import ExtractRequest, OperationKind, OutputMode
from ..runner import execute, load_document


@click.command(name="extract")
@click.argument("input_pdf", type=click.Path(exists=True, dir_okay=False))
@click.option("--pages", "-p", required=True, help='Pages such as "1,3,5-7"; separate groups with ";"')
@click.option(
    "--mode",
    type=click.Choice([mode.value for mode in OutputMode]),
    default=OutputMode.SINGLE.value,
    show_default=True,
    help="One PDF, or an archive with one PDF per group",
)
@click.option("--output", "-o", type=click.Path(), help="Output file or directory")
@click.option("--password", default=None, help="Password of the input PDF")
def extract(input_pdf, pages, mode, output, password):
    """
    Extract selected pages.

    Examples:

        localpdf extract report.pdf -p "1-3,7"

        localpdf extract report.pdf -p "1-2;5;8-9" --mode archive
    """
    selection = parse_page_groups(pages)

    def build(job_id: str) -> ExtractRequest:
        return ExtractRequest(
            job_id=job_id,
            document=load_document(input_pdf, password),
            pages=selection.pages,
            groups=selection.groups,
            mode=OutputMode(mode),
        )

    execute(OperationKind.EXTRACT, build, output)
