"""CLI command rendering pages to images."""

from __future__ import annotations

import click

from ...protocol.messages import ImageFormat, OperationKind, RasterizeRequest
from ..runner import execute, load_document


@click.command(name="rasterize")
@click.argument("input_pdf", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format",
    "image_format",
    type=click.Choice([fmt.value for fmt in ImageFormat]),
    default=ImageFormat.PNG.value,
    show_default=True,
)
@click.option("--dpi", default=150, show_default=True, type=int, help="Resolution in dots per inch")
@click.option("--output", "-o", type=click.Path(), help="Output file or directory")
@click.option("--password", default=None, help="Password of the input PDF")
def rasterize(input_pdf, image_format, dpi, output, password):
    """
    Render every page to PNG or JPG images packed in a ZIP archive.

    Example:

        localpdf rasterize slides.pdf --format jpg --dpi 200
    """

    def build(job_id: str) -> RasterizeRequest:
        return RasterizeRequest(
            job_id=job_id,
            document=load_document(input_pdf, password),
            format=ImageFormat(image_format),
            dpi=dpi,
        )

    execute(OperationKind.RASTERIZE, build, output)
