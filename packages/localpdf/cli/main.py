"""Entry point of the ``localpdf`` command."""

from __future__ import annotations

import logging

import click

from .. import __version__
from .commands.combine import combine
from .commands.extract import extract
from .commands.rasterize import rasterize
from .commands.shrink import shrink


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """
    localpdf - combine, extract, shrink and rasterize PDFs locally.
    """
    if verbose:
        logging.getLogger("localpdf").setLevel(logging.DEBUG)


for command in (combine, extract, shrink, rasterize):
    cli.add_command(command)


def main() -> None:
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
