"""CLI entry point for canvasgrid."""

import logging
import sys

import click

from canvasgrid.converter import CanvasConverter
from canvasgrid.export import convert_directory
from canvasgrid.grid import CELLS_BETWEEN
from canvasgrid.router import DEFAULT_EDGE_COLOR


@click.command()
@click.argument("input_dir", required=False, default="data/in", type=click.Path(exists=True, file_okay=False))
@click.argument("output_dir", required=False, default="data/out", type=click.Path(file_okay=False))
@click.option("--cells-between", "-c", type=click.IntRange(min=0), default=CELLS_BETWEEN, help="Extra grid lines between node boundaries")
@click.option("--default-color", type=str, default=DEFAULT_EDGE_COLOR, help="Stub colour for edges without one")
@click.option("--title", "-t", type=str, default="Canvas View", help="Title of generated documents")
@click.option("--png", "png", is_flag=True, help="Also write a PNG preview per canvas")
@click.option("--trace", "trace", is_flag=True, help="Also write a .trace.txt debug dump per canvas")
@click.option("--verbose", "-v", is_flag=True, help="Log routing decisions")
def main(
    input_dir: str,
    output_dir: str,
    cells_between: int,
    default_color: str,
    title: str,
    png: bool,
    trace: bool,
    verbose: bool,
) -> None:
    """Convert .canvas files in INPUT_DIR to grid-based HTML in OUTPUT_DIR."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        converter = CanvasConverter(
            cells_between=cells_between, default_edge_color=default_color, title=title
        )
    except ValueError as e:
        click.echo(f"error: {e}", err=True)
        sys.exit(2)

    result = convert_directory(input_dir, output_dir, converter=converter, png=png, trace=trace)

    click.echo(f"{len(result.converted)} canvas file(s) written to {output_dir}")
    if not result.ok:
        click.echo(f"error: {len(result.failed)} file(s) failed to convert", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
