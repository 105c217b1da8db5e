"""
File export functionality for canvas conversion.

This module handles reading canvas files and writing converted output:
- HTML documents (.html) - the grid-based rendering
- PNG previews (.png) - optional raster rendering of the same grid
- Trace dumps (.trace.txt) - optional debug output

convert_directory() is the batch driver: it converts every .canvas file in
a directory and writes one output document per input.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .converter import CanvasConverter
from .parser import CanvasParseError

logger = logging.getLogger(__name__)

CANVAS_SUFFIX = ".canvas"

PathLike = Union[str, Path]


def ensure_directory(path: PathLike) -> Path:
    """Create a directory (and parents) if it does not exist."""
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def read_text(path: PathLike) -> str:
    """
    Read a UTF-8 text file.

    Raises:
        CanvasParseError: If the file is not valid UTF-8
    """
    try:
        return Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise CanvasParseError(f"Not valid UTF-8: {e}") from e


def write_text(path: PathLike, data: str) -> None:
    """Write a UTF-8 text file."""
    Path(path).write_text(data, encoding="utf-8")


def output_path_for(input_path: PathLike, output_dir: PathLike, suffix: str = ".html") -> Path:
    """Output file path: the input's name with its extension replaced."""
    return Path(output_dir) / Path(input_path).with_suffix(suffix).name


def find_canvas_files(input_dir: PathLike) -> List[Path]:
    """Sorted .canvas files directly inside input_dir."""
    return sorted(
        path
        for path in Path(input_dir).iterdir()
        if path.is_file() and path.suffix == CANVAS_SUFFIX
    )


@dataclass
class BatchResult:
    """
    Outcome of a batch conversion.

    Attributes:
        converted: (input, output) pairs that were written.
        failed: (input, error message) pairs that were skipped.
    """

    converted: List[Tuple[Path, Path]] = field(default_factory=list)
    failed: List[Tuple[Path, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def convert_file(
    input_path: PathLike,
    output_dir: PathLike,
    converter: Optional[CanvasConverter] = None,
    png: bool = False,
    trace: bool = False,
) -> Path:
    """
    Convert one canvas file and write its HTML document.

    Args:
        input_path: Path to the .canvas file
        output_dir: Directory to write output into (created if missing)
        converter: Converter to use (default settings if None)
        png: Also write a PNG preview next to the HTML
        trace: Also write a .trace.txt debug dump

    Returns:
        Path of the written HTML document

    Raises:
        OSError: If the file cannot be read or written
        CanvasParseError: If the file is not a valid canvas document
    """
    converter = converter or CanvasConverter()
    input_path = Path(input_path)
    ensure_directory(output_dir)

    canvas = converter.parser.parse(read_text(input_path))
    html = converter.convert(canvas, debug=trace, source=input_path.name)

    output_path = output_path_for(input_path, output_dir)
    write_text(output_path, html)

    if trace:
        converter.get_trace().dump_to_file(
            str(output_path_for(input_path, output_dir, ".trace.txt"))
        )
    if png:
        converter.save_png(canvas, str(output_path_for(input_path, output_dir, ".png")))

    return output_path


def convert_directory(
    input_dir: PathLike,
    output_dir: PathLike,
    converter: Optional[CanvasConverter] = None,
    png: bool = False,
    trace: bool = False,
) -> BatchResult:
    """
    Convert every .canvas file in input_dir.

    Each file is independent; a file that cannot be read or parsed is logged
    and skipped without stopping the batch.

    Args:
        input_dir: Directory containing .canvas files
        output_dir: Directory to write output into (created if missing)
        converter: Converter to use (default settings if None)
        png: Also write PNG previews
        trace: Also write trace dumps

    Returns:
        BatchResult listing converted and failed files
    """
    converter = converter or CanvasConverter()
    ensure_directory(output_dir)
    result = BatchResult()

    for input_path in find_canvas_files(input_dir):
        try:
            output_path = convert_file(
                input_path, output_dir, converter=converter, png=png, trace=trace
            )
        except (OSError, CanvasParseError) as e:
            logger.warning("Failed to convert %s: %s", input_path.name, e)
            result.failed.append((input_path, str(e)))
            continue

        logger.info("Converted %s to HTML", input_path.name)
        result.converted.append((input_path, output_path))

    return result
