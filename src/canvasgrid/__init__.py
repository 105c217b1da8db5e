"""
canvasgrid - Canvas diagrams as CSS grid documents

A Python library for converting node-and-edge canvases (boxes with absolute
positions plus connections between them) into HTML documents laid out on a
row/column grid, with each connection drawn as a short directional stub.

Example:
    >>> from canvasgrid import CanvasConverter
    >>> converter = CanvasConverter()
    >>> html = converter.convert_text(open("board.canvas").read())

Debug Mode Example:
    >>> converter = CanvasConverter()
    >>> html = converter.convert_text(text, debug=True)
    >>> trace = converter.get_trace()
    >>> print(trace.summary())
"""

from .converter import CanvasConverter, GridLayout
from .export import BatchResult, convert_directory, convert_file
from .graph import CanvasGraph, build_graph
from .grid import CELLS_BETWEEN, GridAxes, expand_axis_values
from .models import (
    Canvas,
    CanvasEdge,
    CanvasNode,
    Direction,
    EdgeStub,
    GridCell,
    GridSpan,
    NodePlacement,
)
from .parser import CanvasParseError, CanvasParser, parse_canvas
from .placement import PlacementResolver, node_content
from .png_renderer import PNGRenderer
from .renderer import HtmlRenderer
from .router import EdgeRouter, OccupancyGrid, RoutingResult, preferred_direction
from .tracer import ConversionTrace, PipelineStage, StubPlacement

__version__ = "0.3.0"

__all__ = [
    # Main API
    "CanvasConverter",
    "GridLayout",
    "convert_file",
    "convert_directory",
    "BatchResult",
    # Models
    "Canvas",
    "CanvasNode",
    "CanvasEdge",
    "Direction",
    "GridSpan",
    "GridCell",
    "EdgeStub",
    "NodePlacement",
    # Parser
    "CanvasParser",
    "CanvasParseError",
    "parse_canvas",
    # Layout
    "GridAxes",
    "CELLS_BETWEEN",
    "expand_axis_values",
    "PlacementResolver",
    "node_content",
    "CanvasGraph",
    "build_graph",
    # Router
    "EdgeRouter",
    "OccupancyGrid",
    "RoutingResult",
    "preferred_direction",
    # Renderers
    "HtmlRenderer",
    "PNGRenderer",
    # Debug/Tracing
    "ConversionTrace",
    "PipelineStage",
    "StubPlacement",
]
