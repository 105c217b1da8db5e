"""
Main canvas converter module.

Combines grid construction, node placement, edge routing and rendering to
turn a canvas into a grid-based HTML document.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .graph import CanvasGraph, build_graph
from .grid import CELLS_BETWEEN, GridAxes, unique_x_values, unique_y_values
from .models import Canvas, NodePlacement
from .parser import CanvasParser
from .placement import PlacementResolver
from .png_renderer import PNGRenderer
from .renderer import HtmlRenderer
from .router import DEFAULT_EDGE_COLOR, EdgeRouter, RoutingResult
from .tracer import ConversionTrace

logger = logging.getLogger(__name__)


@dataclass
class GridLayout:
    """
    Result of laying out one canvas.

    Attributes:
        axes: Expanded grid lines for both axes.
        placements: Node placements in input order.
        routing: Routed stubs and dropped edges.
    """

    axes: GridAxes
    placements: List[NodePlacement]
    routing: RoutingResult


class CanvasConverter:
    """
    Convert canvases into grid-based HTML documents.

    Example:
        >>> converter = CanvasConverter()
        >>> html = converter.convert_text(open("board.canvas").read())
    """

    def __init__(
        self,
        cells_between: int = CELLS_BETWEEN,
        default_edge_color: str = DEFAULT_EDGE_COLOR,
        title: str = "Canvas View",
        min_track_size: int = 8,
        max_width: int = 1200,
    ):
        """
        Initialize the converter.

        Args:
            cells_between: Extra grid lines inserted between node boundaries
            default_edge_color: Stub colour for edges without one
            title: Title of generated documents
            min_track_size: Minimum grid track size in pixels
            max_width: Maximum width of the grid container in pixels
        """
        if isinstance(cells_between, bool) or not isinstance(cells_between, int):
            raise ValueError("cells_between must be an integer")
        if cells_between < 0:
            raise ValueError("cells_between must be >= 0")
        if min_track_size < 0:
            raise ValueError("min_track_size must be >= 0")
        if max_width <= 0:
            raise ValueError("max_width must be > 0")
        if not default_edge_color:
            raise ValueError("default_edge_color must not be empty")

        self.cells_between = cells_between
        self.default_edge_color = default_edge_color
        self.title = title
        self.min_track_size = min_track_size
        self.max_width = max_width

        self.parser = CanvasParser()
        self.html_renderer = HtmlRenderer(
            title=title, min_track_size=min_track_size, max_width=max_width
        )
        self._trace: Optional[ConversionTrace] = None

    def layout(
        self, canvas: Canvas, trace: Optional[ConversionTrace] = None
    ) -> GridLayout:
        """
        Run the layout pipeline: axes, placements, then routing.

        A fresh occupancy grid is used for every call.

        Args:
            canvas: The canvas to lay out
            trace: Optional trace to record pipeline stages into

        Returns:
            GridLayout with everything the renderers need
        """
        axes = GridAxes.from_nodes(canvas.nodes, self.cells_between)
        logger.debug(
            "Grid for %d nodes: %d columns x %d rows",
            len(canvas.nodes),
            axes.columns,
            axes.rows,
        )
        if trace is not None:
            trace.add_stage(
                "axes",
                {
                    "raw_x_lines": len(unique_x_values(canvas.nodes)),
                    "raw_y_lines": len(unique_y_values(canvas.nodes)),
                    "columns": axes.columns,
                    "rows": axes.rows,
                },
            )

        placements = PlacementResolver(axes).resolve_all(canvas.nodes)
        if trace is not None:
            trace.add_stage(
                "placements", {p.node.id: p.span for p in placements}
            )

        graph = build_graph(canvas)
        if trace is not None:
            self._trace_graph(trace, graph)

        router = EdgeRouter(
            axes, default_color=self.default_edge_color, placements=placements
        )
        routing = router.route_edges(canvas.edges, graph)
        if trace is not None:
            for stub in routing.stubs:
                trace.add_stub(
                    stub.edge_id,
                    stub.column,
                    stub.row,
                    stub.direction.value,
                    routing.preferred[stub.edge_id].value,
                )
            trace.add_stage(
                "routing",
                {
                    "stubs": len(routing.stubs),
                    "dropped": list(routing.dropped),
                    "stub_cells": len(router.grid.stub_cells()),
                },
            )

        return GridLayout(axes=axes, placements=placements, routing=routing)

    def _trace_graph(self, trace: ConversionTrace, graph: CanvasGraph) -> None:
        trace.add_stage(
            "graph",
            {
                "nodes": graph.graph.number_of_nodes(),
                "edges": graph.graph.number_of_edges(),
                "dangling_edges": [e.id for e in graph.dangling_edges],
                "components": graph.component_count(),
                "isolated_nodes": graph.isolated_nodes(),
            },
        )

    def convert(self, canvas: Canvas, debug: bool = False, source: str = "") -> str:
        """
        Convert a canvas to an HTML document.

        Args:
            canvas: The decoded canvas
            debug: If True, record a ConversionTrace (see get_trace())
            source: Name recorded in the trace, usually the input file name

        Returns:
            The HTML document as a string
        """
        trace = ConversionTrace(source=source) if debug else None
        self._trace = trace

        result = self.layout(canvas, trace)
        html = self.html_renderer.render(
            result.axes, result.placements, result.routing.stubs
        )

        if trace is not None:
            trace.add_stage("assembled", {"length": len(html)})
        return html

    def convert_text(self, input_text: str, debug: bool = False, source: str = "") -> str:
        """
        Parse canvas JSON text and convert it.

        Raises:
            CanvasParseError: If the text is not a valid canvas document
        """
        canvas = self.parser.parse(input_text)
        return self.convert(canvas, debug=debug, source=source)

    def get_trace(self) -> Optional[ConversionTrace]:
        """Trace of the last convert() call made with debug=True, else None."""
        return self._trace

    def save_html(self, canvas: Canvas, filename: str) -> None:
        """
        Convert a canvas and save the document.

        Args:
            canvas: The decoded canvas
            filename: Output filename (should end in .html)
        """
        html = self.convert(canvas)
        Path(filename).write_text(html, encoding="utf-8")

    def save_png(
        self,
        canvas: Canvas,
        filename: str,
        cell_size: int = 16,
        margin: int = 20,
        font_size: int = 11,
        font_path: Optional[str] = None,
        scale: int = 2,
        show_grid: bool = True,
    ) -> None:
        """
        Lay out a canvas and save a PNG preview of the grid.

        Args:
            canvas: The decoded canvas
            filename: Output filename (should end in .png)
            cell_size: Size of one grid cell in pixels (before scaling)
            margin: Margin around the grid in pixels (before scaling)
            font_size: Label font size in points (before scaling)
            font_path: Optional path to a TrueType font
            scale: Resolution multiplier for crisp output
            show_grid: Whether to draw grid lines
        """
        result = self.layout(canvas)
        renderer = PNGRenderer(
            cell_size=cell_size,
            margin=margin,
            font_size=font_size,
            font_path=font_path,
            scale=scale,
            show_grid=show_grid,
        )
        renderer.render(
            result.axes, result.placements, result.routing.stubs, output_path=filename
        )
