"""
Node placement on the grid.

Maps each node's continuous coordinates onto grid-line indices and
resolves the text the node displays.
"""

from bisect import bisect_left
from pathlib import PurePosixPath
from typing import List, Tuple

from .grid import GridAxes
from .models import CanvasNode, GridSpan, Number, NodePlacement


def node_content(node: CanvasNode) -> str:
    """
    Return the display text for a node based on its type.

    - "text" nodes show their raw text
    - "file" nodes show the file's base name
    - anything else shows a "[<type> node]" placeholder
    """
    if node.type == "text":
        return node.text or ""
    if node.type == "file":
        return PurePosixPath(node.file or "").name
    return f"[{node.type} node]"


def line_index(values: List[Number], boundary: Number) -> int:
    """0-based index of the first grid line >= boundary."""
    return bisect_left(values, boundary)


def axis_span(values: List[Number], start: Number, end: Number) -> Tuple[int, int]:
    """
    Return (start_index, span) on one axis.

    start_index is 0-based; span is the number of cells between the line at
    start and the line at end.
    """
    first = line_index(values, start)
    return first, line_index(values, end) - first


class PlacementResolver:
    """
    Resolves nodes onto a pair of expanded grid axes.

    Node boundaries were inserted verbatim into the axes before expansion,
    so every boundary lands exactly on a grid line.
    """

    def __init__(self, axes: GridAxes):
        self.axes = axes

    def span(self, node: CanvasNode) -> GridSpan:
        """Compute the 1-based grid span for a node."""
        row, row_span = axis_span(self.axes.y_values, node.y, node.bottom)
        column, column_span = axis_span(self.axes.x_values, node.x, node.right)
        return GridSpan(
            row=row + 1,
            row_span=row_span,
            column=column + 1,
            column_span=column_span,
        )

    def resolve(self, node: CanvasNode) -> NodePlacement:
        """Place a node and resolve its display content."""
        return NodePlacement(node=node, span=self.span(node), content=node_content(node))

    def resolve_all(self, nodes: List[CanvasNode]) -> List[NodePlacement]:
        """Place every node, preserving input order."""
        return [self.resolve(node) for node in nodes]
