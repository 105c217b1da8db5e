"""
Grid axis construction.

Derives the discrete grid lines for each axis from node extents, then
subdivides every gap so edge stubs have free cells to occupy between
nodes that touch or sit close together.
"""

from dataclasses import dataclass
from typing import Iterable, List

from .models import CanvasNode, Number

# Intermediate grid lines inserted between each pair of node boundaries
CELLS_BETWEEN = 5


def unique_x_values(nodes: Iterable[CanvasNode]) -> List[Number]:
    """Sorted unique left and right edges of all nodes."""
    values = set()
    for node in nodes:
        values.add(node.x)
        values.add(node.x + node.width)
    return sorted(values)


def unique_y_values(nodes: Iterable[CanvasNode]) -> List[Number]:
    """Sorted unique top and bottom edges of all nodes."""
    values = set()
    for node in nodes:
        values.add(node.y)
        values.add(node.y + node.height)
    return sorted(values)


def expand_axis_values(
    values: List[Number], cells_between: int = CELLS_BETWEEN
) -> List[Number]:
    """
    Insert evenly spaced lines between each pair of consecutive values.

    The boundary values are kept in place; only interior points are added,
    computed as current + step * j so node boundaries stay exact.

    Args:
        values: Sorted, duplicate-free axis values
        cells_between: Number of lines to add inside each gap

    Returns:
        The expanded list of grid lines
    """
    expanded: List[Number] = []
    for i, current in enumerate(values):
        expanded.append(current)
        if i < len(values) - 1:
            step = (values[i + 1] - current) / (cells_between + 1)
            for j in range(1, cells_between + 1):
                expanded.append(current + step * j)
    return expanded


def build_axis(values: List[Number], cells_between: int = CELLS_BETWEEN) -> List[Number]:
    """
    Grid lines for one axis from its unique node boundaries.

    An axis bounded by a single pair of values (one node, or nodes that all
    share the same boundaries) is returned as-is: there is nothing between
    nodes to route through.
    """
    if len(values) <= 2:
        return list(values)
    return expand_axis_values(values, cells_between)


@dataclass(frozen=True)
class GridAxes:
    """
    The expanded grid lines for both axes.

    Attributes:
        x_values: Column lines, ascending.
        y_values: Row lines, ascending.
    """

    x_values: List[Number]
    y_values: List[Number]

    @property
    def columns(self) -> int:
        """Number of grid columns (cells between column lines)."""
        return max(len(self.x_values) - 1, 0)

    @property
    def rows(self) -> int:
        """Number of grid rows (cells between row lines)."""
        return max(len(self.y_values) - 1, 0)

    @classmethod
    def from_nodes(
        cls, nodes: List[CanvasNode], cells_between: int = CELLS_BETWEEN
    ) -> "GridAxes":
        """Build and expand both axes for a node collection."""
        return cls(
            x_values=build_axis(unique_x_values(nodes), cells_between),
            y_values=build_axis(unique_y_values(nodes), cells_between),
        )
