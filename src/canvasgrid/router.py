"""
Edge routing module for canvas-to-grid conversion.

Each edge is drawn as a short stub in one free grid cell just outside its
source node:
- The preferred side is picked from the relative position of the target
- Candidate cells along that side are tried from the middle outwards
- When the preferred side is full, the other sides are tried in a fixed
  order (N, S, E, W)
- A claimed cell is never reused by a later edge in the same pass

Cells covered by a node are off limits, so a stub never sits inside another
node. Nodes that enclose the source, such as a group around it, are the
exception: their cells stay usable for the source's stubs.

Routing is best-effort. An edge with a missing endpoint, or with no free
cell on any side, is dropped without raising.

Only the source node is considered when looking for a cell; the target
side is never reserved. A stub marks where an edge leaves, not where it
arrives.
"""

import logging
from dataclasses import dataclass, field
from typing import Collection, Dict, FrozenSet, List, Optional, Tuple

from .graph import CanvasGraph
from .grid import GridAxes
from .models import (
    FALLBACK_ORDER,
    CanvasEdge,
    CanvasNode,
    Direction,
    EdgeStub,
    GridCell,
    GridSpan,
    NodePlacement,
)
from .placement import PlacementResolver, line_index

logger = logging.getLogger(__name__)

DEFAULT_EDGE_COLOR = "#666"

# Stub line segments in a 100x100 cell: from the edge facing the source
# node to the cell centre
STUB_SEGMENTS: Dict[Direction, Tuple[Tuple[int, int], Tuple[int, int]]] = {
    Direction.NORTH: ((50, 100), (50, 50)),
    Direction.SOUTH: ((50, 0), (50, 50)),
    Direction.EAST: ((0, 50), (50, 50)),
    Direction.WEST: ((100, 50), (50, 50)),
}


def stub_path(direction: Direction) -> str:
    """SVG path data for a stub in a 100x100 viewBox."""
    (x0, y0), (x1, y1) = STUB_SEGMENTS[direction]
    return f"M{x0} {y0} L{x1} {y1}"


def preferred_direction(source: CanvasNode, target: CanvasNode) -> Direction:
    """
    Return the side of source that faces target.

    Horizontal wins only when strictly dominant; ties go vertical.
    """
    dx = target.x - source.x
    dy = target.y - source.y
    if abs(dx) > abs(dy):
        return Direction.EAST if dx > 0 else Direction.WEST
    return Direction.SOUTH if dy > 0 else Direction.NORTH


def center_out(cells: List[Tuple[int, int]]) -> List[Tuple[int, int]]:
    """
    Reorder cells starting at the middle and alternating outwards.

    [a, b, c, d, e] -> [c, b, d, a, e]
    """
    if len(cells) <= 1:
        return list(cells)

    mid = len(cells) // 2
    ordered = [cells[mid]]
    before = mid - 1
    after = mid + 1
    while before >= 0 or after < len(cells):
        if before >= 0:
            ordered.append(cells[before])
            before -= 1
        if after < len(cells):
            ordered.append(cells[after])
            after += 1
    return ordered


def side_cells(
    node: CanvasNode, axes: GridAxes, direction: Direction
) -> List[Tuple[int, int]]:
    """
    Return the (column, row) cells bordering one side of a node.

    Cells are 0-based and ordered by closeness to the middle of the side.
    Cells may fall outside the grid; callers bounds-check them.
    """
    x_start = line_index(axes.x_values, node.x)
    x_end = line_index(axes.x_values, node.right)
    y_start = line_index(axes.y_values, node.y)
    y_end = line_index(axes.y_values, node.bottom)

    if direction is Direction.NORTH:
        cells = [(x, y_start - 1) for x in range(x_start, x_end)]
    elif direction is Direction.SOUTH:
        cells = [(x, y_end) for x in range(x_start, x_end)]
    elif direction is Direction.EAST:
        cells = [(x_end, y) for y in range(y_start, y_end)]
    elif direction is Direction.WEST:
        cells = [(x_start - 1, y) for y in range(y_start, y_end)]
    else:
        raise ValueError(f"Unknown direction: {direction!r}")

    return center_out(cells)


class OccupancyGrid:
    """
    A 2-D grid of cells indexed by [row][column].

    Created fresh for each conversion pass; only the router mutates it.
    """

    def __init__(self, columns: int, rows: int):
        self.columns = columns
        self.rows = rows
        self.cells: List[List[GridCell]] = [
            [GridCell(column=c, row=r) for c in range(columns)] for r in range(rows)
        ]

    def in_bounds(self, column: int, row: int) -> bool:
        return 0 <= column < self.columns and 0 <= row < self.rows

    def is_free(
        self, column: int, row: int, passable: Collection[str] = ()
    ) -> bool:
        """
        Whether the cell exists, has no stub, and is covered by no node
        other than those listed in passable.
        """
        if not self.in_bounds(column, row):
            return False
        cell = self.cells[row][column]
        if cell.occupied:
            return False
        return all(node_id in passable for node_id in cell.node_ids)

    def cover(self, span: GridSpan, node_id: str) -> None:
        """Record a node as covering every cell of its span."""
        for row in range(span.row - 1, span.row - 1 + span.row_span):
            for column in range(span.column - 1, span.column - 1 + span.column_span):
                if self.in_bounds(column, row):
                    self.cells[row][column].node_ids.append(node_id)

    def reserve(self, column: int, row: int, direction: Direction, color: str) -> GridCell:
        """Mark a cell as occupied by a stub."""
        cell = self.cells[row][column]
        cell.occupied = True
        cell.direction = direction
        cell.color = color
        return cell

    def covered_cells(self) -> List[GridCell]:
        return [cell for row in self.cells for cell in row if cell.node_ids]

    def stub_cells(self) -> List[GridCell]:
        return [cell for row in self.cells for cell in row if cell.has_stub]


@dataclass
class RoutingResult:
    """
    Outcome of routing all edges of a canvas.

    Attributes:
        stubs: Stubs in edge input order.
        dropped: Ids of edges that produced no stub.
        preferred: Preferred direction per routed edge id.
    """

    stubs: List[EdgeStub] = field(default_factory=list)
    dropped: List[str] = field(default_factory=list)
    preferred: Dict[str, Direction] = field(default_factory=dict)

    def fallback_stubs(self) -> List[EdgeStub]:
        """Stubs placed on a side other than the preferred one."""
        return [s for s in self.stubs if self.preferred.get(s.edge_id) != s.direction]


class EdgeRouter:
    """
    Routes edges to single free grid cells beside their source nodes.

    When placements are given, no stub is drawn inside a node unless that
    node encloses the edge's source.
    """

    def __init__(
        self,
        axes: GridAxes,
        default_color: str = DEFAULT_EDGE_COLOR,
        placements: Optional[List[NodePlacement]] = None,
    ):
        self.axes = axes
        self.default_color = default_color
        self.grid = OccupancyGrid(axes.columns, axes.rows)
        self.placements = list(placements or [])
        for placement in self.placements:
            self.grid.cover(placement.span, placement.node.id)

    def enclosing_ids(self, node: CanvasNode) -> FrozenSet[str]:
        """Ids of placed nodes whose span contains the given node's span."""
        span = PlacementResolver(self.axes).span(node)
        return frozenset(
            p.node.id for p in self.placements if p.span.contains(span)
        )

    def find_free_cell(
        self, node: CanvasNode, direction: Direction
    ) -> Optional[Tuple[int, int]]:
        """First free cell on one side of a node, or None."""
        passable = self.enclosing_ids(node)
        for column, row in side_cells(node, self.axes, direction):
            if self.grid.is_free(column, row, passable):
                return column, row
        return None

    def route_edge(
        self, edge: CanvasEdge, graph: CanvasGraph, result: Optional[RoutingResult] = None
    ) -> Optional[EdgeStub]:
        """
        Route a single edge and reserve its cell.

        Args:
            edge: The edge to route
            graph: Graph used to resolve the edge's endpoints
            result: Optional result to record preferred side / drops into

        Returns:
            The EdgeStub, or None if the edge was dropped
        """
        source = graph.node(edge.from_node)
        target = graph.node(edge.to_node)
        if source is None or target is None:
            logger.debug(
                "Dropping edge %s: missing endpoint (%s -> %s)",
                edge.id,
                edge.from_node,
                edge.to_node,
            )
            if result is not None:
                result.dropped.append(edge.id)
            return None

        preferred = preferred_direction(source, target)
        direction = preferred
        cell = self.find_free_cell(source, direction)
        if cell is None:
            for candidate in FALLBACK_ORDER:
                if candidate is preferred:
                    continue
                cell = self.find_free_cell(source, candidate)
                if cell is not None:
                    direction = candidate
                    logger.debug(
                        "Edge %s: %s side of %s is full, using %s",
                        edge.id,
                        preferred.value,
                        source.id,
                        direction.value,
                    )
                    break

        if cell is None:
            logger.debug("Dropping edge %s: no free cell around %s", edge.id, source.id)
            if result is not None:
                result.dropped.append(edge.id)
            return None

        color = edge.color or self.default_color
        column, row = cell
        self.grid.reserve(column, row, direction, color)
        if result is not None:
            result.preferred[edge.id] = preferred
        return EdgeStub(
            edge_id=edge.id, column=column, row=row, direction=direction, color=color
        )

    def route_edges(self, edges: List[CanvasEdge], graph: CanvasGraph) -> RoutingResult:
        """
        Route all edges in input order.

        Earlier edges claim contested cells first.
        """
        result = RoutingResult()
        for edge in edges:
            stub = self.route_edge(edge, graph, result)
            if stub is not None:
                result.stubs.append(stub)
        return result
