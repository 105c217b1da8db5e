"""
Data models for canvas-to-grid conversion.

This module contains the dataclasses that describe a canvas (freeform boxes
with absolute positions, plus directed connections between them) and the
grid-space structures produced while laying it out.

Classes:
    Direction: The four sides an edge stub can leave a node from.
    CanvasNode: A positioned box read from the canvas file.
    CanvasEdge: A directed connection between two nodes.
    Canvas: Top-level container of nodes and edges.
    GridSpan: A node's placement in grid-index space.
    NodePlacement: A node together with its span and display content.
    GridCell: One cell of the routing occupancy grid.
    EdgeStub: The routed placement for one edge.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

Number = Union[int, float]


class Direction(Enum):
    """Which side of a node an edge stub leaves from."""

    NORTH = "N"
    SOUTH = "S"
    EAST = "E"
    WEST = "W"


# Order in which the remaining sides are tried once the preferred side is full
FALLBACK_ORDER = (Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST)


@dataclass(frozen=True)
class CanvasNode:
    """
    A box on the canvas.

    Attributes:
        id: Unique node identifier.
        type: Free-form type tag ("text", "file", "link", "group", ...).
        x: Left edge in canvas coordinates.
        y: Top edge in canvas coordinates.
        width: Box width (>= 0).
        height: Box height (>= 0).
        color: Optional display colour (preset "1".."6" or a CSS colour).
        text: Inline text for "text" nodes.
        file: File reference for "file" nodes.
    """

    id: str
    type: str
    x: Number
    y: Number
    width: Number
    height: Number
    color: Optional[str] = None
    text: Optional[str] = None
    file: Optional[str] = None

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Node '{self.id}' has negative size ({self.width}x{self.height})"
            )

    @property
    def right(self) -> Number:
        return self.x + self.width

    @property
    def bottom(self) -> Number:
        return self.y + self.height


@dataclass(frozen=True)
class CanvasEdge:
    """A directed connection from one node to another."""

    id: str
    from_node: str
    to_node: str
    color: Optional[str] = None


@dataclass
class Canvas:
    """
    The full canvas: nodes and edges in input order.

    Order carries no meaning for the diagram itself, but edges are routed
    in this order so earlier edges win contested cells.
    """

    nodes: List[CanvasNode] = field(default_factory=list)
    edges: List[CanvasEdge] = field(default_factory=list)

    def node_by_id(self, node_id: str) -> Optional[CanvasNode]:
        """Return the node with the given id, or None."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Canvas":
        """Build a Canvas from an already-decoded canvas document."""
        from .parser import CanvasParser

        return CanvasParser().parse_dict(data)


@dataclass(frozen=True)
class GridSpan:
    """
    A rectangle in grid-index space.

    Start indices are 1-based, matching CSS grid line numbering.
    """

    row: int
    row_span: int
    column: int
    column_span: int

    def contains(self, other: "GridSpan") -> bool:
        """Whether other lies entirely within this span."""
        return (
            self.row <= other.row
            and other.row + other.row_span <= self.row + self.row_span
            and self.column <= other.column
            and other.column + other.column_span <= self.column + self.column_span
        )


@dataclass(frozen=True)
class NodePlacement:
    """A node resolved onto the grid, with the text it displays."""

    node: CanvasNode
    span: GridSpan
    content: str


@dataclass
class GridCell:
    """
    One cell of the routing grid.

    Attributes:
        column: 0-based column index.
        row: 0-based row index.
        occupied: Whether an edge stub has claimed this cell.
        node_ids: Ids of the nodes covering the cell, in input order.
        direction: Exit direction of the stub occupying the cell.
        color: Colour of the stub occupying the cell.
    """

    column: int
    row: int
    occupied: bool = False
    node_ids: List[str] = field(default_factory=list)
    direction: Optional[Direction] = None
    color: Optional[str] = None

    @property
    def has_stub(self) -> bool:
        return self.direction is not None


@dataclass(frozen=True)
class EdgeStub:
    """
    A routed edge: the cell it occupies and how to draw it.

    Attributes:
        edge_id: Id of the edge this stub represents.
        column: 0-based column index of the reserved cell.
        row: 0-based row index of the reserved cell.
        direction: Side of the source node the stub leaves from.
        color: Stroke colour of the connector mark.
    """

    edge_id: str
    column: int
    row: int
    direction: Direction
    color: str

    @property
    def grid_row(self) -> int:
        return self.row + 1

    @property
    def grid_column(self) -> int:
        return self.column + 1
