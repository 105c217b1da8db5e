"""Unit tests for the router module.

Routing is best-effort: edges with a missing endpoint or no free cell are
dropped without raising. Several tests below pin that behaviour down.
"""

import logging

import pytest

from canvasgrid.graph import build_graph
from canvasgrid.grid import GridAxes
from canvasgrid.models import Canvas, CanvasEdge, CanvasNode, Direction, GridSpan
from canvasgrid.placement import PlacementResolver
from canvasgrid.router import (
    DEFAULT_EDGE_COLOR,
    STUB_SEGMENTS,
    EdgeRouter,
    OccupancyGrid,
    center_out,
    preferred_direction,
    side_cells,
    stub_path,
)


def node(node_id, x, y, width=100, height=100):
    return CanvasNode(id=node_id, type="text", x=x, y=y, width=width, height=height)


def edge(edge_id, from_node, to_node, color=None):
    return CanvasEdge(id=edge_id, from_node=from_node, to_node=to_node, color=color)


def route(nodes, edges, block_nodes=True):
    """Route edges over nodes the way the converter does."""
    canvas = Canvas(nodes=nodes, edges=edges)
    axes = GridAxes.from_nodes(nodes)
    placements = PlacementResolver(axes).resolve_all(nodes) if block_nodes else None
    router = EdgeRouter(axes, placements=placements)
    return router, router.route_edges(edges, build_graph(canvas))


class TestPreferredDirection:
    """Tests for preferred_direction."""

    def test_east(self):
        """Test target to the right prefers East."""
        assert preferred_direction(node("a", 0, 0), node("b", 300, 0)) is Direction.EAST

    def test_west(self):
        """Test target to the left prefers West."""
        assert preferred_direction(node("a", 0, 0), node("b", -300, 50)) is Direction.WEST

    def test_south(self):
        """Test target below prefers South."""
        assert preferred_direction(node("a", 0, 0), node("b", 10, 300)) is Direction.SOUTH

    def test_north(self):
        """Test target above prefers North."""
        assert preferred_direction(node("a", 0, 0), node("b", -10, -300)) is Direction.NORTH

    def test_tie_goes_vertical(self):
        """Test |dx| == |dy| resolves to the vertical branch."""
        assert preferred_direction(node("a", 0, 0), node("b", 100, 100)) is Direction.SOUTH
        assert preferred_direction(node("a", 0, 0), node("b", 100, -100)) is Direction.NORTH

    def test_same_origin_is_north(self):
        """Test coincident origins fall through to North."""
        assert preferred_direction(node("a", 0, 0), node("b", 0, 0)) is Direction.NORTH

    def test_uses_origins_not_centres(self):
        """Test comparison uses top-left corners."""
        wide = node("a", 0, 0, width=1000, height=10)
        assert preferred_direction(wide, node("b", 200, 50)) is Direction.EAST


class TestCenterOut:
    """Tests for center_out ordering."""

    def test_empty(self):
        assert center_out([]) == []

    def test_single(self):
        assert center_out([(0, 0)]) == [(0, 0)]

    def test_two(self):
        """Test two cells start from the upper middle."""
        assert center_out([1, 2]) == [2, 1]

    def test_odd_alternates_outwards(self):
        """Test middle first, then previous, then next, outwards."""
        assert center_out(["a", "b", "c", "d", "e"]) == ["c", "b", "d", "a", "e"]

    def test_even_alternates_outwards(self):
        assert center_out([0, 1, 2, 3, 4, 5]) == [3, 2, 4, 1, 5, 0]

    def test_keeps_every_cell(self):
        cells = list(range(9))
        assert sorted(center_out(cells)) == cells


class TestSideCells:
    """Tests for side_cells."""

    @pytest.fixture
    def axes(self, l_shaped_nodes):
        return GridAxes.from_nodes(l_shaped_nodes)

    def test_east_cells(self, axes):
        """Test East candidates sit one column right of the span."""
        cells = side_cells(node("A", 0, 0), axes, Direction.EAST)
        assert cells == [(6, 3), (6, 2), (6, 4), (6, 1), (6, 5), (6, 0)]

    def test_south_cells(self, axes):
        """Test South candidates sit one row below the span."""
        cells = side_cells(node("A", 0, 0), axes, Direction.SOUTH)
        assert cells[0] == (3, 6)
        assert {row for _, row in cells} == {6}
        assert sorted(col for col, _ in cells) == [0, 1, 2, 3, 4, 5]

    def test_north_cells_out_of_grid(self, axes):
        """Test North candidates of a top-row node fall outside the grid."""
        cells = side_cells(node("A", 0, 0), axes, Direction.NORTH)
        assert all(row == -1 for _, row in cells)

    def test_west_cells(self, axes):
        """Test West candidates sit one column left of the span."""
        cells = side_cells(node("B", 300, 0), axes, Direction.WEST)
        assert {col for col, _ in cells} == {11}
        assert len(cells) == 6


class TestStubPath:
    """Tests for stub connector marks."""

    def test_every_direction_has_segment(self):
        assert set(STUB_SEGMENTS) == set(Direction)

    def test_paths(self):
        assert stub_path(Direction.NORTH) == "M50 100 L50 50"
        assert stub_path(Direction.SOUTH) == "M50 0 L50 50"
        assert stub_path(Direction.EAST) == "M0 50 L50 50"
        assert stub_path(Direction.WEST) == "M100 50 L50 50"


class TestOccupancyGrid:
    """Tests for OccupancyGrid."""

    def test_dimensions(self):
        grid = OccupancyGrid(columns=3, rows=2)
        assert len(grid.cells) == 2
        assert len(grid.cells[0]) == 3
        assert grid.cells[1][2].column == 2
        assert grid.cells[1][2].row == 1

    def test_bounds(self):
        grid = OccupancyGrid(columns=3, rows=2)
        assert grid.is_free(2, 1)
        assert not grid.is_free(3, 0)
        assert not grid.is_free(0, -1)

    def test_reserve(self):
        grid = OccupancyGrid(columns=3, rows=2)
        cell = grid.reserve(1, 0, Direction.EAST, "#123")
        assert cell.occupied
        assert cell.direction is Direction.EAST
        assert cell.color == "#123"
        assert not grid.is_free(1, 0)
        assert grid.stub_cells() == [cell]

    def test_cover_records_node_cells(self, l_shaped_nodes):
        axes = GridAxes.from_nodes(l_shaped_nodes)
        span = PlacementResolver(axes).span(l_shaped_nodes[0])
        grid = OccupancyGrid(axes.columns, axes.rows)
        grid.cover(span, "A")
        assert len(grid.covered_cells()) == 36
        assert grid.cells[0][0].node_ids == ["A"]
        assert grid.stub_cells() == []

    def test_covered_cell_passable_only_for_listed_nodes(self):
        """Test a node-covered cell is free only to nodes it encloses."""
        grid = OccupancyGrid(columns=3, rows=2)
        grid.cover(GridSpan(row=1, row_span=2, column=1, column_span=3), "G")
        assert not grid.is_free(1, 0)
        assert grid.is_free(1, 0, passable={"G"})
        grid.reserve(1, 0, Direction.EAST, "#123")
        assert not grid.is_free(1, 0, passable={"G"})


class TestEdgeRouter:
    """Tests for EdgeRouter."""

    def test_side_by_side_routes_east(self, side_by_side_canvas):
        """Test A -> B with B to the east gets an East stub beside A."""
        nodes = side_by_side_canvas.nodes
        _, result = route(nodes, side_by_side_canvas.edges)
        assert len(result.stubs) == 1
        stub = result.stubs[0]
        assert stub.direction is Direction.EAST
        assert (stub.column, stub.row) == (6, 0)
        assert stub.color == DEFAULT_EDGE_COLOR
        assert result.dropped == []

    def test_edge_color_used(self, side_by_side_canvas):
        """Test an edge's own colour is kept on the stub."""
        _, result = route(side_by_side_canvas.nodes, [edge("e1", "A", "B", "#f00")])
        assert result.stubs[0].color == "#f00"

    def test_reserved_cell_records_stub(self, side_by_side_canvas):
        """Test the reserved grid cell stores direction and colour."""
        router, _ = route(side_by_side_canvas.nodes, side_by_side_canvas.edges)
        cell = router.grid.cells[0][6]
        assert cell.occupied
        assert cell.direction is Direction.EAST
        assert cell.color == DEFAULT_EDGE_COLOR

    def test_missing_target_dropped(self, side_by_side_canvas):
        """Test an edge to an unknown node yields no stub and no error."""
        _, result = route(side_by_side_canvas.nodes, [edge("bad", "A", "ghost")])
        assert result.stubs == []
        assert result.dropped == ["bad"]

    def test_missing_source_dropped(self, side_by_side_canvas):
        """Test an edge from an unknown node yields no stub."""
        _, result = route(side_by_side_canvas.nodes, [edge("bad", "ghost", "A")])
        assert result.stubs == []

    def test_missing_endpoint_does_not_affect_others(self, side_by_side_canvas):
        """Test a dropped edge leaves later routing unchanged."""
        edges = [edge("bad", "A", "ghost"), edge("e1", "A", "B")]
        _, result = route(side_by_side_canvas.nodes, edges)
        assert [s.edge_id for s in result.stubs] == ["e1"]
        assert (result.stubs[0].column, result.stubs[0].row) == (6, 0)

    def test_preferred_side_used_when_free(self, l_shaped_nodes):
        """Test an unobstructed preferred side is chosen over fallbacks."""
        _, result = route(l_shaped_nodes, [edge("e1", "A", "B"), edge("e2", "A", "T")])
        assert [s.direction for s in result.stubs] == [Direction.EAST, Direction.SOUTH]
        assert result.fallback_stubs() == []

    def test_earlier_edges_claim_middle_cells(self, l_shaped_nodes):
        """Test stubs fill the side from the middle outwards in edge order."""
        edges = [edge(f"e{i}", "A", "B") for i in range(6)]
        _, result = route(l_shaped_nodes, edges)
        assert [s.row for s in result.stubs] == [3, 2, 4, 1, 5, 0]
        assert all(s.column == 6 for s in result.stubs)

    def test_full_side_falls_back_in_order(self, l_shaped_nodes):
        """Test a full East side falls back to South (North is off-grid)."""
        edges = [edge(f"e{i}", "A", "B") for i in range(7)]
        _, result = route(l_shaped_nodes, edges)
        last = result.stubs[-1]
        assert last.edge_id == "e6"
        assert last.direction is Direction.SOUTH
        assert (last.column, last.row) == (3, 6)
        assert result.preferred["e6"] is Direction.EAST
        assert result.fallback_stubs() == [last]

    def test_no_cell_inside_other_node(self):
        """Test a touching neighbour blocks the preferred side."""
        nodes = [node("A", 0, 0), node("B", 100, 0), node("C", 0, 300)]
        _, result = route(nodes, [edge("e1", "A", "B")])
        stub = result.stubs[0]
        assert stub.direction is Direction.SOUTH
        assert (stub.column, stub.row) == (3, 6)

    def test_edge_inside_group_routed(self):
        """Test nodes inside a group still get stubs on the group's cells."""
        nodes = [
            CanvasNode(id="g", type="group", x=0, y=0, width=1000, height=1000),
            node("a", 100, 100),
            node("b", 600, 100),
        ]
        router, result = route(nodes, [edge("e1", "a", "b")])
        assert result.dropped == []
        stub = result.stubs[0]
        assert stub.direction is Direction.EAST
        assert router.grid.cells[stub.row][stub.column].node_ids == ["g"]

    def test_group_edge_avoids_child_cells(self):
        """Test an enclosing group does not make its children passable."""
        nodes = [
            CanvasNode(id="g", type="group", x=0, y=0, width=300, height=100),
            node("a", 0, 0),
            node("b", 100, 0),
            node("c", 0, 400),
        ]
        _, result = route(nodes, [edge("e1", "a", "b")])
        stub = result.stubs[0]
        assert stub.direction is Direction.SOUTH

    def test_repeated_node_id_uses_first(self):
        """Test endpoints resolve to the first node when ids repeat."""
        nodes = [node("a", 0, 0), node("b", 300, 0), node("a", 300, 600)]
        _, result = route(nodes, [edge("e1", "a", "b")])
        assert result.stubs[0].direction is Direction.EAST

    def test_exhausted_edge_dropped(self, side_by_side_canvas):
        """Test an edge with no free cell anywhere is dropped silently."""
        edges = [edge("e1", "A", "B"), edge("e2", "A", "B")]
        _, result = route(side_by_side_canvas.nodes, edges)
        assert [s.edge_id for s in result.stubs] == ["e1"]
        assert result.dropped == ["e2"]

    def test_self_loop_on_single_node_dropped(self):
        """Test a self-loop on a lone node has nowhere to go."""
        _, result = route([node("A", 0, 0)], [edge("loop", "A", "A")])
        assert result.stubs == []
        assert result.dropped == ["loop"]

    def test_no_two_stubs_share_a_cell(self, l_shaped_nodes):
        """Test occupancy holds across repeated routing in one pass."""
        edges = [
            edge("e1", "A", "B"),
            edge("e2", "B", "A"),
            edge("e3", "T", "A"),
            edge("e4", "A", "T"),
            edge("e5", "B", "T"),
        ]
        canvas = Canvas(nodes=l_shaped_nodes, edges=edges)
        axes = GridAxes.from_nodes(l_shaped_nodes)
        router = EdgeRouter(axes)
        graph = build_graph(canvas)
        first = router.route_edges(edges, graph)
        second = router.route_edges(edges, graph)
        cells = [(s.column, s.row) for s in first.stubs + second.stubs]
        assert len(cells) == len(set(cells))

    def test_without_placements_nodes_not_blocked(self):
        """Test node cells are only blocked when placements are given."""
        nodes = [node("A", 0, 0), node("B", 100, 0)]
        _, result = route(nodes, [edge("e1", "A", "B")], block_nodes=False)
        assert result.stubs[0].direction is Direction.EAST

    def test_dropped_edges_logged(self, side_by_side_canvas, caplog):
        """Test dropped edges are reported at DEBUG level."""
        with caplog.at_level(logging.DEBUG, logger="canvasgrid.router"):
            route(side_by_side_canvas.nodes, [edge("bad", "A", "ghost")])
        assert "Dropping edge bad" in caplog.text
