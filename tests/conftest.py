"""Pytest configuration and shared fixtures for canvasgrid tests."""

import json

import pytest

from canvasgrid import Canvas, CanvasConverter, CanvasEdge, CanvasNode


def make_node(node_id, x, y, width=100, height=100, node_type="text", **kwargs):
    """Build a CanvasNode with test-friendly defaults."""
    return CanvasNode(
        id=node_id, type=node_type, x=x, y=y, width=width, height=height, **kwargs
    )


def make_edge(edge_id, from_node, to_node, color=None):
    """Build a CanvasEdge."""
    return CanvasEdge(id=edge_id, from_node=from_node, to_node=to_node, color=color)


@pytest.fixture
def single_node_canvas():
    """One node, no edges."""
    return Canvas(nodes=[make_node("A", 0, 0, text="Alone")], edges=[])


@pytest.fixture
def side_by_side_canvas():
    """A on the left, B 200 units to its right, one edge A -> B."""
    return Canvas(
        nodes=[
            make_node("A", 0, 0, text="Left"),
            make_node("B", 300, 0, text="Right"),
        ],
        edges=[make_edge("e1", "A", "B")],
    )


@pytest.fixture
def l_shaped_nodes():
    """A at the origin, B to its east, T below it."""
    return [
        make_node("A", 0, 0),
        make_node("B", 300, 0),
        make_node("T", 0, 300),
    ]


@pytest.fixture
def mixed_canvas_data():
    """A decoded canvas document with several node types and edge colours."""
    return {
        "nodes": [
            {
                "id": "n1",
                "type": "text",
                "x": -200,
                "y": -100,
                "width": 250,
                "height": 60,
                "text": "Ideas & notes",
                "color": "4",
            },
            {
                "id": "n2",
                "type": "file",
                "x": 150,
                "y": -100,
                "width": 400,
                "height": 400,
                "file": "Projects/plans/roadmap.md",
            },
            {
                "id": "n3",
                "type": "link",
                "x": -200,
                "y": 200,
                "width": 250,
                "height": 100,
                "url": "https://example.com",
            },
        ],
        "edges": [
            {"id": "e1", "fromNode": "n1", "fromSide": "right", "toNode": "n2", "toSide": "left"},
            {"id": "e2", "fromNode": "n1", "toNode": "n3", "color": "#ff0000"},
            {"id": "e3", "fromNode": "n3", "toNode": "ghost"},
        ],
    }


@pytest.fixture
def mixed_canvas_text(mixed_canvas_data):
    """The mixed canvas as JSON text."""
    return json.dumps(mixed_canvas_data)


@pytest.fixture
def converter():
    """Default CanvasConverter instance."""
    return CanvasConverter()
