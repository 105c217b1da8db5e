"""
Parser module for canvas files.

Decodes a JSON canvas document ({"nodes": [...], "edges": [...]}) into the
Canvas data model.
"""

import json
import math
from numbers import Real
from typing import Any, Dict, List, Optional

from .models import Canvas, CanvasEdge, CanvasNode


class CanvasParseError(ValueError):
    """Raised when canvas input cannot be decoded."""

    pass


class CanvasParser:
    """Parses canvas JSON into nodes and edges."""

    NODE_REQUIRED = ("id", "type", "x", "y", "width", "height")
    EDGE_REQUIRED = ("id", "fromNode", "toNode")
    GEOMETRY_KEYS = ("x", "y", "width", "height")

    def parse(self, input_text: str) -> Canvas:
        """
        Parse canvas JSON text.

        Args:
            input_text: The raw contents of a .canvas file

        Returns:
            Canvas with nodes and edges in file order

        Raises:
            CanvasParseError: If the text is not a valid canvas document
        """
        try:
            data = json.loads(input_text)
        except json.JSONDecodeError as e:
            raise CanvasParseError(f"Invalid JSON: {e}") from e
        return self.parse_dict(data)

    def parse_dict(self, data: Any) -> Canvas:
        """
        Build a Canvas from a decoded JSON value.

        Raises:
            CanvasParseError: If nodes/edges are missing or malformed
        """
        if not isinstance(data, dict):
            raise CanvasParseError("Canvas document must be a JSON object")

        for key in ("nodes", "edges"):
            if key not in data:
                raise CanvasParseError(f"Canvas document is missing '{key}'")
            if not isinstance(data[key], list):
                raise CanvasParseError(f"'{key}' must be a list")

        nodes = [self._parse_node(i, raw) for i, raw in enumerate(data["nodes"])]
        edges = [self._parse_edge(i, raw) for i, raw in enumerate(data["edges"])]
        return Canvas(nodes=nodes, edges=edges)

    def _parse_node(self, index: int, raw: Any) -> CanvasNode:
        if not isinstance(raw, dict):
            raise CanvasParseError(f"Node {index}: expected an object")

        missing = self._missing_keys(raw, self.NODE_REQUIRED)
        if missing:
            raise CanvasParseError(
                f"Node {index}: missing {', '.join(repr(k) for k in missing)}"
            )

        for key in self.GEOMETRY_KEYS:
            value = raw[key]
            # bool is a Real subclass in Python
            if isinstance(value, bool) or not isinstance(value, Real):
                raise CanvasParseError(
                    f"Node '{raw['id']}': '{key}' must be a number, got {value!r}"
                )
            if not math.isfinite(value):
                raise CanvasParseError(
                    f"Node '{raw['id']}': '{key}' must be finite, got {value!r}"
                )

        try:
            return CanvasNode(
                id=str(raw["id"]),
                type=str(raw["type"]),
                x=raw["x"],
                y=raw["y"],
                width=raw["width"],
                height=raw["height"],
                color=self._optional_string(f"Node '{raw['id']}'", raw, "color"),
                text=self._optional_string(f"Node '{raw['id']}'", raw, "text"),
                file=self._optional_string(f"Node '{raw['id']}'", raw, "file"),
            )
        except ValueError as e:
            raise CanvasParseError(str(e)) from e

    def _parse_edge(self, index: int, raw: Any) -> CanvasEdge:
        if not isinstance(raw, dict):
            raise CanvasParseError(f"Edge {index}: expected an object")

        missing = self._missing_keys(raw, self.EDGE_REQUIRED)
        if missing:
            raise CanvasParseError(
                f"Edge {index}: missing {', '.join(repr(k) for k in missing)}"
            )

        return CanvasEdge(
            id=str(raw["id"]),
            from_node=str(raw["fromNode"]),
            to_node=str(raw["toNode"]),
            color=self._optional_string(f"Edge '{raw['id']}'", raw, "color"),
        )

    @staticmethod
    def _optional_string(owner: str, raw: Dict[str, Any], key: str) -> Optional[str]:
        value = raw.get(key)
        if value is not None and not isinstance(value, str):
            raise CanvasParseError(f"{owner}: '{key}' must be a string, got {value!r}")
        return value

    @staticmethod
    def _missing_keys(raw: Dict[str, Any], keys) -> List[str]:
        return [key for key in keys if key not in raw]


def parse_canvas(input_text: str) -> Canvas:
    """
    Convenience function to parse canvas JSON text.

    Args:
        input_text: The raw contents of a .canvas file

    Returns:
        Canvas with nodes and edges
    """
    parser = CanvasParser()
    return parser.parse(input_text)
