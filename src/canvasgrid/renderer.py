"""
HTML renderer module for canvas-to-grid conversion.

Assembles grid dimensions, node placements and edge stubs into one
self-contained HTML document laid out with CSS grid.
"""

from html import escape
from typing import List, Optional

from .grid import GridAxes
from .models import EdgeStub, NodePlacement
from .router import stub_path

# Canvas colour presets
CANVAS_COLORS = {
    "1": "#fb464c",  # red
    "2": "#e9973f",  # orange
    "3": "#e0de71",  # yellow
    "4": "#44cf6e",  # green
    "5": "#53dfdd",  # cyan
    "6": "#a882ff",  # purple
}

# Background per node type class
TYPE_BACKGROUNDS = {
    "text": "#e3f2fd",
    "file": "#f3e5f5",
    "link": "#e8f5e9",
    "group": "#fff3e0",
}

STUB_STROKE_WIDTH = 2


def resolve_color(color: Optional[str]) -> Optional[str]:
    """Map a canvas colour preset to CSS; other values pass through."""
    if color is None:
        return None
    return CANVAS_COLORS.get(color, color)


class HtmlRenderer:
    """
    Renders a resolved grid layout as an HTML page.

    Attributes:
        title: Page title.
        min_track_size: Minimum row/column track size in pixels.
        max_width: Maximum width of the grid container in pixels.
    """

    def __init__(
        self, title: str = "Canvas View", min_track_size: int = 8, max_width: int = 1200
    ):
        self.title = title
        self.min_track_size = min_track_size
        self.max_width = max_width

    def track_template(self, count: int) -> str:
        """CSS track list for count equal rows or columns."""
        return f"repeat({count}, minmax({self.min_track_size}px, auto))"

    def node_section(self, placement: NodePlacement) -> str:
        """HTML <section> for one placed node."""
        node = placement.node
        span = placement.span
        style = (
            f"grid-row: {span.row} / span {span.row_span}; "
            f"grid-column: {span.column} / span {span.column_span};"
        )
        color = resolve_color(node.color)
        if color:
            style += f" border-left: 4px solid {color};"
        return f"""
        <section class="node {escape(node.type)}" data-node-id="{escape(node.id)}"
                 style="{escape(style)}">
            {escape(placement.content)}
        </section>"""

    def stub_svg(self, stub: EdgeStub) -> str:
        """Inline <svg> holding the stub's connector mark."""
        color = resolve_color(stub.color)
        return (
            f'<svg viewBox="0 0 100 100" style="width: 100%; height: 100%;">'
            f'<path d="{stub_path(stub.direction)}" stroke="{escape(color)}" '
            f'stroke-width="{STUB_STROKE_WIDTH}" fill="none"/></svg>'
        )

    def edge_cell(self, stub: EdgeStub) -> str:
        """HTML overlay element for one edge stub."""
        return f"""
        <div class="edge-cell edge-{stub.direction.value.lower()}" data-edge-id="{escape(stub.edge_id)}"
             style="grid-row: {stub.grid_row}; grid-column: {stub.grid_column};">
            {self.stub_svg(stub)}
        </div>"""

    def styles(self, axes: GridAxes) -> str:
        """The page's inline stylesheet."""
        type_rules = "\n".join(
            f"        .{name} {{\n            background: {color};\n        }}"
            for name, color in TYPE_BACKGROUNDS.items()
        )
        return f"""
        body {{
            margin: 0;
            padding: 20px;
            font-family: system-ui, -apple-system, sans-serif;
        }}
        .canvas-grid {{
            display: grid;
            grid-template-rows: {self.track_template(axes.rows)};
            grid-template-columns: {self.track_template(axes.columns)};
            gap: 2px;
            width: 100%;
            max-width: {self.max_width}px;
            margin: 0 auto;
            background: #eee;
        }}
        .node {{
            padding: 15px;
            border-radius: 8px;
            background: #f5f5f5;
            box-shadow: 0 2px 4px rgba(0,0,0,0.1);
            white-space: pre-wrap;
        }}
        .edge-cell {{
            min-width: {self.min_track_size}px;
            min-height: {self.min_track_size}px;
            background: white;
        }}
{type_rules}"""

    def render(
        self,
        axes: GridAxes,
        placements: List[NodePlacement],
        stubs: List[EdgeStub],
    ) -> str:
        """
        Render the full document.

        Edge cells come before nodes in the markup; each is placed explicitly
        so order does not affect layout.

        Args:
            axes: Expanded grid axes (sets the track counts)
            placements: Resolved node placements
            stubs: Routed edge stubs

        Returns:
            The HTML document as a string
        """
        edge_cells = "\n".join(self.edge_cell(stub) for stub in stubs)
        node_sections = "\n".join(self.node_section(p) for p in placements)

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(self.title)}</title>
    <style>{self.styles(axes)}
    </style>
</head>
<body>
    <div class="canvas-grid">
        {edge_cells}
        {node_sections}
    </div>
</body>
</html>"""
