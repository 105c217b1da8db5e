"""
PNG Renderer module for canvas-to-grid conversion.

Renders a resolved grid layout as a raster preview: every grid cell gets the
same size, nodes are drawn as filled boxes over their spans and edge stubs
as short lines inside their cells.
"""

import os
from typing import List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from .grid import GridAxes
from .models import EdgeStub, NodePlacement
from .renderer import TYPE_BACKGROUNDS, resolve_color
from .router import STUB_SEGMENTS

DEFAULT_NODE_FILL = "#f5f5f5"


class PNGRenderer:
    """Renders grid layouts as PNG images."""

    def __init__(
        self,
        cell_size: int = 16,
        margin: int = 20,
        font_size: int = 11,
        font_path: Optional[str] = None,
        scale: int = 2,
        show_grid: bool = True,
    ):
        self.cell_size = cell_size
        self.margin = margin
        self.font_size = font_size
        self.font_path = font_path
        self.scale = scale
        self.show_grid = show_grid

        # Colors
        self.bg_color = (255, 255, 255)
        self.grid_color = (238, 238, 238)
        self.outline_color = (120, 120, 120)
        self.text_color = (0, 0, 0)

        self.font = None

    def _get_font(self) -> ImageFont.ImageFont:
        """Get a font for rendering labels."""
        if self.font is not None:
            return self.font

        font_size = self.font_size * self.scale

        font_options = []
        if self.font_path:
            font_options.append(self.font_path)
        font_options.extend(
            [
                "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
                "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
                "/usr/share/fonts/truetype/freefont/FreeSans.ttf",
            ]
        )

        for path in font_options:
            if os.path.exists(path):
                try:
                    self.font = ImageFont.truetype(path, font_size)
                    return self.font
                except OSError:
                    continue

        self.font = ImageFont.load_default()
        return self.font

    def _cell_origin(self, column: int, row: int) -> Tuple[int, int]:
        """Pixel position of a cell's top-left corner (0-based indices)."""
        size = self.cell_size * self.scale
        offset = self.margin * self.scale
        return offset + column * size, offset + row * size

    def image_size(self, axes: GridAxes) -> Tuple[int, int]:
        size = self.cell_size * self.scale
        offset = self.margin * self.scale * 2
        return max(axes.columns * size + offset, 1), max(axes.rows * size + offset, 1)

    def _draw_grid(self, draw: ImageDraw.ImageDraw, axes: GridAxes) -> None:
        left, top = self._cell_origin(0, 0)
        right, bottom = self._cell_origin(axes.columns, axes.rows)
        for column in range(axes.columns + 1):
            x, _ = self._cell_origin(column, 0)
            draw.line([(x, top), (x, bottom)], fill=self.grid_color)
        for row in range(axes.rows + 1):
            _, y = self._cell_origin(0, row)
            draw.line([(left, y), (right, y)], fill=self.grid_color)

    def _fit_label(self, draw: ImageDraw.ImageDraw, text: str, max_width: int) -> str:
        """First line of text, shortened with an ellipsis to fit max_width."""
        font = self._get_font()
        label = text.split("\n", 1)[0]
        if draw.textlength(label, font=font) <= max_width:
            return label
        while label and draw.textlength(label + "...", font=font) > max_width:
            label = label[:-1]
        return label + "..." if label else ""

    def _draw_node(self, draw: ImageDraw.ImageDraw, placement: NodePlacement) -> None:
        span = placement.span
        x0, y0 = self._cell_origin(span.column - 1, span.row - 1)
        x1, y1 = self._cell_origin(
            span.column - 1 + span.column_span, span.row - 1 + span.row_span
        )
        fill = TYPE_BACKGROUNDS.get(placement.node.type, DEFAULT_NODE_FILL)
        outline = resolve_color(placement.node.color) or self.outline_color
        if span.row_span == 0 or span.column_span == 0:
            # Zero-size nodes collapse onto a grid line
            draw.line([(x0, y0), (x1, y1)], fill=outline, width=self.scale)
            return
        draw.rounded_rectangle(
            [x0, y0, x1, y1],
            radius=4 * self.scale,
            fill=fill,
            outline=outline,
            width=self.scale,
        )

        padding = 4 * self.scale
        label = self._fit_label(draw, placement.content, x1 - x0 - padding * 2)
        if label:
            draw.text(
                (x0 + padding, y0 + padding),
                label,
                font=self._get_font(),
                fill=self.text_color,
            )

    def _draw_stub(self, draw: ImageDraw.ImageDraw, stub: EdgeStub) -> None:
        x, y = self._cell_origin(stub.column, stub.row)
        size = self.cell_size * self.scale
        (sx0, sy0), (sx1, sy1) = STUB_SEGMENTS[stub.direction]
        draw.line(
            [
                (x + sx0 * size / 100, y + sy0 * size / 100),
                (x + sx1 * size / 100, y + sy1 * size / 100),
            ],
            fill=resolve_color(stub.color),
            width=2 * self.scale,
        )

    def render_image(
        self,
        axes: GridAxes,
        placements: List[NodePlacement],
        stubs: List[EdgeStub],
    ) -> Image.Image:
        """Draw the layout and return the Pillow image."""
        img = Image.new("RGB", self.image_size(axes), self.bg_color)
        draw = ImageDraw.Draw(img)

        if self.show_grid:
            self._draw_grid(draw, axes)
        for placement in placements:
            self._draw_node(draw, placement)
        for stub in stubs:
            self._draw_stub(draw, stub)

        return img

    def render(
        self,
        axes: GridAxes,
        placements: List[NodePlacement],
        stubs: List[EdgeStub],
        output_path: str = "canvas.png",
    ) -> str:
        """
        Render the layout as a PNG file.

        Args:
            axes: Expanded grid axes
            placements: Resolved node placements
            stubs: Routed edge stubs
            output_path: Path to save the PNG file

        Returns:
            Path to the saved PNG file
        """
        img = self.render_image(axes, placements, stubs)
        img.save(output_path, "PNG")
        return output_path
