"""Cell rectangles for a grid drawn into a width x height area.

Header rows have fixed heights from the config. Leaf rows share whatever
height remains below the title, legend and headers, capped at the configured
default leaf height. Every column has the same width, optionally capped by
``max_cell_width``; a grid narrower than the area is centered horizontally.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import HeatmapConfig
from .models import Cell, Grid


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class ChartGeometry:
    """Sizes shared by every cell of one grid."""

    config: HeatmapConfig
    width: float
    height: float
    top_margin: float
    offset_x: float
    num_headers: int
    header_y: tuple[float, ...]
    headers_height: float
    leaf_width: float
    leaf_height: float
    show_leaf_text: bool

    def cell_rect(self, cell: Cell) -> Rect:
        """Rectangle of ``cell`` relative to the chart origin (inside margins)."""
        margin_h = self.config.cell_margin_h
        margin_v = self.config.cell_margin_v

        x = cell.col_index * self.leaf_width + margin_h
        if cell.leaf:
            y = self.header_y[self.num_headers] + (cell.row_index - self.num_headers) * self.leaf_height
            outer_height = self.leaf_height
        else:
            y = self.header_y[cell.row_index]
            outer_height = self.config.header_height(cell.row_index)

        return Rect(
            x=x,
            y=y + margin_v,
            width=cell.colspan * self.leaf_width - 2 * margin_h,
            height=outer_height - 2 * margin_v,
        )

    @property
    def grid_width(self) -> float:
        return self.width - 2 * self.offset_x


def compute_geometry(
    grid: Grid,
    config: HeatmapConfig,
    width: float,
    height: float,
    max_cell_width: Optional[float] = None,
    has_title: bool = False,
) -> ChartGeometry:
    top_margin = (config.title_band if has_title else 0) + config.legend_band

    header_y = [0.0]
    for row_index in range(grid.num_headers):
        header_y.append(header_y[-1] + config.header_height(row_index))
    headers_height = header_y[-1]

    cap = width if max_cell_width is None else max_cell_width
    leaf_width = min(cap, width / grid.num_max_colspan)

    leaf_rows = max(1, len(grid.rows) - grid.num_headers)
    available = (height - top_margin - headers_height) / leaf_rows
    leaf_height = max(0.0, min(config.leaf_height_cap, available))

    row_width = leaf_width * grid.num_max_colspan
    offset_x = (width - row_width) / 2 if row_width < width else 0.0

    return ChartGeometry(
        config=config,
        width=width,
        height=height,
        top_margin=top_margin,
        offset_x=offset_x,
        num_headers=grid.num_headers,
        header_y=tuple(header_y),
        headers_height=headers_height,
        leaf_width=leaf_width,
        leaf_height=leaf_height,
        show_leaf_text=leaf_height - 2 * config.cell_margin_v >= config.min_leaf_text_height,
    )
