"""Terminal drawing surface built on rich.

Geometry is measured in character cells: one text line per grid row and a
column width of ``width / columns`` characters. Cell backgrounds use the
heatmap palette.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from rich.cells import cell_len
from rich.console import Console, Group
from rich.style import Style
from rich.text import Text

from .chart import CellView, ChartFrame
from .config import DEFAULT_CONFIG, HeatmapConfig

# Rows are laid out one line each, so any height with room for every row works
DEFAULT_HEIGHT = 1000


TERMINAL_GEOMETRY = dict(
    cell_margin_h=0,
    cell_margin_v=0,
    header_heights=(1,),
    default_leaf_height=1,
    min_leaf_text_height=1,
    title_band=2,
    legend_band=2,
    heatmap_font_sizes=(1, 1, 1, 1, 1),
    legend_font_size=1,
)


def terminal_config(base: HeatmapConfig = DEFAULT_CONFIG) -> HeatmapConfig:
    """``base`` with sizes in character cells instead of pixels; palette kept."""
    return replace(base, **TERMINAL_GEOMETRY)


class RichSurface:
    """Prints every frame it is given to a rich console."""

    def __init__(
        self,
        console: Optional[Console] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> None:
        self.console = console or Console()
        self._width = width
        self._height = height
        self.last_frame: Optional[ChartFrame] = None

    def size(self) -> tuple[float, float]:
        return float(self._width or self.console.width), float(self._height or DEFAULT_HEIGHT)

    def measure_text(self, text: str, font_size: float) -> float:
        return float(cell_len(text))

    def draw(self, frame: ChartFrame) -> None:
        self.last_frame = frame
        self.console.print(render_frame(frame), soft_wrap=True)


def render_frame(frame: ChartFrame) -> Group:
    parts: list[Text] = []
    if frame.title:
        parts.append(Text(frame.title, style="bold"))
    parts.append(render_legend(frame))
    indent = " " * int(round(frame.geometry.offset_x))
    for row in frame.rows():
        line = Text(indent)
        for view in sorted(row, key=lambda v: v.cell.col_index):
            line.append_text(render_cell(view, frame.geometry.leaf_width))
        parts.append(line)
    return Group(*parts)


def render_legend(frame: ChartFrame) -> Text:
    legend = Text()
    for color, label in zip(frame.legend_colors, frame.legend):
        legend.append("  ", style=Style(bgcolor=color))
        legend.append(f" {label}   ")
    return legend


def render_cell(view: CellView, leaf_width: float) -> Text:
    cell = view.cell
    start = int(round(cell.col_index * leaf_width))
    end = int(round((cell.col_index + cell.colspan) * leaf_width))
    width = end - start
    # Last character is an unstyled gutter between neighbouring cells
    inner = width - 1
    if inner <= 0:
        return Text(" " * max(width, 0))

    if cell.empty:
        return Text(" " * width)

    label = view.label if view.text_visible else None
    value = view.value_text if label else ""
    content = _fit(label or "", value, inner)

    style = Style(color=view.text_fill or None, bgcolor=view.fill)
    text = Text(content, style=style)
    text.append(" ")
    return text


def _fit(label: str, value: str, width: int) -> str:
    """Label left, value right; drop the value, then the label, if too wide."""
    if value and cell_len(label) + 1 + cell_len(value) <= width:
        gap = width - cell_len(label) - cell_len(value)
        return label + " " * gap + value
    if cell_len(label) <= width:
        return label + " " * (width - cell_len(label))
    return " " * width
