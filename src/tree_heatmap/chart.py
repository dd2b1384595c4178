"""Heatmap chart facade: wires navigation, click handling and a drawing surface.

Typical use::

    chart = create(surface, root, ChartOptions(depth=2, on_hit=on_hit))

    def on_hit(is_drill_down, current_root, hit_node):
        target = hit_node if is_drill_down else current_root.parent
        chart.change_root_node(target)

Every state change produces a fresh :class:`ChartFrame` that is handed to
``surface.draw``. Pointer hits reported by the surface go through
:meth:`TreeHeatmap.pointer_hit`.

With the default :class:`~tree_heatmap.clicks.ThreadingScheduler`, ``on_hit``
and ``surface.draw`` may run on the click timer thread. They always run
under the navigation lock, one at a time. Hosts that need everything on
their own thread pass a :class:`~tree_heatmap.clicks.ManualScheduler` and
advance it from their event loop.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Union

from .clicks import ClickDisambiguator, Scheduler
from .config import DEFAULT_CONFIG, HeatmapConfig
from .layout import ChartGeometry, Rect, compute_geometry
from .models import Cell, Grid, LegendThresholds, NavigationState, TreeNode, Unit
from .navigation import HitCallback, NavigationController
from .presentation import (
    cell_fill,
    cell_text_fill,
    cell_text_visible,
    cell_value_text,
    choose_label,
    legend_labels,
)

logger = logging.getLogger(__name__)


class Surface(Protocol):
    """What the chart needs from whatever draws it."""

    def size(self) -> tuple[float, float]: ...

    def measure_text(self, text: str, font_size: float) -> float: ...

    def draw(self, frame: ChartFrame) -> None: ...


@dataclass
class ChartOptions:
    """Construction options.

    ``unit`` falls back to CURRENCY when unrecognized; ``max_cell_width``
    defaults to the surface width.
    """

    title: str = ""
    depth: int = 1
    value_index: int = 0
    unit: Union[str, Unit, None] = Unit.CURRENCY
    max_cell_width: Optional[float] = None
    on_hit: Optional[HitCallback] = None


@dataclass(frozen=True)
class CellView:
    """A cell with everything a surface needs to paint it."""

    cell: Cell
    rect: Rect
    fill: str
    text_fill: str
    label: Optional[str]
    value_text: str
    text_visible: bool
    clickable: bool


@dataclass(frozen=True)
class ChartFrame:
    title: str
    grid: Grid
    thresholds: LegendThresholds
    unit: Unit
    geometry: ChartGeometry
    legend: list[str]
    legend_colors: tuple[str, ...]
    cells: list[CellView]
    reason: str

    def rows(self) -> list[list[CellView]]:
        rows: list[list[CellView]] = [[] for _ in self.grid.rows]
        for view in self.cells:
            rows[view.cell.row_index].append(view)
        return rows


class TreeHeatmap:
    """One chart instance bound to a surface."""

    def __init__(
        self,
        surface: Surface,
        root: TreeNode,
        options: ChartOptions,
        config: HeatmapConfig = DEFAULT_CONFIG,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self.surface = surface
        self.config = config
        self.title = options.title or ""
        self.width, self.height = surface.size()
        self.frame: Optional[ChartFrame] = None

        max_cell_width = options.max_cell_width or self.width
        self.navigation = NavigationController(
            root,
            depth=options.depth or 1,
            value_index=options.value_index or 0,
            unit=Unit.parse(options.unit),
            max_cell_width=max_cell_width,
            on_hit=options.on_hit,
        )
        # Attached after the initial rebuild; create() draws the first frame
        self.navigation.on_change = self._redraw
        self.clicks = ClickDisambiguator(
            self.navigation.apply,
            scheduler=scheduler,
            window=config.click_window_seconds,
        )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def state(self) -> NavigationState:
        return self.navigation.state

    @property
    def grid(self) -> Grid:
        return self.navigation.grid

    @property
    def thresholds(self) -> LegendThresholds:
        return self.navigation.thresholds

    # ------------------------------------------------------------------
    # Runtime operations
    # ------------------------------------------------------------------

    def change_root_node(self, node: TreeNode) -> None:
        self.navigation.change_root_node(node)

    def change_unit(self, name: Union[str, Unit]) -> None:
        unit = Unit.lookup(name)
        if unit is None:
            logger.debug("Ignoring unknown unit %r", name)
            return
        self.navigation.change_unit(unit)

    def change_depth(self, depth: int) -> None:
        self.navigation.change_depth(depth)

    def change_value_index(self, index: int) -> None:
        self.navigation.change_value_index(index)

    def pointer_hit(self, cell: Cell) -> None:
        self.clicks.pointer_hit(cell)

    def close(self) -> None:
        """Drop any pending click window."""
        self.clicks.cancel()

    # ------------------------------------------------------------------
    # Frames
    # ------------------------------------------------------------------

    def build_frame(self, reason: str = "rebuild") -> ChartFrame:
        state = self.navigation.state
        grid = self.navigation.grid
        thresholds = self.navigation.thresholds
        root_total = state.root.value_at(state.value_index)
        geometry = compute_geometry(
            grid,
            self.config,
            self.width,
            self.height,
            max_cell_width=state.max_cell_width,
            has_title=bool(self.title),
        )

        views = []
        for cell in grid.cells():
            rect = geometry.cell_rect(cell)
            font_size = self.config.font_size(cell.row_index, cell.leaf)
            views.append(
                CellView(
                    cell=cell,
                    rect=rect,
                    fill=cell_fill(cell, thresholds, self.config),
                    text_fill=cell_text_fill(cell, thresholds, self.config),
                    label=choose_label(cell, rect.width, self.surface.measure_text, font_size),
                    value_text=cell_value_text(cell, state.unit, root_total),
                    text_visible=cell_text_visible(cell, state.unit, geometry.show_leaf_text),
                    clickable=self.navigation.can_drill(cell),
                )
            )

        return ChartFrame(
            title=self.title,
            grid=grid,
            thresholds=thresholds,
            unit=state.unit,
            geometry=geometry,
            legend=legend_labels(thresholds, state.unit, root_total),
            legend_colors=self.config.leaf_cell_bg,
            cells=views,
            reason=reason,
        )

    def _redraw(self, reason: str) -> None:
        self.frame = self.build_frame(reason)
        self.surface.draw(self.frame)

    def redraw(self) -> None:
        with self.navigation.lock:
            self._redraw("rebuild")


def create(
    surface: Optional[Surface],
    root_node: Optional[TreeNode],
    options: Optional[ChartOptions] = None,
    config: HeatmapConfig = DEFAULT_CONFIG,
    scheduler: Optional[Scheduler] = None,
) -> Optional[TreeHeatmap]:
    """Build a chart and draw its first frame.

    Returns None, without raising, when the surface or the root is missing.
    """
    if surface is None:
        logger.warning("No surface given; nothing to render")
        return None
    if root_node is None:
        logger.warning("No root node given; nothing to render")
        return None

    chart = TreeHeatmap(surface, root_node, options or ChartOptions(), config, scheduler)
    chart.redraw()
    return chart
