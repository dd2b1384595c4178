"""Navigation state and drill decisions for a heatmap chart.

The controller owns the :class:`NavigationState`, rebuilds the grid and the
legend thresholds whenever that state changes, and filters drill intents
through the navigability rules before handing them to the host's callback.
Rejected intents are dropped silently (debug log only).

Thread-safe: with the threaded click scheduler, intents arrive on the timer
thread while the host calls ``change_*`` from its own thread. Every state
change and every intent, callback included, runs under one reentrant lock,
so a hit callback may call back into the controller.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from .binning import compute_thresholds
from .grid import flatten
from .models import (
    Cell,
    DrillIntent,
    Grid,
    LegendThresholds,
    NavigationState,
    TreeNode,
    Unit,
)

logger = logging.getLogger(__name__)

# on_hit(is_drill_down, current_root, hit_node)
HitCallback = Callable[[bool, TreeNode, Optional[TreeNode]], None]

# on_change(reason), reason is one of "rebuild", "values", "unit"
ChangeListener = Callable[[str], None]


class NavigationController:
    """Owns root/depth/value-index/unit and the grid derived from them."""

    def __init__(
        self,
        root: TreeNode,
        depth: int = 1,
        value_index: int = 0,
        unit: Unit = Unit.CURRENCY,
        max_cell_width: Optional[float] = None,
        on_hit: Optional[HitCallback] = None,
        on_change: Optional[ChangeListener] = None,
    ) -> None:
        self.lock = threading.RLock()
        self.state = NavigationState(
            root=root,
            desired_depth=max(1, depth),
            value_index=value_index,
            unit=unit,
            max_cell_width=max_cell_width,
        )
        self.on_hit = on_hit
        self.on_change = on_change
        self.grid: Grid
        self.thresholds: LegendThresholds
        self._rebuild()

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _rebuild(self) -> None:
        """Discard the grid and flatten again under a new generation."""
        with self.lock:
            self.state.generation += 1
            grid = flatten(
                self.state.root,
                self.state.desired_depth,
                self.state.value_index,
                generation=self.state.generation,
            )
            # root is never None here; constructors and change_root_node guard it
            assert grid is not None
            self.grid = grid
            self.state.effective_depth = grid.effective_depth
            self.thresholds = compute_thresholds(grid.leaf_values())
            logger.debug(
                "Rebuilt grid (generation %d): thresholds=%s",
                self.state.generation,
                tuple(self.thresholds),
            )
            self._notify("rebuild")

    def _notify(self, reason: str) -> None:
        if self.on_change is not None:
            self.on_change(reason)

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def change_root_node(self, node: Optional[TreeNode]) -> None:
        if node is None:
            logger.warning("Ignoring change to an empty root node")
            return
        with self.lock:
            self.state.root = node
            self._rebuild()

    def change_depth(self, depth: int) -> None:
        with self.lock:
            self.state.desired_depth = max(1, depth)
            self._rebuild()

    def change_value_index(self, index: int) -> None:
        """Select another value per node; cells keep their identity."""
        with self.lock:
            self.state.value_index = index
            self.grid.refresh_values(index)
            self.thresholds = compute_thresholds(self.grid.leaf_values())
            self._notify("values")

    def change_unit(self, unit: Unit) -> None:
        """Presentation only: the grid and thresholds are untouched."""
        with self.lock:
            self.state.unit = unit
            self._notify("unit")

    # ------------------------------------------------------------------
    # Drill decisions
    # ------------------------------------------------------------------

    @property
    def at_top(self) -> bool:
        return self.state.root.parent is None

    def can_drill(self, cell: Cell) -> bool:
        """Whether a hit on ``cell`` may lead anywhere.

        Once drilled in, every cell accepts a drill up. At the top, only
        non-empty cells below the root row whose node has children qualify.
        """
        if self.on_hit is None:
            return False
        if not self.at_top:
            return True
        return cell.node is not None and cell.node.has_children and cell.level > 0

    def apply(self, intent: DrillIntent) -> bool:
        """Forward ``intent`` to the hit callback if the rules allow it.

        The generation check and the callback run under the same lock, so
        a concurrent rebuild either happens first (and the intent is
        dropped as stale) or waits for the callback to return.

        Returns True when the callback was invoked.
        """
        cell = intent.cell
        with self.lock:
            if cell.generation != self.state.generation:
                logger.debug(
                    "Dropping stale intent for cell %d (generation %d, now %d)",
                    cell.id,
                    cell.generation,
                    self.state.generation,
                )
                return False
            if not self.can_drill(cell):
                logger.debug("Cell %d is not navigable", cell.id)
                return False

            if intent.is_drill_down:
                if cell.node is None or cell.level == 0 or not cell.node.has_children:
                    logger.debug("Cannot drill down into cell %d", cell.id)
                    return False
            elif self.at_top:
                logger.debug("Already at the top, cannot drill up")
                return False

            assert self.on_hit is not None
            self.on_hit(intent.is_drill_down, self.state.root, cell.node)
            return True
