"""Core data types: tree nodes, grid cells, legend thresholds, navigation state."""

from __future__ import annotations

import weakref
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Iterator, NamedTuple, Optional, Union


class Unit(Enum):
    """How cell values and legend boundaries are labelled."""

    NONE = 0
    CURRENCY = 1
    PERCENT = 2

    @classmethod
    def lookup(cls, name: Union[str, "Unit", None]) -> Optional["Unit"]:
        """Return the unit called ``name``, or None when there is no such unit."""
        if isinstance(name, Unit):
            return name
        if not isinstance(name, str):
            return None
        try:
            return cls[name.strip().upper()]
        except KeyError:
            return None

    @classmethod
    def parse(cls, name: Union[str, "Unit", None]) -> "Unit":
        """Like :meth:`lookup`, but unrecognized names fall back to CURRENCY."""
        return cls.lookup(name) or cls.CURRENCY


@dataclass(eq=False)
class TreeNode:
    """A labelled node carrying one value per value index.

    ``children`` is None for a structural leaf. An empty list is tolerated and
    treated the same way. ``parent`` is a weak back-reference, set when the
    node is attached under another node.
    """

    label_long: str
    values: list[float] = field(default_factory=list)
    label_short: str = ""
    children: Optional[list[TreeNode]] = None
    _parent_ref: Optional[weakref.ReferenceType] = field(
        default=None, init=False, repr=False
    )

    def __post_init__(self) -> None:
        if not self.label_short:
            self.label_short = self.label_long
        if self.children is not None:
            for child in self.children:
                child._parent_ref = weakref.ref(self)

    @property
    def parent(self) -> Optional[TreeNode]:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    def add_child(self, child: TreeNode) -> TreeNode:
        if self.children is None:
            self.children = []
        self.children.append(child)
        child._parent_ref = weakref.ref(self)
        return child

    def value_at(self, index: int) -> float:
        """Value for ``index``; indexes outside ``values`` read as 0."""
        if 0 <= index < len(self.values):
            return self.values[index]
        return 0


@dataclass(eq=False)
class Cell:
    """One rectangle of the heatmap grid.

    Cells compare by identity; use ``id`` (unique within one flatten pass)
    when matching cells across code paths.
    """

    id: int
    node: Optional[TreeNode]
    level: int
    leaf: bool
    colspan: int = 1
    value: float = 0
    generation: int = 0
    row_index: int = -1
    col_index: int = -1

    @property
    def empty(self) -> bool:
        return self.node is None

    @property
    def label_long(self) -> str:
        return "" if self.node is None else self.node.label_long

    @property
    def label_short(self) -> str:
        return "" if self.node is None else self.node.label_short


@dataclass
class Grid:
    """Rows of cells produced by one flatten pass.

    The first ``effective_depth`` rows are header rows (one per tree level);
    the remaining rows are leaf rows.
    """

    rows: list[list[Cell]]
    effective_depth: int
    num_max_colspan: int
    value_index: int = 0
    generation: int = 0

    @property
    def num_headers(self) -> int:
        return self.effective_depth

    @property
    def header_rows(self) -> list[list[Cell]]:
        return self.rows[: self.effective_depth]

    @property
    def leaf_rows(self) -> list[list[Cell]]:
        return self.rows[self.effective_depth :]

    def cells(self) -> Iterator[Cell]:
        for row in self.rows:
            yield from row

    def leaf_cells(self) -> Iterator[Cell]:
        for cell in self.cells():
            if cell.leaf:
                yield cell

    def leaf_values(self) -> list[float]:
        """Values of the leaf cells that carry a node (placeholders excluded)."""
        return [cell.value for cell in self.leaf_cells() if not cell.empty]

    def row_span(self, row_index: int) -> int:
        return sum(cell.colspan for cell in self.rows[row_index])

    def find(self, cell_id: int) -> Optional[Cell]:
        for cell in self.cells():
            if cell.id == cell_id:
                return cell
        return None

    def refresh_values(self, value_index: int) -> None:
        """Re-read every cell's value for ``value_index``, keeping cell identity."""
        self.value_index = value_index
        for cell in self.cells():
            if cell.node is not None:
                cell.value = cell.node.value_at(value_index)


class LegendThresholds(NamedTuple):
    """Three ascending boundaries splitting leaf values into four buckets."""

    first: float
    second: float
    third: float


@dataclass(frozen=True)
class DrillIntent:
    """A navigation request resolved from pointer hits on ``cell``."""

    cell: Cell
    is_drill_down: ClassVar[bool]


@dataclass(frozen=True)
class DrillDownIntent(DrillIntent):
    is_drill_down: ClassVar[bool] = True


@dataclass(frozen=True)
class DrillUpIntent(DrillIntent):
    is_drill_down: ClassVar[bool] = False


@dataclass
class NavigationState:
    """What the chart currently shows. Owned by the navigation controller."""

    root: TreeNode
    desired_depth: int = 1
    effective_depth: int = 1
    value_index: int = 0
    unit: Unit = Unit.CURRENCY
    max_cell_width: Optional[float] = None
    generation: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": self.root.label_long,
            "desired_depth": self.desired_depth,
            "effective_depth": self.effective_depth,
            "value_index": self.value_index,
            "unit": self.unit.name,
            "max_cell_width": self.max_cell_width,
            "generation": self.generation,
        }
