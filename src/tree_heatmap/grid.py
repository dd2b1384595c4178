"""Flatten a labelled tree into a fixed-depth, colspan-based grid.

Example: with depth 2 the tree::

    root
        sector1
            department1
            department2
        sector2
            department3
            department4

becomes::

    |                         root                          |
    |          sector1          |         sector2           |
    | department1 | department2 | department3 | department4 |

The first ``D`` rows (``D`` = effective depth) are header rows. Nodes on the
last header row (level ``D-1``) own one leaf column each; their children are
stacked below them, one child per leaf row, so subtrees deeper than ``D``
collapse into a single column.
"""

from __future__ import annotations

import logging
from typing import Optional

from .models import Cell, Grid, TreeNode
from .tree import structural_depth

logger = logging.getLogger(__name__)


def effective_depth(root: TreeNode, desired_depth: int) -> int:
    """Depth actually rendered: ``min(desired, structural)``, never below 1."""
    return max(1, min(desired_depth, structural_depth(root)))


def compute_colspans(root: TreeNode, depth: int) -> dict[tuple[int, int], int]:
    """Colspan of every node above the cutoff, keyed by ``(id(node), level)``.

    A node on the last header row, or one without children, spans a single
    column; any other node spans the sum of its children.
    """
    spans: dict[tuple[int, int], int] = {}
    stack: list[tuple[TreeNode, int, bool]] = [(root, 0, False)]
    while stack:
        node, level, expanded = stack.pop()
        key = (id(node), level)
        if level + 1 >= depth or not node.has_children:
            spans[key] = 1
        elif expanded:
            spans[key] = sum(spans[(id(child), level + 1)] for child in node.children)
        else:
            stack.append((node, level, True))
            for child in node.children:
                stack.append((child, level + 1, False))
    return spans


class _GridBuilder:
    """State of one flatten pass: rows, id counter and leaf-breadth cursor."""

    def __init__(self, root: TreeNode, depth: int, value_index: int, generation: int):
        self.root = root
        self.depth = depth
        self.value_index = value_index
        self.generation = generation
        self.spans = compute_colspans(root, depth)
        self.num_max_colspan = self.spans[(id(root), 0)]
        self.rows: list[list[Cell]] = []
        self.next_id = 0
        self.leaf_breadth_pos = -1

    def make_cell(self, node: Optional[TreeNode], level: int) -> Cell:
        colspan = 1 if node is None else self.spans.get((id(node), level), 1)
        cell = Cell(
            id=self.next_id,
            node=node,
            level=level,
            leaf=level == self.depth,
            colspan=colspan,
            value=0 if node is None else node.value_at(self.value_index),
            generation=self.generation,
        )
        self.next_id += 1
        return cell

    def empty_leaf_row(self) -> list[Cell]:
        return [self.make_cell(None, self.depth) for _ in range(self.num_max_colspan)]

    def build(self) -> Grid:
        # Frames are (node, level); a None node is a gap filler below a
        # branch that ended before the last header row.
        stack: list[tuple[Optional[TreeNode], int]] = [(self.root, 0)]
        while stack:
            node, level = stack.pop()
            if level >= len(self.rows):
                self.rows.append([])
            self.rows[level].append(self.make_cell(node, level))

            if level == self.depth - 1:
                self.stack_children(node)
            elif node is not None and node.has_children:
                for child in reversed(node.children):
                    stack.append((child, level + 1))
            else:
                stack.append((None, level + 1))

        self.assign_indexes()
        return Grid(
            rows=self.rows,
            effective_depth=self.depth,
            num_max_colspan=self.num_max_colspan,
            value_index=self.value_index,
            generation=self.generation,
        )

    def stack_children(self, node: Optional[TreeNode]) -> None:
        """Place ``node``'s children one per leaf row in its leaf column."""
        self.leaf_breadth_pos += 1
        children: list[Optional[TreeNode]]
        if node is not None and node.has_children:
            children = list(node.children)
        else:
            children = [None]

        for offset, child in enumerate(children):
            row_index = self.depth + offset
            if row_index >= len(self.rows):
                self.rows.append(self.empty_leaf_row())
            self.rows[row_index][self.leaf_breadth_pos] = self.make_cell(child, self.depth)

    def assign_indexes(self) -> None:
        for row_index, row in enumerate(self.rows):
            x = 0
            for cell in row:
                cell.row_index = row_index
                cell.col_index = x
                x += cell.colspan


def flatten(
    root: Optional[TreeNode],
    desired_depth: int,
    value_index: int = 0,
    generation: int = 0,
) -> Optional[Grid]:
    """Flatten ``root`` into a grid of at most ``desired_depth`` header rows.

    Returns None when there is no root (nothing to render). Cell ids restart
    at 0 on every call; ``generation`` tags the cells so stale references
    from an earlier pass can be recognised.
    """
    if root is None:
        return None

    depth = effective_depth(root, desired_depth)
    grid = _GridBuilder(root, depth, value_index, generation).build()
    logger.debug(
        "Flattened %r: depth=%d (desired %d), %d rows, %d columns",
        root.label_long,
        depth,
        desired_depth,
        len(grid.rows),
        grid.num_max_colspan,
    )
    return grid
