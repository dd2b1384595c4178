"""Shared CLI helpers."""

from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..exceptions import TreeHeatmapError
from ..logging_config import get_logger
from ..models import TreeNode
from ..tree import count_nodes, find_node, load_tree

console = Console()
logger = get_logger("cli")


def load_root(tree_file: Path, root_path: Optional[str] = None) -> TreeNode:
    """Load ``tree_file`` and resolve ``root_path`` below its top node.

    Exits with code 1 when the path does not name a node.
    """
    top = load_tree(tree_file)
    logger.debug("Loaded %s: %d nodes", tree_file, count_nodes(top))
    if not root_path:
        return top
    node = find_node(top, root_path)
    if node is None:
        console.print(f"[red]Error:[/red] no node at path '{escape(root_path)}'")
        raise typer.Exit(1)
    return node


def fail(error: TreeHeatmapError) -> NoReturn:
    """Print ``error`` with its details and exit with its exit code."""
    logger.debug("Command failed", exc_info=error)
    console.print(error.to_text())
    raise typer.Exit(error.exit_code)
