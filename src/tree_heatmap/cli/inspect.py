"""Inspect CLI command -- tree shape and legend thresholds per value index."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from ..binning import bucket_counts, compute_thresholds
from ..exceptions import TreeHeatmapError
from ..grid import flatten
from ..logging_config import get_logger, setup_logging
from ..tree import count_nodes, structural_depth
from . import app
from ._common import console, fail, load_root

logger = get_logger("cli.inspect")


@app.command()
def inspect(
    tree_file: Path = typer.Argument(
        ...,
        help="JSON tree file",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    depth: int = typer.Option(
        1,
        "--depth",
        "-d",
        help="Depth the thresholds are computed for",
        min=1,
    ),
    root: Optional[str] = typer.Option(
        None,
        "--root",
        "-r",
        help="Label path of the node to start from",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
):
    """
    Show structural depth, node count and bucket thresholds of a tree.
    """
    setup_logging(verbose=verbose)

    try:
        node = load_root(tree_file, root)
    except TreeHeatmapError as e:
        fail(e)

    grid = flatten(node, depth)
    assert grid is not None
    logger.debug("Inspecting %r at depth %d", node.label_long, grid.effective_depth)

    console.print(f"[bold]{escape(node.label_long)}[/bold]")
    console.print(f"  Structural depth: {structural_depth(node)}")
    console.print(f"  Effective depth:  {grid.effective_depth}")
    console.print(f"  Nodes:            {count_nodes(node)}")
    console.print(f"  Columns:          {grid.num_max_colspan}")
    console.print(f"  Rows:             {len(grid.rows)}")

    table = Table(title="Legend thresholds")
    table.add_column("Index", justify="right")
    table.add_column("Thresholds")
    table.add_column("Leaves per bucket")

    for index in range(max(1, len(node.values))):
        grid.refresh_values(index)
        values = grid.leaf_values()
        thresholds = compute_thresholds(values)
        counts = bucket_counts(values, thresholds)
        table.add_row(
            str(index),
            ", ".join(str(t) for t in thresholds),
            " / ".join(str(n) for n in counts),
        )

    console.print(table)
