"""Render CLI command -- draw a tree heatmap in the terminal."""

from pathlib import Path
from typing import Optional

import typer

from ..chart import ChartOptions, create
from ..config import load_config
from ..exceptions import TreeHeatmapError
from ..logging_config import get_logger, setup_logging
from ..surface import RichSurface, terminal_config
from . import app
from ._common import console, fail, load_root

logger = get_logger("cli.render")


@app.command()
def render(
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
        help="Number of header rows to show",
        min=1,
    ),
    value_index: int = typer.Option(
        0,
        "--value-index",
        "-i",
        help="Which entry of each node's values to show",
        min=0,
    ),
    unit: str = typer.Option(
        "CURRENCY",
        "--unit",
        "-u",
        help="NONE, CURRENCY or PERCENT",
    ),
    title: str = typer.Option(
        "",
        "--title",
        "-t",
        help="Chart title",
    ),
    root: Optional[str] = typer.Option(
        None,
        "--root",
        "-r",
        help="Label path of the node to start from, e.g. 'Sales/EMEA'",
    ),
    width: Optional[int] = typer.Option(
        None,
        "--width",
        "-w",
        help="Chart width in characters (defaults to the terminal width)",
        min=10,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
):
    """
    Render a tree as a heatmap with header rows.

    [bold cyan]Examples:[/bold cyan]

      tree-heatmap render budget.json --depth 2

      tree-heatmap render budget.json --root Sales --unit PERCENT
    """
    setup_logging(verbose=verbose)

    try:
        settings = terminal_config(load_config(config_file=config))
        node = load_root(tree_file, root)

        surface = RichSurface(console, width=width)
        chart = create(
            surface,
            node,
            ChartOptions(title=title, depth=depth, value_index=value_index, unit=unit),
            config=settings,
        )
        if chart is not None:
            logger.debug("Rendered %s", chart.state.to_dict())
            chart.close()

    except typer.Exit:
        raise
    except TreeHeatmapError as e:
        fail(e)
