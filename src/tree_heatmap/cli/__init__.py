"""CLI entry point, registers all subcommands."""

import typer

app = typer.Typer(
    name="tree-heatmap",
    help="Tree Heatmap - render labelled value trees as drill-down heatmaps",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


# Import subcommands to register them
from .render import render as _render  # noqa: F401, E402
from .inspect import inspect as _inspect  # noqa: F401, E402
