"""
Tree Heatmap - drill-down heatmaps for labelled value trees

Flattens an arbitrarily deep tree into a fixed number of header rows plus
stacked leaf rows, colours leaves by quartile bucket, and turns single and
double clicks into drill-down and drill-up navigation.
"""

__version__ = "0.1.0"

from .binning import bucket_of, compute_thresholds
from .chart import ChartFrame, ChartOptions, Surface, TreeHeatmap, create
from .clicks import ClickDisambiguator, ManualScheduler, ThreadingScheduler
from .config import HeatmapConfig, load_config
from .grid import flatten
from .models import (
    Cell,
    DrillDownIntent,
    DrillUpIntent,
    Grid,
    LegendThresholds,
    TreeNode,
    Unit,
)
from .navigation import NavigationController
from .tree import build_tree, load_tree

__all__ = [
    "create",  # Main entry point
    "TreeHeatmap",
    "ChartOptions",
    "ChartFrame",
    "Surface",
    "flatten",
    "compute_thresholds",
    "bucket_of",
    "ClickDisambiguator",
    "ManualScheduler",
    "ThreadingScheduler",
    "NavigationController",
    "HeatmapConfig",
    "load_config",
    "build_tree",
    "load_tree",
    "TreeNode",
    "Cell",
    "Grid",
    "LegendThresholds",
    "DrillDownIntent",
    "DrillUpIntent",
    "Unit",
]
