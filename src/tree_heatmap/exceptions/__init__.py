"""Exception hierarchy for Tree Heatmap."""

from .base import TreeHeatmapError
from .config import (
    ConfigFileError,
    ConfigurationError,
    InvalidConfigError,
)
from .tree import (
    MalformedTreeError,
    TreeDataError,
    TreeFileError,
)

__all__ = [
    "TreeHeatmapError",
    "ConfigurationError",
    "ConfigFileError",
    "InvalidConfigError",
    "TreeDataError",
    "TreeFileError",
    "MalformedTreeError",
]
