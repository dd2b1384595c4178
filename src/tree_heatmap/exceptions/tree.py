"""Tree data exceptions: unreadable tree files, malformed node mappings."""

from pathlib import Path

from .base import TreeHeatmapError


class TreeDataError(TreeHeatmapError):
    """Base class for errors in externally supplied tree data."""
    pass


class TreeFileError(TreeDataError):
    """Raised when a tree file cannot be read or decoded."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Cannot load tree file: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason


class MalformedTreeError(TreeDataError):
    """Raised when a node mapping cannot be turned into a TreeNode.

    ``location`` is the label path from the root down to the offending node.
    """

    def __init__(self, location: str, reason: str):
        super().__init__(
            f"Malformed tree node at {location or '<root>'}",
            details={"location": location or "<root>", "reason": reason},
        )
        self.location = location
        self.reason = reason
