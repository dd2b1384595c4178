"""Base exception for Tree Heatmap."""

from typing import Any, Mapping, Optional

from rich.text import Text


class TreeHeatmapError(Exception):
    """Base exception for all Tree Heatmap errors.

    ``details`` carries the context that locates the problem: a file path,
    a configuration key, a label path inside the tree. Values are kept as
    strings so they can be printed verbatim, brackets included.
    """

    exit_code = 1

    def __init__(self, message: str, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = {key: str(value) for key, value in (details or {}).items()}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    def to_text(self) -> Text:
        """Console rendering: red ``Error:`` line, then one dim line per detail."""
        text = Text()
        text.append("Error: ", style="bold red")
        text.append(self.message)
        for key, value in self.details.items():
            text.append(f"\n  {key}: ", style="dim")
            text.append(value)
        return text
