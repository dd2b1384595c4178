"""Colors, value text and labels for drawing a heatmap grid."""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from .binning import bucket_of, round_half_up
from .config import HeatmapConfig
from .models import Cell, Unit

LEGEND_SEPARATOR = "―"

# Extra room a label needs on top of its measured width
LABEL_PADDING = 5

TextMeasure = Callable[[str, float], float]


def _trim_number(value: float) -> str:
    text = f"{value:.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    return "0" if text == "-0" else text


def format_currency(value: float) -> str:
    """``1234567.4`` -> ``"1,234,567"``."""
    return f"{int(round_half_up(value)):,}"


def format_percent(value: float, total: float) -> str:
    """Share of ``total`` with one decimal, e.g. ``"12.5%"``; ``"-"`` for a zero total."""
    if total == 0:
        return "-"
    return _trim_number(round_half_up(value * 100 / total, 1)) + "%"


def format_value(value: float, unit: Unit, root_total: float) -> str:
    if unit is Unit.PERCENT:
        return format_percent(value, root_total)
    return format_currency(value)


def cell_value_text(cell: Cell, unit: Unit, root_total: float) -> str:
    if cell.empty:
        return ""
    return format_value(cell.value, unit, root_total)


def legend_labels(thresholds: Sequence[float], unit: Unit, root_total: float) -> list[str]:
    """Four labels, one per bucket, lowest first."""
    b0, b1, b2 = (format_value(v, unit, root_total) for v in thresholds)
    return [
        f"< {b0}",
        f"{b0}{LEGEND_SEPARATOR}{b1}",
        f"{b1}{LEGEND_SEPARATOR}{b2}",
        f"> {b2}",
    ]


def cell_fill(cell: Cell, thresholds: Sequence[float], config: HeatmapConfig) -> str:
    if cell.empty:
        return config.empty_cell_bg
    if cell.leaf:
        return config.leaf_cell_bg[bucket_of(cell.value, thresholds)]
    palette = config.header_cell_bg
    return palette[min(cell.row_index, len(palette) - 1)]


def cell_text_fill(cell: Cell, thresholds: Sequence[float], config: HeatmapConfig) -> str:
    if cell.empty:
        return ""
    if cell.leaf:
        return config.leaf_cell_txt[bucket_of(cell.value, thresholds)]
    return "#ffffff"


def cell_text_visible(cell: Cell, unit: Unit, show_leaf_text: bool) -> bool:
    """Leaf text is hidden without a unit or when leaf rows are too short."""
    if not cell.leaf:
        return True
    return show_leaf_text and unit is not Unit.NONE


def choose_label(
    cell: Cell, cell_width: float, measure: TextMeasure, font_size: float
) -> Optional[str]:
    """Long label if it fits, else the short one, else None (hidden)."""
    if cell.empty:
        return None
    for label in (cell.label_long, cell.label_short):
        if measure(label, font_size) + LABEL_PADDING <= cell_width:
            return label
    return None
