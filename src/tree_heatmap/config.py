"""Configuration loading and management for Tree Heatmap.

The chart's visual constants (margins, header heights, fonts, palette) and the
click window live in a single frozen ``HeatmapConfig``. Sources are merged in
priority order:
    1. Defaults (defined in HeatmapConfig)
    2. Global config (~/.tree-heatmap.toml)
    3. Project config (./tree-heatmap.toml)
    4. Explicit config file
    5. Environment variables (TREEHEATMAP_* prefix, scalar fields only)
    6. Direct overrides (passed as kwargs)

Example:
    >>> config = load_config(click_window_seconds=0.5)
    >>> config.click_window_seconds
    0.5
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional, get_type_hints

from .exceptions import ConfigFileError, InvalidConfigError

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")


@dataclass(frozen=True)
class HeatmapConfig:
    """Visual constants and interaction timing for a heatmap chart.

    Heights are inner heights; the top and bottom cell margins are added on
    top when the layout is computed.

    Attributes:
        Cell spacing:
            cell_margin_h: Horizontal margin on each side of a cell
            cell_margin_v: Vertical margin above and below a cell

        Row sizing:
            header_heights: Inner height of each header row, top to bottom.
                Deeper header rows reuse the last entry.
            default_leaf_height: Upper bound for the inner height of leaf rows
            min_leaf_text_height: Leaf text is hidden below this inner height

        Chrome:
            title_band: Vertical space reserved for the title, when present
            legend_band: Vertical space reserved for the legend

        Fonts:
            heatmap_font_sizes: Font size per header row; index 3 is used for
                leaf cells
            legend_font_size: Legend text size

        Palette (one entry per bucket / header row):
            leaf_cell_bg, leaf_cell_txt, header_cell_bg, empty_cell_bg

        Interaction:
            click_window_seconds: Window separating a single click from a
                double click
    """

    # === Cell spacing ===
    cell_margin_h: float = 3
    cell_margin_v: float = 2

    # === Row sizing ===
    header_heights: tuple[float, ...] = (71, 53, 41, 41)
    default_leaf_height: float = 40
    min_leaf_text_height: float = 12

    # === Chrome ===
    title_band: float = 50
    legend_band: float = 30

    # === Fonts ===
    heatmap_font_sizes: tuple[int, ...] = (21, 18, 13, 13, 10)
    legend_font_size: int = 13

    # === Palette ===
    leaf_cell_bg: tuple[str, ...] = ("#c5f2bc", "#78c875", "#2d9234", "#005b01")
    leaf_cell_txt: tuple[str, ...] = ("#383628", "#383628", "#ffffff", "#ffffff")
    header_cell_bg: tuple[str, ...] = ("#063256", "#10527e", "#1a72a5", "#1a72a5")
    empty_cell_bg: str = "#ffffff"

    # === Interaction ===
    click_window_seconds: float = 0.3

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.cell_margin_h < 0:
            raise InvalidConfigError("cell_margin_h", self.cell_margin_h, "must be non-negative")
        if self.cell_margin_v < 0:
            raise InvalidConfigError("cell_margin_v", self.cell_margin_v, "must be non-negative")

        if not self.header_heights:
            raise InvalidConfigError("header_heights", self.header_heights, "must not be empty")
        if any(h <= 0 for h in self.header_heights):
            raise InvalidConfigError("header_heights", self.header_heights, "must be positive")
        if self.default_leaf_height <= 0:
            raise InvalidConfigError(
                "default_leaf_height", self.default_leaf_height, "must be positive"
            )

        if len(self.heatmap_font_sizes) < 4:
            raise InvalidConfigError(
                "heatmap_font_sizes", self.heatmap_font_sizes, "needs at least 4 entries"
            )

        # Four buckets, four colors
        for name in ("leaf_cell_bg", "leaf_cell_txt"):
            palette = getattr(self, name)
            if len(palette) != 4:
                raise InvalidConfigError(name, palette, "needs exactly 4 colors")
        if not self.header_cell_bg:
            raise InvalidConfigError("header_cell_bg", self.header_cell_bg, "must not be empty")

        for name in ("leaf_cell_bg", "leaf_cell_txt", "header_cell_bg"):
            for color in getattr(self, name):
                if not _HEX_COLOR.match(color):
                    raise InvalidConfigError(name, color, "expected a #rgb or #rrggbb color")
        if not _HEX_COLOR.match(self.empty_cell_bg):
            raise InvalidConfigError("empty_cell_bg", self.empty_cell_bg, "expected a hex color")

        if self.click_window_seconds <= 0:
            raise InvalidConfigError(
                "click_window_seconds", self.click_window_seconds, "must be positive"
            )

    def header_height(self, row_index: int) -> float:
        """Outer height (margins included) of header row ``row_index``."""
        inner = self.header_heights[min(row_index, len(self.header_heights) - 1)]
        return inner + 2 * self.cell_margin_v

    @property
    def leaf_height_cap(self) -> float:
        """Outer height cap for leaf rows."""
        return self.default_leaf_height + 2 * self.cell_margin_v

    def font_size(self, row_index: int, leaf: bool) -> int:
        if leaf:
            return self.heatmap_font_sizes[3]
        return self.heatmap_font_sizes[min(row_index, len(self.heatmap_font_sizes) - 1)]


DEFAULT_CONFIG = HeatmapConfig()


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> HeatmapConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (highest priority)

    Returns:
        Validated HeatmapConfig instance

    Raises:
        ConfigFileError: If a config file is missing or cannot be parsed
        InvalidConfigError: If a value fails validation or a key is unknown
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / ".tree-heatmap.toml"
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / "tree-heatmap.toml"
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigFileError(config_file, "file not found")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())
    merged.update(overrides)

    known = {f.name for f in fields(HeatmapConfig)}
    for key in merged:
        if key not in known:
            raise InvalidConfigError(key, merged[key], "unknown configuration key")

    # TOML arrays arrive as lists; the dataclass is frozen around tuples
    for key, value in list(merged.items()):
        if isinstance(value, list):
            merged[key] = tuple(value)

    return HeatmapConfig(**merged)


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from TREEHEATMAP_* environment variables.

    Tuple-valued fields (palettes, heights, fonts) are not read from the
    environment.

    Returns:
        Dict of field_name -> parsed_value for any TREEHEATMAP_* vars found.
    """
    type_hints = get_type_hints(HeatmapConfig)

    result: dict[str, Any] = {}

    for config_field in fields(HeatmapConfig):
        env_key = f"TREEHEATMAP_{config_field.name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(config_field.name)
        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[config_field.name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's scalar type.

    Returns None for types that cannot come from the environment.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    if type_hint is int:
        return int(value)
    if type_hint is float:
        return float(value)
    if type_hint is str:
        return value
    return None


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigFileError: If the file cannot be read or parsed
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigFileError(path, str(e))
