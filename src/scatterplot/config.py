from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Mapping, Optional
from pathlib import Path
import os
import re
import tomllib
import warnings
from .colors import DEFAULT_PALETTE, TypeStyle
from .layout import Margin


def _noop(*args: Any) -> None:
    pass


@dataclass(frozen=True)
class AxisLabels:
    x: str = ""
    y: str = ""


# camelCase property names of the chart component, mapped to field names that
# the camelCase-to-snake_case conversion would not produce.
_KEY_ALIASES = {
    "config": "type_styles",
    "mouse_over_handler": "on_hover",
    "mouse_out_handler": "on_leave",
    "mouse_move_handler": "on_move",
    "click_handler": "on_click",
}


def _field_name(key: str) -> str:
    """Convert "yAxisOrientRight" style keys to "y_axis_orient_right"."""
    name = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", key).lower()
    return _KEY_ALIASES.get(name, name)


def _get_config_paths() -> list[Path]:
    """Returns list of paths to check for config files, in order of priority."""
    paths: list[Path] = []

    # 1. Current directory
    paths.append(Path.cwd() / ".scatterplotrc.toml")

    # 2. Home directory
    home = Path.home()
    paths.append(home / ".scatterplotrc.toml")

    # 3. XDG config directory
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", str(home / ".config")))
    paths.append(Path(xdg_config) / "scatterplot" / "config.toml")

    return paths


def _load_config_file() -> dict[str, object] | None:
    """Load config from file if it exists."""
    for path in _get_config_paths():
        if path.exists():
            try:
                with open(path, "rb") as f:
                    return tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                warnings.warn(f"Failed to load config from {path}: {e}")
    return None


def _parse_config_value(key: str, value: object) -> object:
    """Convert config file values to proper types."""
    if key == "margin" and isinstance(value, Mapping):
        return Margin(**value)

    if key == "axis_labels" and isinstance(value, Mapping):
        return AxisLabels(**value)

    if key == "type_styles" and isinstance(value, list):
        return [
            v if isinstance(v, TypeStyle) else TypeStyle.from_mapping(v)
            for v in value
        ]

    # TOML has no null, so domain ranges arrive as lists
    if key in ("x_domain_range", "y_domain_range") and isinstance(value, list):
        return tuple(value)

    return value


@dataclass(frozen=True)
class ChartConfig:
    width: float = 320
    height: float = 180
    margin: Margin | None = None
    axes: bool = False
    axis_labels: AxisLabels = field(default_factory=AxisLabels)

    # Axis types are "linear", "ordinal" (alias "text") or "time"
    x_type: str = "linear"
    y_type: str = "linear"
    x_domain_range: tuple[Any, Any] | None = None
    y_domain_range: tuple[Any, Any] | None = None

    # Tick counts. `*_ticks` take precedence over `*_tick_number`.
    x_ticks: int | None = None
    y_ticks: int | None = None
    x_tick_number: int | None = None
    y_tick_number: int | None = None

    grid: bool = False
    vertical_grid: bool = False
    y_axis_orient_right: bool = False
    dot_radius: float = 5

    date_pattern: str = "%d-%b-%y"
    tick_time_display_format: str | None = None

    type_styles: list[TypeStyle] = field(default_factory=list)
    palette: str = DEFAULT_PALETTE

    # Interaction callbacks, called as handler(point, event)
    on_hover: Callable[..., Any] = _noop
    on_leave: Callable[..., Any] = _noop
    on_move: Callable[..., Any] = _noop
    on_click: Callable[..., Any] = _noop

    @property
    def spacer(self) -> float:
        """Margin used on every side when no axes are drawn."""
        return 2 * self.dot_radius

    @staticmethod
    def from_mapping(values: Mapping[str, Any]) -> "ChartConfig":
        """
        Build a config from a mapping using either field names or the chart
        component's camelCase property names. Unknown keys are ignored.
        """
        known = {f.name for f in fields(ChartConfig)}
        kwargs: dict[str, Any] = {}
        for key, value in values.items():
            name = _field_name(key)
            if name in known:
                kwargs[name] = _parse_config_value(name, value)
        return ChartConfig(**kwargs)

    @staticmethod
    def load(path: Optional[Path | str] = None) -> "ChartConfig":
        """
        Load config from a file. If no path is provided, searches standard locations.
        """
        if path is not None:
            path = Path(path)
            if not path.exists():
                return ChartConfig()
            with open(path, "rb") as f:
                config_data = tomllib.load(f)
        else:
            config_data = _load_config_file()
            if config_data is None:
                return ChartConfig()

        return ChartConfig.from_mapping(config_data)

    def replace(self, **changes: Any) -> "ChartConfig":
        return replace(self, **changes)


# Global default config loaded from file
_default_config: Optional[ChartConfig] = None


def default_config() -> ChartConfig:
    """
    Returns the default config, loading from file if not already loaded.
    This is cached so the file is only read once per session.
    """
    global _default_config
    if _default_config is None:
        _default_config = ChartConfig.load()
    return _default_config
