from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from .layout import Geometry
from .scales import AxisRole, AxisType, Scale

if TYPE_CHECKING:
    from .config import ChartConfig

# Distance between the x axis title and the bottom margin.
AXIS_TITLE_OFFSET = 18

# Outer tick length used when ticks are stretched into grid lines.
GRID_OUTER_TICK_SIZE = 6


class Orient(Enum):
    Bottom = "bottom"
    Left = "left"
    Right = "right"


@dataclass(frozen=True)
class Tick:
    value: Any
    label: str
    position: float


@dataclass(frozen=True)
class AxisTitle:
    """
    Placement of an axis title relative to the axis group.
    """

    text: str
    x: float
    y: float
    anchor: str
    rotate: float = 0.0
    dy: str | None = None


@dataclass(frozen=True)
class AxisSpec:
    """
    Everything a renderer needs to draw one axis.

    `tick_size` is the inner tick length; a negative value of the full inner
    extent turns ticks into grid lines. `None` leaves the renderer's default.
    """

    role: AxisRole
    orient: Orient
    scale: Scale
    tick_padding: float
    tick_size: float | None = None
    tick_size_outer: float | None = None
    tick_count: int | None = None
    tick_format: str | None = None
    offset: tuple[float, float] = (0.0, 0.0)
    title: AxisTitle | None = None

    def format_ticks(self, values: list[Any]) -> list[str]:
        if self.tick_format is not None:
            return [value.strftime(self.tick_format) for value in values]
        return self.scale.tick_labels(values)

    def ticks(self) -> list[Tick]:
        values = self.scale.ticks(self.tick_count)
        labels = self.format_ticks(values)
        return [
            Tick(value, label, self.scale(value))
            for value, label in zip(values, labels)
        ]


def plan_x_axis(scale: Scale, config: ChartConfig, geometry: Geometry) -> AxisSpec:
    tick_count = config.x_ticks if config.x_ticks else config.x_tick_number

    tick_format = None
    if (
        AxisType.from_str(config.x_type) == AxisType.Time
        and config.tick_time_display_format
    ):
        tick_format = config.tick_time_display_format

    if config.grid and config.vertical_grid:
        tick_size = -geometry.inner_height
        tick_size_outer = GRID_OUTER_TICK_SIZE
    else:
        tick_size = 0.0
        tick_size_outer = None

    title = None
    if config.axis_labels.x:
        right = config.y_axis_orient_right
        title = AxisTitle(
            text=config.axis_labels.x,
            x=0.0 if right else geometry.inner_width,
            y=geometry.margin.bottom + AXIS_TITLE_OFFSET,
            anchor="start" if right else "end",
        )

    return AxisSpec(
        role=AxisRole.X,
        orient=Orient.Bottom,
        scale=scale,
        tick_padding=15,
        tick_size=tick_size,
        tick_size_outer=tick_size_outer,
        tick_count=tick_count,
        tick_format=tick_format,
        offset=(0.0, geometry.inner_height),
        title=title,
    )


def plan_y_axis(scale: Scale, config: ChartConfig, geometry: Geometry) -> AxisSpec:
    right = config.y_axis_orient_right
    tick_count = config.y_ticks if config.y_ticks else config.y_tick_number

    tick_format = None
    if (
        AxisType.from_str(config.y_type) == AxisType.Time
        and config.tick_time_display_format
    ):
        tick_format = config.tick_time_display_format

    if config.grid:
        tick_size = -geometry.inner_width
        tick_size_outer = GRID_OUTER_TICK_SIZE
        tick_padding = 12
    else:
        tick_size = None
        tick_size_outer = None
        tick_padding = 10

    title = None
    if config.axis_labels.y:
        title = AxisTitle(
            text=config.axis_labels.y,
            x=0.0,
            y=geometry.margin.right - 25 if right else 10 - geometry.margin.left,
            anchor="end",
            rotate=-90.0,
            dy=".71em",
        )

    return AxisSpec(
        role=AxisRole.Y,
        orient=Orient.Right if right else Orient.Left,
        scale=scale,
        tick_padding=tick_padding,
        tick_size=tick_size,
        tick_size_outer=tick_size_outer,
        tick_count=tick_count,
        tick_format=tick_format,
        offset=(geometry.inner_width, 0.0) if right else (0.0, 0.0),
        title=title,
    )


def plan_axis(
    role: AxisRole | str, scale: Scale, config: ChartConfig, geometry: Geometry
) -> AxisSpec:
    match AxisRole.from_str(role):
        case AxisRole.X:
            return plan_x_axis(scale, config, geometry)
        case AxisRole.Y:
            return plan_y_axis(scale, config, geometry)
