from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import InvalidMarginError

if TYPE_CHECKING:
    from .config import ChartConfig

# Margins used when axes are drawn. The side holding the y axis gets the wider
# margin to leave room for its tick labels.
AXIS_MARGIN = 24
AXIS_LABEL_MARGIN = 48


@dataclass(frozen=True)
class Margin:
    top: float
    right: float
    bottom: float
    left: float

    @staticmethod
    def uniform(value: float) -> "Margin":
        return Margin(value, value, value, value)


def compute_margin(
    axes_visible: bool, spacer: float, y_axis_orient_right: bool = False
) -> Margin:
    """
    Margins around the plotting area.

    Without axes every side gets `spacer` so marks near the edge are not
    clipped.
    """
    if not axes_visible:
        return Margin.uniform(spacer)
    elif y_axis_orient_right:
        return Margin(AXIS_MARGIN, AXIS_LABEL_MARGIN, AXIS_MARGIN, AXIS_MARGIN)
    else:
        return Margin(AXIS_MARGIN, AXIS_MARGIN, AXIS_MARGIN, AXIS_LABEL_MARGIN)


@dataclass(frozen=True)
class Geometry:
    """
    Pixel layout of one render pass.

    The inner area is where marks are placed; the canvas is the full drawing
    surface, with the plotting group translated by `origin`. The canvas is
    taller than `height` by three dot radii so the largest default marks on
    the bottom edge stay visible.
    """

    width: float
    height: float
    margin: Margin
    inner_width: float
    inner_height: float
    canvas_width: float
    canvas_height: float

    @property
    def origin(self) -> tuple[float, float]:
        return (self.margin.left, self.margin.top)


def compute_geometry(
    width: float,
    height: float,
    dot_radius: float,
    margin: Margin,
) -> Geometry:
    inner_width = width - (margin.left + margin.right)
    inner_height = height - (margin.top + margin.bottom + dot_radius * 2)

    if inner_width < 0 or inner_height < 0:
        raise InvalidMarginError(
            f"Margins {margin} leave a negative plotting area "
            f"({inner_width} x {inner_height}) in a {width} x {height} chart"
        )

    return Geometry(
        width=width,
        height=height,
        margin=margin,
        inner_width=inner_width,
        inner_height=inner_height,
        canvas_width=width + margin.left + margin.right,
        canvas_height=height + dot_radius * 3 + margin.top + margin.bottom,
    )


def geometry_for(config: ChartConfig) -> Geometry:
    """
    Geometry for a config, honoring an explicit margin override.
    """
    margin = config.margin
    if margin is None:
        margin = compute_margin(
            config.axes, config.spacer, config.y_axis_orient_right
        )
    return compute_geometry(config.width, config.height, config.dot_radius, margin)
