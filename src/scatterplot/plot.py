from __future__ import annotations

import itertools
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any, Callable

from .axes import AxisSpec, plan_axis
from .colors import StyleLookup
from .config import ChartConfig, default_config
from .data import DataPoint, as_points
from .dates import DateParserCache
from .layout import Geometry, geometry_for
from .radius import RadiusMapper
from .reconcile import (
    Attributes,
    KeyFunction,
    Reconciliation,
    VisualElement,
    reconcile,
)
from .scales import AxisRole, AxisType, Scale, build_scale
from .transitions import Schedule, TransitionScheduler

_context_ids = itertools.count(1)


@dataclass
class ChartContext:
    """
    Opaque per-chart handle shared between plan computation and the renderer.

    It owns the chart's date parser cache; renderers may use `id` to scope
    anything they create for this chart.
    """

    date_parsers: DateParserCache = field(default_factory=DateParserCache)
    id: int = field(default_factory=lambda: next(_context_ids))


@dataclass(frozen=True)
class ChartPlan:
    """
    The output of one render pass: scales, geometry, axes, the reconciliation
    of marks and the timing of their update.

    Scales are `None` only when there is no data and no explicit domain to
    build them from, in which case there are no axes and no marks.
    """

    context: ChartContext
    config: ChartConfig
    geometry: Geometry
    x_scale: Scale | None
    y_scale: Scale | None
    x_axis: AxisSpec | None
    y_axis: AxisSpec | None
    reconciliation: Reconciliation
    schedule: Schedule

    @property
    def elements(self) -> list[VisualElement]:
        return self.reconciliation.bound

    @property
    def enter(self) -> list[VisualElement]:
        return self.reconciliation.enter

    @property
    def update(self) -> list[VisualElement]:
        return self.reconciliation.update

    @property
    def exit(self) -> list[VisualElement]:
        return self.reconciliation.exit

    @property
    def duration(self) -> float:
        return self.schedule.duration


def callbacks_for(config: ChartConfig) -> dict[str, Callable[..., Any]]:
    return {
        "mouseover": config.on_hover,
        "mouseout": config.on_leave,
        "mousemove": config.on_move,
        "click": config.on_click,
    }


def _axis_scale(
    role: AxisRole,
    axis_type: AxisType,
    points: Sequence[DataPoint],
    explicit_domain: Sequence[Any] | None,
    length: float,
    config: ChartConfig,
    context: ChartContext,
) -> Scale | None:
    if not points and explicit_domain is None:
        return None

    return build_scale(
        role,
        axis_type,
        points,
        explicit_domain,
        length,
        config.y_axis_orient_right,
        context.date_parsers.parser(config.date_pattern),
    )


def _restart_retargeted(
    reconciliation: Reconciliation, schedule: Schedule
) -> Reconciliation:
    """
    Point updated elements at the start of their scheduled transition, which
    differs from the last target when an interrupted animation was retargeted.
    """
    update = [
        el.restart_from(schedule[el.key].start)
        if el.key in schedule and schedule[el.key].start != el.previous
        else el
        for el in reconciliation.update
    ]
    return replace(reconciliation, update=update)


def compute_plan(
    data: Iterable[DataPoint | Mapping[str, Any]],
    config: ChartConfig | None = None,
    previous: ChartPlan | Sequence[VisualElement] | None = None,
    context: ChartContext | None = None,
    key: KeyFunction | None = None,
    scheduler: TransitionScheduler | None = None,
    elapsed: float | None = None,
) -> ChartPlan:
    """
    Compute the full plan for drawing `data`.

    `previous` is the plan (or bound elements) of the last pass; marks are
    reconciled against it. When `elapsed` gives the milliseconds since the
    previous plan was applied, marks still animating are retargeted from their
    current position rather than from the previous target.

    All configuration and input errors are raised from here, before any part
    of the plan is returned.
    """
    if config is None:
        config = default_config()
    if context is None:
        context = previous.context if isinstance(previous, ChartPlan) else ChartContext()
    if scheduler is None:
        scheduler = TransitionScheduler()

    if previous is None:
        prior: Sequence[VisualElement] = []
    elif isinstance(previous, ChartPlan):
        prior = previous.elements
    else:
        prior = previous

    in_flight = None
    if isinstance(previous, ChartPlan) and elapsed is not None:
        in_flight = previous.schedule

    x_type = AxisType.from_str(config.x_type)
    y_type = AxisType.from_str(config.y_type)

    points = as_points(data)
    geometry = geometry_for(config)

    x = _axis_scale(
        AxisRole.X,
        x_type,
        points,
        config.x_domain_range,
        geometry.inner_width,
        config,
        context,
    )
    y = _axis_scale(
        AxisRole.Y,
        y_type,
        points,
        config.y_domain_range,
        geometry.inner_height,
        config,
        context,
    )

    x_axis = None
    y_axis = None
    if config.axes and x is not None and y is not None:
        x_axis = plan_axis(AxisRole.X, x, config, geometry)
        y_axis = plan_axis(AxisRole.Y, y, config, geometry)

    attributes: list[Attributes] = []
    if points:
        assert x is not None and y is not None
        radius = RadiusMapper(points, config.dot_radius)
        styles = StyleLookup(config.type_styles, config.palette)
        radii = radius.radii(points)
        for point, r in zip(points, radii):
            attributes.append(
                Attributes(
                    cx=x(point.x),
                    cy=y(point.y),
                    r=float(r),
                    fill=styles.fill(point.type),
                    stroke=styles.stroke(point.type),
                )
            )

    reconciliation = reconcile(
        prior, points, attributes, callbacks_for(config), key
    )

    schedule = scheduler.schedule(reconciliation.update, in_flight, elapsed or 0.0)
    if in_flight is not None:
        reconciliation = _restart_retargeted(reconciliation, schedule)

    return ChartPlan(
        context=context,
        config=config,
        geometry=geometry,
        x_scale=x,
        y_scale=y,
        x_axis=x_axis,
        y_axis=y_axis,
        reconciliation=reconciliation,
        schedule=schedule,
    )


class ScatterplotChart:
    """
    Stateful chart handle: keeps its context and the last plan so each call to
    `update` reconciles against what was drawn before.
    """

    config: ChartConfig
    context: ChartContext
    key: KeyFunction | None
    plan: ChartPlan | None

    def __init__(
        self,
        config: ChartConfig | None = None,
        key: KeyFunction | None = None,
        date_parsers: DateParserCache | None = None,
    ):
        self.config = config if config is not None else default_config()
        self.context = ChartContext(
            date_parsers if date_parsers is not None else DateParserCache()
        )
        self.key = key
        self.plan = None

    def update(
        self,
        data: Iterable[DataPoint | Mapping[str, Any]],
        config: ChartConfig | None = None,
        elapsed: float | None = None,
    ) -> ChartPlan:
        if config is not None:
            self.config = config

        self.plan = compute_plan(
            data, self.config, self.plan, self.context, self.key, elapsed=elapsed
        )
        return self.plan

    def clear(self) -> ChartPlan:
        """Plan removing every mark."""
        return self.update([])
