from .axes import AxisSpec, Orient, Tick, plan_axis
from .colors import StyleLookup, TypeStyle
from .config import AxisLabels, ChartConfig, default_config
from .data import DataPoint
from .dates import DateParserCache
from .errors import (
    DateParseError,
    InvalidDomainError,
    InvalidMarginError,
    ScatterplotError,
    UnknownAxisTypeError,
)
from .layout import Geometry, Margin, compute_margin
from .plot import ChartContext, ChartPlan, ScatterplotChart, compute_plan
from .radius import RadiusMapper, radius_of
from .reconcile import Attributes, ElementState, VisualElement, reconcile
from .scales import AxisRole, AxisType, build_scale
from .transitions import TRANSITION_DURATION_MS, TransitionScheduler, schedule
