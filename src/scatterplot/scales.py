from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone
from enum import Enum
from numbers import Number
from typing import Any, Callable, NamedTuple

from typing_extensions import override

import numpy as np
from numpy.typing import NDArray

from .data import DataPoint, field_values
from .dates import DateParser
from .errors import InvalidDomainError, UnknownAxisTypeError

# Number of ticks requested when a scale is asked for ticks without a count.
DEFAULT_TICK_COUNT = 10


class AxisType(Enum):
    Linear = "linear"
    Ordinal = "ordinal"
    Time = "time"

    @classmethod
    def from_str(cls, value: "str | AxisType") -> "AxisType":
        if isinstance(value, AxisType):
            return value
        if not isinstance(value, str):
            raise UnknownAxisTypeError(f"Invalid axis type: {value!r}")
        value = value.lower()
        if value == "linear":
            return cls.Linear
        elif value == "ordinal" or value == "text":
            return cls.Ordinal
        elif value == "time":
            return cls.Time
        else:
            raise UnknownAxisTypeError(f"Invalid axis type: {value!r}")


class AxisRole(Enum):
    X = "x"
    Y = "y"

    @classmethod
    def from_str(cls, value: "str | AxisRole") -> "AxisRole":
        if isinstance(value, AxisRole):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Invalid axis role: {value!r}")

    def ishorizontal(self) -> bool:
        return self == AxisRole.X


class Scale(ABC):
    """
    Scales map data values onto pixel offsets within an axis.

    They also generate ticks and tick labels to aide with drawing guides, and
    can invert a pixel offset back into the data domain.
    """

    @property
    @abstractmethod
    def domain(self) -> tuple[Any, ...]:
        pass

    @property
    @abstractmethod
    def range(self) -> tuple[float, float]:
        pass

    @abstractmethod
    def __call__(self, value: Any) -> float:
        pass

    @abstractmethod
    def invert(self, pixel: float) -> Any:
        pass

    @abstractmethod
    def ticks(self, count: int | None = None) -> list[Any]:
        pass

    @abstractmethod
    def tick_labels(self, ticks: Sequence[Any]) -> list[str]:
        pass

    def scale_values(self, values: Sequence[Any]) -> NDArray[np.float64]:
        return np.fromiter((self(value) for value in values), dtype=np.float64)


def _label_numbers(xs: np.ndarray) -> NDArray[np.str_]:
    """
    Format an array of numbers with consistent precision.
    Determines appropriate precision based on the differences between values.
    """
    MAX_PRECISION = 5
    fmt_str = f"{{:.{MAX_PRECISION}f}}"

    if len(xs) == 0:
        return np.array([], dtype=str)

    xstrs = [fmt_str.format(x) for x in xs]
    trim = min([len(xstr) - len(xstr.rstrip("0")) for xstr in xstrs])
    if trim == MAX_PRECISION:
        trim += 1

    if trim == 0:
        return np.array(xstrs, dtype=str)
    return np.array([xstr[:-trim] for xstr in xstrs], dtype=str)


def default_labeler(values: Sequence[Any]) -> list[str]:
    """
    Default labeler function that converts a collection of values to strings.

    For numeric values, formats all numbers with matching precision.
    For other types, uses str() conversion.
    """
    if not values:
        return []

    all_numbers = all(isinstance(v, Number) for v in values)

    if all_numbers:
        arr = np.array([float(v) for v in values], dtype=np.float64)
        return list(_label_numbers(arr))
    else:
        return [str(v) for v in values]


_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


class TickSpec(NamedTuple):
    i0: int
    i1: int
    inc: float


def _tick_spec(start: float, stop: float, count: float) -> TickSpec:
    """
    Choose a 1, 2 or 5 times power of ten tick increment giving roughly `count`
    ticks over [start, stop]. A negative `inc` encodes the reciprocal of a
    fractional step, which keeps tick values exact for small steps.
    """
    step = (stop - start) / max(0, count)
    power = math.floor(math.log10(step))
    error = step / 10**power
    if error >= _E10:
        factor = 10
    elif error >= _E5:
        factor = 5
    elif error >= _E2:
        factor = 2
    else:
        factor = 1

    if power < 0:
        inc = 10 ** (-power) / factor
        i0 = round(start * inc)
        i1 = round(stop * inc)
        if i0 / inc < start:
            i0 += 1
        if i1 / inc > stop:
            i1 -= 1
        inc = -inc
    else:
        inc = 10**power * factor
        i0 = round(start / inc)
        i1 = round(stop / inc)
        if i0 * inc < start:
            i0 += 1
        if i1 * inc > stop:
            i1 -= 1

    if i1 < i0 and 0.5 <= count < 2:
        return _tick_spec(start, stop, count * 2)

    return TickSpec(i0, i1, inc)


def tick_step(start: float, stop: float, count: int = DEFAULT_TICK_COUNT) -> float:
    """
    Distance between adjacent ticks when `count` ticks are requested over
    [start, stop].
    """
    if stop < start:
        start, stop = stop, start
    if not (count > 0) or start == stop:
        raise ValueError(f"Cannot choose a tick step over [{start}, {stop}]")
    spec = _tick_spec(start, stop, count)
    return 1 / -spec.inc if spec.inc < 0 else spec.inc


def linear_ticks(
    start: float, stop: float, count: int = DEFAULT_TICK_COUNT
) -> NDArray[np.float64]:
    if not (count > 0):
        return np.array([], dtype=np.float64)
    if start == stop:
        return np.array([start], dtype=np.float64)

    reverse = stop < start
    if reverse:
        start, stop = stop, start

    i0, i1, inc = _tick_spec(start, stop, count)
    if i1 < i0:
        return np.array([], dtype=np.float64)

    steps = np.arange(i0, i1 + 1, dtype=np.float64)
    ticks = steps / -inc if inc < 0 else steps * inc

    return ticks[::-1] if reverse else ticks


class ScaleLinear(Scale):
    """
    Continuous numerical scale, an affine map from `domain` onto `range`.
    """

    _domain: tuple[float, float]
    _range: tuple[float, float]

    def __init__(self, domain: Sequence[float], range: Sequence[float]):
        d0, d1 = domain
        r0, r1 = range
        self._domain = (float(d0), float(d1))
        self._range = (float(r0), float(r1))

    @property
    @override
    def domain(self) -> tuple[float, float]:
        return self._domain

    @property
    @override
    def range(self) -> tuple[float, float]:
        return self._range

    @override
    def __call__(self, value: Any) -> float:
        d0, d1 = self._domain
        r0, r1 = self._range
        value = _cast_number(value, "linear")
        if d1 == d0:
            return (r0 + r1) / 2
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    @override
    def invert(self, pixel: float) -> float:
        d0, d1 = self._domain
        r0, r1 = self._range
        if r1 == r0:
            return d0
        return d0 + (float(pixel) - r0) / (r1 - r0) * (d1 - d0)

    @override
    def ticks(self, count: int | None = None) -> list[float]:
        return list(
            linear_ticks(
                self._domain[0],
                self._domain[1],
                DEFAULT_TICK_COUNT if count is None else count,
            )
        )

    @override
    def tick_labels(self, ticks: Sequence[Any]) -> list[str]:
        return list(_label_numbers(np.asarray(ticks, dtype=np.float64)))


class ScaleOrdinal(Scale):
    """
    Discrete scale placing each label at an evenly spaced point, with one
    step of padding at either end so no label sits on the range boundary.
    """

    labels: list[Any]
    map: dict[Any, int]
    _range: tuple[float, float]
    labeler: Callable[[Sequence[Any]], list[str]]

    def __init__(
        self,
        labels: Sequence[Any],
        range: Sequence[float],
        labeler: Callable[[Sequence[Any]], list[str]] = default_labeler,
    ):
        self.labels = []
        self.map = dict()
        for label in labels:
            if label not in self.map:
                self.map[label] = len(self.labels)
                self.labels.append(label)

        if not self.labels:
            raise InvalidDomainError("Ordinal scale requires at least one label")

        r0, r1 = range
        self._range = (float(r0), float(r1))
        self.labeler = labeler

    @property
    @override
    def domain(self) -> tuple[Any, ...]:
        return tuple(self.labels)

    @property
    @override
    def range(self) -> tuple[float, float]:
        return self._range

    @property
    def step(self) -> float:
        r0, r1 = self._range
        return (r1 - r0) / (len(self.labels) + 1)

    @override
    def __call__(self, value: Any) -> float:
        index = self.map.get(value)
        if index is None:
            raise InvalidDomainError(f"Label {value!r} is not in the ordinal domain")
        return self._range[0] + self.step * (index + 1)

    @override
    def invert(self, pixel: float) -> Any:
        if self.step == 0:
            return self.labels[0]
        index = round((float(pixel) - self._range[0]) / self.step) - 1
        index = min(max(index, 0), len(self.labels) - 1)
        return self.labels[index]

    @override
    def ticks(self, count: int | None = None) -> list[Any]:
        return list(self.labels)

    @override
    def tick_labels(self, ticks: Sequence[Any]) -> list[str]:
        return self.labeler(list(ticks))


_SECOND = 1.0
_MINUTE = 60 * _SECOND
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR
_WEEK = 7 * _DAY
_MONTH = 30 * _DAY
_YEAR = 365 * _DAY


class TimeInterval(NamedTuple):
    unit: str
    step: int
    duration: float


TIME_INTERVALS = [
    TimeInterval("second", 1, _SECOND),
    TimeInterval("second", 5, 5 * _SECOND),
    TimeInterval("second", 15, 15 * _SECOND),
    TimeInterval("second", 30, 30 * _SECOND),
    TimeInterval("minute", 1, _MINUTE),
    TimeInterval("minute", 5, 5 * _MINUTE),
    TimeInterval("minute", 15, 15 * _MINUTE),
    TimeInterval("minute", 30, 30 * _MINUTE),
    TimeInterval("hour", 1, _HOUR),
    TimeInterval("hour", 3, 3 * _HOUR),
    TimeInterval("hour", 6, 6 * _HOUR),
    TimeInterval("hour", 12, 12 * _HOUR),
    TimeInterval("day", 1, _DAY),
    TimeInterval("day", 2, 2 * _DAY),
    TimeInterval("week", 1, _WEEK),
    TimeInterval("month", 1, _MONTH),
    TimeInterval("month", 3, 3 * _MONTH),
    TimeInterval("year", 1, _YEAR),
]


def _choose_interval(span: float, count: int) -> TimeInterval:
    target = span / count
    for lower, upper in zip(TIME_INTERVALS, TIME_INTERVALS[1:]):
        if target < upper.duration:
            # pick whichever neighbour is closer in log-space
            if target / lower.duration < upper.duration / target:
                return lower
            return upper

    years = max(1, round(tick_step(0, span / _YEAR, count)))
    return TimeInterval("year", years, years * _YEAR)


def _floor_time(t: datetime, interval: TimeInterval) -> datetime:
    t = t.replace(microsecond=0)
    match interval.unit:
        case "second":
            return t.replace(second=t.second - t.second % interval.step)
        case "minute":
            return t.replace(second=0, minute=t.minute - t.minute % interval.step)
        case "hour":
            return t.replace(second=0, minute=0, hour=t.hour - t.hour % interval.step)
        case "day":
            return t.replace(second=0, minute=0, hour=0)
        case "week":
            day = t.replace(second=0, minute=0, hour=0)
            # weeks start on Sunday
            return day - timedelta(days=(day.weekday() + 1) % 7)
        case "month":
            month = t.month - (t.month - 1) % interval.step
            return t.replace(second=0, minute=0, hour=0, day=1, month=month)
        case "year":
            year = t.year - t.year % interval.step
            return t.replace(second=0, minute=0, hour=0, day=1, month=1, year=year)
        case _:
            raise ValueError(f"Invalid time interval unit: {interval.unit}")


def _advance_time(t: datetime, interval: TimeInterval) -> datetime:
    match interval.unit:
        case "second":
            return t + timedelta(seconds=interval.step)
        case "minute":
            return t + timedelta(minutes=interval.step)
        case "hour":
            return t + timedelta(hours=interval.step)
        case "day":
            return t + timedelta(days=interval.step)
        case "week":
            return t + timedelta(weeks=interval.step)
        case "month":
            months = t.month - 1 + interval.step
            return t.replace(year=t.year + months // 12, month=months % 12 + 1)
        case "year":
            return t.replace(year=t.year + interval.step)
        case _:
            raise ValueError(f"Invalid time interval unit: {interval.unit}")


def _multi_format(t: datetime) -> str:
    """
    Label a tick by its coarsest non-zero calendar field.
    """
    if t.microsecond:
        return t.strftime(".%f")[:4]
    if t.second:
        return t.strftime(":%S")
    if t.minute:
        return t.strftime("%I:%M")
    if t.hour:
        return t.strftime("%I %p")
    if t.day != 1:
        if (t.weekday() + 1) % 7:
            return t.strftime("%a %d")
        return t.strftime("%b %d")
    if t.month != 1:
        return t.strftime("%B")
    return t.strftime("%Y")


class ScaleTime(Scale):
    """
    Temporal scale, an affine map from a [start, end] datetime domain onto
    `range`. String values are parsed with the scale's date parser.
    """

    _domain: tuple[datetime, datetime]
    _range: tuple[float, float]
    parse: DateParser
    _epoch: datetime

    def __init__(
        self,
        domain: Sequence[datetime],
        range: Sequence[float],
        parse: DateParser,
    ):
        d0, d1 = domain
        r0, r1 = range
        self.parse = parse
        self._domain = (parse(d0), parse(d1))
        self._range = (float(r0), float(r1))

        if self._domain[0].tzinfo is not None:
            self._epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)
        else:
            self._epoch = datetime(1970, 1, 1)

    @property
    @override
    def domain(self) -> tuple[datetime, datetime]:
        return self._domain

    @property
    @override
    def range(self) -> tuple[float, float]:
        return self._range

    def _seconds(self, t: datetime) -> float:
        return (t - self._epoch).total_seconds()

    @override
    def __call__(self, value: Any) -> float:
        t = self._seconds(self.parse(value))
        t0, t1 = (self._seconds(d) for d in self._domain)
        r0, r1 = self._range
        if t1 == t0:
            return (r0 + r1) / 2
        return r0 + (t - t0) / (t1 - t0) * (r1 - r0)

    @override
    def invert(self, pixel: float) -> datetime:
        t0, t1 = (self._seconds(d) for d in self._domain)
        r0, r1 = self._range
        if r1 == r0:
            return self._domain[0]
        seconds = t0 + (float(pixel) - r0) / (r1 - r0) * (t1 - t0)
        return self._epoch + timedelta(seconds=seconds)

    @override
    def ticks(self, count: int | None = None) -> list[datetime]:
        count = DEFAULT_TICK_COUNT if count is None else count
        start, stop = sorted(self._domain)
        span = self._seconds(stop) - self._seconds(start)
        if count <= 0:
            return []
        if span == 0:
            return [start]

        interval = _choose_interval(span, count)
        ticks = []
        t = _floor_time(start, interval)
        if t < start:
            t = _advance_time(t, interval)
        while t <= stop:
            ticks.append(t)
            t = _advance_time(t, interval)
        return ticks

    @override
    def tick_labels(self, ticks: Sequence[Any]) -> list[str]:
        return [_multi_format(t) for t in ticks]


def _cast_number(value: Any, kind: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (Number, np.number)):
        raise InvalidDomainError(
            f"Cannot use {kind} scale with non-numerical value: {value!r}"
        )
    return float(value)


def _numeric_extent(values: Sequence[Any]) -> tuple[float, float] | None:
    numbers = [
        _cast_number(value, "linear") for value in values if value is not None
    ]
    numbers = [value for value in numbers if not math.isnan(value)]
    if not numbers:
        return None
    return (min(numbers), max(numbers))


def axis_range(role: AxisRole, length: float) -> tuple[float, float]:
    """Pixel-y grows downward, so the vertical axis runs from `length` to 0."""
    return (0.0, length) if role.ishorizontal() else (length, 0.0)


def padded_linear_domain(
    role: AxisRole, lo: float, hi: float, y_axis_orient_right: bool
) -> tuple[float, float]:
    """
    Extend a raw [lo, hi] extent by one tick step, on one side only.

    With a right-hand y axis the x domain grows at its minimum, leaving room
    for the axis; otherwise x grows at its maximum and y at its minimum.
    """
    step = tick_step(lo, hi) if hi != lo else 1.0

    if role.ishorizontal() and y_axis_orient_right:
        return (lo - step, hi)
    elif role.ishorizontal():
        return (lo, hi + step)
    else:
        return (lo - step, hi)


def build_scale(
    role: AxisRole | str,
    axis_type: AxisType | str,
    points: Sequence[DataPoint],
    explicit_domain: Sequence[Any] | None,
    length: float,
    y_axis_orient_right: bool = False,
    parse: DateParser | None = None,
) -> Scale:
    """
    Build the value to pixel mapping for one axis.

    `length` is the inner plotting dimension along the axis. `parse` is only
    required for time axes.
    """
    role = AxisRole.from_str(role)
    axis_type = AxisType.from_str(axis_type)
    values = field_values(points, role.value)
    pixels = axis_range(role, length)

    match axis_type:
        case AxisType.Ordinal:
            if explicit_domain is not None:
                return ScaleOrdinal(list(explicit_domain), (0.0, length))
            if not values:
                raise InvalidDomainError(
                    f"Cannot build ordinal {role.value} scale with no data"
                )
            return ScaleOrdinal(values, (0.0, length))

        case AxisType.Linear:
            if explicit_domain is not None:
                if len(explicit_domain) != 2:
                    raise InvalidDomainError(
                        f"Linear {role.value} domain must be [min, max], got {explicit_domain!r}"
                    )
                lo, hi = (_cast_number(v, "linear") for v in explicit_domain)
                return ScaleLinear((lo, hi), pixels)

            extent = _numeric_extent(values)
            if extent is None:
                raise InvalidDomainError(
                    f"Cannot build linear {role.value} scale with no data"
                )
            lo, hi = extent
            return ScaleLinear(
                padded_linear_domain(role, lo, hi, y_axis_orient_right), pixels
            )

        case AxisType.Time:
            if parse is None:
                raise ValueError("Time scales require a date parser")
            if explicit_domain is not None:
                if len(explicit_domain) != 2:
                    raise InvalidDomainError(
                        f"Time {role.value} domain must be [start, end], got {explicit_domain!r}"
                    )
                domain = [parse(v) for v in explicit_domain]
            else:
                dates = [parse(v) for v in values if v is not None]
                if not dates:
                    raise InvalidDomainError(
                        f"Cannot build time {role.value} scale with no data"
                    )
                domain = [min(dates), max(dates)]
            return ScaleTime(domain, pixels, parse)

        case _:
            raise UnknownAxisTypeError(f"Invalid axis type: {axis_type}")
