"""
Mark radius from the optional third data dimension `z`.
"""

from collections.abc import Sequence
from numbers import Number
from typing import Any

import numpy as np
from numpy.typing import NDArray

from .data import DataPoint
from .errors import InvalidDomainError

MIN_RADIUS = 5.0
MAX_RADIUS = 20.0


def _z_value(z: Any) -> float:
    if isinstance(z, bool) or not isinstance(z, (Number, np.number)):
        raise InvalidDomainError(f"Cannot size marks by non-numerical z: {z!r}")
    return float(z)


class RadiusMapper:
    """
    Maps `z` linearly from its extent over the data set onto
    [MIN_RADIUS, MAX_RADIUS].

    When no point carries `z`, every point gets `default_radius`. A constant
    `z` collapses every point to MIN_RADIUS, as does a point missing `z` in a
    set where others have it.
    """

    default_radius: float
    z_min: float | None
    z_max: float | None

    def __init__(self, points: Sequence[DataPoint], default_radius: float):
        self.default_radius = default_radius
        zs = [_z_value(p.z) for p in points if p.has_z()]
        if zs:
            self.z_min = min(zs)
            self.z_max = max(zs)
        else:
            self.z_min = None
            self.z_max = None

    @property
    def sized(self) -> bool:
        return self.z_min is not None

    def normalize(self, z: float | None) -> float:
        if z is None or self.z_min is None or self.z_max is None:
            return 0.0
        span = self.z_max - self.z_min
        if span == 0:
            return 0.0
        return (_z_value(z) - self.z_min) / span

    def __call__(self, point: DataPoint) -> float:
        if not self.sized:
            return self.default_radius
        return MIN_RADIUS + (MAX_RADIUS - MIN_RADIUS) * self.normalize(point.z)

    def radii(self, points: Sequence[DataPoint]) -> NDArray[np.float64]:
        if not self.sized:
            return np.full(len(points), self.default_radius, dtype=np.float64)

        zs = np.array(
            [np.nan if p.z is None else _z_value(p.z) for p in points],
            dtype=np.float64,
        )
        span = self.z_max - self.z_min
        if span == 0:
            p = np.zeros_like(zs)
        else:
            p = np.where(np.isnan(zs), 0.0, (zs - self.z_min) / span)
        return MIN_RADIUS + (MAX_RADIUS - MIN_RADIUS) * p


def radius_of(
    point: DataPoint, all_points: Sequence[DataPoint], default_radius: float
) -> float:
    return RadiusMapper(all_points, default_radius)(point)
