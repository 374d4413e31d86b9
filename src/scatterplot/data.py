from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from .errors import InvalidDomainError


@dataclass(frozen=True)
class DataPoint:
    """
    One record to be drawn as a mark.

    `x` and `y` hold numbers, ordinal labels or dates depending on the axis
    type. `z` optionally drives the mark radius and `type` selects its style.
    Any other keys from a source mapping are kept in `extra`.
    """

    x: Any
    y: Any
    z: float | None = None
    type: str | None = None
    extra: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({}), compare=False
    )

    @staticmethod
    def from_mapping(record: Mapping[str, Any]) -> "DataPoint":
        if "x" not in record or "y" not in record:
            raise InvalidDomainError(
                f"Data point requires 'x' and 'y' fields: {record!r}"
            )

        extra = {
            k: v for k, v in record.items() if k not in ("x", "y", "z", "type")
        }
        return DataPoint(
            record["x"],
            record["y"],
            record.get("z"),
            record.get("type"),
            MappingProxyType(extra),
        )

    def has_z(self) -> bool:
        return self.z is not None

    def value_of(self, name: str) -> Any:
        """Value of the field used by the axis called `name` ("x" or "y")."""
        match name:
            case "x":
                return self.x
            case "y":
                return self.y
            case _:
                raise ValueError(f"Invalid axis field: {name}")


def as_points(data: Iterable[DataPoint | Mapping[str, Any]]) -> list[DataPoint]:
    """
    Normalize caller data into a list of `DataPoint`. Mappings are wrapped, the
    caller's objects are never modified.
    """

    if data is None:
        raise TypeError("data must be a sequence of points, not None")

    points: list[DataPoint] = []
    for record in data:
        if isinstance(record, DataPoint):
            points.append(record)
        elif isinstance(record, Mapping):
            points.append(DataPoint.from_mapping(record))
        else:
            raise TypeError(f"Unsupported data point type: {type(record)}")
    return points


def field_values(points: Sequence[DataPoint], name: str) -> list[Any]:
    return [point.value_of(name) for point in points]
