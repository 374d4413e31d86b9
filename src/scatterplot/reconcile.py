"""
Enter/update/exit reconciliation of drawn marks against a new data array.

Marks are matched to data by array position unless a key function is given.
Matching by position treats an insertion in the middle of the array as an
update of every later mark; pass `key` when points carry a stable identity.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import partial
from types import MappingProxyType
from typing import Any

from .data import DataPoint

KeyFunction = Callable[[DataPoint, int], Hashable]

# Pointer events bound on every mark, in the order they are wired.
EVENTS = ("mouseover", "mouseout", "mousemove", "click")


class ElementState(Enum):
    """
    Lifecycle of one data binding:

        Unbound -> Entering -> Idle <-> Updating
        Idle | Updating -> Exiting -> Removed
    """

    Unbound = 1
    Entering = 2
    Idle = 3
    Updating = 4
    Exiting = 5
    Removed = 6

    def isbound(self) -> bool:
        return self in (ElementState.Idle, ElementState.Updating)


@dataclass(frozen=True)
class Attributes:
    cx: float
    cy: float
    r: float
    fill: str
    stroke: str

    def interpolate(self, target: "Attributes", t: float) -> "Attributes":
        """
        Blend numeric attributes toward `target`. Fill and stroke are not
        animated and take the target value immediately.
        """
        return Attributes(
            cx=self.cx + (target.cx - self.cx) * t,
            cy=self.cy + (target.cy - self.cy) * t,
            r=self.r + (target.r - self.r) * t,
            fill=target.fill,
            stroke=target.stroke,
        )


@dataclass(frozen=True)
class VisualElement:
    """
    One drawn mark. `attributes` are always the target values; for elements
    in the update set, `previous` holds the values being animated from.
    """

    key: Hashable
    index: int
    datum: DataPoint
    attributes: Attributes
    state: ElementState
    previous: Attributes | None = None
    handlers: Mapping[str, Callable[..., Any]] = field(
        default_factory=lambda: MappingProxyType({}), compare=False
    )

    @property
    def changed(self) -> bool:
        return self.previous is not None and self.previous != self.attributes

    def restart_from(self, start: Attributes) -> "VisualElement":
        """
        The element animating from `start`, such as the interpolated position
        of an interrupted transition, toward its current target.
        """
        if start != self.attributes:
            state = ElementState.Updating
        else:
            state = ElementState.Idle
        return replace(self, state=state, previous=start)

    def settle(self) -> "VisualElement":
        """The element once its pending phase has been applied."""
        match self.state:
            case ElementState.Entering | ElementState.Updating:
                return replace(self, state=ElementState.Idle, previous=None)
            case ElementState.Exiting:
                return replace(self, state=ElementState.Removed)
            case _:
                return self


@dataclass(frozen=True)
class Reconciliation:
    enter: list[VisualElement]
    update: list[VisualElement]
    exit: list[VisualElement]

    @property
    def bound(self) -> list[VisualElement]:
        """Elements still bound to data after this pass, in data order."""
        return sorted(self.enter + self.update, key=lambda el: el.index)

    def __len__(self) -> int:
        return len(self.enter) + len(self.update) + len(self.exit)


def positional_key(point: DataPoint, index: int) -> Hashable:
    return index


def bind_handlers(
    point: DataPoint, callbacks: Mapping[str, Callable[..., Any]]
) -> Mapping[str, Callable[..., Any]]:
    """
    Bind each event callback to `point`, so the renderer calls
    `handlers[event](event_object)` and the callback sees `(point, event_object)`.
    """
    return MappingProxyType(
        {
            event: partial(callbacks[event], point)
            for event in EVENTS
            if event in callbacks
        }
    )


def reconcile(
    previous: Sequence[VisualElement],
    points: Sequence[DataPoint],
    attributes: Sequence[Attributes],
    callbacks: Mapping[str, Callable[..., Any]] | None = None,
    key: KeyFunction | None = None,
) -> Reconciliation:
    """
    Partition `previous` and the new `points` into enter, update and exit sets.

    `attributes[i]` are the target attributes of `points[i]`. Entering
    elements receive them directly. Updating elements keep the target of the
    previous pass in `previous`. Exiting elements are the previous elements
    whose key no longer occurs.
    """
    if len(attributes) != len(points):
        raise ValueError(
            f"Expected {len(points)} attribute sets, got {len(attributes)}"
        )

    key = positional_key if key is None else key
    callbacks = {} if callbacks is None else callbacks

    prior: dict[Hashable, VisualElement] = {}
    for el in previous:
        if el.state.isbound() or el.state == ElementState.Entering:
            prior[el.key] = el

    enter: list[VisualElement] = []
    update: list[VisualElement] = []
    seen: set[Hashable] = set()

    for i, (point, attrs) in enumerate(zip(points, attributes)):
        k = key(point, i)
        if k in seen:
            raise ValueError(f"Duplicate key {k!r} at index {i}")
        seen.add(k)

        handlers = bind_handlers(point, callbacks)
        old = prior.get(k)
        if old is None:
            enter.append(
                VisualElement(k, i, point, attrs, ElementState.Entering, None, handlers)
            )
        else:
            state = (
                ElementState.Updating
                if old.attributes != attrs
                else ElementState.Idle
            )
            update.append(
                VisualElement(k, i, point, attrs, state, old.attributes, handlers)
            )

    exit = [
        replace(el, state=ElementState.Exiting)
        for k, el in prior.items()
        if k not in seen
    ]

    return Reconciliation(enter, update, exit)
