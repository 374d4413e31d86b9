"""
Timing of animated updates.

Only the update set is animated, over a fixed duration shared by marks and
axis re-layout. Entering marks are drawn at their targets and exiting marks
are removed as soon as the plan is applied. The core only emits start and
target values with a duration; the renderer owns the clock.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from .reconcile import Attributes, VisualElement

TRANSITION_DURATION_MS = 750.0

Easing = Callable[[float], float]


def ease_cubic_in_out(t: float) -> float:
    t *= 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


def ease_linear(t: float) -> float:
    return t


@dataclass(frozen=True)
class Transition:
    start: Attributes
    end: Attributes
    duration: float = TRANSITION_DURATION_MS
    ease: Easing = ease_cubic_in_out

    def progress(self, elapsed: float) -> float:
        if self.duration <= 0:
            return 1.0
        return min(max(elapsed / self.duration, 0.0), 1.0)

    def done(self, elapsed: float) -> bool:
        return self.progress(elapsed) >= 1.0

    def attributes_at(self, elapsed: float) -> Attributes:
        if self.done(elapsed):
            return self.end
        return self.start.interpolate(self.end, self.ease(self.progress(elapsed)))

    def retarget(self, elapsed: float, end: Attributes) -> "Transition":
        """
        Restart toward `end` from wherever this transition is after `elapsed`
        milliseconds. The previous target is dropped.
        """
        return Transition(self.attributes_at(elapsed), end, self.duration, self.ease)


@dataclass(frozen=True)
class Schedule:
    """
    Transitions for one update set, keyed by element key. `duration` also
    applies to axis tick re-layout.
    """

    duration: float
    transitions: Mapping[Hashable, Transition] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __len__(self) -> int:
        return len(self.transitions)

    def __getitem__(self, key: Hashable) -> Transition:
        return self.transitions[key]

    def __contains__(self, key: Hashable) -> bool:
        return key in self.transitions

    def attributes_at(self, elapsed: float) -> dict[Hashable, Attributes]:
        return {k: tr.attributes_at(elapsed) for k, tr in self.transitions.items()}

    def done(self, elapsed: float) -> bool:
        return elapsed >= self.duration


class TransitionScheduler:
    """
    Assigns the fixed update duration and easing to an update set.
    """

    duration: float = TRANSITION_DURATION_MS
    ease: Easing

    def __init__(self, ease: Easing = ease_cubic_in_out):
        self.ease = ease

    def schedule(
        self,
        update: Sequence[VisualElement],
        in_flight: Schedule | None = None,
        elapsed: float = 0.0,
    ) -> Schedule:
        """
        Schedule `update`. If a previous schedule is still running, marks it
        is animating restart from their position `elapsed` ms into it.
        """
        running = in_flight is not None and not in_flight.done(elapsed)

        transitions: dict[Hashable, Transition] = {}
        for el in update:
            assert el.previous is not None
            if running and el.key in in_flight:
                transitions[el.key] = in_flight[el.key].retarget(
                    elapsed, el.attributes
                )
            else:
                transitions[el.key] = Transition(
                    el.previous, el.attributes, self.duration, self.ease
                )

        return Schedule(self.duration, MappingProxyType(transitions))


def schedule(update: Sequence[VisualElement]) -> Schedule:
    return TransitionScheduler().schedule(update)
