import pytest

from scatterplot.data import DataPoint
from scatterplot.reconcile import (
    Attributes,
    ElementState,
    VisualElement,
    reconcile,
)


def attrs_for(points):
    return [Attributes(p.x * 10, p.y * 10, 5, "#ff0000", "none") for p in points]


def run(previous, points, **kwargs):
    return reconcile(previous, points, attrs_for(points), **kwargs)


def settled(result):
    return [el.settle() for el in result.bound]


A, B, C = DataPoint(1, 1), DataPoint(2, 2), DataPoint(3, 3)


def test_first_pass_enters_everything():
    result = run([], [A, B])
    assert [el.datum for el in result.enter] == [A, B]
    assert result.update == []
    assert result.exit == []
    assert all(el.state == ElementState.Entering for el in result.enter)


def test_shrinking_exits_tail():
    first = settled(run([], [A, B, C]))
    result = run(first, [A, B])
    assert result.enter == []
    assert [el.index for el in result.update] == [0, 1]
    assert [el.datum for el in result.exit] == [C]
    assert result.exit[0].state == ElementState.Exiting


def test_growing_from_empty():
    result = run([], [A, B])
    assert len(result.enter) == 2
    assert len(result) == 2


def test_empty_data_exits_everything():
    first = settled(run([], [A, B, C]))
    result = run(first, [])
    assert result.enter == []
    assert result.update == []
    assert len(result.exit) == 3


def test_unchanged_update_is_idle():
    first = settled(run([], [A, B]))
    result = run(first, [A, B])
    assert all(el.state == ElementState.Idle for el in result.update)
    assert not any(el.changed for el in result.update)


def test_changed_update_keeps_previous_attributes():
    first = settled(run([], [A]))
    moved = DataPoint(5, 5)
    result = run(first, [moved])
    (el,) = result.update
    assert el.state == ElementState.Updating
    assert el.previous == first[0].attributes
    assert el.attributes.cx == 50
    assert el.changed


def test_positional_matching_ignores_identity():
    first = settled(run([], [A, B]))
    result = run(first, [B, A])
    assert [el.key for el in result.update] == [0, 1]
    assert all(el.state == ElementState.Updating for el in result.update)


def test_keyed_matching():
    by_x = lambda point, index: point.x
    first = settled(run([], [A, B], key=by_x))
    result = run(first, [C, B], key=by_x)
    assert [el.datum for el in result.enter] == [C]
    assert [el.key for el in result.update] == [2]
    assert result.update[0].index == 1
    assert [el.key for el in result.exit] == [1]
    assert [el.datum for el in result.bound] == [C, B]


def test_duplicate_keys():
    with pytest.raises(ValueError):
        run([], [A, A], key=lambda point, index: point.x)


def test_attribute_count_mismatch():
    with pytest.raises(ValueError):
        reconcile([], [A, B], attrs_for([A]))


def test_exited_elements_are_not_matched_again():
    first = settled(run([], [A, B]))
    second = run(first, [A])
    removed = [el.settle() for el in second.exit]
    assert removed[0].state == ElementState.Removed

    result = run(settled(second) + removed, [A, B])
    assert [el.index for el in result.enter] == [1]


def test_entering_elements_count_as_bound():
    first = run([], [A])
    result = run(first.enter, [A])
    assert len(result.update) == 1


def test_handlers_receive_point_and_event():
    calls = []

    def on_click(point, event):
        calls.append((point, event))

    result = run([], [A, B], callbacks={"click": on_click})
    result.enter[1].handlers["click"]("evt")
    assert calls == [(B, "evt")]
    assert "mouseover" not in result.enter[0].handlers


def test_handlers_rebound_on_update():
    calls = []
    callbacks = {"mouseover": lambda point, event: calls.append(point)}
    first = settled(run([], [A], callbacks=callbacks))
    result = run(first, [C], callbacks=callbacks)
    result.update[0].handlers["mouseover"](None)
    assert calls == [C]


def test_settle_lifecycle():
    el = VisualElement(0, 0, A, attrs_for([A])[0], ElementState.Entering)
    assert el.settle().state == ElementState.Idle
    assert el.settle().settle().state == ElementState.Idle
    assert ElementState.Idle.isbound()
    assert not ElementState.Exiting.isbound()


def test_interpolate_snaps_colors():
    start = Attributes(0, 0, 5, "#000000", "none")
    end = Attributes(10, 20, 15, "#ffffff", "#ff0000")
    mid = start.interpolate(end, 0.5)
    assert (mid.cx, mid.cy, mid.r) == (5, 10, 10)
    assert mid.fill == "#ffffff"
    assert mid.stroke == "#ff0000"


def test_restart_from_interrupted_position():
    target = attrs_for([A])[0]
    el = VisualElement(0, 0, A, target, ElementState.Idle, target)
    midway = Attributes(5, 5, 5, "#ff0000", "none")

    restarted = el.restart_from(midway)
    assert restarted.state == ElementState.Updating
    assert restarted.previous == midway
    assert restarted.changed

    assert el.restart_from(target).state == ElementState.Idle
