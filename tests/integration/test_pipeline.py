"""
End-to-end tests of plan computation: data and config in, scales, axes,
reconciled marks and transition timing out.
"""

from datetime import datetime

import pytest
from cmap import Color

from scatterplot import (
    ChartConfig,
    DataPoint,
    DateParseError,
    ElementState,
    InvalidDomainError,
    InvalidMarginError,
    ScatterplotChart,
    TypeStyle,
    UnknownAxisTypeError,
    compute_plan,
)


DATA = [
    {"x": 0, "y": 0, "z": 1, "type": "a"},
    {"x": 5, "y": 50, "z": 2, "type": "b"},
    {"x": 10, "y": 100, "z": 3, "type": "a"},
]


def test_basic_plan():
    config = ChartConfig(axes=True, type_styles=[TypeStyle("a", Color("red").hex)])
    plan = compute_plan(DATA, config)

    assert plan.geometry.inner_width == 320 - 24 - 48
    assert plan.x_scale.domain == (0.0, 11.0)
    assert plan.y_scale.domain == (-10.0, 100.0)
    assert plan.x_axis is not None
    assert plan.y_axis is not None
    assert len(plan.enter) == 3
    assert plan.update == []
    assert plan.exit == []

    first, second, third = plan.enter
    assert first.attributes.r == 5
    assert second.attributes.r == pytest.approx(12.5)
    assert third.attributes.r == 20
    assert first.attributes.fill == Color("red").hex
    assert second.attributes.stroke == "none"
    assert first.attributes.cx == 0
    assert third.attributes.cy == 0


def test_marks_inside_inner_area():
    plan = compute_plan(DATA, ChartConfig())
    for el in plan.elements:
        assert 0 <= el.attributes.cx <= plan.geometry.inner_width
        assert 0 <= el.attributes.cy <= plan.geometry.inner_height


def test_no_axes_by_default():
    plan = compute_plan(DATA, ChartConfig())
    assert plan.x_axis is None
    assert plan.y_axis is None
    assert plan.geometry.origin == (10, 10)


def test_recompute_is_idempotent():
    config = ChartConfig()
    first = compute_plan(DATA, config)
    second = compute_plan(DATA, config, first)
    assert second.enter == []
    assert second.exit == []
    assert all(el.state == ElementState.Idle for el in second.update)
    assert [el.attributes for el in second.update] == [
        el.attributes for el in first.enter
    ]
    assert len(second.schedule) == 3
    assert second.duration == 750


def test_caller_data_is_not_modified():
    data = [dict(d) for d in DATA]
    compute_plan(data, ChartConfig())
    assert data == DATA


def test_chart_update_sequence():
    chart = ScatterplotChart(ChartConfig())

    plan = chart.update(DATA)
    assert len(plan.enter) == 3

    plan = chart.update(DATA[:2])
    assert plan.enter == []
    assert [el.index for el in plan.update] == [0, 1]
    assert [el.index for el in plan.exit] == [2]
    # the x domain shrinks, so the second mark moves
    assert plan.update[1].state == ElementState.Updating

    plan = chart.clear()
    assert plan.x_scale is None
    assert plan.y_scale is None
    assert len(plan.exit) == 2
    assert plan.elements == []

    plan = chart.update(DATA)
    assert len(plan.enter) == 3


def test_keyed_chart():
    chart = ScatterplotChart(ChartConfig(), key=lambda point, index: point.type)
    chart.update([DataPoint(0, 0, type="a"), DataPoint(1, 1, type="b")])
    plan = chart.update([DataPoint(1, 1, type="b"), DataPoint(2, 2, type="c")])
    assert [el.key for el in plan.enter] == ["c"]
    assert [el.key for el in plan.update] == ["b"]
    assert [el.key for el in plan.exit] == ["a"]


def test_retarget_while_animating():
    chart = ScatterplotChart(ChartConfig())
    chart.update([DataPoint(0, 0), DataPoint(10, 10)])
    moving = chart.update([DataPoint(0, 0), DataPoint(5, 10)])
    start = moving.update[1].previous
    midway = moving.schedule[1].attributes_at(375)

    plan = chart.update([DataPoint(0, 0), DataPoint(10, 10)], elapsed=375)
    assert plan.schedule[1].start == midway
    assert plan.schedule[1].start != start
    assert plan.update[1].previous == midway
    assert plan.update[1].state == ElementState.Updating
    assert plan.update[0].state == ElementState.Idle


def test_interrupted_update_with_same_target():
    chart = ScatterplotChart(ChartConfig())
    chart.update([DataPoint(0, 0), DataPoint(10, 10)])
    moving = chart.update([DataPoint(0, 0), DataPoint(5, 10)])
    midway = moving.schedule[1].attributes_at(375)

    plan = chart.update([DataPoint(0, 0), DataPoint(5, 10)], elapsed=375)
    el = plan.update[1]
    assert el.state == ElementState.Updating
    assert el.previous == midway
    assert el.changed
    assert plan.schedule[1].start == el.previous
    assert plan.schedule[1].end == el.attributes


def test_finished_update_is_not_restarted():
    chart = ScatterplotChart(ChartConfig())
    chart.update([DataPoint(0, 0), DataPoint(10, 10)])
    chart.update([DataPoint(0, 0), DataPoint(5, 10)])

    plan = chart.update([DataPoint(0, 0), DataPoint(5, 10)], elapsed=900)
    assert all(el.state == ElementState.Idle for el in plan.update)


def test_ordinal_and_time_axes():
    config = ChartConfig(axes=True, x_type="text", y_type="time")
    data = [
        {"x": "apple", "y": "01-Jan-20"},
        {"x": "pear", "y": "11-Jan-20"},
        {"x": "apple", "y": "06-Jan-20"},
    ]
    plan = compute_plan(data, config)
    assert plan.x_scale.domain == ("apple", "pear")
    assert plan.y_scale.domain == (datetime(2020, 1, 1), datetime(2020, 1, 11))
    assert plan.enter[0].attributes.cx == plan.enter[2].attributes.cx
    assert plan.enter[1].attributes.cy == pytest.approx(0)
    assert [t.label for t in plan.x_axis.ticks()] == ["apple", "pear"]


def test_shared_date_parsers():
    chart = ScatterplotChart(ChartConfig(x_type="time"))
    chart.update([{"x": "01-Jan-20", "y": 1}, {"x": "02-Jan-20", "y": 2}])
    assert "%d-%b-%y" in chart.context.date_parsers


def test_explicit_domains_without_data():
    config = ChartConfig(axes=True, x_domain_range=(0, 10), y_domain_range=(0, 5))
    plan = compute_plan([], config)
    assert plan.x_scale.domain == (0.0, 10.0)
    assert plan.x_axis is not None
    assert plan.elements == []


def test_hover_callback_bound_to_point():
    seen = []
    config = ChartConfig(on_hover=lambda point, event: seen.append((point.x, event)))
    plan = compute_plan(DATA, config)
    plan.enter[1].handlers["mouseover"]("evt")
    assert seen == [(5, "evt")]


def test_unknown_axis_type():
    with pytest.raises(UnknownAxisTypeError):
        compute_plan(DATA, ChartConfig(x_type="log"))


def test_unknown_axis_type_without_data():
    with pytest.raises(UnknownAxisTypeError):
        compute_plan([], ChartConfig(y_type="polar"))


def test_margins_too_large():
    with pytest.raises(InvalidMarginError):
        compute_plan(DATA, ChartConfig(width=40, axes=True))


def test_bad_date():
    with pytest.raises(DateParseError):
        compute_plan([{"x": "2020-01-01", "y": 1}], ChartConfig(x_type="time"))


def test_non_numeric_linear_data():
    with pytest.raises(InvalidDomainError):
        compute_plan([{"x": "a", "y": 1}], ChartConfig())


@pytest.mark.parametrize(
    "data",
    [[{"x": 1}], [{"x": 1, "y": 1, "z": 1}, {"x": 2, "y": 2, "z": "big"}]],
)
def test_bad_points_raise_plan_errors(data):
    with pytest.raises(InvalidDomainError):
        compute_plan(data, ChartConfig())
