import pytest

from scatterplot.data import DataPoint, as_points, field_values
from scatterplot.errors import InvalidDomainError


def test_from_mapping_keeps_extra_fields():
    record = {"x": 1, "y": 2, "z": 3, "type": "a", "label": "first"}
    point = DataPoint.from_mapping(record)
    assert (point.x, point.y, point.z, point.type) == (1, 2, 3, "a")
    assert point.extra == {"label": "first"}
    assert record == {"x": 1, "y": 2, "z": 3, "type": "a", "label": "first"}


def test_from_mapping_requires_coordinates():
    with pytest.raises(InvalidDomainError):
        DataPoint.from_mapping({"x": 1})


def test_has_z():
    assert DataPoint(0, 0, z=0).has_z()
    assert not DataPoint(0, 0).has_z()


def test_value_of():
    point = DataPoint("a", 3)
    assert point.value_of("x") == "a"
    assert point.value_of("y") == 3
    with pytest.raises(ValueError):
        point.value_of("z")


def test_as_points_mixed():
    existing = DataPoint(5, 6)
    points = as_points([{"x": 1, "y": 2}, existing])
    assert points == [DataPoint(1, 2), existing]
    assert points[1] is existing


def test_as_points_rejects_bad_input():
    with pytest.raises(TypeError):
        as_points(None)
    with pytest.raises(TypeError):
        as_points([(1, 2)])


def test_field_values():
    points = [DataPoint(1, "a"), DataPoint(2, "b")]
    assert field_values(points, "x") == [1, 2]
    assert field_values(points, "y") == ["a", "b"]
