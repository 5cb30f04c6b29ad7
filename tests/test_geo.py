"""
Tests for great-circle distance and Overpass element coordinates.
"""

import math

import pytest

from app.utils.geo import EARTH_RADIUS_METERS, element_coordinates, haversine_meters

POINTS = [
    (18.5204, 73.8567),
    (-33.8688, 151.2093),
    (51.5074, -0.1278),
    (0.0, 0.0),
    (89.9, -179.9),
]


@pytest.mark.parametrize("a", POINTS)
@pytest.mark.parametrize("b", POINTS)
def test_distance_is_symmetric(a, b):
    assert haversine_meters(*a, *b) == pytest.approx(haversine_meters(*b, *a))


@pytest.mark.parametrize("point", POINTS)
def test_distance_to_self_is_zero(point):
    assert haversine_meters(*point, *point) == 0.0


def test_one_degree_of_latitude():
    assert haversine_meters(0.0, 0.0, 1.0, 0.0) == pytest.approx(111195, rel=1e-3)


def test_antipodal_points_are_half_circumference_apart():
    distance = haversine_meters(0.0, 0.0, 0.0, 180.0)

    assert not math.isnan(distance)
    assert distance == pytest.approx(math.pi * EARTH_RADIUS_METERS)


def test_pole_to_pole():
    distance = haversine_meters(90.0, 0.0, -90.0, 0.0)

    assert not math.isnan(distance)
    assert distance == pytest.approx(math.pi * EARTH_RADIUS_METERS)


def test_element_coordinates_prefers_center():
    element = {"type": "way", "lat": 1.0, "lon": 1.0, "center": {"lat": 2.0, "lon": 3.0}}

    assert element_coordinates(element) == (2.0, 3.0)


def test_element_coordinates_falls_back_to_node_position():
    assert element_coordinates({"type": "node", "lat": 4.5, "lon": 5.5}) == (4.5, 5.5)


def test_element_coordinates_missing():
    assert element_coordinates({"type": "way", "geometry": []}) is None
    assert element_coordinates({"type": "way", "center": {"lat": 1.0}}) is None
