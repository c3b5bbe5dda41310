import math

import pytest

from graphyy.datasets import DataPoint
from graphyy.graph import Point2D
from graphyy.simplify import (
    distance_to_segment,
    simplify_indices,
    simplify_points,
    smooth_curve,
    smooth_data,
)


def _recursive_douglas_peucker(points, tolerance):
    if len(points) <= 2:
        return list(points)
    first, last = points[0], points[-1]
    max_distance, max_index = 0, 0
    for i in range(1, len(points) - 1):
        distance = distance_to_segment(points[i], first, last)
        if distance > max_distance:
            max_distance, max_index = distance, i
    if max_distance > tolerance:
        left = _recursive_douglas_peucker(points[:max_index + 1], tolerance)
        right = _recursive_douglas_peucker(points[max_index:], tolerance)
        return left[:-1] + right
    return [first, last]


def test_distance_to_segment():
    assert distance_to_segment((0.5, 1), (0, 0), (1, 0)) == pytest.approx(1.0)
    # Beyond the end the distance is to the endpoint
    assert distance_to_segment((2, 0), (0, 0), (1, 0)) == pytest.approx(1.0)
    assert distance_to_segment((3, 4), (0, 0), (0, 0)) == pytest.approx(5.0)


def test_straight_line_collapses_to_endpoints():
    line = [Point2D(x, 2 * x + 1) for x in range(10)]
    assert simplify_points(line) == [Point2D(0, 1), Point2D(9, 19)]


def test_corner_is_kept():
    points = [Point2D(0, 0), Point2D(2.5, 2.5), Point2D(5, 5), Point2D(7.5, 2.5), Point2D(10, 0)]
    assert simplify_points(points) == [Point2D(0, 0), Point2D(5, 5), Point2D(10, 0)]


def test_short_input_returned_as_is():
    assert simplify_points([]) == []
    assert simplify_points([Point2D(0, 0), Point2D(1, 5)]) == [Point2D(0, 0), Point2D(1, 5)]
    assert simplify_indices([Point2D(0, 0)]) == [0]


def test_matches_recursive_formulation():
    points = [Point2D(x / 10, 10 * math.sin(x / 7)) for x in range(400)]
    for tolerance in (0.01, 0.5, 2.0):
        assert simplify_points(points, tolerance) == _recursive_douglas_peucker(points, tolerance)


def test_long_curve():
    points = [Point2D(i / 100, (i / 100) ** 2) for i in range(20000)]
    simplified = simplify_points(points, tolerance=0.001)
    assert simplified[0] == points[0]
    assert simplified[-1] == points[-1]
    assert 2 < len(simplified) < len(points)


def test_smooth_data_window():
    points = [DataPoint(0, 0, "a"), DataPoint(1, 3), DataPoint(2, 0), DataPoint(3, 3, "d")]
    smoothed = smooth_data(points, 3)
    assert [p.y for p in smoothed] == pytest.approx([1.5, 1, 2, 1.5])
    assert [p.x for p in smoothed] == [0, 1, 2, 3]
    assert smoothed[0].label == "a"
    assert smoothed[3].label == "d"


def test_smooth_data_identity_cases():
    points = [DataPoint(0, 1), DataPoint(1, 5), DataPoint(2, 2)]
    assert smooth_data(points, 1) == points
    assert smooth_data(points, 3) == points


def test_smooth_curve():
    smoothed = smooth_curve([Point2D(0, 0), Point2D(1, 1), Point2D(2, 0)], smoothing=0.5)
    assert smoothed == [Point2D(0, 0), Point2D(1, 0), Point2D(2, 0)]


def test_smooth_curve_short_input():
    points = [Point2D(0, 0), Point2D(1, 1)]
    assert smooth_curve(points) == points
