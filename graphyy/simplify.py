"""
Curve simplification and smoothing
"""
import math

from .config import CURVE_SMOOTHING, SIMPLIFY_TOLERANCE
from .graph import Point2D


def distance_to_segment(point, start, end):
    """Distance from ``point`` to the segment start-end (not the infinite line)"""
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    length_sq = dx * dx + dy * dy

    if length_sq == 0:
        return math.hypot(point[0] - start[0], point[1] - start[1])

    t = ((point[0] - start[0]) * dx + (point[1] - start[1]) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(point[0] - (start[0] + t * dx), point[1] - (start[1] + t * dy))


# ============================================================================
# DOUGLAS-PEUCKER
# ============================================================================

def simplify_indices(points, tolerance=SIMPLIFY_TOLERANCE):
    """Indices of the points Douglas-Peucker keeps, in order"""
    count = len(points)
    if count <= 2:
        return list(range(count))

    keep = [False] * count
    keep[0] = keep[-1] = True

    # Work stack of (first, last) spans still to examine
    stack = [(0, count - 1)]
    while stack:
        first, last = stack.pop()
        max_distance = 0.0
        max_index = first

        for i in range(first + 1, last):
            distance = distance_to_segment(points[i], points[first], points[last])
            if distance > max_distance:
                max_distance = distance
                max_index = i

        if max_distance > tolerance:
            keep[max_index] = True
            stack.append((max_index, last))
            stack.append((first, max_index))

    return [i for i, kept in enumerate(keep) if kept]


def simplify_points(points, tolerance=SIMPLIFY_TOLERANCE):
    """Reduce a polyline to the points that deviate more than ``tolerance``"""
    points = list(points)
    return [points[i] for i in simplify_indices(points, tolerance)]


# ============================================================================
# SMOOTHING
# ============================================================================

def smooth_data(points, window_size):
    """
    Centered moving average of the y values.

    Each point takes the mean of its neighbours within ``window_size // 2``
    on either side (the window shrinks at the ends). x and labels are kept.
    """
    points = list(points)
    if window_size <= 1 or window_size >= len(points):
        return points

    half = window_size // 2
    smoothed = []
    for i, point in enumerate(points):
        start = max(0, i - half)
        end = min(len(points) - 1, i + half)
        window = [p[1] for p in points[start:end + 1]]
        smoothed.append(point._replace(y=sum(window) / len(window)))
    return smoothed


def smooth_curve(points, smoothing=CURVE_SMOOTHING):
    """Pull each interior point toward its neighbours; endpoints stay put"""
    points = list(points)
    if len(points) < 3:
        return points

    smoothed = [points[0]]
    for prev, curr, nxt in zip(points, points[1:], points[2:]):
        x = curr[0] + smoothing * (prev[0] + nxt[0] - 2 * curr[0])
        y = curr[1] + smoothing * (prev[1] + nxt[1] - 2 * curr[1])
        smoothed.append(Point2D(x, y))
    smoothed.append(points[-1])
    return smoothed
