"""Geometry kernel for the measurement core.

Every function here is pure: it takes an immutable snapshot of vertex data
(any sequence of ``(x, y)`` pairs) and returns a number or a flag. Rings are
closed vertex sequences whose first and last entries coincide.
"""
from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np

from .errors import require

Point = Tuple[float, float]
Rect = Tuple[float, float, float, float]  # x, y, width, height


def _as_array(points: Sequence[Sequence[float]]) -> np.ndarray:
    arr = np.asarray(points, dtype=float)
    if arr.size == 0:
        return np.zeros((0, 2), dtype=float)
    return arr.reshape(-1, 2)


def is_closed(ring: Sequence[Sequence[float]]) -> bool:
    """True for an empty ring or one whose first vertex equals its last."""
    if len(ring) == 0:
        return True
    first, last = ring[0], ring[-1]
    return float(first[0]) == float(last[0]) and float(first[1]) == float(last[1])


def _require_closed(ring: Sequence[Sequence[float]]) -> None:
    require(is_closed(ring), "ring must be closed (first vertex == last vertex)")


# ---------------------------------------------------------------------------
# Length and area


def length(points: Sequence[Sequence[float]]) -> float:
    """Return the cumulative length of an open point sequence."""
    pts = _as_array(points)
    if pts.shape[0] < 2:
        return 0.0
    delta = np.diff(pts, axis=0)
    seg = np.hypot(delta[:, 0], delta[:, 1])
    return float(np.sum(seg))


def signed_area(ring: Sequence[Sequence[float]]) -> float:
    """Signed area of a closed ring, fanned from its first vertex."""
    _require_closed(ring)
    pts = _as_array(ring)
    if pts.shape[0] < 4:
        return 0.0
    rel = pts[1:-1] - pts[0]
    cross = rel[:-1, 0] * rel[1:, 1] - rel[:-1, 1] * rel[1:, 0]
    return float(np.sum(cross) / 2.0)


def area(ring: Sequence[Sequence[float]]) -> float:
    """Return the absolute area spanned by a closed ring."""
    return abs(signed_area(ring))


# ---------------------------------------------------------------------------
# Intersections


def segments_cross(a: Point, b: Point, c: Point, d: Point) -> bool:
    """True when segments ``ab`` and ``cd`` meet within both their bounds.

    Endpoints count as part of a segment. Parallel segments (including
    collinear overlapping ones) never cross.
    """
    x1, y1 = float(a[0]), float(a[1])
    x2, y2 = float(b[0]), float(b[1])
    x3, y3 = float(c[0]), float(c[1])
    x4, y4 = float(d[0]), float(d[1])
    den = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if den == 0.0 or not math.isfinite(den):
        return False
    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / den
    u = ((x1 - x3) * (y1 - y2) - (y1 - y3) * (x1 - x2)) / den
    return 0.0 <= t <= 1.0 and 0.0 <= u <= 1.0


def is_self_intersecting(ring: Sequence[Sequence[float]]) -> bool:
    """Test every pair of non-adjacent edges of a closed ring for a crossing.

    Quadratic in the vertex count. Collinear overlapping edges are not
    detected.
    """
    _require_closed(ring)
    n = len(ring) - 1  # the closing vertex duplicates the first one
    for i1 in range(n):
        i2 = (i1 + 1) % n
        for j1 in range(n):
            j2 = (j1 + 1) % n
            if i1 == j1 or i1 == j2 or i2 == j1:
                continue
            if segments_cross(ring[i1], ring[i2], ring[j1], ring[j2]):
                return True
    return False


# ---------------------------------------------------------------------------
# Distances


def distance_point_point(p: Sequence[float], q: Sequence[float]) -> float:
    return float(math.hypot(float(q[0]) - float(p[0]), float(q[1]) - float(p[1])))


def distance_point_segment(p: Sequence[float], a: Sequence[float], b: Sequence[float]) -> float:
    """Distance to the perpendicular foot when it lies on ``ab``, else to the nearest endpoint."""
    ax, ay = float(a[0]), float(a[1])
    abx = float(b[0]) - ax
    aby = float(b[1]) - ay
    denom = abx * abx + aby * aby
    if denom == 0.0:
        return distance_point_point(p, a)
    t = ((float(p[0]) - ax) * abx + (float(p[1]) - ay) * aby) / denom
    t = max(0.0, min(1.0, t))
    return distance_point_point(p, (ax + abx * t, ay + aby * t))


def distance_point_polyline(point: Sequence[float], polyline: Sequence[Sequence[float]]) -> float:
    """Compute the minimum distance from ``point`` to the given ``polyline``."""
    pts = _as_array(polyline)
    if pts.shape[0] == 0:
        return float("inf")
    if pts.shape[0] == 1:
        return distance_point_point(point, pts[0])
    seg_vec = pts[1:] - pts[:-1]
    seg_len_sq = np.sum(seg_vec ** 2, axis=1)
    to_point = np.asarray(point, dtype=float) - pts[:-1]
    with np.errstate(divide="ignore", invalid="ignore"):
        t = np.sum(to_point * seg_vec, axis=1) / seg_len_sq
    t = np.where(seg_len_sq > 0.0, np.clip(t, 0.0, 1.0), 0.0)
    projection = pts[:-1] + seg_vec * t[:, None]
    dist = np.hypot(float(point[0]) - projection[:, 0], float(point[1]) - projection[:, 1])
    return float(np.min(dist))


def contains_point(polygon: Sequence[Sequence[float]], point: Sequence[float]) -> bool:
    """Even-odd containment test; the polygon may be given open or closed."""
    n = len(polygon)
    if n < 3:
        return False
    px, py = float(point[0]), float(point[1])
    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = float(polygon[i][0]), float(polygon[i][1])
        xj, yj = float(polygon[j][0]), float(polygon[j][1])
        if (yi > py) != (yj > py):
            x_cross = xi + (py - yi) * (xj - xi) / (yj - yi)
            if px < x_cross:
                inside = not inside
        j = i
    return inside


def distance_point_polygon(point: Sequence[float], ring: Sequence[Sequence[float]]) -> float:
    """Zero inside the ring (even-odd rule), otherwise the boundary distance."""
    if contains_point(ring, point):
        return 0.0
    return distance_point_polyline(point, ring)


def rect_ring(rect: Rect) -> list[Point]:
    x, y, w, h = (float(v) for v in rect)
    return [(x, y), (x + w, y), (x + w, y + h), (x, y + h), (x, y)]


def distance_point_rect(point: Sequence[float], rect: Rect) -> float:
    return distance_point_polygon(point, rect_ring(rect))


def scale_points(points: Sequence[Sequence[float]], factor: float) -> list[Point]:
    f = float(factor)
    return [(float(p[0]) * f, float(p[1]) * f) for p in points]


__all__ = [
    "Point",
    "Rect",
    "area",
    "contains_point",
    "distance_point_point",
    "distance_point_polygon",
    "distance_point_polyline",
    "distance_point_rect",
    "distance_point_segment",
    "is_closed",
    "is_self_intersecting",
    "length",
    "rect_ring",
    "scale_points",
    "segments_cross",
    "signed_area",
]
