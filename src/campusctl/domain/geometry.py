"""Planar geometry primitives for floor-local coordinates.

Pure functions over :class:`Point`. The Y axis points down (screen
convention), so a positive signed area means clockwise winding.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, model_validator

EPSILON = 1e-10


class Point(BaseModel):
    """A 2D position. Accepts ``{"x": .., "y": ..}`` or an ``(x, y)`` pair."""

    model_config = {"frozen": True}

    x: float
    y: float

    @model_validator(mode="before")
    @classmethod
    def _from_pair(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return {"x": value[0], "y": value[1]}
        return value

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


ORIGIN = Point(x=0.0, y=0.0)


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between *a* and *b*."""
    return math.hypot(b.x - a.x, b.y - a.y)


def _cross(ax: float, ay: float, bx: float, by: float) -> float:
    return ax * by - ay * bx


def nearest_point_on_segment(p: Point, a: Point, b: Point) -> Point:
    """Project *p* onto segment ``a-b``, clamped to the endpoints."""
    dx, dy = b.x - a.x, b.y - a.y
    length_sq = dx * dx + dy * dy
    if length_sq < EPSILON:
        return a
    t = ((p.x - a.x) * dx + (p.y - a.y) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    return Point(x=a.x + t * dx, y=a.y + t * dy)


def segments_intersect(p1: Point, p2: Point, p3: Point, p4: Point) -> bool:
    """Return True if segment ``p1-p2`` touches or crosses ``p3-p4``.

    Endpoint contact counts as an intersection, as does collinear overlap.
    """
    rx, ry = p2.x - p1.x, p2.y - p1.y
    sx, sy = p4.x - p3.x, p4.y - p3.y
    qx, qy = p3.x - p1.x, p3.y - p1.y
    rxs = _cross(rx, ry, sx, sy)
    qpxr = _cross(qx, qy, rx, ry)

    if abs(rxs) < EPSILON:
        if abs(qpxr) > EPSILON:
            return False  # parallel, disjoint
        r_len_sq = rx * rx + ry * ry
        if r_len_sq < EPSILON:
            # p1-p2 degenerates to a point
            if abs(_cross(qx, qy, sx, sy)) > EPSILON:
                return False
            s_len_sq = sx * sx + sy * sy
            qs = -(qx * sx + qy * sy)
            return 0 <= qs <= s_len_sq
        t0 = (qx * rx + qy * ry) / r_len_sq
        t1 = t0 + (sx * rx + sy * ry) / r_len_sq
        return max(t0, t1) >= 0 and min(t0, t1) <= 1

    t = _cross(qx, qy, sx, sy) / rxs
    u = qpxr / rxs
    return 0 <= t <= 1 and 0 <= u <= 1


def polygon_sides(vertices: Sequence[Point]) -> list[tuple[Point, Point]]:
    """Consecutive vertex pairs, including the implicit closing side."""
    n = len(vertices)
    if n < 2:
        return []
    return [(vertices[i], vertices[(i + 1) % n]) for i in range(n)]


def is_self_intersecting(vertices: Sequence[Point]) -> bool:
    """Check every pair of non-adjacent sides for an intersection.

    Polygons with fewer than four vertices are never reported. Contact
    through a shared vertex coordinate is not an intersection.
    """
    n = len(vertices)
    if n < 4:
        return False

    sides = polygon_sides(vertices)
    for i in range(n):
        p1, p2 = sides[i]
        for j in range(i + 2, n):
            if i == 0 and j == n - 1:
                continue  # first and closing side share vertex 0
            p3, p4 = sides[j]
            if not segments_intersect(p1, p2, p3, p4):
                continue
            touch_only = p1 in (p3, p4) or p2 in (p3, p4)
            if not touch_only:
                return True
    return False


def signed_area(vertices: Sequence[Point]) -> float:
    """Shoelace area; positive for clockwise winding in screen coordinates."""
    n = len(vertices)
    if n < 3:
        return 0.0
    total = 0.0
    for a, b in polygon_sides(vertices):
        total += a.x * b.y - b.x * a.y
    return total / 2


def area(vertices: Sequence[Point]) -> float:
    return abs(signed_area(vertices))


def centroid(vertices: Sequence[Point]) -> Point:
    """Area centroid, or the vertex mean for degenerate polygons."""
    n = len(vertices)
    if n == 0:
        return ORIGIN
    a = signed_area(vertices)
    if n < 3 or abs(a) < EPSILON:
        return Point(
            x=sum(v.x for v in vertices) / n,
            y=sum(v.y for v in vertices) / n,
        )

    cx = cy = 0.0
    for p, q in polygon_sides(vertices):
        factor = p.x * q.y - q.x * p.y
        cx += (p.x + q.x) * factor
        cy += (p.y + q.y) * factor
    return Point(x=cx / (6 * a), y=cy / (6 * a))


def contains_point(vertices: Sequence[Point], point: Point) -> bool:
    """Ray-casting containment test; points on the boundary count as inside."""
    n = len(vertices)
    if n < 3:
        return False

    inside = False
    for j, i in zip(range(-1, n - 1), range(n), strict=True):
        vi, vj = vertices[i], vertices[j]
        nearest = nearest_point_on_segment(point, vj, vi)
        if (nearest.x - point.x) ** 2 + (nearest.y - point.y) ** 2 < EPSILON:
            return True
        if (vi.y > point.y) != (vj.y > point.y):
            x_cross = (vj.x - vi.x) * (point.y - vi.y) / (vj.y - vi.y) + vi.x
            if point.x < x_cross:
                inside = not inside
    return inside
