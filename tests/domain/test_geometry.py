"""Tests for planar geometry helpers."""

from __future__ import annotations

import pytest

from campusctl.domain.geometry import (
    Point,
    area,
    centroid,
    contains_point,
    distance,
    is_self_intersecting,
    nearest_point_on_segment,
    polygon_sides,
    segments_intersect,
    signed_area,
)

SQUARE = [Point(x=0, y=0), Point(x=2, y=0), Point(x=2, y=2), Point(x=0, y=2)]
BOWTIE = [Point(x=0, y=0), Point(x=2, y=2), Point(x=2, y=0), Point(x=0, y=2)]


def _pts(*pairs: tuple[float, float]) -> list[Point]:
    return [Point.model_validate(p) for p in pairs]


class TestPoint:
    def test_from_pair(self) -> None:
        assert Point.model_validate((1, 2)) == Point(x=1, y=2)

    def test_from_mapping(self) -> None:
        assert Point.model_validate({"x": 3, "y": 4}).as_tuple() == (3.0, 4.0)

    def test_frozen(self) -> None:
        p = Point(x=0, y=0)
        with pytest.raises(Exception):
            p.x = 1  # type: ignore[misc]


class TestDistance:
    def test_three_four_five(self) -> None:
        assert distance(Point(x=0, y=0), Point(x=3, y=4)) == pytest.approx(5.0)

    def test_zero(self) -> None:
        assert distance(Point(x=1, y=1), Point(x=1, y=1)) == 0.0


class TestNearestPointOnSegment:
    def test_interior_projection(self) -> None:
        p = nearest_point_on_segment(Point(x=5, y=3), Point(x=0, y=0), Point(x=10, y=0))
        assert p == Point(x=5, y=0)

    def test_clamped_to_endpoint(self) -> None:
        p = nearest_point_on_segment(Point(x=-4, y=1), Point(x=0, y=0), Point(x=10, y=0))
        assert p == Point(x=0, y=0)

    def test_degenerate_segment(self) -> None:
        a = Point(x=2, y=2)
        assert nearest_point_on_segment(Point(x=9, y=9), a, a) == a


class TestSegmentsIntersect:
    def test_crossing(self) -> None:
        assert segments_intersect(*_pts((0, 0), (2, 2), (0, 2), (2, 0)))

    def test_disjoint(self) -> None:
        assert not segments_intersect(*_pts((0, 0), (1, 0), (0, 1), (1, 1)))

    def test_endpoint_contact(self) -> None:
        assert segments_intersect(*_pts((0, 0), (1, 1), (1, 1), (2, 0)))

    def test_collinear_overlap(self) -> None:
        assert segments_intersect(*_pts((0, 0), (2, 0), (1, 0), (3, 0)))

    def test_collinear_apart(self) -> None:
        assert not segments_intersect(*_pts((0, 0), (1, 0), (2, 0), (3, 0)))


class TestPolygons:
    def test_sides_include_closing_side(self) -> None:
        sides = polygon_sides(SQUARE)
        assert len(sides) == 4
        assert sides[-1] == (SQUARE[3], SQUARE[0])

    def test_bowtie_self_intersects(self) -> None:
        assert is_self_intersecting(BOWTIE) is True

    def test_square_is_simple(self) -> None:
        assert is_self_intersecting(SQUARE) is False

    def test_triangle_never_reported(self) -> None:
        assert is_self_intersecting(_pts((0, 0), (1, 0), (0, 1))) is False

    def test_area(self) -> None:
        assert area(SQUARE) == pytest.approx(4.0)

    def test_winding_sign(self) -> None:
        assert signed_area(SQUARE) == -signed_area(list(reversed(SQUARE)))

    def test_centroid(self) -> None:
        assert centroid(SQUARE) == Point(x=1, y=1)

    def test_centroid_degenerate(self) -> None:
        assert centroid(_pts((0, 0), (4, 0))) == Point(x=2, y=0)

    def test_contains_interior(self) -> None:
        assert contains_point(SQUARE, Point(x=1, y=1))

    def test_contains_boundary(self) -> None:
        assert contains_point(SQUARE, Point(x=2, y=1))

    def test_outside(self) -> None:
        assert not contains_point(SQUARE, Point(x=3, y=1))
