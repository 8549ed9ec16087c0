"""Tests for polygon boolean and offset operations."""

import pytest

from layerizer.core.clipper import (
    diff_ex,
    intersection_ex,
    offset,
    offset2,
    offset2_ex,
    offset_ex,
    offset_polylines,
    total_area,
    union,
    union_ex,
    union_pt,
)
from layerizer.domain import Point, Polyline
from layerizer.units import scale

MM2 = scale(scale(1.0))


class TestBooleans:
    """Tests for union, difference and intersection."""

    def test_union_of_overlapping_squares(self, rect) -> None:
        result = union_ex([rect(0, 0, 10, 10), rect(5, 0, 15, 10)])

        assert len(result) == 1
        assert result[0].area() == pytest.approx(150 * MM2)

    def test_union_keeps_disjoint_polygons_apart(self, rect) -> None:
        result = union([rect(0, 0, 1, 1), rect(5, 5, 6, 6)])
        assert len(result) == 2

    def test_diff_creates_clockwise_hole(self, rect) -> None:
        result = diff_ex([rect(0, 0, 10, 10)], [rect(3, 3, 7, 7)])

        assert len(result) == 1
        assert len(result[0].holes) == 1
        assert result[0].contour.is_counter_clockwise()
        assert not result[0].holes[0].is_counter_clockwise()
        assert result[0].area() == pytest.approx(84 * MM2)

    def test_diff_with_itself_leaves_nothing(self, rect) -> None:
        square = rect(0, 0, 10, 10)
        assert diff_ex([square], [square], safety_offset=True) == []

    def test_diff_without_clip_returns_subject(self, rect) -> None:
        result = diff_ex([rect(0, 0, 10, 10)], [])
        assert total_area(result) == pytest.approx(100 * MM2)

    def test_intersection(self, rect) -> None:
        result = intersection_ex([rect(0, 0, 10, 10)], [rect(5, 5, 15, 15)])

        assert len(result) == 1
        assert result[0].area() == pytest.approx(25 * MM2)

    def test_empty_subject(self, rect) -> None:
        assert union_ex([]) == []
        assert intersection_ex([], [rect(0, 0, 1, 1)]) == []


class TestOffsets:
    """Tests for offsets."""

    def test_grow_keeps_sharp_corners(self, rect) -> None:
        result = offset([rect(0, 0, 10, 10)], scale(1.0))

        assert len(result) == 1
        assert result[0].area() == pytest.approx(144 * MM2, rel=1e-6)

    def test_shrink(self, rect) -> None:
        result = offset_ex([rect(0, 0, 10, 10)], -scale(1.0))
        assert result[0].area() == pytest.approx(64 * MM2, rel=1e-6)

    def test_shrink_grows_holes(self, rect, hole) -> None:
        """Holes move opposite to contours."""
        result = offset_ex([rect(0, 0, 10, 10), hole(4, 4, 6, 6)], -scale(1.0))

        assert len(result) == 1
        assert len(result[0].holes) == 1
        assert result[0].area() == pytest.approx((64 - 16) * MM2, rel=1e-6)

    def test_offset2_removes_narrow_parts(self, rect) -> None:
        polygons = [rect(0, 0, 1.5, 10), rect(10, 0, 20, 10)]

        result = offset2_ex(polygons, -scale(1.0), scale(1.0))

        assert len(result) == 1
        assert result[0].area() == pytest.approx(100 * MM2, rel=1e-6)

    def test_offset2_of_thin_strip_is_empty(self, rect) -> None:
        assert offset2([rect(0, 0, 1.5, 10)], -scale(1.0), scale(1.0)) == []

    def test_offset_polylines(self) -> None:
        line = Polyline(points=[Point(0, 0), Point(int(scale(10)), 0)])

        result = offset_polylines([line], scale(0.5))

        assert len(result) == 1
        area = result[0].area()
        # a 1 mm wide stroke with round caps
        assert 10 * MM2 < area < 11 * MM2

    def test_offset_polylines_skips_single_points(self) -> None:
        assert offset_polylines([Polyline(points=[Point(0, 0)])], scale(0.5)) == []


class TestContainmentTree:
    """Tests for union_pt."""

    def test_nested_squares(self, rect) -> None:
        tree = union_pt([rect(4, 4, 6, 6), rect(0, 0, 10, 10), rect(2, 2, 8, 8)])

        assert len(tree) == 3
        assert len(tree.roots) == 1
        assert sorted(node.depth for node in tree.nodes) == [0, 1, 2]

        root = tree.nodes[tree.roots[0]]
        assert root.polygon.area() == pytest.approx(100 * MM2)
        assert root.parent is None
        assert not root.is_hole

        middle = tree.nodes[root.children[0]]
        assert middle.is_hole
        assert middle.parent == tree.roots[0]
        assert tree.nodes[middle.children[0]].depth == 2

    def test_siblings(self, rect) -> None:
        tree = union_pt([rect(0, 0, 1, 1), rect(5, 0, 6, 1)])

        assert len(tree.roots) == 2
        assert all(node.children == [] for node in tree.nodes)

    def test_empty(self) -> None:
        tree = union_pt([])
        assert len(tree) == 0
        assert tree.roots == []
