"""Tests for bridge direction detection."""

import pytest

from layerizer.config import GeometryConfig, LayerizerSettings
from layerizer.core.bridge import BridgeDetector
from layerizer.domain import ExPolygon, Surface, SurfaceType
from layerizer.units import scale

LINE_WIDTH = scale(0.5)


@pytest.fixture
def detector(settings: LayerizerSettings) -> BridgeDetector:
    return BridgeDetector(settings)


@pytest.fixture
def span(rect) -> ExPolygon:
    """A 20x10 mm bottom surface."""
    return ExPolygon(contour=rect(0, 0, 20, 10))


@pytest.fixture
def two_banks(rect) -> list[ExPolygon]:
    """Islands below the lower and upper edges of the span."""
    return [
        ExPolygon(contour=rect(-5, -5, 25, 1)),
        ExPolygon(contour=rect(-5, 9, 25, 15)),
    ]


class TestFindEdges:
    """Tests for BridgeDetector.find_edges."""

    def test_two_supported_edges(self, detector, span, two_banks) -> None:
        edges = detector.find_edges(span, two_banks)
        assert len(edges) == 2

    def test_edge_through_opening_point_is_rejoined(self, detector, span, rect) -> None:
        """The boundary is opened at a supported corner; the two halves merge."""
        edges = detector.find_edges(span, [ExPolygon(contour=rect(-5, -5, 25, 1))])

        assert len(edges) == 1
        assert edges[0].length() == pytest.approx(scale(22), rel=1e-6)

    def test_no_support(self, detector, span, rect) -> None:
        assert detector.find_edges(span, [ExPolygon(contour=rect(50, 50, 60, 60))]) == []


class TestDetectAngle:
    """Tests for BridgeDetector.detect_angle."""

    def test_two_edges_bridge_between_midpoints(self, detector, span, two_banks) -> None:
        angle = detector.detect_angle(span, two_banks, LINE_WIDTH)
        assert angle == pytest.approx(90.0)

    def test_two_side_edges(self, detector, span, rect) -> None:
        banks = [
            ExPolygon(contour=rect(-5, -5, 1, 15)),
            ExPolygon(contour=rect(19, -5, 25, 15)),
        ]

        angle = detector.detect_angle(span, banks, LINE_WIDTH)

        assert angle == pytest.approx(0.0, abs=1e-6)

    def test_no_support_is_no_bridge(self, detector, span, rect) -> None:
        lower = [ExPolygon(contour=rect(50, 50, 60, 60))]
        assert detector.detect_angle(span, lower, LINE_WIDTH) is None

    def test_single_straight_edge_is_overhang(self, detector, span, rect) -> None:
        lower = [ExPolygon(contour=rect(5, -5, 15, 1))]
        assert detector.detect_angle(span, lower, LINE_WIDTH) is None

    def test_single_curved_edge_follows_chord(self, detector, span, rect) -> None:
        lower = [ExPolygon(contour=rect(-5, -5, 25, 1))]

        angle = detector.detect_angle(span, lower, LINE_WIDTH)

        assert angle == pytest.approx(0.0, abs=1e-6)

    def test_many_edges_search(self, span, rect) -> None:
        config = LayerizerSettings(geometry=GeometryConfig(bridge_angle_step=15.0))
        lower = [
            ExPolygon(contour=rect(-5, -5, 1, 15)),
            ExPolygon(contour=rect(19, -5, 25, 15)),
            ExPolygon(contour=rect(8, -5, 12, 1)),
        ]

        angle = BridgeDetector(config).detect_angle(span, lower, LINE_WIDTH)

        assert angle is not None
        assert 0.0 <= angle < 180.0
        assert angle % 15.0 == pytest.approx(0.0)

    def test_search_tie_keeps_smallest_angle(self, rect) -> None:
        """Four symmetric corner supports score 0 and 90 degrees equally."""
        config = LayerizerSettings(geometry=GeometryConfig(bridge_angle_step=90.0))
        square = ExPolygon(contour=rect(0, 0, 10, 10))
        corners = [
            ExPolygon(contour=rect(-5, -5, 2, 2)),
            ExPolygon(contour=rect(8, -5, 15, 2)),
            ExPolygon(contour=rect(8, 8, 15, 15)),
            ExPolygon(contour=rect(-5, 8, 2, 15)),
        ]
        detector = BridgeDetector(config)

        assert len(detector.find_edges(square, corners)) == 4
        assert detector.detect_angle(square, corners, LINE_WIDTH) == 0.0

    def test_search_prefers_longer_bridged_lines(self, rect) -> None:
        """Lines between the end banks beat lines across the short side."""
        config = LayerizerSettings(geometry=GeometryConfig(bridge_angle_step=90.0))
        tall_span = ExPolygon(contour=rect(0, 0, 10, 20))
        lower = [
            ExPolygon(contour=rect(-5, -5, 15, 1)),
            ExPolygon(contour=rect(-5, 19, 15, 25)),
            ExPolygon(contour=rect(-5, 8, 1, 12)),
        ]
        detector = BridgeDetector(config)

        assert len(detector.find_edges(tall_span, lower)) == 3
        assert detector.detect_angle(tall_span, lower, LINE_WIDTH) == 90.0

    def test_search_is_deterministic(self, span, rect) -> None:
        config = LayerizerSettings(geometry=GeometryConfig(bridge_angle_step=30.0))
        lower = [
            ExPolygon(contour=rect(-5, -5, 1, 15)),
            ExPolygon(contour=rect(19, -5, 25, 15)),
            ExPolygon(contour=rect(8, -5, 12, 1)),
        ]
        detector = BridgeDetector(config)

        first = detector.detect_angle(span, lower, LINE_WIDTH)
        second = detector.detect_angle(span, lower, LINE_WIDTH)

        assert first == second


class TestDetectBridges:
    """Tests for BridgeDetector.detect_bridges."""

    def test_only_bottom_surfaces_get_angles(self, detector, make_region, span, two_banks) -> None:
        region = make_region([], layer_id=2)
        region.fill_surfaces = [
            Surface(expolygon=span, surface_type=SurfaceType.BOTTOM),
            Surface(expolygon=span, surface_type=SurfaceType.INTERNAL),
        ]

        angles = detector.detect_bridges(region, two_banks)

        assert angles == [pytest.approx(90.0)]
        assert region.fill_surfaces[0].bridge_angle == pytest.approx(90.0)
        assert region.fill_surfaces[1].bridge_angle is None

    def test_unsupported_bottom_has_no_angle(self, detector, make_region, span, rect) -> None:
        region = make_region([], layer_id=2)
        region.fill_surfaces = [Surface(expolygon=span, surface_type=SurfaceType.BOTTOM)]

        angles = detector.detect_bridges(region, [ExPolygon(contour=rect(50, 50, 60, 60))])

        assert angles == []
        assert region.fill_surfaces[0].bridge_angle is None
