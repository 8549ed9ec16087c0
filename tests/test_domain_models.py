"""Tests for domain models to verify they work correctly."""

import math

import pytest

from layerizer.config import FlowConfig
from layerizer.domain import (
    ExPolygon,
    ExtrusionPath,
    ExtrusionPathCollection,
    ExtrusionRole,
    Flow,
    FlowRole,
    Layer,
    LayerRegion,
    Point,
    Polygon,
    Polyline,
    Region,
    Surface,
    SurfaceType,
    WindingDirection,
    group_surfaces,
    surfaces_of_type,
)
from layerizer.exceptions import GeometryError


def square(x0: int, y0: int, size: int) -> Polygon:
    return Polygon(
        points=[
            Point(x0, y0),
            Point(x0 + size, y0),
            Point(x0 + size, y0 + size),
            Point(x0, y0 + size),
        ]
    )


class TestPoint:
    """Tests for Point class."""

    def test_point_creation(self) -> None:
        p = Point(100, 200)
        assert p.x == 100
        assert p.y == 200

    def test_from_xy_rounds_to_grid(self) -> None:
        """Fractional coordinates snap to the nearest integer."""
        p = Point.from_xy(10.6, -3.2)
        assert p == Point(11, -3)

    def test_point_to_tuple(self) -> None:
        assert Point(1, 2).to_tuple() == (1, 2)

    def test_point_immutable(self) -> None:
        """Test that point is immutable."""
        p = Point(100, 200)
        with pytest.raises(AttributeError):
            p.x = 300  # type: ignore

    def test_point_hashable(self) -> None:
        assert len({Point(1, 1), Point(1, 1), Point(2, 1)}) == 2


class TestPolygon:
    """Tests for Polygon class."""

    def test_signed_area_follows_winding(self) -> None:
        polygon = square(0, 0, 10)
        assert polygon.signed_area() == 100
        assert polygon.reversed().signed_area() == -100
        assert polygon.reversed().area() == 100

    def test_direction(self) -> None:
        polygon = square(0, 0, 10)
        assert polygon.direction == WindingDirection.COUNTER_CLOCKWISE
        assert polygon.reversed().direction == WindingDirection.CLOCKWISE

    def test_make_winding(self) -> None:
        polygon = square(0, 0, 10)
        assert polygon.make_counter_clockwise() is polygon
        assert not polygon.make_clockwise().is_counter_clockwise()
        assert polygon.reversed().make_counter_clockwise().is_counter_clockwise()

    def test_degenerate_polygon_has_no_area(self) -> None:
        polygon = Polygon(points=[Point(0, 0), Point(10, 0)])
        assert polygon.signed_area() == 0.0
        assert not polygon.encloses_point(Point(5, 0))

    def test_encloses_point(self) -> None:
        polygon = square(0, 0, 10)
        assert polygon.encloses_point(Point(5, 5))
        assert not polygon.encloses_point(Point(15, 5))

    def test_bounding_box(self) -> None:
        assert square(5, -5, 10).bounding_box() == (5, -5, 15, 5)

    def test_split_at_first_point(self) -> None:
        """Opening a polygon repeats the first point at the end."""
        polyline = square(0, 0, 10).split_at_first_point()
        assert len(polyline) == 5
        assert polyline.first_point == polyline.last_point == Point(0, 0)

    def test_polygon_serialization(self) -> None:
        polygon = square(0, 0, 10)
        assert Polygon.from_dict(polygon.to_dict()) == polygon


class TestPolyline:
    """Tests for Polyline class."""

    def test_length(self) -> None:
        polyline = Polyline(points=[Point(0, 0), Point(3, 4), Point(3, 10)])
        assert polyline.length() == pytest.approx(11.0)

    def test_reversed(self) -> None:
        polyline = Polyline(points=[Point(0, 0), Point(3, 4)])
        assert polyline.reversed().first_point == Point(3, 4)


class TestExPolygon:
    """Tests for ExPolygon class."""

    def test_winding_is_normalized(self) -> None:
        """Contours become CCW and holes CW whatever their input winding."""
        expolygon = ExPolygon(contour=square(0, 0, 10).reversed(), holes=[square(2, 2, 2)])

        assert expolygon.contour.is_counter_clockwise()
        assert not expolygon.holes[0].is_counter_clockwise()

    def test_area_subtracts_holes(self) -> None:
        expolygon = ExPolygon(contour=square(0, 0, 10), holes=[square(2, 2, 2)])
        assert expolygon.area() == 96

    def test_encloses_point_respects_holes(self) -> None:
        expolygon = ExPolygon(contour=square(0, 0, 10), holes=[square(2, 2, 2)])
        assert expolygon.encloses_point(Point(1, 1))
        assert not expolygon.encloses_point(Point(3, 3))

    def test_polygons_lists_contour_first(self) -> None:
        contour = square(0, 0, 10)
        expolygon = ExPolygon(contour=contour, holes=[square(2, 2, 2)])
        polygons = expolygon.polygons()
        assert polygons[0] == contour
        assert len(polygons) == 2


class TestSurface:
    """Tests for Surface and surface helpers."""

    def test_clone_overrides_attributes(self) -> None:
        surface = Surface(expolygon=ExPolygon(contour=square(0, 0, 10)))
        clone = surface.clone(surface_type=SurfaceType.TOP)

        assert clone.surface_type == SurfaceType.TOP
        assert surface.surface_type == SurfaceType.INTERNAL
        assert clone.expolygon is surface.expolygon

    def test_surface_serialization(self) -> None:
        surface = Surface(
            expolygon=ExPolygon(contour=square(0, 0, 10)),
            surface_type=SurfaceType.BOTTOM,
            bridge_angle=90.0,
        )
        restored = Surface.from_dict(surface.to_dict())
        assert restored == surface

    def test_group_surfaces_keeps_first_appearance_order(self) -> None:
        a = Surface(expolygon=ExPolygon(contour=square(0, 0, 1)), surface_type=SurfaceType.TOP)
        b = Surface(expolygon=ExPolygon(contour=square(5, 0, 1)))
        c = Surface(expolygon=ExPolygon(contour=square(9, 0, 1)), surface_type=SurfaceType.TOP)

        groups = group_surfaces([a, b, c])

        assert groups == [[a, c], [b]]

    def test_group_surfaces_splits_on_overrides(self) -> None:
        a = Surface(expolygon=ExPolygon(contour=square(0, 0, 1)), extra_perimeters=1)
        b = Surface(expolygon=ExPolygon(contour=square(5, 0, 1)))
        assert len(group_surfaces([a, b])) == 2

    def test_surfaces_of_type(self) -> None:
        top = Surface(expolygon=ExPolygon(contour=square(0, 0, 1)), surface_type=SurfaceType.TOP)
        internal = Surface(expolygon=ExPolygon(contour=square(5, 0, 1)))
        assert surfaces_of_type([top, internal], SurfaceType.TOP) == [top]
        assert surfaces_of_type([top, internal], SurfaceType.TOP, SurfaceType.INTERNAL) == [
            top,
            internal,
        ]


class TestFlow:
    """Tests for Flow geometry."""

    def test_spacing_accounts_for_rounded_bead(self) -> None:
        flow = Flow(width=0.5, layer_height=0.2)
        assert flow.spacing == pytest.approx(0.5 - 0.2 * (1 - math.pi / 4))

    def test_scaled_values(self) -> None:
        flow = Flow(width=0.5, layer_height=0.2)
        assert flow.scaled_width == pytest.approx(500_000)
        assert flow.scaled_spacing == pytest.approx(flow.spacing * 1e6)

    def test_clone(self) -> None:
        flow = Flow(width=0.5, layer_height=0.2)
        assert flow.clone(width=0.2).width == 0.2
        assert flow.width == 0.5


class TestRegion:
    """Tests for Region, LayerRegion and Layer."""

    def test_widths_fall_back_to_extrusion_width(self) -> None:
        region = Region.from_config(0, FlowConfig(extrusion_width=0.6, infill_extrusion_width=0.7))
        assert region.widths[FlowRole.PERIMETER] == 0.6
        assert region.widths[FlowRole.INFILL] == 0.7

    def test_first_layer_width_override(self) -> None:
        region = Region.from_config(0, FlowConfig(first_layer_extrusion_width=0.8))

        assert region.flow(FlowRole.PERIMETER, 0.2, first_layer=True).width == 0.8
        assert region.flow(FlowRole.PERIMETER, 0.2).width == 0.5

    def test_layer_region_flows(self) -> None:
        region = Region.from_config(3, FlowConfig(first_layer_extrusion_width=0.8))
        layerm = LayerRegion(region=region, layer_id=0, layer_height=0.3)

        assert layerm.region_id == 3
        assert layerm.perimeter_flow == Flow(width=0.8, layer_height=0.3)

        layerm.attach(layer_id=2, layer_height=0.2)
        assert layerm.perimeter_flow == Flow(width=0.5, layer_height=0.2)
        assert layerm.solid_infill_flow.width == 0.5

    def test_flow_too_narrow_for_layer_height(self) -> None:
        region = Region.from_config(0, FlowConfig())

        with pytest.raises(GeometryError, match="too narrow for layer height 3.0"):
            LayerRegion(region=region, layer_id=1, layer_height=3.0)

        layerm = LayerRegion(region=region, layer_id=1, layer_height=0.2)
        with pytest.raises(GeometryError):
            layerm.attach(layer_id=2, layer_height=3.0)
        assert layerm.layer_id == 1
        assert layerm.layer_height == 0.2
        assert layerm.perimeter_flow == Flow(width=0.5, layer_height=0.2)

    def test_layer_add_region(self) -> None:
        layer = Layer(id=4, print_z=1.0, height=0.2)
        region = Region.from_config(0, FlowConfig())

        layerm = layer.add_region(region, [square(0, 0, 10)])

        assert layer.regions == [layerm]
        assert layerm.layer_id == 4
        assert layerm.raw_loops == [square(0, 0, 10)]
        assert layerm.slices == []


class TestExtrusionPathCollection:
    """Tests for path chaining."""

    def _path(self, *points: tuple[int, int]) -> ExtrusionPath:
        return ExtrusionPath(
            polyline=Polyline(points=[Point(x, y) for x, y in points]),
            role=ExtrusionRole.GAP_FILL,
            flow_spacing=0.4,
        )

    def test_chained_path_picks_nearest_end(self) -> None:
        collection = ExtrusionPathCollection(
            paths=[
                self._path((0, 0), (10, 0)),
                self._path((100, 0), (50, 0)),
                self._path((20, 0), (30, 0)),
            ]
        )

        chained = collection.chained_path()

        starts = [path.first_point for path in chained.paths]
        assert starts == [Point(0, 0), Point(20, 0), Point(50, 0)]
        assert chained.paths[-1].last_point == Point(100, 0)

    def test_chained_path_of_empty_collection(self) -> None:
        assert len(ExtrusionPathCollection().chained_path()) == 0
