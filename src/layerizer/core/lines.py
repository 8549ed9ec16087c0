"""Line-oriented geometry operations backed by shapely.

Clipper covers closed-polygon booleans and offsets; the operations here deal
with open lines and skeletons:
- Clipping polylines against polygons
- Medial axis (skeleton) extraction for thin regions
- Douglas-Peucker simplification of polylines and polygons
- Conversion between domain geometry and shapely geometry
"""

from collections.abc import Iterator

import numpy as np
import shapely
from shapely.geometry import LineString, MultiPoint
from shapely.geometry import Polygon as ShapelyPolygon
from shapely.geometry.base import BaseGeometry
from shapely.ops import linemerge, unary_union, voronoi_diagram

from layerizer.domain import ExPolygon, Polygon, Polyline


def to_shapely(expolygon: ExPolygon) -> ShapelyPolygon:
    """Convert an ExPolygon into a shapely polygon."""
    shape = ShapelyPolygon(
        expolygon.contour.to_path(),
        [hole.to_path() for hole in expolygon.holes],
    )
    if not shape.is_valid:
        shape = shape.buffer(0)
    return shape


def to_shapely_union(expolygons: list[ExPolygon]) -> BaseGeometry:
    return unary_union([to_shapely(e) for e in expolygons])


def iter_lines(geometry: BaseGeometry) -> Iterator[LineString]:
    """Yield every non-empty LineString contained in a geometry."""
    if geometry.is_empty:
        return
    if isinstance(geometry, LineString):
        yield geometry
    elif hasattr(geometry, "geoms"):
        for part in geometry.geoms:
            yield from iter_lines(part)


def clip_polyline(polyline: Polyline, polygon: Polygon) -> list[Polyline]:
    """Return the pieces of a polyline lying inside a polygon.

    Pieces that share an endpoint are merged, so a closed boundary that was
    opened inside the polygon comes back as a single piece.
    """
    if len(polyline) < 2 or len(polygon) < 3:
        return []
    area = ShapelyPolygon(polygon.to_path())
    if not area.is_valid:
        area = area.buffer(0)
    pieces = [line for line in iter_lines(LineString(polyline.to_path()).intersection(area))
              if line.length > 0]
    if len(pieces) > 1:
        pieces = list(iter_lines(linemerge(pieces)))
    return [Polyline.from_path(piece.coords) for piece in pieces]


def simplify_polyline(polyline: Polyline, tolerance: float) -> Polyline:
    if len(polyline) <= 2:
        return polyline
    simplified = LineString(polyline.to_path()).simplify(tolerance, preserve_topology=False)
    return Polyline.from_path(simplified.coords)


def simplify_polygon(polygon: Polygon, tolerance: float) -> Polygon | None:
    """Douglas-Peucker simplify a closed polygon, keeping its winding.

    Returns None when fewer than three vertices survive.
    """
    path = polygon.to_path()
    if len(path) < 3:
        return None
    ring = LineString([*path, path[0]]).simplify(tolerance, preserve_topology=False)
    coords = list(ring.coords)[:-1]
    if len(coords) < 3:
        return None
    return Polygon.from_path(coords)


def medial_axis(expolygon: ExPolygon, width: float) -> list[Polyline]:
    """Approximate the skeleton of a thin region.

    Samples the boundary every ``width / 4``, builds the Voronoi diagram of
    the samples and keeps the edges lying strictly inside the region, away
    from the boundary; those edges run along the centerline. Merged pieces
    shorter than half the width are dropped as spurs.

    Args:
        expolygon: Region to skeletonize
        width: Nominal extrusion width in scaled units

    Returns:
        Skeleton polylines
    """
    shape = to_shapely(expolygon)
    if shape.is_empty or shape.area <= 0:
        return []

    boundary = shapely.segmentize(shape.boundary, max_segment_length=width / 4)
    samples = np.unique(shapely.get_coordinates(boundary), axis=0)
    if len(samples) < 3:
        return []

    edges = voronoi_diagram(MultiPoint(samples), envelope=shape.envelope, edges=True)
    inner = [
        edge
        for edge in iter_lines(edges)
        if edge.length > 0 and shape.contains_properly(edge)
    ]
    if not inner:
        return []

    skeleton: list[Polyline] = []
    for line in iter_lines(linemerge(inner)):
        if line.length < width / 2:
            continue
        simplified = line.simplify(width / 10, preserve_topology=False)
        skeleton.append(Polyline.from_path(simplified.coords))
    return skeleton
