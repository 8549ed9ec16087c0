"""Bridge direction detection for bottom surfaces.

A bottom surface above layer n-1 rests on the islands of that layer only
along some of its edges; everything else spans open air. The bridge angle
is the direction the bridge lines should run so that they are anchored on
the supported edges.

Angles are degrees in [0, 180), counter-clockwise from the +X axis, and
give the direction of the bridge extrusion lines.

Detection by number of support edges:
- 2 edges: the line joining the midpoints of the edges' chords
- 1 curved edge: the edge's chord (cannot tell a U-shaped bridge from a
  plain overhang)
- 1 straight edge or none: no bridge
- 3 or more: a directional search scoring how much of the surface each
  direction can bridge
"""

import logging

import numpy as np
from shapely import affinity
from shapely.geometry import MultiLineString
from shapely.geometry import Point as ShapelyPoint

from layerizer.config import LayerizerSettings
from layerizer.core.clipper import intersection_ex, offset_ex
from layerizer.core.geometry import direction_degrees, midpoint
from layerizer.core.lines import clip_polyline, iter_lines, to_shapely_union
from layerizer.domain import ExPolygon, LayerRegion, Polyline, SurfaceType, polygons_of

logger = logging.getLogger(__name__)


class BridgeDetector:
    """Assigns bridge angles to bottom surfaces.

    Attributes:
        config: Layerizer settings
    """

    def __init__(self, config: LayerizerSettings) -> None:
        self.config = config

    def find_edges(self, expolygon: ExPolygon, lower: list[ExPolygon]) -> list[Polyline]:
        """Return the parts of a surface boundary resting on lower islands.

        Each boundary polygon is opened at its first point and clipped with
        every lower contour. Pieces meeting at the opening point are joined
        back into one edge.
        """
        edges: list[Polyline] = []
        for island in lower:
            for polygon in expolygon.polygons():
                edges.extend(clip_polyline(polygon.split_at_first_point(), island.contour))
        return edges

    def detect_angle(
        self,
        expolygon: ExPolygon,
        lower: list[ExPolygon],
        line_width: float,
    ) -> float | None:
        """Find the bridge angle of one bottom surface.

        Args:
            expolygon: Bottom surface geometry
            lower: Islands of the layer below
            line_width: Scaled infill width, used as probe spacing

        Returns:
            Bridge angle in degrees, or None if the surface is no bridge
        """
        edges = self.find_edges(expolygon, lower)
        logger.debug("Found bridge with %d support(s)", len(edges))

        if not edges:
            return None

        if len(edges) == 2:
            chords = [(edge.first_point, edge.last_point) for edge in edges]
            midpoints = [midpoint(a, b) for a, b in chords]
            return direction_degrees(midpoints[0], midpoints[1])

        if len(edges) == 1:
            # a straight edge is an overhang, not a bridge
            edge = edges[0]
            if len(edge) > 2:
                return direction_degrees(edge.first_point, edge.last_point)
            return None

        return self._search_direction(expolygon, lower, line_width)

    def _search_direction(
        self,
        expolygon: ExPolygon,
        lower: list[ExPolygon],
        line_width: float,
    ) -> float | None:
        """Score candidate directions by the length of bridged probe lines.

        For each direction the surface (grown by one line width) and its
        anchors are rotated so the direction becomes vertical, then probe
        lines one width apart across the anchors are clipped to the grown
        surface. Segments with an endpoint inside an anchor do not count.
        The highest score wins; on ties the smallest angle is kept.
        """
        inset = offset_ex(expolygon.polygons(), line_width)
        anchors = intersection_ex(expolygon.polygons(), polygons_of(lower), safety_offset=True)
        if not inset or not anchors:
            return None

        inset_shape = to_shapely_union(inset)
        anchor_shape = to_shapely_union(anchors)

        step = self.config.geometry.bridge_angle_step
        best_angle: float | None = None
        best_score = -1.0
        for angle in np.arange(0.0, 180.0, step):
            rotation = 90.0 - angle
            rotated_inset = affinity.rotate(inset_shape, rotation, origin=(0, 0))
            rotated_anchors = affinity.rotate(anchor_shape, rotation, origin=(0, 0))

            min_x, min_y, max_x, max_y = rotated_anchors.bounds
            probes = MultiLineString(
                [[(x, min_y), (x, max_y)] for x in np.arange(min_x, max_x + 1, line_width)]
            )

            score = 0.0
            for segment in iter_lines(probes.intersection(rotated_inset)):
                start, end = segment.coords[0], segment.coords[-1]
                if rotated_anchors.contains(ShapelyPoint(start)):
                    continue
                if rotated_anchors.contains(ShapelyPoint(end)):
                    continue
                score += segment.length

            if score > best_score:
                best_angle, best_score = float(angle), score

        return best_angle

    def detect_bridges(
        self,
        region: LayerRegion,
        lower_slices: list[ExPolygon],
    ) -> list[float]:
        """Set ``bridge_angle`` on the bottom fill surfaces of a region.

        Args:
            region: Layer region whose fill surfaces are updated
            lower_slices: Islands of the layer directly below

        Returns:
            Angles assigned, one per bridged surface
        """
        line_width = region.infill_flow.scaled_width
        angles: list[float] = []
        surfaces = []
        for surface in region.fill_surfaces:
            if surface.surface_type == SurfaceType.BOTTOM:
                angle = self.detect_angle(surface.expolygon, lower_slices, line_width)
                if angle is not None:
                    logger.debug(
                        "Optimal infill angle of bridge on layer %d is %.1f degrees",
                        region.layer_id,
                        angle,
                    )
                    angles.append(angle)
                surface = surface.clone(bridge_angle=angle)
            surfaces.append(surface)
        region.fill_surfaces = surfaces
        return angles
