"""Top and bottom surface expansion.

Top and bottom skins are grown past the perimeters so that solid infill
anchors into the walls, then clipped back to where infill may legally go.
Where a grown top and a grown bottom overlap, bottom wins.
"""

import logging

from layerizer.config import LayerizerSettings
from layerizer.core.bridge import BridgeDetector
from layerizer.core.clipper import diff_ex, intersection_ex, offset
from layerizer.domain import (
    ExPolygon,
    LayerRegion,
    Polygon,
    Surface,
    SurfaceType,
    group_surfaces,
    polygons_of,
    surfaces_of_type,
)
from layerizer.units import scale

logger = logging.getLogger(__name__)


def _surface_polygons(surfaces: list[Surface]) -> list[Polygon]:
    return [polygon for surface in surfaces for polygon in surface.polygons()]


class ExternalSurfaceProcessor:
    """Expands top/bottom surfaces and re-cuts the remaining fill surfaces.

    Attributes:
        config: Layerizer settings
        bridge_detector: Detector run on bottom surfaces above the first layer
    """

    def __init__(
        self,
        config: LayerizerSettings,
        bridge_detector: BridgeDetector | None = None,
    ) -> None:
        self.config = config
        self.bridge_detector = bridge_detector or BridgeDetector(config)

    def _grow(self, surfaces: list[Surface], boundaries: list[Polygon]) -> list[ExPolygon]:
        if not surfaces:
            return []
        margin = scale(self.config.geometry.external_margin)
        # the safety offset merges adjacent boundaries into one
        return intersection_ex(
            offset(_surface_polygons(surfaces), margin),
            boundaries,
            safety_offset=True,
        )

    def process_external_surfaces(
        self,
        region: LayerRegion,
        lower_slices: list[ExPolygon] | None = None,
    ) -> list[float]:
        """Replace a region's fill surfaces with expanded top/bottom surfaces.

        Args:
            region: Layer region whose ``fill_surfaces`` are replaced
            lower_slices: Islands of the layer below, for bridge detection

        Returns:
            Bridge angles assigned to bottom surfaces
        """
        fill_surfaces = region.fill_surfaces
        top = surfaces_of_type(fill_surfaces, SurfaceType.TOP)
        bottom = surfaces_of_type(fill_surfaces, SurfaceType.BOTTOM)

        # without infill, solid skins cannot extend over internal areas
        if self.config.slicing.fill_density > 0:
            boundaries = fill_surfaces
        else:
            boundaries = [s for s in fill_surfaces if s.surface_type != SurfaceType.INTERNAL]
        boundary_polygons = _surface_polygons(boundaries)

        grown_top = self._grow(top, boundary_polygons)
        grown_bottom = self._grow(bottom, boundary_polygons)

        # bottom surfaces take priority
        if grown_top and grown_bottom:
            grown_top = diff_ex(polygons_of(grown_top), polygons_of(grown_bottom))

        new_surfaces = [Surface(expolygon=e, surface_type=SurfaceType.TOP) for e in grown_top]
        new_surfaces.extend(
            Surface(expolygon=e, surface_type=SurfaceType.BOTTOM) for e in grown_bottom
        )

        footprint = _surface_polygons(new_surfaces)
        others = [
            s
            for s in fill_surfaces
            if s.surface_type not in (SurfaceType.TOP, SurfaceType.BOTTOM)
        ]
        for group in group_surfaces(others):
            pieces = diff_ex(_surface_polygons(group), footprint)
            new_surfaces.extend(group[0].clone(expolygon=e) for e in pieces)

        region.fill_surfaces = new_surfaces

        # nothing to bridge over on the first layer
        if region.layer_id == 0 or lower_slices is None:
            return []
        return self.bridge_detector.detect_bridges(region, lower_slices)
