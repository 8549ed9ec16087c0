"""Top/bottom surface type detection across neighbouring layers.

A region's slices are compared with the islands of the layers directly
below and above: what has nothing below is a bottom surface, what has
nothing above is a top surface, the rest is internal. Fill surfaces are then
re-cut along these areas so that each piece carries its type.
"""

import logging

from layerizer.core.clipper import diff_ex, intersection_ex
from layerizer.domain import ExPolygon, LayerRegion, Surface, SurfaceType, polygons_of

logger = logging.getLogger(__name__)


class SurfaceTypeDetector:
    """Types a region's fill surfaces by comparing it with adjacent layers."""

    def detect(
        self,
        region: LayerRegion,
        lower_slices: list[ExPolygon] | None,
        upper_slices: list[ExPolygon] | None,
    ) -> dict[SurfaceType, list[ExPolygon]]:
        """Split a region's slices into bottom, top and internal areas.

        Args:
            region: Layer region with merged slices
            lower_slices: Islands of the layer below (None on the first layer)
            upper_slices: Islands of the layer above (None on the last layer)

        Returns:
            Mapping of surface type to the area of that type
        """
        slices = polygons_of(region.slice_expolygons())
        if not slices:
            return {}

        if lower_slices is None:
            bottom = region.slice_expolygons()
        else:
            bottom = diff_ex(slices, polygons_of(lower_slices), safety_offset=True)

        if upper_slices is None:
            top = region.slice_expolygons()
        else:
            top = diff_ex(slices, polygons_of(upper_slices), safety_offset=True)

        # bottom wins where a slice is both top and bottom
        top = diff_ex(polygons_of(top), polygons_of(bottom)) if bottom else top
        internal = diff_ex(slices, polygons_of(top) + polygons_of(bottom))

        return {
            SurfaceType.BOTTOM: bottom,
            SurfaceType.TOP: top,
            SurfaceType.INTERNAL: internal,
        }

    def detect_surfaces_type(
        self,
        region: LayerRegion,
        lower_slices: list[ExPolygon] | None,
        upper_slices: list[ExPolygon] | None,
    ) -> None:
        """Replace a region's fill surfaces with typed pieces."""
        areas = self.detect(region, lower_slices, upper_slices)
        boundaries = [p for surface in region.fill_surfaces for p in surface.polygons()]

        surfaces: list[Surface] = []
        if boundaries:
            for surface_type in (SurfaceType.BOTTOM, SurfaceType.TOP, SurfaceType.INTERNAL):
                area = areas.get(surface_type)
                if not area:
                    continue
                surfaces.extend(
                    Surface(expolygon=e, surface_type=surface_type)
                    for e in intersection_ex(boundaries, polygons_of(area))
                )
        region.fill_surfaces = surfaces

        logger.debug(
            "layer %d: %d bottom, %d top, %d internal surface(s)",
            region.layer_id,
            sum(1 for s in surfaces if s.surface_type == SurfaceType.BOTTOM),
            sum(1 for s in surfaces if s.surface_type == SurfaceType.TOP),
            sum(1 for s in surfaces if s.surface_type == SurfaceType.INTERNAL),
        )
