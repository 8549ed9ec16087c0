"""Surface reclassification by configuration and area."""

import logging

from layerizer.config import LayerizerSettings
from layerizer.domain import LayerRegion, Surface, SurfaceType
from layerizer.units import scale

logger = logging.getLogger(__name__)


class SurfaceClassifier:
    """Reassigns fill surface types from solid layer counts and surface area."""

    def __init__(self, config: LayerizerSettings) -> None:
        self.config = config

    def classify(self, surface: Surface) -> SurfaceType:
        """Return the type a fill surface should have."""
        slicing = self.config.slicing
        surface_type = surface.surface_type

        if surface_type == SurfaceType.TOP and slicing.top_solid_layers == 0:
            surface_type = SurfaceType.INTERNAL
        elif surface_type == SurfaceType.BOTTOM and slicing.bottom_solid_layers == 0:
            surface_type = SurfaceType.INTERNAL

        if surface_type == SurfaceType.INTERNAL and slicing.fill_density > 0:
            # areas are squared, so the threshold is scaled twice
            min_area = scale(scale(slicing.solid_infill_below_area))
            if surface.expolygon.contour.area() <= min_area:
                surface_type = SurfaceType.INTERNAL_SOLID

        return surface_type

    def prepare_fill_surfaces(self, region: LayerRegion) -> None:
        """Rebuild a region's fill surfaces with their final types.

        Args:
            region: Layer region whose ``fill_surfaces`` are replaced
        """
        surfaces = []
        small = 0
        for surface in region.fill_surfaces:
            surface_type = self.classify(surface)
            if surface_type != surface.surface_type and surface_type == SurfaceType.INTERNAL_SOLID:
                small += 1
            surfaces.append(surface.clone(surface_type=surface_type))
        region.fill_surfaces = surfaces

        if small:
            logger.debug(
                "identified %d small solid surfaces at layer %d", small, region.layer_id
            )
