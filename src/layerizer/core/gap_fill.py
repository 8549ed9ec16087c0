"""Gap filling between perimeter loops.

Gaps are the areas between successive perimeter insets that are too narrow
for another loop. They are filled with zigzag lines, trying the widest bead
first and claiming for each width only the part of the gaps that can
actually host it. Whatever is left after the narrowest width stays unfilled.
"""

import logging
from dataclasses import dataclass, field

from layerizer.config import LayerizerSettings
from layerizer.core.clipper import (
    diff_ex,
    intersection_ex,
    noncollapsing_offset_ex,
    offset_ex,
    offset_polylines,
)
from layerizer.core.fill import RectilinearFiller
from layerizer.core.lines import simplify_polyline
from layerizer.domain import (
    ExPolygon,
    ExtrusionPath,
    ExtrusionRole,
    LayerRegion,
    Surface,
    polygons_of,
)

logger = logging.getLogger(__name__)


@dataclass
class GapFillResult:
    """Outcome of filling a region's gaps.

    Attributes:
        claimed: Areas claimed by some bead width, across all widths tried
        paths: Gap fill paths, also appended to the region's thin fills
        remainder: Gap area too thin for the narrowest width
    """

    claimed: list[ExPolygon] = field(default_factory=list)
    paths: list[ExtrusionPath] = field(default_factory=list)
    remainder: list[ExPolygon] = field(default_factory=list)


class GapFiller:
    """Fills perimeter gaps with zigzag lines of decreasing width.

    Attributes:
        config: Layerizer settings
        width_factors: Bead widths to try, as fractions of the perimeter
            width, largest first
    """

    def __init__(
        self,
        config: LayerizerSettings,
        width_factors: tuple[float, ...] = (1.0, 0.4),
    ) -> None:
        self.config = config
        self.width_factors = width_factors

    def fill_gaps(self, region: LayerRegion, gaps: list[ExPolygon]) -> GapFillResult:
        """Fill gaps of a layer region.

        Args:
            region: Layer region owning the gaps; its ``thin_fills`` are extended
            gaps: Gaps found by the perimeter generator

        Returns:
            GapFillResult with claimed areas and generated paths
        """
        result = GapFillResult()
        if not gaps:
            return result

        perimeter_flow = region.perimeter_flow
        filler = RectilinearFiller(angle=self.config.slicing.fill_angle, layer_id=region.layer_id)

        # thin walls already cover part of the gaps
        remaining = diff_ex(
            polygons_of(gaps),
            offset_polylines(region.thin_walls, perimeter_flow.scaled_width),
            safety_offset=True,
        )

        for factor in self.width_factors:
            if not remaining:
                break
            flow = perimeter_flow.clone(width=perimeter_flow.width * factor)
            if flow.spacing <= 0:
                logger.debug(
                    "Skipping gap fill width %.3f: too narrow for layer height %.3f",
                    flow.width,
                    region.layer_height,
                )
                continue
            half_width = flow.scaled_width / 2

            # the part of the gaps wide enough for this bead
            isolated = [
                grown
                for gap in remaining
                for eroded in noncollapsing_offset_ex(gap, -half_width)
                for grown in offset_ex(eroded.polygons(), half_width)
            ]
            this_width = intersection_ex(polygons_of(isolated), polygons_of(remaining))
            if not this_width:
                continue

            # infill, not perimeter: keep the bead inside the area
            for area in this_width:
                for expolygon in offset_ex(area.polygons(), -half_width):
                    params, polylines = filler.fill_surface(
                        Surface(expolygon=expolygon),
                        density=1.0,
                        flow_spacing=flow.spacing,
                    )
                    result.paths.extend(
                        ExtrusionPath(
                            polyline=simplify_polyline(polyline, flow.scaled_width / 3),
                            role=ExtrusionRole.GAP_FILL,
                            flow_spacing=params.flow_spacing,
                            height=region.layer_height,
                        )
                        for polyline in polylines
                    )

            logger.debug(
                "%d gaps filled with extrusion width = %.3f", len(this_width), flow.width
            )
            result.claimed.extend(this_width)
            remaining = diff_ex(polygons_of(remaining), polygons_of(this_width))

        result.remainder = remaining
        region.thin_fills.extend(result.paths)
        return result
