"""Loop merging for raw slice contours.

The mesh slicer hands over an unordered set of closed loops per layer
region. This module turns them into well-formed islands (ExPolygons with
their holes) and extracts the walls too thin to hold a perimeter loop.

Raw loops are unsuitable for a single even-odd or nonzero union: two
concentric loops with the same winding must collapse into one island, which
even-odd would invert and nonzero would merge with the holes inside them. The
loops are therefore folded one at a time, outer loops first.
"""

import logging
from collections.abc import Callable

from layerizer.config import LayerizerSettings
from layerizer.core.clipper import diff_ex, offset, offset2, offset_ex, union_ex
from layerizer.core.geometry import nesting_depth
from layerizer.core.lines import medial_axis
from layerizer.domain import (
    ExPolygon,
    LayerRegion,
    Polygon,
    Polyline,
    Surface,
    SurfaceType,
    polygons_of,
)
from layerizer.exceptions import TopologyError
from layerizer.units import scale

logger = logging.getLogger(__name__)

TraceHook = Callable[[str, LayerRegion], None]


class LoopMerger:
    """Builds island surfaces and thin walls from raw slice loops.

    Attributes:
        config: Layerizer settings
        trace: Optional hook called as ``trace(stage, region)`` once a
            region's slices are ready, for inspection or visualization
    """

    def __init__(self, config: LayerizerSettings, trace: TraceHook | None = None) -> None:
        self.config = config
        self.trace = trace

    @property
    def safety_offset(self) -> float:
        return scale(self.config.geometry.safety_offset)

    def merge_loops(self, loops: list[Polygon]) -> list[Surface]:
        """Fold raw loops into island surfaces.

        Loops are sorted outer-first by nesting depth, grown slightly to
        close self-touching produced by the slicer, then folded into the
        accumulated islands: counter-clockwise loops are unioned in,
        clockwise loops are subtracted. The growth is undone at the end.

        Args:
            loops: Raw closed loops, CCW for contours and CW for holes

        Returns:
            Island surfaces of type INTERNAL

        Raises:
            TopologyError: If a hole loop lies outside every contour
        """
        if not loops:
            return []

        delta = self.safety_offset
        ordered = sorted(loops, key=lambda loop: nesting_depth(loop, loops))

        islands: list[ExPolygon] = []
        for loop in ordered:
            if len(loop) < 3 or loop.signed_area() == 0:
                continue
            if loop.is_counter_clockwise():
                grown = offset([loop], delta)
                islands = union_ex([*grown, *polygons_of(islands)])
                continue

            # holes keep their winding: grow the solid by shrinking the hole
            grown = [p.make_clockwise() for p in offset([loop.make_counter_clockwise()], -delta)]
            if not grown:
                continue
            if not self._is_enclosed(grown, islands):
                raise TopologyError(
                    f"hole loop starting at {loop.first_point.to_tuple()} "
                    f"is not enclosed by any contour"
                )
            islands = diff_ex(polygons_of(islands), grown)

        merged = offset_ex(polygons_of(islands), -delta)
        logger.debug(
            "%d surface(s) having %d holes detected from %d loops",
            len(merged),
            sum(len(e.holes) for e in merged),
            len(loops),
        )
        return [Surface(expolygon=e, surface_type=SurfaceType.INTERNAL) for e in merged]

    @staticmethod
    def _is_enclosed(hole: list[Polygon], islands: list[ExPolygon]) -> bool:
        return any(
            island.encloses_point(point)
            for polygon in hole
            for point in polygon.points
            for island in islands
        )

    def detect_thin_walls(self, region: LayerRegion) -> list[Polyline]:
        """Find walls too narrow for a perimeter loop and reduce them to skeletons.

        The slices are eroded and dilated by half the perimeter width; what
        this loses is too thin for a loop. Pieces not larger than the squared
        perimeter spacing are noise.
        """
        flow = region.perimeter_flow
        width = flow.scaled_width
        slices = polygons_of(region.slice_expolygons())
        if not slices:
            return []

        collapsed = diff_ex(slices, offset2(slices, -width / 2, width / 2), safety_offset=True)
        threshold = flow.scaled_spacing**2
        walls = [
            skeleton
            for expolygon in collapsed
            if expolygon.area() > threshold
            for skeleton in medial_axis(expolygon, width)
        ]
        if walls:
            logger.debug("%d thin walls detected", len(walls))
        return walls

    def make_surfaces(self, region: LayerRegion, loops: list[Polygon] | None = None) -> None:
        """Set a region's slices and thin walls from raw loops.

        Args:
            region: Layer region to update
            loops: Raw loops (defaults to ``region.raw_loops``)
        """
        if loops is None:
            loops = region.raw_loops

        region.slices = self.merge_loops(loops)
        region.thin_walls = []
        if self.config.slicing.thin_walls and region.slices:
            region.thin_walls = self.detect_thin_walls(region)

        if self.trace is not None:
            self.trace("slices", region)
