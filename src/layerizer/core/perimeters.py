"""Perimeter loop generation.

This module insets each island of a layer region into nested perimeter
loops, detects the gaps left between loops, derives the residual infill
boundary and assembles the loops into their print order.

Print order:
- Contour and hole loops are organized into separate containment trees
- Each tree is walked depth-first, children before their parent, with
  siblings chained by nearest neighbour
- Hole loops come first (reversed traversal), then contour loops
- The whole list is reversed for external-perimeters-first printing or
  when a brim is printed on the first layer
"""

import logging

from layerizer.config import LayerizerSettings
from layerizer.core.clipper import (
    ContainmentTree,
    diff_ex,
    offset,
    offset2_ex,
    union_pt,
)
from layerizer.core.geometry import chained_path_items
from layerizer.core.lines import simplify_polygon
from layerizer.domain import (
    ExPolygon,
    ExtrusionLoop,
    ExtrusionPath,
    ExtrusionPathCollection,
    ExtrusionRole,
    LayerRegion,
    Polygon,
    Surface,
)
from layerizer.units import scale

logger = logging.getLogger(__name__)


class PerimeterGenerator:
    """Generates ordered perimeter loops for a layer region.

    Attributes:
        config: Layerizer settings
    """

    def __init__(self, config: LayerizerSettings) -> None:
        self.config = config

    def make_perimeters(self, region: LayerRegion) -> list[ExPolygon]:
        """Build perimeters and fill boundaries for every island of a region.

        Resets ``perimeters``, ``fill_surfaces`` and ``thin_fills``, then
        fills them from ``slices`` and ``thin_walls``.

        Args:
            region: Layer region with slices already merged

        Returns:
            Gaps detected between perimeter loops, for the gap filler
        """
        slicing = self.config.slicing
        flow = region.perimeter_flow
        perimeter_spacing = flow.scaled_spacing
        infill_spacing = region.solid_infill_flow.scaled_spacing
        gap_area_threshold = flow.scaled_width**2
        detect_gaps = slicing.gap_fill_speed > 0 and slicing.fill_density > 0
        clip_margin = self.config.geometry.gap_clip_margin
        resolution = scale(self.config.geometry.resolution)

        region.perimeters = []
        region.fill_surfaces = []
        region.thin_fills = []

        contours: list[Polygon] = []
        holes: list[Polygon] = []
        gaps: list[ExPolygon] = []

        # islands are processed separately since each may ask for extra perimeters
        for surface in region.slices:
            loop_number = slicing.perimeters + (surface.extra_perimeters or 0)

            # one pass more than needed, to find the gaps after the last loop
            last = surface.expolygon.polygons()
            for i in range(loop_number + 1):
                # the external loop only needs half the inset
                spacing = perimeter_spacing / 2 if i == 0 else perimeter_spacing

                offsets = offset2_ex(last, -1.5 * spacing, 0.5 * spacing)
                contour_offsets = [e.contour for e in offsets]
                hole_offsets = [hole for e in offsets for hole in e.holes]
                offset_polygons = contour_offsets + hole_offsets

                # where offset2 collapses, there is no room for a loop: that is a gap
                if detect_gaps:
                    collapsed = diff_ex(
                        offset(last, -0.5 * spacing),
                        offset(offset_polygons, 0.5 * spacing + clip_margin),
                    )
                    gaps.extend(e for e in collapsed if e.area() >= gap_area_threshold)

                if not offset_polygons or i == loop_number:
                    break
                contours.extend(contour_offsets)
                holes.extend(hole_offsets)
                last = offset_polygons

            simplified = [
                polygon
                for polygon in (simplify_polygon(p, resolution) for p in last)
                if polygon is not None
            ]
            boundary = offset2_ex(
                simplified,
                -(perimeter_spacing / 2 + infill_spacing),
                infill_spacing,
            )
            region.fill_surfaces.extend(
                Surface(expolygon=e, surface_type=surface.surface_type) for e in boundary
            )

        if gaps:
            logger.debug("%d gaps detected at layer %d", len(gaps), region.layer_id)

        contours_tree = union_pt(contours)
        holes_tree = union_pt(holes)

        hole_loops: list[ExtrusionLoop] = []
        self._traverse(holes_tree, holes_tree.roots, False, flow.spacing, hole_loops)
        contour_loops: list[ExtrusionLoop] = []
        self._traverse(contours_tree, contours_tree.roots, True, flow.spacing, contour_loops)

        # inner to outer, in terms of object slices
        loops = [*reversed(hole_loops), *contour_loops]

        # with a brim, continue inwards once the brim is done
        if slicing.external_perimeters_first or (
            region.layer_id == 0 and slicing.brim_width > 0
        ):
            loops.reverse()
        region.perimeters.extend(loops)

        if region.thin_walls:
            thin_walls = ExtrusionPathCollection(
                paths=[
                    ExtrusionPath(
                        polyline=wall,
                        role=ExtrusionRole.EXTERNAL_PERIMETER,
                        flow_spacing=flow.spacing,
                    )
                    for wall in region.thin_walls
                ]
            )
            region.perimeters.append(thin_walls.chained_path())

        return gaps

    def _traverse(
        self,
        tree: ContainmentTree,
        indices: list[int],
        is_contour: bool,
        flow_spacing: float,
        loops: list[ExtrusionLoop],
    ) -> None:
        """Append the loops of a subtree to ``loops``, children before parents.

        Contour loops come out counter-clockwise and hole loops clockwise.
        """
        ordered = chained_path_items(
            [(tree.nodes[idx].polygon.first_point, idx) for idx in indices]
        )
        for idx in ordered:
            node = tree.nodes[idx]
            self._traverse(tree, node.children, is_contour, flow_spacing, loops)

            if is_contour:
                polygon = node.polygon.make_counter_clockwise()
                if node.depth == 0:
                    role = ExtrusionRole.EXTERNAL_PERIMETER
                elif node.depth == 1:
                    role = ExtrusionRole.CONTOUR_INTERNAL_PERIMETER
                else:
                    role = ExtrusionRole.PERIMETER
            else:
                polygon = node.polygon.make_clockwise()
                # the innermost loop of a hole chain is the one touching the hole
                if node.children:
                    role = ExtrusionRole.PERIMETER
                else:
                    role = ExtrusionRole.EXTERNAL_PERIMETER

            loops.append(ExtrusionLoop(polygon=polygon, role=role, flow_spacing=flow_spacing))
