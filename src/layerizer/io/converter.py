"""Converters between file representations and domain models.

Files carry millimetres; domain geometry lives in scaled integer space.
"""

from typing import Any

from layerizer.config.settings import FlowConfig
from layerizer.domain import (
    ExPolygon,
    Extrusion,
    ExtrusionLoop,
    ExtrusionPath,
    ExtrusionPathCollection,
    Layer,
    LayerRegion,
    Point,
    Polygon,
    Region,
    Surface,
)
from layerizer.io.schema import Coordinate, SliceFileSchema
from layerizer.units import scale, unscale


def loop_to_domain(points: list[Coordinate]) -> Polygon:
    """Convert a loop given in millimetres into a scaled polygon."""
    return Polygon(points=[Point.from_xy(scale(x), scale(y)) for x, y in points])


def points_to_mm(points: list[Point]) -> list[list[float]]:
    return [[unscale(p.x), unscale(p.y)] for p in points]


def schema_to_layers(document: SliceFileSchema, flow_config: FlowConfig) -> list[Layer]:
    """Build layers and their regions from a validated slice document.

    Regions sharing an id across layers share the same Region object.

    Args:
        document: Validated slice file
        flow_config: Flow configuration used to derive region widths

    Returns:
        Layers sorted by id
    """
    regions: dict[int, Region] = {}
    layers: list[Layer] = []

    for layer_schema in sorted(document.layers, key=lambda layer: layer.id):
        layer = Layer(id=layer_schema.id, print_z=layer_schema.print_z, height=layer_schema.height)
        for region_schema in layer_schema.regions:
            region = regions.get(region_schema.region_id)
            if region is None:
                region = Region.from_config(region_schema.region_id, flow_config)
                regions[region_schema.region_id] = region
            layer.add_region(region, [loop_to_domain(loop) for loop in region_schema.loops])
        layers.append(layer)

    return layers


def expolygon_to_mm(expolygon: ExPolygon) -> dict[str, Any]:
    return {
        "contour": points_to_mm(expolygon.contour.points),
        "holes": [points_to_mm(hole.points) for hole in expolygon.holes],
    }


def surface_to_mm(surface: Surface) -> dict[str, Any]:
    return {
        "type": surface.surface_type.value,
        "expolygon": expolygon_to_mm(surface.expolygon),
        "bridge_angle": surface.bridge_angle,
    }


def extrusion_to_mm(extrusion: Extrusion) -> dict[str, Any]:
    """Convert an extrusion into a JSON-ready dictionary in millimetres."""
    if isinstance(extrusion, ExtrusionLoop):
        return {
            "kind": "loop",
            "role": extrusion.role.value,
            "flow_spacing": extrusion.flow_spacing,
            "points": points_to_mm(extrusion.polygon.points),
        }
    if isinstance(extrusion, ExtrusionPath):
        return {
            "kind": "path",
            "role": extrusion.role.value,
            "flow_spacing": extrusion.flow_spacing,
            "points": points_to_mm(extrusion.polyline.points),
        }
    if isinstance(extrusion, ExtrusionPathCollection):
        return {
            "kind": "collection",
            "paths": [extrusion_to_mm(path) for path in extrusion.paths],
        }
    raise TypeError(f"Unsupported extrusion type: {type(extrusion).__name__}")


def region_to_mm(region: LayerRegion) -> dict[str, Any]:
    return {
        "region_id": region.region_id,
        "slices": [expolygon_to_mm(e) for e in region.slice_expolygons()],
        "perimeters": [extrusion_to_mm(e) for e in region.perimeters],
        "thin_fills": [extrusion_to_mm(e) for e in region.thin_fills],
        "fill_surfaces": [surface_to_mm(s) for s in region.fill_surfaces],
    }


def layers_to_mm(layers: list[Layer]) -> dict[str, Any]:
    """Convert processed layers into the result document."""
    return {
        "layers": [
            {
                "id": layer.id,
                "print_z": layer.print_z,
                "height": layer.height,
                "regions": [region_to_mm(region) for region in layer.regions],
            }
            for layer in layers
        ]
    }
