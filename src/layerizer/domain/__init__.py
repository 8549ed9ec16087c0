"""Domain models for layerizer.

This module contains the core domain models representing slice geometry,
typed surfaces, extrusions and the per-layer working set. All models are
plain dataclasses that pickle cleanly for parallel processing.

Key classes:
- Point, Polygon, Polyline, ExPolygon: Scaled integer geometry
- Surface: An ExPolygon tagged with a SurfaceType
- ExtrusionLoop, ExtrusionPath: Toolpath-ready results with roles
- Flow: Bead width/spacing for an extrusion role
- Region, LayerRegion, Layer: Pipeline state
"""

from layerizer.domain.extrusion import (
    Extrusion,
    ExtrusionLoop,
    ExtrusionPath,
    ExtrusionPathCollection,
    ExtrusionRole,
)
from layerizer.domain.flow import Flow, FlowRole
from layerizer.domain.layer import Layer, LayerRegion, Region
from layerizer.domain.polygon import (
    ExPolygon,
    Point,
    Polygon,
    Polyline,
    WindingDirection,
    polygons_of,
)
from layerizer.domain.surface import Surface, SurfaceType, group_surfaces, surfaces_of_type

__all__: list[str] = [
    # Enums
    "WindingDirection",
    "SurfaceType",
    "ExtrusionRole",
    "FlowRole",
    # Geometry
    "Point",
    "Polygon",
    "Polyline",
    "ExPolygon",
    "polygons_of",
    # Surfaces
    "Surface",
    "group_surfaces",
    "surfaces_of_type",
    # Extrusions
    "Extrusion",
    "ExtrusionLoop",
    "ExtrusionPath",
    "ExtrusionPathCollection",
    # Flow and layers
    "Flow",
    "Region",
    "LayerRegion",
    "Layer",
]
