"""Pydantic schemas for slice input files.

Slice files are JSON documents describing the raw loops of every layer
region, in millimetres:

    {"layers": [{"id": 0, "print_z": 0.2, "height": 0.2,
                 "regions": [{"region_id": 0, "loops": [[[x, y], ...], ...]}]}]}
"""

from pydantic import BaseModel, Field

Coordinate = tuple[float, float]


class RegionSchema(BaseModel):
    """Raw loops of one region at one layer."""

    region_id: int = Field(default=0, ge=0)
    loops: list[list[Coordinate]] = Field(default_factory=list)


class LayerSchema(BaseModel):
    """One layer of the slice file."""

    id: int = Field(ge=0)
    print_z: float = Field(ge=0.0)
    height: float = Field(gt=0.0)
    regions: list[RegionSchema] = Field(default_factory=list)


class SliceFileSchema(BaseModel):
    """Top-level slice file document."""

    layers: list[LayerSchema] = Field(default_factory=list)
