"""Typed surfaces awaiting perimeters or infill.

A surface is an ExPolygon tagged with what it represents in the printed
part (top skin, bottom skin, sparse interior, forced-solid interior) plus the
few per-surface overrides downstream stages care about.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from layerizer.domain.polygon import ExPolygon, Polygon


class SurfaceType(str, Enum):
    """Role of a surface within its layer."""

    INTERNAL = "internal"
    INTERNAL_SOLID = "internal-solid"
    TOP = "top"
    BOTTOM = "bottom"


@dataclass
class Surface:
    """An ExPolygon tagged with a surface type.

    Attributes:
        expolygon: Surface geometry
        surface_type: Role of the surface within the layer
        extra_perimeters: Perimeters to add on top of the configured count
        bridge_angle: Direction of bridge extrusions in degrees, if bridging
    """

    expolygon: ExPolygon
    surface_type: SurfaceType = SurfaceType.INTERNAL
    extra_perimeters: int | None = None
    bridge_angle: float | None = None

    def polygons(self) -> list[Polygon]:
        return self.expolygon.polygons()

    def clone(self, **changes: Any) -> "Surface":
        """Copy this surface, overriding the given attributes."""
        return replace(self, **changes)

    def group_key(self) -> tuple[SurfaceType, int | None, float | None]:
        return (self.surface_type, self.extra_perimeters, self.bridge_angle)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "expolygon": self.expolygon.to_dict(),
            "type": self.surface_type.value,
            "extra_perimeters": self.extra_perimeters,
            "bridge_angle": self.bridge_angle,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Surface":
        return cls(
            expolygon=ExPolygon.from_dict(data["expolygon"]),
            surface_type=SurfaceType(data["type"]),
            extra_perimeters=data.get("extra_perimeters"),
            bridge_angle=data.get("bridge_angle"),
        )


def group_surfaces(surfaces: list[Surface]) -> list[list[Surface]]:
    """Group surfaces sharing type and overrides, in order of first appearance."""
    groups: dict[tuple[SurfaceType, int | None, float | None], list[Surface]] = {}
    for surface in surfaces:
        groups.setdefault(surface.group_key(), []).append(surface)
    return list(groups.values())


def surfaces_of_type(surfaces: list[Surface], *types: SurfaceType) -> list[Surface]:
    return [s for s in surfaces if s.surface_type in types]
