"""Extrusion paths and loops produced for a layer region.

These are the toolpath-ready results handed to the motion planner: ordered
point sequences tagged with the extrusion role and the flow spacing that
produced them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from layerizer.domain.polygon import Point, Polygon, Polyline


class ExtrusionRole(str, Enum):
    """What an extrusion is for."""

    PERIMETER = "perimeter"
    EXTERNAL_PERIMETER = "external-perimeter"
    CONTOUR_INTERNAL_PERIMETER = "contour-internal-perimeter"
    GAP_FILL = "gap-fill"
    SOLID_FILL = "solid-fill"


@dataclass
class ExtrusionPath:
    """An open extrusion.

    Attributes:
        polyline: Path geometry
        role: Extrusion role
        flow_spacing: Spacing (mm) of the flow used to produce the path
        height: Layer height (mm) the path is extruded at, when known
    """

    polyline: Polyline
    role: ExtrusionRole
    flow_spacing: float
    height: float | None = None

    @property
    def first_point(self) -> Point:
        return self.polyline.first_point

    @property
    def last_point(self) -> Point:
        return self.polyline.last_point

    def reversed(self) -> "ExtrusionPath":
        return ExtrusionPath(
            polyline=self.polyline.reversed(),
            role=self.role,
            flow_spacing=self.flow_spacing,
            height=self.height,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "points": self.polyline.to_path(),
            "role": self.role.value,
            "flow_spacing": self.flow_spacing,
        }


@dataclass
class ExtrusionLoop:
    """A closed extrusion.

    Attributes:
        polygon: Loop geometry (CCW for contours, CW for holes)
        role: Extrusion role
        flow_spacing: Spacing (mm) of the flow used to produce the loop
    """

    polygon: Polygon
    role: ExtrusionRole
    flow_spacing: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "points": self.polygon.to_path(),
            "role": self.role.value,
            "flow_spacing": self.flow_spacing,
        }


@dataclass
class ExtrusionPathCollection:
    """An ordered group of open paths printed together."""

    paths: list[ExtrusionPath] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.paths)

    def chained_path(self, start_near: Point | None = None) -> "ExtrusionPathCollection":
        """Order paths by nearest-neighbour chaining.

        Each path may be reversed so that it starts at the end closest to the
        previous path's last point.

        Args:
            start_near: Where the nozzle is before the first path (defaults to
                the first path's first point)

        Returns:
            New collection with the chained order
        """
        remaining = list(self.paths)
        if not remaining:
            return ExtrusionPathCollection()

        current = start_near if start_near is not None else remaining[0].first_point
        ordered: list[ExtrusionPath] = []
        while remaining:
            best_idx = 0
            best_reverse = False
            best_dist = None
            for idx, path in enumerate(remaining):
                for reverse, endpoint in ((False, path.first_point), (True, path.last_point)):
                    dist = (endpoint.x - current.x) ** 2 + (endpoint.y - current.y) ** 2
                    if best_dist is None or dist < best_dist:
                        best_idx, best_reverse, best_dist = idx, reverse, dist
            path = remaining.pop(best_idx)
            if best_reverse:
                path = path.reversed()
            ordered.append(path)
            current = path.last_point

        return ExtrusionPathCollection(paths=ordered)

    def to_dict(self) -> dict[str, Any]:
        return {"paths": [p.to_dict() for p in self.paths]}


Extrusion = ExtrusionLoop | ExtrusionPath | ExtrusionPathCollection
