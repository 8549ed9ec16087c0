"""Extrusion flow geometry.

A flow describes the bead laid down for one extrusion role: its width and
the spacing between the centerlines of two adjacent beads. Adjacent beads
overlap slightly because the extruded cross-section is a rectangle with
semicircular ends rather than a plain rectangle.
"""

import math
from dataclasses import dataclass, replace
from enum import Enum

from layerizer.units import scale


class FlowRole(str, Enum):
    """Roles that get their own flow."""

    PERIMETER = "perimeter"
    INFILL = "infill"
    SOLID_INFILL = "solid_infill"
    TOP_INFILL = "top_infill"


@dataclass(frozen=True)
class Flow:
    """Bead geometry for an extrusion role.

    Attributes:
        width: Extrusion width in mm
        layer_height: Layer height in mm
    """

    width: float
    layer_height: float

    @property
    def spacing(self) -> float:
        """Distance between adjacent bead centerlines in mm."""
        return self.width - self.layer_height * (1 - math.pi / 4)

    @property
    def scaled_width(self) -> float:
        return scale(self.width)

    @property
    def scaled_spacing(self) -> float:
        return scale(self.spacing)

    def clone(self, **changes: float) -> "Flow":
        return replace(self, **changes)
