"""Rectilinear fill pattern generator.

Generates parallel extrusion lines across a surface and joins neighbouring
lines into zigzags wherever the connecting move stays inside the surface.
Used by gap filling; the regular infill stage consumes the same interface.

The generator is deterministic: identical input yields identical paths.
"""

import math
from dataclasses import dataclass

from shapely import affinity
from shapely.geometry import LineString

from layerizer.core.lines import iter_lines, to_shapely
from layerizer.domain import Polyline, Surface
from layerizer.exceptions import GeometryError
from layerizer.units import scale, unscale


@dataclass(frozen=True)
class FillParams:
    """Parameters shared by all paths of one fill.

    Attributes:
        flow_spacing: Line spacing actually used, in mm
    """

    flow_spacing: float


def adjust_solid_spacing(width: float, distance: float) -> float:
    """Stretch line spacing so that solid lines split ``width`` into equal bands.

    Args:
        width: Extent to cover, perpendicular to the lines
        distance: Requested spacing

    Returns:
        Spacing closest to ``distance`` that divides ``width`` evenly
    """
    number_of_lines = round(width / distance)
    if number_of_lines < 1:
        return distance
    return width / number_of_lines


class RectilinearFiller:
    """Fills surfaces with parallel lines joined into zigzags.

    Attributes:
        angle: Base line direction in degrees
        layer_id: Layer being filled; odd layers rotate the lines by 90°
    """

    def __init__(self, angle: float = 45.0, layer_id: int = 0) -> None:
        self.angle = angle
        self.layer_id = layer_id

    def line_angle(self, surface: Surface) -> float:
        """Line direction for a surface, in radians.

        Bridge surfaces follow their detected bridge angle.
        """
        if surface.bridge_angle is not None:
            return math.radians(surface.bridge_angle)
        degrees = self.angle + (90.0 if self.layer_id % 2 else 0.0)
        return math.radians(degrees)

    def fill_surface(
        self,
        surface: Surface,
        density: float,
        flow_spacing: float,
    ) -> tuple[FillParams, list[Polyline]]:
        """Generate fill lines for one surface.

        Args:
            surface: Surface to fill
            density: Fill density in (0, 1]; 1 means solid
            flow_spacing: Spacing of the extrusion flow in mm

        Returns:
            Tuple of (params, polylines) where params carries the spacing
            actually used

        Raises:
            GeometryError: If the line spacing is not positive
        """
        shape = to_shapely(surface.expolygon)
        if shape.is_empty or density <= 0:
            return FillParams(flow_spacing=flow_spacing), []

        # rotate so that fill lines become vertical
        rotation = math.pi / 2 - self.line_angle(surface)
        rotated = affinity.rotate(shape, rotation, origin=(0, 0), use_radians=True)
        min_x, min_y, max_x, max_y = rotated.bounds

        line_spacing = scale(flow_spacing) / density
        if line_spacing <= 0:
            raise GeometryError(f"fill line spacing must be positive, got {flow_spacing} mm")
        if density >= 1:
            line_spacing = adjust_solid_spacing(max_x - min_x, line_spacing)
            flow_spacing = unscale(line_spacing)

        columns: list[list[list[tuple[float, float]]]] = []
        x = min_x + line_spacing / 2
        while x < max_x:
            probe = LineString([(x, min_y - 1), (x, max_y + 1)])
            pieces = [
                sorted(line.coords, key=lambda c: c[1])
                for line in iter_lines(probe.intersection(rotated))
                if line.length > 0
            ]
            pieces.sort(key=lambda coords: coords[0][1])
            if pieces:
                columns.append(pieces)
            x += line_spacing

        paths = self._connect(columns, rotated.buffer(line_spacing / 10), line_spacing)

        polylines = []
        for path in paths:
            back = affinity.rotate(LineString(path), -rotation, origin=(0, 0), use_radians=True)
            polyline = Polyline.from_path(back.coords)
            if len(polyline) >= 2:
                polylines.append(polyline)
        return FillParams(flow_spacing=flow_spacing), polylines

    def _connect(self, columns, boundary, line_spacing: float) -> list[list[tuple[float, float]]]:
        """Join column segments into zigzags, alternating direction per column."""
        paths: list[list[tuple[float, float]]] = []
        current: list[tuple[float, float]] | None = None
        max_link = line_spacing * 2

        for index, pieces in enumerate(columns):
            if index % 2:
                pieces = [list(reversed(coords)) for coords in reversed(pieces)]
            for coords in pieces:
                if current is not None and self._can_link(current[-1], coords[0], boundary, max_link):
                    current.extend(coords)
                    continue
                if current is not None:
                    paths.append(current)
                current = list(coords)

        if current is not None:
            paths.append(current)
        return paths

    @staticmethod
    def _can_link(a, b, boundary, max_link: float) -> bool:
        if math.dist(a, b) > max_link:
            return False
        return boundary.covers(LineString([a, b]))
