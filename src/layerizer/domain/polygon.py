"""Core geometric types for layer slices.

This module defines the fundamental geometric types used throughout layerizer:
- Point: A 2D point in scaled integer coordinates
- Polygon: A closed loop whose winding carries meaning (CCW contour, CW hole)
- Polyline: An open sequence of points
- ExPolygon: One contour plus the holes it encloses
- WindingDirection: Enum for polygon winding direction
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class WindingDirection(Enum):
    """Polygon winding direction.

    Slice convention:
    - Outer contours wind counter-clockwise (positive signed area)
    - Holes wind clockwise (negative signed area)
    """

    CLOCKWISE = auto()
    COUNTER_CLOCKWISE = auto()


@dataclass(frozen=True, slots=True)
class Point:
    """A point in scaled integer space.

    Immutable and hashable for use in sets/dicts.

    Attributes:
        x: X coordinate in scaled units
        y: Y coordinate in scaled units
    """

    x: int
    y: int

    def to_tuple(self) -> tuple[int, int]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)

    @classmethod
    def from_xy(cls, x: float, y: float) -> "Point":
        """Build a point from possibly fractional coordinates, rounding to the grid."""
        return cls(int(round(x)), int(round(y)))


Path = list[tuple[int, int]]


def points_from_path(path: Iterable[Sequence[float]]) -> list[Point]:
    """Convert an (x, y) sequence into grid points."""
    return [Point.from_xy(p[0], p[1]) for p in path]


@dataclass
class Polygon:
    """A closed polygon.

    The last point connects back to the first one implicitly; the first point
    is never repeated at the end.

    Attributes:
        points: Ordered polygon vertices
    """

    points: list[Point]

    def __len__(self) -> int:
        return len(self.points)

    def signed_area(self) -> float:
        """Calculate signed area using shoelace formula.

        Returns:
            Positive area for counter-clockwise winding, negative for clockwise
        """
        n = len(self.points)
        if n < 3:
            return 0.0

        area = 0
        for i in range(n):
            j = (i + 1) % n
            area += self.points[i].x * self.points[j].y
            area -= self.points[j].x * self.points[i].y

        return area / 2.0

    def area(self) -> float:
        return abs(self.signed_area())

    @property
    def direction(self) -> WindingDirection:
        if self.signed_area() >= 0:
            return WindingDirection.COUNTER_CLOCKWISE
        return WindingDirection.CLOCKWISE

    def is_counter_clockwise(self) -> bool:
        return self.signed_area() > 0

    def reversed(self) -> "Polygon":
        return Polygon(points=list(reversed(self.points)))

    def make_counter_clockwise(self) -> "Polygon":
        """Return this polygon with counter-clockwise winding."""
        return self if self.is_counter_clockwise() else self.reversed()

    def make_clockwise(self) -> "Polygon":
        """Return this polygon with clockwise winding."""
        return self.reversed() if self.is_counter_clockwise() else self

    @property
    def first_point(self) -> Point:
        return self.points[0]

    def bounding_box(self) -> tuple[int, int, int, int]:
        """Calculate bounding box of the polygon.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y)
        """
        if not self.points:
            return (0, 0, 0, 0)
        xs = [p.x for p in self.points]
        ys = [p.y for p in self.points]
        return (min(xs), min(ys), max(xs), max(ys))

    def encloses_point(self, point: Point) -> bool:
        """Check if point is inside polygon using ray casting algorithm.

        Casts a ray from the point to the right and counts intersections
        with polygon edges. Odd count means inside, even means outside.
        """
        n = len(self.points)
        if n < 3:
            return False

        inside = False
        x, y = point.x, point.y
        j = n - 1

        for i in range(n):
            xi, yi = self.points[i].x, self.points[i].y
            xj, yj = self.points[j].x, self.points[j].y

            if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
                inside = not inside

            j = i

        return inside

    def split_at_first_point(self) -> "Polyline":
        """Open the polygon into a polyline that starts and ends at the first point."""
        return Polyline(points=[*self.points, self.points[0]])

    def to_path(self) -> Path:
        return [p.to_tuple() for p in self.points]

    @classmethod
    def from_path(cls, path: Iterable[Sequence[float]]) -> "Polygon":
        return cls(points=points_from_path(path))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"points": self.to_path()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Polygon":
        return cls.from_path(data["points"])


@dataclass
class Polyline:
    """An open sequence of points.

    Attributes:
        points: Ordered vertices from start to end
    """

    points: list[Point]

    def __len__(self) -> int:
        return len(self.points)

    @property
    def first_point(self) -> Point:
        return self.points[0]

    @property
    def last_point(self) -> Point:
        return self.points[-1]

    def length(self) -> float:
        total = 0.0
        for a, b in zip(self.points, self.points[1:]):
            total += ((b.x - a.x) ** 2 + (b.y - a.y) ** 2) ** 0.5
        return total

    def reversed(self) -> "Polyline":
        return Polyline(points=list(reversed(self.points)))

    def to_path(self) -> Path:
        return [p.to_tuple() for p in self.points]

    @classmethod
    def from_path(cls, path: Iterable[Sequence[float]]) -> "Polyline":
        return cls(points=points_from_path(path))


@dataclass
class ExPolygon:
    """A polygon with holes.

    Construction normalizes winding: the contour is made counter-clockwise and
    every hole clockwise. Holes are expected to lie inside the contour and not
    overlap each other; the boolean engine guarantees this for every
    ExPolygon it produces.

    Attributes:
        contour: Outer boundary
        holes: Boundaries of the holes
    """

    contour: Polygon
    holes: list[Polygon] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.contour = self.contour.make_counter_clockwise()
        self.holes = [hole.make_clockwise() for hole in self.holes]

    def polygons(self) -> list[Polygon]:
        """Contour followed by holes, with their normalized winding."""
        return [self.contour, *self.holes]

    def area(self) -> float:
        """Net area: contour area minus hole areas."""
        return self.contour.area() - sum(hole.area() for hole in self.holes)

    def encloses_point(self, point: Point) -> bool:
        if not self.contour.encloses_point(point):
            return False
        return not any(hole.encloses_point(point) for hole in self.holes)

    def bounding_box(self) -> tuple[int, int, int, int]:
        return self.contour.bounding_box()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "contour": self.contour.to_path(),
            "holes": [hole.to_path() for hole in self.holes],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExPolygon":
        return cls(
            contour=Polygon.from_path(data["contour"]),
            holes=[Polygon.from_path(h) for h in data["holes"]],
        )


def polygons_of(expolygons: Iterable[ExPolygon]) -> list[Polygon]:
    """Flatten ExPolygons into their contours and holes."""
    return [polygon for expolygon in expolygons for polygon in expolygon.polygons()]
