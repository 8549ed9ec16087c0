"""Geometric helpers for ordering and measuring slice geometry.

This module provides small pure utilities:
- Nearest-neighbour chaining of point-tagged items
- Line direction and midpoint in the [0, pi) direction convention
- Nesting depth of a loop among a set of loops

All functions are pure, stateless, and safe for use in worker processes.
"""

import math
from collections.abc import Sequence
from typing import TypeVar

from layerizer.domain import Point, Polygon

T = TypeVar("T")


def distance_squared(a: Point, b: Point) -> int:
    return (a.x - b.x) ** 2 + (a.y - b.y) ** 2


def chained_path_items(
    items: Sequence[tuple[Point, T]],
    start_near: Point | None = None,
) -> list[T]:
    """Order items by nearest-neighbour chaining.

    Starting from the item closest to ``start_near`` (or the first item),
    repeatedly pick the remaining item whose point is closest to the last
    picked one. Ties keep input order, so the result is deterministic.

    Args:
        items: (point, item) pairs
        start_near: Optional starting position

    Returns:
        Items in chained order
    """
    remaining = list(items)
    if not remaining:
        return []

    if start_near is None:
        current = remaining[0][0]
    else:
        current = start_near

    ordered: list[T] = []
    while remaining:
        best_idx = min(
            range(len(remaining)),
            key=lambda i: distance_squared(remaining[i][0], current),
        )
        point, item = remaining.pop(best_idx)
        ordered.append(item)
        current = point

    return ordered


def line_direction(a: Point, b: Point) -> float:
    """Direction of the line through a and b, in radians within [0, pi).

    Lines have no orientation: a->b and b->a have the same direction.
    """
    direction = math.atan2(b.y - a.y, b.x - a.x)
    if direction < 0:
        direction += math.pi
    if direction >= math.pi:
        direction = 0.0
    return direction


def direction_degrees(a: Point, b: Point) -> float:
    """Direction of the line through a and b, in degrees within [0, 180)."""
    return math.degrees(line_direction(a, b))


def midpoint(a: Point, b: Point) -> Point:
    return Point.from_xy((a.x + b.x) / 2, (a.y + b.y) / 2)


def nesting_depth(loop: Polygon, loops: Sequence[Polygon]) -> int:
    """Count how many other loops enclose the first point of ``loop``."""
    if not loop.points:
        return 0
    first = loop.first_point
    return sum(1 for other in loops if other is not loop and other.encloses_point(first))
