"""Polygon boolean and offset operations on scaled integer geometry.

Thin wrappers around pyclipper (Clipper) that speak the domain types:
- Boolean operations (union, difference, intersection) with a selectable
  fill rule, returning either flat polygons or ExPolygons
- Offsets (grow/shrink) and offset2 (two chained offsets)
- Safety offsets used to compensate for boolean precision artifacts
- Containment trees built from an even-odd union (``union_pt``)

Clipper works on integers, which is why every coordinate in layerizer lives
in scaled space. Offsets use mitered joins, since round joins would emit a
vertex every fraction of a unit at this scale.
"""

import logging
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field

import pyclipper

from layerizer.domain import ExPolygon, Polygon, Polyline
from layerizer.units import SCALED_RESOLUTION, scale

logger = logging.getLogger(__name__)

MITER_LIMIT = 3.0

# Growth applied to clip polygons when a boolean result must not lose
# adjacency because of integer rounding
SAFETY_OFFSET = scale(1e-05)

PFT_EVENODD = pyclipper.PFT_EVENODD
PFT_NONZERO = pyclipper.PFT_NONZERO


def _paths(polygons: Iterable[Polygon]) -> list[list[tuple[int, int]]]:
    """Convert polygons into Clipper paths, dropping degenerate ones."""
    paths = []
    for polygon in polygons:
        path = polygon.to_path()
        if len(path) >= 3 and pyclipper.Area(path) != 0:
            paths.append(path)
    return paths


def _expolygons_from_tree(root: pyclipper.PyPolyNode) -> list[ExPolygon]:
    """Convert a Clipper PolyTree into ExPolygons (outers with their holes)."""
    result: list[ExPolygon] = []

    def add_outer(node: pyclipper.PyPolyNode) -> None:
        holes = [Polygon.from_path(hole.Contour) for hole in node.Childs]
        result.append(ExPolygon(contour=Polygon.from_path(node.Contour), holes=holes))
        for hole in node.Childs:
            for nested in hole.Childs:
                add_outer(nested)

    for child in root.Childs:
        add_outer(child)
    return result


def _boolean(
    clip_type: int,
    subject: Iterable[Polygon],
    clip: Iterable[Polygon],
    fill_type: int,
    safety_offset: bool,
    as_tree: bool,
):
    subject_paths = _paths(subject)
    if not subject_paths:
        return []

    clip_polygons = list(clip)
    if safety_offset and clip_polygons:
        clip_polygons = offset(clip_polygons, SAFETY_OFFSET)
    clip_paths = _paths(clip_polygons)

    pc = pyclipper.Pyclipper()
    pc.AddPaths(subject_paths, pyclipper.PT_SUBJECT, True)
    if clip_paths:
        pc.AddPaths(clip_paths, pyclipper.PT_CLIP, True)

    if as_tree:
        return _expolygons_from_tree(pc.Execute2(clip_type, fill_type, fill_type))
    return [Polygon.from_path(p) for p in pc.Execute(clip_type, fill_type, fill_type)]


def union(polygons: Iterable[Polygon], fill_type: int = PFT_NONZERO) -> list[Polygon]:
    return _boolean(pyclipper.CT_UNION, polygons, [], fill_type, False, False)


def union_ex(polygons: Iterable[Polygon], fill_type: int = PFT_NONZERO) -> list[ExPolygon]:
    """Union polygons into non-overlapping ExPolygons."""
    return _boolean(pyclipper.CT_UNION, polygons, [], fill_type, False, True)


def diff_ex(
    subject: Iterable[Polygon],
    clip: Iterable[Polygon],
    safety_offset: bool = False,
) -> list[ExPolygon]:
    """Subtract clip from subject.

    Args:
        subject: Polygons to subtract from
        clip: Polygons to subtract
        safety_offset: Grow the clip polygons slightly first, so that
            subtracting a shape from itself never leaves rounding slivers

    Returns:
        ExPolygons of the remaining area
    """
    return _boolean(pyclipper.CT_DIFFERENCE, subject, clip, PFT_NONZERO, safety_offset, True)


def intersection_ex(
    subject: Iterable[Polygon],
    clip: Iterable[Polygon],
    safety_offset: bool = False,
) -> list[ExPolygon]:
    """Intersect subject with clip.

    With ``safety_offset`` the clip is grown slightly first, which also makes
    adjacent clip ExPolygons merge into one.
    """
    return _boolean(
        pyclipper.CT_INTERSECTION, subject, clip, PFT_NONZERO, safety_offset, True
    )


def _offsetter(paths: list[list[tuple[int, int]]]) -> pyclipper.PyclipperOffset:
    pco = pyclipper.PyclipperOffset(MITER_LIMIT, SCALED_RESOLUTION / 4)
    pco.AddPaths(paths, pyclipper.JT_MITER, pyclipper.ET_CLOSEDPOLYGON)
    return pco


def offset(polygons: Iterable[Polygon], delta: float) -> list[Polygon]:
    """Grow (positive delta) or shrink (negative delta) polygons.

    Contours and holes can be mixed freely as long as their winding is
    normalized (CCW contours, CW holes): holes move the opposite way.
    """
    paths = _paths(polygons)
    if not paths:
        return []
    return [Polygon.from_path(p) for p in _offsetter(paths).Execute(delta)]


def offset_ex(polygons: Iterable[Polygon], delta: float) -> list[ExPolygon]:
    paths = _paths(polygons)
    if not paths:
        return []
    return _expolygons_from_tree(_offsetter(paths).Execute2(delta))


def offset2(polygons: Iterable[Polygon], delta1: float, delta2: float) -> list[Polygon]:
    """Offset by delta1 and then by delta2."""
    return offset(offset(polygons, delta1), delta2)


def offset2_ex(polygons: Iterable[Polygon], delta1: float, delta2: float) -> list[ExPolygon]:
    """Offset by delta1 and then by delta2, returning ExPolygons.

    A shrink followed by a grow (delta1 < 0 < delta2) removes every part
    narrower than ``2 * |delta1|``.
    """
    return offset_ex(offset(polygons, delta1), delta2)


def noncollapsing_offset_ex(expolygon: ExPolygon, delta: float) -> list[ExPolygon]:
    """Shrink an ExPolygon one unit less than asked.

    Parts exactly ``2 * |delta|`` wide survive as a sliver instead of
    vanishing; anything thinner disappears.
    """
    return offset_ex(expolygon.polygons(), delta + 1)


def offset_polylines(polylines: Iterable[Polyline], delta: float) -> list[Polygon]:
    """Grow open polylines into closed outlines with round ends."""
    paths = [p.to_path() for p in polylines if len(p) >= 2]
    if not paths:
        return []
    pco = pyclipper.PyclipperOffset(MITER_LIMIT, SCALED_RESOLUTION / 4)
    pco.AddPaths(paths, pyclipper.JT_ROUND, pyclipper.ET_OPENROUND)
    return [Polygon.from_path(p) for p in pco.Execute(delta)]


def total_area(expolygons: Iterable[ExPolygon]) -> float:
    return sum(expolygon.area() for expolygon in expolygons)


@dataclass
class ContainmentNode:
    """A polygon and the polygons nested directly inside it.

    Attributes:
        polygon: Node geometry as returned by the boolean engine
        depth: Nesting depth (0 for roots)
        parent: Index of the parent node, None for roots
        children: Indices of the directly nested nodes
        is_hole: True if the even-odd union made this polygon a hole
    """

    polygon: Polygon
    depth: int
    parent: int | None
    is_hole: bool
    children: list[int] = field(default_factory=list)


@dataclass
class ContainmentTree:
    """Containment hierarchy stored as an arena of nodes.

    Attributes:
        nodes: All nodes; children refer to them by index
        roots: Indices of top-level nodes
    """

    nodes: list[ContainmentNode] = field(default_factory=list)
    roots: list[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.nodes)

    @classmethod
    def from_polytree(cls, root: pyclipper.PyPolyNode) -> "ContainmentTree":
        tree = cls()
        queue: deque[tuple[pyclipper.PyPolyNode, int | None]] = deque(
            (child, None) for child in root.Childs
        )
        while queue:
            pnode, parent = queue.popleft()
            idx = len(tree.nodes)
            depth = 0 if parent is None else tree.nodes[parent].depth + 1
            tree.nodes.append(
                ContainmentNode(
                    polygon=Polygon.from_path(pnode.Contour),
                    depth=depth,
                    parent=parent,
                    is_hole=bool(pnode.IsHole),
                )
            )
            if parent is None:
                tree.roots.append(idx)
            else:
                tree.nodes[parent].children.append(idx)
            queue.extend((child, idx) for child in pnode.Childs)
        return tree


def union_pt(polygons: Iterable[Polygon], fill_type: int = PFT_EVENODD) -> ContainmentTree:
    """Union polygons and return their containment tree.

    With the even-odd rule every input loop survives as its own node, and
    each node's parent is the loop immediately enclosing it.
    """
    paths = _paths(polygons)
    if not paths:
        return ContainmentTree()
    pc = pyclipper.Pyclipper()
    pc.AddPaths(paths, pyclipper.PT_SUBJECT, True)
    return ContainmentTree.from_polytree(pc.Execute2(pyclipper.CT_UNION, fill_type, fill_type))
