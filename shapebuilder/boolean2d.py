"""2D boolean helpers over native path data (intersect / subtract / unite).

Path data is flattened into shapely polygons: cubic segments are sampled,
every sub-path becomes a ring, and rings are combined with the even-odd rule
so nested sub-paths turn into holes. Results come back as ``M``/``L``/``Z``
sub-paths.
"""
from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
from shapely.errors import ShapelyError
from shapely.geometry import GeometryCollection, MultiPolygon, Polygon
from shapely.geometry import Point as _ShapelyPoint
from shapely.geometry.base import BaseGeometry
from shapely.geometry.polygon import orient
from shapely.ops import unary_union
from shapely.validation import make_valid

from .errors import DocumentError, GeometryError
from .path_data import PathData, Point, SubPath, close_path, line_to, move_to
from .settings import DEFAULT_SETTINGS, ShapeBuilderSettings

PathItem = BaseGeometry

_GEOMETRY_ERRORS = (ShapelyError, ValueError, TypeError)


def _bezier_sample(control_points: np.ndarray, t: np.ndarray) -> np.ndarray:
    """Evaluate a Bezier curve of arbitrary degree at parameter values ``t``."""
    pts = np.broadcast_to(control_points, (len(t),) + control_points.shape).copy()
    for _ in range(1, control_points.shape[0]):
        pts = (1.0 - t)[:, None, None] * pts[:, :-1, :] + t[:, None, None] * pts[:, 1:, :]
    return pts[:, 0, :]


def _flatten_sub_path(sub: SubPath, samples: int) -> List[Point]:
    pts: List[Point] = []
    t = np.linspace(0.0, 1.0, samples + 1)[1:]
    for cmd in sub:
        if cmd.type in ("M", "L"):
            pts.append(cmd.position)  # type: ignore[arg-type]
        elif cmd.type == "C":
            if not pts:
                raise DocumentError("Cubic segment without a start point")
            ctrl = np.array([pts[-1], cmd.control_point1, cmd.control_point2, cmd.position], dtype=float)
            pts.extend((float(x), float(y)) for x, y in _bezier_sample(ctrl, t))
    # drop repeats, including the closing vertex
    ring: List[Point] = []
    for p in pts:
        if not ring or not _same(ring[-1], p):
            ring.append(p)
    if len(ring) > 1 and _same(ring[0], ring[-1]):
        ring.pop()
    return ring


def _same(a: Point, b: Point) -> bool:
    return abs(a[0] - b[0]) < 1e-12 and abs(a[1] - b[1]) < 1e-12


def _polygonal(geom: Optional[BaseGeometry]) -> BaseGeometry:
    """Drop points and lines from ``geom``; keep polygon faces only."""
    parts = extract_simple_contours(geom)
    if not parts:
        return Polygon()
    if len(parts) == 1:
        return parts[0]
    return MultiPolygon(parts)


def extract_simple_contours(item: Optional[BaseGeometry]) -> List[Polygon]:
    """Flatten a possibly compound item into single-face polygons."""
    if item is None or item.is_empty:
        return []
    if isinstance(item, Polygon):
        return [item]
    if isinstance(item, (MultiPolygon, GeometryCollection)):
        out: List[Polygon] = []
        for part in item.geoms:
            out.extend(extract_simple_contours(part))
        return out
    return []


# --- Conversion ---


def to_path_item(path_data: PathData, samples: Optional[int] = None) -> BaseGeometry:
    """Convert native path data into a polygonal shapely geometry."""
    n = int(samples or DEFAULT_SETTINGS.curve_samples)
    result: BaseGeometry = Polygon()
    try:
        for sub in path_data.sub_paths:
            ring = _flatten_sub_path(sub, n)
            if len(ring) < 3:
                continue
            face = _polygonal(make_valid(Polygon(ring)))
            if face.is_empty:
                continue
            result = face if result.is_empty else _polygonal(result.symmetric_difference(face))
    except DocumentError:
        raise
    except _GEOMETRY_ERRORS as exc:
        raise GeometryError(f"Could not convert path data: {exc}") from exc
    return result


def _ring_to_sub_path(coords: Sequence[Tuple[float, float]]) -> SubPath:
    pts = [(float(x), float(y)) for x, y in coords]
    if len(pts) > 1 and _same(pts[0], pts[-1]):
        pts = pts[:-1]
    sub: SubPath = [move_to(*pts[0])]
    sub.extend(line_to(*p) for p in pts[1:])
    sub.append(close_path())
    return sub


def from_path_item(item: Optional[BaseGeometry]) -> PathData:
    """Convert a polygonal geometry back into native path data."""
    subs: List[SubPath] = []
    for poly in extract_simple_contours(item):
        poly = orient(poly, sign=1.0)
        subs.append(_ring_to_sub_path(list(poly.exterior.coords)))
        for hole in poly.interiors:
            subs.append(_ring_to_sub_path(list(hole.coords)))
    return PathData(sub_paths=subs)


def combine(parts: Iterable[BaseGeometry]) -> BaseGeometry:
    """Compound item covering every part."""
    items = [p for p in parts if p is not None and not p.is_empty]
    if not items:
        return Polygon()
    if len(items) == 1:
        return items[0]
    try:
        return _polygonal(unary_union(items))
    except _GEOMETRY_ERRORS as exc:
        raise GeometryError(f"combine failed: {exc}") from exc


# --- Boolean operations ---


def _run(name: str, a: BaseGeometry, b: BaseGeometry) -> Optional[BaseGeometry]:
    try:
        result = _polygonal(getattr(a, name)(b))
    except _GEOMETRY_ERRORS as exc:
        raise GeometryError(f"{name} failed: {exc}") from exc
    return None if result.is_empty else result


def intersect(a: BaseGeometry, b: BaseGeometry) -> Optional[BaseGeometry]:
    return _run("intersection", a, b)


def subtract(a: BaseGeometry, b: BaseGeometry) -> Optional[BaseGeometry]:
    return _run("difference", a, b)


def unite(a: BaseGeometry, b: BaseGeometry) -> Optional[BaseGeometry]:
    return _run("union", a, b)


# --- Queries ---


def contains(item: BaseGeometry, point: Point) -> bool:
    """Point-in-path test; points on the boundary count as inside."""
    if item is None or item.is_empty:
        return False
    return bool(item.covers(_ShapelyPoint(float(point[0]), float(point[1]))))


def bounds(item: BaseGeometry) -> Tuple[float, float]:
    if item is None or item.is_empty:
        return (0.0, 0.0)
    min_x, min_y, max_x, max_y = item.bounds
    return (max_x - min_x, max_y - min_y)


def area(item: BaseGeometry) -> float:
    if item is None or item.is_empty:
        return 0.0
    return float(abs(item.area))


def is_valid_item(item: Optional[BaseGeometry], settings: ShapeBuilderSettings = DEFAULT_SETTINGS) -> bool:
    """Reject slivers: tiny boxes, tiny or non-finite areas."""
    if item is None or item.is_empty:
        return False
    width, height = bounds(item)
    size = area(item)
    return (
        width >= settings.min_bounds_size
        and height >= settings.min_bounds_size
        and math.isfinite(size)
        and size >= settings.min_area
    )


def path_area(path_data: PathData, samples: Optional[int] = None) -> float:
    return area(to_path_item(path_data, samples))


__all__ = [
    "PathItem",
    "to_path_item",
    "from_path_item",
    "extract_simple_contours",
    "combine",
    "intersect",
    "subtract",
    "unite",
    "contains",
    "bounds",
    "area",
    "is_valid_item",
    "path_area",
]
