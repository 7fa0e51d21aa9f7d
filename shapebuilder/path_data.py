"""Native path data model: move/line/cubic/close sub-paths plus style fields.

The JSON form mirrors the canvas document format (camelCase keys,
``{"x": .., "y": ..}`` points) so documents exported by the editor can be
loaded as-is.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .errors import DocumentError

Point = Tuple[float, float]

BEZIER_CIRCLE_KAPPA = 0.5522847498

_STYLE_KEYS = (
    ("stroke_width", "strokeWidth"),
    ("stroke_color", "strokeColor"),
    ("stroke_opacity", "strokeOpacity"),
    ("fill_color", "fillColor"),
    ("fill_opacity", "fillOpacity"),
)


@dataclass(frozen=True)
class Command:
    type: str
    position: Optional[Point] = None
    control_point1: Optional[Point] = None
    control_point2: Optional[Point] = None

    def points(self) -> List[Point]:
        """On-curve point plus control points, in drawing order."""
        if self.type == "C":
            return [self.control_point1, self.control_point2, self.position]  # type: ignore[list-item]
        if self.type in ("M", "L"):
            return [self.position]  # type: ignore[list-item]
        return []


SubPath = List[Command]


def move_to(x: float, y: float) -> Command:
    return Command("M", (float(x), float(y)))


def line_to(x: float, y: float) -> Command:
    return Command("L", (float(x), float(y)))


def curve_to(c1: Point, c2: Point, end: Point) -> Command:
    return Command(
        "C",
        (float(end[0]), float(end[1])),
        (float(c1[0]), float(c1[1])),
        (float(c2[0]), float(c2[1])),
    )


def close_path() -> Command:
    return Command("Z")


@dataclass
class PathData:
    sub_paths: List[SubPath] = field(default_factory=list)
    stroke_width: Optional[float] = None
    stroke_color: Optional[str] = None
    stroke_opacity: Optional[float] = None
    fill_color: Optional[str] = None
    fill_opacity: Optional[float] = None

    def iter_commands(self) -> Iterator[Command]:
        for sub in self.sub_paths:
            yield from sub

    def style(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name, _ in _STYLE_KEYS}

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"subPaths": [[_command_to_dict(cmd) for cmd in sub] for sub in self.sub_paths]}
        for name, key in _STYLE_KEYS:
            value = getattr(self, name)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PathData":
        if not isinstance(data, dict):
            raise DocumentError("Path data must be an object")
        raw_subs = data.get("subPaths", [])
        if not isinstance(raw_subs, list):
            raise DocumentError("'subPaths' must be a list of command lists")
        subs = [[_command_from_dict(cmd) for cmd in sub] for sub in raw_subs]
        style = {name: data.get(key) for name, key in _STYLE_KEYS}
        return cls(sub_paths=subs, **style)


@dataclass
class PathElement:
    id: str
    data: PathData
    type: str = "path"

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "type": self.type, "data": self.data.to_dict()}

    @classmethod
    def from_dict(cls, item: Dict[str, Any]) -> "PathElement":
        try:
            element_id = str(item["id"])
        except (KeyError, TypeError) as exc:
            raise DocumentError("Element entry is missing 'id'") from exc
        return cls(id=element_id, type=str(item.get("type", "path")), data=PathData.from_dict(item.get("data", {})))


@dataclass(frozen=True)
class Bounds:
    x: float
    y: float
    width: float
    height: float

    def contains_point(self, point: Point) -> bool:
        px, py = point
        return self.x <= px <= self.x + self.width and self.y <= py <= self.y + self.height

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


def _point_to_dict(p: Point) -> Dict[str, float]:
    return {"x": float(p[0]), "y": float(p[1])}


def _point_from_dict(raw: Any) -> Point:
    try:
        if isinstance(raw, dict):
            return (float(raw["x"]), float(raw["y"]))
        return (float(raw[0]), float(raw[1]))
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        raise DocumentError(f"Invalid point {raw!r}") from exc


def _command_to_dict(cmd: Command) -> Dict[str, Any]:
    out: Dict[str, Any] = {"type": cmd.type}
    if cmd.type == "C":
        out["controlPoint1"] = _point_to_dict(cmd.control_point1)  # type: ignore[arg-type]
        out["controlPoint2"] = _point_to_dict(cmd.control_point2)  # type: ignore[arg-type]
    if cmd.position is not None:
        out["position"] = _point_to_dict(cmd.position)
    return out


def _command_from_dict(raw: Any) -> Command:
    if not isinstance(raw, dict):
        raise DocumentError(f"Invalid command {raw!r}")
    kind = raw.get("type")
    if kind == "Z":
        return close_path()
    if kind in ("M", "L"):
        return Command(kind, _point_from_dict(raw.get("position")))
    if kind == "C":
        return Command(
            "C",
            _point_from_dict(raw.get("position")),
            _point_from_dict(raw.get("controlPoint1")),
            _point_from_dict(raw.get("controlPoint2")),
        )
    raise DocumentError(f"Unsupported command type {kind!r}")


def compute_bounds(path_data: PathData) -> Bounds:
    """Axis-aligned box over on-curve points and Bezier control points."""
    min_x = min_y = math.inf
    max_x = max_y = -math.inf
    for cmd in path_data.iter_commands():
        for x, y in cmd.points():
            min_x = min(min_x, x)
            min_y = min(min_y, y)
            max_x = max(max_x, x)
            max_y = max(max_y, y)
    if min_x is math.inf:
        return Bounds(0.0, 0.0, 0.0, 0.0)
    return Bounds(min_x, min_y, max_x - min_x, max_y - min_y)


def compute_center(bounds: Bounds) -> Point:
    return (bounds.x + bounds.width / 2.0, bounds.y + bounds.height / 2.0)


# ---------------------------------------------------------------------------
# Builders


def polygon_path(points: List[Point], **style: Any) -> PathData:
    """Closed polyline through ``points``."""
    if len(points) < 3:
        raise ValueError("A closed polygon needs at least three points")
    sub: SubPath = [move_to(*points[0])]
    sub.extend(line_to(*p) for p in points[1:])
    sub.append(close_path())
    return PathData(sub_paths=[sub], **style)


def rect_path(x: float, y: float, width: float, height: float, **style: Any) -> PathData:
    return polygon_path([(x, y), (x + width, y), (x + width, y + height), (x, y + height)], **style)


def circle_path(cx: float, cy: float, radius: float, **style: Any) -> PathData:
    """Circle as four cubic arcs, starting at the top."""
    k = radius * BEZIER_CIRCLE_KAPPA
    top = (cx, cy - radius)
    right = (cx + radius, cy)
    bottom = (cx, cy + radius)
    left = (cx - radius, cy)
    sub: SubPath = [
        move_to(*top),
        curve_to((cx + k, cy - radius), (cx + radius, cy - k), right),
        curve_to((cx + radius, cy + k), (cx + k, cy + radius), bottom),
        curve_to((cx - k, cy + radius), (cx - radius, cy + k), left),
        curve_to((cx - radius, cy - k), (cx - k, cy - radius), top),
        close_path(),
    ]
    return PathData(sub_paths=[sub], **style)


__all__ = [
    "Point",
    "Command",
    "SubPath",
    "PathData",
    "PathElement",
    "Bounds",
    "move_to",
    "line_to",
    "curve_to",
    "close_path",
    "compute_bounds",
    "compute_center",
    "polygon_path",
    "rect_path",
    "circle_path",
]
