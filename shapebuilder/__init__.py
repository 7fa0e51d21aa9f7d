"""Shape builder: split overlapping paths into regions, then merge or subtract them."""
from __future__ import annotations

from .commit import apply_merge_operation, apply_subtract_operation
from .errors import ConfigError, DocumentError, GeometryError, ShapeBuilderError
from .path_data import Bounds, Command, PathData, PathElement, circle_path, polygon_path, rect_path
from .regions import (
    PathWithId,
    Region,
    compute_regions_from_paths,
    find_region_at_point,
    find_regions_along_path,
    merge_regions,
)
from .session import Mode, ShapeBuilderSession
from .settings import DEFAULT_SETTINGS, ShapeBuilderSettings
from .store import CanvasStore
from .tools import KeyEvent, PointerEvent, ShapeBuilderTool

__version__ = "0.1.0"

__all__ = [
    "Bounds",
    "CanvasStore",
    "Command",
    "ConfigError",
    "DEFAULT_SETTINGS",
    "DocumentError",
    "GeometryError",
    "KeyEvent",
    "Mode",
    "PathData",
    "PathElement",
    "PathWithId",
    "PointerEvent",
    "Region",
    "ShapeBuilderError",
    "ShapeBuilderSession",
    "ShapeBuilderSettings",
    "ShapeBuilderTool",
    "apply_merge_operation",
    "apply_subtract_operation",
    "circle_path",
    "compute_regions_from_paths",
    "find_region_at_point",
    "find_regions_along_path",
    "merge_regions",
    "polygon_path",
    "rect_path",
]
