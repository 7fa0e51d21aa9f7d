"""Region decomposition and region algebra for the shape builder.

``compute_regions_from_paths`` splits a set of overlapping closed paths into
the non-overlapping regions they induce. Each region remembers which source
elements cover it, so merge/subtract commits know what to delete.

The decomposition keeps a working list of cells. Every new path splits each
existing cell into the part it covers (gaining the new id) and the part it
leaves alone (keeping its ids); whatever of the new path is left over
becomes a cell of its own. That costs O(n^2) boolean operations for n paths,
fine for interactive selections.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence
from uuid import uuid4

from shapely.geometry.base import BaseGeometry

from . import boolean2d
from .errors import DocumentError, GeometryError
from .path_data import Bounds, PathData, Point, compute_bounds, compute_center
from .settings import DEFAULT_SETTINGS, ShapeBuilderSettings

logger = logging.getLogger(__name__)


@dataclass
class PathWithId:
    path_data: PathData
    element_id: str


@dataclass
class Region:
    """One decomposed area and the source elements that cover it."""

    id: str
    path_data: PathData
    bounds: Bounds
    center: Point
    source_element_ids: List[str]
    _item: Optional[BaseGeometry] = field(default=None, repr=False, compare=False)

    def path_item(self, samples: Optional[int] = None) -> BaseGeometry:
        if self._item is None:
            self._item = boolean2d.to_path_item(self.path_data, samples)
        return self._item

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "pathData": self.path_data.to_dict(),
            "bounds": self.bounds.to_dict(),
            "center": {"x": self.center[0], "y": self.center[1]},
            "sourceElementIds": list(self.source_element_ids),
        }


@dataclass
class _Cell:
    item: BaseGeometry
    source_ids: Dict[str, None]


def generate_region_id() -> str:
    return f"region-{int(time.time() * 1000)}-{uuid4().hex[:9]}"


def _valid_parts(item: Optional[BaseGeometry], settings: ShapeBuilderSettings) -> List[BaseGeometry]:
    return [p for p in boolean2d.extract_simple_contours(item) if boolean2d.is_valid_item(p, settings)]


def _run_boolean_op(
    label: str,
    operation: Callable[[], Optional[BaseGeometry]],
    settings: ShapeBuilderSettings,
) -> List[BaseGeometry]:
    try:
        result = operation()
    except GeometryError as exc:
        logger.warning("Error during boolean operation (%s): %s", label, exc)
        return []
    return _valid_parts(result, settings)


def compute_regions_from_paths(
    paths: Sequence[PathWithId],
    settings: Optional[ShapeBuilderSettings] = None,
) -> List[Region]:
    """Decompose overlapping paths into non-overlapping regions.

    Returns ``[]`` for fewer than two paths, and also when no two inputs
    overlap (there is nothing to build).
    """
    settings = settings or DEFAULT_SETTINGS
    if len(paths) < 2:
        return []

    cells: List[_Cell] = []
    for entry in paths:
        try:
            new_item = boolean2d.to_path_item(entry.path_data, settings.curve_samples)
        except (GeometryError, DocumentError) as exc:
            logger.warning("Skipping path %s: %s", entry.element_id, exc)
            continue
        base_parts = _valid_parts(new_item, settings)
        if not base_parts:
            logger.debug("Path %s has no usable area, skipped", entry.element_id)
            continue
        combined = boolean2d.combine(base_parts)

        next_cells: List[_Cell] = []
        for cell in cells:
            inside = _run_boolean_op(
                "intersect", lambda: boolean2d.intersect(cell.item, combined), settings
            )
            for part in inside:
                ids = dict(cell.source_ids)
                ids[entry.element_id] = None
                next_cells.append(_Cell(part, ids))
            outside = _run_boolean_op(
                "subtract", lambda: boolean2d.subtract(cell.item, combined), settings
            )
            for part in outside:
                next_cells.append(_Cell(part, dict(cell.source_ids)))

        if cells:
            covered = [cell.item for cell in cells]
            exclusive = _run_boolean_op(
                "subtract",
                lambda: boolean2d.subtract(combined, boolean2d.combine(covered)),
                settings,
            )
        else:
            exclusive = base_parts
        for part in exclusive:
            next_cells.append(_Cell(part, {entry.element_id: None}))

        cells = [cell for cell in next_cells if boolean2d.is_valid_item(cell.item, settings)]
        logger.debug("After %s: %d cells", entry.element_id, len(cells))

    if not any(len(cell.source_ids) > 1 for cell in cells):
        logger.debug("No overlapping paths, no regions")
        return []

    regions: List[Region] = []
    for cell in cells:
        path_data = boolean2d.from_path_item(cell.item)
        box = compute_bounds(path_data)
        regions.append(
            Region(
                id=generate_region_id(),
                path_data=path_data,
                bounds=box,
                center=compute_center(box),
                source_element_ids=list(cell.source_ids),
                _item=cell.item,
            )
        )
    return regions


def merge_regions(regions: Sequence[Region], settings: Optional[ShapeBuilderSettings] = None) -> Optional[PathData]:
    """Union the regions' path data in order; ``None`` when there is nothing to merge."""
    if not regions:
        return None
    if len(regions) == 1:
        return regions[0].path_data
    samples = (settings or DEFAULT_SETTINGS).curve_samples
    result = regions[0].path_item(samples)
    for region in regions[1:]:
        united = boolean2d.unite(result, region.path_item(samples))
        if united is None:
            logger.debug("Union with region %s came back empty, keeping previous result", region.id)
            continue
        result = united
    return boolean2d.from_path_item(result)


def is_point_in_region(point: Point, region: Region) -> bool:
    if not region.bounds.contains_point(point):
        return False
    return boolean2d.contains(region.path_item(), point)


def find_region_at_point(point: Point, regions: Iterable[Region]) -> Optional[Region]:
    for region in regions:
        if is_point_in_region(point, region):
            return region
    return None


def find_regions_along_path(drag_path: Sequence[Point], regions: Sequence[Region]) -> List[Region]:
    """Every region touched by at least one drag sample, in first-touch order."""
    touched: Dict[str, Region] = {}
    for point in drag_path:
        for region in regions:
            if region.id not in touched and is_point_in_region(point, region):
                touched[region.id] = region
    return list(touched.values())


__all__ = [
    "PathWithId",
    "Region",
    "generate_region_id",
    "compute_regions_from_paths",
    "merge_regions",
    "is_point_in_region",
    "find_region_at_point",
    "find_regions_along_path",
]
