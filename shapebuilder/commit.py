"""Merge and subtract commits: turn selected regions into a replacement element."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from .path_data import PathData, PathElement
from .regions import Region, merge_regions
from .settings import DEFAULT_SETTINGS, ShapeBuilderSettings
from .store import CanvasStore

logger = logging.getLogger(__name__)


def style_from_source(element: Optional[PathElement], settings: ShapeBuilderSettings = DEFAULT_SETTINGS) -> Dict[str, object]:
    """Stroke and fill of ``element``, with settings defaults for missing fields."""
    data = element.data if element is not None else None

    def pick(name: str):
        value = getattr(data, name, None) if data is not None else None
        return getattr(settings, name) if value is None else value

    return {
        "stroke_width": pick("stroke_width"),
        "stroke_color": pick("stroke_color"),
        "stroke_opacity": pick("stroke_opacity"),
        "fill_color": pick("fill_color"),
        "fill_opacity": pick("fill_opacity"),
    }


def _source_ids(regions: Sequence[Region]) -> List[str]:
    ids: Dict[str, None] = {}
    for region in regions:
        for element_id in region.source_element_ids:
            ids[element_id] = None
    return list(ids)


def _styled(path_data: PathData, style: Dict[str, object]) -> PathData:
    return replace(path_data, sub_paths=[list(sub) for sub in path_data.sub_paths], **style)


def _delete_all(store: CanvasStore, ids: Sequence[str]) -> None:
    for element_id in ids:
        if store.get_element(element_id) is None:
            logger.debug("Source %s already gone", element_id)
            continue
        store.delete_element(element_id)


def apply_merge_operation(
    store: CanvasStore,
    regions: Sequence[Region],
    region_ids: Sequence[str],
    settings: Optional[ShapeBuilderSettings] = None,
) -> Optional[str]:
    """Fuse the selected regions into one element and delete their sources."""
    settings = settings or DEFAULT_SETTINGS
    wanted = set(region_ids)
    selected = [r for r in regions if r.id in wanted]
    if not selected:
        return None

    source_ids = _source_ids(selected)
    merged = merge_regions(selected, settings)
    if merged is None:
        return None

    style = style_from_source(store.get_element(source_ids[0]), settings)
    new_id = store.add_element(_styled(merged, style))
    _delete_all(store, source_ids)
    store.select_element(new_id)
    logger.info("Merged %d regions from %d sources into %s", len(selected), len(source_ids), new_id)
    return new_id


def apply_subtract_operation(
    store: CanvasStore,
    regions: Sequence[Region],
    region_ids: Sequence[str],
    settings: Optional[ShapeBuilderSettings] = None,
) -> Optional[str]:
    """Carve the selected regions away and rebuild the rest as one element."""
    settings = settings or DEFAULT_SETTINGS
    wanted = set(region_ids)
    removed = [r for r in regions if r.id in wanted]
    if not removed:
        return None

    remaining = [r for r in regions if r.id not in wanted]
    source_ids = _source_ids(regions)
    # style must be read before the sources are deleted
    style = style_from_source(store.get_element(source_ids[0]) if source_ids else None, settings)

    if not remaining:
        _delete_all(store, source_ids)
        store.clear_selection()
        logger.info("Subtracted every region; %d sources removed", len(source_ids))
        return None

    # sources stay in place if the merge raises
    merged = merge_regions(remaining, settings)
    if merged is None:
        return None
    _delete_all(store, source_ids)
    new_id = store.add_element(_styled(merged, style))
    store.select_element(new_id)
    logger.info("Subtracted %d regions; %d remaining merged into %s", len(removed), len(remaining), new_id)
    return new_id


__all__ = ["style_from_source", "apply_merge_operation", "apply_subtract_operation"]
