"""Interactive shape builder tool: hover, drag-select regions, commit on release."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from .commit import apply_merge_operation, apply_subtract_operation
from .errors import GeometryError
from .path_data import Point
from .regions import PathWithId, Region, compute_regions_from_paths, find_region_at_point, find_regions_along_path
from .session import Mode, ShapeBuilderSession
from .settings import DEFAULT_SETTINGS, ShapeBuilderSettings
from .store import CanvasStore

logger = logging.getLogger(__name__)

POINTER_DOWN = "pointerdown"
POINTER_MOVE = "pointermove"
POINTER_UP = "pointerup"


@dataclass(frozen=True)
class PointerEvent:
    type: str
    point: Point
    alt_key: bool = False


@dataclass(frozen=True)
class KeyEvent:
    key: str


class ToolBase:
    """Common interface every tool implements."""

    def __init__(self, store: CanvasStore):
        self.store = store

    def mouse_press(self, event):
        pass

    def mouse_move(self, event):
        pass

    def mouse_release(self, event):
        pass

    def key_press(self, event):
        pass

    def deactivate(self):
        pass


class ShapeBuilderTool(ToolBase):
    """Merge or subtract the regions formed by the selected, overlapping paths.

    States are idle and dragging. A press seeds the drag with the region
    under the pointer, moves extend it with every region the drag crosses,
    and the release commits. After a commit the session is cleared and the
    store switches back to the selection tool.
    """

    name = "shapeBuilder"

    def __init__(self, store: CanvasStore, settings: Optional[ShapeBuilderSettings] = None):
        super().__init__(store)
        self.settings = settings or DEFAULT_SETTINGS
        self.preferred_mode = Mode.MERGE
        self.session = ShapeBuilderSession()
        self.last_result: Optional[str] = None
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._committing = False

    @staticmethod
    def is_available(store: CanvasStore) -> bool:
        """The tool needs at least two selected path elements."""
        return len(store.selected_path_elements()) >= 2

    @property
    def active(self) -> bool:
        return self._unsubscribe is not None

    def set_mode(self, mode: Mode | str) -> None:
        self.preferred_mode = Mode(mode)
        if not self.session.is_dragging:
            self.session.mode = self.preferred_mode

    # --- lifecycle ---

    def activate(self) -> None:
        self.store.set_active_tool(self.name)
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe_selection(self.on_selection_changed)
        self.reset_session()
        self.compute_regions()

    def deactivate(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.reset_session()

    def exit_tool(self) -> None:
        self.deactivate()
        self.store.set_active_tool(self.settings.exit_tool)

    def reset_session(self) -> None:
        self.session.reset()
        self.session.mode = self.preferred_mode

    def on_selection_changed(self) -> None:
        if self._committing or not self.active:
            return
        self.reset_session()
        self.compute_regions()

    def compute_regions(self) -> List[Region]:
        elements = self.store.selected_path_elements()
        if len(elements) < 2:
            self.session.regions = []
        else:
            paths = [PathWithId(path_data=e.data, element_id=e.id) for e in elements]
            self.session.regions = compute_regions_from_paths(paths, self.settings)
        logger.debug("Shape builder found %d regions", len(self.session.regions))
        return self.session.regions

    # --- events ---

    def handle(self, event: PointerEvent) -> None:
        if event.type == POINTER_DOWN:
            self.pointer_down(event.point, event.alt_key)
        elif event.type == POINTER_MOVE:
            self.pointer_move(event.point)
        elif event.type == POINTER_UP:
            self.pointer_up(event.point)

    def mouse_press(self, event: PointerEvent) -> None:
        self.pointer_down(event.point, event.alt_key)

    def mouse_move(self, event: PointerEvent) -> None:
        self.pointer_move(event.point)

    def mouse_release(self, event: PointerEvent) -> None:
        self.pointer_up(event.point)

    def key_press(self, event: KeyEvent) -> None:
        if event.key == "Escape":
            self.exit_tool()

    def pointer_down(self, point: Point, subtract_modifier: bool = False) -> None:
        session = self.session
        if not session.regions:
            self.compute_regions()
            return
        region = find_region_at_point(point, session.regions)
        subtracting = subtract_modifier or self.preferred_mode is Mode.SUBTRACT
        session.mode = Mode.SUBTRACT if subtracting else Mode.MERGE
        session.is_dragging = True
        session.drag_start_point = point
        session.drag_path = [point]
        session.selected_region_ids = [region.id] if region is not None else []

    def pointer_move(self, point: Point) -> None:
        session = self.session
        region = find_region_at_point(point, session.regions)
        if session.is_dragging:
            session.drag_path = session.drag_path + [point]
            touched = find_regions_along_path(session.drag_path, session.regions)
            session.selected_region_ids = [r.id for r in touched]
        session.hovered_region_id = region.id if region is not None else None

    def pointer_up(self, point: Optional[Point] = None) -> None:
        session = self.session
        if not session.is_dragging:
            return
        if not session.selected_region_ids:
            session.clear_drag()
            return
        self.commit()

    def commit(self) -> Optional[str]:
        """Apply the drag selection in the session mode, then leave the tool."""
        session = self.session
        regions = list(session.regions)
        region_ids = list(session.selected_region_ids)
        operation = apply_subtract_operation if session.mode is Mode.SUBTRACT else apply_merge_operation
        self._committing = True
        try:
            new_id = operation(self.store, regions, region_ids, self.settings)
        except GeometryError:
            # store is untouched; drop the gesture, keep the regions
            session.clear_drag()
            raise
        finally:
            self._committing = False
        self.last_result = new_id
        self.reset_session()
        self.exit_tool()
        return new_id


__all__ = [
    "POINTER_DOWN",
    "POINTER_MOVE",
    "POINTER_UP",
    "PointerEvent",
    "KeyEvent",
    "ToolBase",
    "ShapeBuilderTool",
]
