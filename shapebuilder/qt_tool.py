"""PySide6 wiring for the shape builder tool on a Qt canvas."""
from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import Qt

from .path_data import Point
from .settings import ShapeBuilderSettings
from .store import CanvasStore
from .tools import ShapeBuilderTool


class QtShapeBuilderTool(ShapeBuilderTool):
    """Feeds Qt mouse and key events into :class:`ShapeBuilderTool`.

    ``world_from_event`` maps a mouse event to canvas coordinates; the canvas
    owns that transform. Alt held on press switches the gesture to subtract.
    """

    def __init__(
        self,
        store: CanvasStore,
        world_from_event: Callable[[object], Point],
        settings: Optional[ShapeBuilderSettings] = None,
    ):
        super().__init__(store, settings)
        self.world_from_event = world_from_event

    def mouse_press(self, event):  # pragma: no cover - GUI entry point
        if event.button() != Qt.LeftButton:
            return
        alt = bool(event.modifiers() & Qt.AltModifier)
        self.pointer_down(self.world_from_event(event), alt)

    def mouse_move(self, event):  # pragma: no cover - GUI entry point
        self.pointer_move(self.world_from_event(event))

    def mouse_release(self, event):  # pragma: no cover - GUI entry point
        if event.button() != Qt.LeftButton:
            return
        self.pointer_up(self.world_from_event(event))

    def key_press(self, event):  # pragma: no cover - GUI entry point
        if event.key() == Qt.Key_Escape:
            self.exit_tool()


__all__ = ["QtShapeBuilderTool"]
