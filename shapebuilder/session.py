"""Ephemeral state of one shape builder session."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .path_data import Point
from .regions import Region


class Mode(str, Enum):
    MERGE = "merge"
    SUBTRACT = "subtract"


@dataclass
class ShapeBuilderSession:
    mode: Mode = Mode.MERGE
    regions: List[Region] = field(default_factory=list)
    hovered_region_id: Optional[str] = None
    selected_region_ids: List[str] = field(default_factory=list)
    is_dragging: bool = False
    drag_start_point: Optional[Point] = None
    drag_path: List[Point] = field(default_factory=list)

    def reset(self) -> None:
        """Forget regions, hover, selection and any drag in progress."""
        self.regions = []
        self.hovered_region_id = None
        self.clear_drag()

    def clear_drag(self) -> None:
        self.selected_region_ids = []
        self.is_dragging = False
        self.drag_start_point = None
        self.drag_path = []


__all__ = ["Mode", "ShapeBuilderSession"]
