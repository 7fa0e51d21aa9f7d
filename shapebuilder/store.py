"""In-memory canvas store: elements, selection and the active tool."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

from .path_data import PathData, PathElement

logger = logging.getLogger(__name__)

SelectionListener = Callable[[], None]


class CanvasStore:
    """Element list plus selection state, the host side of the shape builder."""

    def __init__(self, elements: Optional[List[PathElement]] = None) -> None:
        self._items: Dict[str, PathElement] = {}
        self.selected_ids: List[str] = []
        self.active_tool = "select"
        self._listeners: List[SelectionListener] = []
        for element in elements or []:
            self._items[element.id] = element

    # --- elements ---

    @property
    def elements(self) -> List[PathElement]:
        return list(self._items.values())

    def get_element(self, element_id: str) -> Optional[PathElement]:
        return self._items.get(element_id)

    def add_element(self, data: PathData, element_type: str = "path") -> str:
        element_id = str(uuid4())
        self._items[element_id] = PathElement(id=element_id, data=data, type=element_type)
        logger.debug("Added element %s", element_id)
        return element_id

    def delete_element(self, element_id: str) -> None:
        if self._items.pop(element_id, None) is None:
            raise KeyError(element_id)
        if element_id in self.selected_ids:
            self.selected_ids = [i for i in self.selected_ids if i != element_id]
            self._notify()

    # --- selection ---

    def selected_path_elements(self) -> List[PathElement]:
        out = []
        for element_id in self.selected_ids:
            element = self._items.get(element_id)
            if element is not None and element.type == "path":
                out.append(element)
        return out

    def set_selection(self, ids: List[str]) -> None:
        missing = [i for i in ids if i not in self._items]
        if missing:
            raise KeyError(missing[0])
        self.selected_ids = list(dict.fromkeys(ids))
        self._notify()

    def select_element(self, element_id: str) -> None:
        self.set_selection([element_id])

    def clear_selection(self) -> None:
        self.selected_ids = []
        self._notify()

    def subscribe_selection(self, listener: SelectionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    # --- tools ---

    def set_active_tool(self, name: str) -> None:
        self.active_tool = name

    # --- serialization ---

    def to_dict(self) -> Dict[str, Any]:
        return {
            "elements": [element.to_dict() for element in self._items.values()],
            "selectedIds": list(self.selected_ids),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CanvasStore":
        elements = [PathElement.from_dict(item) for item in data.get("elements", [])]
        store = cls(elements)
        selected = data.get("selectedIds")
        if selected is None:
            selected = [e.id for e in elements if e.type == "path"]
        store.selected_ids = [i for i in selected if i in store._items]
        return store


__all__ = ["CanvasStore", "SelectionListener"]
