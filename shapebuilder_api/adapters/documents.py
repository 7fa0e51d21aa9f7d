"""In-memory document store with hooks into the shape builder tool."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple
from uuid import uuid4

from shapebuilder.path_data import PathData
from shapebuilder.session import Mode
from shapebuilder.settings import ShapeBuilderSettings
from shapebuilder.store import CanvasStore
from shapebuilder.tools import ShapeBuilderTool

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Document:
    """Stored canvas document with metadata."""

    id: str
    name: str
    created_at: datetime
    updated_at: datetime
    canvas: CanvasStore = field(default_factory=CanvasStore)


class DocumentStore:
    """Simple store backing the document routes."""

    def __init__(self) -> None:
        self._items: Dict[str, Document] = {}

    def create(self, name: str) -> Document:
        doc_id = str(uuid4())
        now = _now()
        doc = Document(id=doc_id, name=name, created_at=now, updated_at=now)
        self._items[doc_id] = doc
        return doc

    def list(self) -> List[Document]:
        return list(self._items.values())

    def get(self, doc_id: str) -> Optional[Document]:
        return self._items.get(doc_id)

    def require(self, doc_id: str) -> Document:
        doc = self._items.get(doc_id)
        if doc is None:
            raise KeyError(doc_id)
        return doc

    def delete(self, doc_id: str) -> bool:
        return self._items.pop(doc_id, None) is not None

    def clear(self) -> None:
        self._items.clear()


_store = DocumentStore()
_settings = ShapeBuilderSettings.from_env()


def store() -> DocumentStore:
    return _store


def create_document(payload: Dict[str, Any]) -> Dict[str, Any]:
    doc = _store.create(name=payload.get("name", "Untitled"))
    return serialize_document(doc)


def list_documents() -> List[Dict[str, Any]]:
    return [serialize_document(doc) for doc in _store.list()]


def get_document(doc_id: str) -> Dict[str, Any]:
    return serialize_document(_store.require(doc_id))


def delete_document(doc_id: str) -> None:
    if not _store.delete(doc_id):
        raise KeyError(doc_id)


def add_element(doc_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    doc = _store.require(doc_id)
    data = PathData.from_dict(payload.get("data", {}))
    element_id = doc.canvas.add_element(data, payload.get("type", "path"))
    doc.updated_at = _now()
    return doc.canvas.get_element(element_id).to_dict()  # type: ignore[union-attr]


def set_selection(doc_id: str, ids: Sequence[str]) -> Dict[str, Any]:
    doc = _store.require(doc_id)
    unknown = [i for i in ids if doc.canvas.get_element(i) is None]
    if unknown:
        raise ValueError(f"Unknown element ids: {', '.join(unknown)}")
    doc.canvas.set_selection(list(ids))
    doc.updated_at = _now()
    return serialize_document(doc)


def compute_regions(doc_id: str) -> List[Dict[str, Any]]:
    doc = _store.require(doc_id)
    tool = ShapeBuilderTool(doc.canvas, _settings)
    return [region.to_dict() for region in tool.compute_regions()]


def commit(doc_id: str, mode: str, points: Sequence[Tuple[float, float]]) -> Dict[str, Any]:
    """Replay a drag over ``points`` and report what the shape builder did."""
    doc = _store.require(doc_id)
    if not points:
        raise ValueError("A gesture needs at least one point")
    if not ShapeBuilderTool.is_available(doc.canvas):
        raise ValueError("Select at least two path elements")

    tool = ShapeBuilderTool(doc.canvas, _settings)
    tool.set_mode(Mode(mode))
    tool.activate()
    committed = False
    if tool.session.regions:
        tool.pointer_down(tuple(points[0]))
        for point in points[1:]:
            tool.pointer_move(tuple(point))
        tool.pointer_up(tuple(points[-1]))
        committed = not tool.active
    if tool.active:
        tool.exit_tool()
    doc.updated_at = _now()
    logger.info("Document %s: %s gesture committed=%s", doc_id, mode, committed)
    return {
        "committed": committed,
        "element_id": tool.last_result,
        "document": serialize_document(doc),
    }


def serialize_document(doc: Document) -> Dict[str, Any]:
    canvas = doc.canvas.to_dict()
    return {
        "id": doc.id,
        "name": doc.name,
        "created_at": doc.created_at.isoformat(),
        "updated_at": doc.updated_at.isoformat(),
        "elements": canvas["elements"],
        "selected_ids": canvas["selectedIds"],
    }
