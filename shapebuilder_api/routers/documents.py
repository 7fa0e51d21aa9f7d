from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Tuple

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from shapebuilder.errors import DocumentError

from ..adapters import documents as documents_adapter


class DocumentCreate(BaseModel):
    name: str = Field(default="Untitled", description="Document name")


class DocumentResponse(BaseModel):
    id: str
    name: str
    created_at: str
    updated_at: str
    elements: List[Dict[str, Any]]
    selected_ids: List[str]


class ElementCreate(BaseModel):
    type: str = Field(default="path", description="Element type; only paths take part in shape building")
    data: Dict[str, Any] = Field(..., description="Path data in canvas JSON form (subPaths + style)")


class SelectionUpdate(BaseModel):
    ids: List[str] = Field(default_factory=list, description="Element ids to select, in order")


class CommitRequest(BaseModel):
    mode: Literal["merge", "subtract"] = Field("merge", description="Shape builder operation")
    points: List[Tuple[float, float]] = Field(
        ..., min_length=1, description="Drag samples in canvas coordinates; the first one is the press."
    )


class CommitResponse(BaseModel):
    committed: bool
    element_id: Optional[str] = None
    document: DocumentResponse


router = APIRouter(prefix="/documents", tags=["documents"])


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")


@router.get("/", response_model=List[DocumentResponse])
async def list_documents() -> List[DocumentResponse]:
    return [DocumentResponse(**item) for item in documents_adapter.list_documents()]


@router.post("/", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def create_document(body: DocumentCreate) -> DocumentResponse:
    return DocumentResponse(**documents_adapter.create_document(body.model_dump()))


@router.get("/{doc_id}", response_model=DocumentResponse)
async def get_document(doc_id: str) -> DocumentResponse:
    try:
        data = documents_adapter.get_document(doc_id)
    except KeyError as exc:
        raise _not_found() from exc
    return DocumentResponse(**data)


@router.delete("/{doc_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(doc_id: str) -> None:
    try:
        documents_adapter.delete_document(doc_id)
    except KeyError as exc:
        raise _not_found() from exc


@router.post("/{doc_id}/elements", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def add_element(doc_id: str, body: ElementCreate) -> Dict[str, Any]:
    try:
        return documents_adapter.add_element(doc_id, body.model_dump())
    except KeyError as exc:
        raise _not_found() from exc
    except DocumentError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.put("/{doc_id}/selection", response_model=DocumentResponse)
async def set_selection(doc_id: str, body: SelectionUpdate) -> DocumentResponse:
    try:
        return DocumentResponse(**documents_adapter.set_selection(doc_id, body.ids))
    except KeyError as exc:
        raise _not_found() from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.get("/{doc_id}/regions", response_model=List[Dict[str, Any]])
async def get_regions(doc_id: str) -> List[Dict[str, Any]]:
    try:
        return documents_adapter.compute_regions(doc_id)
    except KeyError as exc:
        raise _not_found() from exc


@router.post("/{doc_id}/commit", response_model=CommitResponse)
async def commit(doc_id: str, body: CommitRequest) -> CommitResponse:
    try:
        result = documents_adapter.commit(doc_id, body.mode, body.points)
    except KeyError as exc:
        raise _not_found() from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return CommitResponse(
        committed=result["committed"],
        element_id=result["element_id"],
        document=DocumentResponse(**result["document"]),
    )
