from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

from .adapters import documents as documents_adapter
from .routers import documents as documents_router

app = FastAPI(
    title="Shape Builder API",
    version="0.1.0",
    description="Region decomposition and merge/subtract commits over canvas documents",
)

app.include_router(documents_router.router)


@app.get("/")
async def index() -> Dict[str, Any]:
    return {
        "name": "shapebuilder-api",
        "version": app.version,
        "routes": [
            {"path": "/documents", "methods": ["GET", "POST"]},
            {"path": "/documents/{id}/regions", "methods": ["GET"]},
            {"path": "/documents/{id}/commit", "methods": ["POST"]},
        ],
        "document_count": len(documents_adapter.list_documents()),
    }
