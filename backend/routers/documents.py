"""Document sync API endpoints (editor -> backend)"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from models.document import DocumentResponse, OpenDocumentRequest, TextDocument, UpdateDocumentRequest
from models.review import ReviewOutcome
from services.container import ServiceContainer

from .deps import get_services

router = APIRouter()


def _response(services: ServiceContainer, document: TextDocument) -> DocumentResponse:
    return DocumentResponse(
        document=document,
        line_count=document.line_count,
        active=services.workspace.is_active(document.document_id),
    )


@router.post("", response_model=DocumentResponse)
async def open_document(
    request: OpenDocumentRequest, services: ServiceContainer = Depends(get_services)
) -> DocumentResponse:
    """Open a document (or replace an open one's snapshot)"""
    document = TextDocument(
        document_id=request.document_id,
        path=request.path,
        language_id=request.language_id,
        content=request.content,
        version=request.version,
    )
    services.workspace.open(document, active=request.active)
    return _response(services, document)


@router.get("/{document_id:path}", response_model=DocumentResponse)
async def get_document(document_id: str, services: ServiceContainer = Depends(get_services)) -> DocumentResponse:
    return _response(services, services.workspace.get(document_id))


@router.put("/{document_id:path}", response_model=DocumentResponse)
async def update_document(
    document_id: str,
    request: UpdateDocumentRequest,
    services: ServiceContainer = Depends(get_services),
) -> DocumentResponse:
    """Replace a document's content after an edit in the editor"""
    document = services.workspace.update(document_id, request.content, request.version)
    return _response(services, document)


@router.post("/{document_id:path}/activate", response_model=DocumentResponse)
async def activate_document(
    document_id: str, services: ServiceContainer = Depends(get_services)
) -> DocumentResponse:
    return _response(services, services.workspace.activate(document_id))


@router.post("/{document_id:path}/save", response_model=ReviewOutcome | None)
async def save_document(
    document_id: str,
    request: UpdateDocumentRequest | None = None,
    services: ServiceContainer = Depends(get_services),
) -> ReviewOutcome | None:
    """Document saved in the editor; runs a full review when reviewOnSave is on"""
    if request is not None:
        document = services.workspace.update(document_id, request.content, request.version)
    else:
        document = services.workspace.get(document_id)

    services.reload_config()
    if not services.review_service.review_on_save:
        return None
    if document.language_id not in services.review_service.supported_languages():
        return None
    return await services.review_service.review_document(document_id)


@router.delete("/{document_id:path}")
async def close_document(document_id: str, services: ServiceContainer = Depends(get_services)) -> dict:
    """Close a document; its diagnostics are destroyed"""
    services.workspace.close(document_id)
    return {"status": "success", "message": f"Closed {document_id}"}
