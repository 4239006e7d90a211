"""Review API endpoints"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from models.review import (
    ApplyFixRequest,
    DiagnosticsResponse,
    FixOutcome,
    ReviewDocumentRequest,
    ReviewOutcome,
    ReviewSelectionRequest,
)
from services.container import ServiceContainer

from .deps import get_services

router = APIRouter()


@router.post("/document", response_model=ReviewOutcome)
async def review_document(
    request: ReviewDocumentRequest, services: ServiceContainer = Depends(get_services)
) -> ReviewOutcome:
    """Review a whole file; replaces its diagnostics"""
    return await services.review_service.review_document(request.document_id)


@router.post("/selection", response_model=ReviewOutcome)
async def review_selection(
    request: ReviewSelectionRequest, services: ServiceContainer = Depends(get_services)
) -> ReviewOutcome:
    """Review selected code; replaces the file's diagnostics"""
    return await services.review_service.review_selection(request.document_id, request.selection)


@router.post("/quick", response_model=ReviewOutcome)
async def quick_review_selection(
    request: ReviewSelectionRequest, services: ServiceContainer = Depends(get_services)
) -> ReviewOutcome:
    """Critical-issues-only review of selected code; appends diagnostics"""
    return await services.review_service.quick_review_selection(request.document_id, request.selection)


@router.post("/fix", response_model=FixOutcome)
async def apply_fix(request: ApplyFixRequest, services: ServiceContainer = Depends(get_services)) -> FixOutcome:
    """Apply an AI fix for one diagnostic"""
    return await services.review_service.apply_fix(request.document_id, request.diagnostic_id)


@router.get("/{document_id:path}/diagnostics", response_model=DiagnosticsResponse)
async def get_diagnostics(
    document_id: str, services: ServiceContainer = Depends(get_services)
) -> DiagnosticsResponse:
    return DiagnosticsResponse(
        document_id=document_id,
        diagnostics=services.workspace.diagnostics.get(document_id),
    )


@router.delete("/{document_id:path}/diagnostics")
async def clear_document_diagnostics(document_id: str, services: ServiceContainer = Depends(get_services)) -> dict:
    services.workspace.diagnostics.clear(document_id)
    return {"status": "success", "message": "Reviews cleared!"}


@router.delete("/diagnostics")
async def clear_diagnostics(services: ServiceContainer = Depends(get_services)) -> dict:
    """Clear every document's diagnostics"""
    services.workspace.diagnostics.clear()
    return {"status": "success", "message": "Reviews cleared!"}
