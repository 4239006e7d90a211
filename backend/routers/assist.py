"""Code assistance API endpoints (explain / fix / refactor / tests)"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from models.assist import AssistRequest, AssistResult, AssistTask
from services.container import ServiceContainer

from .deps import get_services

router = APIRouter()


@router.post("/explain", response_model=AssistResult)
async def explain_code(request: AssistRequest, services: ServiceContainer = Depends(get_services)) -> AssistResult:
    """Explain the selected code"""
    return await services.assist_service.run(AssistTask.EXPLAIN, request.document_id, request.selection)


@router.post("/fix", response_model=AssistResult)
async def fix_code(request: AssistRequest, services: ServiceContainer = Depends(get_services)) -> AssistResult:
    """Fix bugs in the selection and replace it"""
    return await services.assist_service.run(AssistTask.FIX, request.document_id, request.selection)


@router.post("/refactor", response_model=AssistResult)
async def refactor_code(request: AssistRequest, services: ServiceContainer = Depends(get_services)) -> AssistResult:
    """Refactor the selection and replace it"""
    return await services.assist_service.run(AssistTask.REFACTOR, request.document_id, request.selection)


@router.post("/tests", response_model=AssistResult)
async def generate_tests(request: AssistRequest, services: ServiceContainer = Depends(get_services)) -> AssistResult:
    """Generate unit tests for the selection"""
    return await services.assist_service.run(AssistTask.TESTS, request.document_id, request.selection)
