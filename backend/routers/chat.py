"""Chat mode API endpoints"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from models.chat import ChatHistoryResponse, ChatOutcome, ChatRequest
from services.container import ServiceContainer

from .deps import get_services

router = APIRouter()


@router.post("/message", response_model=ChatOutcome)
async def chat_message(request: ChatRequest, services: ServiceContainer = Depends(get_services)) -> ChatOutcome:
    """Send a chat message and wait for the whole reply.

    The reply (or error / cancellation) is also pushed on /api/events so the
    chat panel can render it incrementally.
    """
    workspace = services.workspace
    if request.document_id:
        document = workspace.get(request.document_id)
    else:
        document = workspace.active()

    return await services.chat_session.send(request.message, document, request.selection)


@router.post("/cancel")
async def cancel_stream(services: ServiceContainer = Depends(get_services)) -> dict:
    """Stop the outstanding chat request"""
    cancelled = services.chat_session.cancel()
    return {"status": "success", "cancelled": cancelled}


@router.post("/clear")
async def clear_chat(services: ServiceContainer = Depends(get_services)) -> dict:
    services.chat_session.clear()
    return {"status": "success", "message": "Chat cleared"}


@router.get("/history", response_model=ChatHistoryResponse)
async def chat_history(services: ServiceContainer = Depends(get_services)) -> ChatHistoryResponse:
    session = services.chat_session
    return ChatHistoryResponse(state=session.state, turns=session.turns, transcript=session.transcript)
