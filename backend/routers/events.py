"""Presentation event stream (SSE)"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sse_starlette.sse import EventSourceResponse

from services.container import ServiceContainer

from .deps import get_services

router = APIRouter()


@router.get("")
async def event_stream(request: Request, services: ServiceContainer = Depends(get_services)):
    """Stream diagnosticsUpdated / chat events to the editor, in order"""
    bus = services.events

    async def event_generator():
        queue = bus.subscribe()
        try:
            while True:
                if await request.is_disconnected():
                    break
                event = await queue.get()
                yield {"event": "message", "data": event.model_dump_json()}
        finally:
            bus.unsubscribe(queue)

    return EventSourceResponse(event_generator())
