"""Presentation events emitted by the core"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from .chat import ConversationTurn
from .review import Diagnostic


class EventType(str, Enum):
    """Events the editor plugin listens for"""

    DIAGNOSTICS_UPDATED = "diagnosticsUpdated"
    CHAT_TURN_APPENDED = "chatTurnAppended"
    CHAT_ERROR = "chatError"
    CHAT_CANCELLED = "chatCancelled"
    CHAT_CLEARED = "chatCleared"


class PresentationEvent(BaseModel):
    """SSE payload pushed to the presentation layer"""

    type: EventType
    document_id: str | None = None
    diagnostics: list[Diagnostic] | None = None
    turn: ConversationTurn | None = None
    message: str | None = None
