"""Chat mode data models"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from .document import TextRange


class ChatRole(str, Enum):
    """Author of a conversation turn"""

    USER = "user"
    ASSISTANT = "assistant"


class ChatState(str, Enum):
    """Conversation session state machine"""

    IDLE = "idle"
    SENDING = "sending"
    RECEIVING = "receiving"
    CANCELLED = "cancelled"
    ERRORED = "errored"


class ConversationTurn(BaseModel):
    """One message in the conversation history"""

    role: ChatRole
    content: str


class TranscriptEntry(BaseModel):
    """Something shown in the chat panel: a turn or a notice"""

    kind: str  # "turn", "notice", "error"
    content: str
    role: ChatRole | None = None


class CodeBlock(BaseModel):
    """Extracted code block from response"""

    language: str
    code: str
    file_hint: str | None = None  # Suggested filename


class ChatRequest(BaseModel):
    """Request for chat message"""

    message: str
    document_id: str | None = None  # Defaults to the active document
    selection: TextRange | None = None


class ChatOutcome(BaseModel):
    """Result of one chat send"""

    status: str  # "completed", "cancelled", "error"
    turn: ConversationTurn | None = None
    code_blocks: list[CodeBlock] = []
    error: str | None = None
    notice: str | None = None


class ChatHistoryResponse(BaseModel):
    """Conversation state for the chat panel"""

    state: ChatState
    turns: list[ConversationTurn]
    transcript: list[TranscriptEntry]
