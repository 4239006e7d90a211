"""Models module - Pydantic data models"""

from .assist import AssistRequest, AssistResult, AssistTask
from .chat import (
    ChatHistoryResponse,
    ChatOutcome,
    ChatRequest,
    ChatRole,
    ChatState,
    CodeBlock,
    ConversationTurn,
    TranscriptEntry,
)
from .diff import DiffHunk, DiffResult
from .document import LineRange, TextDocument, TextRange
from .events import EventType, PresentationEvent
from .review import (
    Diagnostic,
    FixOutcome,
    ParseOutcome,
    ParseResult,
    RawIssue,
    ReviewKind,
    ReviewOutcome,
    Severity,
)

__all__ = [
    # Document models
    "LineRange",
    "TextDocument",
    "TextRange",
    # Review models
    "Diagnostic",
    "FixOutcome",
    "ParseOutcome",
    "ParseResult",
    "RawIssue",
    "ReviewKind",
    "ReviewOutcome",
    "Severity",
    # Assist models
    "AssistRequest",
    "AssistResult",
    "AssistTask",
    # Chat models
    "ChatHistoryResponse",
    "ChatOutcome",
    "ChatRequest",
    "ChatRole",
    "ChatState",
    "CodeBlock",
    "ConversationTurn",
    "TranscriptEntry",
    # Event models
    "EventType",
    "PresentationEvent",
    # Diff models
    "DiffHunk",
    "DiffResult",
]
