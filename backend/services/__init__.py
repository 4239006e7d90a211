"""Services module - Business logic layer"""

from .assist_service import AssistService
from .cancellation import CancellationToken
from .chat_session import ChatSession
from .config_manager import ConfigManager
from .diagnostic_store import DiagnosticStore, ReviewSession, map_severity
from .diff_generator import DiffGenerator
from .event_bus import EventBus
from .llm_service import LLMService
from .review_service import ReviewService
from .workspace import Workspace

__all__ = [
    "AssistService",
    "CancellationToken",
    "ChatSession",
    "ConfigManager",
    "DiagnosticStore",
    "DiffGenerator",
    "EventBus",
    "LLMService",
    "ReviewService",
    "ReviewSession",
    "Workspace",
    "map_severity",
]
