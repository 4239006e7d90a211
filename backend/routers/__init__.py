"""Routers module - FastAPI route handlers"""

from . import assist, chat, config, documents, events, review

__all__ = ["assist", "chat", "config", "documents", "events", "review"]
