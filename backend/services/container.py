"""
Service Container - Explicitly owned backend state, built once per app
"""

from __future__ import annotations

from dataclasses import dataclass

from .assist_service import AssistService
from .chat_session import DEFAULT_CONTEXT_TURNS, ChatSession
from .config_manager import ConfigManager
from .diagnostic_store import DiagnosticStore
from .diff_generator import DiffGenerator
from .event_bus import EventBus
from .llm_service import LLMService
from .review_service import ReviewService
from .workspace import Workspace


@dataclass
class ServiceContainer:
    config_manager: ConfigManager
    events: EventBus
    workspace: Workspace
    llm_service: LLMService
    review_service: ReviewService
    assist_service: AssistService
    chat_session: ChatSession

    def reload_config(self):
        """Push the current configuration into the long-lived services"""
        config = self.config_manager.get_config()
        self.llm_service.config = config
        self.review_service.config = config
        self.chat_session.context_turns = int(config.get("chat", {}).get("contextTurns", DEFAULT_CONTEXT_TURNS))


def build_container(config_manager: ConfigManager, llm_service: LLMService | None = None) -> ServiceContainer:
    config = config_manager.get_config()
    events = EventBus()
    workspace = Workspace(DiagnosticStore(events))
    llm_service = llm_service or LLMService(config, secret_provider=config_manager.get_secret)
    diff_generator = DiffGenerator()

    return ServiceContainer(
        config_manager=config_manager,
        events=events,
        workspace=workspace,
        llm_service=llm_service,
        review_service=ReviewService(workspace, llm_service, config, diff_generator),
        assist_service=AssistService(workspace, llm_service, diff_generator),
        chat_session=ChatSession(
            llm_service,
            events,
            context_turns=int(config.get("chat", {}).get("contextTurns", DEFAULT_CONTEXT_TURNS)),
        ),
    )
