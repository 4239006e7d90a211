"""Shared fixtures for copilot-reviewer backend tests."""

import pytest

from helpers import FakeLLMService
from models.document import TextDocument
from services.config_manager import ConfigManager
from services.diagnostic_store import DiagnosticStore
from services.event_bus import EventBus
from services.workspace import Workspace


@pytest.fixture
def fake_llm():
    return FakeLLMService()


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def workspace(event_bus):
    return Workspace(DiagnosticStore(event_bus))


@pytest.fixture
def sample_document():
    """Ten-line python document: line_0 = 0 ... line_9 = 9."""
    content = "\n".join(f"line_{i} = {i}" for i in range(10))
    return TextDocument(document_id="file:///proj/app.py", path="/proj/app.py", language_id="python", content=content)


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """Isolated config directory and a fresh ConfigManager singleton."""
    monkeypatch.setenv("COPILOT_REVIEWER_CONFIG_DIR", str(tmp_path))
    monkeypatch.setattr(ConfigManager, "_instance", None)
    return tmp_path
