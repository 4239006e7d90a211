"""Code assistance data models (explain / fix / refactor / tests)"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from .diff import DiffResult
from .document import TextRange


class AssistTask(str, Enum):
    """Free-text tasks run on a selection"""

    EXPLAIN = "explain"
    FIX = "fix"
    REFACTOR = "refactor"
    TESTS = "tests"


class AssistRequest(BaseModel):
    """Request to run an assist task on a selection"""

    document_id: str
    selection: TextRange


class AssistResult(BaseModel):
    """Model output for an assist task"""

    task: AssistTask
    document_id: str
    text: str
    language: str
    diff: DiffResult | None = None
