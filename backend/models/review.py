"""Review data models - raw issues, diagnostics and review commands"""

from __future__ import annotations

import uuid
from enum import Enum

from pydantic import BaseModel, Field

from .diff import DiffResult
from .document import LineRange, TextRange

DIAGNOSTIC_SOURCE = "AI Copilot"


class Severity(str, Enum):
    """Diagnostic severity as shown in the editor gutter"""

    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"


class ReviewKind(str, Enum):
    """Which review pass produced a diagnostic"""

    DOCUMENT = "document"
    SELECTION = "selection"
    QUICK = "quick"


class ParseOutcome(str, Enum):
    """How a model response was interpreted"""

    ISSUES = "issues"
    NO_ISSUES = "no_issues"  # a valid, empty array
    AMBIGUOUS = "ambiguous"  # no decodable issue array in the text


class RawIssue(BaseModel):
    """Issue as reported by the model, before validation"""

    line: int | None = None  # 1-based, relative to the excerpt
    message: str = ""
    severity: str | None = None


class ParseResult(BaseModel):
    """Issues extracted from one model response"""

    issues: list[RawIssue] = []
    outcome: ParseOutcome = ParseOutcome.AMBIGUOUS


class Diagnostic(BaseModel):
    """A positioned, severity-tagged finding attached to a document line"""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    range: LineRange
    message: str
    severity: Severity = Severity.WARNING
    source: str = DIAGNOSTIC_SOURCE
    origin_task: ReviewKind


class ReviewDocumentRequest(BaseModel):
    """Request to review a whole document"""

    document_id: str


class ReviewSelectionRequest(BaseModel):
    """Request to review a selection of a document"""

    document_id: str
    selection: TextRange


class ApplyFixRequest(BaseModel):
    """Request to fix a single diagnostic"""

    document_id: str
    diagnostic_id: str


class ReviewOutcome(BaseModel):
    """Result of one review pass"""

    document_id: str
    kind: ReviewKind
    parse_outcome: ParseOutcome
    found: int
    diagnostics: list[Diagnostic]
    message: str


class FixOutcome(BaseModel):
    """Result of applying an AI fix to one diagnostic"""

    document_id: str
    diagnostic_id: str
    applied: bool
    replacement: str
    diff: DiffResult | None = None
    message: str


class DiagnosticsResponse(BaseModel):
    """Current diagnostic set for a document"""

    document_id: str
    diagnostics: list[Diagnostic]
