"""
Diagnostic Store - Per-document diagnostic sets and their reconciliation

A full review replaces a document's set, a quick review appends to it, and
an applied fix removes exactly the diagnostic it fixed. Every write is a
single set-update followed by one diagnosticsUpdated event.
"""

from __future__ import annotations

import logging

from models.document import TextDocument
from models.events import EventType, PresentationEvent
from models.review import Diagnostic, RawIssue, ReviewKind, Severity

from .coordinate_mapper import map_issue, resolve_line
from .event_bus import EventBus

logger = logging.getLogger(__name__)

_SEVERITY_MAP = {
    "error": Severity.ERROR,
    "info": Severity.INFORMATION,
}


def map_severity(raw: str | None) -> Severity:
    """error -> ERROR, info -> INFORMATION, anything else -> WARNING"""
    if not isinstance(raw, str):
        return Severity.WARNING
    return _SEVERITY_MAP.get(raw.strip().lower(), Severity.WARNING)


def build_diagnostics(
    issues: list[RawIssue],
    document: TextDocument,
    excerpt_start: int,
    origin: ReviewKind,
) -> list[Diagnostic]:
    """Resolve raw issues against `document`, in the order they were reported"""
    return [
        Diagnostic(
            range=map_issue(issue, document, excerpt_start),
            message=issue.message,
            severity=map_severity(issue.severity),
            origin_task=origin,
        )
        for issue in issues
    ]


class ReviewSession:
    """Diagnostic set of one open document"""

    def __init__(self, document_id: str):
        self.document_id = document_id
        self.diagnostics: list[Diagnostic] = []

    def index_of(self, diagnostic_id: str) -> int | None:
        for index, diagnostic in enumerate(self.diagnostics):
            if diagnostic.id == diagnostic_id:
                return index
        return None


class DiagnosticStore:
    """Owns the document diagnostic sets; the only writer of diagnostics"""

    def __init__(self, events: EventBus | None = None):
        self._events = events
        self._sessions: dict[str, ReviewSession] = {}

    # ========== Lifecycle ==========

    def open(self, document_id: str) -> ReviewSession:
        session = self._sessions.get(document_id)
        if session is None:
            session = ReviewSession(document_id)
            self._sessions[document_id] = session
        return session

    def close(self, document_id: str):
        """Destroy a document's diagnostics (document closed)"""
        session = self._sessions.pop(document_id, None)
        if session is not None and session.diagnostics:
            self._publish(document_id, [])

    def is_open(self, document_id: str) -> bool:
        return document_id in self._sessions

    # ========== Reads ==========

    def get(self, document_id: str) -> list[Diagnostic]:
        session = self._sessions.get(document_id)
        return list(session.diagnostics) if session else []

    def find(self, document_id: str, diagnostic_id: str) -> Diagnostic | None:
        session = self._sessions.get(document_id)
        if session is None:
            return None
        index = session.index_of(diagnostic_id)
        return session.diagnostics[index] if index is not None else None

    # ========== Writes ==========

    def replace(self, document_id: str, diagnostics: list[Diagnostic]) -> list[Diagnostic]:
        """Full review: the new list is authoritative"""
        session = self.open(document_id)
        session.diagnostics = list(diagnostics)
        logger.info("[DiagnosticStore] %s: replaced with %d diagnostic(s)", document_id, len(diagnostics))
        return self._publish(document_id, session.diagnostics)

    def append(self, document_id: str, diagnostics: list[Diagnostic]) -> list[Diagnostic]:
        """Quick review: keep earlier findings, no deduplication"""
        session = self.open(document_id)
        session.diagnostics = session.diagnostics + list(diagnostics)
        logger.info(
            "[DiagnosticStore] %s: appended %d diagnostic(s), %d total",
            document_id,
            len(diagnostics),
            len(session.diagnostics),
        )
        return self._publish(document_id, session.diagnostics)

    def remove(self, document_id: str, diagnostic_id: str) -> bool:
        """Remove one diagnostic instance by id"""
        session = self._sessions.get(document_id)
        if session is None:
            return False
        index = session.index_of(diagnostic_id)
        if index is None:
            return False
        session.diagnostics = session.diagnostics[:index] + session.diagnostics[index + 1 :]
        self._publish(document_id, session.diagnostics)
        return True

    def clear(self, document_id: str | None = None):
        """Clear one document's diagnostics, or every document's"""
        targets = [document_id] if document_id is not None else list(self._sessions)
        for target in targets:
            session = self._sessions.get(target)
            if session is None:
                continue
            session.diagnostics = []
            self._publish(target, [])

    def revalidate(self, document: TextDocument, resolved: str | None = None) -> list[Diagnostic]:
        """Re-clamp diagnostics after the document's text changed.

        `resolved` names a diagnostic fixed by this edit; it is dropped in the
        same update.
        """
        session = self._sessions.get(document.document_id)
        if session is None or not session.diagnostics:
            return []
        updated = []
        for diagnostic in session.diagnostics:
            if diagnostic.id == resolved:
                continue
            line = resolve_line(diagnostic.range.line + 1, 0, document.line_count)
            updated.append(diagnostic.model_copy(update={"range": document.line_at(line)}))
        session.diagnostics = updated
        return self._publish(document.document_id, session.diagnostics)

    def _publish(self, document_id: str, diagnostics: list[Diagnostic]) -> list[Diagnostic]:
        snapshot = list(diagnostics)
        if self._events is not None:
            self._events.publish(
                PresentationEvent(
                    type=EventType.DIAGNOSTICS_UPDATED,
                    document_id=document_id,
                    diagnostics=snapshot,
                )
            )
        return snapshot
