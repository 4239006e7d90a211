"""
Workspace - Open editor documents as pushed by the plugin
"""

from __future__ import annotations

import logging

from models.document import TextDocument, TextRange

from .diagnostic_store import DiagnosticStore
from .errors import DocumentNotFoundError

logger = logging.getLogger(__name__)


class Workspace:
    """Open documents, the active document, and their diagnostic sets"""

    def __init__(self, diagnostics: DiagnosticStore):
        self.diagnostics = diagnostics
        self._documents: dict[str, TextDocument] = {}
        self.active_document_id: str | None = None

    def open(self, document: TextDocument, active: bool = True) -> TextDocument:
        existing = self._documents.get(document.document_id)
        self._documents[document.document_id] = document
        self.diagnostics.open(document.document_id)
        if existing is not None:
            # Re-opened with new text: keep diagnostics inside the new bounds
            self.diagnostics.revalidate(document)
        if active:
            self.active_document_id = document.document_id
        logger.info("[Workspace] Opened %s (%d lines)", document.document_id, document.line_count)
        return document

    def get(self, document_id: str) -> TextDocument:
        document = self._documents.get(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    def active(self) -> TextDocument | None:
        if self.active_document_id is None:
            return None
        return self._documents.get(self.active_document_id)

    def activate(self, document_id: str) -> TextDocument:
        document = self.get(document_id)
        self.active_document_id = document_id
        return document

    def is_active(self, document_id: str) -> bool:
        return self.active_document_id == document_id

    def update(self, document_id: str, content: str, version: int | None = None) -> TextDocument:
        document = self.get(document_id)
        new_version = version if version is not None else document.version + 1
        updated = document.model_copy(update={"content": content, "version": new_version})
        self._documents[document_id] = updated
        self.diagnostics.revalidate(updated)
        return updated

    def apply_edit(
        self,
        document_id: str,
        text_range: TextRange,
        new_text: str,
        resolved: str | None = None,
    ) -> TextDocument | None:
        """Replace `text_range` in the active document; None when not applied.

        `resolved` is the id of a diagnostic the edit fixes.
        """
        document = self.get(document_id)
        if not self.is_active(document_id):
            logger.info("[Workspace] Edit skipped: %s is not the active document", document_id)
            return None
        updated = document.with_edit(text_range, new_text)
        self._documents[document_id] = updated
        self.diagnostics.revalidate(updated, resolved=resolved)
        return updated

    def close(self, document_id: str):
        self._documents.pop(document_id, None)
        self.diagnostics.close(document_id)
        if self.active_document_id == document_id:
            self.active_document_id = None

    def document_ids(self) -> list[str]:
        return list(self._documents)
