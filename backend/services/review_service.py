"""
Review Service - Review commands: prompt -> gateway -> parser -> mapper -> store
"""

from __future__ import annotations

import logging
from typing import Any

from models.document import TextRange
from models.review import (
    FixOutcome,
    ReviewKind,
    ReviewOutcome,
)

from .config_manager import DEFAULT_SUPPORTED_LANGUAGES
from .diagnostic_store import build_diagnostics
from .diff_generator import DiffGenerator
from .errors import DiagnosticNotFoundError, EmptySelectionError, MalformedResponseError, UnsupportedLanguageError
from .llm_service import LLMService
from .prompt_builder import (
    build_fix_diagnostic_prompt,
    build_quick_review_prompt,
    build_review_prompt,
)
from .response_parser import (
    DEFAULT_LOW_VALUE_KEYWORDS,
    DEFAULT_MIN_MESSAGE_LENGTH,
    extract_code,
    filter_low_value,
    parse_issues,
)
from .workspace import Workspace

logger = logging.getLogger(__name__)


class ReviewService:
    """Runs review passes and AI fixes against workspace documents"""

    def __init__(
        self,
        workspace: Workspace,
        llm_service: LLMService,
        config: dict[str, Any] | None = None,
        diff_generator: DiffGenerator | None = None,
    ):
        self.workspace = workspace
        self.llm_service = llm_service
        self.config = config or {}
        self.diff_generator = diff_generator or DiffGenerator()

    # ========== Config Helpers ==========

    def _review_config(self) -> dict[str, Any]:
        return self.config.get("review", {})

    def supported_languages(self) -> list[str]:
        return self._review_config().get("supportedLanguages", DEFAULT_SUPPORTED_LANGUAGES)

    def _quick_filter_settings(self) -> tuple[int, list[str]]:
        quick = self._review_config().get("quickReview", {})
        return (
            quick.get("minMessageLength", DEFAULT_MIN_MESSAGE_LENGTH),
            quick.get("lowValueKeywords", list(DEFAULT_LOW_VALUE_KEYWORDS)),
        )

    @property
    def review_on_save(self) -> bool:
        return bool(self._review_config().get("reviewOnSave", False))

    # ========== Review Passes ==========

    async def review_document(self, document_id: str) -> ReviewOutcome:
        """Review the whole document; replaces its diagnostic set"""
        document = self.workspace.get(document_id)
        if document.language_id not in self.supported_languages():
            raise UnsupportedLanguageError(document.language_id)
        code = document.get_text()
        if not code.strip():
            raise EmptySelectionError("Document is empty!")
        return await self._run_review(document_id, code, 0, ReviewKind.DOCUMENT)

    async def review_selection(self, document_id: str, selection: TextRange) -> ReviewOutcome:
        """Review a selection; replaces the document's diagnostic set"""
        document = self.workspace.get(document_id)
        code = document.get_text(selection)
        if not code.strip():
            raise EmptySelectionError()
        return await self._run_review(document_id, code, selection.start_line, ReviewKind.SELECTION)

    async def quick_review_selection(self, document_id: str, selection: TextRange) -> ReviewOutcome:
        """Strict review of a selection; appends to the document's diagnostic set"""
        document = self.workspace.get(document_id)
        code = document.get_text(selection)
        if not code.strip():
            raise EmptySelectionError()
        return await self._run_review(document_id, code, selection.start_line, ReviewKind.QUICK)

    async def _run_review(self, document_id: str, code: str, excerpt_start: int, kind: ReviewKind) -> ReviewOutcome:
        document = self.workspace.get(document_id)
        self.llm_service.require_api_key()

        if kind is ReviewKind.QUICK:
            request = build_quick_review_prompt(code, document.language_id)
        else:
            request = build_review_prompt(code, document.language_id)

        reply = await self.llm_service.send(request.prompt, request.params)
        parsed = parse_issues(reply)
        issues = parsed.issues
        if kind is ReviewKind.QUICK:
            min_length, keywords = self._quick_filter_settings()
            issues = filter_low_value(issues, min_length=min_length, keywords=keywords)

        # The document may have changed while the request was outstanding
        document = self.workspace.get(document_id)
        diagnostics = build_diagnostics(issues, document, excerpt_start, kind)

        store = self.workspace.diagnostics
        if kind is ReviewKind.QUICK:
            if diagnostics:
                store.append(document_id, diagnostics)
            message = (
                f"Found {len(diagnostics)} critical issue(s)" if diagnostics else "No critical issues found!"
            )
        else:
            store.replace(document_id, diagnostics)
            message = f"Found {len(diagnostics)} issue(s)" if diagnostics else "No issues found!"

        logger.info("[ReviewService] %s review of %s: %s", kind.value, document_id, message)
        return ReviewOutcome(
            document_id=document_id,
            kind=kind,
            parse_outcome=parsed.outcome,
            found=len(diagnostics),
            diagnostics=diagnostics,
            message=message,
        )

    # ========== Fixes ==========

    async def apply_fix(self, document_id: str, diagnostic_id: str) -> FixOutcome:
        """Ask for a fixed line and apply it; removes the diagnostic once applied"""
        document = self.workspace.get(document_id)
        store = self.workspace.diagnostics
        diagnostic = store.find(document_id, diagnostic_id)
        if diagnostic is None:
            raise DiagnosticNotFoundError(diagnostic_id)
        self.llm_service.require_api_key()

        request = build_fix_diagnostic_prompt(document, diagnostic.range.line, diagnostic.message)
        reply = await self.llm_service.send(request.prompt, request.params)
        replacement = extract_code(reply)
        if not replacement.strip():
            raise MalformedResponseError("Model returned an empty fix")

        # Re-read: the fix targets the diagnostic as it is now
        document = self.workspace.get(document_id)
        diagnostic = store.find(document_id, diagnostic_id)
        if diagnostic is None:
            raise DiagnosticNotFoundError(diagnostic_id)

        edit_range = diagnostic.range.to_text_range()
        updated = self.workspace.apply_edit(document_id, edit_range, replacement, resolved=diagnostic_id)
        if updated is None:
            return FixOutcome(
                document_id=document_id,
                diagnostic_id=diagnostic_id,
                applied=False,
                replacement=replacement,
                diff=self.diff_generator.preview_edit(document, edit_range, replacement),
                message="Fix not applied: document is not active",
            )

        logger.info("[ReviewService] Applied fix for %s on line %d", diagnostic_id, diagnostic.range.line)
        return FixOutcome(
            document_id=document_id,
            diagnostic_id=diagnostic_id,
            applied=True,
            replacement=replacement,
            diff=self.diff_generator.generate_diff(document, updated),
            message="AI fix applied!",
        )
