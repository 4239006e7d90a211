"""
Assist Service - Explain / fix / refactor / generate tests for a selection
"""

from __future__ import annotations

import logging

from models.assist import AssistResult, AssistTask
from models.document import TextRange

from .diff_generator import DiffGenerator
from .errors import EmptySelectionError, MalformedResponseError
from .llm_service import LLMService
from .prompt_builder import TaskKind, build_assist_prompt
from .response_parser import extract_code
from .workspace import Workspace

logger = logging.getLogger(__name__)

_TASK_KINDS = {
    AssistTask.EXPLAIN: TaskKind.EXPLAIN,
    AssistTask.FIX: TaskKind.FIX,
    AssistTask.REFACTOR: TaskKind.REFACTOR,
    AssistTask.TESTS: TaskKind.TESTS,
}

_EMPTY_SELECTION_MESSAGES = {
    AssistTask.TESTS: "Select function to test!",
}


class AssistService:
    """Free-text code assistance on the current selection"""

    def __init__(self, workspace: Workspace, llm_service: LLMService, diff_generator: DiffGenerator | None = None):
        self.workspace = workspace
        self.llm_service = llm_service
        self.diff_generator = diff_generator or DiffGenerator()

    async def run(self, task: AssistTask, document_id: str, selection: TextRange) -> AssistResult:
        document = self.workspace.get(document_id)
        code = document.get_text(selection)
        if not code.strip():
            raise EmptySelectionError(_EMPTY_SELECTION_MESSAGES.get(task, "Select code first!"))
        self.llm_service.require_api_key()

        request = build_assist_prompt(_TASK_KINDS[task], code, document.language_id)
        reply = await self.llm_service.send(request.prompt, request.params)

        if task is AssistTask.EXPLAIN:
            return AssistResult(task=task, document_id=document_id, text=reply.strip(), language="markdown")

        code_reply = extract_code(reply)
        if not code_reply.strip():
            raise MalformedResponseError(f"Model returned no code for {task.value}")

        if task is AssistTask.TESTS:
            # Opened beside the source by the editor; the document is untouched
            return AssistResult(task=task, document_id=document_id, text=code_reply, language=document.language_id)

        # fix / refactor replace the selection
        before = self.workspace.get(document_id)
        updated = self.workspace.apply_edit(document_id, selection, code_reply)
        if updated is None:
            diff = self.diff_generator.preview_edit(before, selection, code_reply)
        else:
            diff = self.diff_generator.generate_diff(before, updated)
        logger.info("[AssistService] %s on %s (applied: %s)", task.value, document_id, diff.applied)
        return AssistResult(
            task=task,
            document_id=document_id,
            text=code_reply,
            language=document.language_id,
            diff=diff,
        )

    async def explain(self, document_id: str, selection: TextRange) -> AssistResult:
        return await self.run(AssistTask.EXPLAIN, document_id, selection)

    async def fix(self, document_id: str, selection: TextRange) -> AssistResult:
        return await self.run(AssistTask.FIX, document_id, selection)

    async def refactor(self, document_id: str, selection: TextRange) -> AssistResult:
        return await self.run(AssistTask.REFACTOR, document_id, selection)

    async def generate_tests(self, document_id: str, selection: TextRange) -> AssistResult:
        return await self.run(AssistTask.TESTS, document_id, selection)
