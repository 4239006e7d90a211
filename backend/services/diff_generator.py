"""
Diff Generator Service - Describe AI edits (fixes, refactors) as unified diffs
"""

from __future__ import annotations

from difflib import SequenceMatcher, unified_diff

from models.diff import DiffHunk, DiffResult
from models.document import TextDocument, TextRange


class DiffGenerator:
    """Generate unified diffs for AI edits to open documents"""

    def generate_diff(self, before: TextDocument, after: TextDocument, applied: bool = True) -> DiffResult:
        """Structured diff between two versions of one document"""
        original_lines = self._lines(before.content)
        new_lines = self._lines(after.content)
        file_path = before.path or before.document_id

        unified = unified_diff(
            original_lines,
            new_lines,
            fromfile=f"a/{file_path}",
            tofile=f"b/{file_path}",
        )

        return DiffResult(
            document_id=before.document_id,
            file_path=file_path,
            hunks=self._extract_hunks(original_lines, new_lines),
            unified_diff="".join(unified),
            applied=applied,
        )

    def preview_edit(self, document: TextDocument, text_range: TextRange, new_text: str) -> DiffResult:
        """Diff of an edit that was not applied to the document"""
        return self.generate_diff(document, document.with_edit(text_range, new_text), applied=False)

    @staticmethod
    def _lines(content: str) -> list[str]:
        lines = content.splitlines(keepends=True)
        # Ensure last lines have newlines for proper diff
        if lines and not lines[-1].endswith("\n"):
            lines[-1] += "\n"
        return lines

    def _extract_hunks(self, original: list[str], modified: list[str]) -> list[DiffHunk]:
        """Extract individual change hunks from diff"""
        matcher = SequenceMatcher(None, original, modified)
        hunks = []

        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == "equal":
                continue

            change_type = "add" if tag == "insert" else "delete" if tag == "delete" else "modify"

            hunks.append(
                DiffHunk(
                    start_line=i1 + 1,  # 1-indexed for the editor
                    end_line=i2,
                    original_content="".join(original[i1:i2]),
                    new_content="".join(modified[j1:j2]),
                    change_type=change_type,
                )
            )

        return hunks
