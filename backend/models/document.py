"""Document data models - server-side view of editor documents"""

from __future__ import annotations

from pydantic import BaseModel


class TextRange(BaseModel):
    """Zero-based line/character range, end exclusive"""

    start_line: int
    start_character: int = 0
    end_line: int
    end_character: int = 0

    @property
    def is_empty(self) -> bool:
        return self.start_line == self.end_line and self.start_character == self.end_character


class LineRange(BaseModel):
    """Full span of a single document line"""

    line: int
    start_character: int = 0
    end_character: int

    def to_text_range(self) -> TextRange:
        return TextRange(
            start_line=self.line,
            start_character=self.start_character,
            end_line=self.line,
            end_character=self.end_character,
        )


class TextDocument(BaseModel):
    """Snapshot of an open editor document"""

    document_id: str
    path: str = ""
    language_id: str = "plaintext"
    content: str = ""
    version: int = 0

    @property
    def file_name(self) -> str:
        path = self.path or self.document_id
        return path.replace("\\", "/").rsplit("/", 1)[-1]

    @property
    def lines(self) -> list[str]:
        return [line.rstrip("\r") for line in self.content.split("\n")]

    @property
    def line_count(self) -> int:
        # An empty document still has one (empty) line
        return self.content.count("\n") + 1

    def line_at(self, index: int) -> LineRange:
        """Range of line `index`; raises IndexError outside the document"""
        if index < 0 or index >= self.line_count:
            raise IndexError(f"line {index} out of range (line count {self.line_count})")
        return LineRange(line=index, start_character=0, end_character=len(self.lines[index]))

    def offset_at(self, line: int, character: int) -> int:
        """Absolute character offset, clamped to the document"""
        if line < 0:
            return 0
        raw_lines = self.content.split("\n")
        if line >= len(raw_lines):
            return len(self.content)
        offset = sum(len(raw) + 1 for raw in raw_lines[:line])
        return offset + max(0, min(character, len(raw_lines[line])))

    def get_text(self, text_range: TextRange | None = None) -> str:
        if text_range is None:
            return self.content
        start = self.offset_at(text_range.start_line, text_range.start_character)
        end = self.offset_at(text_range.end_line, text_range.end_character)
        return self.content[start:end]

    def with_edit(self, text_range: TextRange, new_text: str) -> "TextDocument":
        """Return a copy with `text_range` replaced by `new_text`"""
        start = self.offset_at(text_range.start_line, text_range.start_character)
        end = self.offset_at(text_range.end_line, text_range.end_character)
        content = self.content[:start] + new_text + self.content[end:]
        return self.model_copy(update={"content": content, "version": self.version + 1})


class OpenDocumentRequest(BaseModel):
    """Request to open (or re-open) a document"""

    document_id: str
    path: str = ""
    language_id: str = "plaintext"
    content: str = ""
    version: int = 0
    active: bool = True


class UpdateDocumentRequest(BaseModel):
    """Request to replace a document's content"""

    content: str
    version: int | None = None


class DocumentResponse(BaseModel):
    """Document state as seen by the backend"""

    document: TextDocument
    line_count: int
    active: bool
