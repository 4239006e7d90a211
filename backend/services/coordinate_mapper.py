"""
Coordinate Mapper - Map model-relative line numbers onto document lines
"""

from __future__ import annotations

from models.document import LineRange, TextDocument
from models.review import RawIssue

DEFAULT_ISSUE_LINE = 1


def resolve_line(line: int | None, excerpt_start: int, line_count: int) -> int:
    """Absolute 0-based line for a 1-based excerpt-relative `line`.

    Missing lines default to 1. The result is clamped to
    [0, line_count - 1] so hallucinated line numbers never escape the
    document.
    """
    if line is None or isinstance(line, bool) or not isinstance(line, int):
        line = DEFAULT_ISSUE_LINE
    absolute = line - 1 + excerpt_start
    return max(0, min(absolute, max(line_count, 1) - 1))


def line_range(document: TextDocument, line: int) -> LineRange:
    """Start-of-line to end-of-line range of an in-bounds line"""
    return document.line_at(line)


def map_issue(issue: RawIssue, document: TextDocument, excerpt_start: int) -> LineRange:
    """Whole-line range a raw issue attaches to"""
    return line_range(document, resolve_line(issue.line, excerpt_start, document.line_count))
