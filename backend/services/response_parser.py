"""
Response Parser - Extract structured issues and code from free-form model text
Never raises on malformed input: unparseable text degrades to "no issues"
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Iterable

from models.chat import CodeBlock
from models.review import ParseOutcome, ParseResult, RawIssue

logger = logging.getLogger(__name__)

DEFAULT_MIN_MESSAGE_LENGTH = 10
DEFAULT_LOW_VALUE_KEYWORDS = ("comment", "naming", "style")

_decoder = json.JSONDecoder()
_CODE_BLOCK_PATTERN = re.compile(r"```([\w+#.-]*)[ \t]*\r?\n(.*?)```", re.DOTALL)


def _find_issue_array(text: str) -> list | None:
    """First JSON array in `text` whose entries are objects (or that is empty)"""
    position = text.find("[")
    while position != -1:
        try:
            value, _ = _decoder.raw_decode(text, position)
        except json.JSONDecodeError:
            value = None
        except RecursionError:
            # Nested too deep to decode: skip the rest of this run of brackets
            value = None
            while text.startswith("[", position + 1):
                position += 1
        if isinstance(value, list) and all(isinstance(item, dict) for item in value):
            return value
        position = text.find("[", position + 1)
    return None


def _coerce_line(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _normalize_issue(entry: dict[str, Any]) -> RawIssue:
    message = entry.get("message")
    if message is None:
        message = ""
    elif not isinstance(message, str):
        message = str(message)

    severity = entry.get("severity")
    severity = severity.strip().lower() if isinstance(severity, str) else None

    return RawIssue(line=_coerce_line(entry.get("line")), message=message.strip(), severity=severity)


def parse_issues(text: str | None) -> ParseResult:
    """Parse a review reply into raw issues, keeping their order.

    Prose, markdown fences and stray brackets around the array are ignored.
    When no decodable issue array exists the outcome is AMBIGUOUS and the
    issue list is empty; callers treat it the same as a clean review.
    """
    if not text:
        logger.warning("[ResponseParser] Empty model response")
        return ParseResult(issues=[], outcome=ParseOutcome.AMBIGUOUS)

    entries = _find_issue_array(text)
    if entries is None:
        logger.warning("[ResponseParser] No JSON issue array in response: %.200r", text)
        return ParseResult(issues=[], outcome=ParseOutcome.AMBIGUOUS)

    issues = [_normalize_issue(entry) for entry in entries]
    outcome = ParseOutcome.ISSUES if issues else ParseOutcome.NO_ISSUES
    return ParseResult(issues=issues, outcome=outcome)


def extract_issues(text: str | None) -> list[RawIssue]:
    """Raw issues from a review reply; empty for clean or unparseable text"""
    return parse_issues(text).issues


def filter_low_value(
    issues: Iterable[RawIssue],
    min_length: int = DEFAULT_MIN_MESSAGE_LENGTH,
    keywords: Iterable[str] = DEFAULT_LOW_VALUE_KEYWORDS,
) -> list[RawIssue]:
    """Drop short messages and ones mentioning low-value topics (quick review)"""
    lowered_keywords = [keyword.lower() for keyword in keywords]
    kept = []
    for issue in issues:
        message = issue.message.lower()
        if len(issue.message) < min_length:
            continue
        if any(keyword in message for keyword in lowered_keywords):
            continue
        kept.append(issue)
    return kept


def extract_code_blocks(content: str) -> list[CodeBlock]:
    """Extract code blocks from markdown response"""
    blocks = []
    for lang, code in _CODE_BLOCK_PATTERN.findall(content):
        blocks.append(
            CodeBlock(
                language=lang or "text",
                code=code.strip("\n"),
                file_hint=None,
            )
        )
    return blocks


def extract_code(content: str) -> str:
    """Code from the first fenced block, or the bare reply without fences"""
    blocks = extract_code_blocks(content)
    if blocks:
        return blocks[0].code
    lines = content.splitlines()
    if lines and lines[0].lstrip().startswith("```"):
        # Unterminated fence: drop the opening line and its language tag
        lines = lines[1:]
    text = "\n".join(lines).replace("```", "")
    # Leading indentation is part of the code
    return text.strip("\r\n").rstrip()
