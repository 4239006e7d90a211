"""
Prompt Builder - Assemble model prompts and generation parameters per task
Pure functions: (task, inputs) -> (prompt, params)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from models.document import TextDocument

FIX_CONTEXT_LINES = 5


class TaskKind(str, Enum):
    """Every kind of request the backend sends to the model"""

    REVIEW = "review"
    QUICK_REVIEW = "quick_review"
    FIX_DIAGNOSTIC = "fix_diagnostic"
    EXPLAIN = "explain"
    FIX = "fix"
    REFACTOR = "refactor"
    TESTS = "tests"
    CHAT = "chat"


@dataclass(frozen=True)
class GenerationParams:
    temperature: float
    max_output_tokens: int


TASK_PARAMS: dict[TaskKind, GenerationParams] = {
    TaskKind.REVIEW: GenerationParams(temperature=0.0, max_output_tokens=2000),
    TaskKind.QUICK_REVIEW: GenerationParams(temperature=0.1, max_output_tokens=1500),
    TaskKind.FIX_DIAGNOSTIC: GenerationParams(temperature=0.1, max_output_tokens=300),
    TaskKind.EXPLAIN: GenerationParams(temperature=0.3, max_output_tokens=1000),
    TaskKind.FIX: GenerationParams(temperature=0.3, max_output_tokens=1000),
    TaskKind.REFACTOR: GenerationParams(temperature=0.3, max_output_tokens=1000),
    TaskKind.TESTS: GenerationParams(temperature=0.3, max_output_tokens=1000),
    TaskKind.CHAT: GenerationParams(temperature=0.3, max_output_tokens=2048),
}


@dataclass(frozen=True)
class PromptRequest:
    prompt: str
    params: GenerationParams
    task: TaskKind


def _require_code(code: str):
    # Callers reject empty selections before building a prompt
    if not code or not code.strip():
        raise ValueError("Prompt builder requires non-empty code")


def build_review_prompt(code: str, language: str | None = None) -> PromptRequest:
    """Build prompt for a full review pass (whole file or selection)"""
    _require_code(code)
    language_hint = f" The code is written in {language}." if language else ""

    prompt = f"""You are a strict JSON code reviewer.{language_hint}
INSTRUCTIONS:
1. Identify bugs, security issues, and bad practices.
2. Your entire output MUST be a valid JSON array.
3. DO NOT use asterisks (*) or hashtags (#) anywhere in the text or JSON messages.
4. DO NOT include markdown code blocks like ```json.
5. DO NOT report purely stylistic issues.
6. Use plain, simple text for the "message" field. Return JSON: [{{"line": number, "message": "text", "severity": "error"|"warning"|"info"}}]
7. Line numbers start at 1 on the first line of the code below.
8. If the code is correct, return: []

Review:

{code}"""

    return PromptRequest(prompt=prompt, params=TASK_PARAMS[TaskKind.REVIEW], task=TaskKind.REVIEW)


def build_quick_review_prompt(code: str, language: str | None = None) -> PromptRequest:
    """Build prompt for the stricter selection quick review"""
    _require_code(code)
    language = language or "source"

    prompt = f"""You are an expert code reviewer. Analyze this {language} code carefully.

CRITICAL RULES:
1. ONLY report ACTUAL bugs, memory leaks, security vulnerabilities, or critical logic errors
2. DO NOT report style issues, naming conventions, or working code as problems
3. DO NOT suggest improvements if code is functionally correct
4. If code works correctly, return empty array []
5. Be VERY strict - only critical issues

Code to review:
```{language}
{code}
```

Return JSON format ONLY (no markdown):
[{{"line": number, "message": "brief description", "severity": "error"|"warning"}}]

If no critical issues found, return: []"""

    return PromptRequest(prompt=prompt, params=TASK_PARAMS[TaskKind.QUICK_REVIEW], task=TaskKind.QUICK_REVIEW)


def fix_context_bounds(line: int, line_count: int, radius: int = FIX_CONTEXT_LINES) -> tuple[int, int]:
    """Inclusive [start, end] lines around `line`, clamped to the document"""
    start = max(0, line - radius)
    end = min(line_count - 1, line + radius)
    return start, end


def build_fix_diagnostic_prompt(document: TextDocument, line: int, issue_message: str) -> PromptRequest:
    """Build prompt asking for a single fixed line, with +-5 lines of context"""
    start, end = fix_context_bounds(line, document.line_count)
    lines = document.lines
    context = "\n".join(lines[start : end + 1])
    line_text = lines[line]
    language = document.language_id

    prompt = f"""You are a code fixer. Fix ONLY the specific issue mentioned.

Language: {language}
Issue: {issue_message}
Problematic line: {line_text}

Context:
```{language}
{context}
```

RULES:
1. Return ONLY the fixed line of code
2. DO NOT add comments or explanations
3. DO NOT change working code
4. Keep the same indentation and style
5. Fix ONLY the reported issue

Fixed line:"""

    return PromptRequest(prompt=prompt, params=TASK_PARAMS[TaskKind.FIX_DIAGNOSTIC], task=TaskKind.FIX_DIAGNOSTIC)


_ASSIST_INSTRUCTIONS = {
    TaskKind.EXPLAIN: "Explain this code concisely:",
    TaskKind.FIX: "Fix bugs in this code and return only the fixed code in a single code block:",
    TaskKind.REFACTOR: (
        "Refactor this code for better readability and performance. "
        "Return only the refactored code in a single code block:"
    ),
    TaskKind.TESTS: "Generate unit tests for the following code. Return only the test code in a single code block:",
}


def build_assist_prompt(task: TaskKind, code: str, language: str | None = None) -> PromptRequest:
    """Build prompt for explain / fix / refactor / tests"""
    if task not in _ASSIST_INSTRUCTIONS:
        raise ValueError(f"Not an assist task: {task}")
    _require_code(code)
    fence = language or ""

    prompt = f"""{_ASSIST_INSTRUCTIONS[task]}

```{fence}
{code}
```"""

    return PromptRequest(prompt=prompt, params=TASK_PARAMS[task], task=task)


def build_chat_message(message: str, document: TextDocument | None = None, code: str | None = None) -> str:
    """Build the user turn for a chat message, embedding the active file"""
    if document is None:
        return message

    code_context = code if code else document.get_text()
    language = document.language_id

    return f"""I'm working on file: {document.file_name} (Language: {language})

File Content:
```{language}
{code_context}
```

User Question: {message}"""
