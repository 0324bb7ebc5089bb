"""Parsing of generated solution payloads."""

from __future__ import annotations

import json
import re

from pydantic import TypeAdapter, ValidationError

from support_copilot.exceptions import GenerationUnavailable
from support_copilot.models import SuggestedSolution

MAX_SOLUTIONS = 3

_FENCED_BLOCK_RE = re.compile(r"```[\w-]*[ \t]*\n?(.*?)\n?[ \t]*```", re.DOTALL)
_SOLUTION_LIST = TypeAdapter(list[SuggestedSolution])


def strip_code_fences(raw: str) -> str:
    """Unwrap a reply wrapped in a markdown code fence.

    Unfenced JSON is returned trimmed. A fenced block is extracted even when
    the model put prose before or after it.
    """
    text = raw.strip()
    if text.startswith(("{", "[")):
        return text
    match = _FENCED_BLOCK_RE.search(text)
    if match:
        return match.group(1).strip()
    return text


def parse_solutions(raw: str) -> list[SuggestedSolution]:
    """Parse ``{"solutions": [...]}`` from a model reply.

    Returns at most MAX_SOLUTIONS solutions.

    Raises:
        GenerationUnavailable: If the reply is not JSON of the expected shape
            or holds no solutions.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise GenerationUnavailable("empty model reply")

    text = strip_code_fences(raw)
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise GenerationUnavailable(f"model reply is not valid JSON: {e.msg}") from e

    if not isinstance(payload, dict) or "solutions" not in payload:
        raise GenerationUnavailable("model reply has no 'solutions' field")

    try:
        solutions = _SOLUTION_LIST.validate_python(payload["solutions"])
    except ValidationError as e:
        raise GenerationUnavailable(
            f"model reply has malformed solutions: {e.error_count()} error(s)"
        ) from e

    if not solutions:
        raise GenerationUnavailable("model reply has an empty solutions list")
    return solutions[:MAX_SOLUTIONS]
