"""JSON parsing utilities for LLM response handling."""

import json

from daily_digest.llm.errors import LlmProcessingError


def strip_markdown_fences(text: str) -> str:
    """Strip markdown code fences from LLM response text.

    Args:
        text: Raw text potentially wrapped in code fences.

    Returns:
        Text with code fences removed.
    """
    text = text.strip()
    if text.startswith("```"):
        first_newline = text.find("\n")
        if first_newline != -1:
            text = text[first_newline + 1 :]
        if text.endswith("```"):
            text = text[: -len("```")]
        text = text.strip()
    return text


def extract_object_span(text: str) -> str | None:
    """Return the substring from the first ``{`` to the last ``}``.

    Args:
        text: Raw text that may wrap a JSON object in other characters.

    Returns:
        The span, or None if no such pair exists.
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    return text[start : end + 1]


def parse_json_object(text: str) -> dict[str, object]:
    """Parse an LLM response that must be a single JSON object.

    The text is parsed directly; if that fails, the span between the first
    ``{`` and the last ``}`` is parsed once.

    Args:
        text: Raw response text.

    Returns:
        Parsed JSON object.

    Raises:
        LlmProcessingError: If neither attempt yields a JSON object.
    """
    raw = strip_markdown_fences(text or "")
    if not raw:
        msg = "LLM returned empty content"
        raise LlmProcessingError(msg)

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        span = extract_object_span(raw)
        if span is None:
            msg = f"LLM response is not JSON (first 200 chars): {raw[:200]}"
            raise LlmProcessingError(msg) from None
        try:
            parsed = json.loads(span)
        except json.JSONDecodeError as e:
            msg = f"LLM response is not JSON (first 200 chars): {raw[:200]}"
            raise LlmProcessingError(msg) from e

    if not isinstance(parsed, dict):
        msg = f"LLM response is JSON but not an object: {type(parsed).__name__}"
        raise LlmProcessingError(msg)
    return parsed
