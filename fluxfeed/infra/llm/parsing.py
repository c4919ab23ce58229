"""Helpers that dig JSON out of free-form LLM replies."""

import json
import re
from typing import Any

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?\s*```", re.DOTALL)
_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)
_ARRAY_RE = re.compile(r"\[.*\]", re.DOTALL)


def _strip_fence(text: str) -> str:
    m = _FENCE_RE.search(text)
    return m.group(1).strip() if m else text.strip()


def extract_json_object(text: str) -> dict[str, Any]:
    """JSON object from a reply (```json ... ``` block or the first { ... } span)."""
    body = _strip_fence(text)
    m = _OBJECT_RE.search(body)
    parsed = json.loads(m.group(0) if m else body)
    if not isinstance(parsed, dict):
        raise ValueError("LLM reply is not a JSON object")
    return parsed


def extract_json_array(text: str) -> list[Any]:
    """JSON array from a reply.

    json_object mode forces models to wrap arrays in an object, so when the
    reply starts with '{' the first bracketed span is used.
    """
    body = _strip_fence(text)
    if body.startswith("{"):
        m = _ARRAY_RE.search(body)
        if m:
            body = m.group(0)
    parsed = json.loads(body)
    if not isinstance(parsed, list):
        raise ValueError("LLM reply is not a JSON array")
    return parsed
