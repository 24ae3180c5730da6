"""Pull a JSON object out of a model response."""

from __future__ import annotations

import json
import re

_FENCE = re.compile(r"^```[\w-]*\s*\n?|\n?```\s*$")
_TRAILING_KEY = re.compile(r',\s*"(?:[^"\\]|\\.)*"$')
_decoder = json.JSONDecoder()


def extract_json_object(text: str) -> dict:
    """Return the first JSON object in ``text``.

    Handles bare JSON, fenced ```json blocks, prose around the object, and
    a response cut off before its closing brackets. Raises ValueError when
    no object can be recovered.
    """
    if not isinstance(text, str) or not text.strip():
        raise ValueError("Empty response; expected a JSON object")

    body = _FENCE.sub("", text.strip()).strip()

    start = body.find("{")
    while start != -1:
        try:
            value, _ = _decoder.raw_decode(body, start)
        except json.JSONDecodeError:
            start = body.find("{", start + 1)
            continue
        if isinstance(value, dict):
            return value
        start = body.find("{", start + 1)

    repaired = _close_truncated(body)
    if repaired is not None:
        return repaired

    raise ValueError(f"Could not extract a JSON object from response: {text[:200]}...")


def _close_truncated(text: str) -> dict | None:
    """Close brackets left open by a response that hit the token limit."""
    start = text.find("{")
    if start == -1:
        return None

    stack: list[str] = []
    in_string = False
    escaped = False
    last_safe = None  # index just after the last complete value
    for i, ch in enumerate(text[start:], start):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
                last_safe = (i + 1, list(stack))
            continue
        if ch == '"':
            in_string = True
        elif ch in "{[":
            stack.append("}" if ch == "{" else "]")
        elif ch in "}]":
            if not stack:
                break
            stack.pop()
            last_safe = (i + 1, list(stack))

    if not stack or last_safe is None:
        return None

    end, open_at_end = last_safe
    candidate = text[start:end].rstrip().rstrip(",")
    closing = "".join(reversed(open_at_end))
    # The last complete string may be a key with no value yet; retry without it.
    for attempt in (candidate, _TRAILING_KEY.sub("", candidate)):
        try:
            value = json.loads(attempt + closing)
        except json.JSONDecodeError:
            continue
        if isinstance(value, dict):
            return value
    return None
