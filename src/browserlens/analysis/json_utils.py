"""JSON extraction from model replies.

Models asked for "a JSON object" still wrap it in markdown fences, add a
sentence of preamble, or leave a trailing comma. These helpers recover
the payload in those cases and return ``None`` when nothing parses.
"""

from __future__ import annotations

import json
import re
from typing import Any

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)```", re.DOTALL)
_TRAILING_COMMA_RE = re.compile(r",\s*([\]}])")


def extract_json(text: str) -> Any | None:
    """Extract a JSON value from *text*.

    Tries, in order: the whole text, the first fenced block, and the first
    balanced ``{...}`` span. Each candidate is also retried with trailing
    commas removed.
    """
    if not text:
        return None

    candidates = [text.strip()]
    fence_match = _FENCE_RE.search(text)
    if fence_match:
        candidates.append(fence_match.group(1).strip())
    balanced = _extract_balanced(text, "{", "}")
    if balanced:
        candidates.append(balanced)

    for candidate in candidates:
        parsed = safe_parse(candidate)
        if parsed is not None:
            return parsed
    return None


def extract_json_object(text: str) -> dict[str, Any] | None:
    """Like :func:`extract_json` but only accepts an object at the top level."""
    result = extract_json(text)
    if isinstance(result, dict):
        return result
    return None


def fix_trailing_commas(text: str) -> str:
    """Remove trailing commas before closing brackets."""
    return _TRAILING_COMMA_RE.sub(r"\1", text)


def safe_parse(text: str) -> Any | None:
    """Parse JSON, retrying once with trailing commas removed."""
    parsed = _try_parse(text)
    if parsed is not None:
        return parsed
    return _try_parse(fix_trailing_commas(text))


def _try_parse(text: str) -> Any | None:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None


def _extract_balanced(text: str, open_char: str, close_char: str) -> str | None:
    """Extract the first balanced span between *open_char* and *close_char*."""
    start = text.find(open_char)
    if start == -1:
        return None

    depth = 0
    in_string = False
    escape = False

    for i in range(start, len(text)):
        c = text[i]
        if escape:
            escape = False
            continue
        if c == "\\":
            escape = True
            continue
        if c == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if c == open_char:
            depth += 1
        elif c == close_char:
            depth -= 1
            if depth == 0:
                return text[start : i + 1]

    return None
