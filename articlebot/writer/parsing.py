"""
Tolerant parsing of model output into an article payload.

Models wrap JSON in fences, prepend prose, or leak raw control characters
into long HTML strings. parse_article_json tries progressively looser
strategies and reports a typed success or failure instead of raising.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from articlebot.core.utils import strip_control_chars
from .prompts import REQUIRED_FIELDS

_FENCE_RE = re.compile(r"^\s*```(?:json|JSON)?\s*|\s*```\s*$")


@dataclass
class ParseResult:
    """Outcome of parsing model output."""
    ok: bool
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    @classmethod
    def success(cls, data: Dict[str, Any]) -> "ParseResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: str) -> "ParseResult":
        return cls(ok=False, error=error)


def strip_fences(raw: str) -> str:
    return _FENCE_RE.sub("", raw.strip())


def extract_json_object(text: str) -> Optional[str]:
    """
    Return the first balanced ``{...}`` block in text.

    Braces inside JSON strings are ignored so HTML or code samples in the
    content field do not end the scan early.
    """
    start = text.find("{")
    if start < 0:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:index + 1]
    return None


def _missing_fields(data: Dict[str, Any]) -> List[str]:
    missing = []
    for name in REQUIRED_FIELDS:
        value = data.get(name)
        if value is None:
            missing.append(name)
        elif isinstance(value, str) and not value.strip():
            missing.append(name)
        elif isinstance(value, list) and not value:
            missing.append(name)
    return missing


def _normalise(data: Dict[str, Any]) -> Dict[str, Any]:
    for name in ("keywords", "tags"):
        value = data.get(name)
        if isinstance(value, str):
            data[name] = [part.strip() for part in value.split(",") if part.strip()]
        elif isinstance(value, list):
            data[name] = [str(part).strip() for part in value if str(part).strip()]
    return data


def parse_article_json(raw: Optional[str]) -> ParseResult:
    """
    Parse model output into the article payload.

    Args:
        raw: Raw completion text

    Returns:
        ParseResult with the payload on success, or the reason it failed
    """
    if not raw or not raw.strip():
        return ParseResult.failure("empty response")

    text = strip_fences(raw)
    data = None
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        block = extract_json_object(text)
        if block is None:
            return ParseResult.failure("no JSON object found in response")
        try:
            # strict=False accepts literal newlines/tabs inside strings
            data = json.loads(strip_control_chars(block), strict=False)
        except json.JSONDecodeError as e:
            return ParseResult.failure(f"invalid JSON: {e.msg} at position {e.pos}")

    if not isinstance(data, dict):
        return ParseResult.failure(f"expected a JSON object, got {type(data).__name__}")

    data = _normalise(data)
    missing = _missing_fields(data)
    if missing:
        return ParseResult.failure(f"missing required fields: {', '.join(missing)}")

    return ParseResult.success(data)
