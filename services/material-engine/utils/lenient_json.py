"""
Lenient JSON decoding for completion-service responses

Model output is untrusted: it may be wrapped in markdown, surrounded by
prose, or contain small syntax errors. Everything that reads model output
goes through this module:

1. extract_json_object - first balanced-brace substring
2. parse_json_object   - extract, parse, repair common syntax errors
3. as_* helpers        - coerce fields to the expected type or a default
"""

import json
import re
from typing import Any, Dict, List


class JSONExtractionError(Exception):
    """Raised when no JSON object can be recovered from a response."""
    def __init__(self, message: str, original_content: str = ""):
        super().__init__(message)
        self.original_content = original_content


_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.MULTILINE)
_FENCE_CLOSE = re.compile(r"\s*```$", re.MULTILINE)

# (pattern, replacement) pairs for common LLM JSON mistakes
_REPAIRS = [
    (r",\s*}", "}"),
    (r",\s*]", "]"),
    (r"\bNone\b", "null"),
    (r"\bTrue\b", "true"),
    (r"\bFalse\b", "false"),
]


def extract_json_object(text: str) -> str:
    """
    Return the first balanced {...} substring of text.

    Braces inside JSON string literals are ignored.

    Raises:
        JSONExtractionError: if text contains no complete object
    """
    if not isinstance(text, str):
        raise JSONExtractionError("Response is not text")

    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            char = text[i]
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
                    return text[start:i + 1]
        # unbalanced from this brace, try the next one
        start = text.find("{", start + 1)

    raise JSONExtractionError(f"No JSON object in response: {text[:300]}", original_content=text)


def parse_json_object(text: str) -> Dict[str, Any]:
    """
    Extract and parse the first JSON object in a model response.

    Raises:
        JSONExtractionError: if no object can be extracted or parsed
    """
    if not isinstance(text, str):
        raise JSONExtractionError("Response is not text")

    cleaned = _FENCE_OPEN.sub("", text.strip())
    cleaned = _FENCE_CLOSE.sub("", cleaned)
    candidate = extract_json_object(cleaned)

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError:
        repaired = candidate
        for pattern, replacement in _REPAIRS:
            repaired = re.sub(pattern, replacement, repaired)
        try:
            parsed = json.loads(repaired)
        except json.JSONDecodeError as e:
            raise JSONExtractionError(f"Invalid JSON object: {e}", original_content=text) from e

    if not isinstance(parsed, dict):
        raise JSONExtractionError("Top-level JSON value is not an object", original_content=text)
    return parsed


# =============================================================================
# Field coercion
# =============================================================================

def as_list(value: Any) -> List[Any]:
    """Lists pass through (copied); anything else becomes []."""
    return list(value) if isinstance(value, list) else []


def as_str_list(value: Any) -> List[str]:
    """List of non-empty strings; other items are dropped."""
    return [item.strip() for item in as_list(value) if isinstance(item, str) and item.strip()]


def as_str(value: Any, default: str) -> str:
    return value if isinstance(value, str) else default


def as_number(value: Any, default: float) -> float:
    # bool is an int subclass but never a meaningful number here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value)


def as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def get_text(mapping: Any, *keys: str) -> str:
    """First string value among keys of a dict-like item, else ''."""
    if not isinstance(mapping, dict):
        return ""
    for key in keys:
        value = mapping.get(key)
        if isinstance(value, str) and value:
            return value
    return ""
