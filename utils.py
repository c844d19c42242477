# utils.py

import json
from typing import Any


class JsonExtractionError(ValueError):
    """Raised when no balanced JSON value can be recovered from model text."""


def message_text(message: Any) -> str:
    """
    Recover plain text from a chat model message.
    - Gemini chat models return content as str or as list(dict(type, text)).
    """
    c = getattr(message, "content", message)
    if c is None:
        return ""
    if isinstance(c, str):
        return c
    if isinstance(c, list):
        parts = []
        for p in c:
            if isinstance(p, str):
                parts.append(p)
            elif isinstance(p, dict) and p.get("type") == "text" and isinstance(p.get("text"), str):
                parts.append(p["text"])
        return "\n".join(parts)
    return str(c)


def extract_first_json_slice(raw: str, open_ch: str = "{", close_ch: str = "}") -> str:
    """
    Return the first balanced JSON value starting at the first `open_ch`.
    Brackets inside string literals are ignored and backslash escapes are honored.
    """
    if raw is None:
        raise JsonExtractionError("No JSON found")
    start = raw.find(open_ch)
    if start == -1:
        raise JsonExtractionError("No JSON found")

    depth = 0
    in_string = False
    escaped = False

    for i in range(start, len(raw)):
        ch = raw[i]

        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
            continue

        if ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1

        if depth == 0:
            return raw[start:i + 1]

    raise JsonExtractionError("Unterminated JSON")


def extract_first_json_object(raw: str) -> dict:
    text = extract_first_json_slice(raw, "{", "}")
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as e:
        raise JsonExtractionError(f"Invalid JSON object: {e}") from e
    if not isinstance(obj, dict):
        raise JsonExtractionError("JSON value is not an object")
    return obj


def extract_first_json_array(raw: str) -> list:
    text = extract_first_json_slice(raw, "[", "]")
    try:
        arr = json.loads(text)
    except json.JSONDecodeError as e:
        raise JsonExtractionError(f"Invalid JSON array: {e}") from e
    if not isinstance(arr, list):
        raise JsonExtractionError("JSON value is not an array")
    return arr


def _json(obj) -> str:
    try:
        if hasattr(obj, "model_dump"):
            return json.dumps(obj.model_dump(), ensure_ascii=False, indent=2)
        return json.dumps(obj, ensure_ascii=False, indent=2)
    except (TypeError, ValueError):
        return str(obj)


def _truncate(text: str, limit: int = 4000) -> str:
    if text is None:
        return ""
    return text if len(text) <= limit else text[:limit] + "\n... [truncated]"
