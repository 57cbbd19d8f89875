"""Read raw outline payloads produced by generators or saved by users."""

import json
import re
from typing import Any

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(?P<body>.*?)\n?```", re.DOTALL | re.IGNORECASE)


def extract_outline(payload: Any) -> Any:
    """Unwrap the generator's ``{"sections": [...]}`` envelope, if present.

    Anything else is returned untouched; deciding whether it is a usable
    outline is the validator's job.
    """
    if isinstance(payload, dict) and "sections" in payload:
        return payload["sections"]
    return payload


def parse_outline_text(text: str) -> Any:
    """Parse JSON outline text, also accepting it inside a markdown code fence.

    Raises:
        ValueError: If no JSON can be decoded from the text.
    """
    cleaned = text.strip()
    if not cleaned:
        return []

    m = _FENCE_RE.search(cleaned)
    if m:
        cleaned = m.group("body").strip()

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        msg = f"Outline is not valid JSON: {e.msg} (line {e.lineno}, column {e.colno})"
        raise ValueError(msg) from e
    except RecursionError as e:
        msg = "Outline JSON is nested too deeply to read"
        raise ValueError(msg) from e
    return extract_outline(data)
