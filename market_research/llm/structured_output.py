"""
Structured Output Helpers

Turns free-form model text into JSON objects and coerces individual fields
into the shapes the pipeline expects.

Why not provider tool-calling?
- Every request here is a tiny flat JSON object; a parse with fallbacks is
  simpler and works identically across providers
- Models still wrap answers in ```json fences or add a sentence of prose,
  so the parser has to tolerate both

Design:
- Parse order: plain json.loads → strip code fences → substring between
  the first "{" and the last "}"
- Field coercion never raises; bad values become the caller's default
"""

import json
import re
from typing import Any, Dict, List

from ..exceptions import MalformedOutputError

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def safe_json_parse(text: str) -> Dict[str, Any]:
    """
    Extract a JSON object from model output.

    Args:
        text: Raw model response text

    Returns:
        Parsed JSON object

    Raises:
        MalformedOutputError: If no JSON object can be recovered

    Example:
        safe_json_parse('Sure!\\n```json\\n{"relevant": true}\\n```')
        → {"relevant": True}
    """
    if not text or not text.strip():
        raise MalformedOutputError("Empty response")

    candidates = [text]

    stripped = _FENCE_RE.sub("", text).strip()
    candidates.append(stripped)

    first_brace = stripped.find("{")
    last_brace = stripped.rfind("}")
    if first_brace != -1 and last_brace > first_brace:
        candidates.append(stripped[first_brace:last_brace + 1])

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(parsed, dict):
            return parsed

    raise MalformedOutputError(f"No JSON object in response: {text[:200]!r}")


def coerce_string_list(value: Any) -> List[str]:
    """
    Keep the non-empty string entries of a list, trimmed.

    Anything that is not a list becomes [].
    """
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def coerce_text(value: Any, default: str) -> str:
    """Return a trimmed non-empty string, or default."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default
