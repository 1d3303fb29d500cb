"""
JSON helpers for LLM responses.

Recommendation and message drafts are requested as JSON objects, but models
still wrap them in code fences, add commentary, or emit trailing commas.
Standard json.loads() is tried first; json-repair handles the rest.
"""

import json
import re
from typing import Any, Dict

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)
_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def parse_llm_json(text: str) -> Dict[str, Any]:
    """
    Parse a JSON object out of an LLM response.

    Args:
        text: Raw model output

    Returns:
        The decoded object

    Raises:
        ValueError: If no JSON object can be extracted or repaired

    Example:
        >>> parse_llm_json('```json\\n{"subject": "Hi"}\\n```')
        {'subject': 'Hi'}
    """
    if not text or not text.strip():
        raise ValueError("Empty input: no JSON content to parse")

    candidate = _FENCE.sub("", text.strip()).strip()
    if not candidate.startswith("{"):
        match = _OBJECT.search(candidate)
        if not match:
            raise ValueError(f"No JSON object found in text: {text[:200]}")
        candidate = match.group(0)

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError:
        from json_repair import repair_json
        parsed = repair_json(candidate, return_objects=True)

    # A single object wrapped in brackets: [{...}]
    if isinstance(parsed, list) and len(parsed) == 1:
        parsed = parsed[0]

    if not isinstance(parsed, dict):
        raise ValueError(
            f"Expected a JSON object, got {type(parsed).__name__}. "
            f"Original text (first 500 chars): {text[:500]}"
        )
    return parsed
