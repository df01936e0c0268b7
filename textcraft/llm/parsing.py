"""
Reduce raw provider output to an ordered list of Suggestions.

Providers often wrap the requested JSON in prose or markdown fences, so the
first well-formed JSON array of suggestion candidates anywhere in the text is
used. A non-empty array with no usable item is a parse failure.
"""

import json
import logging
import math
from typing import Any, List, Optional

from textcraft.llm.types import (
    DEFAULT_CONFIDENCE,
    DEFAULT_SUGGESTION_TYPE,
    LLMParseError,
    Suggestion,
)

logger = logging.getLogger(__name__)

_decoder = json.JSONDecoder()


def _holds_suggestions(value: list) -> bool:
    return not value or any(isinstance(item, (dict, str)) for item in value)


def extract_json_array(raw: str) -> Optional[list]:
    """
    Find the first substring of `raw` that decodes as a JSON array of
    suggestion candidates.

    Arrays holding only numbers, nulls or nested arrays (citations like
    "[1]") are skipped. An empty array counts as a result.

    Returns:
        The decoded list, or None when no array can be decoded.
    """
    start = raw.find("[")
    while start != -1:
        try:
            value, _ = _decoder.raw_decode(raw, start)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, list) and _holds_suggestions(value):
            return value
        start = raw.find("[", start + 1)
    return None


def _coerce_confidence(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_CONFIDENCE
    if math.isnan(value):
        return DEFAULT_CONFIDENCE
    return min(1.0, max(0.0, float(value)))


def _to_suggestion(item: Any) -> Optional[Suggestion]:
    if isinstance(item, str):
        return Suggestion(text=item)
    if not isinstance(item, dict) or not isinstance(item.get("text"), str):
        return None

    kind = item.get("type")
    return Suggestion(
        text=item["text"],
        confidence=_coerce_confidence(item.get("confidence")),
        type=kind if isinstance(kind, str) and kind else DEFAULT_SUGGESTION_TYPE,
    )


def parse_suggestions(raw: str, provider: Optional[str] = None) -> List[Suggestion]:
    """
    Parse provider output into Suggestions, preserving provider order.

    Raises:
        LLMParseError: No JSON array could be extracted, or a non-empty
            array held no usable suggestion
    """
    items = extract_json_array(raw or "")
    if items is None:
        name = provider or "provider"
        raise LLMParseError(f"Failed to parse {name} response", provider=provider)

    suggestions = []
    for item in items:
        suggestion = _to_suggestion(item)
        if suggestion is None:
            logger.warning(f"🤖 LLM [{provider}]: Skipping malformed suggestion: {str(item)[:100]}")
            continue
        suggestions.append(suggestion)

    if items and not suggestions:
        name = provider or "provider"
        raise LLMParseError(f"No usable suggestions in {name} response", provider=provider)

    return suggestions
