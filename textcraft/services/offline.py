"""
Degraded offline checking: a fixed dictionary of common misspellings.

Not a provider. Used by TextProcessor when the network is down and the
active provider needs it.
"""

from typing import Dict, List

from textcraft.llm.types import Suggestion, TextResponse
from textcraft.types.error_events import ErrorCode, format_error

OFFLINE_CONFIDENCE = 0.7

COMMON_MISSPELLINGS: Dict[str, str] = {
    "teh": "the",
    "adn": "and",
    "waht": "what",
    "thier": "their",
    "recieve": "receive",
    "alot": "a lot",
    "seperate": "separate",
    "definately": "definitely",
    "accomodate": "accommodate",
    "occured": "occurred",
    "untill": "until",
    "wierd": "weird",
}

_STRIP_CHARS = ".,;:!?\"'()[]{}"


def find_misspellings(text: str) -> List[Suggestion]:
    """Scan whitespace-split words in order; one suggestion per match."""
    suggestions = []
    for word in text.split():
        correction = COMMON_MISSPELLINGS.get(word.strip(_STRIP_CHARS).lower())
        if correction:
            suggestions.append(
                Suggestion(text=correction, confidence=OFFLINE_CONFIDENCE, type="spelling")
            )
    return suggestions


def offline_response(text: str) -> TextResponse:
    suggestions = find_misspellings(text)
    if not suggestions:
        return TextResponse.failure(
            text,
            format_error(ErrorCode.LLM_NOT_AVAILABLE, "No issues found in offline mode"),
        )
    return TextResponse(original=text, suggestions=suggestions)
