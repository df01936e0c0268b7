"""
Prompt construction for grammar-check and rephrase operations.

Every prompt asks the backend for ONLY a JSON array of objects with
`text`, `confidence` and `type` so one parser serves all providers.
"""

from typing import Dict, List

from textcraft.llm.types import Operation, RephraseStyle, TextRequest


_GRAMMAR_SYSTEM = (
    "You are a professional grammar checker. Check the provided text for grammar, "
    "spelling, and punctuation errors. Provide corrections with confidence scores (0-1) "
    "and error types.\n"
    "Return ONLY a JSON array of objects with properties: text (corrected text), "
    "confidence (0-1), type (grammar/spelling/punctuation).\n"
    "Do not include any other text in your response, just the JSON array."
)

_REPHRASE_SYSTEM = (
    "You are a professional text rephraser. Rephrase the provided text in a {style} style. "
    "Provide multiple options with confidence scores (0-1).\n"
    "Return ONLY a JSON array of objects with properties: text (rephrased text), "
    "confidence (0-1), type (rephrasing).\n"
    "Do not include any other text in your response, just the JSON array."
)


def build_system_prompt(request: TextRequest) -> str:
    if request.operation == Operation.GRAMMAR_CHECK:
        return _GRAMMAR_SYSTEM
    style = request.style or RephraseStyle.FORMAL
    return _REPHRASE_SYSTEM.format(style=style.value)


def build_user_prompt(request: TextRequest) -> str:
    if request.operation == Operation.GRAMMAR_CHECK:
        return f'Text: "{request.text}"\nLanguage: {request.language or "en"}'
    return f'Text: "{request.text}"'


def build_chat_messages(request: TextRequest) -> List[Dict[str, str]]:
    """System + user messages for OpenAI-compatible chat completions."""
    return [
        {"role": "system", "content": build_system_prompt(request)},
        {"role": "user", "content": build_user_prompt(request)},
    ]


def build_single_prompt(request: TextRequest) -> str:
    """One combined prompt for APIs without a system role (Gemini generateContent)."""
    return f"{build_system_prompt(request)}\n\n{build_user_prompt(request)}"
