"""
LLM Provider Abstraction Layer for Textcraft

This package provides a unified interface for grammar checking and rephrasing
across LLM providers (local OpenAI-compatible servers, Google Gemini, OpenRouter).
"""

from textcraft.llm.base import LLMProvider
from textcraft.llm.factory import LLMProviderFactory
from textcraft.llm.parsing import extract_json_array, parse_suggestions
from textcraft.llm.types import (
    Operation,
    RephraseStyle,
    ProviderType,
    TextRequest,
    Suggestion,
    TextResponse,
    RequestValidationError,
    LLMError,
    LLMTimeoutError,
    LLMConnectionError,
    LLMAuthenticationError,
    LLMAPIError,
    LLMRateLimitError,
    LLMParseError,
)

__all__ = [
    "LLMProvider",
    "LLMProviderFactory",
    "extract_json_array",
    "parse_suggestions",
    "Operation",
    "RephraseStyle",
    "ProviderType",
    "TextRequest",
    "Suggestion",
    "TextResponse",
    "RequestValidationError",
    "LLMError",
    "LLMTimeoutError",
    "LLMConnectionError",
    "LLMAuthenticationError",
    "LLMAPIError",
    "LLMRateLimitError",
    "LLMParseError",
]
