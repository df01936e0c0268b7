"""
Type definitions for the text-processing LLM layer.

Requests, normalized responses, provider identifiers and the exception
hierarchy raised by provider adapters.
"""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Operation(str, Enum):
    """Text operations supported by every provider."""

    GRAMMAR_CHECK = "grammar-check"
    REPHRASE = "rephrase"


class RephraseStyle(str, Enum):
    """Target styles for rephrasing."""

    FORMAL = "formal"
    CASUAL = "casual"
    CONCISE = "concise"
    DETAILED = "detailed"


class ProviderType(str, Enum):
    """Supported LLM backends."""

    LOCAL = "local"
    GEMINI = "gemini"
    OPENROUTER = "openrouter"


SUPPORTED_LANGUAGES = ("en", "es", "fr", "de", "it", "pt", "nl", "ru", "zh", "ja", "ko")

DEFAULT_CONFIDENCE = 0.8
DEFAULT_SUGGESTION_TYPE = "unknown"


class TextRequest(BaseModel):
    """A single grammar-check or rephrase request."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Content to process")
    operation: Operation = Field(..., description="Requested operation")
    style: Optional[RephraseStyle] = Field(default=None, description="Rephrase style (rephrase only)")
    language: Optional[str] = Field(default="en", description="Language code (grammar check only)")

    @property
    def cache_key(self) -> str:
        """Deterministic fingerprint used as the response cache key."""
        style = self.style.value if self.style else ""
        return f"{self.operation.value}:{style}:{self.language or ''}:{self.text}"


class Suggestion(BaseModel):
    """One replacement offered by a provider."""

    model_config = ConfigDict(frozen=True)

    text: str
    confidence: float = Field(default=DEFAULT_CONFIDENCE, ge=0.0, le=1.0)
    type: str = DEFAULT_SUGGESTION_TYPE


class TextResponse(BaseModel):
    """
    Normalized, provider-agnostic response.

    When `error` is set the request failed and `suggestions` is empty.
    Cached responses are shared between callers, so suggestions are a tuple.
    """

    model_config = ConfigDict(frozen=True)

    original: str
    suggestions: Tuple[Suggestion, ...] = ()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, original: str, error: str) -> "TextResponse":
        return cls(original=original, suggestions=(), error=error)


class RequestValidationError(ValueError):
    """Malformed caller input (e.g. empty text). Raised before any I/O."""
    pass


class LLMError(Exception):
    """Base exception for LLM provider errors."""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class LLMTimeoutError(LLMError):
    """Provider did not respond within the configured timeout."""
    pass


class LLMConnectionError(LLMError):
    """Request dispatched but no response received."""
    pass


class LLMAuthenticationError(LLMError):
    """Credential missing or rejected by the provider."""
    pass


class LLMAPIError(LLMError):
    """Provider responded with a non-success status."""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
    ):
        super().__init__(message, provider=provider)
        self.status_code = status_code
        self.detail = detail


class LLMRateLimitError(LLMAPIError):
    """Provider rejected the request with HTTP 429."""
    pass


class LLMParseError(LLMError):
    """Provider payload could not be reduced to a suggestion list."""
    pass
