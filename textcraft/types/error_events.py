"""
Textcraft Error Event System

Purpose: Error codes for classified LLM failures and the event emitted to
observers when a request falls back or fails.

Key Features:
- Stable error codes (ErrorCode enum) rendered into TextResponse.error
- User-friendly messages (for frontend display)
- Technical details (for server logs)
- Severity levels (warning, error, critical)
- Retry suggestions

Design Pattern: Observer Pattern - LLMService emits events to an optional callback
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorCode(str, Enum):
    """
    Error codes surfaced to callers as the prefix of TextResponse.error.

    Categories:
    - General: unknown and validation failures
    - API: transport and provider status failures
    - LLM: payload and availability failures
    """

    # General errors
    UNKNOWN = "ERR_UNKNOWN"
    VALIDATION = "ERR_VALIDATION"

    # API errors
    API = "ERR_API"
    NETWORK = "ERR_NETWORK"
    TIMEOUT = "ERR_TIMEOUT"
    AUTH = "ERR_AUTH"
    RATE_LIMIT = "ERR_RATE_LIMIT"

    # LLM errors
    LLM_PARSE = "ERR_LLM_PARSE"
    LLM_INVALID_RESPONSE = "ERR_LLM_RESPONSE"
    LLM_NOT_AVAILABLE = "ERR_LLM_UNAVAILABLE"


def format_error(code: ErrorCode, message: str) -> str:
    """Render an error for TextResponse.error, e.g. 'ERR_AUTH: Gemini API key not configured'."""
    return f"{code.value}: {message}"


class ServiceErrorEvent(BaseModel):
    """
    Error event emitted by LLMService.

    Attributes:
        event_type: Always "service_error" for frontend routing
        provider: Provider that produced the error ("local", "gemini", "openrouter")
        error_code: Classified error code
        user_message: Human-readable message for frontend display
        technical_details: Detailed error info for server logs and debugging
        severity: Error severity level ("warning", "error", "critical")
        fallback_triggered: Whether a fallback provider is being tried
        retry_suggested: Whether user should retry the operation
        timestamp: When the error occurred

    Example:
        ```python
        event = ServiceErrorEvent(
            provider="local",
            error_code=ErrorCode.NETWORK,
            user_message="Local AI unavailable. Using cloud AI as fallback.",
            technical_details="No response received from local: Connection refused",
            severity="warning",
            fallback_triggered=True,
        )
        ```
    """

    model_config = ConfigDict(use_enum_values=True)

    event_type: Literal["service_error"] = "service_error"
    provider: str = Field(..., description="Provider that encountered the error")
    error_code: ErrorCode = Field(..., description="Classified error code")
    user_message: str = Field(..., min_length=1, max_length=500)
    technical_details: str = Field(..., min_length=1, max_length=2000)
    severity: str = Field(default="error", pattern="^(warning|error|critical)$")
    fallback_triggered: bool = False
    retry_suggested: bool = True
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
