"""
Classify provider failures into the error taxonomy surfaced in TextResponse.error.

Adapters already raise the LLMError hierarchy; raw httpx/asyncio exceptions
are accepted too so that nothing unexpected escapes unclassified.
"""

import asyncio
from typing import Optional, Tuple

import httpx

from textcraft.llm.types import (
    LLMAPIError,
    LLMAuthenticationError,
    LLMConnectionError,
    LLMParseError,
    LLMTimeoutError,
)
from textcraft.types.error_events import ErrorCode, format_error

# Failures worth a second attempt on the fallback provider
FALLBACK_ERRORS = (
    LLMAuthenticationError,
    LLMConnectionError,
    LLMTimeoutError,
    LLMAPIError,
    LLMParseError,
)


def classify_error(error: BaseException, provider: Optional[str] = None) -> Tuple[ErrorCode, str]:
    """
    Map an exception to (ErrorCode, message).

    Messages name the provider where the failure is provider-specific.
    """
    name = getattr(error, "provider", None) or provider or "provider"

    if isinstance(error, LLMAuthenticationError):
        return ErrorCode.AUTH, str(error)
    if isinstance(error, LLMTimeoutError):
        return ErrorCode.TIMEOUT, str(error)
    if isinstance(error, LLMConnectionError):
        return ErrorCode.NETWORK, str(error)
    if isinstance(error, LLMAPIError):
        return ErrorCode.API, str(error)
    if isinstance(error, LLMParseError):
        return ErrorCode.LLM_PARSE, str(error)

    if isinstance(error, (asyncio.TimeoutError, httpx.TimeoutException)):
        return ErrorCode.TIMEOUT, f"{name} request timeout"
    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        return ErrorCode.API, f"API Error: {status} - {error.response.reason_phrase}"
    if isinstance(error, httpx.RequestError):
        return ErrorCode.NETWORK, f"No response received from {name}"

    return ErrorCode.UNKNOWN, str(error) or "Unknown error occurred"


def should_fallback(error: BaseException) -> bool:
    """True for the failure classes that justify trying the fallback provider."""
    return isinstance(error, FALLBACK_ERRORS) or isinstance(
        error, (asyncio.TimeoutError, httpx.HTTPError)
    )


def describe_error(error: BaseException, provider: Optional[str] = None) -> str:
    """Classified error rendered as '<code>: <message>'."""
    code, message = classify_error(error, provider)
    return format_error(code, message)
