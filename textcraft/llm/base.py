"""
Abstract base class for LLM providers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

import httpx

from textcraft.llm.types import (
    LLMAPIError,
    LLMAuthenticationError,
    LLMConnectionError,
    LLMError,
    LLMParseError,
    LLMRateLimitError,
    LLMTimeoutError,
    ProviderType,
    TextRequest,
)

if TYPE_CHECKING:
    from textcraft.config.providers import ProviderConfig


class LLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    Adapters are stateless apart from a pooled HTTP client: endpoint, key,
    model and timeout arrive with every call as a ProviderConfig snapshot.
    """

    provider_type: ProviderType
    display_name: str = "LLM"

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        """
        Initialize LLM provider.

        Args:
            client: Shared HTTP client (a new one is created when omitted)
        """
        self.client = client or httpx.AsyncClient(follow_redirects=True)

    @abstractmethod
    async def invoke(self, request: TextRequest, config: ProviderConfig) -> str:
        """
        Send the prompt for `request` and return the model's raw text output.

        Args:
            request: Validated text request
            config: Provider configuration snapshot

        Returns:
            str: Raw completion text (JSON array possibly wrapped in prose)

        Raises:
            LLMAuthenticationError: Missing or rejected credentials
            LLMTimeoutError: No response within config.timeout_s
            LLMConnectionError: Network/connection error
            LLMAPIError: Non-success HTTP status
            LLMParseError: Unexpected response envelope
        """
        pass

    @abstractmethod
    async def health_check(self, config: ProviderConfig) -> bool:
        """
        Check if provider is available and responding.

        Returns:
            bool: True if provider is healthy, False otherwise
        """
        pass

    @property
    def provider_name(self) -> str:
        """Return provider name (for logging and error messages)."""
        return self.provider_type.value

    def _translate_http_error(self, error: Exception) -> LLMError:
        """Map an httpx failure onto the LLMError hierarchy."""
        name = self.display_name

        if isinstance(error, httpx.TimeoutException):
            return LLMTimeoutError(f"{name} request timeout: {error}", provider=self.provider_name)

        if isinstance(error, httpx.HTTPStatusError):
            status = error.response.status_code
            detail = _error_detail(error.response)
            if status in (401, 403):
                return LLMAuthenticationError(
                    f"{name} authentication failed ({status}): {detail}",
                    provider=self.provider_name,
                )
            error_cls = LLMRateLimitError if status == 429 else LLMAPIError
            return error_cls(
                f"API Error: {status} - {detail}",
                provider=self.provider_name,
                status_code=status,
                detail=detail,
            )

        if isinstance(error, httpx.RequestError):
            return LLMConnectionError(
                f"No response received from {name}: {error}",
                provider=self.provider_name,
            )

        return LLMError(f"{name} unexpected error: {error}", provider=self.provider_name)

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()


def _error_detail(response: httpx.Response) -> str:
    """Provider-supplied error detail: `error.message`, `error` string, or reason phrase."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error

    return response.reason_phrase or "Unknown error"


def chat_completion_text(response: httpx.Response, provider: str, display_name: str) -> str:
    """
    Extract `choices[0].message.content` from an OpenAI-compatible response.

    Raises:
        LLMParseError: Body is not JSON or lacks the expected fields
    """
    try:
        content = response.json()["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as e:
        raise LLMParseError(
            f"Unexpected {display_name} response format: {e}",
            provider=provider,
        ) from e

    if not isinstance(content, str):
        raise LLMParseError(f"{display_name} returned no message content", provider=provider)
    return content
