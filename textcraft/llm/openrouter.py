"""
OpenRouter.ai LLM provider implementation.

OpenRouter provides access to multiple LLM providers (Anthropic, OpenAI, Google, etc.)
through a unified OpenAI-compatible API with pay-per-use pricing.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from textcraft.llm.base import LLMProvider, chat_completion_text
from textcraft.llm.prompts import build_chat_messages
from textcraft.llm.types import LLMAuthenticationError, ProviderType, TextRequest

if TYPE_CHECKING:
    from textcraft.config.providers import ProviderConfig

logger = logging.getLogger(__name__)


class OpenRouterProvider(LLMProvider):
    """OpenRouter.ai chat completions adapter (non-streaming)."""

    provider_type = ProviderType.OPENROUTER
    display_name = "OpenRouter"

    TEMPERATURE = 0.3
    MAX_TOKENS = 1024

    async def invoke(self, request: TextRequest, config: ProviderConfig) -> str:
        """
        Run a chat completion on OpenRouter.

        Raises:
            LLMAuthenticationError: No API key configured, or key rejected (401/403)
            LLMRateLimitError: Rate limit (429 status)
            LLMTimeoutError: Request timeout
            LLMConnectionError: Network error
            LLMAPIError: Other non-2xx status
            LLMParseError: Unexpected response envelope
        """
        if not config.api_key:
            raise LLMAuthenticationError("OpenRouter API key not configured", provider=self.provider_name)

        url = f"{config.base_url.rstrip('/')}/chat/completions"

        headers = {
            "Authorization": f"Bearer {config.api_key}",
            "HTTP-Referer": "https://textcraft.local",
            "X-Title": "Textcraft",
            "Content-Type": "application/json",
        }

        payload = {
            "model": config.model,
            "messages": build_chat_messages(request),
            "temperature": self.TEMPERATURE,
            "max_tokens": self.MAX_TOKENS,
            "stream": False,
        }

        logger.info(f"🤖 LLM [openrouter]: {request.operation.value} request to model '{config.model}'")

        try:
            response = await self.client.post(
                url,
                headers=headers,
                json=payload,
                timeout=config.timeout_s,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"🤖 LLM [openrouter]: Request failed - {type(e).__name__}: {e}")
            raise self._translate_http_error(e) from e

        return chat_completion_text(response, self.provider_name, self.display_name)

    async def health_check(self, config: ProviderConfig) -> bool:
        """
        Check if OpenRouter API is available and the key is accepted.

        Returns:
            bool: True if API is healthy, False otherwise
        """
        if not config.api_key:
            return False

        try:
            url = f"{config.base_url.rstrip('/')}/models"
            headers = {"Authorization": f"Bearer {config.api_key}"}

            response = await self.client.get(url, headers=headers, timeout=10.0)
            response.raise_for_status()

            logger.info("🤖 LLM [openrouter]: Health check passed")
            return True

        except httpx.HTTPError as e:
            logger.error(f"🤖 LLM [openrouter]: Health check failed - {e}")
            return False
