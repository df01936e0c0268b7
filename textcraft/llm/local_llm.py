"""
Local LLM provider implementation for OpenAI-compatible endpoints.

Supports any self-hosted service that implements the OpenAI Chat Completions API:
- LM Studio (http://localhost:1234/v1)
- Ollama (http://localhost:11434/v1)
- vLLM (http://localhost:8000/v1)
- LocalAI (http://localhost:8080/v1)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from textcraft.llm.base import LLMProvider, chat_completion_text
from textcraft.llm.prompts import build_chat_messages
from textcraft.llm.types import ProviderType, TextRequest

if TYPE_CHECKING:
    from textcraft.config.providers import ProviderConfig

logger = logging.getLogger(__name__)


class LocalLLMProvider(LLMProvider):
    """
    Local LLM provider for OpenAI-compatible endpoints.

    The loaded model is used regardless of the model name sent, so the
    configured name is informational for most servers.
    """

    provider_type = ProviderType.LOCAL
    display_name = "Local LLM"

    TEMPERATURE = 0.3
    MAX_TOKENS = 1000

    async def invoke(self, request: TextRequest, config: ProviderConfig) -> str:
        """
        Run a non-streaming chat completion against the local server.

        Args:
            request: Text request to build the prompt from
            config: Local provider configuration snapshot

        Returns:
            str: Raw completion text

        Raises:
            LLMTimeoutError: Request timeout
            LLMConnectionError: Server not reachable
            LLMAPIError: Non-2xx status
            LLMParseError: Unexpected response envelope
        """
        url = f"{config.base_url.rstrip('/')}/chat/completions"

        headers = {"Content-Type": "application/json"}
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"

        payload = {
            "model": config.model,
            "messages": build_chat_messages(request),
            "temperature": self.TEMPERATURE,
            "max_tokens": self.MAX_TOKENS,
            "stream": False,
        }

        logger.info(
            f"🤖 LLM [local]: {request.operation.value} request to model '{config.model}' at {config.base_url}"
        )

        try:
            response = await self._post_with_retry(url, headers, payload, config.timeout_s)
        except httpx.HTTPError as e:
            logger.error(f"🤖 LLM [local]: Request failed - {type(e).__name__}: {e}")
            raise self._translate_http_error(e) from e

        content = chat_completion_text(response, self.provider_name, self.display_name)
        logger.debug(f"🔍 LLM [local]: Raw completion: {content[:500]}")
        return content

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=0.25, min=0.25, max=2),
        retry=retry_if_exception_type(httpx.ConnectError),
        reraise=True,
    )
    async def _post_with_retry(
        self,
        url: str,
        headers: dict,
        payload: dict,
        timeout_s: float,
    ) -> httpx.Response:
        """
        POST with one retry when the connection is refused (server still loading).

        Raises:
            httpx.HTTPStatusError: Non-2xx status code
            httpx.TimeoutException: Timeout
            httpx.RequestError: Connection error
        """
        response = await self.client.post(
            url,
            headers=headers,
            json=payload,
            timeout=timeout_s,
        )
        response.raise_for_status()
        return response

    async def health_check(self, config: ProviderConfig) -> bool:
        """
        Check if the local endpoint is available via GET /models.

        Returns:
            bool: True if endpoint is healthy, False otherwise
        """
        try:
            url = f"{config.base_url.rstrip('/')}/models"
            headers = {}
            if config.api_key:
                headers["Authorization"] = f"Bearer {config.api_key}"

            response = await self.client.get(url, headers=headers, timeout=10.0)
            response.raise_for_status()

            logger.info("🤖 LLM [local]: Health check passed")
            return True

        except httpx.HTTPError as e:
            logger.warning(f"🤖 LLM [local]: Health check failed - {e}")
            return False
