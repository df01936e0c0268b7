"""
Google Gemini LLM provider implementation.

Uses the `models/{model}:generateContent` REST endpoint. The API key is sent
in the `x-goog-api-key` header rather than the query string so it never
appears in logged URLs.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from textcraft.llm.base import LLMProvider
from textcraft.llm.prompts import build_single_prompt
from textcraft.llm.types import (
    LLMAuthenticationError,
    LLMParseError,
    ProviderType,
    TextRequest,
)

if TYPE_CHECKING:
    from textcraft.config.providers import ProviderConfig

logger = logging.getLogger(__name__)


class GeminiProvider(LLMProvider):
    """Google Gemini generateContent adapter."""

    provider_type = ProviderType.GEMINI
    display_name = "Gemini"

    GENERATION_CONFIG = {
        "temperature": 0.3,
        "topK": 40,
        "topP": 0.95,
        "maxOutputTokens": 1024,
    }

    SAFETY_SETTINGS = [
        {"category": category, "threshold": "BLOCK_MEDIUM_AND_ABOVE"}
        for category in (
            "HARM_CATEGORY_HARASSMENT",
            "HARM_CATEGORY_HATE_SPEECH",
            "HARM_CATEGORY_SEXUALLY_EXPLICIT",
            "HARM_CATEGORY_DANGEROUS_CONTENT",
        )
    ]

    async def invoke(self, request: TextRequest, config: ProviderConfig) -> str:
        """
        Generate content with Gemini.

        Raises:
            LLMAuthenticationError: No API key configured, or key rejected (401/403)
            LLMRateLimitError: Quota exhausted (429 status)
            LLMTimeoutError: Request timeout
            LLMConnectionError: Network error
            LLMAPIError: Other non-2xx status
            LLMParseError: Unexpected response envelope (e.g. blocked candidate)
        """
        if not config.api_key:
            raise LLMAuthenticationError("Gemini API key not configured", provider=self.provider_name)

        url = f"{config.base_url.rstrip('/')}/models/{config.model}:generateContent"

        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": config.api_key,
        }

        payload = {
            "contents": [{"parts": [{"text": build_single_prompt(request)}]}],
            "generationConfig": self.GENERATION_CONFIG,
            "safetySettings": self.SAFETY_SETTINGS,
        }

        logger.info(f"🤖 LLM [gemini]: {request.operation.value} request to model '{config.model}'")

        try:
            response = await self.client.post(
                url,
                headers=headers,
                json=payload,
                timeout=config.timeout_s,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"🤖 LLM [gemini]: Request failed - {type(e).__name__}: {e}")
            raise self._translate_http_error(e) from e

        try:
            text = response.json()["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise LLMParseError(
                f"Unexpected Gemini response format: {e}",
                provider=self.provider_name,
            ) from e

        if not isinstance(text, str):
            raise LLMParseError("Gemini returned no text content", provider=self.provider_name)
        return text

    async def health_check(self, config: ProviderConfig) -> bool:
        """
        Check that the configured model is reachable with the current key.

        Returns:
            bool: True if the model lookup succeeds
        """
        if not config.api_key:
            return False

        try:
            url = f"{config.base_url.rstrip('/')}/models/{config.model}"
            response = await self.client.get(
                url,
                headers={"x-goog-api-key": config.api_key},
                timeout=10.0,
            )
            response.raise_for_status()

            logger.info("🤖 LLM [gemini]: Health check passed")
            return True

        except httpx.HTTPError as e:
            logger.error(f"🤖 LLM [gemini]: Health check failed - {e}")
            return False
