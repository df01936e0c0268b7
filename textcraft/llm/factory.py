"""
Factory for creating LLM provider instances.

One adapter per ProviderType; the orchestrator builds all of them up front
and selects between them per request.
"""

import logging
from typing import Dict, Optional

import httpx

from textcraft.llm.base import LLMProvider
from textcraft.llm.gemini import GeminiProvider
from textcraft.llm.local_llm import LocalLLMProvider
from textcraft.llm.openrouter import OpenRouterProvider
from textcraft.llm.types import ProviderType

logger = logging.getLogger(__name__)


class LLMProviderFactory:
    """
    Factory for creating LLM provider instances.

    Supports:
    - 'local': Local OpenAI-compatible LLM (LM Studio, Ollama, vLLM)
    - 'gemini': Google Gemini (requires GEMINI_API_KEY at call time)
    - 'openrouter': OpenRouter.ai (requires OPENROUTER_API_KEY at call time)
    """

    _PROVIDERS = {
        ProviderType.LOCAL: LocalLLMProvider,
        ProviderType.GEMINI: GeminiProvider,
        ProviderType.OPENROUTER: OpenRouterProvider,
    }

    @staticmethod
    def create_provider(
        provider_name: ProviderType | str,
        client: Optional[httpx.AsyncClient] = None,
    ) -> LLMProvider:
        """
        Create LLM provider instance.

        Args:
            provider_name: Provider name ('local', 'gemini' or 'openrouter'), case-insensitive
            client: Optional shared HTTP client

        Returns:
            LLMProvider: Initialized provider instance

        Raises:
            ValueError: Invalid provider name
        """
        if isinstance(provider_name, str) and not isinstance(provider_name, ProviderType):
            provider_name = provider_name.lower().strip()

        try:
            provider_type = ProviderType(provider_name)
        except ValueError:
            raise ValueError(
                f"Unknown LLM provider: '{provider_name}'. "
                f"Supported providers: 'local', 'gemini', 'openrouter'"
            ) from None

        logger.info(f"🤖 LLM Factory: Creating {provider_type.value} provider")
        return LLMProviderFactory._PROVIDERS[provider_type](client=client)

    @staticmethod
    def create_all(client: Optional[httpx.AsyncClient] = None) -> Dict[ProviderType, LLMProvider]:
        """Create one adapter per supported provider."""
        return {
            provider_type: LLMProviderFactory.create_provider(provider_type, client=client)
            for provider_type in ProviderType
        }
