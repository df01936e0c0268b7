"""
Unit tests for LLM provider factory.
"""

import pytest
import httpx

from textcraft.llm.factory import LLMProviderFactory
from textcraft.llm.gemini import GeminiProvider
from textcraft.llm.local_llm import LocalLLMProvider
from textcraft.llm.openrouter import OpenRouterProvider
from textcraft.llm.types import ProviderType


@pytest.mark.unit
@pytest.mark.parametrize(
    "name, expected",
    [
        ("local", LocalLLMProvider),
        ("gemini", GeminiProvider),
        ("openrouter", OpenRouterProvider),
        (ProviderType.GEMINI, GeminiProvider),
    ],
)
def test_factory_creates_provider(name, expected):
    """Test factory maps provider names to adapters"""
    # ACT
    provider = LLMProviderFactory.create_provider(name)

    # ASSERT
    assert isinstance(provider, expected)


@pytest.mark.unit
def test_factory_case_insensitive():
    """Test factory accepts mixed-case names with whitespace"""
    # ACT
    provider = LLMProviderFactory.create_provider("  Gemini ")

    # ASSERT
    assert isinstance(provider, GeminiProvider)


@pytest.mark.unit
def test_factory_invalid_provider():
    """Test factory raises ValueError for unknown providers"""
    # ACT & ASSERT
    with pytest.raises(ValueError) as exc_info:
        LLMProviderFactory.create_provider("anthropic")

    assert "Unknown LLM provider" in str(exc_info.value)
    assert "'local', 'gemini', 'openrouter'" in str(exc_info.value)


@pytest.mark.unit
def test_factory_create_all_shares_client():
    """Test create_all builds one adapter per provider on a shared client"""
    # ARRANGE
    client = httpx.AsyncClient()

    # ACT
    providers = LLMProviderFactory.create_all(client=client)

    # ASSERT
    assert set(providers) == set(ProviderType)
    assert all(provider.client is client for provider in providers.values())
    assert providers[ProviderType.LOCAL].provider_name == "local"
