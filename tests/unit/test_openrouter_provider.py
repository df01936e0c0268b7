"""
Unit tests for OpenRouter provider.

Tests chat completion requests, headers, credential checks and error handling.
"""

import pytest
import httpx
from unittest.mock import AsyncMock, patch

from textcraft.config.providers import ProviderConfig
from textcraft.llm.openrouter import OpenRouterProvider
from textcraft.llm.types import (
    Operation,
    ProviderType,
    TextRequest,
    LLMAuthenticationError,
    LLMRateLimitError,
    LLMTimeoutError,
)

BASE_URL = "https://openrouter.ai/api/v1"
COMPLETIONS_URL = f"{BASE_URL}/chat/completions"


def _config(api_key: str = "test_key") -> ProviderConfig:
    return ProviderConfig(
        provider=ProviderType.OPENROUTER,
        base_url=BASE_URL,
        model="openai/gpt-4o-mini",
        api_key=api_key,
        timeout_s=30.0,
    )


def _request() -> TextRequest:
    return TextRequest(text="Their going too the park", operation=Operation.GRAMMAR_CHECK)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_openrouter_invoke_success():
    """Test OpenRouter provider sends auth + attribution headers and returns content"""
    # ARRANGE
    provider = OpenRouterProvider()
    response = httpx.Response(
        200,
        json={"choices": [{"message": {"content": '[{"text": "They\'re going to the park"}]'}}]},
        request=httpx.Request("POST", COMPLETIONS_URL),
    )

    with patch.object(provider.client, "post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = response

        # ACT
        result = await provider.invoke(_request(), _config())

    # ASSERT
    assert result == '[{"text": "They\'re going to the park"}]'

    args, kwargs = mock_post.call_args
    assert args[0] == COMPLETIONS_URL
    assert kwargs["headers"]["Authorization"] == "Bearer test_key"
    assert kwargs["headers"]["X-Title"] == "Textcraft"
    assert "HTTP-Referer" in kwargs["headers"]
    assert kwargs["json"]["model"] == "openai/gpt-4o-mini"
    assert kwargs["json"]["stream"] is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_openrouter_missing_key_fails_before_network():
    """Test missing API key raises LLMAuthenticationError without a request"""
    # ARRANGE
    provider = OpenRouterProvider()

    with patch.object(provider.client, "post", new_callable=AsyncMock) as mock_post:
        # ACT & ASSERT
        with pytest.raises(LLMAuthenticationError) as exc_info:
            await provider.invoke(_request(), _config(api_key=""))

    assert "OpenRouter API key not configured" in str(exc_info.value)
    mock_post.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_openrouter_rate_limit():
    """Test 429 becomes LLMRateLimitError"""
    # ARRANGE
    provider = OpenRouterProvider()
    response = httpx.Response(
        429,
        json={"error": {"message": "Rate limit exceeded"}},
        request=httpx.Request("POST", COMPLETIONS_URL),
    )

    with patch.object(provider.client, "post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = response

        # ACT & ASSERT
        with pytest.raises(LLMRateLimitError) as exc_info:
            await provider.invoke(_request(), _config())

    assert str(exc_info.value) == "API Error: 429 - Rate limit exceeded"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_openrouter_timeout():
    """Test timeout is not retried and becomes LLMTimeoutError"""
    # ARRANGE
    provider = OpenRouterProvider()

    with patch.object(provider.client, "post", new_callable=AsyncMock) as mock_post:
        mock_post.side_effect = httpx.ReadTimeout("Request timeout")

        # ACT & ASSERT
        with pytest.raises(LLMTimeoutError):
            await provider.invoke(_request(), _config())

    assert mock_post.call_count == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_openrouter_health_check_failure():
    """Test health check fails on a rejected key"""
    # ARRANGE
    provider = OpenRouterProvider()
    response = httpx.Response(
        401,
        json={"error": {"message": "No auth credentials found"}},
        request=httpx.Request("GET", f"{BASE_URL}/models"),
    )

    with patch.object(provider.client, "get", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = response

        # ACT
        is_healthy = await provider.health_check(_config())

    # ASSERT
    assert is_healthy is False
