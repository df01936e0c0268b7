"""
Unit tests for Google Gemini provider.

Tests generateContent requests, credential checks, error translation and
response extraction.
"""

import pytest
import httpx
from unittest.mock import AsyncMock, patch

from textcraft.config.providers import ProviderConfig
from textcraft.llm.gemini import GeminiProvider
from textcraft.llm.types import (
    Operation,
    ProviderType,
    TextRequest,
    LLMAPIError,
    LLMAuthenticationError,
    LLMConnectionError,
    LLMParseError,
    LLMTimeoutError,
)

BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
MODEL = "gemini-1.5-flash-latest"
GENERATE_URL = f"{BASE_URL}/models/{MODEL}:generateContent"


def _config(api_key: str = "test_gemini_key") -> ProviderConfig:
    return ProviderConfig(
        provider=ProviderType.GEMINI,
        base_url=BASE_URL,
        model=MODEL,
        api_key=api_key,
        timeout_s=30.0,
    )


def _request() -> TextRequest:
    return TextRequest(text="i am go home", operation=Operation.REPHRASE, style="formal")


def _candidate(text: str) -> httpx.Response:
    return httpx.Response(
        200,
        json={"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]},
        request=httpx.Request("POST", GENERATE_URL),
    )


# ============================================================
# Request Tests
# ============================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_gemini_invoke_success():
    """Test Gemini provider returns the first candidate's text"""
    # ARRANGE
    provider = GeminiProvider()
    content = '```json\n[{"text": "I am going home.", "confidence": 0.9, "type": "rephrasing"}]\n```'

    with patch.object(provider.client, "post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = _candidate(content)

        # ACT
        result = await provider.invoke(_request(), _config())

    # ASSERT
    assert result == content

    args, kwargs = mock_post.call_args
    assert args[0] == GENERATE_URL
    assert kwargs["headers"]["x-goog-api-key"] == "test_gemini_key"
    assert kwargs["timeout"] == 30.0

    payload = kwargs["json"]
    assert payload["generationConfig"] == {
        "temperature": 0.3,
        "topK": 40,
        "topP": 0.95,
        "maxOutputTokens": 1024,
    }
    assert len(payload["safetySettings"]) == 4
    prompt = payload["contents"][0]["parts"][0]["text"]
    assert "formal style" in prompt
    assert "i am go home" in prompt


@pytest.mark.unit
@pytest.mark.asyncio
async def test_gemini_missing_key_fails_before_network():
    """Test missing API key raises LLMAuthenticationError without a request"""
    # ARRANGE
    provider = GeminiProvider()

    with patch.object(provider.client, "post", new_callable=AsyncMock) as mock_post:
        # ACT & ASSERT
        with pytest.raises(LLMAuthenticationError) as exc_info:
            await provider.invoke(_request(), _config(api_key=""))

    assert str(exc_info.value) == "Gemini API key not configured"
    mock_post.assert_not_called()


# ============================================================
# Error Handling Tests
# ============================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_gemini_rejected_key():
    """Test 403 becomes LLMAuthenticationError"""
    # ARRANGE
    provider = GeminiProvider()
    response = httpx.Response(
        403,
        json={"error": {"code": 403, "message": "API key not valid", "status": "PERMISSION_DENIED"}},
        request=httpx.Request("POST", GENERATE_URL),
    )

    with patch.object(provider.client, "post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = response

        # ACT & ASSERT
        with pytest.raises(LLMAuthenticationError) as exc_info:
            await provider.invoke(_request(), _config())

    assert "API key not valid" in str(exc_info.value)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_gemini_api_error():
    """Test 400 becomes LLMAPIError with status and detail"""
    # ARRANGE
    provider = GeminiProvider()
    response = httpx.Response(
        400,
        json={"error": {"code": 400, "message": "Invalid argument"}},
        request=httpx.Request("POST", GENERATE_URL),
    )

    with patch.object(provider.client, "post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = response

        # ACT & ASSERT
        with pytest.raises(LLMAPIError) as exc_info:
            await provider.invoke(_request(), _config())

    assert str(exc_info.value) == "API Error: 400 - Invalid argument"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_gemini_api_error_without_json_body():
    """Test non-JSON error bodies fall back to the reason phrase"""
    # ARRANGE
    provider = GeminiProvider()
    response = httpx.Response(
        503,
        text="upstream unavailable",
        request=httpx.Request("POST", GENERATE_URL),
    )

    with patch.object(provider.client, "post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = response

        # ACT & ASSERT
        with pytest.raises(LLMAPIError) as exc_info:
            await provider.invoke(_request(), _config())

    assert str(exc_info.value) == "API Error: 503 - Service Unavailable"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_gemini_timeout():
    """Test httpx timeout becomes LLMTimeoutError"""
    # ARRANGE
    provider = GeminiProvider()

    with patch.object(provider.client, "post", new_callable=AsyncMock) as mock_post:
        mock_post.side_effect = httpx.ConnectTimeout("timed out")

        # ACT & ASSERT
        with pytest.raises(LLMTimeoutError):
            await provider.invoke(_request(), _config())


@pytest.mark.unit
@pytest.mark.asyncio
async def test_gemini_network_error():
    """Test DNS/connection failures become LLMConnectionError"""
    # ARRANGE
    provider = GeminiProvider()

    with patch.object(provider.client, "post", new_callable=AsyncMock) as mock_post:
        mock_post.side_effect = httpx.ConnectError("Name or service not known")

        # ACT & ASSERT
        with pytest.raises(LLMConnectionError) as exc_info:
            await provider.invoke(_request(), _config())

    assert "Gemini" in str(exc_info.value)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_gemini_blocked_candidate():
    """Test a response without candidate text becomes LLMParseError"""
    # ARRANGE
    provider = GeminiProvider()
    response = httpx.Response(
        200,
        json={"promptFeedback": {"blockReason": "SAFETY"}},
        request=httpx.Request("POST", GENERATE_URL),
    )

    with patch.object(provider.client, "post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = response

        # ACT & ASSERT
        with pytest.raises(LLMParseError):
            await provider.invoke(_request(), _config())


# ============================================================
# Health Check Tests
# ============================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_gemini_health_check_without_key():
    """Test health check is False without a key and makes no request"""
    # ARRANGE
    provider = GeminiProvider()

    with patch.object(provider.client, "get", new_callable=AsyncMock) as mock_get:
        # ACT
        is_healthy = await provider.health_check(_config(api_key=""))

    # ASSERT
    assert is_healthy is False
    mock_get.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_gemini_health_check_success():
    """Test health check looks up the configured model"""
    # ARRANGE
    provider = GeminiProvider()
    response = httpx.Response(
        200,
        json={"name": f"models/{MODEL}"},
        request=httpx.Request("GET", f"{BASE_URL}/models/{MODEL}"),
    )

    with patch.object(provider.client, "get", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = response

        # ACT
        is_healthy = await provider.health_check(_config())

    # ASSERT
    assert is_healthy is True
    assert mock_get.call_args.args[0] == f"{BASE_URL}/models/{MODEL}"
