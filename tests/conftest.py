"""
Pytest configuration and shared fixtures for Textcraft tests
"""
import pytest
import asyncio
import os
from typing import AsyncGenerator, Dict, List, Optional
from httpx import AsyncClient, ASGITransport

import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from textcraft.config.orchestrator import OrchestratorConfig
from textcraft.config.providers import ProviderConfig, ProviderSettings
from textcraft.llm.base import LLMProvider
from textcraft.llm.types import ProviderType
from textcraft.services.llm_service import LLMService
from textcraft.services.rate_limiter import TokenBucketRateLimiter
from textcraft.services.response_cache import ResponseCache


GRAMMAR_RESPONSE = '[{"text": "He goes to school", "confidence": 0.95, "type": "grammar"}]'


# ============================================================
# Fake Clock
# ============================================================

class FakeClock:
    """Monotonic clock whose sleep advances time instantly."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


# ============================================================
# Fake Providers
# ============================================================

class FakeProvider(LLMProvider):
    """
    In-memory provider adapter.

    Returns `raw` (or raises `error`) and records every call.
    """

    def __init__(
        self,
        provider_type: ProviderType,
        raw: str = GRAMMAR_RESPONSE,
        error: Optional[Exception] = None,
        delay_s: float = 0.0,
        healthy: bool = True,
    ):
        # No HTTP client: nothing leaves the process
        self.client = None
        self.provider_type = provider_type
        self.display_name = provider_type.value
        self.raw = raw
        self.error = error
        self.delay_s = delay_s
        self.healthy = healthy
        self.calls = []
        self.closed = False

    async def invoke(self, request, config) -> str:
        self.calls.append((request, config))
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.error is not None:
            raise self.error
        return self.raw

    async def health_check(self, config) -> bool:
        return self.healthy

    async def close(self):
        self.closed = True


@pytest.fixture
def fake_providers() -> Dict[ProviderType, FakeProvider]:
    return {provider_type: FakeProvider(provider_type) for provider_type in ProviderType}


# ============================================================
# Settings & Service
# ============================================================

def make_settings(
    mode: ProviderType = ProviderType.LOCAL,
    fallback: Optional[ProviderType] = ProviderType.GEMINI,
    gemini_key: str = "gemini-test-key",
    openrouter_key: str = "",
    timeout_s: float = 5.0,
) -> ProviderSettings:
    """Provider settings pointing at unroutable test endpoints."""
    return ProviderSettings(
        mode=mode,
        fallback=fallback,
        providers={
            ProviderType.LOCAL: ProviderConfig(
                provider=ProviderType.LOCAL,
                base_url="http://localhost:1234/v1",
                model="local-model",
                timeout_s=timeout_s,
            ),
            ProviderType.GEMINI: ProviderConfig(
                provider=ProviderType.GEMINI,
                base_url="https://generativelanguage.test/v1beta",
                model="gemini-1.5-flash-latest",
                api_key=gemini_key,
                timeout_s=timeout_s,
            ),
            ProviderType.OPENROUTER: ProviderConfig(
                provider=ProviderType.OPENROUTER,
                base_url="https://openrouter.test/api/v1",
                model="openai/gpt-4o-mini",
                api_key=openrouter_key,
                timeout_s=timeout_s,
            ),
        },
    )


@pytest.fixture
def settings() -> ProviderSettings:
    return make_settings()


@pytest.fixture
def rate_limiter(fake_clock) -> TokenBucketRateLimiter:
    return TokenBucketRateLimiter(
        capacity=10,
        refill_rate_per_s=2,
        time_fn=fake_clock,
        sleep_func=fake_clock.sleep,
    )


@pytest.fixture
def cache(fake_clock) -> ResponseCache:
    return ResponseCache(max_entries=100, ttl_s=3600, time_fn=fake_clock)


@pytest.fixture
def llm_service(settings, fake_providers, cache, rate_limiter) -> LLMService:
    """
    Orchestrator wired to fake providers, a fake clock cache and limiter.

    Usage:
        async def test_something(llm_service, fake_providers):
            fake_providers[ProviderType.LOCAL].raw = "[]"
            response = await llm_service.check_grammar("text")
    """
    return LLMService(
        settings,
        config=OrchestratorConfig(),
        cache=cache,
        rate_limiter=rate_limiter,
        providers=fake_providers,
    )


# ============================================================
# FastAPI Test Client
# ============================================================

@pytest.fixture
async def test_client(llm_service) -> AsyncGenerator[AsyncClient, None]:
    """
    FastAPI test client using httpx AsyncClient

    Usage:
        async def test_endpoint(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from textcraft.api.server import create_app

    app = create_app(llm_service)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client
