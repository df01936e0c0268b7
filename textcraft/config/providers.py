"""
Provider Configuration Module

Endpoint, credential, model and timeout for every LLM backend, plus the
operating mode (primary provider) and fallback target.

Architecture:
- Environment defaults (this module) → LLMService snapshot per request
- Settings changes replace the whole ProviderSettings object; nothing is
  mutated in place, so an in-flight request keeps the view it started with.
"""

import os
from dataclasses import dataclass, field, replace
from typing import Dict, Optional

from textcraft.llm.types import ProviderType


DEFAULT_LOCAL_BASE_URL = "http://localhost:1234/v1"
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

DEFAULT_LOCAL_MODEL = "local-model"
DEFAULT_GEMINI_MODEL = "gemini-1.5-flash-latest"
DEFAULT_OPENROUTER_MODEL = "openai/gpt-4o-mini"

DEFAULT_CLOUD_TIMEOUT_S = 30.0
DEFAULT_LOCAL_TIMEOUT_S = 60.0

# Self-hosted servers run without a key
_KEYLESS_PROVIDERS = {ProviderType.LOCAL}


@dataclass(frozen=True)
class ProviderConfig:
    """Connection settings for a single backend."""

    provider: ProviderType
    base_url: str
    model: str
    api_key: str = ""
    timeout_s: float = DEFAULT_CLOUD_TIMEOUT_S

    @property
    def requires_api_key(self) -> bool:
        return self.provider not in _KEYLESS_PROVIDERS

    @property
    def has_credentials(self) -> bool:
        """True when the provider can be called with the current key."""
        return not self.requires_api_key or bool(self.api_key)

    @property
    def requires_network(self) -> bool:
        return self.provider not in _KEYLESS_PROVIDERS

    def validate(self) -> None:
        if not self.base_url:
            raise ValueError(f"{self.provider.value}: base_url is required")
        if not self.model:
            raise ValueError(f"{self.provider.value}: model is required")
        if self.timeout_s <= 0:
            raise ValueError(f"{self.provider.value}: timeout_s must be positive")

    def __repr__(self) -> str:
        # Keep keys out of logs and tracebacks
        return (
            f"ProviderConfig(provider={self.provider.value!r}, base_url={self.base_url!r}, "
            f"model={self.model!r}, api_key={'***' if self.api_key else ''!r}, "
            f"timeout_s={self.timeout_s})"
        )


@dataclass(frozen=True)
class ProviderSettings:
    """
    Complete provider configuration held by the orchestrator.

    `mode` is the primary provider. `fallback` is tried once when the
    primary fails, provided it differs from the primary and has credentials.
    """

    mode: ProviderType = ProviderType.LOCAL
    fallback: Optional[ProviderType] = ProviderType.GEMINI
    providers: Dict[ProviderType, ProviderConfig] = field(default_factory=dict)

    def config_for(self, provider: ProviderType) -> Optional[ProviderConfig]:
        return self.providers.get(provider)

    @property
    def primary(self) -> ProviderConfig:
        config = self.providers.get(self.mode)
        if config is None:
            raise ValueError(f"No configuration for primary provider '{self.mode.value}'")
        return config

    @property
    def fallback_config(self) -> Optional[ProviderConfig]:
        """Fallback target, or None when absent or lacking credentials."""
        if self.fallback is None or self.fallback == self.mode:
            return None
        config = self.providers.get(self.fallback)
        if config is None or not config.has_credentials:
            return None
        return config

    def with_provider(
        self,
        provider: ProviderType | str,
        api_keys: Optional[Dict[str, str]] = None,
    ) -> "ProviderSettings":
        """
        Return new settings with the mode switched and API keys merged.

        Args:
            provider: New primary provider
            api_keys: Mapping of provider name -> API key; empty values are ignored

        Raises:
            ValueError: Unknown provider name
        """
        mode = ProviderType(provider)
        providers = dict(self.providers)
        for name, key in (api_keys or {}).items():
            if not key:
                continue
            provider_type = ProviderType(name)
            if provider_type in providers:
                providers[provider_type] = replace(providers[provider_type], api_key=key)

        new_settings = ProviderSettings(mode=mode, fallback=self.fallback, providers=providers)
        new_settings.validate()
        return new_settings

    def validate(self) -> None:
        if self.mode not in self.providers:
            raise ValueError(f"No configuration for primary provider '{self.mode.value}'")
        for config in self.providers.values():
            config.validate()


def _parse_provider(value: str) -> ProviderType:
    value = value.strip().lower()
    # Legacy alias for the local backend
    if value == "lmstudio":
        return ProviderType.LOCAL
    return ProviderType(value)


def load_provider_settings() -> ProviderSettings:
    """
    Load provider settings from environment variables.

    Environment Variables:
        DEFAULT_LLM_PROVIDER: Primary provider (local, gemini, openrouter) [default: local]
        LLM_FALLBACK_PROVIDER: Fallback provider or 'none' [default: gemini]
        LM_STUDIO_URL: Local OpenAI-compatible endpoint [default: http://localhost:1234/v1]
        LOCAL_LLM_MODEL: Local model name [default: local-model]
        LOCAL_LLM_TIMEOUT_S: Local request timeout [default: 60]
        GEMINI_API_KEY / GEMINI_BASE_URL / GEMINI_MODEL
        OPENROUTER_API_KEY / OPENROUTER_BASE_URL / OPENROUTER_MODEL
        LLM_TIMEOUT_S: Cloud request timeout [default: 30]

    Returns:
        Validated ProviderSettings
    """
    cloud_timeout = float(os.getenv("LLM_TIMEOUT_S", str(DEFAULT_CLOUD_TIMEOUT_S)))

    providers = {
        ProviderType.LOCAL: ProviderConfig(
            provider=ProviderType.LOCAL,
            base_url=os.getenv("LM_STUDIO_URL", DEFAULT_LOCAL_BASE_URL),
            model=os.getenv("LOCAL_LLM_MODEL", DEFAULT_LOCAL_MODEL),
            timeout_s=float(os.getenv("LOCAL_LLM_TIMEOUT_S", str(DEFAULT_LOCAL_TIMEOUT_S))),
        ),
        ProviderType.GEMINI: ProviderConfig(
            provider=ProviderType.GEMINI,
            base_url=os.getenv("GEMINI_BASE_URL", DEFAULT_GEMINI_BASE_URL),
            model=os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
            api_key=os.getenv("GEMINI_API_KEY", ""),
            timeout_s=cloud_timeout,
        ),
        ProviderType.OPENROUTER: ProviderConfig(
            provider=ProviderType.OPENROUTER,
            base_url=os.getenv("OPENROUTER_BASE_URL", DEFAULT_OPENROUTER_BASE_URL),
            model=os.getenv("OPENROUTER_MODEL", DEFAULT_OPENROUTER_MODEL),
            api_key=os.getenv("OPENROUTER_API_KEY", ""),
            timeout_s=cloud_timeout,
        ),
    }

    fallback_name = os.getenv("LLM_FALLBACK_PROVIDER", ProviderType.GEMINI.value)
    fallback = None if fallback_name.strip().lower() in ("", "none") else _parse_provider(fallback_name)

    settings = ProviderSettings(
        mode=_parse_provider(os.getenv("DEFAULT_LLM_PROVIDER", ProviderType.LOCAL.value)),
        fallback=fallback,
        providers=providers,
    )
    settings.validate()
    return settings
