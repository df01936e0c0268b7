"""
Orchestrator Configuration Module

Cache, rate-limit and debounce tuning for the request orchestration core.
Loaded from environment variables with fallback defaults.
"""

import os
from dataclasses import dataclass


@dataclass
class OrchestratorConfig:
    """Tuning knobs for LLMService and TextProcessor."""

    # Response cache: bounded LRU with a fixed TTL from insertion
    cache_max_entries: int = 100
    cache_ttl_s: float = 3600.0

    # Token bucket: burst of `rate_capacity`, sustained `rate_refill_per_s`
    rate_capacity: float = 10.0
    rate_refill_per_s: float = 2.0

    # Quiet period before a debounced request fires
    debounce_delay_s: float = 0.5

    def validate(self) -> None:
        """Validate configuration values."""
        if self.cache_max_entries < 1:
            raise ValueError("cache_max_entries must be at least 1")
        if self.cache_ttl_s <= 0:
            raise ValueError("cache_ttl_s must be positive")
        if self.rate_capacity < 1:
            raise ValueError("rate_capacity must be at least 1")
        if self.rate_refill_per_s <= 0:
            raise ValueError("rate_refill_per_s must be positive")
        if self.debounce_delay_s < 0:
            raise ValueError("debounce_delay_s must not be negative")


def load_orchestrator_config() -> OrchestratorConfig:
    """
    Load orchestrator configuration from environment variables.

    Environment Variables:
        TEXTCRAFT_CACHE_MAX_ENTRIES: Max cached responses (default: 100)
        TEXTCRAFT_CACHE_TTL_S: Cache entry lifetime in seconds (default: 3600)
        TEXTCRAFT_RATE_CAPACITY: Token bucket size (default: 10)
        TEXTCRAFT_RATE_REFILL_PER_S: Tokens added per second (default: 2)
        TEXTCRAFT_DEBOUNCE_MS: Debounce quiet period in ms (default: 500)

    Returns:
        OrchestratorConfig with values loaded from environment or defaults
    """
    config = OrchestratorConfig(
        cache_max_entries=int(os.getenv('TEXTCRAFT_CACHE_MAX_ENTRIES', '100')),
        cache_ttl_s=float(os.getenv('TEXTCRAFT_CACHE_TTL_S', '3600')),
        rate_capacity=float(os.getenv('TEXTCRAFT_RATE_CAPACITY', '10')),
        rate_refill_per_s=float(os.getenv('TEXTCRAFT_RATE_REFILL_PER_S', '2')),
        debounce_delay_s=int(os.getenv('TEXTCRAFT_DEBOUNCE_MS', '500')) / 1000.0,
    )

    config.validate()
    return config


# Global singleton instance
_orchestrator_config: OrchestratorConfig | None = None


def get_orchestrator_config() -> OrchestratorConfig:
    """Get the orchestrator configuration, loading it from the environment on first call."""
    global _orchestrator_config

    if _orchestrator_config is None:
        _orchestrator_config = load_orchestrator_config()
    return _orchestrator_config


def reset_orchestrator_config() -> None:
    """Drop the cached configuration (for testing)."""
    global _orchestrator_config
    _orchestrator_config = None
