"""Configuration modules for Textcraft."""

from .orchestrator import (
    OrchestratorConfig,
    get_orchestrator_config,
    load_orchestrator_config,
    reset_orchestrator_config,
)
from .providers import (
    ProviderConfig,
    ProviderSettings,
    load_provider_settings,
)

__all__ = [
    'OrchestratorConfig',
    'get_orchestrator_config',
    'load_orchestrator_config',
    'reset_orchestrator_config',
    'ProviderConfig',
    'ProviderSettings',
    'load_provider_settings',
]
