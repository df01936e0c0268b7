"""
Tiered Logging Configuration for Textcraft

Provides a flexible logging system with 5 levels:
- TRACE (5): Ultra-verbose debugging (raw provider payloads)
- DEBUG (10): Detailed debugging (cache hits/misses, rate-limit waits)
- INFO (20): Standard operational messages (provider calls, reconfiguration)
- WARN (30): Warnings (recoverable errors, fallbacks)
- ERROR (40): Errors (final request failures)

Environment Variables:
- LOG_LEVEL: Global log level (TRACE, DEBUG, INFO, WARN, ERROR) [default: INFO]
- LOG_LEVEL_LLM: Override for provider adapters and the orchestrator
- LOG_LEVEL_CACHE: Override for the response cache
- LOG_LEVEL_RATELIMIT: Override for the token bucket
- LOG_LEVEL_API: Override for the HTTP boundary

Example Usage:
    from textcraft.config.logging_config import get_logger

    logger = get_logger(__name__)
    logger.trace("🔍 Raw provider payload: %s", payload)
    logger.debug("📦 Cache hit")
    logger.info("✅ Provider responded")
    logger.warning("⚠️ Falling back to gemini")
    logger.error("❌ Request failed: %s", error)
"""

import logging
import os


# Define custom TRACE level (more verbose than DEBUG)
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


def trace(self, message, *args, **kwargs):
    """Log a message with severity 'TRACE'."""
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kwargs)


# Add trace method to Logger class
logging.Logger.trace = trace


# Module name mapping: Python module path → Logical service name
MODULE_NAME_MAP = {
    "textcraft.services.llm_service": "textcraft.llm",
    "textcraft.services.text_processor": "textcraft.llm",
    "textcraft.services.response_cache": "textcraft.cache",
    "textcraft.services.rate_limiter": "textcraft.ratelimit",
    "textcraft.routes.text_routes": "textcraft.api",
    "textcraft.api.server": "textcraft.api",
}

OVERRIDE_AREAS = ["LLM", "CACHE", "RATELIMIT", "API"]


def get_log_level(module_name: str, default: str = "INFO") -> int:
    """
    Get the log level for a module, checking both module-specific and global env vars.

    Priority:
    1. Area-specific env var (LOG_LEVEL_LLM, LOG_LEVEL_CACHE, etc.)
    2. Global LOG_LEVEL env var
    3. Default level (INFO)

    Args:
        module_name: Python module name (e.g., "textcraft.services.response_cache")
        default: Default log level if no env vars set

    Returns:
        Numeric log level (5=TRACE, 10=DEBUG, 20=INFO, 30=WARN, 40=ERROR)
    """
    logical_name = MODULE_NAME_MAP.get(module_name)

    if logical_name:
        area = logical_name.split(".")[-1].upper()
        area_level = os.getenv(f"LOG_LEVEL_{area}")
        if area_level:
            return _parse_log_level(area_level)

    global_level = os.getenv("LOG_LEVEL")
    if global_level:
        return _parse_log_level(global_level)

    return _parse_log_level(default)


def _parse_log_level(level_str: str) -> int:
    """
    Parse log level string to numeric value.

    Args:
        level_str: Log level name (TRACE, DEBUG, INFO, WARN, ERROR)

    Returns:
        Numeric log level
    """
    level_map = {
        "TRACE": TRACE,
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARN": logging.WARNING,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
    }
    return level_map.get(level_str.upper(), logging.INFO)


def configure_logging(default_level: str = "INFO") -> None:
    """
    Configure logging system with tiered levels and per-area control.

    This should be called once at application startup (e.g., in api/server.py).

    Args:
        default_level: Default log level if LOG_LEVEL env var not set
    """
    global_level = os.getenv("LOG_LEVEL", default_level)
    numeric_level = _parse_log_level(global_level)

    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.info(f"🚀 Logging system initialized (global level: {global_level})")

    module_overrides = []
    for area in OVERRIDE_AREAS:
        override = os.getenv(f"LOG_LEVEL_{area}")
        if override:
            module_overrides.append(f"{area}={override}")

    if module_overrides:
        root_logger.info(f"📋 Module overrides: {', '.join(module_overrides)}")


def get_logger(module_name: str) -> logging.Logger:
    """
    Get a logger for a module with appropriate log level.

    Args:
        module_name: Python module name (use __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(module_name)

    # Only pin a level when one is configured; otherwise inherit from root
    if module_name in MODULE_NAME_MAP or os.getenv("LOG_LEVEL"):
        logger.setLevel(get_log_level(module_name))

    return logger
