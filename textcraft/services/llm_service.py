"""
LLM Service Layer - request orchestration with caching and fallback

Turns a grammar-check or rephrase request into a cached, rate-limited,
provider-routed operation with a uniform TextResponse regardless of backend.

Per request:
1. Validate (RequestValidationError is the only exception that escapes)
2. Cache lookup (hits cost nothing: no token, no network)
3. Rate limit (suspends, never rejects)
4. Primary provider call with the configured timeout
5. On failure, one attempt on the fallback provider if it has credentials
6. Classify the final failure into TextResponse.error; successes are cached
"""

import asyncio
import time
from typing import Awaitable, Callable, Dict, List, Optional

from textcraft.config.logging_config import get_logger
from textcraft.config.orchestrator import OrchestratorConfig, get_orchestrator_config
from textcraft.config.providers import ProviderConfig, ProviderSettings, load_provider_settings
from textcraft.llm import (
    LLMError,
    LLMProvider,
    LLMProviderFactory,
    LLMTimeoutError,
    Operation,
    ProviderType,
    RephraseStyle,
    RequestValidationError,
    Suggestion,
    TextRequest,
    TextResponse,
    parse_suggestions,
)
from textcraft.llm.types import SUPPORTED_LANGUAGES
from textcraft.services.error_classifier import classify_error, should_fallback
from textcraft.services.rate_limiter import TokenBucketRateLimiter
from textcraft.services.response_cache import ResponseCache
from textcraft.types.error_events import ErrorCode, ServiceErrorEvent, format_error

logger = get_logger(__name__)

ErrorCallback = Callable[[ServiceErrorEvent], Awaitable[None]]


class LLMService:
    """
    Request orchestrator.

    The cache, rate limiter and provider adapters are owned by the service
    and may be injected for testing. Provider settings are replaced as a
    whole by `reconfigure()`; each request snapshots them before the
    provider call.
    """

    def __init__(
        self,
        settings: Optional[ProviderSettings] = None,
        *,
        config: Optional[OrchestratorConfig] = None,
        cache: Optional[ResponseCache] = None,
        rate_limiter: Optional[TokenBucketRateLimiter] = None,
        providers: Optional[Dict[ProviderType, LLMProvider]] = None,
        error_callback: Optional[ErrorCallback] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            settings: Provider settings (None = load from environment)
            config: Cache/rate-limit tuning (None = load from environment)
            cache: Response cache override
            rate_limiter: Rate limiter override
            providers: Adapter per provider type (None = one of each from the factory)
            error_callback: Optional async callback for fallback/failure events
        """
        config = config or get_orchestrator_config()

        self._settings = settings or load_provider_settings()
        self._settings.validate()

        self.cache = cache if cache is not None else ResponseCache(
            max_entries=config.cache_max_entries,
            ttl_s=config.cache_ttl_s,
        )
        self.rate_limiter = rate_limiter if rate_limiter is not None else TokenBucketRateLimiter(
            capacity=config.rate_capacity,
            refill_rate_per_s=config.rate_refill_per_s,
        )
        self._providers = providers if providers is not None else LLMProviderFactory.create_all()
        self.error_callback = error_callback

        fallback = self._settings.fallback_config
        logger.info(
            f"🤖 LLM Service: Initialized (provider={self._settings.mode.value}, "
            f"fallback={fallback.provider.value if fallback else 'disabled'})"
        )

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def settings(self) -> ProviderSettings:
        return self._settings

    @property
    def requires_network(self) -> bool:
        """True when the active provider is a remote service."""
        return self._settings.primary.requires_network

    def reconfigure(self, settings: ProviderSettings) -> None:
        """Replace provider settings. In-flight requests keep their snapshot."""
        settings.validate()
        self._settings = settings
        fallback = settings.fallback_config
        logger.info(
            f"🤖 LLM Service: Provider updated (provider={settings.mode.value}, "
            f"fallback={fallback.provider.value if fallback else 'disabled'})"
        )

    def update_provider(
        self,
        provider: ProviderType | str,
        api_keys: Optional[Dict[str, str]] = None,
    ) -> ProviderSettings:
        """Switch the primary provider and merge API keys (settings dialog)."""
        settings = self._settings.with_provider(provider, api_keys)
        self.reconfigure(settings)
        return settings

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    @staticmethod
    def validate_request(request: TextRequest) -> None:
        """
        Raises:
            RequestValidationError: Not a TextRequest, or empty text
        """
        if not isinstance(request, TextRequest):
            raise RequestValidationError(f"Expected TextRequest, got {type(request).__name__}")
        if not request.text:
            raise RequestValidationError("Invalid text input: text must be a non-empty string")

    async def process(self, request: TextRequest) -> TextResponse:
        """
        Process a request and return a normalized response.

        Provider failures are returned as a TextResponse with `error` set.

        Raises:
            RequestValidationError: Malformed request (before any cache or network activity)
        """
        self.validate_request(request)

        cache_key = request.cache_key
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("🤖 LLM Service: Returning cached response")
            return cached

        await self.rate_limiter.consume()

        # Snapshot: a concurrent reconfigure() must not change this request's view
        settings = self._settings
        primary = settings.primary
        start_time = time.time()

        try:
            suggestions = await self._invoke(primary, request)

        except Exception as primary_error:
            if not should_fallback(primary_error):
                return await self._fail(request, primary, primary_error)

            fallback = settings.fallback_config
            if fallback is None:
                return await self._fail(request, primary, primary_error)

            code, message = classify_error(primary_error, primary.provider.value)
            logger.warning(
                f"🤖 LLM Service: Primary provider {primary.provider.value} failed "
                f"({code.value}: {message}), falling back to {fallback.provider.value}"
            )
            await self._emit(ServiceErrorEvent(
                provider=primary.provider.value,
                error_code=code,
                user_message=f"{primary.provider.value} unavailable. Using {fallback.provider.value} as fallback.",
                technical_details=message[:2000] or code.value,
                severity="warning",
                fallback_triggered=True,
                retry_suggested=False,
            ))

            try:
                suggestions = await self._invoke(fallback, request)
            except Exception as fallback_error:
                # Only the fallback's error is returned; keep the primary's in the log
                logger.error(
                    f"🤖 LLM Service: Fallback {fallback.provider.value} also failed: {fallback_error} "
                    f"(primary {primary.provider.value}: {primary_error})"
                )
                return await self._fail(request, fallback, fallback_error)

        response = TextResponse(original=request.text, suggestions=suggestions)
        self.cache.set(cache_key, response)

        elapsed_ms = (time.time() - start_time) * 1000
        logger.info(
            f"🤖 LLM Service: {request.operation.value} complete "
            f"({len(suggestions)} suggestions, {elapsed_ms:.0f}ms)"
        )
        return response

    async def check_grammar(self, text: str, language: str = "en") -> TextResponse:
        """Grammar, spelling and punctuation check."""
        return await self.process(build_request(text, Operation.GRAMMAR_CHECK, language=language))

    async def rephrase_text(self, text: str, style: RephraseStyle | str = RephraseStyle.FORMAL) -> TextResponse:
        """Style-conditioned rewrites of `text`."""
        return await self.process(build_request(text, Operation.REPHRASE, style=style))

    # ------------------------------------------------------------------
    # Provider calls
    # ------------------------------------------------------------------

    async def _invoke(self, config: ProviderConfig, request: TextRequest) -> List[Suggestion]:
        """
        Call one provider and parse its output.

        Raises:
            LLMError subclasses for provider failures; LLMTimeoutError when
            config.timeout_s elapses
        """
        provider = self._providers.get(config.provider)
        if provider is None:
            raise LLMError(
                f"LLM provider '{config.provider.value}' is not available",
                provider=config.provider.value,
            )

        try:
            async with asyncio.timeout(config.timeout_s):
                raw = await provider.invoke(request, config)
        except TimeoutError as e:
            raise LLMTimeoutError(
                f"{provider.display_name} did not respond within {config.timeout_s:g}s",
                provider=config.provider.value,
            ) from e

        return parse_suggestions(raw, provider=config.provider.value)

    async def _fail(
        self,
        request: TextRequest,
        config: ProviderConfig,
        error: Exception,
    ) -> TextResponse:
        code, message = classify_error(error, config.provider.value)
        if code == ErrorCode.UNKNOWN:
            logger.exception(f"🤖 LLM Service: Unexpected error from {config.provider.value}", exc_info=error)
        else:
            logger.error(f"🤖 LLM Service: Request failed ({code.value}): {message}")

        await self._emit(ServiceErrorEvent(
            provider=config.provider.value,
            error_code=code,
            user_message="AI request failed. Please try again.",
            technical_details=message[:2000] or code.value,
            severity="error",
            retry_suggested=code != ErrorCode.AUTH,
        ))
        return TextResponse.failure(request.text, format_error(code, message))

    async def _emit(self, event: ServiceErrorEvent) -> None:
        if self.error_callback is None:
            return
        try:
            await self.error_callback(event)
        except Exception as e:
            logger.warning(f"🤖 LLM Service: Error callback failed (continuing): {e}")

    # ------------------------------------------------------------------
    # Health and lifecycle
    # ------------------------------------------------------------------

    async def get_provider_status(self) -> Dict[str, bool]:
        """
        Get health status of all configured providers.

        Returns:
            Dict[str, bool]: Provider name -> health status mapping
        """
        settings = self._settings
        status = {}

        for provider_type, provider_config in settings.providers.items():
            provider = self._providers.get(provider_type)
            if provider is None or not provider_config.has_credentials:
                status[provider_type.value] = False
                continue

            try:
                status[provider_type.value] = await provider.health_check(provider_config)
            except Exception as e:
                logger.warning(f"🤖 LLM Service: Health check failed for {provider_type.value}: {e}")
                status[provider_type.value] = False

        logger.info(f"🤖 LLM Service: Provider status: {status}")
        return status

    async def close(self):
        """Close all provider connections."""
        logger.info("🤖 LLM Service: Closing provider connections")

        for provider_type, provider in self._providers.items():
            try:
                await provider.close()
            except Exception as e:
                logger.warning(f"🤖 LLM Service: Error closing {provider_type.value} provider: {e}")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()


def build_request(
    text: str,
    operation: Operation | str,
    *,
    style: RephraseStyle | str | None = None,
    language: Optional[str] = None,
) -> TextRequest:
    """
    Build a TextRequest from loose arguments.

    Raises:
        RequestValidationError: Unknown operation/style or non-string text
    """
    fields = {"text": text, "operation": operation}
    if style is not None:
        fields["style"] = style
    if language is not None:
        fields["language"] = language
        if language not in SUPPORTED_LANGUAGES:
            logger.debug(f"🤖 LLM Service: Language '{language}' is not in the supported set, forwarding as-is")

    try:
        return TextRequest(**fields)
    except ValueError as e:
        raise RequestValidationError(str(e)) from e
