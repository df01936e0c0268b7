"""
Textcraft Services Package

Service layer for grammar checking and rephrasing:
- rate_limiter: Token bucket guarding outbound provider calls
- response_cache: LRU + TTL cache of normalized responses
- error_classifier: Maps provider failures to error codes
- offline: Misspelling dictionary used when the network is down
- llm_service: Request orchestrator (cache, rate limit, provider fallback)
- debouncer: Coalesces bursts of async calls
- text_processor: Debounced client-facing façade
"""

from .rate_limiter import TokenBucketRateLimiter
from .response_cache import ResponseCache, CacheStats
from .error_classifier import classify_error, should_fallback, describe_error
from .offline import offline_response, find_misspellings
from .llm_service import LLMService, build_request
from .debouncer import Debouncer
from .text_processor import TextProcessor

__all__ = [
    "TokenBucketRateLimiter",
    "ResponseCache",
    "CacheStats",
    "classify_error",
    "should_fallback",
    "describe_error",
    "offline_response",
    "find_misspellings",
    "LLMService",
    "build_request",
    "Debouncer",
    "TextProcessor",
]
