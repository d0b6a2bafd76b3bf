"""Reliability layer: retries, model fallback and the tracking circuit breaker.

This layer handles:
- Error classification (client vs. transient)
- Retry logic with exponential backoff
- Ordered fallback across models
- Circuit breaking for the tracking side channel
"""

from .circuit_breaker import CircuitBreaker, CircuitBreakerConfig, CircuitState, CircuitStats
from .error_classifier import (
    ErrorCategory,
    classify_error,
    get_status_code,
    is_client_error,
    should_fallback,
)
from .fallback import (
    FallbackAttempt,
    FallbackExecutor,
    FallbackExhausted,
    FallbackResult,
    get_default_fallbacks,
)
from .retry import RetryConfig, RetryManager, retry_with_backoff

__all__ = [
    "CircuitBreaker",
    "CircuitBreakerConfig",
    "CircuitState",
    "CircuitStats",
    "ErrorCategory",
    "classify_error",
    "get_status_code",
    "is_client_error",
    "should_fallback",
    "FallbackAttempt",
    "FallbackExecutor",
    "FallbackExhausted",
    "FallbackResult",
    "get_default_fallbacks",
    "RetryConfig",
    "RetryManager",
    "retry_with_backoff",
]
