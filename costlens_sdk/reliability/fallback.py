"""
Fallback across models.

The primary model gets the full retry budget; when it is exhausted with a
server or transport error, each model of the fallback chain is tried once,
in order, without backoff.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional

from ..config.models import FALLBACK_CHAINS
from .error_classifier import should_fallback
from .retry import RetryConfig, RetryManager

logger = logging.getLogger(__name__)


def get_default_fallbacks(model: str) -> List[str]:
    """Fallback chain of the first table key contained in ``model``."""
    for key, chain in FALLBACK_CHAINS.items():
        if key in model:
            return list(chain)
    return []


@dataclass
class FallbackAttempt:
    model: str
    error: BaseException


@dataclass
class FallbackResult:
    result: Any
    model: str
    attempts: List[FallbackAttempt] = field(default_factory=list)


class FallbackExhausted(Exception):
    """Raised internally when every model failed; carries the last error."""

    def __init__(self, last_error: BaseException, attempts: List[FallbackAttempt]):
        self.last_error = last_error
        self.attempts = attempts
        super().__init__(str(last_error))


class FallbackExecutor:
    """Runs a call on the primary model, then down the fallback chain."""

    def __init__(
        self,
        retry_config: Optional[RetryConfig] = None,
        retry_manager: Optional[RetryManager] = None,
        enabled: bool = True,
        max_fallbacks: int = 3,
    ):
        self.retry_config = retry_config or RetryConfig()
        self.retry_manager = retry_manager or RetryManager()
        self.enabled = enabled
        self.max_fallbacks = max_fallbacks

    async def execute(
        self,
        call_model: Callable[[str], Awaitable[Any]],
        primary_model: str,
        fallback_models: Optional[List[str]] = None,
        on_fallback_failure: Optional[Callable[[str, BaseException, Optional[str]], None]] = None,
    ) -> FallbackResult:
        """
        Call ``primary_model`` with retries, then the fallback chain.

        Args:
            call_model: Performs one call against the given model
            primary_model: Model to try first
            fallback_models: Ordered chain; only the first ``max_fallbacks``
                entries are tried
            on_fallback_failure: Notified with (failed model, error, next model)

        Returns:
            FallbackResult with the response and the model that produced it

        Raises:
            FallbackExhausted: wrapping the last error seen
        """
        attempts: List[FallbackAttempt] = []
        try:
            result = await self.retry_manager.execute_with_retry(
                lambda: call_model(primary_model), self.retry_config
            )
            return FallbackResult(result=result, model=primary_model)
        except Exception as e:  # noqa: BLE001
            last_error: BaseException = e
            attempts.append(FallbackAttempt(primary_model, e))

        chain = list(fallback_models or [])
        if not (self.enabled and chain and should_fallback(last_error)):
            raise FallbackExhausted(last_error, attempts)

        chain = chain[:min(len(chain), self.max_fallbacks)]
        for index, model in enumerate(chain):
            try:
                result = await call_model(model)
                return FallbackResult(result=result, model=model, attempts=attempts)
            except Exception as e:  # noqa: BLE001
                last_error = e
                attempts.append(FallbackAttempt(model, e))
                next_model = chain[index + 1] if index + 1 < len(chain) else None
                if on_fallback_failure is not None:
                    on_fallback_failure(model, e, next_model)
                else:
                    logger.info(f"Fallback: {model} failed, trying {next_model or 'no more models'}")

        raise FallbackExhausted(last_error, attempts)
