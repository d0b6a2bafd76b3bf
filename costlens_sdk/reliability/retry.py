from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from .error_classifier import get_status_code, is_client_error

logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    max_attempts: int = 3
    base_delay: float = 1.0


class RetryManager:
    """
    Manages retry logic for provider calls.

    This class handles:
    - No retries for client errors (4xx)
    - Exponential backoff: ``base_delay * 2**attempt`` seconds between attempts
    - Re-raising the last error once attempts are exhausted
    """

    async def execute_with_retry(self, func: Callable[[], Awaitable[Any]], config: RetryConfig):
        """
        Execute a function with retry logic.

        Args:
            func: Async function to execute
            config: Retry configuration

        Returns:
            Result from successful function execution

        Raises:
            A client error immediately, otherwise the last exception once
            all attempts are exhausted
        """
        attempts = max(1, config.max_attempts)

        for attempt in range(attempts):
            try:
                return await func()
            except Exception as e:  # noqa: BLE001
                if is_client_error(e):
                    raise

                if attempt == attempts - 1:
                    raise

                delay = self._calculate_delay(attempt, config)
                logger.debug(
                    f"Attempt {attempt + 1}/{attempts} failed "
                    f"(status={get_status_code(e)}), retrying in {delay}s"
                )
                await asyncio.sleep(delay)

    @staticmethod
    def _calculate_delay(attempt: int, config: RetryConfig) -> float:
        return (2 ** attempt) * config.base_delay


async def retry_with_backoff(
    operation: Callable[[], Awaitable[Any]],
    max_attempts: int = 3,
    base_delay: float = 1.0,
):
    """Run ``operation`` with the default retry policy."""
    return await RetryManager().execute_with_retry(
        operation, RetryConfig(max_attempts=max_attempts, base_delay=base_delay)
    )
