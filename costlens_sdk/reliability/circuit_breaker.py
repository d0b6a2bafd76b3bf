"""
Circuit breaker guarding the tracking side channel.

After ``failure_threshold`` consecutive failures the breaker opens; while
the most recent failure is younger than ``timeout`` seconds, tracking is
skipped outright. Any success closes it again. The breaker never guards
provider calls.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Callable, Optional
import logging
import time

from ..config.constants import CIRCUIT_BREAKER_THRESHOLD, CIRCUIT_BREAKER_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class CircuitState(Enum):
    """Circuit breaker states."""
    CLOSED = "closed"  # Normal operation
    OPEN = "open"      # Skipping calls until the timeout passes


@dataclass
class CircuitBreakerConfig:
    """Circuit breaker configuration."""
    failure_threshold: int = CIRCUIT_BREAKER_THRESHOLD
    timeout: float = CIRCUIT_BREAKER_TIMEOUT_SECONDS


@dataclass
class CircuitStats:
    """Failure bookkeeping."""
    consecutive_failures: int = 0
    last_failure_time: Optional[float] = None
    total_failures: int = 0
    total_successes: int = 0
    skipped_calls: int = 0


class CircuitBreaker:
    """Consecutive-failure breaker with a time window."""

    def __init__(
        self,
        name: str,
        config: Optional[CircuitBreakerConfig] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.name = name
        self.config = config or CircuitBreakerConfig()
        self.stats = CircuitStats()
        self._clock = clock

    @property
    def state(self) -> CircuitState:
        return CircuitState.OPEN if self.is_open() else CircuitState.CLOSED

    def is_open(self) -> bool:
        """True while calls should be skipped."""
        if self.stats.consecutive_failures < self.config.failure_threshold:
            return False
        if self.stats.last_failure_time is None:
            return False
        return self._clock() - self.stats.last_failure_time < self.config.timeout

    def allow_request(self) -> bool:
        """Check the breaker before a call; counts skipped calls."""
        if self.is_open():
            self.stats.skipped_calls += 1
            return False
        return True

    def record_success(self) -> None:
        if self.stats.consecutive_failures:
            logger.debug(f"Circuit breaker {self.name} reset after success")
        self.stats.consecutive_failures = 0
        self.stats.total_successes += 1

    def record_failure(self) -> None:
        self.stats.consecutive_failures += 1
        self.stats.total_failures += 1
        self.stats.last_failure_time = self._clock()

        if self.stats.consecutive_failures == self.config.failure_threshold:
            logger.warning(
                f"Circuit breaker {self.name} opened",
                extra={
                    "circuit_breaker": self.name,
                    "consecutive_failures": self.stats.consecutive_failures,
                }
            )

    def reset(self) -> None:
        self.stats = CircuitStats()
