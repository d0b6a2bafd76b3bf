"""
Run tracking.

Run records are posted to ``/integrations/run``. Tracking is best-effort:
it never raises, it is skipped while the circuit breaker is open, and a
401/403 answer turns it off for the lifetime of the tracker.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import httpx

from ..models.generation import TrackRunData
from ..observability.logging import CostLensLogger
from ..reliability.circuit_breaker import CircuitBreaker
from .client import AUTH_FAILURE_STATUSES, CloudClient

TRACKING_PATH = "/integrations/run"


class RunTracker:
    """Posts run records through the circuit breaker."""

    def __init__(
        self,
        cloud: CloudClient,
        breaker: Optional[CircuitBreaker] = None,
        timeout: float = 5.0,
        log: Optional[CostLensLogger] = None,
    ):
        self.cloud = cloud
        self.breaker = breaker or CircuitBreaker("tracking")
        self.timeout = timeout
        self.log = log or CostLensLogger("tracking")
        self.disabled = False

    @property
    def active(self) -> bool:
        return not (self.cloud.instant_mode or self.disabled)

    async def track(self, run: TrackRunData) -> bool:
        """
        Send one run record.

        Returns:
            True if the backend accepted it; False if it was skipped or failed
        """
        if not self.active:
            return False
        if not self.breaker.allow_request():
            self.log.debug("Tracking skipped, circuit breaker open")
            return False

        try:
            response = await asyncio.wait_for(
                self.cloud.post(TRACKING_PATH, run.to_payload(), timeout=self.timeout),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            self.breaker.record_failure()
            self.log.debug("Tracking timed out", timeout_s=self.timeout)
            return False
        except Exception as e:  # noqa: BLE001
            self.breaker.record_failure()
            self.log.warning("Tracking error (non-fatal)", error=e)
            return False

        if response.is_success:
            self.breaker.record_success()
            return True

        self.breaker.record_failure()
        if response.status_code in AUTH_FAILURE_STATUSES:
            self.disabled = True
            self.log.warning(
                "Invalid API key - tracking disabled. Your app will continue to work.",
                status=response.status_code,
            )
        else:
            self.log.warning("Tracking failed", status=response.status_code)
        return False
