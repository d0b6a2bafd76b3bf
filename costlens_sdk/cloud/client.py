"""
HTTP access to the CostLens backend.

One ``httpx.AsyncClient`` per CostLens instance, created on first use and
closed by ``aclose``. Without an API key (instant mode) nothing here
touches the network.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from ..config.constants import DEFAULT_BASE_URL, TRACKING_TIMEOUT_SECONDS
from ..observability.logging import CostLensLogger

AUTH_FAILURE_STATUSES = (401, 403)


class CloudClient:
    """Authenticated JSON calls against the CostLens backend."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = TRACKING_TIMEOUT_SECONDS,
        http_client: Optional[httpx.AsyncClient] = None,
        log: Optional[CostLensLogger] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.log = log or CostLensLogger("cloud")
        self._http = http_client
        self._owns_http = http_client is None
        self._routing_disabled_logged = False

    @property
    def instant_mode(self) -> bool:
        return not self.api_key

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self.timeout)
        return self._http

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def post(self, path: str, payload: Any, timeout: Optional[float] = None) -> httpx.Response:
        return await self._client().post(
            self.url(path),
            json=payload,
            headers=self._headers(),
            timeout=timeout if timeout is not None else self.timeout,
        )

    async def get(self, path: str, timeout: Optional[float] = None) -> httpx.Response:
        return await self._client().get(
            self.url(path),
            headers=self._headers(),
            timeout=timeout if timeout is not None else self.timeout,
        )

    async def routing_enabled(self) -> bool:
        """
        Ask the backend whether smart routing is enabled for this account.

        Instant mode and any failure default to enabled; invalid credentials
        disable routing.
        """
        if self.instant_mode:
            return True
        try:
            response = await self.get("/api/quality/routing")
            if response.is_success:
                data = response.json()
                return bool(data.get("enabled", True)) if isinstance(data, dict) else True
            if response.status_code in AUTH_FAILURE_STATUSES:
                if not self._routing_disabled_logged:
                    self.log.warning("Invalid API key - smart routing disabled")
                    self._routing_disabled_logged = True
                return False
        except (httpx.HTTPError, ValueError) as e:
            self.log.warning("Routing check failed (non-fatal)", error=e)
        return True

    async def aclose(self) -> None:
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            self._http = None
