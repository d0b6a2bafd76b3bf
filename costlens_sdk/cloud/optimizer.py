"""Prompt optimization through ``/api/prompts/optimize``."""

from __future__ import annotations

from typing import Dict, Optional

from ..observability.logging import CostLensLogger
from .client import AUTH_FAILURE_STATUSES, CloudClient


class PromptOptimizer:
    """Rewrites prompt text; on any failure the original text is kept."""

    def __init__(self, cloud: CloudClient, log: Optional[CostLensLogger] = None):
        self.cloud = cloud
        self.log = log or CostLensLogger("optimizer")
        self._cache: Dict[str, str] = {}

    async def optimize(self, content: str) -> str:
        if content in self._cache:
            return self._cache[content]
        if self.cloud.instant_mode:
            return content

        try:
            response = await self.cloud.post("/api/prompts/optimize", {"prompt": content})
            if response.is_success:
                data = response.json()
                optimized = data.get("optimized") if isinstance(data, dict) else None
                if isinstance(optimized, str) and optimized:
                    self._cache[content] = optimized
                    self.log.info(f"Optimized prompt: {data.get('tokenReduction', 0)}% reduction")
                    return optimized
            elif response.status_code in AUTH_FAILURE_STATUSES:
                self.log.warning("Invalid API key - optimization disabled")
        except Exception as e:  # noqa: BLE001
            self.log.warning("Optimization failed (non-fatal), using original prompt", error=e)

        return content

    def clear(self) -> None:
        self._cache.clear()
