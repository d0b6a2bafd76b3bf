"""Remote response cache, consulted after the in-process cache."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.normalization.messages import messages_to_dicts
from ..observability.logging import CostLensLogger
from .client import CloudClient


def to_jsonable(response: Any) -> Optional[Any]:
    """JSON-compatible form of a provider response, or None if there is none."""
    if response is None or isinstance(response, (dict, list, str, int, float, bool)):
        return response
    if hasattr(response, "model_dump"):
        try:
            return response.model_dump(mode="json")
        except Exception:  # noqa: BLE001
            return None
    return None


class RemoteCache:
    """Best-effort get/set against ``/api/cache``; failures are logged and ignored."""

    def __init__(self, cloud: CloudClient, log: Optional[CostLensLogger] = None):
        self.cloud = cloud
        self.log = log or CostLensLogger("remote_cache")

    @property
    def active(self) -> bool:
        return not self.cloud.instant_mode

    async def get(self, provider: str, model: str, messages: Sequence[Any]) -> Optional[Any]:
        if not self.active:
            return None
        try:
            response = await self.cloud.post("/api/cache/get", {
                "provider": provider,
                "model": model,
                "messages": messages_to_dicts(messages),
            })
            if not response.is_success:
                return None
            data = response.json()
        except Exception as e:  # noqa: BLE001
            self.log.warning("Cache check failed", error=e)
            return None

        if isinstance(data, dict) and data.get("hit"):
            saved = data.get("savedCost") or 0
            self.log.info(f"Cache hit (remote) - saved ${float(saved):.4f}", model=model)
            return data.get("response")
        return None

    async def set(
        self,
        provider: str,
        model: str,
        messages: Sequence[Any],
        response: Any,
        tokens: int,
        cost: float,
        ttl: float,
    ) -> bool:
        if not self.active:
            return False
        payload_response = to_jsonable(response)
        if payload_response is None:
            self.log.debug("Response not serializable, skipping remote cache", model=model)
            return False
        try:
            result = await self.cloud.post("/api/cache/set", {
                "provider": provider,
                "model": model,
                "messages": messages_to_dicts(messages),
                "response": payload_response,
                "tokens": tokens,
                "cost": cost,
                "ttl": ttl,
            })
            return result.is_success
        except Exception as e:  # noqa: BLE001
            self.log.warning("Cache save failed", error=e)
            return False
