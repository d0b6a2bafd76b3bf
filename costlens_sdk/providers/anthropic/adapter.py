import inspect
import os
from typing import Any, Dict, Optional

from anthropic import AsyncAnthropic

from ..base import ProviderAdapter
from ...core.normalization.messages import messages_to_dicts
from ...models.generation import ProviderType


class AnthropicProvider(ProviderAdapter):
    """Messages-API binding over an ``AsyncAnthropic`` client."""

    name = ProviderType.ANTHROPIC.value

    def __init__(self, client: Optional[Any] = None):
        self._client = client
        try:
            self._timeout: float = float(os.getenv("ANTHROPIC_TIMEOUT", "60"))
        except ValueError:
            self._timeout = 60.0

    @property
    def client(self) -> Any:
        """Lazy initialization of Anthropic client (reads ANTHROPIC_API_KEY)."""
        if self._client is None:
            self._client = AsyncAnthropic(timeout=self._timeout)
        return self._client

    async def create(self, params: Dict[str, Any]) -> Any:
        payload = dict(params)
        if "messages" in payload:
            payload["messages"] = messages_to_dicts(payload["messages"])
        response = self.client.messages.create(**payload)
        if inspect.isawaitable(response):
            response = await response
        return response
