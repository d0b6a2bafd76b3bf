import inspect
import os
from typing import Any, Dict, Optional

from openai import AsyncOpenAI

from ..base import ProviderAdapter
from ...core.normalization.messages import messages_to_dicts
from ...models.generation import ProviderType


class OpenAIProvider(ProviderAdapter):
    """Chat-completions binding over an ``AsyncOpenAI`` client."""

    name = ProviderType.OPENAI.value

    def __init__(self, client: Optional[Any] = None):
        self._client = client
        # Allow overriding default timeout via env variable (seconds)
        try:
            self._timeout: float = float(os.getenv("OPENAI_TIMEOUT", "60"))
        except ValueError:
            self._timeout = 60.0

    @property
    def client(self) -> Any:
        """Lazy initialization of OpenAI client (reads OPENAI_API_KEY)."""
        if self._client is None:
            self._client = AsyncOpenAI(timeout=self._timeout)
        return self._client

    async def create(self, params: Dict[str, Any]) -> Any:
        payload = dict(params)
        if "messages" in payload:
            payload["messages"] = messages_to_dicts(payload["messages"])
        response = self.client.chat.completions.create(**payload)
        if inspect.isawaitable(response):
            response = await response
        return response
