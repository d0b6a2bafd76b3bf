"""
Base Provider Adapter Interface

A provider adapter is the thin binding between the orchestrator and a
provider SDK client: it performs one completion call for a given set of
params and names the response layout it returns. Routing, caching, retries
and tracking are not the adapter's business.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class ProviderAdapter(ABC):
    """Abstract base class for wrapped provider clients."""

    #: Provider name used in cache keys and run tracking
    name: str = ""

    @abstractmethod
    async def create(self, params: Dict[str, Any]) -> Any:
        """
        Perform one completion call.

        Args:
            params: Provider call params (``model``, ``messages`` and
                sampling options), passed through as keyword arguments

        Returns:
            The provider's raw response object

        Raises:
            Whatever the SDK raises; the orchestrator reads ``status`` /
            ``status_code`` from it to decide on retries and fallbacks
        """
        pass

