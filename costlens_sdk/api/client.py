"""Main client interface for the CostLens SDK."""

import time
from typing import Any, AsyncIterator, Callable, Dict, Optional, Sequence, Union

import httpx

from ..config.settings import CostLensConfig
from ..core.pricing.estimator import CostEstimator
from ..core.routing.router import validate_model_consistency
from ..models.conversation_types import MessageLike
from ..models.generation import CallOptions, SavingsEstimate
from ..orchestration.orchestrator import CallOrchestrator
from ..providers.anthropic.adapter import AnthropicProvider
from ..providers.openai.adapter import OpenAIProvider

OptionsLike = Union[CallOptions, Dict[str, Any], None]


def _coerce_options(options: OptionsLike) -> CallOptions:
    if options is None:
        return CallOptions()
    if isinstance(options, CallOptions):
        return options
    return CallOptions(**options)


class _WrappedCompletions:
    def __init__(self, orchestrator: CallOrchestrator, provider: OpenAIProvider):
        self._orchestrator = orchestrator
        self._provider = provider

    async def create(self, options: OptionsLike = None, **params: Any) -> Any:
        """``chat.completions.create`` with routing, caching, fallback and tracking."""
        return await self._orchestrator.execute(
            self._provider.name, self._provider.create, params, _coerce_options(options)
        )

    async def stream(self, options: OptionsLike = None, **params: Any) -> AsyncIterator[Any]:
        """Start a streaming completion; the run is tracked when the stream ends."""
        return await self._orchestrator.stream(
            self._provider.name, self._provider.create, params, _coerce_options(options)
        )


class _WrappedChat:
    def __init__(self, completions: _WrappedCompletions):
        self.completions = completions


class WrappedOpenAI:
    """OpenAI client facade exposing ``chat.completions``."""

    def __init__(self, orchestrator: CallOrchestrator, client: Optional[Any] = None):
        self.provider = OpenAIProvider(client)
        self.chat = _WrappedChat(_WrappedCompletions(orchestrator, self.provider))


class _WrappedMessages:
    def __init__(self, orchestrator: CallOrchestrator, provider: AnthropicProvider):
        self._orchestrator = orchestrator
        self._provider = provider

    async def create(self, options: OptionsLike = None, **params: Any) -> Any:
        """``messages.create`` with routing, caching, fallback and tracking."""
        return await self._orchestrator.execute(
            self._provider.name, self._provider.create, params, _coerce_options(options)
        )


class WrappedAnthropic:
    """Anthropic client facade exposing ``messages``."""

    def __init__(self, orchestrator: CallOrchestrator, client: Optional[Any] = None):
        self.provider = AnthropicProvider(client)
        self.messages = _WrappedMessages(orchestrator, self.provider)


class CostLensClient:
    """High-level client for the CostLens SDK.

    One instance owns one cache, one tracking circuit breaker and one HTTP
    connection pool. Close it with ``aclose()`` or use it as an async
    context manager.
    """

    def __init__(
        self,
        config: Optional[CostLensConfig] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        estimator: Optional[CostEstimator] = None,
        clock: Callable[[], float] = time.time,
        **overrides: Any,
    ):
        """
        Initialize the client.

        Args:
            config: Full configuration; keyword ``overrides`` are applied on top
            http_client: Optional httpx client for the CostLens backend
            estimator: Optional cost estimator (custom price table)
            clock: Time source for cache TTLs and the circuit breaker window
            **overrides: CostLensConfig fields, e.g. ``api_key="..."``
        """
        if config is None:
            config = CostLensConfig(**overrides)
        elif overrides:
            config = CostLensConfig(**{**dict(config), **overrides})
        self.config = config
        self.orchestrator = CallOrchestrator(
            config,
            estimator=estimator,
            http_client=http_client,
            clock=clock,
        )

    @classmethod
    def from_env(cls, **overrides: Any) -> "CostLensClient":
        """Client configured from COSTLENS_* environment variables."""
        return cls(CostLensConfig.from_env(**overrides))

    @property
    def instant_mode(self) -> bool:
        return self.config.instant_mode

    # Wrappers

    def wrap_openai(self, client: Optional[Any] = None) -> WrappedOpenAI:
        """Wrap an OpenAI client (``AsyncOpenAI()`` is built when omitted)."""
        return WrappedOpenAI(self.orchestrator, client)

    def wrap_anthropic(self, client: Optional[Any] = None) -> WrappedAnthropic:
        """Wrap an Anthropic client (``AsyncAnthropic()`` is built when omitted)."""
        return WrappedAnthropic(self.orchestrator, client)

    # Estimation and routing

    async def select_optimal_model(self, requested_model: str, messages: Sequence[MessageLike]) -> str:
        return await self.orchestrator.select_optimal_model(requested_model, messages)

    def estimate_cost(self, model: str, messages: Sequence[MessageLike]) -> float:
        return self.orchestrator.estimate_cost(model, messages)

    async def calculate_savings(self, requested_model: str, messages: Sequence[MessageLike]) -> SavingsEstimate:
        return await self.orchestrator.calculate_savings(requested_model, messages)

    def validate_pricing(self) -> Dict[str, Any]:
        return CostEstimator.validate_pricing()

    @staticmethod
    def validate_model_consistency(requested_model: str, actual_model: str) -> bool:
        return validate_model_consistency(requested_model, actual_model)

    # Cache and analytics

    def clear_cache(self) -> None:
        self.orchestrator.clear_cache()

    def get_cost_analytics(self) -> Dict[str, float]:
        """Cache hit rate, total savings, average latency (ms) and error rate of this instance."""
        return self.orchestrator.get_cost_analytics()

    # Manual tracking

    async def track_openai(
        self,
        params: Dict[str, Any],
        result: Any,
        latency: int,
        prompt_id: Optional[str] = None,
    ) -> bool:
        """Track an OpenAI call made without the wrapper. ``latency`` is in ms."""
        return await self.orchestrator.track_completion("openai", params, result, latency, prompt_id)

    async def track_anthropic(
        self,
        params: Dict[str, Any],
        result: Any,
        latency: int,
        prompt_id: Optional[str] = None,
    ) -> bool:
        """Track an Anthropic call made without the wrapper. ``latency`` is in ms."""
        return await self.orchestrator.track_completion("anthropic", params, result, latency, prompt_id)

    async def track_error(
        self,
        provider: str,
        model: str,
        input: str,
        error: BaseException,
        latency: int,
    ) -> bool:
        return await self.orchestrator.track_error(provider, model, input, error, latency)

    # Lifecycle

    async def aclose(self) -> None:
        await self.orchestrator.aclose()

    async def __aenter__(self) -> "CostLensClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
