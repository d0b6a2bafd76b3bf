"""Per-call orchestration for wrapped provider clients.

Every wrapped ``create`` goes through the same sequence:

    optimize -> route -> cost check -> cache check -> before hooks
    -> call (retries, then fallback chain) -> after hooks -> quality gate
    -> cache store -> track

A cache hit returns immediately and is never tracked. A cost-limit
violation is raised before any network activity. When every model has
failed, ``on_error`` hooks run, the failure is tracked, and the last
error is raised to the caller.
"""

import inspect
import math
import time
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Sequence

import httpx

from ..cloud.client import CloudClient
from ..cloud.optimizer import PromptOptimizer
from ..cloud.remote_cache import RemoteCache
from ..cloud.tracking import RunTracker
from ..config.constants import CHARS_PER_TOKEN, QUALITY_GATE_THRESHOLD
from ..config.settings import CostLensConfig
from ..core.caching.cache import ResponseCache, make_cache_key
from ..core.normalization.messages import message_content, message_to_dict, messages_json
from ..core.normalization.responses import extract_completion, extract_stream_delta
from ..core.pricing.estimator import CostEstimator
from ..core.quality.detector import QualityDetector
from ..core.routing.router import ModelRouter
from ..models.generation import CallOptions, ErrorContext, SavingsEstimate, TrackRunData
from ..observability.logging import CostLensLogger
from ..observability.metrics import CallMetrics, CallStats
from ..reliability.circuit_breaker import CircuitBreaker, CircuitBreakerConfig
from ..reliability.fallback import FallbackExecutor, FallbackExhausted, get_default_fallbacks
from ..reliability.retry import RetryConfig
from .errors import CostLimitExceeded
from .middleware import MiddlewareChain

ProviderCall = Callable[[Dict[str, Any]], Any]


async def _call_provider(create: ProviderCall, params: Dict[str, Any]) -> Any:
    result = create(params)
    if inspect.isawaitable(result):
        result = await result
    return result


def _elapsed_ms(start: float) -> int:
    return int((time.time() - start) * 1000)


class CallOrchestrator:
    """Runs wrapped provider calls for one CostLens client.

    Owns the per-instance state: the response cache, the tracking circuit
    breaker, the prompt-optimization memo and the call statistics. Two
    orchestrators never share any of it.
    """

    def __init__(
        self,
        config: Optional[CostLensConfig] = None,
        *,
        estimator: Optional[CostEstimator] = None,
        cache: Optional[ResponseCache] = None,
        cloud: Optional[CloudClient] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config or CostLensConfig()
        cfg = self.config
        self.log = CostLensLogger("orchestrator", cfg.log_level)

        self.estimator = estimator or CostEstimator()
        self.router = ModelRouter(cfg.routing_policy, cfg.smart_routing, self.log.child("router"))
        self.cache = cache or ResponseCache(cfg.cache_max_entries, cfg.default_cache_ttl, clock=clock)

        self.cloud = cloud or CloudClient(
            cfg.api_key,
            cfg.base_url,
            timeout=cfg.tracking_timeout,
            http_client=http_client,
            log=self.log.child("cloud"),
        )
        self.breaker = CircuitBreaker(
            "tracking",
            CircuitBreakerConfig(cfg.circuit_breaker_threshold, cfg.circuit_breaker_timeout),
            clock=clock,
        )
        self.tracker = RunTracker(self.cloud, self.breaker, cfg.tracking_timeout, self.log.child("tracking"))
        self.remote_cache = RemoteCache(self.cloud, self.log.child("remote_cache"))
        self.optimizer = PromptOptimizer(self.cloud, self.log.child("optimizer"))
        self.middleware = MiddlewareChain(cfg.middleware, self.log.child("middleware"))

        self.fallback = FallbackExecutor(
            RetryConfig(max_attempts=cfg.max_retries, base_delay=cfg.backoff_base_delay),
            enabled=cfg.auto_fallback,
            max_fallbacks=cfg.max_retries,
        )
        self.stats = CallStats()
        self._routing_disabled_logged = False

    # ------------------------------------------------------------------
    # Estimation helpers
    # ------------------------------------------------------------------

    def estimate_cost(self, model: str, messages: Sequence[Any]) -> float:
        return self.estimator.estimate_cost(model, messages)

    async def select_optimal_model(self, requested_model: str, messages: Sequence[Any]) -> str:
        return await self.router.select_optimal_model(requested_model, messages)

    async def calculate_savings(self, requested_model: str, messages: Sequence[Any]) -> SavingsEstimate:
        """Estimated savings of sending ``messages`` to the routed model instead."""
        current_cost = self.estimate_cost(requested_model, messages)
        recommended_model = await self.select_optimal_model(requested_model, messages)
        optimized_cost = self.estimate_cost(recommended_model, messages)

        savings = current_cost - optimized_cost
        savings_percentage = (savings / current_cost) * 100 if current_cost > 0 else 0.0
        return SavingsEstimate(
            current_cost=current_cost,
            optimized_cost=optimized_cost,
            savings=savings,
            savings_percentage=savings_percentage,
            recommended_model=recommended_model,
        )

    # ------------------------------------------------------------------
    # Call pipeline
    # ------------------------------------------------------------------

    async def execute(
        self,
        provider: str,
        create: ProviderCall,
        params: Dict[str, Any],
        options: Optional[CallOptions] = None,
    ) -> Any:
        """
        Run one provider call through the full pipeline.

        Args:
            provider: "openai" or "anthropic"; part of the cache key and the run record
            create: The provider's create function, called with the final params
            params: Provider request params; must contain ``model``
            options: Per-call options

        Returns:
            The provider response (after ``after`` hooks), or a cached one

        Raises:
            CostLimitExceeded: If the estimated cost is above the ceiling
            Exception: The last provider error once retries and fallbacks are exhausted
        """
        options = options or CallOptions()
        params = dict(params)
        requested_model = params.get("model")
        if not requested_model:
            raise ValueError("params must include 'model'")
        messages = list(params.get("messages") or [])

        if self.config.auto_optimize and messages:
            messages = await self._optimize_messages(messages)
            params["messages"] = messages

        model = await self._route(requested_model, messages)
        params["model"] = model

        self._check_cost_limit(model, messages, options)

        lookup_params = dict(params)
        cache_enabled = self.config.enable_cache or options.cache_ttl is not None
        if cache_enabled:
            cached = self.cache.get(make_cache_key(provider, lookup_params))
            if cached is not None:
                self.log.info("Cache hit (memory) - $0 cost!", model=model)
                self._record_cache_hit(provider, requested_model, model)
                return cached

        remote_enabled = self.config.enable_cache and self.config.enable_remote_cache
        if remote_enabled:
            cached = await self.remote_cache.get(provider, model, messages)
            if cached is not None:
                self._record_cache_hit(provider, requested_model, model)
                return cached

        params = await self.middleware.run_before(params)
        model = params.get("model") or model

        start = time.time()
        if options.fallback_models is not None:
            fallback_models = list(options.fallback_models)
        else:
            fallback_models = get_default_fallbacks(model) if self.config.auto_fallback else []

        async def call_model(target_model: str) -> Any:
            return await _call_provider(create, {**params, "model": target_model})

        try:
            outcome = await self.fallback.execute(
                call_model, model, fallback_models, on_fallback_failure=self._log_fallback_failure
            )
        except FallbackExhausted as exhausted:
            await self._handle_failure(
                provider, model, requested_model, messages, exhausted.last_error, start, options,
                attempt=len(exhausted.attempts), chain=[model] + fallback_models,
            )
            raise exhausted.last_error

        result = await self.middleware.run_after(outcome.result)
        used_model = outcome.model

        if used_model != requested_model:
            try:
                result, used_model = await self._quality_gate(
                    create, params, result, requested_model, used_model, messages
                )
            except Exception as e:
                await self._handle_failure(
                    provider, requested_model, requested_model, messages, e, start, options,
                    attempt=1, chain=[requested_model],
                )
                raise

        completion = extract_completion(result, provider)

        if cache_enabled:
            store_key = make_cache_key(provider, {**lookup_params, "model": used_model})
            self.cache.set(store_key, result, options.cache_ttl)
            # the next identical request looks up the routed model
            lookup_key = make_cache_key(provider, lookup_params)
            if lookup_key != store_key:
                self.cache.set(lookup_key, result, options.cache_ttl)
        if remote_enabled:
            await self.remote_cache.set(
                provider,
                used_model,
                messages,
                result,
                tokens=completion.total_tokens,
                cost=self.estimate_cost(used_model, messages),
                ttl=options.cache_ttl or self.config.default_cache_ttl,
            )

        savings = 0.0
        if used_model != requested_model:
            savings = self.estimate_cost(requested_model, messages) - self.estimate_cost(used_model, messages)

        latency_ms = _elapsed_ms(start)
        await self.tracker.track(TrackRunData(
            provider=provider,
            model=used_model,
            requested_model=requested_model,
            input=messages_json(messages),
            output=completion.text,
            tokens_used=completion.total_tokens,
            input_tokens=completion.input_tokens,
            output_tokens=completion.output_tokens,
            latency=latency_ms,
            success=True,
            savings=savings,
            prompt_id=options.prompt_id,
            request_id=options.request_id,
            correlation_id=options.correlation_id,
        ))

        if used_model != requested_model:
            self.log.info(f"Served {requested_model} request with {used_model}", savings=f"{savings:.6f}")

        self.stats.record(CallMetrics(
            provider=provider,
            requested_model=requested_model,
            model=used_model,
            latency_ms=latency_ms,
            input_tokens=completion.input_tokens,
            output_tokens=completion.output_tokens,
            savings=savings,
        ))
        return result

    async def stream(
        self,
        provider: str,
        create: ProviderCall,
        params: Dict[str, Any],
        options: Optional[CallOptions] = None,
    ) -> AsyncIterator[Any]:
        """
        Start a streaming call and return an iterator over its chunks.

        Streaming calls skip routing, caching and the quality gate. The run
        is tracked once the stream is exhausted, with output tokens estimated
        from the collected text.
        """
        options = options or CallOptions()
        params = dict(params)
        messages = list(params.get("messages") or [])
        model = params.get("model", "")
        start = time.time()

        try:
            stream = await _call_provider(create, {**params, "stream": True})
        except Exception as e:
            await self.track_error(provider, model, messages_json(messages), e, _elapsed_ms(start))
            raise

        return self._tracked_stream(stream, provider, model, messages, options, start)

    async def _tracked_stream(
        self,
        stream: Any,
        provider: str,
        model: str,
        messages: List[Any],
        options: CallOptions,
        start: float,
    ) -> AsyncIterator[Any]:
        collected: List[str] = []
        async for chunk in stream:
            collected.append(extract_stream_delta(chunk))
            yield chunk

        output = "".join(collected)
        await self.tracker.track(TrackRunData(
            provider=provider,
            model=model,
            input=messages_json(messages),
            output=output,
            tokens_used=math.ceil(len(output) / CHARS_PER_TOKEN),
            latency=_elapsed_ms(start),
            success=True,
            prompt_id=options.prompt_id,
            request_id=options.request_id,
            correlation_id=options.correlation_id,
        ))

    # ------------------------------------------------------------------
    # Pipeline stages
    # ------------------------------------------------------------------

    async def _optimize_messages(self, messages: List[Any]) -> List[Any]:
        optimized = []
        for message in messages:
            content = message_content(message)
            if isinstance(content, str) and content:
                rewritten = await self.optimizer.optimize(content)
                if rewritten != content:
                    message = {**message_to_dict(message), "content": rewritten}
            optimized.append(message)
        return optimized

    async def _route(self, requested_model: str, messages: Sequence[Any]) -> str:
        if not self.config.smart_routing:
            return requested_model

        if self.config.check_remote_routing and not self.cloud.instant_mode:
            if not await self.cloud.routing_enabled():
                if not self._routing_disabled_logged:
                    self.log.info("Smart routing disabled due to quality concerns")
                    self._routing_disabled_logged = True
                return requested_model

        model = await self.router.select_optimal_model(requested_model, messages)
        if model != requested_model:
            self.log.info(f"Smart routing: {requested_model} -> {model}")
        return model

    def _check_cost_limit(self, model: str, messages: Sequence[Any], options: CallOptions) -> None:
        limit = options.max_cost if options.max_cost is not None else self.config.cost_limit
        if limit is None:
            return
        estimated = self.estimate_cost(model, messages)
        if estimated > limit:
            raise CostLimitExceeded(estimated, limit, model)

    async def _score(self, text: str, messages: Sequence[Any]) -> float:
        prompt_json = messages_json(messages)
        validator = self.config.quality_validator
        if validator is not None:
            try:
                score = validator(text, prompt_json)
                if inspect.isawaitable(score):
                    score = await score
                return float(score)
            except Exception as e:  # noqa: BLE001
                self.log.warning("quality_validator error, using built-in scorer", error=e)
        return QualityDetector.analyze_response(text, prompt_json).quality_score

    async def _quality_gate(
        self,
        create: ProviderCall,
        params: Dict[str, Any],
        result: Any,
        requested_model: str,
        used_model: str,
        messages: Sequence[Any],
    ):
        """Re-issue once on ``requested_model`` if the routed answer scores too low."""
        text = extract_completion(result).text
        score = await self._score(text, messages)

        if score < QUALITY_GATE_THRESHOLD:
            self.log.info(f"Quality too low ({score:.2f}), retrying with {requested_model}",
                          routed_model=used_model)
            retried = await _call_provider(create, {**params, "model": requested_model})
            return await self.middleware.run_after(retried), requested_model

        self.log.info(f"Quality validated: {score:.2f} score", model=used_model)
        return result, used_model

    def _log_fallback_failure(self, model: str, error: BaseException, next_model: Optional[str]) -> None:
        self.log.info(f"Fallback: {model} failed, trying {next_model or 'no more models'}",
                      error_type=type(error).__name__)

    async def _handle_failure(
        self,
        provider: str,
        model: str,
        requested_model: str,
        messages: Sequence[Any],
        error: BaseException,
        start: float,
        options: CallOptions,
        attempt: int,
        chain: List[str],
    ) -> None:
        latency_ms = _elapsed_ms(start)
        input_json = messages_json(messages)
        context = ErrorContext(
            provider=provider,
            model=model,
            input=input_json,
            latency_ms=latency_ms,
            attempt=attempt,
            max_retries=self.config.max_retries,
            user_id=options.user_id,
            prompt_id=options.prompt_id,
            metadata={"original_model": requested_model, "fallback_chain": chain},
        )
        await self.middleware.run_on_error(error, context)
        await self.track_error(provider, model, input_json, error, latency_ms)

        self.log.error("Call failed", model=model, provider=provider, error=error)
        self.stats.record(CallMetrics(
            provider=provider,
            requested_model=requested_model,
            model=model,
            latency_ms=latency_ms,
            error_class=type(error).__name__,
        ))

    def _record_cache_hit(self, provider: str, requested_model: str, model: str) -> None:
        self.stats.record(CallMetrics(
            provider=provider,
            requested_model=requested_model,
            model=model,
            latency_ms=0,
            cache_hit=True,
        ))

    # ------------------------------------------------------------------
    # Manual tracking
    # ------------------------------------------------------------------

    async def track_error(
        self,
        provider: str,
        model: str,
        input: str,
        error: BaseException,
        latency_ms: int,
    ) -> bool:
        return await self.tracker.track(TrackRunData(
            provider=provider,
            model=model,
            input=input,
            output="",
            tokens_used=0,
            latency=latency_ms,
            success=False,
            error=str(error),
        ))

    async def track_completion(
        self,
        provider: str,
        params: Dict[str, Any],
        result: Any,
        latency_ms: int,
        prompt_id: Optional[str] = None,
    ) -> bool:
        """Track a call that was made outside the wrapper."""
        completion = extract_completion(result, provider)
        return await self.tracker.track(TrackRunData(
            provider=provider,
            model=params.get("model", ""),
            input=messages_json(params.get("messages") or []),
            output=completion.text,
            tokens_used=completion.total_tokens,
            latency=latency_ms,
            success=True,
            prompt_id=prompt_id,
        ))

    def clear_cache(self) -> None:
        self.cache.clear()

    def get_cost_analytics(self) -> Dict[str, float]:
        return self.stats.summary()

    async def aclose(self) -> None:
        await self.cloud.aclose()
