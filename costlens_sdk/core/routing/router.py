"""
Model selection.

Resolution order for a requested model:

1. caller-supplied routing policy (first non-empty string wins)
2. vision models are never routed
3. provider-specific substitutions keyed on model family, prompt
   complexity and task type
4. cross-provider routing through ``QualityDetector.should_route``
5. the requested model unchanged
"""

import inspect
import logging
import re
from typing import Any, List, Optional, Sequence

from ...config.constants import ROUTING_MIN_CONFIDENCE, ROUTING_QUALITY_THRESHOLD
from ...config.models import MODEL_HIERARCHY
from ...config.settings import RoutingPolicy
from ...observability.logging import CostLensLogger
from ..normalization.messages import content_text, joined_text, message_role
from ..quality.detector import QualityDetector

logger = logging.getLogger(__name__)

TASK_PATTERNS = (
    ("coding", re.compile(r"code|programming|function|debug|algorithm")),
    ("writing", re.compile(r"write|creative|story|article|content")),
    ("analysis", re.compile(r"analyze|research|evaluate|compare")),
    ("translation", re.compile(r"translate|language")),
    ("math", re.compile(r"math|calculate|solve|equation")),
    ("simple", re.compile(r"simple|basic|quick|easy")),
)


def estimate_complexity(messages: Sequence[Any]) -> str:
    """Classify a conversation as ``simple``, ``medium`` or ``complex``."""
    messages = messages or []
    total_length = sum(len(content_text(m)) for m in messages)
    has_system_prompt = any(message_role(m) == "system" for m in messages)
    message_count = len(messages)

    if total_length < 100 and not has_system_prompt and message_count <= 2:
        return "simple"
    if total_length < 500 and message_count <= 5:
        return "medium"
    return "complex"


def detect_task_type(messages: Sequence[Any]) -> List[str]:
    """All task types whose keywords appear in the conversation."""
    text = joined_text(messages).lower()
    return [task for task, pattern in TASK_PATTERNS if pattern.search(text)]


def provider_substitution(requested_model: str, complexity: str, task_types: List[str]) -> Optional[str]:
    """Built-in OpenAI/Anthropic substitutions, or None when none applies."""
    if "gpt" in requested_model:
        if complexity == "simple" and "gpt-4" in requested_model:
            return "gpt-3.5-turbo"
        if complexity == "medium" and requested_model == "gpt-4":
            return "gpt-4o"
        if "coding" in task_types and "gpt-4" in requested_model:
            return "claude-3.5-sonnet"

    if "claude" in requested_model:
        if complexity == "simple" and "claude-3-opus" in requested_model:
            return "claude-3-haiku"
        if complexity == "medium" and "claude-3-opus" in requested_model:
            return "claude-3.5-sonnet"
        if complexity == "simple" and "claude-3-sonnet" in requested_model:
            return "claude-3-haiku"

    return None


def validate_model_consistency(requested_model: str, actual_model: str) -> bool:
    """True if ``actual_model`` is the requested model or an allowed downgrade of it."""
    if requested_model == actual_model:
        return True
    return actual_model in MODEL_HIERARCHY.get(requested_model, [])


class ModelRouter:
    """Chooses the model that actually serves a request."""

    def __init__(
        self,
        routing_policy: Optional[RoutingPolicy] = None,
        smart_routing: bool = True,
        log: Optional[CostLensLogger] = None,
    ):
        self.routing_policy = routing_policy
        self.smart_routing = smart_routing
        self.log = log or CostLensLogger("router")

    async def select_optimal_model(self, requested_model: str, messages: Sequence[Any]) -> str:
        """
        Resolve the model to call for ``requested_model``.

        Never raises: routing-policy errors are logged and treated as "no
        override", and an unexpected heuristic failure keeps the requested model.
        """
        if not self.smart_routing:
            return requested_model

        override = await self._apply_policy(requested_model, messages)
        if override is not None:
            return override

        try:
            return self._select_builtin(requested_model, messages)
        except Exception as e:  # noqa: BLE001
            self.log.warning("Routing heuristics failed, keeping requested model",
                             model=requested_model, error=e)
            return requested_model

    async def _apply_policy(self, requested_model: str, messages: Sequence[Any]) -> Optional[str]:
        if self.routing_policy is None:
            return None
        try:
            routed = self.routing_policy(requested_model, messages)
            if inspect.isawaitable(routed):
                routed = await routed
        except Exception as e:  # noqa: BLE001
            self.log.warning("routing_policy error (non-fatal)", model=requested_model, error=e)
            return None
        if routed and isinstance(routed, str):
            return routed
        return None

    def _select_builtin(self, requested_model: str, messages: Sequence[Any]) -> str:
        if "vision" in requested_model:
            return requested_model

        complexity = estimate_complexity(messages)
        task_types = detect_task_type(messages)

        substituted = provider_substitution(requested_model, complexity, task_types)
        if substituted is not None:
            return substituted

        decision = QualityDetector.should_route(requested_model, messages, ROUTING_QUALITY_THRESHOLD)
        if decision.should_route and decision.confidence > ROUTING_MIN_CONFIDENCE:
            logger.debug(f"Cross-provider routing for {requested_model}: {decision.reasoning}")
            return decision.target_model

        return requested_model
